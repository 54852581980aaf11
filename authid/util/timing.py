"""Response timing helpers."""

import asyncio
import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager


@asynccontextmanager
async def minimum_duration(milliseconds: int) -> AsyncIterator[None]:
    """Make the wrapped block take at least ``milliseconds``.

    The padding also applies when the block raises, so success and failure
    paths take the same wall-clock time.
    """
    started = time.perf_counter()
    try:
        yield
    finally:
        remaining = milliseconds / 1000 - (time.perf_counter() - started)
        if remaining > 0:
            await asyncio.sleep(remaining)

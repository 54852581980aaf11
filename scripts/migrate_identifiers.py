#!/usr/bin/env python3
"""Migrate legacy flat user records into the identifier table.

Safe to re-run: users that are already migrated are reported as unchanged.
Each user is committed on its own, so an interrupted run keeps its progress.

Usage:
    IDENTIFIER_TABLE__MODE=virtual python scripts/migrate_identifiers.py --batch-size 500
"""

import argparse
import asyncio
import sys

import logfire

from authid.application.usecase.migration import (
    MigrateAllUsersRequest,
    MigrateAllUsersUseCase,
)
from authid.config import Settings
from authid.util.di.container import create_container
from authid.util.logging import setup_logging
from authid.util.observability import configure_logfire


async def run(batch_size: int) -> int:
    """Run the batch migration inside one request scope, committing per user."""
    container = create_container()
    try:
        async with container() as request_container:
            use_case = await request_container.get(MigrateAllUsersUseCase)
            report = await use_case.execute(MigrateAllUsersRequest(batch_size=batch_size))
    finally:
        await container.close()

    logfire.info(
        "Identifier migration finished",
        total=report.total,
        migrated=len(report.migrated),
        unchanged=len(report.unchanged),
        failed=len(report.failed),
    )
    for user_id, error in report.failed.items():
        logfire.error("User not migrated", user_id=str(user_id), error=error)

    return 1 if report.failed else 0


def main() -> int:
    """Parse arguments, configure observability and migrate."""
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--batch-size", type=int, default=100)
    args = parser.parse_args()

    settings = Settings()
    setup_logging(settings)
    configure_logfire(settings)

    with logfire.span("migrate_identifiers", batch_size=args.batch_size):
        return asyncio.run(run(args.batch_size))


if __name__ == "__main__":
    sys.exit(main())

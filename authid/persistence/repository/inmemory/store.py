"""Shared in-memory storage for the in-memory repositories."""

import asyncio
import copy
from contextvars import ContextVar
from dataclasses import dataclass, field
from typing import Any

from authid.domain.model import Identifier, LinkedAccount, User, VerificationToken
from authid.domain.value import (
    IdentifierId,
    LinkedAccountId,
    UserId,
    VerificationId,
)

TABLES = ("users", "identifiers", "identifier_keys", "accounts", "verifications")


def _depth_var() -> ContextVar[int]:
    return ContextVar("inmemory_atomic_depth", default=0)


@dataclass
class InMemoryStore:
    """All tables of the in-memory binding.

    Repositories built on the same store see each other's writes, which is
    what lets a user delete cascade and a transaction roll back across
    repositories. The lock and depth counter serialize atomic blocks of
    every transaction manager sharing the store.
    """

    users: dict[UserId, User] = field(default_factory=dict)
    identifiers: dict[IdentifierId, Identifier] = field(default_factory=dict)
    identifier_keys: dict[tuple[str, str], IdentifierId] = field(default_factory=dict)
    accounts: dict[LinkedAccountId, LinkedAccount] = field(default_factory=dict)
    verifications: dict[VerificationId, VerificationToken] = field(default_factory=dict)
    commits: int = 0

    lock: asyncio.Lock = field(default_factory=asyncio.Lock, repr=False)
    atomic_depth: ContextVar[int] = field(default_factory=_depth_var, repr=False)

    def snapshot(self) -> dict[str, Any]:
        """Copy of every table (entities are immutable, so shallow per row)."""
        return {name: copy.copy(getattr(self, name)) for name in TABLES}

    def restore(self, snapshot: dict[str, Any]) -> None:
        """Put every table back to ``snapshot``."""
        for name, table in snapshot.items():
            current = getattr(self, name)
            current.clear()
            current.update(table)

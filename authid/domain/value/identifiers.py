"""Strongly typed identifiers for authid domain entities.

Using NewType for strong typing prevents mixing up different entity IDs
and makes the code more self-documenting.
"""

from typing import NewType
from uuid import UUID

# Core domain entity identifiers
UserId = NewType("UserId", UUID)
IdentifierId = NewType("IdentifierId", UUID)
LinkedAccountId = NewType("LinkedAccountId", UUID)
VerificationId = NewType("VerificationId", UUID)

"""Account registration domain service."""

from collections.abc import Sequence
from typing import Any, Optional
from uuid import uuid4

import logfire

from authid.domain.error import ValidationError
from authid.domain.model import Identifier, User
from authid.domain.model.common import utcnow
from authid.domain.repository import TransactionManager, UserRepository
from authid.domain.service.base import Service
from authid.domain.service.identifier_service import IdentifierService
from authid.domain.value import IdentifierId, IdentifierType, UserId
from authid.domain.value.common import ValueObject


class IdentifierInput(ValueObject):
    """Raw identifier supplied at sign-up."""

    type: str
    value: str
    verified: Optional[bool] = None  # Type default when omitted
    metadata: Optional[dict[str, Any]] = None


class AccountService(Service):
    """Creates users together with their identifiers."""

    def __init__(
        self,
        user_repository: UserRepository,
        identifier_service: IdentifierService,
        transaction_manager: TransactionManager,
    ) -> None:
        """Initialize account service.

        Args:
            user_repository: User repository
            identifier_service: Builds and claims identifiers
            transaction_manager: Transaction boundary
        """
        self.user_repository = user_repository
        self.identifier_service = identifier_service
        self.transaction_manager = transaction_manager

    async def register(
        self,
        inputs: Sequence[IdentifierInput],
        credential_hash: str | None = None,
        name: str | None = None,
        role: str = "user",
        custom_data: dict[str, Any] | None = None,
        is_anonymous: bool = False,
    ) -> tuple[User, list[Identifier]]:
        """Create a user and claim all of its identifiers atomically.

        The password hash lands on the first credential-bearing identifier.

        Args:
            inputs: Identifiers to claim, in order
            credential_hash: Password hash, if the user signs up with a password
            name: Display name
            role: Role
            custom_data: Opaque extra profile data
            is_anonymous: Whether this is an anonymous account

        Returns:
            The user and its identifiers

        Raises:
            InvalidIdentifierFormat: If a value is rejected
            IdentifierConflict: If a value is owned by another user
            ValidationError: If a password is given without a
                credential-bearing identifier
        """
        now = utcnow()
        user = User(
            id=UserId(uuid4()),
            name=name,
            role=role,
            custom_data=custom_data or {},
            is_anonymous=is_anonymous,
            created_at=now,
            updated_at=now,
        )

        with logfire.span(
            "account_service.register",
            user_id=str(user.id),
            identifier_types=[i.type for i in inputs],
        ):
            built: list[Identifier] = []
            pending_hash = credential_hash
            for item in inputs:
                item_hash = None
                if pending_hash and self.identifier_service.is_credential_type(item.type):
                    item_hash, pending_hash = pending_hash, None
                built.append(
                    self.identifier_service.build(
                        user.id,
                        item.type,
                        item.value,
                        verified=item.verified,
                        credential_hash=item_hash,
                        metadata=item.metadata,
                    )
                )

            if pending_hash:
                raise ValidationError("A password requires a credential-bearing identifier")

            claimed: dict[IdentifierId, Identifier] = {}
            async with self.transaction_manager.atomic():
                saved = await self.user_repository.save(user)
                for identifier in built:
                    result = await self.identifier_service.claim(identifier)
                    claimed[result.id] = result

            logfire.info(
                "User registered",
                user_id=str(saved.id),
                identifiers=len(claimed),
                is_anonymous=is_anonymous,
            )
            return saved, list(claimed.values())

    async def register_anonymous(self) -> tuple[User, list[Identifier]]:
        """Create an anonymous user holding only the anonymous marker."""
        return await self.register(
            [IdentifierInput(type=IdentifierType.ANONYMOUS.value, value=uuid4().hex)],
            is_anonymous=True,
        )

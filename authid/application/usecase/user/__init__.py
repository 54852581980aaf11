"""User use cases."""

from .get_recovery_actions import (
    GetRecoveryActionsRequest,
    GetRecoveryActionsResponse,
    GetRecoveryActionsUseCase,
)
from .get_session_user import (
    GetSessionUserRequest,
    GetSessionUserResponse,
    GetSessionUserUseCase,
)
from .get_user import (
    GetUserByIdentifierRequest,
    GetUserByIdentifierUseCase,
    GetUserRequest,
    GetUserResponse,
    GetUserUseCase,
)

__all__ = [
    "GetRecoveryActionsRequest",
    "GetRecoveryActionsResponse",
    "GetRecoveryActionsUseCase",
    "GetSessionUserRequest",
    "GetSessionUserResponse",
    "GetSessionUserUseCase",
    "GetUserByIdentifierRequest",
    "GetUserByIdentifierUseCase",
    "GetUserRequest",
    "GetUserResponse",
    "GetUserUseCase",
]

"""Migration use cases."""

from .migrate_user import (
    MigrateAllUsersRequest,
    MigrateAllUsersUseCase,
    MigrateUserRequest,
    MigrateUserResponse,
    MigrateUserUseCase,
)

__all__ = [
    "MigrateAllUsersRequest",
    "MigrateAllUsersUseCase",
    "MigrateUserRequest",
    "MigrateUserResponse",
    "MigrateUserUseCase",
]

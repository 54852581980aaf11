"""Authentication use cases."""

from .password_reset import (
    RequestPasswordResetRequest,
    RequestPasswordResetResponse,
    RequestPasswordResetUseCase,
    ResetPasswordRequest,
    ResetPasswordResponse,
    ResetPasswordUseCase,
)
from .sign_in import (
    SignInResponse,
    SignInWithIdentifierRequest,
    SignInWithIdentifierUseCase,
    enforce_sign_in_policy,
)
from .sign_up import (
    CreateAnonymousUserUseCase,
    SignUpResponse,
    SignUpWithIdentifierRequest,
    SignUpWithIdentifierUseCase,
    SignUpWithIdentifiersRequest,
    SignUpWithIdentifiersUseCase,
)

__all__ = [
    "CreateAnonymousUserUseCase",
    "RequestPasswordResetRequest",
    "RequestPasswordResetResponse",
    "RequestPasswordResetUseCase",
    "ResetPasswordRequest",
    "ResetPasswordResponse",
    "ResetPasswordUseCase",
    "SignInResponse",
    "SignInWithIdentifierRequest",
    "SignInWithIdentifierUseCase",
    "SignUpResponse",
    "SignUpWithIdentifierRequest",
    "SignUpWithIdentifierUseCase",
    "SignUpWithIdentifiersRequest",
    "SignUpWithIdentifiersUseCase",
    "enforce_sign_in_policy",
]

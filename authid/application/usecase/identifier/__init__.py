"""Identifier use cases."""

from .add_identifier import AddIdentifierRequest, AddIdentifierResponse, AddIdentifierUseCase
from .remove_identifier import (
    RemoveIdentifierRequest,
    RemoveIdentifierResponse,
    RemoveIdentifierUseCase,
)
from .verification import (
    SendIdentifierVerificationRequest,
    SendIdentifierVerificationResponse,
    SendIdentifierVerificationUseCase,
    VerifyIdentifierRequest,
    VerifyIdentifierResponse,
    VerifyIdentifierUseCase,
)

__all__ = [
    "AddIdentifierRequest",
    "AddIdentifierResponse",
    "AddIdentifierUseCase",
    "RemoveIdentifierRequest",
    "RemoveIdentifierResponse",
    "RemoveIdentifierUseCase",
    "SendIdentifierVerificationRequest",
    "SendIdentifierVerificationResponse",
    "SendIdentifierVerificationUseCase",
    "VerifyIdentifierRequest",
    "VerifyIdentifierResponse",
    "VerifyIdentifierUseCase",
]

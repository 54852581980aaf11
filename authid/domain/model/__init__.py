"""Domain model entities for authid."""

from authid.domain.model.identifier import Identifier
from authid.domain.model.linked_account import LinkedAccount
from authid.domain.model.user import User
from authid.domain.model.verification import VerificationToken
from authid.domain.model.view import UserView

__all__ = [
    "Identifier",
    "LinkedAccount",
    "User",
    "UserView",
    "VerificationToken",
]

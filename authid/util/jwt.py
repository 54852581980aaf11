"""Session token encoding.

Tokens carry registered claims only where they exist (``sub``, ``iat``,
``exp``, ``jti``); the identifier type used to sign in travels in the
private ``idt`` claim.
"""

from datetime import datetime, timedelta, timezone
from uuid import uuid4

import jwt
from pydantic import BaseModel

from authid.config import AuthSettings

_REQUIRED_CLAIMS = ["sub", "exp", "iat", "jti"]


class TokenPayload(BaseModel):
    """Decoded session token."""

    user_id: str
    identifier_type: str
    session_id: str
    issued_at: datetime
    exp: datetime


class JWTError(Exception):
    """Session token could not be decoded."""

    pass


def create_token(user_id: str, identifier_type: str, settings: AuthSettings) -> str:
    """Create a session token for the user.

    Args:
        user_id: User ID
        identifier_type: Type of the identifier the user signed in with
        settings: Authentication settings

    Returns:
        Encoded JWT
    """
    issued_at = datetime.now(timezone.utc)
    claims = {
        "sub": user_id,
        "idt": identifier_type,
        "jti": uuid4().hex,
        "iat": issued_at,
        "exp": issued_at + timedelta(days=settings.jwt_expiry_days),
    }
    return jwt.encode(claims, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def verify_token(token: str, settings: AuthSettings) -> TokenPayload:
    """Check the signature and lifetime of a session token.

    Raises:
        JWTError: If the token is expired, tampered with or malformed
    """
    try:
        claims = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
            options={"require": _REQUIRED_CLAIMS},
        )
    except jwt.ExpiredSignatureError:
        raise JWTError("Token has expired")
    except jwt.InvalidTokenError:
        raise JWTError("Invalid token")

    return TokenPayload(
        user_id=claims["sub"],
        identifier_type=claims.get("idt", ""),
        session_id=claims["jti"],
        issued_at=datetime.fromtimestamp(claims["iat"], timezone.utc),
        exp=datetime.fromtimestamp(claims["exp"], timezone.utc),
    )

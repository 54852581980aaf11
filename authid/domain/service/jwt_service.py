"""JWT token domain service."""

import logfire

from authid.config import AuthSettings
from authid.util.jwt import JWTError, TokenPayload, create_token, verify_token

from .base import Service


class JWTService(Service):
    """Domain service for session token operations."""

    def __init__(self, auth_settings: AuthSettings) -> None:
        """Initialize JWT service.

        Args:
            auth_settings: Authentication settings
        """
        self.auth_settings = auth_settings

    def create_token(self, user_id: str, identifier_type: str) -> str:
        """Create a session token for a signed-in user.

        Args:
            user_id: User ID
            identifier_type: Type of the identifier used to sign in

        Returns:
            JWT token string
        """
        with logfire.span(
            "jwt_service.create_token",
            user_id=user_id,
            identifier_type=identifier_type,
        ):
            token = create_token(user_id, identifier_type, self.auth_settings)
            logfire.info(
                "JWT token created", user_id=user_id, identifier_type=identifier_type
            )
            return token

    def verify_token(self, token: str) -> TokenPayload:
        """Verify JWT token and extract payload.

        Args:
            token: JWT token string

        Returns:
            Token payload

        Raises:
            JWTError: If token is invalid or expired
        """
        with logfire.span("jwt_service.verify_token"):
            try:
                payload = verify_token(token, self.auth_settings)
                logfire.info("JWT token verified", user_id=payload.user_id)
                return payload
            except JWTError as e:
                logfire.warn("JWT token verification failed", error=str(e))
                raise

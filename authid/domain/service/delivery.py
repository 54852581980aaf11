"""Verification delivery capability."""

from authid.domain.model import VerificationToken


class VerificationSender:
    """Delivers verification and password reset tokens.

    Email and SMS delivery are supplied by the host application.
    """

    async def send(self, destination: str, token: VerificationToken) -> None:
        """Deliver a token.

        Args:
            destination: Normalized identifier value to deliver to
            token: The token to deliver
        """
        raise NotImplementedError

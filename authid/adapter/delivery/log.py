"""Delivery adapter that only records that a token was issued."""

import logfire

from authid.domain.model import VerificationToken
from authid.domain.service.delivery import VerificationSender


class LogVerificationSender(VerificationSender):
    """Logs token issuance without the secret.

    Default binding until the host application supplies email or SMS
    delivery.
    """

    async def send(self, destination: str, token: VerificationToken) -> None:
        logfire.info(
            "Verification token ready for delivery",
            verification_id=str(token.id),
            purpose=token.purpose.value,
            expires_at=token.expires_at.isoformat(),
        )

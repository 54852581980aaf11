"""Delivery adapter that keeps tokens in memory."""

from dataclasses import dataclass

from authid.domain.model import VerificationToken
from authid.domain.service.delivery import VerificationSender


@dataclass(frozen=True)
class SentVerification:
    """A token handed to the sender."""

    destination: str
    token: VerificationToken


class InMemoryVerificationSender(VerificationSender):
    """Collects tokens instead of sending them, for tests and local runs."""

    def __init__(self) -> None:
        self.outbox: list[SentVerification] = []

    async def send(self, destination: str, token: VerificationToken) -> None:
        self.outbox.append(SentVerification(destination=destination, token=token))

    def last_to(self, destination: str) -> VerificationToken | None:
        """Most recent token sent to ``destination``."""
        for sent in reversed(self.outbox):
            if sent.destination == destination:
                return sent.token
        return None

"""Mock delivery providers for testing."""

from dishka import Scope, provide

from authid.adapter.delivery import InMemoryVerificationSender
from authid.domain.service import VerificationSender
from authid.util.di.infrastructure.delivery import DeliveryProvider


class MockDeliveryProvider(DeliveryProvider):
    """Mock delivery provider collecting tokens in an outbox."""

    __is_mock__ = True

    @provide(scope=Scope.APP)
    def get_outbox(self) -> InMemoryVerificationSender:
        """Provide the in-memory outbox."""
        return InMemoryVerificationSender()

    @provide(scope=Scope.APP)
    def get_verification_sender(
        self, outbox: InMemoryVerificationSender
    ) -> VerificationSender:
        """Provide the outbox as the sender."""
        return outbox

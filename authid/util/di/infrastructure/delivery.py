"""Verification delivery providers."""

from dishka import Scope, provide

from authid.adapter.delivery import LogVerificationSender
from authid.domain.service import VerificationSender
from authid.util.di.base import ProviderBase


class DeliveryProvider(ProviderBase):
    """Delivery component base."""

    __mock_component__ = "delivery"


class ProdDeliveryProvider(DeliveryProvider):
    """Production delivery provider."""

    __is_mock__ = False

    @provide(scope=Scope.APP)
    def get_verification_sender(self) -> VerificationSender:
        """Provide token delivery.

        Logs delivery only; bind a real sender (email, SMS) in deployment.
        """
        return LogVerificationSender()

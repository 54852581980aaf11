"""Mock providers for testing."""

from .config import StaticConfigProvider
from .delivery import MockDeliveryProvider
from .persistence import MockPersistenceProvider
from .container import build_test_container

__all__ = [
    "MockDeliveryProvider",
    "MockPersistenceProvider",
    "StaticConfigProvider",
    "build_test_container",
]

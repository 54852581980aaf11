"""Infrastructure providers."""

# Import bases
from .delivery import DeliveryProvider
from .persistence import PersistenceProvider
from .security import SecurityProvider

# Import implementations (needed for __subclasses__())
from .delivery import ProdDeliveryProvider  # noqa: F401
from .persistence import ProdPersistenceProvider  # noqa: F401

__all__ = [
    "DeliveryProvider",
    "PersistenceProvider",
    "ProdDeliveryProvider",
    "ProdPersistenceProvider",
    "SecurityProvider",
]

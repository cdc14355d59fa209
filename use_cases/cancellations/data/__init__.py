"""
Cancellations Data Layer.

Product catalog and cancellation record storage.
"""

from .catalog import ProductCatalog
from .sample_products import build_sample_products
from .store import InMemoryCancellationStore

__all__ = [
    "ProductCatalog",
    "build_sample_products",
    "InMemoryCancellationStore",
]

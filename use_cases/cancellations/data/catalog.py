"""
Product Catalog.

Read-only access to product records by product id or booking reference.
"""

import logging
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional

from core.data import ReadOnlyRepository

from ..domain.models import Product
from .sample_products import build_sample_products

logger = logging.getLogger(__name__)


class ProductCatalog(ReadOnlyRepository[Product]):
    """In-memory product catalog, indexed by id and booking reference."""

    def __init__(self, products: Iterable[Product] = ()):
        self._products: Dict[str, Product] = {}
        self._by_booking: Dict[str, Product] = {}
        for product in products:
            self.add(product)

    @classmethod
    def from_documents(cls, documents: Iterable[Dict[str, Any]]) -> "ProductCatalog":
        """
        Build a catalog from provider documents.

        Raises:
            ValueError: If any document is malformed
        """
        return cls(Product.from_dict(doc) for doc in documents)

    @classmethod
    def with_sample_data(cls, now: Optional[datetime] = None) -> "ProductCatalog":
        catalog = cls.from_documents(build_sample_products(now))
        logger.info(f"Loaded {len(catalog)} sample products")
        return catalog

    def add(self, product: Product) -> None:
        if product.id in self._products:
            logger.warning(f"Replacing catalog entry for product {product.id}")
        self._products[product.id] = product
        if product.booking_id:
            self._by_booking[product.booking_id] = product

    def get_by_id(self, id: str) -> Optional[Product]:
        return self._products.get(id)

    def get_by_booking_id(self, booking_id: str) -> Optional[Product]:
        return self._by_booking.get(booking_id)

    def get_all(self) -> List[Product]:
        return list(self._products.values())

    def resolve(self, product_id: Optional[str] = None,
                booking_id: Optional[str] = None) -> Optional[Product]:
        """Find a product by product_id first, then by booking_id."""
        product = None
        if product_id:
            product = self.get_by_id(product_id)
        if product is None and booking_id:
            product = self.get_by_booking_id(booking_id)
        return product

    def __len__(self) -> int:
        return len(self._products)

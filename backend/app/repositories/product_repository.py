"""
Product Repository - Data Access Layer for Products

Handles Firestore queries for the products collection and returns Product
domain models.

Author: TM3
Date: 2025-10-17
Updated: 2026-02-10 (Firestore)
"""
from typing import List

from app.core.database import PRODUCTS
from app.domain.catalog import MANAGED_PRODUCT_WEBSITES
from app.domain.product import Product
from app.repositories.base_repository import FirestoreRepository


def _created_sort_key(product: Product):
    # Products without createdAt sort last when newest first
    return (product.createdAt is not None, product.createdAt.timestamp() if product.createdAt else 0)


class ProductRepository(FirestoreRepository):
    """
    Repository for Product data access

    Returns Product domain models, not raw dictionaries.
    """

    collection_name = PRODUCTS
    model = Product

    def find_on_websites(self, websites: List[str] = None) -> List[Product]:
        """
        Products published on any of the given websites, newest first

        Ordering happens here because Firestore cannot combine
        array-contains-any with an order on another field without an index.
        """
        websites = websites or MANAGED_PRODUCT_WEBSITES
        products = self.find_where("websites", "array_contains_any", websites)
        return sorted(products, key=_created_sort_key, reverse=True)

    def find_by_field(self, field: str, value: str) -> List[Product]:
        """Exact match on a name field (itemDescription or name)"""
        return self.find_where(field, "==", value)

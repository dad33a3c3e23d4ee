"""
Unit tests for ProductRepository

These tests validate repository logic against the in-memory Firestore.

Author: TM3
Date: 2025-10-17
Updated: 2026-02-10 (Firestore)
"""
from datetime import datetime, timezone
from unittest.mock import MagicMock

from app.core.database import PRODUCTS
from app.domain.product import Product
from app.repositories.product_repository import ProductRepository


class TestProductRepository:
    """Test ProductRepository methods"""

    def test_find_by_id_returns_product(self, fake_db, sample_product_data):
        """Test find_by_id returns a Product domain model"""
        # Arrange
        fake_db.seed(PRODUCTS, "p1", sample_product_data)

        # Act
        product = ProductRepository(fake_db).find_by_id("p1")

        # Assert
        assert isinstance(product, Product)
        assert product.id == "p1"
        assert product.display_name == "LED Panel 40W"
        assert product.website_list == ["Disruptive Solutions Inc"]

    def test_find_by_id_not_found(self, fake_db):
        """Test find_by_id returns None when product doesn't exist"""
        assert ProductRepository(fake_db).find_by_id("missing") is None

    def test_unknown_fields_are_kept(self, fake_db):
        fake_db.seed(PRODUCTS, "p1", {"name": "Lamp", "warrantyYears": 2})

        product = ProductRepository(fake_db).find_by_id("p1")

        assert product.to_dict()["warrantyYears"] == 2
        assert product.to_firestore() == {"name": "Lamp", "warrantyYears": 2}

    def test_find_on_websites_sorts_newest_first(self, fake_db):
        fake_db.seed(PRODUCTS, "old", {"name": "Old", "websites": ["Taskflow"],
                                       "createdAt": datetime(2025, 1, 1, tzinfo=timezone.utc)})
        fake_db.seed(PRODUCTS, "new", {"name": "New", "websites": ["Ecoshift Corporation"],
                                       "createdAt": datetime(2026, 1, 1, tzinfo=timezone.utc)})
        fake_db.seed(PRODUCTS, "shop", {"name": "Shop", "websites": ["Shopify"]})

        products = ProductRepository(fake_db).find_on_websites()

        assert [p.id for p in products] == ["new", "old"]

    def test_find_on_websites_custom_sites(self, fake_db):
        fake_db.seed(PRODUCTS, "shop", {"name": "Shop", "websites": ["Shopify"]})

        assert [p.id for p in ProductRepository(fake_db).find_on_websites(["Shopify"])] == ["shop"]

    def test_find_by_field_uses_equality_filter(self):
        # Arrange: mock client to inspect the query
        mock_db = MagicMock()
        query = mock_db.collection.return_value.where.return_value
        query.stream.return_value = []

        # Act
        result = ProductRepository(mock_db).find_by_field("itemDescription", "Flood 50W")

        # Assert
        assert result == []
        mock_db.collection.assert_called_once_with(PRODUCTS)
        field_filter = mock_db.collection.return_value.where.call_args.kwargs["filter"]
        assert (field_filter.field_path, field_filter.op_string, field_filter.value) == (
            "itemDescription", "==", "Flood 50W"
        )

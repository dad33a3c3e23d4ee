"""
Unit tests for the All Products service

Author: TM3
Date: 2026-02-10
"""
import pytest
from datetime import datetime, timezone

from app.core.database import AUDIT_LOGS, PRODUCTS, RECYCLE_BIN
from app.core.exceptions import DocumentNotFoundException, ValidationFailedException
from app.domain.product import Product
from app.services import product_service
from app.services.product_service import ProductService


def seed_products(fake_db, count, websites=("Disruptive Solutions Inc",)):
    for i in range(count):
        fake_db.seed(PRODUCTS, f"p{i}", {
            "itemDescription": f"Panel {i:02d}",
            "itemCode": f"PN-{i:02d}",
            "websites": list(websites),
            "createdAt": datetime(2026, 1, 1 + i, tzinfo=timezone.utc),
        })


class TestQueryProducts:

    def test_search_then_filter_then_sort(self):
        products = [
            Product(id="1", itemDescription="Flood Light 50W", brand="LIT", categories=["Flood"]),
            Product(id="2", itemDescription="Flood Light 100W", brand="Eco", categories=["Flood"]),
            Product(id="3", name="Street Light", brand="LIT", litItemCode="FLD-9"),
            Product(id="4", itemDescription="Panel", brand="LIT"),
        ]

        result = product_service.query_products(
            products, search="fl", column_filters={"brand": "lit"}, sort_by="itemDescription",
        )

        # Street Light matches through its item code and has no itemDescription: sorted last
        assert [p.id for p in result.items] == ["1", "3"]
        assert result.total_items == 2

    def test_pages_of_ten(self):
        products = [Product(id=str(i), name=f"P{i}") for i in range(25)]

        result = product_service.query_products(products, page=3)

        assert len(result.items) == 5
        assert result.total_pages == 3

    def test_suggestions(self):
        products = [Product(id=str(i), name=f"Lamp {i}") for i in range(10)]

        assert len(product_service.suggestions(products, "lamp")) == 7
        assert product_service.suggestions(products, "  ") == []


class TestListProducts:

    def test_only_managed_websites_newest_first(self, fake_db):
        seed_products(fake_db, 3)
        fake_db.seed(PRODUCTS, "shop", {"itemDescription": "Shopify only", "websites": ["Shopify"]})
        fake_db.seed(PRODUCTS, "legacy", {"name": "No date", "websites": ["Taskflow"]})

        products = ProductService(fake_db).list_products()

        assert [p.id for p in products] == ["p2", "p1", "p0", "legacy"]


class TestSoftDelete:

    def test_moves_product_to_recycle_bin(self, fake_db, sample_product_data, actor):
        fake_db.seed(PRODUCTS, "p1", sample_product_data)

        product = ProductService(fake_db).soft_delete("p1", actor=actor)

        assert product.display_name == "LED Panel 40W"
        assert "p1" not in fake_db.docs(PRODUCTS)
        binned = fake_db.docs(RECYCLE_BIN)["p1"]
        assert binned["itemDescription"] == "LED Panel 40W"
        assert binned["originalCollection"] == "products"
        assert binned["originPage"] == "/admin/products/all"
        assert binned["deletedBy"]["email"] == "admin@example.com"
        assert isinstance(binned["deletedAt"], datetime)
        # Unset model fields are not written back as nulls
        assert "litItemCode" not in binned
        entry = list(fake_db.docs(AUDIT_LOGS).values())[0]
        assert entry["context"]["source"] == "all-products:delete"
        assert entry["metadata"] == {"movedTo": "recycle_bin"}

    def test_unknown_product(self, fake_db):
        with pytest.raises(DocumentNotFoundException):
            ProductService(fake_db).soft_delete("missing")

    def test_bulk_delete_commits_in_chunks(self, fake_db, monkeypatch):
        from app.core.config import settings
        monkeypatch.setattr(settings, "BATCH_CHUNK_SIZE", 2)
        seed_products(fake_db, 5)

        moved = ProductService(fake_db).bulk_soft_delete(["p0", "p1", "p2", "p3", "p4", "ghost"])

        assert moved == 5
        assert fake_db.commits == [4, 4, 2]
        assert fake_db.docs(PRODUCTS) == {}
        assert len(fake_db.docs(RECYCLE_BIN)) == 5
        entry = list(fake_db.docs(AUDIT_LOGS).values())[0]
        assert entry["entityName"] == "5 items"
        assert entry["context"]["bulk"] is True


class TestBulkAssignWebsites:

    def test_union_keeps_existing_sites(self, fake_db):
        seed_products(fake_db, 2)
        fake_db.docs(PRODUCTS)["p0"]["website"] = ["Disruptive Solutions Inc"]

        updated = ProductService(fake_db).bulk_assign_websites(
            ["p0", "p1"], ["Ecoshift Corporation", "Disruptive Solutions Inc"]
        )

        assert updated == 2
        p0 = fake_db.docs(PRODUCTS)["p0"]
        assert p0["websites"] == ["Disruptive Solutions Inc", "Ecoshift Corporation"]
        assert p0["website"] == ["Disruptive Solutions Inc", "Ecoshift Corporation"]

    def test_requires_a_website(self, fake_db):
        with pytest.raises(ValidationFailedException, match="Select at least one website."):
            ProductService(fake_db).bulk_assign_websites(["p0"], [])

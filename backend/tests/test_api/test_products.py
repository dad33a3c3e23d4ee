"""
Tests for the Products API (All Products table)

Author: TM3
Date: 2026-02-10
"""
import json
from datetime import datetime, timezone

from app.core.database import PRODUCTS, RECYCLE_BIN

DISRUPTIVE = "Disruptive Solutions Inc"


def seed(fake_db):
    rows = [
        ("p1", "Flood Light 50W", "LIT", "FL-50"),
        ("p2", "Flood Light 100W", "Eco", "FL-100"),
        ("p3", "Panel 40W", "LIT", "PN-40"),
    ]
    for day, (doc_id, desc, brand, code) in enumerate(rows, start=1):
        fake_db.seed(PRODUCTS, doc_id, {
            "itemDescription": desc, "brand": brand, "itemCode": code,
            "websites": [DISRUPTIVE], "website": [DISRUPTIVE],
            "createdAt": datetime(2026, 1, day, tzinfo=timezone.utc),
        })


class TestProductsAPI:

    def test_list_newest_first(self, client, fake_db):
        seed(fake_db)

        data = client.get("/api/v1/products/").json()

        assert data["status"] == "success"
        assert data["total"] == 3
        assert [p["id"] for p in data["data"]] == ["p3", "p2", "p1"]
        assert data["pagination"]["window"] == [1]

    def test_search_filters_and_sort(self, client, fake_db):
        seed(fake_db)

        response = client.get("/api/v1/products/", params={
            "search": "flood",
            "filters": json.dumps({"brand": "lit"}),
        })

        assert [p["id"] for p in response.json()["data"]] == ["p1"]

        sorted_data = client.get("/api/v1/products/", params={"sort_by": "itemCode"}).json()
        assert [p["itemCode"] for p in sorted_data["data"]] == ["FL-100", "FL-50", "PN-40"]

    def test_bad_filters(self, client):
        response = client.get("/api/v1/products/", params={"filters": "[1, 2]"})

        assert response.status_code == 400

    def test_suggestions(self, client, fake_db):
        seed(fake_db)

        data = client.get("/api/v1/products/suggestions", params={"q": "pn-"}).json()

        assert data["data"] == [{"id": "p3", "name": "Panel 40W", "itemCode": "PN-40"}]

    def test_delete_moves_to_recycle_bin(self, client, fake_db):
        seed(fake_db)

        response = client.delete("/api/v1/products/p2")

        assert response.status_code == 200
        assert response.json()["data"]["name"] == "Flood Light 100W"
        assert "p2" in fake_db.docs(RECYCLE_BIN)
        assert fake_db.docs(RECYCLE_BIN)["p2"]["deletedBy"]["uid"] == "uid-1"

    def test_delete_unknown_product(self, client):
        assert client.delete("/api/v1/products/ghost").status_code == 404

    def test_bulk_delete(self, client, fake_db):
        seed(fake_db)

        response = client.post("/api/v1/products/bulk/delete", json={"ids": ["p1", "p3"]})

        assert response.json()["data"] == {"moved": 2}
        assert list(fake_db.docs(PRODUCTS)) == ["p2"]

    def test_bulk_delete_requires_ids(self, client):
        assert client.post("/api/v1/products/bulk/delete", json={"ids": []}).status_code == 422

    def test_bulk_assign_websites(self, client, fake_db):
        seed(fake_db)

        response = client.post("/api/v1/products/bulk/assign-websites", json={
            "ids": ["p1"], "websites": ["Ecoshift Corporation"],
        })

        assert response.json()["data"] == {"updated": 1}
        assert fake_db.docs(PRODUCTS)["p1"]["websites"] == [DISRUPTIVE, "Ecoshift Corporation"]

    def test_bulk_assign_without_websites(self, client, fake_db):
        seed(fake_db)

        response = client.post("/api/v1/products/bulk/assign-websites", json={"ids": ["p1"], "websites": []})

        assert response.status_code == 400
        assert response.json()["detail"] == "Select at least one website."

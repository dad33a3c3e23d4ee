"""
Tests for the Product Forms API

Author: TM3
Date: 2026-02-10
"""
import json

import pytest

from app.core.database import BRANDS, CATEGORIES, PRODUCT_FAMILIES, PRODUCTS, SPECS

DISRUPTIVE = "Disruptive Solutions Inc"


@pytest.fixture
def catalog(fake_db):
    fake_db.seed(PRODUCT_FAMILIES, "fam1", {"title": "Floodlights", "websites": [DISRUPTIVE], "specifications": ["g1"]})
    fake_db.seed(CATEGORIES, "cat1", {"name": "Lamps", "websites": ["Taskflow"], "specifications": ["g1"]})
    fake_db.seed(SPECS, "g1", {"name": "ELECTRICAL", "items": [{"label": "Wattage"}]})
    fake_db.seed(BRANDS, "b1", {"title": "LIT", "websites": [DISRUPTIVE]})
    return fake_db


class TestProductFormsAPI:

    def test_options(self, client, catalog):
        data = client.get("/api/v1/product-forms/taskflow/options").json()["data"]

        assert [c["name"] for c in data["categories"]] == ["Lamps"]
        assert data["brands"] == []

    def test_spec_fields(self, client, catalog):
        response = client.get("/api/v1/product-forms/website/spec-fields", params={"category_ids": "fam1, missing"})

        assert response.json()["count"] == 1
        assert response.json()["data"][0]["id"] == "g1-Wattage"

    def test_seo_preview_uses_fixed_websites(self, client):
        data = client.post("/api/v1/product-forms/shopify/seo-preview", json={
            "name": "Flood 50W", "websites": ["Ecoshift Corporation"], "seo": {"slug": "flood-50w"},
        }).json()["data"]

        assert data["title"] == "Flood 50W"
        assert data["canonical"] == ""

    def test_publish_with_images(self, client, catalog, fake_storage):
        draft = {
            "name": "Flood 50W",
            "websites": [DISRUPTIVE],
            "categoryId": "fam1",
            "brandIds": ["b1"],
            "specValues": {"g1-Wattage": "50W"},
        }

        response = client.post(
            "/api/v1/product-forms/website",
            data={"draft": json.dumps(draft)},
            files=[
                ("main_image", ("flood.png", b"png", "image/png")),
                ("gallery_images", ("g1.jpg", b"jpg", "image/jpeg")),
                ("gallery_images", ("g2.jpg", b"jpg", "image/jpeg")),
            ],
        )

        assert response.status_code == 200
        product = catalog.docs(PRODUCTS)[response.json()["data"]["id"]]
        assert product["brand"] == "LIT"
        assert product["mainImage"].endswith("/products/flood.png")
        assert len(product["galleryImages"]) == 2

    def test_duplicate_is_409(self, client, catalog):
        catalog.seed(PRODUCTS, "old", {"itemDescription": "Flood 50W", "websites": [DISRUPTIVE], "website": [DISRUPTIVE]})

        response = client.post(
            "/api/v1/product-forms/website",
            data={"draft": json.dumps({"name": "Flood 50W", "websites": [DISRUPTIVE]})},
        )

        assert response.status_code == 409
        assert response.json()["existing_id"] == "old"

    def test_edit_existing(self, client, catalog):
        catalog.seed(PRODUCTS, "old", {"itemDescription": "Flood 50W", "websites": [DISRUPTIVE], "website": [DISRUPTIVE]})

        response = client.post(
            "/api/v1/product-forms/website",
            data={"draft": json.dumps({"name": "Flood 60W", "websites": [DISRUPTIVE]}), "editing_id": "old"},
        )

        assert response.json()["data"]["id"] == "old"
        assert catalog.docs(PRODUCTS)["old"]["itemDescription"] == "Flood 60W"

    def test_name_required(self, client):
        response = client.post("/api/v1/product-forms/taskflow", data={"draft": json.dumps({"name": ""})})

        assert response.status_code == 400

    def test_unknown_profile(self, client):
        response = client.get("/api/v1/product-forms/magento/options")

        assert response.status_code == 404

"""
Tests for the content APIs: blogs, FAQs, popups and projects

Author: TM3
Date: 2026-02-10
"""
import json
from datetime import datetime, timezone

from app.core.database import AUDIT_LOGS, BLOGS, FAQ_SETTINGS, HOME_POPUPS, PROJECTS

PNG = ("cover.png", b"png-bytes", "image/png")


class TestBlogsAPI:

    def test_create_with_cover_and_section_image(self, client, fake_db, fake_storage):
        draft = {
            "title": "Solar 101: A Guide!",
            "category": "Engineering",
            "sections": [{"id": "s1", "type": "image-detail", "title": "Roof"}],
        }

        response = client.post(
            "/api/v1/blogs/",
            data={"draft": json.dumps(draft), "section_image_ids": json.dumps(["s1"])},
            files=[("cover_image", PNG), ("section_images", ("roof.jpg", b"jpg", "image/jpeg"))],
        )

        assert response.status_code == 200
        blog = fake_db.docs(BLOGS)[response.json()["data"]["id"]]
        assert blog["slug"] == "solar-101-a-guide"
        assert blog["sections"][0]["imageUrl"].endswith("/blogs/roof.jpg")
        assert [u[0] for u in fake_storage.uploads] == ["cover.png", "roof.jpg"]

        actor = list(fake_db.docs(AUDIT_LOGS).values())[0]["actor"]
        assert actor["email"] == "admin@example.com"

    def test_missing_cover(self, client):
        response = client.post("/api/v1/blogs/", data={"draft": json.dumps({"title": "No cover"})})

        assert response.status_code == 400
        assert response.json()["detail"] == "Headline and cover image are required."

    def test_invalid_draft_json(self, client):
        response = client.post("/api/v1/blogs/", data={"draft": json.dumps({"sections": "nope"})})

        assert response.status_code == 422

    def test_unknown_category_or_status(self, client):
        for draft in ({"title": "T", "category": "Gossip"}, {"title": "T", "status": "Archived"}):
            response = client.post("/api/v1/blogs/", data={"draft": json.dumps(draft)}, files=[("cover_image", PNG)])

            assert response.status_code == 422

    def test_section_ids_must_match_files(self, client):
        response = client.post(
            "/api/v1/blogs/",
            data={"draft": json.dumps({"title": "T"}), "section_image_ids": json.dumps(["a", "b"])},
            files=[("cover_image", PNG), ("section_images", PNG)],
        )

        assert response.status_code == 400

    def test_storage_failure_is_502(self, client, fake_storage):
        fake_storage.fail = True

        response = client.post("/api/v1/blogs/", data={"draft": json.dumps({"title": "T"})}, files=[("cover_image", PNG)])

        assert response.status_code == 502
        assert response.json()["service"] == "cloudinary"

    def test_update_list_and_delete(self, client, fake_db):
        fake_db.seed(BLOGS, "b1", {
            "title": "Old", "coverImage": "https://img/c.png", "website": "VAH",
            "createdAt": datetime(2026, 2, 1, tzinfo=timezone.utc),
        })

        update = client.put(
            "/api/v1/blogs/b1",
            data={"draft": json.dumps({"title": "New", "coverImage": "https://img/c.png", "website": "VAH"})},
        )
        assert update.status_code == 200
        assert fake_db.docs(BLOGS)["b1"]["title"] == "New"

        listing = client.get("/api/v1/blogs/", params={"website": "VAH"}).json()
        assert [b["id"] for b in listing["data"]] == ["b1"]
        assert listing["pagination"]["total_pages"] == 1

        assert client.delete("/api/v1/blogs/b1").status_code == 200
        assert fake_db.docs(BLOGS) == {}

    def test_options(self, client):
        data = client.get("/api/v1/blogs/options").json()["data"]

        assert "disruptivesolutionsinc" in data["websites"]
        assert "Case Study" in data["categories"]


class TestFaqsAPI:

    def test_crud(self, client, fake_db):
        created = client.post("/api/v1/faqs/", json={"question": "Warranty?", "answer": "2 years"})
        faq_id = created.json()["data"]["id"]

        client.put(f"/api/v1/faqs/{faq_id}", json={"question": "Warranty?", "answer": "3 years", "icon": "💡"})
        listing = client.get("/api/v1/faqs/").json()

        assert listing["count"] == 1
        assert listing["data"][0]["answer"] == "3 years"
        assert listing["data"][0]["icon"] == "💡"
        assert "❓" in listing["icons"]

        assert client.delete(f"/api/v1/faqs/{faq_id}").status_code == 200
        assert fake_db.docs(FAQ_SETTINGS) == {}

    def test_validation(self, client):
        response = client.post("/api/v1/faqs/", json={"question": "Q", "answer": " "})

        assert response.status_code == 400
        assert response.json()["field"] == "answer"


class TestPopupsAPI:

    def test_preview(self, client):
        data = client.post("/api/v1/popups/preview", json={
            "title": "Sale", "isActive": True, "websites": ["Ecoshift Corporation"], "alignment": "left",
        }).json()["data"]

        assert data["is_visible"] is True
        assert data["alignment"] == "left"

    def test_create_with_image(self, client, fake_db):
        draft = {"title": "Sale", "websites": ["Ecoshift Corporation"], "isActive": True}

        response = client.post("/api/v1/popups/", data={"draft": json.dumps(draft)}, files={"image": PNG})

        popup = fake_db.docs(HOME_POPUPS)[response.json()["data"]["id"]]
        assert popup["imageUrl"].endswith("/popups/cover.png")
        assert client.get("/api/v1/popups/").json()["count"] == 1

    def test_requires_website(self, client):
        response = client.post("/api/v1/popups/", data={"draft": json.dumps({"title": "Sale"})})

        assert response.status_code == 400
        assert response.json()["detail"] == "Select at least one website."

    def test_bad_alignment(self, client):
        response = client.post("/api/v1/popups/preview", json={"title": "x", "alignment": "top"})

        assert response.status_code == 422

    def test_only_content_websites(self, client, fake_db):
        draft = {"title": "Sale", "websites": ["Shopify"]}

        response = client.post("/api/v1/popups/", data={"draft": json.dumps(draft)})

        assert response.status_code == 422
        assert fake_db.docs(HOME_POPUPS) == {}


class TestProjectsAPI:

    def test_create_and_delete(self, client, fake_db):
        draft = {"title": "Acme Plant", "category": "Industrial"}

        response = client.post("/api/v1/projects/", data={"draft": json.dumps(draft)}, files={"image": PNG})
        project_id = response.json()["data"]["id"]

        assert fake_db.docs(PROJECTS)[project_id]["category"] == "Industrial"
        assert client.delete(f"/api/v1/projects/{project_id}").status_code == 200

    def test_background_required(self, client):
        response = client.post("/api/v1/projects/", data={"draft": json.dumps({"title": "Acme"})})

        assert response.status_code == 400
        assert response.json()["detail"] == "Background image is required"

    def test_bulk_wizard(self, client, fake_db):
        names = ["Commercial - Mall.jpg", "Mall - logo.png", "Harbor Tower.jpg"]

        plan = client.post("/api/v1/projects/bulk/plan", json={"filenames": names}).json()["data"]
        assert [m["filename"] for m in plan["manual"]] == ["Harbor Tower.jpg"]

        plan = client.post("/api/v1/projects/bulk/assign", json={
            "plan": plan, "filename": "Harbor Tower.jpg", "title": "Harbor Tower", "category": "Architecture",
        }).json()["data"]
        assert plan["manual"] == []

        started = client.post(
            "/api/v1/projects/bulk",
            data={"plan": json.dumps(plan), "website": "Ecoshift Corporation"},
            files=[("files", (name, b"img", "image/jpeg")) for name in names],
        )
        job_id = started.json()["data"]["id"]

        job = client.get(f"/api/v1/projects/bulk/jobs/{job_id}").json()["data"]
        assert job["status"] == "completed"
        assert job["created"] == 2
        assert {p["website"] for p in fake_db.docs(PROJECTS).values()} == {"Ecoshift Corporation"}

    def test_unknown_job(self, client):
        assert client.get("/api/v1/projects/bulk/jobs/nope").status_code == 404

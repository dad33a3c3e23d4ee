"""
Tests for the app shell: root, health, auth guard and error envelope

Author: TM3
Date: 2026-02-10
"""
from fastapi.testclient import TestClient
from jose import jwt

from app.core.config import settings
from app.core.database import ACTIVITY_LOGS, get_firestore
from app.main import app


class TestAppShell:

    def test_root(self, client):
        response = client.get("/")

        assert response.status_code == 200
        assert response.json()["status"] == "online"

    def test_health_reports_configuration(self, client):
        data = client.get("/health").json()

        assert data["status"] == "healthy"
        assert "configured" in data["cloudinary"]

    def test_domain_errors_use_their_status_code(self, client):
        response = client.get("/api/v1/blogs/ghost")

        assert response.status_code == 404
        assert response.json() == {
            "status": "error",
            "detail": "Document ghost not found in blogs",
            "collection": "blogs",
            "id": "ghost",
        }


class TestAuthGuard:

    def test_routers_require_a_token(self, fake_db):
        app.dependency_overrides[get_firestore] = lambda: fake_db
        try:
            response = TestClient(app).get("/api/v1/faqs/")
        finally:
            app.dependency_overrides.clear()

        assert response.status_code == 401

    def test_valid_token_is_accepted(self, fake_db, monkeypatch):
        monkeypatch.setattr(settings, "AUTH_SECRET", "test-secret")
        token = jwt.encode({"sub": "uid-9", "email": "ed@example.com", "role": "editor"}, "test-secret", algorithm="HS256")
        app.dependency_overrides[get_firestore] = lambda: fake_db
        try:
            response = TestClient(app).get("/api/v1/faqs/", headers={"Authorization": f"Bearer {token}"})
        finally:
            app.dependency_overrides.clear()

        assert response.status_code == 200
        assert response.json()["count"] == 0

    def test_bad_signature_rejected(self, fake_db, monkeypatch):
        monkeypatch.setattr(settings, "AUTH_SECRET", "test-secret")
        token = jwt.encode({"sub": "uid-9", "email": "ed@example.com"}, "other-secret", algorithm="HS256")
        app.dependency_overrides[get_firestore] = lambda: fake_db
        try:
            response = TestClient(app).get("/api/v1/faqs/", headers={"Authorization": f"Bearer {token}"})
        finally:
            app.dependency_overrides.clear()

        assert response.status_code == 401

    def test_page_views_accept_anonymous_callers(self, fake_db):
        app.dependency_overrides[get_firestore] = lambda: fake_db
        try:
            response = TestClient(app).post("/api/v1/activity/page-view", json={"page": "/auth/login"})
        finally:
            app.dependency_overrides.clear()

        assert response.status_code == 200
        entry = fake_db.docs(ACTIVITY_LOGS)[response.json()["data"]["id"]]
        assert entry["userEmail"] == ""

    def test_page_views_record_signed_in_email(self, fake_db, monkeypatch):
        monkeypatch.setattr(settings, "AUTH_SECRET", "test-secret")
        token = jwt.encode({"sub": "uid-9", "email": "ed@example.com"}, "test-secret", algorithm="HS256")
        app.dependency_overrides[get_firestore] = lambda: fake_db
        try:
            response = TestClient(app).post(
                "/api/v1/activity/page-view", json={"page": "/admin"}, headers={"Authorization": f"Bearer {token}"}
            )
        finally:
            app.dependency_overrides.clear()

        entry = fake_db.docs(ACTIVITY_LOGS)[response.json()["data"]["id"]]
        assert entry["userEmail"] == "ed@example.com"

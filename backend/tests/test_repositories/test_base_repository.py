"""
Unit tests for FirestoreRepository, MasterDataRepository and the batch helpers

Author: TM3
Date: 2026-02-10
"""
import pytest
from datetime import datetime, timezone

from app.core.database import BRANDS, CATEGORIES, chunked, commit_in_chunks
from app.core.exceptions import DocumentNotFoundException
from app.domain.content import Faq
from app.repositories.base_repository import FirestoreRepository
from app.repositories.master_data_repository import MasterDataRepository


class TestFirestoreRepository:

    def test_create_get_update_delete(self, fake_db):
        repo = FirestoreRepository(fake_db, "faq_settings", Faq)

        faq_id = repo.create({"question": "Q?", "answer": "A"})
        repo.update(faq_id, {"answer": "B"})
        faq = repo.get(faq_id)

        assert isinstance(faq, Faq)
        assert faq.answer == "B"

        repo.delete(faq_id)
        assert repo.find_by_id(faq_id) is None

    def test_get_missing_raises(self, fake_db):
        with pytest.raises(DocumentNotFoundException) as exc_info:
            FirestoreRepository(fake_db, "blogs").get("ghost")

        assert exc_info.value.status_code == 404
        assert exc_info.value.details == {"collection": "blogs", "id": "ghost"}

    def test_update_missing_raises(self, fake_db):
        with pytest.raises(DocumentNotFoundException):
            FirestoreRepository(fake_db, "blogs").update("ghost", {"title": "x"})

    def test_find_all_order_and_limit(self, fake_db):
        for day in (3, 1, 2):
            fake_db.seed("blogs", f"b{day}", {"createdAt": datetime(2026, 1, day, tzinfo=timezone.utc)})
        fake_db.seed("blogs", "undated", {"title": "no createdAt"})
        repo = FirestoreRepository(fake_db, "blogs")

        assert [b.id for b in repo.find_all(order_by="createdAt", limit=2)] == ["b3", "b2"]
        assert [b.id for b in repo.find_all(order_by="createdAt", descending=False)] == ["b1", "b2", "b3"]
        assert len(repo.find_all()) == 4

    def test_find_by_ids_ignores_unknown(self, fake_db):
        fake_db.seed("blogs", "a", {})
        fake_db.seed("blogs", "b", {})

        found = FirestoreRepository(fake_db, "blogs").find_by_ids(["b", "ghost", "a"])

        assert [d.id for d in found] == ["b", "a"]


class TestMasterDataRepository:

    def test_find_by_value_is_case_insensitive(self, fake_db):
        fake_db.seed(BRANDS, "b1", {"title": "  LIT ", "websites": []})

        repo = MasterDataRepository(fake_db, BRANDS)

        assert repo.find_by_value("lit").id == "b1"
        assert repo.find_by_value("") is None

    def test_upsert_creates_with_field_and_extra(self, fake_db):
        repo = MasterDataRepository(fake_db, CATEGORIES)

        doc_id = repo.upsert_with_websites(" Panels ", ["Taskflow"], extra={"isActive": True})

        doc = fake_db.docs(CATEGORIES)[doc_id]
        assert doc["name"] == "Panels"
        assert doc["websites"] == ["Taskflow"]
        assert doc["isActive"] is True

    def test_upsert_merges_websites(self, fake_db):
        fake_db.seed(CATEGORIES, "c1", {"name": "Panels", "websites": ["Taskflow"]})
        repo = MasterDataRepository(fake_db, CATEGORIES)

        doc_id = repo.upsert_with_websites("panels", ["Taskflow", "Ecoshift Corporation"])

        assert doc_id == "c1"
        assert fake_db.docs(CATEGORIES)["c1"]["websites"] == ["Taskflow", "Ecoshift Corporation"]

    def test_display_value(self, fake_db):
        repo = MasterDataRepository(fake_db, BRANDS)
        fake_db.seed(BRANDS, "x", {})

        assert repo.display_value(repo.get("x")) == "Unnamed"

    def test_find_for_websites(self, fake_db):
        fake_db.seed(BRANDS, "a", {"title": "A", "websites": ["Shopify"]})
        fake_db.seed(BRANDS, "b", {"title": "B", "websites": ["Taskflow"]})

        assert [d.id for d in MasterDataRepository(fake_db, BRANDS).find_for_websites(["Shopify"])] == ["a"]


class TestBatchHelpers:

    def test_chunked(self):
        assert chunked(range(5), 2) == [[0, 1], [2, 3], [4]]
        assert chunked([], 3) == []
        with pytest.raises(ValueError):
            chunked([1], 0)

    def test_commit_in_chunks_one_batch_per_chunk(self, fake_db):
        written = commit_in_chunks(
            fake_db, range(5), lambda batch, i: batch.set(fake_db.collection("t").document(f"d{i}"), {"i": i}),
            chunk_size=3,
        )

        assert written == 5
        assert fake_db.commits == [3, 2]
        assert len(fake_db.docs("t")) == 5

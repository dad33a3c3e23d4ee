"""
Pytest fixtures and configuration for the CMS Backend tests

Provides an in-memory Firestore, a fake Cloudinary uploader and a
TestClient with the FastAPI dependencies overridden, so no test needs
network access or credentials.

Author: TM3
Date: 2025-10-17
Updated: 2026-02-10 (Firestore fakes)
"""
import copy
import itertools
from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from app.core.auth import TokenUser, get_current_user
from app.core.database import DESCENDING, SERVER_TIMESTAMP, ArrayUnion, get_firestore
from app.core.exceptions import StorageUploadException
from app.services.storage_service import get_storage


# ============================================================================
# In-memory Firestore
# ============================================================================

class FakeSnapshot:

    def __init__(self, doc_id, data):
        self.id = doc_id
        self._data = data

    @property
    def exists(self):
        return self._data is not None

    def to_dict(self):
        return copy.deepcopy(self._data) if self._data is not None else None


class FakeDocumentRef:

    def __init__(self, db, collection, doc_id):
        self._db = db
        self._collection = collection
        self.id = doc_id

    @property
    def _docs(self):
        return self._db.data.setdefault(self._collection, {})

    def get(self):
        return FakeSnapshot(self.id, self._docs.get(self.id))

    def set(self, data, merge=False):
        current = self._docs.get(self.id, {}) if merge else {}
        self._docs[self.id] = self._db.apply(current, data)

    def update(self, data):
        if self.id not in self._docs:
            raise KeyError(f"{self._collection}/{self.id} does not exist")
        self._docs[self.id] = self._db.apply(self._docs[self.id], data)

    def delete(self):
        self._docs.pop(self.id, None)


class FakeQuery:

    def __init__(self, db, collection, filters=None, order=None, limit_to=None):
        self._db = db
        self._collection = collection
        self._filters = filters or []
        self._order = order
        self._limit = limit_to

    def where(self, filter):
        return FakeQuery(self._db, self._collection, self._filters + [filter], self._order, self._limit)

    def order_by(self, field, direction="ASCENDING"):
        return FakeQuery(self._db, self._collection, self._filters, (field, direction), self._limit)

    def limit(self, count):
        return FakeQuery(self._db, self._collection, self._filters, self._order, count)

    def stream(self):
        docs = list(self._db.data.get(self._collection, {}).items())
        docs = [(doc_id, data) for doc_id, data in docs if all(_matches(data, f) for f in self._filters)]
        if self._order:
            field, direction = self._order
            # Firestore leaves out documents without the ordered field
            docs = [(doc_id, data) for doc_id, data in docs if data.get(field) is not None]
            docs.sort(key=lambda item: item[1][field], reverse=direction == DESCENDING)
        if self._limit:
            docs = docs[:self._limit]
        return iter([FakeSnapshot(doc_id, data) for doc_id, data in docs])


class FakeCollection(FakeQuery):

    def document(self, doc_id=None):
        return FakeDocumentRef(self._db, self._collection, doc_id or self._db.new_id())

    def add(self, data):
        ref = self.document()
        ref.set(data)
        return self._db.now(), ref


class FakeBatch:

    def __init__(self, db):
        self._db = db
        self._ops = []

    def set(self, ref, data, merge=False):
        self._ops.append(lambda: ref.set(data, merge=merge))

    def update(self, ref, data):
        self._ops.append(lambda: ref.update(data))

    def delete(self, ref):
        self._ops.append(ref.delete)

    def commit(self):
        for op in self._ops:
            op()
        self._db.commits.append(len(self._ops))


def _matches(data, field_filter):
    value = data.get(field_filter.field_path)
    op = field_filter.op_string
    expected = field_filter.value
    if op == "==":
        return value == expected
    if op == "in":
        return value in expected
    if op == "array_contains":
        return isinstance(value, list) and expected in value
    if op == "array_contains_any":
        return isinstance(value, list) and any(v in value for v in expected)
    raise NotImplementedError(op)


class FakeFirestore:
    """Dict-backed stand-in for google.cloud.firestore.Client"""

    def __init__(self):
        self.data = {}
        self.commits = []
        self._ids = itertools.count(1)
        self._ticks = itertools.count(1)

    def new_id(self):
        return f"doc{next(self._ids)}"

    def now(self):
        # Strictly increasing so ordering by server timestamps is deterministic
        return datetime.now(timezone.utc) + timedelta(microseconds=next(self._ticks))

    def apply(self, current, data):
        result = copy.deepcopy(current)
        for key, value in data.items():
            if value is SERVER_TIMESTAMP:
                result[key] = self.now()
            elif isinstance(value, ArrayUnion):
                existing = result.get(key) if isinstance(result.get(key), list) else []
                result[key] = existing + [v for v in value.values if v not in existing]
            else:
                result[key] = copy.deepcopy(value)
        return result

    def collection(self, name):
        return FakeCollection(self, name)

    def batch(self):
        return FakeBatch(self)

    def seed(self, collection, doc_id, data):
        """Store a document as-is (no sentinel handling)"""
        self.data.setdefault(collection, {})[doc_id] = copy.deepcopy(data)

    def docs(self, collection):
        return self.data.get(collection, {})


class FakeStorage:
    """Records uploads and returns predictable Cloudinary-like URLs"""

    def __init__(self):
        self.uploads = []
        self.remote = []
        self.fail = False

    def upload(self, file, folder=None):
        if self.fail:
            raise StorageUploadException("Failed to upload to Cloudinary: boom")
        self.uploads.append((file.filename, folder))
        kind = "raw" if file.is_pdf else "image"
        return f"https://res.cloudinary.com/demo/{kind}/upload/f_auto,q_auto/{folder or 'root'}/{file.filename}"

    def upload_remote(self, url):
        self.remote.append(url)
        if not url or "res.cloudinary.com" in url:
            return url or ""
        return f"https://res.cloudinary.com/demo/image/upload/remote/{len(self.remote)}.jpg"


# ============================================================================
# Fixtures
# ============================================================================

@pytest.fixture
def fake_db():
    return FakeFirestore()


@pytest.fixture
def fake_storage():
    return FakeStorage()


@pytest.fixture
def admin_user():
    return TokenUser(id="uid-1", email="admin@example.com", name="Ada Admin", role="admin", access_level="full")


@pytest.fixture
def actor(admin_user):
    return admin_user.to_actor()


@pytest.fixture
def client(fake_db, fake_storage, admin_user):
    """
    TestClient with Firestore, Cloudinary and auth overridden

    BackgroundTasks run before the response is returned.
    """
    from app.main import app

    app.dependency_overrides[get_firestore] = lambda: fake_db
    app.dependency_overrides[get_storage] = lambda: fake_storage
    app.dependency_overrides[get_current_user] = lambda: admin_user
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def sample_product_data():
    """A product as stored by the website product form"""
    return {
        "itemDescription": "LED Panel 40W",
        "itemCode": "LP-40",
        "ecoItemCode": "ECO-LP-40",
        "brand": "LIT",
        "categories": ["Panels"],
        "websites": ["Disruptive Solutions Inc"],
        "website": ["Disruptive Solutions Inc"],
        "createdAt": datetime(2026, 2, 1, tzinfo=timezone.utc),
    }

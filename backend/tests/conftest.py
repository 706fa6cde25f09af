"""
LessonBook Backend — Test Configuration (conftest.py)
======================================================

What:  Shared pytest fixtures for the entire test suite.
How:   The app factory accepts an injected DocumentStore, so API tests run
       against `FakeDatabase`, an in-memory stand-in for the parts of the
       async PyMongo database/collection API the services use. No MongoDB
       server is needed.

Fixture Hierarchy (all function-scoped):
    ├── fake_db:      empty FakeDatabase
    ├── seeded_db:    FakeDatabase with lessons, orders and an empty collection
    ├── store:        DocumentStore over seeded_db
    ├── test_client:  HTTPX AsyncClient talking to create_app(store)
    ├── lesson_ids:   subject → hex id of the seeded lessons
    └── images_dir:   IMAGES_ROOT with one sample image
"""

import copy
import os
import tempfile
from datetime import datetime
from types import SimpleNamespace
from typing import Any, Dict, Iterable, List, Optional

# Override settings for testing BEFORE any app imports
os.environ["DB_HOST"] = "mongo.invalid:27017"
os.environ["DB_NAME"] = "lessonbook_test"
os.environ["IMAGES_ROOT"] = tempfile.mkdtemp(prefix="lessonbook_images_")
os.environ["LOG_LEVEL"] = "WARNING"

import pytest
import pytest_asyncio
from bson import ObjectId
from httpx import ASGITransport, AsyncClient
from pymongo.errors import ServerSelectionTimeoutError

from lessonbook.config import settings
from lessonbook.database import DocumentStore
from lessonbook.main import create_app


# ══════════════════════════════════════════════════════════════════════════
# In-memory async collection / database
# ══════════════════════════════════════════════════════════════════════════


def _matches(doc: Dict[str, Any], query: Dict[str, Any]) -> bool:
    return all(doc.get(k) == v for k, v in query.items())


def _bson_sort_key(value: Any):
    """
    MongoDB's cross-type comparison order: missing/null < numbers < strings
    < objects < arrays < ObjectId < booleans < dates. Values of one type
    compare naturally.
    """
    if value is None:
        return (1, 0)
    if isinstance(value, bool):
        return (8, value)
    if isinstance(value, (int, float)):
        return (2, value)
    if isinstance(value, str):
        return (3, value)
    if isinstance(value, dict):
        return (4, repr(value))
    if isinstance(value, (list, tuple)):
        return (5, repr(value))
    if isinstance(value, ObjectId):
        return (7, value.binary)
    if isinstance(value, datetime):
        return (9, value)
    return (10, repr(value))


class FakeCursor:
    """Supports the find().sort().limit().to_list() chain."""

    def __init__(self, docs: List[Dict[str, Any]]):
        self._docs = docs

    def sort(self, key: str, direction: int) -> "FakeCursor":
        self._docs = sorted(self._docs, key=lambda d: _bson_sort_key(d.get(key)), reverse=direction < 0)
        return self

    def limit(self, n: int) -> "FakeCursor":
        if n:
            self._docs = self._docs[:n]
        return self

    async def to_list(self, length: Optional[int] = None) -> List[Dict[str, Any]]:
        docs = self._docs[:length] if length else self._docs
        return [copy.deepcopy(d) for d in docs]


class FakeCollection:
    def __init__(self, name: str):
        self.name = name
        self.docs: List[Dict[str, Any]] = []
        self.created = False
        self.fail_with: Optional[Exception] = None
        self.calls: List[str] = []

    def _record(self, op: str) -> None:
        self.calls.append(op)
        if self.fail_with is not None:
            raise self.fail_with

    def _find_index(self, query: Dict[str, Any]) -> Optional[int]:
        for i, doc in enumerate(self.docs):
            if _matches(doc, query):
                return i
        return None

    def find(self, query: Optional[Dict[str, Any]] = None) -> FakeCursor:
        self._record("find")
        return FakeCursor([d for d in self.docs if _matches(d, query or {})])

    async def find_one(self, query: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        self._record("find_one")
        i = self._find_index(query)
        return None if i is None else copy.deepcopy(self.docs[i])

    async def insert_one(self, document: Dict[str, Any]):
        self._record("insert_one")
        if "_id" not in document:
            document["_id"] = ObjectId()
        self.docs.append(copy.deepcopy(document))
        self.created = True
        return SimpleNamespace(inserted_id=document["_id"], acknowledged=True)

    async def update_one(self, query: Dict[str, Any], update: Dict[str, Any]):
        self._record("update_one")
        i = self._find_index(query)
        if i is None:
            return SimpleNamespace(matched_count=0, modified_count=0)
        before = copy.deepcopy(self.docs[i])
        self.docs[i].update(copy.deepcopy(update["$set"]))
        return SimpleNamespace(matched_count=1, modified_count=int(before != self.docs[i]))

    async def replace_one(self, query: Dict[str, Any], replacement: Dict[str, Any]):
        self._record("replace_one")
        i = self._find_index(query)
        if i is None:
            return SimpleNamespace(matched_count=0, modified_count=0)
        before = self.docs[i]
        self.docs[i] = {"_id": before["_id"], **copy.deepcopy(replacement)}
        return SimpleNamespace(matched_count=1, modified_count=int(before != self.docs[i]))

    async def delete_one(self, query: Dict[str, Any]):
        self._record("delete_one")
        i = self._find_index(query)
        if i is None:
            return SimpleNamespace(deleted_count=0)
        del self.docs[i]
        return SimpleNamespace(deleted_count=1)


class FakeDatabase:
    """
    In-memory database. A collection exists once it has been created via
    `create_collection` or received an insert, as in MongoDB.
    """

    def __init__(self, name: str = "lessonbook_test"):
        self.name = name
        self.collections: Dict[str, FakeCollection] = {}
        self.unreachable = False
        self.metadata_queries = 0

    def __getitem__(self, name: str) -> FakeCollection:
        if name not in self.collections:
            self.collections[name] = FakeCollection(name)
        return self.collections[name]

    def create_collection(self, name: str, docs: Iterable[Dict[str, Any]] = ()) -> FakeCollection:
        coll = self[name]
        coll.created = True
        for doc in docs:
            coll.docs.append({"_id": ObjectId(), **doc})
        return coll

    def drop_collection(self, name: str) -> None:
        self.collections.pop(name, None)

    async def list_collection_names(self, filter: Optional[Dict[str, Any]] = None) -> List[str]:
        self.metadata_queries += 1
        if self.unreachable:
            raise ServerSelectionTimeoutError("mongo.invalid:27017: timed out")
        names = [n for n, c in self.collections.items() if c.created]
        if filter and "name" in filter:
            names = [n for n in names if n == filter["name"]]
        return names

    async def command(self, name: str) -> Dict[str, Any]:
        if self.unreachable:
            raise ServerSelectionTimeoutError("mongo.invalid:27017: timed out")
        return {"ok": 1.0}


# ══════════════════════════════════════════════════════════════════════════
# Fixtures
# ══════════════════════════════════════════════════════════════════════════

LESSONS = [
    {"subject": "Math", "location": "London", "price": 100, "spaces": 5, "image": "/images/math.png"},
    {"subject": "English", "location": "Oxford", "price": 80, "spaces": 5, "image": "/images/english.png"},
    {"subject": "Music", "location": "Bristol", "price": 120, "spaces": 5, "image": "/images/music.png"},
    {"subject": "Art", "location": "Leeds", "price": 60, "spaces": 5, "image": "/images/art.png"},
    {"subject": "Science", "location": "York", "price": 90, "spaces": 0, "image": "/images/science.png"},
]


@pytest.fixture
def fake_db() -> FakeDatabase:
    return FakeDatabase()


@pytest.fixture
def seeded_db(fake_db) -> FakeDatabase:
    """Lessons collection with five lessons, an orders collection, and `empty`."""
    fake_db.create_collection("lessons", LESSONS)
    fake_db.create_collection("orders")
    fake_db.create_collection("empty")
    return fake_db


@pytest.fixture
def store(seeded_db) -> DocumentStore:
    return DocumentStore(seeded_db)


@pytest_asyncio.fixture
async def test_client(store):
    """
    HTTPX AsyncClient routed straight into the app via ASGITransport.

    Usage:
        async def test_lessons(test_client):
            response = await test_client.get("/lessons")
            assert response.status_code == 200
    """
    app = create_app(document_store=store)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def images_dir():
    """IMAGES_ROOT with one small PNG in it."""
    root = settings.images_root
    os.makedirs(root, exist_ok=True)
    with open(os.path.join(root, "math.png"), "wb") as fh:
        fh.write(b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR")
    return root


@pytest.fixture
def lesson_ids(seeded_db) -> Dict[str, str]:
    """Hex ids of the seeded lessons, keyed by subject."""
    return {doc["subject"]: str(doc["_id"]) for doc in seeded_db["lessons"].docs}

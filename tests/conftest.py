"""
Pytest configuration for the feedback portal tests.
Env must be set before feedback_portal is imported (settings is a module singleton).
"""

import os
import re
import tempfile
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

_test_data_dir = tempfile.mkdtemp(prefix="feedback_portal_test_")
os.environ["APP_CONFIG__MONGO__ENABLED"] = "false"
os.environ["APP_CONFIG__STORAGE__DATA_FILE"] = os.path.join(_test_data_dir, "feedbacks.json")
os.environ["APP_CONFIG__AUTH__SECRET_KEY"] = "test-secret"
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest
from fastapi.testclient import TestClient
from pymongo.errors import DuplicateKeyError

from feedback_portal.core.dependencies import get_feedback_repository
from feedback_portal.crud.json_feedback_repository import JsonFeedbackRepository
from feedback_portal.crud.mongo_feedback_repository import MongoFeedbackRepository
from feedback_portal.feedbacks.services.feedback_store import FeedbackStore
from feedback_portal.main import main_app


# ---------------------------------------------------------------------------
# In-memory stand-in for an async pymongo collection (only what the repo uses)
# ---------------------------------------------------------------------------

def _field_matches(doc, key, cond):
    value = doc.get(key)
    if isinstance(cond, dict) and "$regex" in cond:
        if value is None:
            return False
        flags = re.IGNORECASE if "i" in cond.get("$options", "") else 0
        return re.search(cond["$regex"], str(value), flags) is not None
    return value == cond


def _matches(doc, query):
    for key, cond in query.items():
        if key == "$or":
            if not any(_matches(doc, sub) for sub in cond):
                return False
        elif not _field_matches(doc, key, cond):
            return False
    return True


def _project(doc, projection):
    out = dict(doc)
    if projection and projection.get("_id") == 0:
        out.pop("_id", None)
    return out


class FakeCursor:
    def __init__(self, docs):
        self._docs = docs
        self._skip = 0
        self._limit = 0

    def sort(self, key, direction):
        self._docs = sorted(self._docs, key=lambda d: str(d.get(key) or ""), reverse=direction < 0)
        return self

    def skip(self, n):
        self._skip = n
        return self

    def limit(self, n):
        self._limit = n
        return self

    async def to_list(self, length=None):
        docs = self._docs[self._skip:]
        if self._limit:
            docs = docs[: self._limit]
        return docs


class FakeCollection:
    def __init__(self):
        self.docs = []
        self.indexes = []
        self._next_oid = 1

    async def create_index(self, keys, **kwargs):
        self.indexes.append((keys, kwargs))
        return "_".join(f"{k}_{d}" for k, d in keys)

    async def insert_one(self, doc):
        if any(d["id"] == doc["id"] for d in self.docs):
            raise DuplicateKeyError("E11000 duplicate key error collection: feedbacks index: id_1")
        doc["_id"] = self._next_oid
        self._next_oid += 1
        self.docs.append(dict(doc))
        return SimpleNamespace(inserted_id=doc["_id"])

    def find(self, query, projection=None):
        return FakeCursor([_project(d, projection) for d in self.docs if _matches(d, query)])

    async def count_documents(self, query):
        return sum(1 for d in self.docs if _matches(d, query))

    async def find_one(self, query, projection=None):
        for d in self.docs:
            if _matches(d, query):
                return _project(d, projection)
        return None

    async def find_one_and_update(self, query, update, projection=None, return_document=None):
        for d in self.docs:
            if _matches(d, query):
                d.update(update["$set"])
                return _project(d, projection)
        return None

    async def delete_one(self, query):
        for i, d in enumerate(self.docs):
            if _matches(d, query):
                del self.docs[i]
                return SimpleNamespace(deleted_count=1)
        return SimpleNamespace(deleted_count=0)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

class StepClock:
    """Deterministic clock: every call advances by one second."""

    def __init__(self, start=None):
        self.now = start or datetime(2026, 10, 19, 8, 0, tzinfo=timezone.utc)

    def __call__(self):
        self.now = self.now + timedelta(seconds=1)
        return self.now


@pytest.fixture
def json_repo(tmp_path):
    return JsonFeedbackRepository(tmp_path / "data" / "feedbacks.json")


@pytest.fixture
def fake_collection():
    return FakeCollection()


@pytest.fixture
async def mongo_repo(fake_collection):
    repo = MongoFeedbackRepository(fake_collection)
    await repo.ensure_indexes()
    return repo


@pytest.fixture(params=["json", "mongo"])
def repo(request, json_repo, fake_collection):
    if request.param == "json":
        return json_repo
    return MongoFeedbackRepository(fake_collection)


@pytest.fixture
def clock():
    return StepClock()


@pytest.fixture
def store(repo, clock):
    return FeedbackStore(repo, clock=clock)


@pytest.fixture
def valid_fields():
    return {
        "category": "General",
        "subcategory": "Noise",
        "text": "loud hallway",
        "urgency": "high",
    }


@pytest.fixture
def client(tmp_path):
    repo = JsonFeedbackRepository(tmp_path / "api" / "feedbacks.json")
    main_app.dependency_overrides[get_feedback_repository] = lambda: repo
    with TestClient(main_app) as test_client:
        yield test_client
    main_app.dependency_overrides.clear()

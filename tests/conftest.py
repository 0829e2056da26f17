"""Shared pytest fixtures for Marketplace API tests."""

import copy
from types import SimpleNamespace
from typing import Dict, Optional

import pytest
from bson import ObjectId
from fastapi.testclient import TestClient
from pymongo.errors import DuplicateKeyError

from marketplace_api.auth import VerificationError
from marketplace_api.main import create_app
from marketplace_api.models import Principal


# ============================================================================
# IN-MEMORY STORE (Test Doubles)
# ============================================================================


def _matches(doc: dict, query: Optional[dict]) -> bool:
    """Evaluate the subset of MongoDB filters the services use."""
    for key, expected in (query or {}).items():
        actual = doc.get(key)
        if isinstance(expected, dict) and "$ne" in expected:
            if actual == expected["$ne"]:
                return False
        elif actual != expected:
            return False
    return True


class FakeCursor:
    def __init__(self, docs):
        self.docs = docs

    async def to_list(self, length=None):
        return self.docs if length is None else self.docs[:length]


class FakeCollection:
    """Async stand-in for a motor collection, honouring unique indexes."""

    def __init__(self, name: str):
        self.name = name
        self.docs = []
        self.unique_indexes = []
        self.calls = []

    async def create_index(self, keys, unique=False, name=None, **kwargs):
        fields = [keys] if isinstance(keys, str) else [k for k, _ in keys]
        if unique:
            self.unique_indexes.append(fields)
        return name or "_".join(fields)

    def _violates_unique(self, doc: dict, ignore_id=None) -> bool:
        for fields in self.unique_indexes:
            for existing in self.docs:
                if existing["_id"] == ignore_id:
                    continue
                if all(existing.get(f) == doc.get(f) for f in fields):
                    return True
        return False

    async def insert_one(self, doc: dict):
        self.calls.append("insert_one")
        doc = copy.deepcopy(doc)
        doc.setdefault("_id", ObjectId())
        if self._violates_unique(doc):
            raise DuplicateKeyError("E11000 duplicate key error", code=11000)
        self.docs.append(doc)
        return SimpleNamespace(inserted_id=doc["_id"], acknowledged=True)

    async def find_one(self, query: Optional[dict] = None):
        self.calls.append("find_one")
        for doc in self.docs:
            if _matches(doc, query):
                return copy.deepcopy(doc)
        return None

    def find(self, query: Optional[dict] = None):
        self.calls.append("find")
        return FakeCursor([copy.deepcopy(d) for d in self.docs if _matches(d, query)])

    async def update_one(self, query: dict, update: dict):
        self.calls.append("update_one")
        for doc in self.docs:
            if _matches(doc, query):
                changes = update.get("$set", {})
                modified = any(doc.get(k) != v for k, v in changes.items())
                doc.update(copy.deepcopy(changes))
                return SimpleNamespace(matched_count=1, modified_count=int(modified))
        return SimpleNamespace(matched_count=0, modified_count=0)

    async def delete_one(self, query: dict):
        self.calls.append("delete_one")
        for i, doc in enumerate(self.docs):
            if _matches(doc, query):
                del self.docs[i]
                return SimpleNamespace(deleted_count=1, acknowledged=True)
        return SimpleNamespace(deleted_count=0, acknowledged=True)

    @property
    def mutations(self):
        return [c for c in self.calls if c in ("insert_one", "update_one", "delete_one")]


class FakeDatabase:
    def __init__(self):
        self.collections: Dict[str, FakeCollection] = {}

    def __getitem__(self, name: str) -> FakeCollection:
        if name not in self.collections:
            self.collections[name] = FakeCollection(name)
        return self.collections[name]

    async def command(self, name: str):
        return {"ok": 1.0}


class FakeVerifier:
    """Maps known bearer tokens to principals."""

    def __init__(self, tokens: Dict[str, str]):
        self.tokens = tokens

    def verify(self, credential: str) -> Principal:
        if credential not in self.tokens:
            raise VerificationError("unknown token")
        return Principal(email=self.tokens[credential])


# ============================================================================
# FIXTURES
# ============================================================================


ALICE = "a@x.com"
BOB = "b@x.com"


@pytest.fixture
def fake_db() -> FakeDatabase:
    return FakeDatabase()


@pytest.fixture
def verifier() -> FakeVerifier:
    return FakeVerifier({"token-alice": ALICE, "token-bob": BOB})


@pytest.fixture
def client(fake_db, verifier):
    """Test client whose lifespan sets up indexes on the fake database."""
    app = create_app(db=fake_db, verifier=verifier)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def alice_headers() -> dict:
    return {"Authorization": "Bearer token-alice"}


@pytest.fixture
def bob_headers() -> dict:
    return {"Authorization": "Bearer token-bob"}

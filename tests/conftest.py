import os
from collections.abc import AsyncGenerator
from typing import Any
from unittest.mock import MagicMock, patch
from uuid import uuid4

# Settings are read at import time; keep tests independent of a local .env
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("TIMEZONE", "UTC")
os.environ.setdefault("LOG_FORMAT", "console")

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from app.core.firebase import get_firestore_client
from app.core.token_codec import TokenCodec
from app.dependencies import get_token_codec
from app.main import app

TEST_SECRET = "test-secret-key"


class FakeSnapshot:
    """Stand-in for a Firestore DocumentSnapshot."""

    def __init__(self, doc_id: str, data: dict[str, Any] | None):
        self.id = doc_id
        self._data = data

    @property
    def exists(self) -> bool:
        return self._data is not None

    def to_dict(self) -> dict[str, Any] | None:
        return dict(self._data) if self._data is not None else None


class FakeDocumentReference:
    def __init__(self, store: "FakeFirestore", collection: str, doc_id: str):
        self._store = store
        self.collection_name = collection
        self.id = doc_id

    async def get(self) -> FakeSnapshot:
        self._store.record("get", self.collection_name, self.id)
        return FakeSnapshot(self.id, self._store.docs(self.collection_name).get(self.id))

    async def set(self, data: dict[str, Any], merge: bool = False) -> None:
        self._store.record("set", self.collection_name, self.id)
        docs = self._store.docs(self.collection_name)
        if merge and self.id in docs:
            docs[self.id] = {**docs[self.id], **data}
        else:
            docs[self.id] = dict(data)

    async def delete(self) -> None:
        self._store.record("delete", self.collection_name, self.id)
        self._store.docs(self.collection_name).pop(self.id, None)


class FakeQuery:
    def __init__(self, collection: "FakeCollectionReference", limit: int | None = None):
        self._collection = collection
        self._limit = limit

    async def get(self) -> list[FakeSnapshot]:
        snapshots = await self._collection.get()
        return snapshots[: self._limit] if self._limit is not None else snapshots


class FakeCollectionReference:
    def __init__(self, store: "FakeFirestore", name: str):
        self._store = store
        self.name = name

    def document(self, doc_id: str | None = None) -> FakeDocumentReference:
        if doc_id is not None and not isinstance(doc_id, str):
            raise TypeError("Document id must be a string")
        return FakeDocumentReference(self._store, self.name, doc_id or uuid4().hex)

    async def add(self, data: dict[str, Any]) -> tuple[None, FakeDocumentReference]:
        ref = self.document()
        await ref.set(data)
        return None, ref

    async def get(self) -> list[FakeSnapshot]:
        self._store.record("list", self.name, None)
        return [FakeSnapshot(doc_id, data) for doc_id, data in self._store.docs(self.name).items()]

    def limit(self, count: int) -> FakeQuery:
        return FakeQuery(self, count)


class FakeFirestore:
    """
    In-memory async Firestore double.

    Documents keep insertion order. ``failures`` maps (operation,
    collection, doc_id) to an exception raised on that call; a doc_id of
    None matches every document in the collection.
    """

    def __init__(self) -> None:
        self.collections: dict[str, dict[str, dict[str, Any]]] = {}
        self.calls: list[tuple[str, str, str | None]] = []
        self.failures: dict[tuple[str, str, str | None], Exception] = {}

    def docs(self, collection: str) -> dict[str, dict[str, Any]]:
        return self.collections.setdefault(collection, {})

    def record(self, operation: str, collection: str, doc_id: str | None) -> None:
        self.calls.append((operation, collection, doc_id))
        for key in ((operation, collection, doc_id), (operation, collection, None)):
            if key in self.failures:
                raise self.failures[key]

    def collection(self, name: str) -> FakeCollectionReference:
        return FakeCollectionReference(self, name)

    def seed(self, collection: str, doc_id: str, data: dict[str, Any]) -> None:
        self.docs(collection)[doc_id] = dict(data)

    def get_doc(self, collection: str, doc_id: str) -> dict[str, Any] | None:
        return self.docs(collection).get(doc_id)


@pytest.fixture
def firestore_db() -> FakeFirestore:
    """Empty in-memory Firestore."""
    return FakeFirestore()


@pytest.fixture
def token_codec() -> TokenCodec:
    """Token codec with the test secret."""
    return TokenCodec(TEST_SECRET)


@pytest_asyncio.fixture
async def client(
    firestore_db: FakeFirestore, token_codec: TokenCodec
) -> AsyncGenerator[AsyncClient, None]:
    """Create a test HTTP client backed by the in-memory Firestore."""
    app.dependency_overrides[get_firestore_client] = lambda: firestore_db
    app.dependency_overrides[get_token_codec] = lambda: token_codec

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture
def mock_fcm_send():
    """Patch FCM delivery; returns the mock for assertions."""
    with patch("app.services.notification_service.messaging.send") as mock_send:
        mock_send.return_value = "projects/test/messages/1"
        yield mock_send


@pytest.fixture
def mock_auth():
    """Patch Firebase Auth create/delete calls."""
    with (
        patch("app.services.account_service.auth.create_user") as create_user,
        patch("app.services.account_service.auth.delete_user") as delete_user,
    ):
        create_user.return_value = MagicMock(uid="new-user-uid")
        delete_user.return_value = None
        yield MagicMock(create_user=create_user, delete_user=delete_user)


@pytest.fixture
def homeowner(firestore_db: FakeFirestore) -> dict:
    """Homeowner profile with a registered device."""
    data = {
        "firstName": "Maria",
        "lastName": "Santos",
        "email": "maria@example.com",
        "role": "homeowner",
        "photoURL": "https://cdn.example.com/maria.jpg",
        "fcmToken": "homeowner-fcm-token",
    }
    firestore_db.seed("users", "homeowner-1", data)
    return {"id": "homeowner-1", **data}


@pytest.fixture
def visitor(firestore_db: FakeFirestore) -> dict:
    """Visitor profile with a registered device."""
    data = {
        "firstName": "Jon",
        "lastName": "Reyes",
        "email": "jon@example.com",
        "role": "user",
        "photoURL": None,
        "fcmToken": "visitor-fcm-token",
    }
    firestore_db.seed("users", "visitor-1", data)
    return {"id": "visitor-1", **data}


@pytest.fixture
def sample_visit_data(homeowner: dict, visitor: dict) -> dict:
    """Sample visit submission."""
    return {
        "homeownerId": homeowner["id"],
        "visitorId": visitor["id"],
        "classification": "guest",
        "visitDate": "2024-05-10",
        "visitTime": "14:30",
    }

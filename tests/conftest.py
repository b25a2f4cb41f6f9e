import copy
from typing import Dict, List, Optional

import pytest
from fastapi.testclient import TestClient

from smartbudget.core.security import create_access_token
from smartbudget.db import dynamo
from smartbudget.main import app
from smartbudget.utils import email_service


class InMemoryTables:
    """Stands in for the DynamoDB table primitives in db/dynamo.py."""

    def __init__(self):
        self.tables: Dict[str, Dict[str, dict]] = {alias: {} for alias in dynamo.TABLE_KEYS}

    @staticmethod
    def _roundtrip(item: dict) -> dict:
        # Same number handling as a real DynamoDB write + read.
        return dynamo._from_dynamo(dynamo._convert_for_dynamo(copy.deepcopy(item)))

    def put(self, alias: str, item: dict) -> bool:
        self.tables[alias][item[dynamo.TABLE_KEYS[alias]]] = self._roundtrip(item)
        return True

    def get(self, alias: str, item_id: str) -> Optional[dict]:
        item = self.tables[alias].get(item_id)
        return copy.deepcopy(item) if item else None

    def query_index(self, alias: str, index_name: str, key_name: str, value: str) -> List[dict]:
        return [copy.deepcopy(i) for i in self.tables[alias].values() if i.get(key_name) == value]

    def scan(self, alias: str) -> List[dict]:
        return [copy.deepcopy(i) for i in self.tables[alias].values()]

    def update(self, alias: str, item_id: str, updates: dict) -> Optional[dict]:
        item = self.tables[alias].get(item_id)
        if not updates or item is None:
            return None
        item.update(self._roundtrip(updates))
        return copy.deepcopy(item)

    def delete(self, alias: str, item_id: str) -> bool:
        return self.tables[alias].pop(item_id, None) is not None


@pytest.fixture
def fake_db(monkeypatch):
    db = InMemoryTables()
    monkeypatch.setattr(dynamo, "_put", db.put)
    monkeypatch.setattr(dynamo, "_get", db.get)
    monkeypatch.setattr(dynamo, "_query_index", db.query_index)
    monkeypatch.setattr(dynamo, "_scan", db.scan)
    monkeypatch.setattr(dynamo, "_update", db.update)
    monkeypatch.setattr(dynamo, "_delete", db.delete)
    return db


@pytest.fixture
def sent_emails(monkeypatch):
    """Records every outbound email attempt instead of talking to SMTP."""
    outbox = []

    def fake_send_email(to_email, subject, body_html, body_text=None, from_email=None):
        outbox.append({"to": to_email, "subject": subject, "html": body_html, "text": body_text})
        return True

    monkeypatch.setattr(email_service, "send_email", fake_send_email)
    return outbox


@pytest.fixture
def client(fake_db):
    return TestClient(app)


def make_user(db: InMemoryTables, user_id: str, email: str, full_name: str = "Test User") -> Dict[str, str]:
    db.put("users", {
        "user_id": user_id,
        "email": email,
        "full_name": full_name,
        "password_hash": "not-used",
        "created_at": "2025-01-01T00:00:00",
    })
    token = create_access_token({"sub": user_id})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def auth_headers(fake_db):
    return make_user(fake_db, "user-1", "alice@example.com", "Alice")


@pytest.fixture
def other_headers(fake_db):
    return make_user(fake_db, "user-2", "bob@example.com", "Bob")

"""Shared fixtures for the ParkSettle test-suite."""

from __future__ import annotations

import sys
from datetime import datetime, timezone
from pathlib import Path
from types import SimpleNamespace
from typing import Any

import pytest
import streamlit as st
from bson import ObjectId

ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from config.settings import get_settings  # noqa: E402


@pytest.fixture(autouse=True)
def clear_streamlit_secrets(monkeypatch):
    """Provide an empty secrets mapping so tests don't rely on Streamlit runtime."""

    monkeypatch.setattr(st, "secrets", {}, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture()
def sample_records() -> list[dict[str, Any]]:
    return [
        {
            "id": "r1",
            "person_name": "Kim",
            "location": "A",
            "fee": 3000.0,
            "parking_date": "2024-01-01",
            "bank_account": "국민/111-222",
            "role": "집사",
        },
        {
            "id": "r2",
            "person_name": "Kim",
            "location": "A",
            "fee": 6000.0,
            "parking_date": "2024-01-02",
            "bank_account": "국민/111-222",
            "role": "집사",
        },
        {
            "id": "r3",
            "person_name": "Lee",
            "location": "B",
            "fee": 1000.0,
            "parking_date": "2024-01-01",
            "bank_account": "신한/333444",
            "role": "성도",
        },
    ]


def _matches(document: dict[str, Any], query: dict[str, Any]) -> bool:
    for key, expected in query.items():
        value = document.get(key)
        if isinstance(expected, dict) and "$in" in expected:
            if value not in expected["$in"]:
                return False
        elif value != expected:
            return False
    return True


class FakeCollection:
    """In-memory stand-in for the few pymongo collection calls the store makes."""

    def __init__(self, documents: list[dict[str, Any]] | None = None) -> None:
        self.documents: list[dict[str, Any]] = list(documents or [])

    def find(self, query: dict[str, Any]):
        return [dict(document) for document in self.documents if _matches(document, query)]

    def insert_one(self, document: dict[str, Any]):
        stored = dict(document)
        stored["_id"] = ObjectId()
        self.documents.append(stored)
        return SimpleNamespace(inserted_id=stored["_id"])

    def delete_one(self, query: dict[str, Any]):
        for index, document in enumerate(self.documents):
            if _matches(document, query):
                del self.documents[index]
                return SimpleNamespace(deleted_count=1)
        return SimpleNamespace(deleted_count=0)

    def delete_many(self, query: dict[str, Any]):
        kept = [document for document in self.documents if not _matches(document, query)]
        deleted = len(self.documents) - len(kept)
        self.documents = kept
        return SimpleNamespace(deleted_count=deleted)


@pytest.fixture()
def fake_collection() -> FakeCollection:
    return FakeCollection(
        [
            {
                "_id": ObjectId(),
                "app_id": "test-app",
                "person_name": "박성도",
                "location": "국민은행 주차장",
                "parking_date": "2024-03-03",
                "bank_account": "우리/1002-123",
                "fee": 12000.0,
                "created_at": datetime(2024, 3, 3, 2, 0, tzinfo=timezone.utc),
            },
            {
                "_id": ObjectId(),
                "app_id": "other-app",
                "person_name": "최집사",
                "location": "국민은행 주차장",
                "parking_date": "2024-03-03",
                "bank_account": "우리/9999",
                "fee": 3000.0,
            },
        ]
    )

"""MongoDB-backed persistence for parking records."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Iterable

from bson import ObjectId
from bson.errors import InvalidId
from pymongo import MongoClient
from pymongo.collection import Collection
from pymongo.errors import PyMongoError

from config.settings import StoreSettings
from core.models import ParkingRecord

logger = logging.getLogger(__name__)

__all__ = ["RecordStore", "RecordStoreError", "connect_store"]


class RecordStoreError(RuntimeError):
    """Raised when the document store cannot complete a read or write."""


def _object_id(record_id: str) -> ObjectId:
    try:
        return ObjectId(record_id)
    except (InvalidId, TypeError) as exc:
        raise RecordStoreError(f"잘못된 기록 ID입니다: {record_id!r}") from exc


class RecordStore:
    """Reads and writes parking records in a single collection.

    The collection is injected so callers decide the connection lifetime and
    tests can pass an in-memory double. Records are scoped to ``app_id``.
    """

    def __init__(self, collection: Collection, app_id: str) -> None:
        self._collection = collection
        self._app_id = app_id

    @property
    def app_id(self) -> str:
        return self._app_id

    def fetch_all(self) -> list[dict[str, Any]]:
        """Return every record for this app as plain documents with an ``id`` key."""

        try:
            documents = list(self._collection.find({"app_id": self._app_id}))
        except PyMongoError as exc:
            logger.error("Failed to load parking records: %s", exc)
            raise RecordStoreError(f"주차 기록 로드 중 오류 발생: {exc}") from exc

        records: list[dict[str, Any]] = []
        for document in documents:
            record = {key: value for key, value in document.items() if key != "_id"}
            record["id"] = str(document["_id"])
            records.append(record)
        logger.debug("Loaded %d parking records", len(records))
        return records

    def add(self, record: ParkingRecord) -> str:
        """Insert ``record`` with a store-assigned UTC ``created_at`` and return its id."""

        document = record.to_document()
        document["app_id"] = self._app_id
        document["created_at"] = datetime.now(timezone.utc)
        try:
            result = self._collection.insert_one(document)
        except PyMongoError as exc:
            logger.error("Failed to save parking record: %s", exc)
            raise RecordStoreError(f"저장 오류: {exc}") from exc

        record_id = str(result.inserted_id)
        logger.info("Saved parking record %s for %s", record_id, record.person_name)
        return record_id

    def delete(self, record_id: str) -> bool:
        try:
            result = self._collection.delete_one({"_id": _object_id(record_id), "app_id": self._app_id})
        except PyMongoError as exc:
            logger.error("Failed to delete parking record %s: %s", record_id, exc)
            raise RecordStoreError(f"삭제 오류: {exc}") from exc

        logger.info("Deleted parking record %s (matched=%d)", record_id, result.deleted_count)
        return result.deleted_count > 0

    def delete_many(self, record_ids: Iterable[str]) -> int:
        object_ids = [_object_id(record_id) for record_id in record_ids]
        if not object_ids:
            return 0
        try:
            result = self._collection.delete_many({"_id": {"$in": object_ids}, "app_id": self._app_id})
        except PyMongoError as exc:
            logger.error("Failed to bulk delete %d parking records: %s", len(object_ids), exc)
            raise RecordStoreError(f"삭제 오류: {exc}") from exc

        logger.info("Bulk deleted %d parking records", result.deleted_count)
        return int(result.deleted_count)


def connect_store(settings: StoreSettings) -> RecordStore:
    """Open a client, verify the server answers, and return a store for the configured collection."""

    client: MongoClient = MongoClient(
        settings.mongo_uri,
        serverSelectionTimeoutMS=settings.timeout_ms,
        connectTimeoutMS=settings.timeout_ms,
        tz_aware=True,
    )
    try:
        client.admin.command("ping")
    except PyMongoError as exc:
        client.close()
        logger.error("MongoDB connection failed: %s", exc)
        raise RecordStoreError(f"데이터베이스 연결 실패: {exc}") from exc

    logger.info("Connected to MongoDB database %s", settings.mongo_database)
    collection = client[settings.mongo_database][settings.mongo_collection]
    return RecordStore(collection, app_id=settings.app_id)

"""Persistence layer for ParkSettle."""

from .records import RecordStore, RecordStoreError, connect_store

__all__ = ["RecordStore", "RecordStoreError", "connect_store"]

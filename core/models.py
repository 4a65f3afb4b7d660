"""Shared data model definitions for ParkSettle."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import date, datetime
from typing import Any, Mapping, TypedDict

import pandas as pd

from core.constants import ALL_LOCATIONS


def _coerce_date(value: Any) -> date | None:
    if value is None or value == "":
        return None
    try:
        timestamp = pd.Timestamp(value)
    except (TypeError, ValueError):
        return None
    if pd.isna(timestamp):
        return None
    return timestamp.date()


@dataclass(frozen=True)
class ParkingRecord:
    """One parking-fee reimbursement entry.

    ``fee`` is computed once when the record is built from the entry form and
    stored as-is; reads never recompute it.
    """

    location: str
    parking_date: date | None
    person_name: str
    role: str
    bank_account: str
    duration_hours: float
    hourly_rate: float
    fee: float
    is_custom_duration: bool = False
    custom_duration_detail: str = ""
    app_id: str | None = None
    user_id: str | None = None
    created_at: datetime | None = None
    id: str | None = None

    def to_document(self) -> dict[str, Any]:
        """Return the storage document; ``id`` is left to the store."""

        document = asdict(self)
        document.pop("id")
        document["parking_date"] = self.parking_date.isoformat() if self.parking_date else None
        if document["created_at"] is None:
            document.pop("created_at")
        return document

    @classmethod
    def from_document(cls, document: Mapping[str, Any]) -> "ParkingRecord":
        parking_date = _coerce_date(document.get("parking_date"))
        created_at = document.get("created_at")
        return cls(
            location=str(document.get("location") or ""),
            parking_date=parking_date,
            person_name=str(document.get("person_name") or ""),
            role=str(document.get("role") or ""),
            bank_account=str(document.get("bank_account") or ""),
            duration_hours=float(document.get("duration_hours") or 0.0),
            hourly_rate=float(document.get("hourly_rate") or 0.0),
            fee=float(document.get("fee") or 0.0),
            is_custom_duration=bool(document.get("is_custom_duration", False)),
            custom_duration_detail=str(document.get("custom_duration_detail") or ""),
            app_id=document.get("app_id"),
            user_id=document.get("user_id"),
            created_at=pd.Timestamp(created_at).to_pydatetime() if created_at else None,
            id=str(document["id"]) if document.get("id") is not None else None,
        )


@dataclass(frozen=True)
class QueryFilters:
    """Search criteria for the query page.

    ``start`` and ``end`` accept bare dates (expanded to whole days) or
    datetimes (used as given). ``location`` of ``None`` or ``ALL_LOCATIONS``
    disables location filtering.
    """

    name: str | None = None
    start: date | datetime | None = None
    end: date | datetime | None = None
    location: str | None = ALL_LOCATIONS

    @property
    def name_query(self) -> str:
        return (self.name or "").strip()

    @property
    def has_name(self) -> bool:
        return bool(self.name_query)

    @property
    def has_location(self) -> bool:
        return bool(self.location) and self.location != ALL_LOCATIONS


class FeeTotal(TypedDict):
    name: str
    bank_account: str
    total_fee: float


class QueryResult(TypedDict):
    filtered_records: pd.DataFrame
    record_count: int
    total_fee: float
    grouped_totals: dict[str, FeeTotal]
    period_top_location: str
    individual_top_location: str
    top_fee_payers: str


class AutofillProfile(TypedDict):
    """Form values restored from a person's latest record."""

    name: str
    role: str
    bank_name: str
    custom_bank_name: str
    account_number: str


__all__ = [
    "AutofillProfile",
    "FeeTotal",
    "ParkingRecord",
    "QueryFilters",
    "QueryResult",
]

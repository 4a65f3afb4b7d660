"""Filtering, ordering and fee aggregation over fetched parking records."""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, Iterable, Mapping, Union

import pandas as pd

from core.constants import NO_DATA_LABEL
from core.formatting import collation_key, format_count_label, format_currency
from core.models import FeeTotal, ParkingRecord, QueryFilters, QueryResult

__all__ = [
    "RECORD_COLUMNS",
    "aggregate",
    "compute_group_totals",
    "compute_total_fee",
    "effective_timestamp",
    "filter_records",
    "group_key",
    "records_to_frame",
    "sort_records",
    "top_fee_payers",
    "top_locations",
]

RecordLike = Union[ParkingRecord, Mapping[str, Any]]

RECORD_COLUMNS: tuple[str, ...] = (
    "id",
    "location",
    "parking_date",
    "person_name",
    "role",
    "bank_account",
    "duration_hours",
    "hourly_rate",
    "fee",
    "is_custom_duration",
    "custom_duration_detail",
    "created_at",
)
_TEXT_COLUMNS = ("location", "person_name", "role", "bank_account", "custom_duration_detail")
_NUMERIC_COLUMNS = ("duration_hours", "hourly_rate", "fee")
_END_OF_DAY = pd.Timedelta(days=1) - pd.Timedelta(milliseconds=1)


def _as_document(record: RecordLike) -> dict[str, Any]:
    if isinstance(record, ParkingRecord):
        document = record.to_document()
        document["id"] = record.id
        document["created_at"] = record.created_at
        return document
    return dict(record)


def _naive_timestamp(value: Any, timezone: str | None) -> pd.Timestamp:
    """Coerce a stored value to a naive timestamp in ``timezone`` (UTC if unset)."""

    if value is None:
        return pd.NaT
    try:
        timestamp = pd.Timestamp(value)
    except (TypeError, ValueError):
        return pd.NaT
    if pd.isna(timestamp):
        return pd.NaT
    if timestamp.tzinfo is not None:
        timestamp = timestamp.tz_convert(timezone or "UTC").tz_localize(None)
    return timestamp


def effective_timestamp(frame: pd.DataFrame) -> pd.Series:
    """Creation time where recorded, otherwise the parking date at midnight."""

    return frame["created_at"].fillna(frame["parking_date"])


def records_to_frame(records: Iterable[RecordLike], *, timezone: str | None = None) -> pd.DataFrame:
    """Flatten records into a frame with fixed columns and an ``effective_at`` column.

    Missing text fields become empty strings and missing amounts become 0.0,
    so malformed records still take part in filtering. ``effective_at`` is the
    creation timestamp when present, otherwise the parking date at midnight.
    """

    documents = [_as_document(record) for record in records]
    frame = pd.DataFrame(documents, columns=list(RECORD_COLUMNS))

    for column in _TEXT_COLUMNS:
        frame[column] = frame[column].fillna("").astype(str)
    for column in _NUMERIC_COLUMNS:
        frame[column] = pd.to_numeric(frame[column], errors="coerce").fillna(0.0).astype(float)
    frame["is_custom_duration"] = frame["is_custom_duration"].fillna(False).astype(bool)

    frame["parking_date"] = pd.to_datetime(
        frame["parking_date"].map(lambda value: _naive_timestamp(value, timezone))
    ).dt.normalize()
    frame["created_at"] = pd.to_datetime(
        frame["created_at"].map(lambda value: _naive_timestamp(value, timezone))
    )
    frame["effective_at"] = effective_timestamp(frame)
    return frame


def _lower_bound(value: date | datetime, timezone: str | None = None) -> pd.Timestamp:
    if isinstance(value, datetime):
        return _naive_timestamp(value, timezone)
    return pd.Timestamp(value)


def _upper_bound(value: date | datetime, timezone: str | None = None) -> pd.Timestamp:
    if isinstance(value, datetime):
        return _naive_timestamp(value, timezone)
    return pd.Timestamp(value) + _END_OF_DAY


def _name_mask(frame: pd.DataFrame, name_query: str) -> pd.Series:
    needle = name_query.casefold()
    return frame["person_name"].str.casefold().str.contains(needle, regex=False)


def filter_records(
    frame: pd.DataFrame,
    filters: QueryFilters,
    *,
    timezone: str | None = None,
) -> pd.DataFrame:
    """Return rows matching the name, inclusive date range and location filters.

    Aware datetime bounds are converted to ``timezone`` (UTC if unset), the
    same wall clock :func:`records_to_frame` uses for ``effective_at``.
    """

    mask = pd.Series(True, index=frame.index)
    if filters.has_name:
        mask &= _name_mask(frame, filters.name_query)
    if filters.start is not None:
        mask &= frame["effective_at"] >= _lower_bound(filters.start, timezone)
    if filters.end is not None:
        mask &= frame["effective_at"] <= _upper_bound(filters.end, timezone)
    if filters.has_location:
        mask &= frame["location"] == filters.location
    return frame.loc[mask].copy()


def sort_records(frame: pd.DataFrame) -> pd.DataFrame:
    """Order by name under Korean collation, newest first within a name."""

    if frame.empty:
        return frame.reset_index(drop=True)

    names = sorted(set(frame["person_name"]), key=collation_key)
    ranks = {name: rank for rank, name in enumerate(names)}
    ordered = (
        frame.assign(_name_rank=frame["person_name"].map(ranks))
        .sort_values(
            ["_name_rank", "effective_at"],
            ascending=[True, False],
            kind="mergesort",
            na_position="last",
        )
        .drop(columns="_name_rank")
    )
    return ordered.reset_index(drop=True)


def group_key(name: str, bank_account: str) -> str:
    return f"{name} | {bank_account}"


def compute_group_totals(frame: pd.DataFrame) -> dict[str, FeeTotal]:
    """Sum fees per ``(person_name, bank_account)`` pair in first-seen order."""

    totals: dict[str, FeeTotal] = {}
    if frame.empty:
        return totals

    grouped = frame.groupby(["person_name", "bank_account"], sort=False)["fee"].sum()
    for (name, bank_account), total in grouped.items():
        totals[group_key(str(name), str(bank_account))] = {
            "name": str(name),
            "bank_account": str(bank_account),
            "total_fee": float(total),
        }
    return totals


def compute_total_fee(frame: pd.DataFrame) -> float:
    if frame.empty:
        return 0.0
    return float(frame["fee"].sum())


def top_locations(frame: pd.DataFrame, count: int = 1) -> str:
    """Label the ``count`` most used locations, e.g. ``"국민은행 주차장 (3건)"``."""

    if frame.empty:
        return NO_DATA_LABEL

    counts = (
        frame.groupby("location", sort=False)
        .size()
        .sort_values(ascending=False, kind="mergesort")
        .head(count)
    )
    return ", ".join(format_count_label(str(location), int(num)) for location, num in counts.items())


def top_fee_payers(totals: Mapping[str, FeeTotal], count: int = 3) -> str:
    if not totals:
        return NO_DATA_LABEL

    ranked = sorted(totals.values(), key=lambda item: item["total_fee"], reverse=True)
    return ", ".join(
        f"{item['name']} ({format_currency(item['total_fee'])})" for item in ranked[:count]
    )


def aggregate(
    records: Iterable[RecordLike] | pd.DataFrame,
    filters: QueryFilters | None = None,
    *,
    timezone: str | None = None,
) -> QueryResult:
    """Filter, sort and summarise a snapshot of records.

    Accepts raw documents, ``ParkingRecord`` values or a frame already built
    by :func:`records_to_frame`. The grand total is the sum of the group
    totals, so the two always agree exactly.
    """

    filters = filters or QueryFilters()
    frame = records if isinstance(records, pd.DataFrame) else records_to_frame(records, timezone=timezone)

    filtered = sort_records(filter_records(frame, filters, timezone=timezone))
    grouped_totals = compute_group_totals(filtered)
    total_fee = float(sum(item["total_fee"] for item in grouped_totals.values()))

    if filters.has_name:
        individual = top_locations(filtered.loc[_name_mask(filtered, filters.name_query)])
    else:
        individual = NO_DATA_LABEL

    return {
        "filtered_records": filtered,
        "record_count": int(len(filtered)),
        "total_fee": total_fee,
        "grouped_totals": grouped_totals,
        "period_top_location": top_locations(filtered),
        "individual_top_location": individual,
        "top_fee_payers": top_fee_payers(grouped_totals),
    }

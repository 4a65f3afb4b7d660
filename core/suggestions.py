"""Autocomplete lookups for the entry form's name and account fields."""

from __future__ import annotations

import re
from typing import Any, Iterable

import pandas as pd

from core.aggregation import RecordLike, records_to_frame
from core.constants import BANK_NAMES, OTHER_BANK, ROLES
from core.models import AutofillProfile

__all__ = [
    "SUGGESTION_LIMIT",
    "autofill_from_account",
    "autofill_from_name",
    "latest_records_by_name",
    "split_bank_account",
    "suggest_accounts",
    "suggest_names",
]

SUGGESTION_LIMIT = 5
_NON_DIGITS = re.compile(r"\D")


def _rows(records: Iterable[RecordLike] | pd.DataFrame, timezone: str | None) -> list[dict[str, Any]]:
    frame = records if isinstance(records, pd.DataFrame) else records_to_frame(records, timezone=timezone)
    return frame.to_dict(orient="records")


def _is_newer(candidate: pd.Timestamp, current: pd.Timestamp) -> bool:
    if pd.isna(candidate):
        return False
    if pd.isna(current):
        return True
    return candidate > current


def latest_records_by_name(
    records: Iterable[RecordLike] | pd.DataFrame,
    *,
    timezone: str | None = None,
) -> dict[str, dict[str, Any]]:
    """Reduce records to the most recent one per person name.

    Recency is judged on ``effective_at``. On equal timestamps the record seen
    first is kept. The mapping preserves first-seen name order.
    """

    latest: dict[str, dict[str, Any]] = {}
    for row in _rows(records, timezone):
        name = row["person_name"]
        if not name:
            continue
        current = latest.get(name)
        if current is None or _is_newer(row["effective_at"], current["effective_at"]):
            latest[name] = row
    return latest


def split_bank_account(bank_account: str) -> tuple[str, str]:
    """Split ``"<bank>/<digits>"`` into its parts; the account part may be empty."""

    bank, _, account = (bank_account or "").partition("/")
    return bank, account


def suggest_names(
    records: Iterable[RecordLike] | pd.DataFrame,
    partial: str,
    *,
    limit: int = SUGGESTION_LIMIT,
) -> list[str]:
    needle = (partial or "").strip().casefold()
    if not needle:
        return []

    matches = [name for name in latest_records_by_name(records) if needle in name.casefold()]
    return matches[:limit]


def suggest_accounts(
    records: Iterable[RecordLike] | pd.DataFrame,
    partial: str,
    *,
    limit: int = SUGGESTION_LIMIT,
) -> list[str]:
    """Suggest stored ``bank/account`` strings whose account digits contain ``partial``.

    Dashes and other non-digit characters are ignored on both sides.
    """

    needle = _NON_DIGITS.sub("", partial or "")
    if not needle:
        return []

    suggestions: list[str] = []
    for row in latest_records_by_name(records).values():
        bank_account = row["bank_account"]
        _, account = split_bank_account(bank_account)
        if not account or needle not in _NON_DIGITS.sub("", account):
            continue
        if bank_account not in suggestions:
            suggestions.append(bank_account)
        if len(suggestions) >= limit:
            break
    return suggestions


def _profile(row: dict[str, Any]) -> AutofillProfile:
    bank, account = split_bank_account(row["bank_account"])
    known_banks = [name for name in BANK_NAMES if name != OTHER_BANK]
    if bank in known_banks:
        bank_name, custom_bank_name = bank, ""
    else:
        bank_name, custom_bank_name = OTHER_BANK, bank

    return {
        "name": row["person_name"],
        "role": row["role"] or ROLES[0],
        "bank_name": bank_name,
        "custom_bank_name": custom_bank_name,
        "account_number": account.replace("-", ""),
    }


def autofill_from_name(
    records: Iterable[RecordLike] | pd.DataFrame,
    name: str,
) -> AutofillProfile | None:
    """Return form values from the latest record stored under ``name``."""

    row = latest_records_by_name(records).get(name)
    if row is None:
        return None
    return _profile(row)


def autofill_from_account(
    records: Iterable[RecordLike] | pd.DataFrame,
    bank_account: str,
) -> AutofillProfile | None:
    for row in latest_records_by_name(records).values():
        if row["bank_account"] == bank_account:
            return _profile(row)
    return None

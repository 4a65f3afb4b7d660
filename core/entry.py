"""Validation of entry-form input into storable parking records."""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date

from core.constants import (
    CUSTOM_DURATION,
    DEFAULT_DURATION,
    DEFAULT_HOURLY_RATE,
    OTHER_BANK,
    PARKING_LOCATIONS,
    ROLES,
)
from core.models import ParkingRecord

__all__ = [
    "EntryForm",
    "RecordValidationError",
    "build_record",
    "parse_duration",
    "parse_hourly_rate",
]


class RecordValidationError(ValueError):
    """Raised when entry-form input cannot become a parking record."""


@dataclass(frozen=True)
class EntryForm:
    """Raw values as typed into the entry form."""

    location: str
    parking_date: date
    name: str
    role: str
    bank_name: str
    account_number: str
    custom_bank_name: str = ""
    duration_option: str = DEFAULT_DURATION
    custom_duration: str = ""
    hourly_rate: str = str(int(DEFAULT_HOURLY_RATE))


def _parse_float(raw: str) -> float | None:
    """Parse a typed number; blanks, junk and non-finite values yield ``None``."""

    try:
        value = float(str(raw).strip())
    except (TypeError, ValueError):
        return None
    if not math.isfinite(value):
        return None
    return value


def parse_duration(option: str, custom_value: str = "") -> float:
    """Return the duration in hours for a preset or free-entry option.

    Unparseable free entries yield 0.0, which callers reject.
    """

    if option == CUSTOM_DURATION:
        return _parse_float(custom_value) or 0.0
    return _parse_float(option) or 0.0


def parse_hourly_rate(raw: str) -> float:
    """Parse the hourly rate, falling back to the default when blank or invalid."""

    value = _parse_float(raw)
    if not value:
        return DEFAULT_HOURLY_RATE
    return value


def build_record(
    form: EntryForm,
    *,
    user_id: str | None = None,
    app_id: str | None = None,
) -> ParkingRecord:
    """Validate ``form`` and compute the stored fee.

    Raises
    ------
    RecordValidationError
        With a user-facing message when any field is missing or invalid.
    """

    name = form.name.strip()
    if not name:
        raise RecordValidationError("이름을 입력해주세요.")
    if form.location not in PARKING_LOCATIONS:
        raise RecordValidationError("주차 장소를 선택해주세요.")
    if form.role not in ROLES:
        raise RecordValidationError("직분을 선택해주세요.")

    duration_hours = parse_duration(form.duration_option, form.custom_duration)
    if duration_hours <= 0:
        raise RecordValidationError("유효한 주차 시간을 입력해주세요.")

    hourly_rate = parse_hourly_rate(form.hourly_rate)
    if hourly_rate <= 0:
        raise RecordValidationError("유효한 시간당 주차 요금을 입력해주세요.")

    bank_name = form.custom_bank_name.strip() if form.bank_name == OTHER_BANK else form.bank_name
    if form.bank_name == OTHER_BANK and not bank_name:
        raise RecordValidationError("기타 은행명을 입력해주세요.")

    account_number = form.account_number.replace("-", "").strip()
    if not account_number:
        raise RecordValidationError("계좌번호를 입력해주세요.")

    is_custom = form.duration_option == CUSTOM_DURATION
    return ParkingRecord(
        location=form.location,
        parking_date=form.parking_date,
        person_name=name,
        role=form.role,
        bank_account=f"{bank_name}/{account_number}",
        duration_hours=duration_hours,
        hourly_rate=hourly_rate,
        fee=duration_hours * hourly_rate,
        is_custom_duration=is_custom,
        custom_duration_detail=form.custom_duration.strip() if is_custom else "",
        app_id=app_id,
        user_id=user_id,
    )

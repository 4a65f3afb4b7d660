"""CSV export of query results."""

from __future__ import annotations

from datetime import date

import pandas as pd

from core.formatting import collation_key, format_currency, format_duration
from core.models import QueryResult

__all__ = ["DETAIL_HEADERS", "TOTAL_HEADERS", "build_csv_export", "export_filename"]

DETAIL_HEADERS: tuple[str, ...] = (
    "날짜",
    "이름",
    "직분",
    "주차장소",
    "주차시간(시간)",
    "시간당요금(원)",
    "계산된요금(원)",
    "계좌정보",
)
TOTAL_HEADERS: tuple[str, ...] = ("이름", "계좌정보", "해당 기간 주차비 합계")
_LINE_END = "\r\n"
_BOM = "\ufeff"


def _plain_number(value: float) -> str:
    value = float(value)
    return str(int(value)) if value == int(value) else f"{value:g}"


def _to_csv(frame: pd.DataFrame, *, header: bool = True) -> str:
    return frame.to_csv(index=False, header=header, lineterminator=_LINE_END)


def _detail_frame(records: pd.DataFrame) -> pd.DataFrame:
    rows = []
    for record in records.to_dict(orient="records"):
        parking_date = record["parking_date"]
        detail = record["custom_duration_detail"] if record["is_custom_duration"] else None
        rows.append(
            [
                "" if pd.isna(parking_date) else parking_date.strftime("%Y-%m-%d"),
                record["person_name"],
                record["role"],
                record["location"],
                format_duration(record["duration_hours"], detail),
                _plain_number(record["hourly_rate"]),
                _plain_number(record["fee"]),
                record["bank_account"],
            ]
        )
    return pd.DataFrame(rows, columns=list(DETAIL_HEADERS))


def build_csv_export(result: QueryResult) -> str:
    """Render the filtered records, grand total and per-person totals as CSV text.

    The text starts with a byte-order mark and uses CRLF line endings so that
    spreadsheet applications open Korean text correctly.
    """

    records = result["filtered_records"]
    if records.empty:
        raise ValueError("다운로드할 데이터가 없습니다.")

    sections = [_BOM, _to_csv(_detail_frame(records)), _LINE_END]
    total_line = pd.DataFrame([["총 주차비용 합계:", format_currency(result["total_fee"])]])
    sections.append(_to_csv(total_line, header=False))
    sections.append(_LINE_END)

    totals = list(result["grouped_totals"].values())
    if totals:
        totals.sort(key=lambda item: (collation_key(item["name"]), collation_key(item["bank_account"])))
        total_frame = pd.DataFrame(
            [[item["name"], item["bank_account"], _plain_number(item["total_fee"])] for item in totals],
            columns=list(TOTAL_HEADERS),
        )
        sections.append(_to_csv(total_frame))

    return "".join(sections)


def export_filename(today: date) -> str:
    return f"주차정산내역_{today.isoformat()}.csv"

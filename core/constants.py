"""Fixed vocabularies used by the parking entry form and queries."""

from __future__ import annotations

from typing import Final

from core.formatting import collation_key

PARKING_LOCATIONS: Final[tuple[str, ...]] = (
    "어린이회관 주차장1",
    "어린이회관 주차장2",
    "세종대 대양AI센터 주차장",
    "국민은행 주차장",
    "교회 뒷편 세종대 주차장",
    "광진광장 공영주차장",
)
ALL_LOCATIONS: Final[str] = "ALL_PARKING_LOCATIONS"

ROLES: Final[tuple[str, ...]] = ("청년", "성도", "집사", "권사", "장로", "목사")

OTHER_BANK: Final[str] = "기타"
BANK_NAMES: Final[tuple[str, ...]] = tuple(
    sorted(
        (
            "우리",
            "기업",
            "산업",
            "국민",
            "농협",
            "하나",
            "신한",
            "한국씨티",
            "토스뱅크",
            "케이뱅크",
            "카카오뱅크",
            "수협",
            "외환",
            "SC제일",
        ),
        key=collation_key,
    )
) + (OTHER_BANK,)

DEFAULT_HOURLY_RATE: Final[float] = 3000.0
DURATION_PRESETS: Final[tuple[str, ...]] = tuple(str(hour) for hour in range(1, 13))
CUSTOM_DURATION: Final[str] = "custom"
DEFAULT_DURATION: Final[str] = "4"

NO_DATA_LABEL: Final[str] = "데이터 없음"

__all__ = [
    "ALL_LOCATIONS",
    "BANK_NAMES",
    "CUSTOM_DURATION",
    "DEFAULT_DURATION",
    "DEFAULT_HOURLY_RATE",
    "DURATION_PRESETS",
    "NO_DATA_LABEL",
    "OTHER_BANK",
    "PARKING_LOCATIONS",
    "ROLES",
]

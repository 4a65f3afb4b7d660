"""Tests for record filtering, ordering and fee aggregation."""

from __future__ import annotations

import copy
from datetime import date, datetime, timezone

import pandas as pd
import pytest

from core.aggregation import (
    aggregate,
    compute_group_totals,
    compute_total_fee,
    effective_timestamp,
    filter_records,
    records_to_frame,
    top_fee_payers,
    top_locations,
)
from core.constants import ALL_LOCATIONS, NO_DATA_LABEL
from core.models import ParkingRecord, QueryFilters


def _names(result) -> list[str]:
    return result["filtered_records"]["person_name"].tolist()


def test_reference_scenario_totals_and_top_location(sample_records):
    result = aggregate(sample_records)

    assert result["total_fee"] == pytest.approx(10000.0)
    assert result["record_count"] == 3
    assert result["grouped_totals"]["Kim | 국민/111-222"]["total_fee"] == pytest.approx(9000.0)
    assert result["grouped_totals"]["Lee | 신한/333444"] == {
        "name": "Lee",
        "bank_account": "신한/333444",
        "total_fee": 1000.0,
    }
    assert result["period_top_location"] == "A (2건)"
    assert result["top_fee_payers"] == "Kim (9,000원), Lee (1,000원)"


def test_sorted_by_name_then_newest_first(sample_records):
    result = aggregate(sample_records)

    assert result["filtered_records"]["id"].tolist() == ["r2", "r1", "r3"]


@pytest.mark.parametrize(
    "fees",
    [
        [],
        [0.1, 0.2, 0.3],
        [3000.0, 4500.5, 1.1 * 3000, 7.0],
        [None, 2500.0, float("nan")],
    ],
)
def test_grand_total_matches_group_totals(fees):
    records = [
        {"person_name": f"p{index % 2}", "bank_account": f"b/{index % 3}", "location": "A", "fee": fee}
        for index, fee in enumerate(fees)
    ]

    result = aggregate(records)

    assert result["total_fee"] == sum(item["total_fee"] for item in result["grouped_totals"].values())


def test_all_locations_sentinel_equals_no_location_filter(sample_records):
    with_sentinel = aggregate(sample_records, QueryFilters(location=ALL_LOCATIONS))
    without = aggregate(sample_records, QueryFilters(location=None))

    assert with_sentinel["filtered_records"]["id"].tolist() == without["filtered_records"]["id"].tolist()
    assert with_sentinel["total_fee"] == without["total_fee"]


def test_location_filter_is_exact(sample_records):
    result = aggregate(sample_records, QueryFilters(location="B"))

    assert _names(result) == ["Lee"]
    assert result["period_top_location"] == "B (1건)"


@pytest.mark.parametrize(
    "filters",
    [QueryFilters(), QueryFilters(name="kim"), QueryFilters(location="A")],
)
def test_empty_input_yields_zero_and_no_data_labels(filters):
    result = aggregate([], filters)

    assert result["total_fee"] == 0
    assert result["grouped_totals"] == {}
    assert result["period_top_location"] == NO_DATA_LABEL
    assert result["individual_top_location"] == NO_DATA_LABEL
    assert result["filtered_records"].empty


def test_filter_that_matches_nothing_yields_no_data(sample_records):
    result = aggregate(sample_records, QueryFilters(name="nobody"))

    assert result["total_fee"] == 0
    assert result["grouped_totals"] == {}
    assert result["period_top_location"] == NO_DATA_LABEL
    assert result["individual_top_location"] == NO_DATA_LABEL


def test_name_filter_is_case_insensitive_substring(sample_records):
    result = aggregate(sample_records, QueryFilters(name="ki"))

    assert _names(result) == ["Kim", "Kim"]
    assert result["individual_top_location"] == "A (2건)"


def test_individual_top_location_requires_name_filter(sample_records):
    result = aggregate(sample_records)

    assert result["individual_top_location"] == NO_DATA_LABEL


def test_bare_date_bounds_cover_whole_days():
    records = [
        {"id": "before", "person_name": "a", "created_at": datetime(2023, 12, 31, 23, 59, 59)},
        {"id": "first", "person_name": "a", "created_at": datetime(2024, 1, 1, 0, 0, 0)},
        {"id": "last", "person_name": "a", "created_at": datetime(2024, 1, 31, 23, 59, 59, 500000)},
        {"id": "after", "person_name": "a", "created_at": datetime(2024, 2, 1, 0, 0, 0)},
    ]

    result = aggregate(records, QueryFilters(start=date(2024, 1, 1), end=date(2024, 1, 31)))

    assert sorted(result["filtered_records"]["id"]) == ["first", "last"]


def test_datetime_bounds_are_used_as_given():
    records = [
        {"id": "morning", "person_name": "a", "created_at": datetime(2024, 1, 1, 9, 0)},
        {"id": "evening", "person_name": "a", "created_at": datetime(2024, 1, 1, 20, 0)},
    ]

    result = aggregate(records, QueryFilters(end=datetime(2024, 1, 1, 12, 0)))

    assert result["filtered_records"]["id"].tolist() == ["morning"]


def test_creation_time_takes_precedence_over_parking_date():
    records = [
        {
            "id": "late-entry",
            "person_name": "a",
            "parking_date": "2024-01-05",
            "created_at": datetime(2024, 2, 10, 10, 0),
        },
        {"id": "date-only", "person_name": "a", "parking_date": "2024-02-03"},
    ]

    february = aggregate(records, QueryFilters(start=date(2024, 2, 1), end=date(2024, 2, 29)))
    january = aggregate(records, QueryFilters(start=date(2024, 1, 1), end=date(2024, 1, 31)))

    assert sorted(february["filtered_records"]["id"]) == ["date-only", "late-entry"]
    assert january["filtered_records"].empty


def test_aware_timestamps_are_compared_in_configured_timezone():
    records = [
        {"id": "r", "person_name": "a", "created_at": datetime(2024, 1, 31, 16, 0, tzinfo=timezone.utc)},
    ]
    filters = QueryFilters(start=date(2024, 2, 1), end=date(2024, 2, 1))

    assert aggregate(records, filters, timezone="Asia/Seoul")["record_count"] == 1
    assert aggregate(records, filters)["record_count"] == 0


def test_aware_bounds_use_the_same_timezone_as_records():
    records = [
        {"id": "r", "person_name": "a", "created_at": datetime(2024, 1, 31, 16, 30, tzinfo=timezone.utc)},
    ]
    before = QueryFilters(end=datetime(2024, 1, 31, 17, 0, tzinfo=timezone.utc))
    after = QueryFilters(start=datetime(2024, 1, 31, 16, 45, tzinfo=timezone.utc))

    assert aggregate(records, before, timezone="Asia/Seoul")["record_count"] == 1
    assert aggregate(records, after, timezone="Asia/Seoul")["record_count"] == 0
    assert aggregate(records, before)["record_count"] == 1

    frame = records_to_frame(records, timezone="Asia/Seoul")
    assert len(filter_records(frame, before, timezone="Asia/Seoul")) == 1


def test_korean_names_follow_dictionary_order():
    records = [
        {"person_name": "다", "fee": 1},
        {"person_name": "가", "fee": 1},
        {"person_name": "나", "fee": 1},
    ]

    assert _names(aggregate(records)) == ["가", "나", "다"]


def test_latin_names_sort_case_insensitively_after_hangul():
    records = [
        {"person_name": "bob"},
        {"person_name": "Alice"},
        {"person_name": "홍길동"},
    ]

    assert _names(aggregate(records)) == ["홍길동", "Alice", "bob"]


def test_missing_fee_counts_as_zero_but_is_still_listed():
    records = [
        {"id": "paid", "person_name": "Kim", "bank_account": "x/1", "fee": 5000},
        {"id": "unpaid", "person_name": "Kim", "bank_account": "x/1"},
    ]

    result = aggregate(records, QueryFilters(name="kim"))

    assert result["record_count"] == 2
    assert result["total_fee"] == pytest.approx(5000.0)


def test_malformed_records_do_not_raise():
    records = [{}, {"person_name": None, "parking_date": "not-a-date", "fee": "oops"}]

    result = aggregate(records, QueryFilters(start=date(2024, 1, 1)))

    assert result["record_count"] == 0
    assert aggregate(records)["record_count"] == 2


def test_aggregate_is_repeatable_and_does_not_mutate_input(sample_records):
    snapshot = copy.deepcopy(sample_records)

    first = aggregate(sample_records, QueryFilters(name="k"))
    second = aggregate(sample_records, QueryFilters(name="k"))

    assert sample_records == snapshot
    pd.testing.assert_frame_equal(first["filtered_records"], second["filtered_records"])
    assert first["grouped_totals"] == second["grouped_totals"]


def test_accepts_parking_record_values():
    record = ParkingRecord(
        location="국민은행 주차장",
        parking_date=date(2024, 5, 5),
        person_name="이권사",
        role="권사",
        bank_account="농협/3020",
        duration_hours=2,
        hourly_rate=3000,
        fee=6000,
        id="abc",
    )

    result = aggregate([record], QueryFilters(start=date(2024, 5, 5), end=date(2024, 5, 5)))

    assert result["filtered_records"]["id"].tolist() == ["abc"]
    assert result["total_fee"] == pytest.approx(6000.0)


def test_top_locations_orders_ties_by_first_appearance():
    frame = records_to_frame(
        [
            {"location": "B"},
            {"location": "A"},
            {"location": "A"},
            {"location": "B"},
            {"location": "C"},
        ]
    )

    assert top_locations(frame, count=2) == "B (2건), A (2건)"
    assert top_locations(frame.iloc[0:0]) == NO_DATA_LABEL


def test_top_fee_payers_limits_count():
    frame = records_to_frame(
        [
            {"person_name": name, "bank_account": "b/1", "fee": fee}
            for name, fee in [("a", 1), ("b", 5), ("c", 3), ("d", 4)]
        ]
    )

    totals = compute_group_totals(frame)

    assert top_fee_payers(totals) == "b (5원), d (4원), c (3원)"
    assert top_fee_payers({}) == NO_DATA_LABEL
    assert compute_total_fee(frame) == pytest.approx(13.0)


def test_filter_records_keeps_rows_without_timestamp_when_no_range():
    frame = records_to_frame([{"person_name": "a"}])

    assert len(filter_records(frame, QueryFilters())) == 1
    assert filter_records(frame, QueryFilters(end=date(2030, 1, 1))).empty


def test_effective_timestamp_prefers_creation_time():
    frame = records_to_frame(
        [
            {"parking_date": "2024-01-05", "created_at": datetime(2024, 2, 10, 10, 0)},
            {"parking_date": "2024-01-05"},
            {},
        ]
    )

    stamps = effective_timestamp(frame).tolist()

    assert stamps[0] == pd.Timestamp(2024, 2, 10, 10, 0)
    assert stamps[1] == pd.Timestamp(2024, 1, 5)
    assert pd.isna(stamps[2])

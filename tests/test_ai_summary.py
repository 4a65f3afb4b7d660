"""Tests for the AI summary request and client handling."""

from __future__ import annotations

import json
from datetime import date
from types import SimpleNamespace
from typing import Any, cast

import httpx
import pytest
from openai import APIError, OpenAI

from app.pages.query import summary_html
from config.settings import OpenAISettings
from core.aggregation import aggregate
from core.ai.summary import AISummaryError, build_ai_summary_request, generate_ai_summary
from core.models import QueryFilters


class RecordingClient:
    """Mimics ``client.chat.completions.create`` and keeps the call arguments."""

    def __init__(self, content: str = "", error: Exception | None = None) -> None:
        self.calls: list[dict[str, Any]] = []
        self._content = content
        self._error = error
        self.chat = SimpleNamespace(completions=SimpleNamespace(create=self._create))

    def _create(self, **kwargs: Any):
        self.calls.append(kwargs)
        if self._error is not None:
            raise self._error
        return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=self._content))])


def test_request_payload_includes_search_conditions(sample_records):
    filters = QueryFilters(start=date(2024, 1, 1), end=date(2024, 1, 31), location="A")
    request = build_ai_summary_request(aggregate(sample_records, filters), filters, model="test-model")

    assert request.model == "test-model"
    assert request.period_label == "2024-01-01 ~ 2024-01-31"
    payload = request.payload
    assert payload["search_conditions"] == {"name": "전체", "period": request.period_label, "location": "A"}
    assert payload["record_count"] == 2
    assert payload["total_fee"] == "9,000원"
    assert payload["period_top_location"] == "A (2건)"
    assert payload["settlements"] == [
        {"name": "Kim", "bank_account": "국민/111-222", "total_fee": "9,000원"}
    ]
    assert payload["has_more_settlements"] is False
    assert "individual_top_location" not in payload


def test_request_payload_adds_individual_location_for_name_search(sample_records):
    filters = QueryFilters(name="lee")
    request = build_ai_summary_request(aggregate(sample_records, filters), filters)

    assert request.payload["search_conditions"]["name"] == "lee"
    assert request.payload["individual_top_location"] == "B (1건)"
    assert request.period_label == "전체 시작일 ~ 전체 종료일"


def test_settlement_preview_is_truncated():
    records = [{"person_name": f"p{index}", "bank_account": "b/1", "fee": 100} for index in range(7)]
    filters = QueryFilters()

    payload = build_ai_summary_request(aggregate(records, filters), filters).payload

    assert len(payload["settlements"]) == 5
    assert payload["has_more_settlements"] is True


def test_generate_ai_summary_sends_prompts_and_normalises_lines(sample_records):
    filters = QueryFilters()
    client = RecordingClient(content="- 첫째 줄\n\n• 둘째 줄\n셋째 줄  ")

    lines = generate_ai_summary(
        aggregate(sample_records, filters),
        filters,
        settings=OpenAISettings(model="test-model"),
        client_factory=lambda: cast(OpenAI, client),
    )

    assert lines == ["첫째 줄", "둘째 줄", "셋째 줄"]
    call = client.calls[0]
    assert call["model"] == "test-model"
    system, user = call["messages"]
    assert system["role"] == "system" and "주차 정산" in system["content"]
    assert user["role"] == "user"
    payload = json.loads(user["content"].split("Data (JSON):", 1)[1])
    assert payload["total_fee"] == "10,000원"


def test_generate_ai_summary_rejects_empty_result():
    filters = QueryFilters()
    client = RecordingClient(content="unused")

    with pytest.raises(AISummaryError):
        generate_ai_summary(aggregate([], filters), filters, client_factory=lambda: cast(OpenAI, client))

    assert client.calls == []


def test_generate_ai_summary_requires_api_key(sample_records):
    filters = QueryFilters()

    with pytest.raises(AISummaryError, match="API key"):
        generate_ai_summary(aggregate(sample_records, filters), filters, settings=OpenAISettings(api_key=None))


def test_generate_ai_summary_wraps_api_errors(sample_records):
    filters = QueryFilters()
    request = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")
    client = RecordingClient(error=APIError("boom", request, body=None))

    with pytest.raises(AISummaryError, match="AI 분석 서비스 호출 실패"):
        generate_ai_summary(
            aggregate(sample_records, filters),
            filters,
            settings=OpenAISettings(),
            client_factory=lambda: cast(OpenAI, client),
        )


def test_blank_model_output_is_an_error(sample_records):
    filters = QueryFilters()
    client = RecordingClient(content="  \n ")

    with pytest.raises(AISummaryError, match="비어"):
        generate_ai_summary(
            aggregate(sample_records, filters),
            filters,
            settings=OpenAISettings(),
            client_factory=lambda: cast(OpenAI, client),
        )


def test_summary_markup_escapes_model_output():
    markup = summary_html(["<script>alert(1)</script>", "총액 10,000원 & 3건"])

    assert "<script>" not in markup
    assert "&lt;script&gt;alert(1)&lt;/script&gt;" in markup
    assert "<li>총액 10,000원 &amp; 3건</li>" in markup
    assert markup.startswith("<ul class='ps-summary'>")

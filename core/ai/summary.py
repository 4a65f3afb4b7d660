"""AI-assisted natural-language summaries of parking query results."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from datetime import date
from typing import Any, Callable, Mapping

from openai import APIError, OpenAI

from config.settings import DEFAULT_OPENAI_MODEL, OpenAISettings, get_settings
from core.constants import NO_DATA_LABEL
from core.formatting import format_currency
from core.models import QueryFilters, QueryResult
from prompts import get_prompt_text, render_prompt

PROMPT_SUMMARY = "summary"
PROMPT_REQUEST = "summary_request"
MAX_OUTPUT_TOKENS = 800
SETTLEMENT_PREVIEW = 5

logger = logging.getLogger(__name__)

__all__ = [
    "AISummaryError",
    "AISummaryRequest",
    "build_ai_summary_request",
    "generate_ai_summary",
]


class AISummaryError(RuntimeError):
    """Raised when the AI summary cannot be generated."""


@dataclass(frozen=True, slots=True)
class AISummaryRequest:
    payload: Mapping[str, Any]
    period_label: str
    model: str


def _resolve_openai_client(settings: OpenAISettings) -> OpenAI:
    if not settings.api_key:
        raise AISummaryError(
            "Missing OpenAI API key. Add it to .streamlit/secrets.toml under [openai]."
        )
    return OpenAI(**settings.client_kwargs)


def _format_bound(value: date | None, fallback: str) -> str:
    if value is None:
        return fallback
    return value.isoformat()


def _period_label(filters: QueryFilters) -> str:
    start = _format_bound(filters.start, "전체 시작일")
    end = _format_bound(filters.end, "전체 종료일")
    return f"{start} ~ {end}"


def build_ai_summary_request(
    result: QueryResult,
    filters: QueryFilters,
    *,
    model: str = DEFAULT_OPENAI_MODEL,
) -> AISummaryRequest:
    """Condense a query result into the JSON payload sent to the model."""

    totals = list(result["grouped_totals"].values())
    settlements = [
        {
            "name": item["name"],
            "bank_account": item["bank_account"],
            "total_fee": format_currency(item["total_fee"]),
        }
        for item in totals[:SETTLEMENT_PREVIEW]
    ]

    period_label = _period_label(filters)
    payload: dict[str, Any] = {
        "search_conditions": {
            "name": filters.name_query or "전체",
            "period": period_label,
            "location": filters.location if filters.has_location else "전체",
        },
        "record_count": result["record_count"],
        "total_fee": format_currency(result["total_fee"]),
        "period_top_location": result["period_top_location"] or NO_DATA_LABEL,
        "settlements": settlements,
        "has_more_settlements": len(totals) > SETTLEMENT_PREVIEW,
        "top_fee_payers": result["top_fee_payers"] or NO_DATA_LABEL,
    }
    if filters.has_name:
        payload["individual_top_location"] = result["individual_top_location"]

    return AISummaryRequest(payload=payload, period_label=period_label, model=model)


def generate_ai_summary(
    result: QueryResult,
    filters: QueryFilters,
    *,
    settings: OpenAISettings | None = None,
    client_factory: Callable[[], OpenAI] | None = None,
) -> list[str]:
    if result["record_count"] == 0:
        raise AISummaryError("분석할 데이터가 없습니다. 먼저 데이터를 검색해주세요.")

    settings = settings or get_settings().openai
    request = build_ai_summary_request(result, filters, model=settings.model)
    client = client_factory() if client_factory else _resolve_openai_client(settings)

    system_prompt = get_prompt_text(PROMPT_SUMMARY)
    user_message = render_prompt(
        PROMPT_REQUEST,
        period=request.period_label,
        payload=_format_payload(request.payload),
    )

    logger.info("Requesting AI summary for %d records with %s", result["record_count"], request.model)
    try:
        response = client.chat.completions.create(
            model=request.model,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_message},
            ],
            max_tokens=MAX_OUTPUT_TOKENS,
            temperature=0.3,
        )
    except APIError as exc:
        logger.warning("OpenAI API error during summary: %s", exc)
        raise AISummaryError(f"AI 분석 서비스 호출 실패: {exc}") from exc

    try:
        text = response.choices[0].message.content or ""
    except (AttributeError, IndexError) as exc:  # pragma: no cover - unexpected SDK output
        raise AISummaryError("AI 분석 결과를 가져오지 못했습니다. 응답 형식이 올바르지 않습니다.") from exc

    lines = _normalise_output(text)
    if not lines:
        raise AISummaryError("AI 분석 결과가 비어 있습니다.")

    return lines


def _format_payload(payload: Mapping[str, Any]) -> str:
    return json.dumps(payload, ensure_ascii=False, indent=2)


def _normalise_output(response_text: str) -> list[str]:
    normalized: list[str] = []
    for line in response_text.splitlines():
        stripped = line.strip()
        if not stripped:
            continue
        if stripped.startswith("- ") or stripped.startswith("• "):
            stripped = stripped[2:].strip()
        normalized.append(stripped)
    return normalized

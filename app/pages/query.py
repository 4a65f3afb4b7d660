"""Query, export and summary page."""

from __future__ import annotations

import html
import logging
from datetime import date

import pandas as pd
import streamlit as st

from app.context import AppContext
from app.layout import card
from core.aggregation import aggregate
from core.ai.summary import AISummaryError, generate_ai_summary
from core.constants import ALL_LOCATIONS, PARKING_LOCATIONS
from core.export import build_csv_export, export_filename
from core.formatting import format_currency, format_duration
from core.models import QueryFilters, QueryResult
from storage import RecordStoreError
from visualization import build_location_chart, build_payer_chart

logger = logging.getLogger(__name__)

_FILTERS_KEY = "query_filters"
_MESSAGE_KEY = "query_message"
_TABLE_KEY = "query_table"


def _render_filter_form() -> QueryFilters | None:
    """Render the search form; return new filters when it is submitted."""

    with st.form("query_form"):
        name = st.text_input("이름", placeholder="이름 일부만 입력해도 검색됩니다")
        start_col, end_col = st.columns(2)
        start = start_col.date_input("시작일", value=None)
        end = end_col.date_input("종료일", value=None)
        location = st.selectbox(
            "주차 장소",
            (ALL_LOCATIONS, *PARKING_LOCATIONS),
            format_func=lambda value: "전체" if value == ALL_LOCATIONS else value,
        )
        submitted = st.form_submit_button("검색", type="primary", use_container_width=True)

    if not submitted:
        return None
    return QueryFilters(name=name, start=start, end=end, location=location)


def _display_frame(records: pd.DataFrame) -> pd.DataFrame:
    rows = []
    for record in records.to_dict(orient="records"):
        parking_date = record["parking_date"]
        detail = record["custom_duration_detail"] if record["is_custom_duration"] else None
        rows.append(
            {
                "날짜": "" if pd.isna(parking_date) else parking_date.strftime("%Y-%m-%d"),
                "이름": record["person_name"],
                "직분": record["role"],
                "주차장소": record["location"],
                "주차시간": format_duration(record["duration_hours"], detail),
                "요금": format_currency(record["fee"]),
                "계좌정보": record["bank_account"],
            }
        )
    return pd.DataFrame(rows)


def _render_metrics(result: QueryResult, filters: QueryFilters) -> None:
    metric_cols = st.columns(3)
    metric_cols[0].metric("검색 건수", f"{result['record_count']}건")
    metric_cols[1].metric("총 주차비용 합계", format_currency(result["total_fee"]))
    metric_cols[2].metric("기간 최다 이용 장소", result["period_top_location"])
    if filters.has_name:
        st.caption(f"{filters.name_query}님 최다 이용 장소 · {result['individual_top_location']}")
    st.caption(f"주차비 상위 정산자 · {result['top_fee_payers']}")


def _render_records_table(context: AppContext, result: QueryResult) -> None:
    records = result["filtered_records"]
    event = st.dataframe(
        _display_frame(records),
        hide_index=True,
        use_container_width=True,
        on_select="rerun",
        selection_mode="multi-row",
        key=_TABLE_KEY,
    )
    selected_rows = list(event.selection.rows) if event is not None else []
    if not selected_rows:
        st.caption("삭제할 항목을 표에서 선택하세요.")
        return

    selected_ids = [str(records.iloc[row]["id"]) for row in selected_rows]
    st.warning(f"선택한 {len(selected_ids)}건을 삭제하면 되돌릴 수 없습니다.")
    confirmed = st.checkbox("삭제를 확인합니다", key="confirm_delete")
    if st.button("선택 항목 삭제", disabled=not confirmed):
        _delete_records(context, selected_ids)


def _delete_records(context: AppContext, record_ids: list[str]) -> None:
    try:
        if len(record_ids) == 1:
            deleted = int(context.store.delete(record_ids[0]))
        else:
            deleted = context.store.delete_many(record_ids)
    except RecordStoreError as exc:
        st.error(str(exc))
        return

    st.session_state[_MESSAGE_KEY] = f"{deleted}건이 성공적으로 삭제되었습니다."
    st.session_state.pop("confirm_delete", None)
    st.session_state.pop(_TABLE_KEY, None)
    context.invalidate_records()
    st.rerun()


def _render_group_totals(result: QueryResult) -> None:
    totals = list(result["grouped_totals"].values())
    frame = pd.DataFrame(
        [
            {"이름": item["name"], "계좌정보": item["bank_account"], "주차비 합계": format_currency(item["total_fee"])}
            for item in totals
        ]
    )
    st.dataframe(frame, hide_index=True, use_container_width=True)


def _summary_cache_key(filters: QueryFilters, result: QueryResult) -> str:
    return f"ai_summary::{filters!r}::{result['record_count']}::{result['total_fee']}"


def summary_html(lines: list[str]) -> str:
    """Render model output as an escaped bullet list."""

    items = "".join(f"<li>{html.escape(line)}</li>" for line in lines)
    return f"<ul class='ps-summary'>{items}</ul>"


def _render_ai_summary(context: AppContext, result: QueryResult, filters: QueryFilters) -> None:
    cache_key = _summary_cache_key(filters, result)
    if st.button("AI 요약 생성", key="ai_summary_button"):
        with st.spinner("AI가 정산 내역을 분석 중입니다…"):
            try:
                st.session_state[cache_key] = generate_ai_summary(
                    result,
                    filters,
                    settings=context.settings.openai,
                )
            except AISummaryError as exc:
                st.info(f"AI 요약을 사용할 수 없습니다: {exc}")

    lines = st.session_state.get(cache_key)
    if lines:
        st.markdown(summary_html(lines), unsafe_allow_html=True)
        st.code("\n".join(lines), language=None)


def render_page(context: AppContext) -> None:
    """Render the query page."""

    st.title("주차 정산 조회")

    with card("검색 조건"):
        submitted = _render_filter_form()

    if submitted is not None:
        st.session_state[_FILTERS_KEY] = submitted
        st.session_state.pop(_TABLE_KEY, None)
        context.invalidate_records()

    filters: QueryFilters | None = st.session_state.get(_FILTERS_KEY)
    if filters is None:
        st.info("검색 조건을 입력하고 검색 버튼을 누르세요.")
        return

    try:
        records = context.records()
    except RecordStoreError as exc:
        st.error(f"조회 오류: {exc}")
        return

    result = aggregate(records, filters, timezone=context.settings.app.timezone)

    message = st.session_state.pop(_MESSAGE_KEY, None)
    if message:
        st.success(message)

    with card("검색 결과", suffix=f"{result['record_count']}건"):
        _render_metrics(result, filters)
        if result["record_count"] == 0:
            st.info("검색 결과가 없습니다.")
            return
        _render_records_table(context, result)

    with card("이름별 정산 합계"):
        _render_group_totals(result)
        st.download_button(
            "CSV 다운로드",
            data=build_csv_export(result).encode("utf-8"),
            file_name=export_filename(date.today()),
            mime="text/csv",
        )

    location_col, payer_col = st.columns(2, gap="medium")
    with location_col:
        with card("주차 장소별 이용 건수"):
            st.plotly_chart(build_location_chart(result["filtered_records"]), use_container_width=True)
    with payer_col:
        with card("정산 금액 상위"):
            st.plotly_chart(build_payer_chart(result["grouped_totals"]), use_container_width=True)

    with card("AI 요약", suffix="Beta"):
        _render_ai_summary(context, result, filters)


__all__ = ["render_page", "summary_html"]

"""Parking entry form page."""

from __future__ import annotations

import logging
from datetime import date
from typing import Any, Callable, Sequence

import streamlit as st

from app.context import AppContext
from app.layout import card
from core.aggregation import RecordLike
from core.constants import (
    BANK_NAMES,
    CUSTOM_DURATION,
    DEFAULT_DURATION,
    DEFAULT_HOURLY_RATE,
    DURATION_PRESETS,
    OTHER_BANK,
    PARKING_LOCATIONS,
    ROLES,
)
from core.entry import EntryForm, RecordValidationError, build_record
from core.formatting import format_currency
from core.models import AutofillProfile
from core.suggestions import autofill_from_account, autofill_from_name, suggest_accounts, suggest_names
from storage import RecordStoreError

logger = logging.getLogger(__name__)

_MESSAGE_KEY = "entry_message"
_LAST_DATE_KEY = "last_parking_date"
_LAST_LOCATION_KEY = "last_parking_location"
_DEFAULT_RATE_TEXT = str(int(DEFAULT_HOURLY_RATE))


def _form_defaults() -> dict[str, Any]:
    return {
        "entry_name": "",
        "entry_role": ROLES[0],
        "entry_bank": BANK_NAMES[0],
        "entry_custom_bank": "",
        "entry_account": "",
        "entry_duration": DEFAULT_DURATION,
        "entry_custom_duration": "",
        "entry_rate": _DEFAULT_RATE_TEXT,
    }


def _init_state() -> None:
    state = st.session_state
    state.setdefault(_LAST_DATE_KEY, date.today())
    state.setdefault(_LAST_LOCATION_KEY, PARKING_LOCATIONS[0])
    state.setdefault("entry_location", state[_LAST_LOCATION_KEY])
    state.setdefault("entry_date", state[_LAST_DATE_KEY])
    for key, value in _form_defaults().items():
        state.setdefault(key, value)


def _apply_profile(profile: AutofillProfile) -> None:
    state = st.session_state
    state["entry_name"] = profile["name"]
    state["entry_role"] = profile["role"]
    state["entry_bank"] = profile["bank_name"]
    state["entry_custom_bank"] = profile["custom_bank_name"]
    state["entry_account"] = profile["account_number"]


def _current_form() -> EntryForm:
    state = st.session_state
    return EntryForm(
        location=state["entry_location"],
        parking_date=state["entry_date"],
        name=state["entry_name"],
        role=state["entry_role"],
        bank_name=state["entry_bank"],
        custom_bank_name=state["entry_custom_bank"],
        account_number=state["entry_account"],
        duration_option=state["entry_duration"],
        custom_duration=state["entry_custom_duration"],
        hourly_rate=state["entry_rate"],
    )


def _submit(context: AppContext) -> None:
    """Save the form; runs as a button callback so widget state can be reset."""

    form = _current_form()
    try:
        record = build_record(form, user_id=context.user.user_id, app_id=context.store.app_id)
        context.store.add(record)
    except RecordValidationError as exc:
        st.session_state[_MESSAGE_KEY] = ("error", str(exc))
        return
    except RecordStoreError as exc:
        st.session_state[_MESSAGE_KEY] = ("error", str(exc))
        return

    st.session_state[_MESSAGE_KEY] = (
        "success",
        f"데이터가 성공적으로 저장되었습니다. ({record.person_name}, {format_currency(record.fee)})",
    )
    st.session_state[_LAST_DATE_KEY] = form.parking_date
    st.session_state[_LAST_LOCATION_KEY] = form.location
    st.session_state.update(_form_defaults())
    context.invalidate_records()


def _render_suggestions(
    label: str,
    options: list[str],
    key_prefix: str,
    on_pick: Callable[[Sequence[RecordLike], str], None],
    records: Sequence[RecordLike],
) -> None:
    if not options:
        return
    st.caption(label)
    columns = st.columns(len(options))
    for index, (column, option) in enumerate(zip(columns, options)):
        column.button(
            option,
            key=f"{key_prefix}_{index}",
            on_click=on_pick,
            args=(records, option),
            use_container_width=True,
        )


def _pick_name(records: Sequence[RecordLike], name: str) -> None:
    profile = autofill_from_name(records, name)
    if profile is not None:
        _apply_profile(profile)


def _pick_account(records: Sequence[RecordLike], bank_account: str) -> None:
    profile = autofill_from_account(records, bank_account)
    if profile is not None:
        _apply_profile(profile)


def _load_records(context: AppContext) -> list[dict[str, Any]]:
    try:
        return context.records()
    except RecordStoreError as exc:
        st.error(str(exc))
        return []


def render_page(context: AppContext) -> None:
    """Render the entry form."""

    _init_state()
    records = _load_records(context)
    state = st.session_state

    message = state.pop(_MESSAGE_KEY, None)
    if message:
        kind, text = message
        (st.success if kind == "success" else st.error)(text)

    with card("주차 정보 입력"):
        st.selectbox("주차 장소", PARKING_LOCATIONS, key="entry_location")
        st.date_input("주차 날짜", key="entry_date")

        st.text_input("이름", key="entry_name", placeholder="이름을 입력하세요")
        names = [name for name in suggest_names(records, state["entry_name"]) if name != state["entry_name"]]
        _render_suggestions("이전 입력 이름", names, "name_suggestion", _pick_name, records)

        st.selectbox("직분", ROLES, key="entry_role")

        st.selectbox("은행명", BANK_NAMES, key="entry_bank")
        if state["entry_bank"] == OTHER_BANK:
            st.text_input("은행명 직접 입력", key="entry_custom_bank", placeholder="은행명을 입력하세요")
        st.text_input(
            "계좌번호",
            key="entry_account",
            placeholder="계좌번호를 입력하세요 (-는 자동으로 제거됩니다)",
        )
        accounts = suggest_accounts(records, state["entry_account"])
        _render_suggestions("이전 입력 계좌", accounts, "account_suggestion", _pick_account, records)

        st.selectbox(
            "주차 시간",
            (*DURATION_PRESETS, CUSTOM_DURATION),
            key="entry_duration",
            format_func=lambda option: "기타 (직접 입력)" if option == CUSTOM_DURATION else f"{option}시간",
        )
        if state["entry_duration"] == CUSTOM_DURATION:
            st.text_input("주차 시간 직접 입력 (시간)", key="entry_custom_duration", placeholder="예: 2.5")
        st.text_input("시간당 주차 요금 (원)", key="entry_rate", placeholder=f"예: {_DEFAULT_RATE_TEXT}")

        st.button(
            "정보 저장하기",
            type="primary",
            on_click=_submit,
            args=(context,),
            use_container_width=True,
        )


__all__ = ["render_page"]

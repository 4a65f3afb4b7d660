"""ParkSettle: church parking-fee reimbursement entry and query app."""

from __future__ import annotations

import logging

import streamlit as st

from app.context import AppContext
from app.layout import NAV_LINKS, determine_active_page, inject_css, render_header
from app.pages import AUTH_USER_KEY, render_entry_page, render_login_page, render_query_page
from config import StoreSettings, configure_logging, get_settings
from storage import RecordStore, RecordStoreError, connect_store

logger = logging.getLogger(__name__)


@st.cache_resource(show_spinner=False)
def _open_store(_settings: StoreSettings, cache_key: str) -> RecordStore:
    """Connect once per process; ``cache_key`` identifies the target collection."""

    logger.info("Opening record store %s", cache_key)
    return connect_store(_settings)


def _store_cache_key(settings: StoreSettings) -> str:
    return "|".join((settings.mongo_uri, settings.mongo_database, settings.mongo_collection, settings.app_id))


def _render_sidebar(context: AppContext) -> None:
    with st.sidebar:
        st.markdown("### 계정")
        st.caption(context.user.email)
        if st.button("로그아웃"):
            logger.info("Signed out %s", context.user.email)
            st.session_state.clear()
            st.rerun()


def main() -> None:
    """Application entrypoint for the ParkSettle app."""

    st.set_page_config(
        page_title="교회 주차 정산",
        page_icon="🅿️",
        layout="centered",
        initial_sidebar_state="collapsed",
    )

    settings = get_settings()
    configure_logging(settings.app.log_level)
    inject_css()

    user = st.session_state.get(AUTH_USER_KEY)
    if user is None:
        render_login_page(settings.app)
        return

    try:
        store = _open_store(settings.store, _store_cache_key(settings.store))
    except RecordStoreError as exc:
        st.error(f"데이터베이스 오류: {exc}")
        return

    context = AppContext(settings=settings, store=store, user=user)
    active_page = determine_active_page(link.slug for link in NAV_LINKS)
    render_header(active_page)
    _render_sidebar(context)

    if active_page == "query":
        render_query_page(context)
    else:
        render_entry_page(context)

    st.caption(f"App ID: {store.app_id} · User ID: {user.user_id}")


if __name__ == "__main__":
    main()

"""Shared layout primitives for the ParkSettle Streamlit app."""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterable

import streamlit as st


@dataclass(frozen=True)
class NavigationLink:
    slug: str
    label: str


NAV_LINKS: tuple[NavigationLink, ...] = (
    NavigationLink("entry", "입력"),
    NavigationLink("query", "조회"),
)
DEFAULT_PAGE = NAV_LINKS[0].slug
ACTIVE_PAGE_KEY = "active_page"


def inject_css() -> None:
    """Inject card and navigation styling into the Streamlit app."""

    st.markdown(
        """
        <style>
          :root {
            --gap: 16px;
            --radius: 16px;
            --card-bg: #FFFFFF;
            --border: #E2E8F0;
            --shadow: 0 1px 2px rgba(15, 23, 42, 0.05), 0 1px 3px rgba(15, 23, 42, 0.08);
          }

          body, [data-testid="stAppViewContainer"] > .main {
            background: #F1F5F9;
          }

          .block-container {
            max-width: 1100px;
            padding-top: 2rem;
            padding-bottom: 3rem;
          }

          .ps-header {
            display: flex;
            align-items: center;
            justify-content: space-between;
            gap: 1.5rem;
            padding: 0.75rem 0 1.25rem;
          }

          .ps-header__brand {
            font-size: 1.6rem;
            font-weight: 700;
            color: #1E293B;
          }

          .ps-card-anchor {
            display: none;
          }

          [data-testid="stVerticalBlock"]:has(> .ps-card-anchor) {
            background: var(--card-bg);
            border: 1px solid var(--border);
            border-radius: var(--radius);
            box-shadow: var(--shadow);
            padding: 20px;
            margin-bottom: var(--gap);
          }

          .ps-card__head {
            display: flex;
            align-items: center;
            justify-content: space-between;
            font-weight: 600;
            color: #0F172A;
          }

          .ps-chip {
            font-size: 12px;
            padding: 2px 8px;
            border-radius: 999px;
            background: #EFF6FF;
            color: #1D4ED8;
          }

          .ps-summary {
            margin: 0;
            padding-left: 1.1rem;
            color: #334155;
            line-height: 1.7;
          }
        </style>
        """,
        unsafe_allow_html=True,
    )


@contextmanager
def card(title: str, suffix: str | None = None):
    """Render content inside a reusable card."""

    chip_html = f'<span class="ps-chip">{suffix}</span>' if suffix else ""
    with st.container():
        st.markdown('<div class="ps-card-anchor"></div>', unsafe_allow_html=True)
        st.markdown(
            f'<div class="ps-card__head"><span>{title}</span>{chip_html}</div>',
            unsafe_allow_html=True,
        )
        yield


def select_page(slug: str) -> None:
    """Button callback that switches pages inside the current session."""

    st.session_state[ACTIVE_PAGE_KEY] = slug
    st.query_params["page"] = slug


def render_header(active_page: str) -> None:
    """Render the brand line and page buttons.

    Navigation reruns the script instead of reloading the browser, so the
    signed-in user and saved filters survive a page switch.
    """

    brand_col, *link_cols = st.columns([3] + [1] * len(NAV_LINKS))
    brand_col.markdown(
        '<header class="ps-header"><div class="ps-header__brand">교회 주차 정산</div></header>',
        unsafe_allow_html=True,
    )
    for column, link in zip(link_cols, NAV_LINKS):
        column.button(
            link.label,
            key=f"nav_{link.slug}",
            type="primary" if link.slug == active_page else "secondary",
            on_click=select_page,
            args=(link.slug,),
            use_container_width=True,
        )


def determine_active_page(valid_pages: Iterable[str]) -> str:
    """Resolve the active page from session state, falling back to the ``page`` query param."""

    valid = set(valid_pages)
    page = st.session_state.get(ACTIVE_PAGE_KEY)
    if page not in valid:
        requested = st.query_params.get("page", DEFAULT_PAGE)
        page = requested if requested in valid else DEFAULT_PAGE

    st.session_state[ACTIVE_PAGE_KEY] = page
    if st.query_params.get("page") != page:
        st.query_params["page"] = page
    return page


__all__ = [
    "ACTIVE_PAGE_KEY",
    "DEFAULT_PAGE",
    "NAV_LINKS",
    "NavigationLink",
    "card",
    "determine_active_page",
    "inject_css",
    "render_header",
    "select_page",
]

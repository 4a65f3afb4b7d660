"""Administrator sign-in page."""

from __future__ import annotations

import logging

import streamlit as st

from config.settings import AppSettings
from core.auth import AuthenticationError, verify_credentials

logger = logging.getLogger(__name__)

AUTH_USER_KEY = "auth_user"


def render_page(settings: AppSettings) -> None:
    """Render the sign-in form and store the user in session state on success."""

    _, centre, _ = st.columns((1, 2, 1))
    with centre:
        st.title("교회 주차 정산")
        st.caption("관리자 로그인")

        with st.form("login_form"):
            email = st.text_input("이메일 주소", placeholder="이메일 주소")
            password = st.text_input("비밀번호", type="password", placeholder="비밀번호")
            submitted = st.form_submit_button("로그인", use_container_width=True)

        if not submitted:
            return

        try:
            user = verify_credentials(settings, email, password)
        except AuthenticationError as exc:
            logger.info("Sign-in rejected for %r", email)
            st.error(str(exc))
            return

        logger.info("Signed in %s", user.email)
        st.session_state[AUTH_USER_KEY] = user
        st.rerun()


__all__ = ["AUTH_USER_KEY", "render_page"]

"""Page modules for the ParkSettle Streamlit application."""

from .entry import render_page as render_entry_page
from .login import AUTH_USER_KEY, render_page as render_login_page
from .query import render_page as render_query_page

__all__ = [
    "AUTH_USER_KEY",
    "render_entry_page",
    "render_login_page",
    "render_query_page",
]

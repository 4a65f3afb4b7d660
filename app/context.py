"""Per-session dependencies handed to each page."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

import streamlit as st

from config.settings import Settings
from core.auth import AuthenticatedUser
from storage import RecordStore

logger = logging.getLogger(__name__)

_RECORDS_KEY = "records_snapshot"


@dataclass(frozen=True)
class AppContext:
    """Explicit bundle of settings, store and signed-in user.

    Pages receive this instead of reaching for module-level database handles
    or authentication flags.
    """

    settings: Settings
    store: RecordStore
    user: AuthenticatedUser

    def records(self, *, refresh: bool = False) -> list[dict[str, Any]]:
        """Return the session's record snapshot, fetching it when missing or asked to."""

        if refresh or _RECORDS_KEY not in st.session_state:
            st.session_state[_RECORDS_KEY] = self.store.fetch_all()
        return st.session_state[_RECORDS_KEY]

    def invalidate_records(self) -> None:
        st.session_state.pop(_RECORDS_KEY, None)
        logger.debug("Record snapshot invalidated")


__all__ = ["AppContext"]

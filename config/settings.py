"""Centralised configuration handling for ParkSettle."""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Mapping

import streamlit as st
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_OPENAI_MODEL = "gpt-4o-mini"
DEFAULT_APP_ID = "my-church-parking"
DEFAULT_TIMEZONE = "Asia/Seoul"


def _streamlit_section(name: str) -> Mapping[str, Any] | None:
    """Return a mapping from Streamlit secrets for the given section."""

    try:
        if hasattr(st, "secrets") and name in st.secrets:
            section = st.secrets[name]
            if isinstance(section, Mapping):
                return section
            return dict(section)
    except Exception:  # pragma: no cover - accessing secrets may fail in tests
        return None
    return None


class OpenAISettings(BaseSettings):
    """OpenAI client settings sourced from env vars and Streamlit secrets."""

    api_key: str | None = None
    base_url: str | None = None
    model: str = DEFAULT_OPENAI_MODEL

    model_config = SettingsConfigDict(env_prefix="OPENAI_", extra="ignore")

    @property
    def client_kwargs(self) -> dict[str, Any]:
        kwargs: dict[str, Any] = {}
        if self.api_key:
            kwargs["api_key"] = self.api_key
        if self.base_url:
            kwargs["base_url"] = self.base_url
        return kwargs


class StoreSettings(BaseSettings):
    """Document store location and connection timeouts."""

    mongo_uri: str = "mongodb://localhost:27017"
    mongo_database: str = "parksettle"
    mongo_collection: str = "parking_records"
    app_id: str = DEFAULT_APP_ID
    timeout_ms: int = 2000

    model_config = SettingsConfigDict(env_prefix="PARKSETTLE_", extra="ignore")


class AppSettings(BaseSettings):
    admin_email: str | None = None
    admin_password: str | None = None
    timezone: str = DEFAULT_TIMEZONE
    log_level: str = "INFO"

    model_config = SettingsConfigDict(env_prefix="PARKSETTLE_", extra="ignore")


@dataclass(frozen=True)
class Settings:
    """Top-level settings bundle passed explicitly to the app and services."""

    openai: OpenAISettings
    store: StoreSettings
    app: AppSettings


def _secrets_overrides(name: str, keys: Mapping[str, tuple[str, ...]]) -> dict[str, Any]:
    section = _streamlit_section(name)
    if not section:
        return {}

    overrides: dict[str, Any] = {}
    for field, aliases in keys.items():
        for alias in aliases:
            value = section.get(alias)
            if value is not None:
                overrides[field] = value
                break
    return overrides


@lru_cache
def get_settings() -> Settings:
    """Load and cache application settings."""

    openai_overrides = _secrets_overrides(
        "openai",
        {
            "api_key": ("api_key", "OPENAI_API_KEY"),
            "base_url": ("api_base", "base_url"),
            "model": ("model",),
        },
    )
    store_overrides = _secrets_overrides(
        "mongo",
        {
            "mongo_uri": ("uri", "MONGO_URI"),
            "mongo_database": ("database",),
            "mongo_collection": ("collection",),
            "app_id": ("app_id",),
            "timeout_ms": ("timeout_ms",),
        },
    )
    app_overrides = _secrets_overrides(
        "app",
        {
            "admin_email": ("admin_email",),
            "admin_password": ("admin_password",),
            "timezone": ("timezone",),
            "log_level": ("log_level",),
        },
    )

    return Settings(
        openai=OpenAISettings(**openai_overrides),
        store=StoreSettings(**store_overrides),
        app=AppSettings(**app_overrides),
    )

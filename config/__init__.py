"""Application configuration utilities."""

from .log import configure_logging
from .settings import (
    DEFAULT_OPENAI_MODEL,
    AppSettings,
    OpenAISettings,
    Settings,
    StoreSettings,
    get_settings,
)

__all__ = [
    "DEFAULT_OPENAI_MODEL",
    "AppSettings",
    "OpenAISettings",
    "Settings",
    "StoreSettings",
    "configure_logging",
    "get_settings",
]

"""Visualization utilities for ParkSettle."""

from .charts import build_location_chart, build_payer_chart
from .theme import theme_tokens

__all__ = [
    "build_location_chart",
    "build_payer_chart",
    "theme_tokens",
]

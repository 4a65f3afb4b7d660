"""Shared Plotly theme tokens for ParkSettle visualizations."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ThemeTokens:
    label_color: str = "#475569"
    label_font: str = "Pretendard, Noto Sans KR, sans-serif"
    label_size: int = 12
    brand_blue: str = "#2563EB"
    neutral_grey: str = "#94A3B8"
    neutral_background: str = "rgba(148, 163, 184, 0.25)"
    location_palette: tuple[str, ...] = (
        "#0C6FFD",
        "#5DA9FF",
        "#22C55E",
        "#F97316",
        "#7C3AED",
        "#F59E0B",
    )


_TOKENS = ThemeTokens()


def theme_tokens() -> ThemeTokens:
    """Return the shared visualization tokens."""

    return _TOKENS

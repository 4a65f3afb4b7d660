"""AI-focused helpers for ParkSettle."""

from .summary import AISummaryError, AISummaryRequest, build_ai_summary_request, generate_ai_summary

__all__ = [
    "AISummaryError",
    "AISummaryRequest",
    "build_ai_summary_request",
    "generate_ai_summary",
]

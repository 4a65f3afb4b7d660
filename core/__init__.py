"""Core domain package for the ParkSettle application."""

from .aggregation import aggregate, records_to_frame
from .ai.summary import AISummaryError, AISummaryRequest, build_ai_summary_request, generate_ai_summary
from .auth import AuthenticatedUser, AuthenticationError, verify_credentials
from .entry import EntryForm, RecordValidationError, build_record
from .export import build_csv_export, export_filename
from .models import AutofillProfile, FeeTotal, ParkingRecord, QueryFilters, QueryResult
from .suggestions import (
    autofill_from_account,
    autofill_from_name,
    latest_records_by_name,
    suggest_accounts,
    suggest_names,
)

__all__ = [
    "AISummaryError",
    "AISummaryRequest",
    "AuthenticatedUser",
    "AuthenticationError",
    "AutofillProfile",
    "EntryForm",
    "FeeTotal",
    "ParkingRecord",
    "QueryFilters",
    "QueryResult",
    "RecordValidationError",
    "aggregate",
    "autofill_from_account",
    "autofill_from_name",
    "build_ai_summary_request",
    "build_csv_export",
    "build_record",
    "export_filename",
    "generate_ai_summary",
    "latest_records_by_name",
    "records_to_frame",
    "suggest_accounts",
    "suggest_names",
    "verify_credentials",
]

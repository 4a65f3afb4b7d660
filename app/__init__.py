"""Streamlit application package for ParkSettle."""

from .main import main

__all__ = ["main"]

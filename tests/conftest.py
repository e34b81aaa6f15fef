"""Shared fixtures for decimalnotation tests."""

from __future__ import annotations

import os

import pytest

from decimalnotation.config import ENV_PREFIX, reset_settings
from decimalnotation.formatter import DecimalNotationFormatter
from decimalnotation.logging import configure_logging


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch):
    """Isolate every test from process settings and environment overrides."""
    for key in list(os.environ):
        if key.startswith(f"{ENV_PREFIX}_"):
            monkeypatch.delenv(key)
    reset_settings()
    DecimalNotationFormatter._instance = None
    yield
    reset_settings()
    DecimalNotationFormatter._instance = None
    configure_logging()

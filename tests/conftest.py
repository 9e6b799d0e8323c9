"""
Pytest configuration and fixtures for semconv-checker tests.
"""

from __future__ import annotations

import logging
import os
from typing import Generator

import pytest

from semconv_checker.catalog.loader import CatalogLoader
from semconv_checker.compliance.loader import RulesLoader
from semconv_checker.config import reset_config


# ============================================================================
# Environment Fixtures
# ============================================================================


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Drop SEMCONV_CHECKER_* variables and cached state around each test."""
    for key in list(os.environ):
        if key.startswith("SEMCONV_CHECKER_"):
            monkeypatch.delenv(key)
    reset_config()
    CatalogLoader.clear_cache()
    RulesLoader.clear_cache()

    yield

    reset_config()
    CatalogLoader.clear_cache()
    RulesLoader.clear_cache()

    # configure_logging() attaches stdout handlers that CliRunner closes
    package_logger = logging.getLogger("semconv_checker")
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
    package_logger.setLevel(logging.NOTSET)

"""
Test configuration and fixtures for url_lab.
"""

import sys
from pathlib import Path

import pytest

# Add the repository root to the Python path to ensure imports work correctly
repo_root = Path(__file__).parent.parent
sys.path.insert(0, str(repo_root))

from url_lab.core.config import reset_settings  # noqa: E402
from url_lab.core.logging import clear_context  # noqa: E402


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch):
    """Give every test fresh settings untouched by the caller's environment."""
    for name in (
        "URL_LAB_MAX_QUERY_DEPTH",
        "URL_LAB_LOG_LEVEL",
        "URL_LAB_DEBUG",
        "URL_LAB_STRUCTURED_LOGGING",
    ):
        monkeypatch.delenv(name, raising=False)
    reset_settings()
    yield
    reset_settings()
    clear_context()


@pytest.fixture
def rfc3986_base():
    """Base URI used by the RFC 3986 section 5.4 examples."""
    return "http://a/b/c/d;p?q"

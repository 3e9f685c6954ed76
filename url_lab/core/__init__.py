"""Core functionality for URL Lab."""

from url_lab.core.config import UrlLabSettings, get_settings, reset_settings
from url_lab.core.errors import (
    ConfigurationError,
    DecodeError,
    MarshallingError,
    QueryDepthError,
    URLParseError,
    UrlLabError,
)

__all__ = [
    "UrlLabSettings",
    "get_settings",
    "reset_settings",
    "UrlLabError",
    "URLParseError",
    "DecodeError",
    "MarshallingError",
    "QueryDepthError",
    "ConfigurationError",
]

"""Utility modules for URL Lab."""

from .url_utils import (
    classify,
    query_escape,
    query_unescape,
    urldecode,
    urlencode,
)

__all__ = [
    "classify",
    "query_escape",
    "query_unescape",
    "urldecode",
    "urlencode",
]

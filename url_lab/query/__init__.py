"""Query-string encoding."""

from .encoder import build_query_string
from .values import classify_value, literal_string

__all__ = [
    "build_query_string",
    "classify_value",
    "literal_string",
]

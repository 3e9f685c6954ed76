"""URL parsing, building and reference resolution."""

from .builder import build
from .parser import URLRecord, parse, parse_url
from .resolver import resolve

__all__ = [
    "URLRecord",
    "build",
    "parse",
    "parse_url",
    "resolve",
]

"""URL Lab - URL parsing, building and bracketed query-string encoding."""

__version__ = "1.0.0"

from url_lab.module import FUNCTIONS, load_module
from url_lab.query import build_query_string
from url_lab.url import URLRecord, build, parse, resolve
from url_lab.utils import classify, urldecode, urlencode

__all__ = [
    "FUNCTIONS",
    "load_module",
    "URLRecord",
    "build",
    "build_query_string",
    "classify",
    "parse",
    "resolve",
    "urldecode",
    "urlencode",
]

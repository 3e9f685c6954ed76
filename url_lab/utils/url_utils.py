"""
URL string utilities for url_lab.

Query-component escaping shared by the encoder and the URL helpers, plus a
coarse classifier for free-form host strings.
"""

import re
from urllib.parse import quote_plus, unquote_plus

from url_lab.core.errors import DecodeError, malformed_decode_error
from url_lab.types import HostType

# Checked in order; the first match wins. These are deliberately loose
# patterns, e.g. the IP pattern accepts 999.999.999.999.
_CLASSIFIERS = (
    (HostType.IP, re.compile(r"\d{1,3}\.\d{1,3}\.\d{1,3}\.\d{1,3}")),
    (
        HostType.DOMAIN,
        re.compile(r"(?:[A-Za-z0-9](?:[A-Za-z0-9-]*[A-Za-z0-9])?\.)+[A-Za-z]{2,}"),
    ),
    (HostType.HOST, re.compile(r"[A-Za-z0-9.-]+:\d{1,5}")),
    (HostType.URL, re.compile(r"https?://[^\s/?#]+(?:[/?#]\S*)?", re.IGNORECASE)),
)

_BAD_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")


def query_escape(value: str) -> str:
    """
    Escape a string for use as a query-string key or value.

    Everything except ``A-Z a-z 0-9 - _ . ~`` is percent-encoded as UTF-8
    with uppercase hex digits, and spaces become ``+``. Lone surrogates are
    written as their three-byte form (``%ED%A0%80``) so every string escapes.

    Examples:
        >>> query_escape("a b&c")
        'a+b%26c'
        >>> query_escape("x[]")
        'x%5B%5D'
    """
    return quote_plus(value, safe="", errors="surrogatepass")


def query_unescape(value: str) -> str:
    """
    Inverse of :func:`query_escape`.

    Raises:
        DecodeError: on a ``%`` not followed by two hex digits, or when the
            decoded bytes are not UTF-8 (surrogate code points allowed)
    """
    match = _BAD_ESCAPE.search(value)
    if match:
        raise malformed_decode_error(value)

    try:
        return unquote_plus(value, errors="surrogatepass")
    except UnicodeDecodeError as e:
        raise malformed_decode_error(value, cause=e) from e


def urlencode(value: str) -> str:
    """Percent-encode a single string as a query component."""
    return query_escape(value)


def urldecode(value: str) -> str:
    """
    Decode a query component, returning the input unchanged if it is malformed.

    Examples:
        >>> urldecode("a+b%26c")
        'a b&c'
        >>> urldecode("%")
        '%'
    """
    try:
        return query_unescape(value)
    except DecodeError:
        return value


def classify(value: str) -> str:
    """
    Classify a string as ``ip``, ``domain``, ``host``, ``url`` or ``unknown``.

    Examples:
        >>> classify("192.168.0.1")
        'ip'
        >>> classify("example.com:8080")
        'host'
        >>> classify("not a url")
        'unknown'
    """
    for host_type, pattern in _CLASSIFIERS:
        if pattern.fullmatch(value):
            return host_type.value
    return HostType.UNKNOWN.value

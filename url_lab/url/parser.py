"""
URL parsing into a fixed-shape record.

``urllib.parse.urlsplit`` does the splitting. This module adds the
validation it skips (control characters, bad escapes, bad ports) and the
record shape handed to scripting hosts: decoded path and fragment, split
hostname/port, and a query mapping of single values or value lists.
"""

import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple, Union
from urllib.parse import parse_qs, quote, unquote, urlsplit

from url_lab.core.errors import (
    URLParseError,
    control_character_error,
    invalid_escape_error,
    invalid_port_error,
    missing_scheme_error,
    parse_failure,
)
from url_lab.core.logging import get_logger

logger = get_logger(__name__)

# Characters left unescaped in a path by the default encoding
PATH_SAFE = "/$&+,:;=@"

_CONTROL = re.compile(r"[\x00-\x1f\x7f]")
_BAD_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")
_PORT = re.compile(r"[0-9]*")

QueryMapping = Dict[str, Union[str, List[str]]]


def escape_component(value: str, safe: str) -> str:
    """Percent-encode one URL component; lone surrogates pass through as UTF-8."""
    return quote(value, safe=safe, errors="surrogatepass")


@dataclass
class URLRecord:
    """Components of a parsed URL.

    ``username`` and ``password`` keep the three-way distinction between no
    user-info (both None), a bare username (password None) and a full
    ``user:password`` pair, where the password may be the empty string.
    """

    scheme: str = ""
    opaque: str = ""
    host: str = ""
    hostname: str = ""
    port: str = ""
    path: str = ""
    raw_path: str = ""
    raw_query: str = ""
    fragment: str = ""
    username: Optional[str] = None
    password: Optional[str] = None
    query: QueryMapping = field(default_factory=dict)

    def escaped_path(self) -> str:
        """The path as it appears in a URL string."""
        if self.raw_path and unquote(self.raw_path) == self.path:
            return self.raw_path
        return escape_component(self.path, PATH_SAFE)

    def to_table(self) -> Dict[str, Any]:
        """Plain-dict form used by scripting hosts."""
        return {
            "scheme": self.scheme,
            "opaque": self.opaque,
            "host": self.host,
            "hostname": self.hostname,
            "port": self.port,
            "path": self.path,
            "rawpath": self.raw_path,
            "rawquery": self.raw_query,
            "fragment": self.fragment,
            "username": self.username,
            "password": self.password,
            "query": {
                key: list(value) if isinstance(value, list) else value
                for key, value in self.query.items()
            },
        }


def split_host_port(host: str) -> Tuple[str, str]:
    """
    Split ``host`` into hostname and port without lower-casing.

    IPv6 brackets are removed from the hostname.

    Examples:
        >>> split_host_port("example.com:8080")
        ('example.com', '8080')
        >>> split_host_port("[::1]:80")
        ('::1', '80')
    """
    hostname, port = host, ""
    colon = host.rfind(":")
    if colon != -1 and _PORT.fullmatch(host[colon + 1:]) and (
        not host.startswith("[") or host[colon - 1] == "]"
    ):
        hostname, port = host[:colon], host[colon + 1:]

    if hostname.startswith("[") and hostname.endswith("]"):
        hostname = hostname[1:-1]
    return hostname, port


def query_mapping(raw_query: str) -> QueryMapping:
    """
    Decode a raw query into a mapping of single values or value lists.

    Pairs with a malformed ``%`` escape are dropped; ``raw_query`` still
    carries them.

    Examples:
        >>> query_mapping("a=1&b=2&b=3&c")
        {'a': '1', 'b': ['2', '3'], 'c': ''}
        >>> query_mapping("a=%zz&b=1")
        {'b': '1'}
    """
    well_formed = "&".join(
        pair for pair in raw_query.split("&") if not _BAD_ESCAPE.search(pair)
    )
    values = parse_qs(well_formed, keep_blank_values=True)
    return {key: items[0] if len(items) == 1 else items for key, items in values.items()}


def _check_escapes(raw: str, component: str) -> None:
    match = _BAD_ESCAPE.search(component)
    if match:
        raise invalid_escape_error(raw, component[match.start():match.start() + 3])


def _check_port(raw: str, host: str) -> None:
    if host.startswith("["):
        closing = host.find("]")
        if closing == -1:
            raise parse_failure(raw, "missing ']' in host")
        rest = host[closing + 1:]
        if rest and not (rest.startswith(":") and _PORT.fullmatch(rest[1:])):
            raise invalid_port_error(raw, rest)
        return

    colon = host.rfind(":")
    if colon != -1 and not _PORT.fullmatch(host[colon + 1:]):
        raise invalid_port_error(raw, host[colon:])


def parse_url(raw: str) -> URLRecord:
    """
    Parse a URL string into a :class:`URLRecord`.

    Raises:
        URLParseError: if the string is not a valid URL
    """
    if _CONTROL.search(raw):
        raise control_character_error(raw)
    try:
        raw.encode("utf-8")
    except UnicodeEncodeError as e:
        raise parse_failure(raw, "invalid UTF-8 in URL") from e
    if raw.startswith(":"):
        raise missing_scheme_error(raw)

    try:
        parts = urlsplit(raw)
    except ValueError as e:
        reason = "missing ']' in host" if "[" in raw and "]" not in raw else str(e)
        raise parse_failure(raw, reason) from e

    if not parts.scheme and not parts.netloc and ":" in parts.path.split("/", 1)[0]:
        raise parse_failure(raw, "first path segment in URL cannot contain colon")

    userinfo, at, host = parts.netloc.rpartition("@")
    for component in (userinfo, host, parts.path, parts.fragment):
        _check_escapes(raw, component)
    _check_port(raw, host)

    record = URLRecord(
        scheme=parts.scheme,
        raw_query=parts.query,
        fragment=unquote(parts.fragment),
        query=query_mapping(parts.query),
    )

    if at:
        username, colon, password = userinfo.partition(":")
        record.username = unquote(username)
        record.password = unquote(password) if colon else None

    record.host = unquote(host)
    record.hostname, record.port = split_host_port(record.host)

    if parts.scheme and not parts.netloc and parts.path and not parts.path.startswith("/"):
        # "mailto:user@example.com" has no authority or hierarchical path
        record.opaque = parts.path
    else:
        record.path = unquote(parts.path)
        if parts.path != escape_component(record.path, PATH_SAFE):
            record.raw_path = parts.path

    return record


def parse(raw: str) -> Tuple[Optional[URLRecord], Optional[str]]:
    """
    Parse a URL, reporting failure as a value instead of raising.

    Returns:
        Tuple of (record, None) on success or (None, error_message) on failure

    Examples:
        >>> record, err = parse("https://user@example.com:8443/a?q=1#top")
        >>> record.hostname, record.port, record.username, record.password, err
        ('example.com', '8443', 'user', None, None)
        >>> parse("http://[::1")[0] is None
        True
    """
    try:
        return parse_url(raw), None
    except URLParseError as e:
        logger.debug("URL rejected", url=raw, error=e.message)
        return None, e.message

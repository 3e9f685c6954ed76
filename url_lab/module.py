"""
Function table exposed to scripting hosts.

Every entry takes and returns plain Python values (str, dict, list, None) so
a host only has to convert its own scalars and tables at the call boundary.
Failure conventions follow the host's style: ``parse`` and ``resolve``
return a ``(value, error)`` pair, everything else always succeeds.
"""

from typing import Any, Callable, Dict, Mapping, Optional, Tuple

from url_lab.core.config import get_settings
from url_lab.core.logging import log_url_operation, performance_context, traced
from url_lab.query.encoder import build_query_string as _encode_query
from url_lab.url import builder, parser, resolver
from url_lab.utils import url_utils


@traced("url_lab.parse")
def parse(raw: str) -> Tuple[Optional[Dict[str, Any]], Optional[str]]:
    """Parse ``raw`` into a table, or return ``(None, error)``."""
    record, error = parser.parse(raw)
    log_url_operation("parse", success=error is None, error=error)
    if record is None:
        return None, error
    return record.to_table(), None


@traced("url_lab.build")
def build(options: Mapping[str, Any]) -> str:
    """Assemble a URL from a table of components."""
    url = builder.build(options)
    log_url_operation("build")
    return url


@traced("url_lab.build_query_string")
def build_query_string(options: Mapping[str, Any]) -> str:
    """Encode a nested table as a bracketed query string."""
    with performance_context("build_query_string"):
        query = _encode_query(options, max_depth=get_settings().max_query_depth)
    log_url_operation("build_query_string", length=len(query))
    return query


@traced("url_lab.resolve")
def resolve(base: str, reference: str) -> Tuple[Optional[str], Optional[str]]:
    """Resolve ``reference`` against ``base``, or return ``(None, error)``."""
    url, error = resolver.resolve(base, reference)
    log_url_operation("resolve", success=error is None, error=error)
    return url, error


@traced("url_lab.type")
def classify(value: str) -> str:
    """Classify a string as ip, domain, host, url or unknown."""
    kind = url_utils.classify(value)
    log_url_operation("type", kind=kind)
    return kind


@traced("url_lab.urlencode")
def urlencode(value: str) -> str:
    """Percent-encode a string as a query component."""
    return url_utils.urlencode(value)


@traced("url_lab.urldecode")
def urldecode(value: str) -> str:
    """Decode a query component, echoing malformed input back."""
    decoded = url_utils.urldecode(value)
    # urldecode falls back to the raw input on malformed escapes
    log_url_operation("urldecode", success=decoded != value or "%" not in value)
    return decoded


FUNCTIONS: Dict[str, Callable[..., Any]] = {
    "parse": parse,
    "build": build,
    "build_query_string": build_query_string,
    "resolve": resolve,
    "type": classify,
    "urlencode": urlencode,
    "urldecode": urldecode,
}


def load_module() -> Dict[str, Callable[..., Any]]:
    """
    Return a fresh copy of the function table for registration with a host.

    Example:
        >>> url = load_module()
        >>> url["build_query_string"]({"b": 1, "a": True})
        'a=true&b=1'
    """
    return dict(FUNCTIONS)

"""
Relative reference resolution (RFC 3986 section 5).

Both inputs go through :func:`url_lab.url.parser.parse_url` so malformed
URLs are reported the same way as by ``parse``. The resolution itself is
``urllib.parse.urljoin``.
"""

from typing import Optional, Tuple
from urllib.parse import urljoin

from url_lab.core.errors import URLParseError
from url_lab.core.logging import get_logger
from url_lab.url.parser import parse_url

logger = get_logger(__name__)


def resolve(base: str, reference: str) -> Tuple[Optional[str], Optional[str]]:
    """
    Resolve ``reference`` against ``base``.

    Returns:
        Tuple of (absolute_url, None) on success or (None, error_message)
        when either input fails to parse

    Examples:
        >>> resolve("http://a.com/b/", "c")
        ('http://a.com/b/c', None)
        >>> resolve("http://a.com/b", "/c")
        ('http://a.com/c', None)
        >>> resolve("http://a.com/b/c", "../d?x=1")
        ('http://a.com/d?x=1', None)
    """
    try:
        parse_url(base)
        parse_url(reference)
    except URLParseError as e:
        logger.debug("Reference not resolved", base=base, reference=reference, error=e.message)
        return None, e.message

    return urljoin(base, reference), None

"""
Bracketed query-string encoder.

Nested mappings and sequences are flattened into PHP/Rack-style keys::

    {"user": {"name": "ann", "tags": ["a", "b"]}}
    -> user%5Bname%5D=ann&user%5Btags%5D%5B%5D=a&user%5Btags%5D%5B%5D=b

Fragments are sorted at every mapping level and at the top level so the
output does not depend on the iteration order of the input. Sequences keep
their element order.
"""

import re
from typing import Any, List, Optional

from url_lab.core.errors import QueryDepthError
from url_lab.query.values import (
    CONTAINER_KINDS,
    as_mapping,
    classify_value,
    key_string,
    literal_string,
    mapping_items,
)
from url_lab.types import ValueKind
from url_lab.utils.url_utils import query_escape

_TRAILING_BRACKETS = re.compile(r"\[\]$")


def build_query_string(root: Any, max_depth: Optional[int] = None) -> str:
    """
    Encode a nested structure into a deterministic query string.

    Args:
        root: Mapping (or pydantic model) of top-level keys to values
        max_depth: Maximum container nesting below the root, None for no limit

    Returns:
        The ``&``-joined, percent-encoded query string

    Raises:
        MarshallingError: if ``root`` is not a mapping
        QueryDepthError: if ``max_depth`` is set and exceeded

    Examples:
        >>> build_query_string({"b": 1, "a": 1})
        'a=1&b=1'
        >>> build_query_string({"a": ["x", "y"]})
        'a%5B%5D=x&a%5B%5D=y'
    """
    fragments: List[str] = []
    for key, value in as_mapping(root).items():
        fragments.extend(_render(key_string(key), value, 1, max_depth))

    fragments.sort()
    return "&".join(fragments)


def _render(prefix: str, value: Any, depth: int, max_depth: Optional[int]) -> List[str]:
    kind = classify_value(value)
    if kind is None:
        return []

    if kind in (ValueKind.BOOLEAN, ValueKind.NUMBER):
        return [f"{query_escape(prefix)}={literal_string(value, kind)}"]

    if kind is ValueKind.STRING:
        return [f"{query_escape(prefix)}={query_escape(value)}"]

    if max_depth is not None and depth > max_depth:
        raise QueryDepthError(
            f"Query structure under '{prefix}' is nested deeper than {max_depth}",
            depth=depth,
            limit=max_depth,
            error_code="QUERY_TOO_DEEP",
        )

    # an empty sequence is indistinguishable from an empty mapping
    if kind is ValueKind.MAPPING or len(value) == 0:
        items = mapping_items(value) if kind is ValueKind.MAPPING else ()
        nested: List[str] = []
        for key, item in items:
            nested.extend(_render(f"{prefix}[{key_string(key)}]", item, depth + 1, max_depth))
        nested.sort()
        return ["&".join(nested)]

    return ["&".join(_render_sequence(prefix, value, depth, max_depth))]


def _render_sequence(
    prefix: str, value: Any, depth: int, max_depth: Optional[int]
) -> List[str]:
    parts: List[str] = []
    flat = _TRAILING_BRACKETS.search(prefix) is not None

    for index, element in enumerate(value, start=1):
        element_kind = classify_value(element)

        if flat:
            # "a[]" never grows into "a[][]"; elements are written as literals
            if element_kind is not None:
                parts.append(
                    f"{query_escape(prefix)}={literal_string(element, element_kind)}"
                )
        elif element_kind in CONTAINER_KINDS:
            # zero-based index inside a one-based sequence, kept for compatibility
            parts.extend(_render(f"{prefix}[{index - 1}]", element, depth + 1, max_depth))
        else:
            parts.extend(_render(f"{prefix}[]", element, depth + 1, max_depth))

    return parts

"""
Value model for the query-string encoder.

Host values are classified into a small tagged union (see ``ValueKind``)
before encoding. Anything outside the union classifies as ``None`` and is
dropped by the encoder without raising.
"""

from collections.abc import Mapping, Sequence
from typing import Any, Optional

from pydantic import BaseModel

from url_lab.core.errors import unexpected_type_error
from url_lab.types import ValueKind

CONTAINER_KINDS = (ValueKind.MAPPING, ValueKind.SEQUENCE)


def classify_value(value: Any) -> Optional[ValueKind]:
    """
    Return the tag of a host value, or None when it is unsupported.

    Examples:
        >>> classify_value(True)
        <ValueKind.BOOLEAN: 'boolean'>
        >>> classify_value(None) is None
        True
    """
    # bool is a subclass of int, check it first
    if isinstance(value, bool):
        return ValueKind.BOOLEAN
    if isinstance(value, (int, float)):
        return ValueKind.NUMBER
    if isinstance(value, str):
        return ValueKind.STRING
    if isinstance(value, (Mapping, BaseModel)):
        return ValueKind.MAPPING
    if isinstance(value, Sequence) and not isinstance(value, (bytes, bytearray)):
        return ValueKind.SEQUENCE
    return None


def literal_string(value: Any, kind: Optional[ValueKind] = None) -> str:
    """
    Render a value as an unescaped literal.

    Booleans become ``true``/``false`` and numbers use ``str()``. Containers
    render as their kind name since they have no scalar form.
    """
    if kind is None:
        kind = classify_value(value)

    if kind is ValueKind.BOOLEAN:
        return "true" if value else "false"
    if kind in CONTAINER_KINDS:
        return kind.value
    return str(value)


def key_string(key: Any) -> str:
    """Render a mapping key the same way scalar values are rendered."""
    if isinstance(key, bool):
        return literal_string(key, ValueKind.BOOLEAN)
    return str(key)


def mapping_items(value: Any):
    """Items of a mapping-kind value; pydantic models are dumped first."""
    if isinstance(value, BaseModel):
        return value.model_dump().items()
    return value.items()


def as_mapping(root: Any) -> Mapping:
    """
    Marshal the encoder's root argument into a mapping.

    Raises:
        MarshallingError: if the root is not a mapping or pydantic model
    """
    if isinstance(root, BaseModel):
        return root.model_dump()
    if isinstance(root, Mapping):
        return root
    raise unexpected_type_error("mapping", root)

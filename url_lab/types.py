"""
Shared type definitions for url_lab.

Kept separate from the implementation modules to avoid circular imports
between the encoder, the URL helpers and the CLI.
"""

from enum import Enum


class ValueKind(str, Enum):
    """Tag of a value accepted by the query-string encoder"""

    BOOLEAN = "boolean"
    NUMBER = "number"
    STRING = "string"
    MAPPING = "mapping"
    SEQUENCE = "sequence"


class HostType(str, Enum):
    """Result of classifying a free-form string"""

    IP = "ip"
    DOMAIN = "domain"
    HOST = "host"
    URL = "url"
    UNKNOWN = "unknown"

"""
Unified error hierarchy for url_lab.

Errors carry an error code and context data so they can be logged in a
structured way. At the function-table boundary parse failures become a
``(None, message)`` pair and decode failures fall back to the raw input;
nothing in this module is raised to a scripting host directly.
"""

from typing import Any, Dict, Optional


class UrlLabError(Exception):
    """Base exception for all url_lab operations.

    This exception provides structured error information including error codes
    and context data for better debugging and error handling.
    """

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.__class__.__name__.upper()
        self.context = context or {}
        self.cause = cause

    def __str__(self) -> str:
        base_msg = self.message
        if self.error_code:
            base_msg = f"[{self.error_code}] {base_msg}"
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            base_msg = f"{base_msg} (Context: {context_str})"
        return base_msg

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary for structured logging."""
        return {
            "error_type": self.__class__.__name__,
            "error_code": self.error_code,
            "message": self.message,
            "context": self.context,
            "cause": str(self.cause) if self.cause else None,
        }


class URLParseError(UrlLabError):
    """A URL string could not be parsed."""

    def __init__(
        self,
        message: str,
        url: Optional[str] = None,
        reason: Optional[str] = None,
        **kwargs,
    ):
        context = kwargs.pop("context", {})
        if url is not None:
            context["url"] = url
        if reason:
            context["reason"] = reason

        super().__init__(message, context=context, **kwargs)
        self.url = url
        self.reason = reason


class DecodeError(UrlLabError):
    """Malformed percent-encoding in a query component."""

    def __init__(self, message: str, value: Optional[str] = None, **kwargs):
        context = kwargs.pop("context", {})
        if value is not None:
            context["value"] = value

        super().__init__(message, context=context, **kwargs)
        self.value = value


class MarshallingError(UrlLabError):
    """A host value could not be converted into the expected shape."""

    def __init__(
        self,
        message: str,
        expected: Optional[str] = None,
        actual: Optional[str] = None,
        **kwargs,
    ):
        context = kwargs.pop("context", {})
        if expected:
            context["expected"] = expected
        if actual:
            context["actual"] = actual

        super().__init__(message, context=context, **kwargs)


class QueryDepthError(UrlLabError):
    """Nested query structure exceeds the configured depth limit."""

    def __init__(
        self,
        message: str,
        depth: Optional[int] = None,
        limit: Optional[int] = None,
        **kwargs,
    ):
        context = kwargs.pop("context", {})
        if depth is not None:
            context["depth"] = depth
        if limit is not None:
            context["limit"] = limit

        super().__init__(message, context=context, **kwargs)


class ConfigurationError(UrlLabError):
    """Configuration validation and setup errors."""

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        config_value: Optional[Any] = None,
        **kwargs,
    ):
        context = kwargs.pop("context", {})
        if config_key:
            context["config_key"] = config_key
        if config_value is not None:
            context["config_value"] = config_value

        super().__init__(message, context=context, **kwargs)


# Convenience functions for common error scenarios
def parse_failure(url: str, reason: str) -> URLParseError:
    """Create a parse error whose message quotes the offending input."""
    return URLParseError(
        f'parse "{url}": {reason}',
        url=url,
        reason=reason,
        error_code="URL_PARSE_FAILED",
    )


def control_character_error(url: str) -> URLParseError:
    return parse_failure(url, "invalid control character in URL")


def missing_scheme_error(url: str) -> URLParseError:
    return parse_failure(url, "missing protocol scheme")


def invalid_escape_error(url: str, escape: str) -> URLParseError:
    return parse_failure(url, f'invalid URL escape "{escape}"')


def invalid_port_error(url: str, port: str) -> URLParseError:
    return parse_failure(url, f'invalid port "{port}" after host')


def malformed_decode_error(value: str, cause: Optional[Exception] = None) -> DecodeError:
    """Create a decode error for malformed percent-encoding."""
    return DecodeError(
        f"Malformed percent-encoding in {value!r}",
        value=value,
        error_code="INVALID_ESCAPE",
        cause=cause,
    )


def unexpected_type_error(expected: str, value: Any) -> MarshallingError:
    """Create a marshalling error for a host value of the wrong type."""
    actual = type(value).__name__
    return MarshallingError(
        f"{expected} expected, got {actual}",
        expected=expected,
        actual=actual,
        error_code="BAD_ARGUMENT",
    )


def config_validation_error(key: str, value: Any, reason: str) -> ConfigurationError:
    """Create a configuration validation error."""
    return ConfigurationError(
        f"Invalid configuration for '{key}': {reason}",
        config_key=key,
        config_value=value,
        error_code="CONFIG_INVALID",
    )

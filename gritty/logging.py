"""
Gritty logging utilities.

Provides configurable logging for provider HTTP traffic, remote operations and
config persistence. Ensures no credentials (tokens, passwords, Authorization
headers) are ever logged.
"""

import logging
import re
from typing import Any

_sdk_logger = logging.getLogger("gritty")
_http_logger = logging.getLogger("gritty.http")

_REDACTED = "[REDACTED]"

_SENSITIVE_KEYS = frozenset(
    {"token", "password", "secret", "authorization", "private-token", "api_key"}
)

# Patterns for sensitive data that should be masked in free text
_SENSITIVE_PATTERNS = [
    (re.compile(r"(Bearer|token|Basic)\s+[A-Za-z0-9_\-.=:+/]{8,}"), r"\1 " + _REDACTED),
    (re.compile(r"\b(gh[pousr]_[A-Za-z0-9]{20,}|glpat-[A-Za-z0-9_\-]{20,})\b"), _REDACTED),
    (
        re.compile(
            r"(secret|token|password|private[-_]token|api_key)(['\"]?\s*[:=]\s*)['\"][^'\"]+['\"]",
            re.IGNORECASE,
        ),
        r"\1\2'" + _REDACTED + "'",
    ),
]


def configure_logging(
    level: int = logging.INFO,
    http_level: int | None = None,
    handler: logging.Handler | None = None,
    format_string: str | None = None,
) -> None:
    """
    Configure gritty logging.

    Args:
        level: Default log level for all gritty loggers (default: INFO)
        http_level: Log level for HTTP request/response logging (default: same as level)
        handler: Custom handler to use (default: StreamHandler to stderr)
        format_string: Custom format string (default: includes timestamp, level, logger name)

    Example:
        ```python
        import logging
        from gritty.logging import configure_logging

        # Show every provider request
        configure_logging(level=logging.INFO, http_level=logging.DEBUG)
        ```
    """
    if format_string is None:
        format_string = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    formatter = logging.Formatter(format_string)

    if handler is None:
        handler = logging.StreamHandler()

    handler.setFormatter(formatter)

    _sdk_logger.setLevel(level)
    _sdk_logger.addHandler(handler)

    _http_logger.setLevel(http_level if http_level is not None else level)


def get_logger(name: str | None = None) -> logging.Logger:
    """
    Get a gritty logger.

    Args:
        name: Logger name suffix (e.g., "http", "remote"). If None, returns the root gritty logger.

    Returns:
        Logger instance
    """
    if name is None:
        return _sdk_logger
    return logging.getLogger(f"gritty.{name}")


def mask_sensitive_data(text: str) -> str:
    """
    Mask credentials in a string.

    Args:
        text: Text that may contain tokens or passwords

    Returns:
        Text with sensitive data replaced by redaction markers
    """
    result = text
    for pattern, replacement in _SENSITIVE_PATTERNS:
        result = pattern.sub(replacement, result)
    return result


def safe_log_dict(data: dict[str, Any], sensitive_keys: set[str] | None = None) -> dict[str, Any]:
    """
    Create a copy of a dictionary with sensitive values masked.

    Args:
        data: Dictionary that may contain sensitive values
        sensitive_keys: Keys to mask (default: token, password, secret, authorization, ...)

    Returns:
        Dictionary with sensitive values replaced with "[REDACTED]"
    """
    keys = _SENSITIVE_KEYS if sensitive_keys is None else sensitive_keys

    result: dict[str, Any] = {}
    for key, value in data.items():
        key_lower = str(key).lower()
        if key_lower in keys or any(sk in key_lower for sk in keys):
            result[key] = _REDACTED
        elif isinstance(value, dict):
            result[key] = safe_log_dict(value, sensitive_keys)
        elif isinstance(value, list):
            result[key] = [
                safe_log_dict(item, sensitive_keys) if isinstance(item, dict) else item
                for item in value
            ]
        else:
            result[key] = value

    return result


def log_http_request(
    method: str,
    url: str,
    headers: dict[str, str] | None = None,
    body: dict[str, Any] | None = None,
) -> None:
    """Log an HTTP request at DEBUG level with credentials masked."""
    if not _http_logger.isEnabledFor(logging.DEBUG):
        return

    log_parts = [f"{method} {url}"]

    if headers:
        log_parts.append(f"headers={safe_log_dict(headers)}")

    if body:
        log_parts.append(f"body={safe_log_dict(body)}")

    _http_logger.debug(" | ".join(log_parts))


def log_http_response(
    status_code: int,
    url: str,
    elapsed_ms: float | None = None,
) -> None:
    """Log an HTTP response status at DEBUG level."""
    if not _http_logger.isEnabledFor(logging.DEBUG):
        return

    log_parts = [f"Response {status_code} from {url}"]

    if elapsed_ms is not None:
        log_parts.append(f"elapsed={elapsed_ms:.2f}ms")

    _http_logger.debug(" | ".join(log_parts))


__all__ = [
    "configure_logging",
    "get_logger",
    "mask_sensitive_data",
    "safe_log_dict",
    "log_http_request",
    "log_http_response",
]

"""Common utility functions for vendor clients.

This module provides shared helpers used across client implementations:
building error adapters, resolving snake/camel option aliases and trimming
option dictionaries.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from typing import Any

import httpx

from .case import camelcase, snakecase
from .errors import MessagingAPIError

ErrorAdapter = Callable[[Any, Any], "MessagingAPIError | None"]


def status_code_of(cause: Any) -> int | None:
    """Extract the HTTP status code from a response or an httpx error."""
    if isinstance(cause, httpx.Response):
        return cause.status_code
    if isinstance(cause, httpx.HTTPStatusError):
        return cause.response.status_code
    return None


def create_error_adapter(
    vendor: str,
    describe: Callable[[Any], str | None],
    *,
    status_only: bool = False,
) -> ErrorAdapter:
    """Create an error adapter from a vendor-specific ``describe`` function.

    ``describe`` receives the parsed response body and returns the vendor's
    error text when the body reports a failure, or None otherwise. The
    returned adapter wraps that text into a :class:`MessagingAPIError`
    prefixed with ``"{vendor} API - "``.

    With ``status_only`` the vendor is trusted to report failures through
    the HTTP status alone, so bodies of successful responses are never
    described.

    Example:
        ```python
        def describe(body):
            if isinstance(body, dict) and body.get("ok") is False:
                return body.get("error", "")
            return None

        slack_adapter = create_error_adapter("Slack", describe)
        ```
    """

    def adapter(body: Any, cause: Any) -> MessagingAPIError | None:
        if status_only and isinstance(cause, httpx.Response) and cause.is_success:
            return None
        detail = describe(body)
        if detail is None:
            return None
        return MessagingAPIError(
            f"{vendor} API - {detail}".rstrip(),
            vendor=vendor,
            cause=cause,
            status_code=status_code_of(cause),
            response_body=body,
        )

    return adapter


def omit_none(mapping: Mapping[str, Any] | None) -> dict[str, Any]:
    """Drop keys whose value is None."""
    if not mapping:
        return {}
    return {key: value for key, value in mapping.items() if value is not None}


def resolve_aliases(options: Mapping[str, Any] | None) -> dict[str, Any]:
    """Normalise option keys that may be given in snake_case or camelCase.

    Every key is folded to its snake_case spelling. Supplying the same option
    under both spellings (``until_date`` and ``untilDate``) is ambiguous and
    rejected.

    Raises:
        ValueError: If two keys resolve to the same option.
    """
    resolved: dict[str, Any] = {}
    origin: dict[str, str] = {}
    for key, value in (options or {}).items():
        canonical = snakecase(key)
        if canonical in resolved:
            raise ValueError(
                f"Option {canonical!r} given twice (as {origin[canonical]!r} and {key!r})"
            )
        resolved[canonical] = value
        origin[canonical] = key
    return resolved


def without_keys(options: Mapping[str, Any] | None, keys: Iterable[str]) -> dict[str, Any]:
    """Return ``options`` without ``keys``, matching both snake and camel spellings."""
    removed: set[str] = set()
    for key in keys:
        removed.update({key, snakecase(key), camelcase(key)})
    return {key: value for key, value in (options or {}).items() if key not in removed}


def pick_keys(options: Mapping[str, Any] | None, keys: Iterable[str]) -> dict[str, Any]:
    """Return only ``keys`` from ``options``, matching both snake and camel spellings."""
    wanted: set[str] = set()
    for key in keys:
        wanted.update({key, snakecase(key), camelcase(key)})
    return {key: value for key, value in (options or {}).items() if key in wanted}

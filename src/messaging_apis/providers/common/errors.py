"""Exceptions raised by the messaging API clients."""

from __future__ import annotations

from typing import Any


class MessagingAPIError(Exception):
    """Uniform error for any failed vendor call.

    Raised for transport failures (connection errors, timeouts), non-2xx
    responses, and 2xx responses whose envelope reports an application error.

    Attributes:
        message: Human readable message, prefixed with the vendor name.
        vendor: Vendor name (``"LINE"``, ``"Messenger"``, ...).
        cause: The original transport exception or ``httpx.Response``.
        status_code: HTTP status code, if a response was received.
        response_body: Parsed response body, if any.
    """

    def __init__(
        self,
        message: str,
        *,
        vendor: str = "",
        cause: Any = None,
        status_code: int | None = None,
        response_body: Any = None,
    ):
        self.message = message
        self.vendor = vendor
        self.cause = cause
        self.status_code = status_code
        self.response_body = response_body
        super().__init__(message)

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}({self.message!r}, vendor={self.vendor!r}, "
            f"status_code={self.status_code!r})"
        )


class BatchRequestError(MessagingAPIError):
    """A single item of a batch request failed.

    Attributes:
        request: The batch item that was submitted.
    """

    def __init__(self, message: str, *, request: Any = None, **kwargs: Any):
        self.request = request
        super().__init__(message, **kwargs)

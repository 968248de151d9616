"""Common data models shared across vendor clients."""

from __future__ import annotations

import time
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import IO, Any, Literal

BodyFormat = Literal["json", "form"]


class ResultPolicy(str, Enum):
    """How an endpoint treats an HTTP 404 response.

    ``RAISE`` is the default for every call. ``NULL_ON_NOT_FOUND`` is opted
    into per endpoint where the vendor documents "absent" as a 404, e.g.
    profile or rich menu lookups.
    """

    RAISE = "raise"
    NULL_ON_NOT_FOUND = "null_on_not_found"


@dataclass(frozen=True)
class FileUpload:
    """Opaque binary payload for media upload endpoints.

    A vendor cannot infer a filename from raw bytes, so ``filename`` is
    required when ``content`` is a ``bytes`` buffer. Streams fall back to
    their ``name`` attribute.

    Attributes:
        content: Raw bytes or a readable binary stream.
        filename: File name reported to the vendor.
        content_type: MIME type; ``application/octet-stream`` when unknown.
    """

    content: bytes | IO[bytes]
    filename: str | None = None
    content_type: str | None = None

    def __post_init__(self) -> None:
        if isinstance(self.content, (bytes, bytearray)):
            if not self.filename:
                raise ValueError("filename is required when uploading a bytes buffer")
        elif not hasattr(self.content, "read"):
            raise TypeError("content must be bytes or a readable binary stream")

    @property
    def name(self) -> str:
        if self.filename:
            return self.filename
        stream_name = getattr(self.content, "name", None)
        if isinstance(stream_name, str):
            return stream_name.replace("\\", "/").rsplit("/", 1)[-1]
        return "file"

    def as_httpx_file(self) -> tuple[str, Any, str]:
        """Return the ``(filename, content, content_type)`` tuple httpx expects."""
        return (self.name, self.content, self.content_type or "application/octet-stream")


def is_opaque(value: Any) -> bool:
    """Whether ``value`` is a binary payload that must not be key-converted."""
    return isinstance(value, (bytes, bytearray, FileUpload)) or hasattr(value, "read")


@dataclass(frozen=True)
class RequestDescriptor:
    """A single outgoing HTTP request.

    Built fresh for every call and never mutated; hooks derive new
    descriptors with the ``with_*`` helpers.
    """

    method: str
    url: str
    headers: Mapping[str, str] = field(default_factory=dict)
    params: Mapping[str, Any] = field(default_factory=dict)
    body: Any = None
    files: Mapping[str, Any] | None = None
    body_format: BodyFormat = "json"

    def with_headers(self, headers: Mapping[str, str]) -> RequestDescriptor:
        return replace(self, headers={**self.headers, **headers})

    def with_params(self, params: Mapping[str, Any]) -> RequestDescriptor:
        return replace(self, params={**self.params, **params})

    def with_url(self, url: str) -> RequestDescriptor:
        return replace(self, url=url)

    def with_body(self, body: Any) -> RequestDescriptor:
        return replace(self, body=body)

    @property
    def is_binary(self) -> bool:
        return self.files is not None or is_opaque(self.body)


@dataclass(frozen=True)
class BatchRequest:
    """One operation inside a batch submission.

    ``depends_on`` and ``omit_response_on_success`` are forwarded to the vendor
    verbatim; the vendor enforces ordering between named items.
    """

    method: str
    relative_url: str
    body: Mapping[str, Any] | None = None
    name: str | None = None
    depends_on: str | None = None
    omit_response_on_success: bool | None = None

    def with_options(
        self,
        *,
        name: str | None = None,
        depends_on: str | None = None,
        omit_response_on_success: bool | None = None,
    ) -> BatchRequest:
        return replace(
            self,
            name=name if name is not None else self.name,
            depends_on=depends_on if depends_on is not None else self.depends_on,
            omit_response_on_success=(
                omit_response_on_success
                if omit_response_on_success is not None
                else self.omit_response_on_success
            ),
        )


@dataclass
class TokenInfo:
    """Access token information with expiration tracking.

    Attributes:
        token: The access token string.
        expires_at: Unix timestamp when token expires.
    """

    token: str
    expires_at: float

    @classmethod
    def from_lifetime(cls, token: str, expires_in: float) -> TokenInfo:
        return cls(token=token, expires_at=time.time() + expires_in)

    def is_expired(self, buffer_seconds: float = 60) -> bool:
        """Check if token is expired or about to expire.

        Args:
            buffer_seconds: Consider expired if within this many seconds of expiry.

        Returns:
            True if token is expired or will expire soon.
        """
        return time.time() >= (self.expires_at - buffer_seconds)

"""Request/response pipeline shared by every vendor client.

The pipeline wraps one ``httpx.AsyncClient`` and turns each call into exactly
one HTTP request:

1. build a fresh :class:`~.models.RequestDescriptor`
2. convert request body keys (skipped for binary or multipart payloads)
3. run the vendor's authentication hook (headers, query token, signed proof)
4. run the ``on_request`` observability hook
5. send the request
6. translate failures into :class:`~.errors.MessagingAPIError`, or unwrap and
   convert the response body

There is no retry at this layer; callers own retry and backoff policy.
"""

from __future__ import annotations

import inspect
import json
from collections.abc import Awaitable, Callable, Mapping, Sequence
from typing import Any
from urllib.parse import urlencode

import httpx

from ...core.logger import get_logger
from .case import CaseStyle, transcode
from .errors import BatchRequestError, MessagingAPIError
from .models import BatchRequest, BodyFormat, FileUpload, RequestDescriptor, ResultPolicy
from .utils import ErrorAdapter

logger = get_logger("pipeline")

AuthHook = Callable[[RequestDescriptor], Awaitable[RequestDescriptor]]
RequestHook = Callable[[RequestDescriptor], Any]


def default_on_request(request: RequestDescriptor) -> None:
    """Log every outgoing request at debug level."""
    logger.debug("%s %s", request.method, request.url, extra={"params": dict(request.params)})


def _never_fails(body: Any, cause: Any) -> MessagingAPIError | None:
    return None


def _stringify(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (dict, list, tuple)):
        return json.dumps(value, ensure_ascii=False, separators=(",", ":"))
    return str(value)


def _read_all(content: Any) -> bytes:
    if hasattr(content, "read"):
        return content.read()
    return bytes(content)


def encode_form(body: Mapping[str, Any]) -> str:
    """URL-encode a flat form body, JSON-encoding nested values."""
    return urlencode({key: _stringify(value) for key, value in body.items() if value is not None})


class RequestPipeline:
    """Configurable request/response pipeline for one vendor API origin.

    Args:
        vendor: Vendor name used in error messages and log context.
        base_url: Origin (plus path prefix) relative paths are resolved against.
        headers: Default headers sent with every request.
        request_case: Key style for outgoing JSON/form bodies, or None.
        response_case: Key style for incoming JSON bodies, or None.
        request_exclude: Keys whose subtrees are never converted on the way out.
        error_adapter: ``(body, cause) -> MessagingAPIError | None``; returns
            None when the body does not report a failure.
        auth: Async hook returning a new descriptor with credentials attached.
        on_request: Hook called with each outgoing descriptor (sync or async).
        body_format: ``"json"`` or ``"form"`` (url-encoded).
        timeout: HTTP timeout in seconds.
        transport: Optional httpx transport (tests, proxies).
    """

    def __init__(
        self,
        vendor: str,
        base_url: str,
        *,
        headers: Mapping[str, str] | None = None,
        request_case: CaseStyle | None = None,
        response_case: CaseStyle | None = None,
        request_exclude: Sequence[str] = (),
        error_adapter: ErrorAdapter | None = None,
        auth: AuthHook | None = None,
        on_request: RequestHook | None = None,
        body_format: BodyFormat = "json",
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.vendor = vendor
        self.base_url = base_url
        self.headers = dict(headers or {})
        self.request_case = request_case
        self.response_case = response_case
        self.request_exclude = tuple(request_exclude)
        self.error_adapter = error_adapter or _never_fails
        self.auth = auth
        self.on_request = on_request or default_on_request
        self.body_format = body_format
        self.timeout = timeout
        self.transport = transport

        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> RequestPipeline:
        await self.connect()
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    async def connect(self) -> None:
        """Initialize HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                headers=self.headers,
                timeout=self.timeout,
                transport=self.transport,
            )
            logger.debug("%s pipeline connected to %s", self.vendor, self.base_url)

    async def close(self) -> None:
        """Close HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None
            logger.debug("%s pipeline closed", self.vendor)

    @property
    def is_connected(self) -> bool:
        return self._client is not None

    def _ensure_client(self) -> httpx.AsyncClient:
        """Ensure HTTP client is initialized."""
        if self._client is None:
            raise RuntimeError(
                f"{self.vendor} client not connected. Use 'async with' or call connect() first."
            )
        return self._client

    def build_request(
        self,
        method: str,
        path: str,
        *,
        body: Any = None,
        params: Mapping[str, Any] | None = None,
        headers: Mapping[str, str] | None = None,
        files: Mapping[str, Any] | None = None,
    ) -> RequestDescriptor:
        """Build a descriptor with the request body keys already converted."""
        request = RequestDescriptor(
            method=method.upper(),
            url=path,
            headers=dict(headers or {}),
            params={key: value for key, value in (params or {}).items() if value is not None},
            body=body,
            files=files,
            body_format=self.body_format,
        )
        if request.is_binary or body is None or self.request_case is None:
            return request
        return request.with_body(transcode(body, self.request_case, exclude=self.request_exclude))

    async def execute(
        self,
        method: str,
        path: str,
        *,
        body: Any = None,
        params: Mapping[str, Any] | None = None,
        headers: Mapping[str, str] | None = None,
        files: Mapping[str, Any] | None = None,
        not_found: ResultPolicy = ResultPolicy.RAISE,
        unwrap: Callable[[Any], Any] | None = None,
        raw: bool = False,
        authenticate: bool = True,
    ) -> Any:
        """Send one request and return the unwrapped, key-converted payload.

        Args:
            method: HTTP method.
            path: Path relative to ``base_url`` (or an absolute URL).
            body: JSON-like body, or opaque bytes / :class:`FileUpload`.
            params: Query string parameters; None values are dropped.
            headers: Extra headers for this call.
            files: Multipart files; ``body`` is then sent as form fields.
            not_found: Per-endpoint policy for HTTP 404 responses.
            unwrap: Applied to the parsed body before key conversion.
            raw: Return the raw response bytes instead of parsing JSON. A JSON
                body is still checked by the error adapter first.
            authenticate: Run the auth hook (disabled for token requests).

        Returns:
            The response payload, or None for a 404 under
            ``ResultPolicy.NULL_ON_NOT_FOUND``.

        Raises:
            MessagingAPIError: On transport failure, non-2xx responses, or a
                2xx response whose envelope reports an error.
        """
        request = self.build_request(
            method, path, body=body, params=params, headers=headers, files=files
        )
        response = await self.send(request, authenticate=authenticate)
        return self._handle_response(response, not_found=not_found, unwrap=unwrap, raw=raw)

    async def send(
        self, request: RequestDescriptor, *, authenticate: bool = True
    ) -> httpx.Response:
        """Authenticate, announce and send ``request``; no response handling."""
        client = self._ensure_client()
        if authenticate and self.auth is not None:
            request = await self.auth(request)

        hook_result = self.on_request(request)
        if inspect.isawaitable(hook_result):
            await hook_result

        content = self._content_kwargs(request)
        headers = {**request.headers, **content.pop("headers", {})}
        try:
            return await client.request(
                request.method,
                request.url,
                params=request.params or None,
                headers=headers or None,
                **content,
            )
        except httpx.TransportError as exc:
            logger.warning(
                "%s request failed: %s",
                self.vendor,
                exc,
                extra={"vendor": self.vendor, "url": request.url, "error": str(exc)},
            )
            error = self.error_adapter(None, exc) or MessagingAPIError(
                f"{self.vendor} API - {exc}", vendor=self.vendor, cause=exc
            )
            raise error from exc

    def _content_kwargs(self, request: RequestDescriptor) -> dict[str, Any]:
        body = request.body
        if request.files is not None:
            files = {
                name: value.as_httpx_file() if isinstance(value, FileUpload) else value
                for name, value in request.files.items()
            }
            data = {key: _stringify(value) for key, value in (body or {}).items()}
            return {"files": files, "data": data}
        if body is None:
            return {}
        if isinstance(body, FileUpload):
            return {
                "content": _read_all(body.content),
                "headers": {
                    "Content-Type": body.content_type or "application/octet-stream",
                },
            }
        if isinstance(body, (bytes, bytearray)) or hasattr(body, "read"):
            return {"content": _read_all(body)}
        if request.body_format == "form":
            return {
                "content": encode_form(body),
                "headers": {
                    "Content-Type": "application/x-www-form-urlencoded",
                },
            }
        return {"json": body}

    @staticmethod
    def _is_json(response: httpx.Response) -> bool:
        # Binary endpoints report errors as JSON, sometimes labelled text/plain
        if "json" in response.headers.get("Content-Type", ""):
            return True
        return response.content.lstrip()[:1] in (b"{", b"[")

    @staticmethod
    def _parse_body(response: httpx.Response) -> Any:
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            return response.text

    def _handle_response(
        self,
        response: httpx.Response,
        *,
        not_found: ResultPolicy,
        unwrap: Callable[[Any], Any] | None,
        raw: bool,
    ) -> Any:
        if response.is_success:
            if raw and not self._is_json(response):
                return response.content
            body = self._parse_body(response)
            error = self.error_adapter(body, response)
            if error is not None:
                self._log_failure(response, error)
                raise error
            if raw:
                return response.content
            if unwrap is not None:
                body = unwrap(body)
            if self.response_case is not None:
                body = transcode(body, self.response_case)
            return body

        if response.status_code == 404 and not_found is ResultPolicy.NULL_ON_NOT_FOUND:
            return None

        body = self._parse_body(response)
        exc = httpx.HTTPStatusError(
            f"HTTP {response.status_code} for {response.request.url}",
            request=response.request,
            response=response,
        )
        error = self.error_adapter(body, exc) or MessagingAPIError(
            f"{self.vendor} API - HTTP {response.status_code}",
            vendor=self.vendor,
            cause=exc,
            status_code=response.status_code,
            response_body=body,
        )
        self._log_failure(response, error)
        raise error from exc

    def _log_failure(self, response: httpx.Response, error: MessagingAPIError) -> None:
        logger.warning(
            "%s",
            error.message,
            extra={
                "vendor": self.vendor,
                "url": str(response.request.url),
                "status_code": response.status_code,
            },
        )

    def encode_batch_item(self, item: BatchRequest) -> dict[str, Any]:
        """Encode a batch item; its body becomes a url-encoded string."""
        encoded: dict[str, Any] = {"method": item.method.upper(), "relative_url": item.relative_url}
        if item.body is not None:
            body = item.body
            if self.request_case is not None:
                body = transcode(body, self.request_case, exclude=self.request_exclude)
            encoded["body"] = encode_form(body)
        if item.name is not None:
            encoded["name"] = item.name
        if item.depends_on is not None:
            encoded["depends_on"] = item.depends_on
        if item.omit_response_on_success is not None:
            encoded["omit_response_on_success"] = item.omit_response_on_success
        return encoded

    async def execute_batch(
        self,
        items: Sequence[BatchRequest],
        *,
        path: str = "",
        params: Mapping[str, Any] | None = None,
        include_headers: bool = True,
        max_size: int | None = None,
    ) -> list[Any]:
        """Submit several operations in one vendor batch request.

        Batches are never split here; a batch above ``max_size`` is rejected
        before anything is sent.

        Returns:
            One slot per item, in input order: the item's parsed body on
            success, None when the vendor omitted the response
            (``omit_response_on_success``), or a :class:`BatchRequestError`
            instance (returned, not raised) when that item failed.

        Raises:
            ValueError: If the batch exceeds ``max_size``.
            MessagingAPIError: If the batch request itself fails.
        """
        if max_size is not None and len(items) > max_size:
            raise ValueError(
                f"{self.vendor} batch holds {len(items)} requests; the limit is {max_size}"
            )
        if not items:
            return []

        body = {
            "batch": [self.encode_batch_item(item) for item in items],
            "include_headers": include_headers,
        }
        request = RequestDescriptor(
            method="POST",
            url=path,
            params={key: value for key, value in (params or {}).items() if value is not None},
            body=body,
            body_format="json",
        )
        response = await self.send(request)
        responses = self._handle_response(
            response, not_found=ResultPolicy.RAISE, unwrap=None, raw=False
        )

        if not isinstance(responses, list) or len(responses) != len(items):
            raise MessagingAPIError(
                f"{self.vendor} API - batch response does not match "
                f"the {len(items)} submitted requests",
                vendor=self.vendor,
                cause=response,
                status_code=response.status_code,
                response_body=responses,
            )

        return [self._batch_slot(item, slot) for item, slot in zip(items, responses)]

    def _batch_slot(self, item: BatchRequest, slot: Any) -> Any:
        if slot is None:
            return None
        code = slot.get("code", 200)
        body = slot.get("body")
        if isinstance(body, str):
            try:
                body = json.loads(body)
            except ValueError:
                pass
        if 200 <= code < 300:
            if self.response_case is not None:
                body = transcode(body, self.response_case)
            return body

        error = self.error_adapter(body, slot)
        message = error.message if error else f"{self.vendor} API - HTTP {code}"
        return BatchRequestError(
            message,
            request=item,
            vendor=self.vendor,
            cause=slot,
            status_code=code,
            response_body=body,
        )


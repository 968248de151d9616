"""Common client components and utilities.

This module provides the shared layer used by all vendor clients.

Components:
- case: snake_case / camelCase / PascalCase key conversion
- pipeline: RequestPipeline wrapping one httpx.AsyncClient per vendor origin
- pagination: Page and fetch_all for cursor-paginated endpoints
- errors: MessagingAPIError, the single error type raised by every client
- models: request descriptors, batch items, uploads and token state
"""

from .case import (
    CaseStyle,
    camelcase,
    camelcase_keys,
    camelcase_keys_deep,
    pascalcase,
    pascalcase_keys,
    pascalcase_keys_deep,
    snakecase,
    snakecase_keys,
    snakecase_keys_deep,
    transcode,
)
from .errors import BatchRequestError, MessagingAPIError
from .models import BatchRequest, FileUpload, RequestDescriptor, ResultPolicy, TokenInfo
from .pagination import Page, fetch_all, iterate_pages
from .pipeline import RequestPipeline
from .utils import create_error_adapter, resolve_aliases

__all__ = [
    # Case conversion
    "CaseStyle",
    "transcode",
    "snakecase",
    "camelcase",
    "pascalcase",
    "snakecase_keys",
    "snakecase_keys_deep",
    "camelcase_keys",
    "camelcase_keys_deep",
    "pascalcase_keys",
    "pascalcase_keys_deep",
    # Pipeline
    "RequestPipeline",
    "RequestDescriptor",
    "ResultPolicy",
    "BatchRequest",
    "FileUpload",
    "TokenInfo",
    # Errors
    "MessagingAPIError",
    "BatchRequestError",
    "create_error_adapter",
    # Pagination
    "Page",
    "fetch_all",
    "iterate_pages",
    "resolve_aliases",
]

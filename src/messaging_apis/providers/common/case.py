"""Key-case conversion for JSON-like payloads.

Vendors disagree on naming conventions: the Graph, Telegram, Slack and WeChat
APIs speak ``snake_case``, LINE speaks ``camelCase`` and parts of the Viber
keyboard schema use ``PascalCase``. Callers of this package always write and
read ``camelCase`` or ``snake_case`` dictionaries, and the pipeline converts at
the wire boundary with the helpers below.

Only mapping *keys* are rewritten. String values, bytes and any other opaque
objects (file handles, :class:`~.models.FileUpload`, arbitrary instances) pass
through unchanged.

Known limitation: keys with consecutive capitals (``userID``) or digits next
to letters do not always survive a round trip (``userID -> user_id -> userId``).
"""

from __future__ import annotations

import re
from collections.abc import Callable, Collection, Mapping
from enum import Enum
from functools import lru_cache
from typing import Any

_SEPARATORS = re.compile(r"[-\s]+")
_ACRONYM_BOUNDARY = re.compile(r"([A-Z]+)([A-Z][a-z])")
_LOWER_UPPER_BOUNDARY = re.compile(r"([a-z0-9])([A-Z])")
_LETTER_DIGIT_BOUNDARY = re.compile(r"([A-Za-z])([0-9])")


class CaseStyle(str, Enum):
    """Target naming convention for mapping keys."""

    SNAKE = "snake"
    CAMEL = "camel"
    PASCAL = "pascal"


def _split_leading_underscores(key: str) -> tuple[str, str]:
    stripped = key.lstrip("_")
    return key[: len(key) - len(stripped)], stripped


@lru_cache(maxsize=4096)
def snakecase(key: str) -> str:
    """Convert a key to ``snake_case``.

    >>> snakecase("myKey"), snakecase("has2fa"), snakecase("image1024")
    ('my_key', 'has_2fa', 'image_1024')
    """
    prefix, body = _split_leading_underscores(key)
    if not body:
        return key
    body = _SEPARATORS.sub("_", body)
    body = _ACRONYM_BOUNDARY.sub(r"\1_\2", body)
    body = _LOWER_UPPER_BOUNDARY.sub(r"\1_\2", body)
    body = _LETTER_DIGIT_BOUNDARY.sub(r"\1_\2", body)
    return prefix + body.lower()


@lru_cache(maxsize=4096)
def camelcase(key: str) -> str:
    """Convert a key to ``camelCase``.

    >>> camelcase("my_key"), camelcase("has_2fa"), camelcase("image_1024")
    ('myKey', 'has2fa', 'image1024')
    """
    prefix, body = _split_leading_underscores(key)
    if not body:
        return key
    body = _SEPARATORS.sub("_", body)
    parts = [part for part in body.split("_") if part]
    if len(parts) == 1:
        word = parts[0]
        # A single all-caps word (``ID``, ``URL``) is left alone
        if word.isupper():
            return prefix + word
        return prefix + word[0].lower() + word[1:]

    words = [part.lower() if part.isupper() else part for part in parts]
    head = words[0][0].lower() + words[0][1:]
    tail = "".join(word[0].upper() + word[1:] for word in words[1:])
    return prefix + head + tail


@lru_cache(maxsize=4096)
def pascalcase(key: str) -> str:
    """Convert a key to ``PascalCase``.

    >>> pascalcase("bg_color"), pascalcase("actionType")
    ('BgColor', 'ActionType')
    """
    converted = camelcase(key)
    prefix, body = _split_leading_underscores(converted)
    if not body:
        return converted
    return prefix + body[0].upper() + body[1:]


_CONVERTERS: dict[CaseStyle, Callable[[str], str]] = {
    CaseStyle.SNAKE: snakecase,
    CaseStyle.CAMEL: camelcase,
    CaseStyle.PASCAL: pascalcase,
}


def get_converter(direction: CaseStyle | str) -> Callable[[str], str]:
    """Return the key conversion function for ``direction``."""
    return _CONVERTERS[CaseStyle(direction)]


def transcode(
    value: Any,
    direction: CaseStyle | str,
    *,
    exclude: Collection[str] = (),
    deep: bool = True,
) -> Any:
    """Rewrite every mapping key in ``value`` to the ``direction`` convention.

    Args:
        value: Any JSON-like value. Non JSON-like values are returned as-is.
        direction: Target :class:`CaseStyle` (or its string value).
        exclude: Keys whose spelling and entire sub-value are left untouched,
            for blocks holding user-defined field names such as metadata.
        deep: When False only the keys of the outermost mapping(s) are converted.

    Returns:
        A new value with the same structure; the input is never modified.
    """
    convert = get_converter(direction)
    excluded = frozenset(exclude)
    return _transcode(value, convert, excluded, deep)


def _transcode(
    value: Any,
    convert: Callable[[str], str],
    exclude: frozenset[str],
    deep: bool,
) -> Any:
    if isinstance(value, Mapping):
        result: dict[Any, Any] = {}
        for key, item in value.items():
            if not isinstance(key, str):
                result[key] = _transcode(item, convert, exclude, deep) if deep else _copy(item)
            elif key in exclude:
                result[key] = _copy(item)
            else:
                result[convert(key)] = (
                    _transcode(item, convert, exclude, deep) if deep else _copy(item)
                )
        return result
    if isinstance(value, (list, tuple)):
        return [_transcode(item, convert, exclude, deep) for item in value]
    return value


def _copy(value: Any) -> Any:
    """Copy JSON-like containers as they are; opaque objects are shared."""
    if isinstance(value, Mapping):
        return {key: _copy(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_copy(item) for item in value]
    if isinstance(value, tuple):
        return tuple(_copy(item) for item in value)
    return value


def snakecase_keys(value: Any, *, deep: bool = False, exclude: Collection[str] = ()) -> Any:
    return transcode(value, CaseStyle.SNAKE, exclude=exclude, deep=deep)


def snakecase_keys_deep(value: Any, *, exclude: Collection[str] = ()) -> Any:
    return transcode(value, CaseStyle.SNAKE, exclude=exclude)


def camelcase_keys(value: Any, *, deep: bool = False, exclude: Collection[str] = ()) -> Any:
    return transcode(value, CaseStyle.CAMEL, exclude=exclude, deep=deep)


def camelcase_keys_deep(value: Any, *, exclude: Collection[str] = ()) -> Any:
    return transcode(value, CaseStyle.CAMEL, exclude=exclude)


def pascalcase_keys(value: Any, *, deep: bool = False, exclude: Collection[str] = ()) -> Any:
    return transcode(value, CaseStyle.PASCAL, exclude=exclude, deep=deep)


def pascalcase_keys_deep(value: Any, *, exclude: Collection[str] = ()) -> Any:
    return transcode(value, CaseStyle.PASCAL, exclude=exclude)

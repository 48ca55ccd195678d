"""
Log message shapes.

A message arrives as plain text, an exception, a host soft-error object or
arbitrary data. ``resolve_message`` classifies it once at the call
boundary into a closed set of variants; ``format_message`` renders them.
"""

from __future__ import annotations

import os
import traceback
from dataclasses import dataclass
from typing import Any, Callable, Mapping, Union

import orjson

SOFT_ERROR_ACCESSOR = "get_error_message"


@dataclass(frozen=True)
class Text:
    text: str


@dataclass(frozen=True)
class Structured:
    data: Any


@dataclass(frozen=True)
class ErrorLike:
    description: str
    file: str
    line: int


@dataclass(frozen=True)
class SoftError:
    accessor: Callable[[], Any]


Message = Union[Text, Structured, ErrorLike, SoftError]


def _json_default(obj: Any) -> Any:
    """Fallback serializer for objects orjson does not know."""
    model_dump = getattr(obj, "model_dump", None)
    if callable(model_dump):
        return model_dump()
    if isinstance(obj, (set, frozenset)):
        return list(obj)
    if hasattr(obj, "__dict__"):
        return {k: v for k, v in vars(obj).items() if not k.startswith("_")}
    return str(obj)


def json_dumps(value: Any) -> str:
    """Compact JSON, e.g. ``{"a":1}``. Never raises."""
    try:
        return orjson.dumps(
            value,
            default=_json_default,
            option=orjson.OPT_NON_STR_KEYS | orjson.OPT_UTC_Z | orjson.OPT_NAIVE_UTC,
        ).decode()
    except (TypeError, orjson.JSONEncodeError):
        return orjson.dumps(repr(value)).decode()


def _error_location(exc: BaseException) -> tuple[str, int]:
    frames = traceback.extract_tb(exc.__traceback__) if exc.__traceback__ else []
    if not frames:
        return "unknown", 0
    last = frames[-1]
    return last.filename, last.lineno or 0


def resolve_message(message: Any) -> Message:
    if isinstance(message, str):
        return Text(message)
    if isinstance(message, BaseException):
        file, line = _error_location(message)
        return ErrorLike(str(message) or type(message).__name__, file, line)
    accessor = getattr(message, SOFT_ERROR_ACCESSOR, None)
    if callable(accessor):
        return SoftError(accessor)
    return Structured(message)


def format_message(message: Any) -> str:
    """
    Render any message to a single string.

    - exception -> ``"{description} in {basename(file)}:{line}"``
    - soft error -> the accessor's return value
    - other data -> ``"Data: {json}"``
    - text -> unchanged
    """
    resolved = message if isinstance(message, (Text, Structured, ErrorLike, SoftError)) else resolve_message(message)

    if isinstance(resolved, Text):
        return resolved.text
    if isinstance(resolved, ErrorLike):
        return f"{resolved.description} in {os.path.basename(resolved.file)}:{resolved.line}"
    if isinstance(resolved, SoftError):
        try:
            return str(resolved.accessor())
        except Exception:
            return "Data: " + json_dumps(None)
    return "Data: " + json_dumps(resolved.data)


def format_context(context: Mapping[str, Any]) -> str:
    return json_dumps(dict(context))

"""summarize(): short display content and child count for a classified value."""

from __future__ import annotations

import datetime
import logging
import re
from typing import Any, NamedTuple

import numpy as np

from site_xray.tree.nodes import CONTAINER_TYPES, DataType, Descriptor

__all__ = ["ELLIPSIS", "Summary", "summarize", "truncate"]

logger = logging.getLogger(__name__)

ELLIPSIS = "…"

_REGEX_FLAGS: tuple[tuple[re.RegexFlag, str], ...] = (
    (re.ASCII, "a"),
    (re.IGNORECASE, "i"),
    (re.LOCALE, "L"),
    (re.MULTILINE, "m"),
    (re.DOTALL, "s"),
    (re.VERBOSE, "x"),
)


class Summary(NamedTuple):
    """Result of summarize().

    ``type`` equals the requested tag unless summarizing failed, in which
    case it is UNKNOWN and ``content`` is ``"?"``.
    """

    type: DataType
    content: str | list[Descriptor] | None
    length: int | None


def truncate(text: str, cutoff: int) -> str:
    """Cut ``text`` to ``cutoff`` characters plus an ellipsis if it is longer."""
    if len(text) > cutoff:
        return text[:cutoff] + ELLIPSIS
    return text


def summarize(tag: DataType, value: Any, cutoff: int = 45) -> Summary:
    """Return the display content and length for a value of type ``tag``.

    Scalar content longer than ``cutoff`` is truncated regardless of the
    tag.  Containers get an empty child list only when they have at least
    one element.
    """
    try:
        content, length = _summarize(tag, value)
    except Exception:  # noqa: BLE001 - hostile __len__ / __str__ implementations
        logger.debug("Could not summarize %s value", tag, exc_info=True)
        return Summary(DataType.UNKNOWN, "?", None)

    if isinstance(content, str):
        content = truncate(content, cutoff)
    return Summary(tag, content, length)


def _summarize(tag: DataType, value: Any) -> tuple[str | list[Descriptor] | None, int | None]:
    if tag in (DataType.BOOLEAN, DataType.STRING, DataType.NUMBER):
        return str(value), None

    if tag == DataType.REGEXP:
        return _regexp_source(value), None

    if tag == DataType.DATE:
        return _iso_format(value), None

    if tag == DataType.SYMBOL:
        return getattr(value, "name", None), None

    if tag == DataType.FUNCTION:
        return _function_name(value), None

    if tag == DataType.INSTANCE:
        # A class has no more useful "type name" than its own name.
        if isinstance(value, type):
            return value.__name__, None
        if isinstance(value, range):
            return repr(value), None
        return type(value).__name__, None

    if tag in CONTAINER_TYPES:
        length = _length(tag, value)
        return ([] if length > 0 else None), length

    if tag in (DataType.NULL, DataType.UNDEFINED):
        return None, None

    return "?", None


def _length(tag: DataType, value: Any) -> int:
    if isinstance(value, np.ndarray):
        return int(value.shape[0]) if value.ndim else 0
    if tag == DataType.OBJECT and not isinstance(value, dict):
        return len(vars(value))
    return len(value)


def _function_name(value: Any) -> str:
    name = getattr(value, "__name__", None)
    if not name or name == "<lambda>":
        return "anonymous"
    return str(name)


def _regexp_source(pattern: re.Pattern[Any]) -> str:
    source = pattern.pattern
    if isinstance(source, bytes):
        source = source.decode("latin-1")
    flags = "".join(letter for flag, letter in _REGEX_FLAGS if pattern.flags & flag)
    return f"/{source}/{flags}"


def _iso_format(value: datetime.date | datetime.time) -> str:
    if isinstance(value, datetime.datetime) and value.utcoffset() is not None:
        utc = value.astimezone(datetime.UTC)
        return utc.replace(tzinfo=None).isoformat(timespec="milliseconds") + "Z"
    return value.isoformat()

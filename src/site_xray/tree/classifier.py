"""classify(): maps an arbitrary runtime value to one of the sixteen DataType tags.

The dispatch order matters:

- ``bool`` is checked before numbers because ``bool`` subclasses ``int``.
- Enum members are checked before ``str`` / numbers because ``StrEnum`` and
  ``IntEnum`` members are also strings / ints.
- Exact ``dict`` is a plain record (OBJECT); every other mapping is a MAP.
- ``numpy.ndarray`` is not a registered ``Sequence`` and is checked
  explicitly.

The function is total: if inspecting a hostile object raises (broken
``__class__`` properties, proxies that fail on ``isinstance``), the value is
tagged UNKNOWN instead.
"""

from __future__ import annotations

import datetime
import functools
import logging
import numbers
import re
import types
from collections import deque
from collections.abc import Mapping, Sequence, Set
from enum import Enum
from typing import Any, Final

import numpy as np

from site_xray.tree.nodes import DataType

__all__ = ["UNDEFINED", "classify"]

logger = logging.getLogger(__name__)


class _Undefined:
    """Marker for a value that does not exist (a missing template variable)."""

    _instance: _Undefined | None = None

    def __new__(cls) -> _Undefined:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNDEFINED"

    def __bool__(self) -> bool:
        return False


UNDEFINED: Final = _Undefined()

# Callables that are "plain functions".  Every other callable (classes,
# instances with __call__, ufuncs) is tagged INSTANCE.
_FUNCTION_TYPES: tuple[type, ...] = (
    types.FunctionType,
    types.BuiltinFunctionType,
    types.MethodType,
    types.BuiltinMethodType,
    types.MethodWrapperType,
    functools.partial,
)

# Sequences that are not inspected element by element: binary buffers, and
# ranges, whose length is unbounded.
_OPAQUE_SEQUENCES: tuple[type, ...] = (bytes, bytearray, memoryview, range)


def classify(value: Any) -> DataType:
    """Return the DataType tag for ``value``.

    Args:
        value: Any Python object.

    Returns:
        One of the sixteen DataType members.  Never raises.
    """
    try:
        return _classify(value)
    except Exception:  # noqa: BLE001 - classification must be total
        logger.debug("Could not classify value of %r", type(value), exc_info=True)
        return DataType.UNKNOWN


def _classify(value: Any) -> DataType:
    if value is UNDEFINED:
        return DataType.UNDEFINED

    # bool before numbers: bool subclasses int
    if isinstance(value, (bool, np.bool_)):
        return DataType.BOOLEAN

    if isinstance(value, Enum):
        return DataType.SYMBOL

    if isinstance(value, str):
        return DataType.STRING

    if isinstance(value, (numbers.Number, np.number)):
        return DataType.NUMBER

    if value is None:
        return DataType.NULL

    if callable(value):
        if isinstance(value, _FUNCTION_TYPES):
            return DataType.FUNCTION
        return DataType.INSTANCE

    if isinstance(value, np.ndarray):
        return DataType.ARRAY

    if isinstance(value, re.Pattern):
        return DataType.REGEXP

    # datetime.datetime subclasses datetime.date
    if isinstance(value, (datetime.date, datetime.time)):
        return DataType.DATE

    if type(value) is dict or type(value) is types.SimpleNamespace:
        return DataType.OBJECT

    if isinstance(value, Mapping):
        return DataType.MAP

    if isinstance(value, Set):
        return DataType.SET

    if isinstance(value, _OPAQUE_SEQUENCES):
        return DataType.INSTANCE

    if isinstance(value, (Sequence, deque)):
        return DataType.ARRAY

    return DataType.INSTANCE

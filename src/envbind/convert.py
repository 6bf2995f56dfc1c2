"""String-to-value conversion for the supported field types.

The set of supported types is closed: ``str``, ``int`` and ``bool``. Adding a
type means adding an entry to ``_CONVERTERS``; anything else is rejected with
:class:`UnsupportedTypeError`.

An empty string converts to :data:`ABSENT` so callers can tell "not set" apart
from "set to the zero value".
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Callable, Final

from .errors import ConversionError, UnsupportedTypeError


class _Absent:
    __slots__ = ()

    def __repr__(self) -> str:
        return "ABSENT"

    def __bool__(self) -> bool:
        return False


ABSENT: Final = _Absent()
"""Result of converting an empty string."""

_INT_PATTERN = re.compile(r"[+-]?[0-9]+")
_INT_MIN = -(2**63)
_INT_MAX = 2**63 - 1

_TRUE_LITERALS = frozenset({"1", "t", "T", "TRUE", "true", "True"})
_FALSE_LITERALS = frozenset({"0", "f", "F", "FALSE", "false", "False"})


def _parse_str(raw: str) -> str:
    return raw


def _parse_int(raw: str) -> int:
    # int() alone would also accept whitespace, underscores and non-ASCII digits.
    if not _INT_PATTERN.fullmatch(raw):
        raise ConversionError(raw, "int")
    try:
        value = int(raw)
    except ValueError as e:
        # Digit-count limit for str -> int conversion.
        raise ConversionError(raw, "int") from e
    if not _INT_MIN <= value <= _INT_MAX:
        raise ConversionError(raw, "int")
    return value


def _parse_bool(raw: str) -> bool:
    if raw in _TRUE_LITERALS:
        return True
    if raw in _FALSE_LITERALS:
        return False
    raise ConversionError(raw, "bool")


@dataclass(frozen=True, slots=True)
class _Converter:
    name: str
    parse: Callable[[str], Any]
    zero: Any


_CONVERTERS: Final[dict[type, _Converter]] = {
    str: _Converter("string", _parse_str, ""),
    int: _Converter("int", _parse_int, 0),
    bool: _Converter("bool", _parse_bool, False),
}


def _converter_for(tp: Any) -> _Converter:
    # Identity lookup: bool must never fall back to the int converter.
    for known, conv in _CONVERTERS.items():
        if tp is known:
            return conv
    raise UnsupportedTypeError(_describe(tp))


def _describe(tp: Any) -> str:
    name = getattr(tp, "__name__", None)
    return name if isinstance(name, str) else repr(tp)


def supported_types() -> tuple[type, ...]:
    return tuple(_CONVERTERS)


def type_name(tp: Any) -> str:
    return _converter_for(tp).name


def zero_value(tp: Any) -> Any:
    return _converter_for(tp).zero


def convert(tp: Any, raw: str) -> Any:
    """Convert ``raw`` into a value of type ``tp``.

    Returns :data:`ABSENT` for an empty string.

    Raises:
        UnsupportedTypeError: If ``tp`` has no converter (checked first).
        ConversionError: If ``raw`` is not a valid literal of ``tp``.
    """

    conv = _converter_for(tp)
    if raw == "":
        return ABSENT
    return conv.parse(raw)

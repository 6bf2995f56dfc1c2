from __future__ import annotations

from typing import Any, Sequence


class EnvError(Exception):
    """Base exception for this project."""


class InvalidTargetError(EnvError):
    """Raised when the target is not a mutable dataclass instance."""

    def __init__(self, target: object):
        super().__init__(
            f"expected value must be a mutable dataclass instance, got {type(target).__name__}"
        )


class UnsupportedTypeError(EnvError, TypeError):
    """Raised when a field's declared type has no converter."""

    def __init__(self, type_name: str, *, field: str | None = None):
        message = f"unsupported field type: {type_name}"
        super().__init__(f"field {field}: {message}" if field else message)
        self.type_name = type_name
        self.field = field


class ConversionError(EnvError, ValueError):
    """Raised when a non-empty string cannot be parsed as the target type."""

    def __init__(self, value: str, type_name: str, *, key: str | None = None):
        message = f'could not convert value "{value}" into {type_name} type'
        super().__init__(f"{key}: {message}" if key else message)
        self.value = value
        self.type_name = type_name
        self.key = key

    def with_key(self, key: str) -> ConversionError:
        return ConversionError(self.value, self.type_name, key=key)


class RequiredMissingError(EnvError):
    def __init__(self, key: str):
        super().__init__(f"{key} required")
        self.key = key


class OptionNotAllowedError(EnvError):
    def __init__(self, key: str, value: Any, options: Sequence[Any]):
        rendered = " ".join(format_value(o) for o in options)
        super().__init__(f'{key}="{format_value(value)}" not in allowed options: [{rendered}]')
        self.key = key
        self.value = value
        self.options = tuple(options)


def format_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)

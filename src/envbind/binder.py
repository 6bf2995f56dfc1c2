from __future__ import annotations

import os
from typing import Any, Mapping

from .convert import ABSENT, convert, type_name, zero_value
from .errors import (
    ConversionError,
    OptionNotAllowedError,
    RequiredMissingError,
    UnsupportedTypeError,
)
from .fields import FieldDescriptor
from .observability.logging import get_logger
from .tag import parse_policy

log = get_logger(__name__)


def derive_key(prefix: str, name: str) -> str:
    """Compose the environment variable name: ``(prefix + name).upper()``."""

    return (prefix + name).upper()


def _contains(options: tuple[Any, ...], value: Any) -> bool:
    # Compare type as well as value so True never matches an int option of 1.
    return any(type(o) is type(value) and o == value for o in options)


def bind(
    prefix: str,
    descriptor: FieldDescriptor,
    environ: Mapping[str, str] | None = None,
) -> Any:
    """Resolve the value of one field.

    Order: parse the annotation, look up the variable, convert it, then fall
    back to the annotation default (unless ``required``) or the zero value,
    and finally check the allow-list. An unset variable and an empty one are
    treated the same.

    Raises:
        ConversionError: Bad default/option literal, or bad variable value
            (the latter carries the key).
        RequiredMissingError: ``required`` and the variable is unset or empty.
        OptionNotAllowedError: The resolved value is not one of ``options``.
        UnsupportedTypeError: The declared type has no converter.
    """

    try:
        type_name(descriptor.type)
    except UnsupportedTypeError as e:
        raise UnsupportedTypeError(e.type_name, field=descriptor.name) from e

    policy = parse_policy(descriptor.tag, descriptor.type)
    key = derive_key(prefix, policy.key or descriptor.name)

    env = os.environ if environ is None else environ
    raw = env.get(key, "")

    try:
        value = convert(descriptor.type, raw)
    except ConversionError as e:
        raise e.with_key(key) from e

    source = "env"
    if value is ABSENT:
        if policy.required:
            raise RequiredMissingError(key)
        if policy.has_default:
            value = policy.default
            source = "default"
        else:
            value = zero_value(descriptor.type)
            source = "zero"

    if policy.options and not _contains(policy.options, value):
        raise OptionNotAllowedError(key, value, policy.options)

    log.debug("env_field_bound", key=key, field=descriptor.name, source=source)
    return value

"""Bind environment variables to dataclass fields.

Each field may carry an annotation string under the ``env`` metadata key
controlling the variable name, a default, whether it is required and an
allow-list of values.
"""

from __future__ import annotations

from .binder import bind, derive_key
from .convert import ABSENT, convert
from .errors import (
    ConversionError,
    EnvError,
    InvalidTargetError,
    OptionNotAllowedError,
    RequiredMissingError,
    UnsupportedTypeError,
)
from .fields import TAG_NAME, FieldDescriptor, env
from .processor import Env, field_descriptors, must_process, new_env, process
from .tag import BindingPolicy, parse_policy

__all__ = [
    "ABSENT",
    "BindingPolicy",
    "ConversionError",
    "Env",
    "EnvError",
    "FieldDescriptor",
    "InvalidTargetError",
    "OptionNotAllowedError",
    "RequiredMissingError",
    "TAG_NAME",
    "UnsupportedTypeError",
    "__version__",
    "bind",
    "convert",
    "derive_key",
    "env",
    "field_descriptors",
    "must_process",
    "new_env",
    "parse_policy",
    "process",
]

__version__ = "0.1.0"

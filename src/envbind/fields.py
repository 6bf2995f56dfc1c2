from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Any, Final

TAG_NAME: Final = "env"
"""Metadata key holding a field's annotation string."""


@dataclass(frozen=True, slots=True)
class FieldDescriptor:
    """Read-only view of one record field, built per processing call."""

    name: str
    type: Any
    tag: str = ""


def env(
    tag: str = "",
    *,
    default: Any = dataclasses.MISSING,
    default_factory: Any = dataclasses.MISSING,
    **kwargs: Any,
) -> Any:
    """Declare a dataclass field bound by an annotation string.

    ``default``/``default_factory`` only affect construction of the record;
    the value written by processing comes from the environment, the
    annotation's ``default=`` or the type's zero value.

        @dataclass
        class Config:
            port: int = env("key=http_port required", default=0)
    """

    metadata = dict(kwargs.pop("metadata", None) or {})
    metadata[TAG_NAME] = tag
    return dataclasses.field(
        default=default,
        default_factory=default_factory,
        metadata=metadata,
        **kwargs,
    )


def tag_of(f: dataclasses.Field[Any]) -> str:
    tag = f.metadata.get(TAG_NAME, "")
    return tag if isinstance(tag, str) else ""

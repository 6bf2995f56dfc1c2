"""Annotation parsing.

An annotation is a space separated list of tokens, each either a bare flag or
``name=value``::

    key=http_port required default=8080 options=80,8080

Recognised names are ``key``, ``required``, ``default`` and ``options``.
Everything else is ignored. There is no escaping: values cannot contain
spaces, and option values cannot contain commas.

A value runs to the end of its token, so ``default=a=b`` has the value
``a=b``. Go's env-tag parsers that split on every ``=`` would keep only
``a``.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any, Iterator

from .convert import ABSENT, convert
from .observability.logging import get_logger

log = get_logger(__name__)


class TokenKind(enum.Enum):
    EMPTY = "empty"
    FLAG = "flag"
    PARAM = "param"


@dataclass(frozen=True, slots=True)
class Token:
    kind: TokenKind
    name: str = ""
    value: str = ""
    raw: str = ""


def tokenize(tag: str) -> Iterator[Token]:
    for raw in tag.split(" "):
        if raw == "":
            yield Token(TokenKind.EMPTY)
            continue
        name, sep, value = raw.partition("=")
        if sep:
            yield Token(TokenKind.PARAM, name=name, value=value, raw=raw)
        else:
            yield Token(TokenKind.FLAG, name=name, raw=raw)


@dataclass(frozen=True, slots=True)
class BindingPolicy:
    key: str | None = None
    required: bool = False
    default: Any = None
    options: tuple[Any, ...] = ()

    @property
    def has_default(self) -> bool:
        return self.default is not None


def parse_policy(tag: str, tp: Any) -> BindingPolicy:
    """Parse an annotation string against the field type ``tp``.

    ``default=`` and ``options=`` values are converted eagerly.

    Raises:
        ConversionError: If a default or option value is not a valid ``tp``.
        UnsupportedTypeError: If a value has to be converted and ``tp`` has
            no converter.
    """

    key: str | None = None
    required = False
    default: Any = None
    options: tuple[Any, ...] = ()

    for token in tokenize(tag):
        if token.kind is TokenKind.EMPTY:
            continue

        if token.name == "required":
            required = True
        elif token.kind is TokenKind.FLAG:
            # Bare key/default/options carry no value.
            log.debug("env_tag_token_ignored", token=token.raw)
        elif token.name == "key":
            if token.value:
                key = token.value
        elif token.name == "default":
            value = convert(tp, token.value)
            default = None if value is ABSENT else value
        elif token.name == "options":
            options = _parse_options(token.value, tp)
        else:
            log.debug("env_tag_token_ignored", token=token.raw)

    return BindingPolicy(key=key, required=required, default=default, options=options)


def _parse_options(value: str, tp: Any) -> tuple[Any, ...]:
    out: list[Any] = []
    for item in value.split(","):
        converted = convert(tp, item)
        if converted is ABSENT:
            continue
        out.append(converted)
    return tuple(out)

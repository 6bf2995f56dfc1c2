"""Fill a dataclass instance from environment variables.

Fields are processed in declaration order and processing stops at the first
error. Fields bound before the failing one keep their new values; nothing is
rolled back.

No locking is done. Processing distinct records concurrently is fine;
processing the same record from several threads at once is the caller's
problem.
"""

from __future__ import annotations

import dataclasses
import inspect
import os
import typing
from pathlib import Path
from typing import Any, Mapping

from dotenv import dotenv_values, load_dotenv

from .binder import bind
from .errors import EnvError, InvalidTargetError
from .fields import FieldDescriptor, tag_of
from .observability.logging import get_logger

log = get_logger(__name__)


def _is_mutable_record(target: object) -> bool:
    if isinstance(target, type) or not dataclasses.is_dataclass(target):
        return False
    params = getattr(target, "__dataclass_params__", None)
    return not getattr(params, "frozen", False)


def field_descriptors(record_type: type) -> list[FieldDescriptor]:
    """Return the field table of a dataclass type, in declaration order."""

    fields = dataclasses.fields(record_type)
    try:
        hints = typing.get_type_hints(record_type)
    except NameError:
        hints = {f.name: _resolve_field_type(record_type, f.name, f.type) for f in fields}

    return [
        FieldDescriptor(name=f.name, type=hints.get(f.name, f.type), tag=tag_of(f))
        for f in fields
    ]


def _resolve_field_type(record_type: type, name: str, annotation: Any) -> Any:
    """Resolve one annotation; an unresolvable one is returned as is.

    The raw annotation then surfaces as an unsupported type when its field is
    reached, so earlier fields still bind in order.
    """

    if not isinstance(annotation, str):
        return annotation

    owner = next(
        (c for c in record_type.__mro__ if name in inspect.get_annotations(c)),
        record_type,
    )
    single = type(owner.__name__, (), {"__annotations__": {name: annotation}, "__module__": owner.__module__})
    try:
        return typing.get_type_hints(single, localns=dict(vars(owner)))[name]
    except NameError:
        return annotation


class Env:
    """Binds environment variables to the fields of one dataclass instance."""

    def __init__(
        self,
        target: object | None = None,
        prefix: str = "",
        *,
        environ: Mapping[str, str] | None = None,
    ):
        self._target: object | None = None
        self._prefix = prefix
        self._environ = environ
        if target is not None:
            self.set_target(target)

    @property
    def prefix(self) -> str:
        return self._prefix

    @property
    def target(self) -> object | None:
        return self._target

    def set_target(self, target: object) -> None:
        if not _is_mutable_record(target):
            raise InvalidTargetError(target)
        self._target = target

    def set_prefix(self, prefix: str) -> None:
        self._prefix = prefix

    def load_dotenv(self, path: str | Path) -> None:
        """Load a .env file; variables already set win. A missing file is ignored.

        Without an injected ``environ`` the file is loaded into ``os.environ``.
        With one, the lookup becomes a new dict of the file's values overlaid by
        the injected mapping, which itself is left untouched.
        """

        dotenv_path = Path(path)
        if not dotenv_path.exists():
            return

        if self._environ is None:
            load_dotenv(dotenv_path, override=False)
            return

        merged = {k: v for k, v in dotenv_values(dotenv_path).items() if v is not None}
        merged.update(self._environ)
        self._environ = merged

    def process(self) -> None:
        """Overwrite every field of the target with its resolved value.

        Raises:
            InvalidTargetError: If no valid target is set.
            EnvError: The first field-level error.
        """

        target = self._target
        if target is None:
            raise InvalidTargetError(target)

        environ = os.environ if self._environ is None else self._environ
        descriptors = field_descriptors(type(target))
        for descriptor in descriptors:
            value = bind(self._prefix, descriptor, environ)
            setattr(target, descriptor.name, value)

        log.debug("env_process_done", fields=len(descriptors), prefix=self._prefix)


def new_env(
    target: object,
    prefix: str = "",
    *,
    environ: Mapping[str, str] | None = None,
) -> Env:
    """Create an :class:`Env`, validating ``target`` up front."""

    e = Env(prefix=prefix, environ=environ)
    e.set_target(target)
    return e


def process(
    target: object,
    prefix: str = "",
    *,
    environ: Mapping[str, str] | None = None,
    dotenv_path: str | Path | None = None,
) -> None:
    """Map environment variables onto the fields of the dataclass ``target``.

    Args:
        target: A mutable dataclass instance; it is modified in place.
        prefix: Prepended to every key before upper-casing.
        environ: Lookup mapping; defaults to ``os.environ``.
        dotenv_path: Optional .env file loaded before binding.

    Raises:
        InvalidTargetError: If ``target`` is not a mutable dataclass instance.
        EnvError: The first field-level error.
    """

    e = new_env(target, prefix, environ=environ)
    if dotenv_path is not None:
        e.load_dotenv(dotenv_path)
    e.process()


def must_process(target: object, prefix: str = "", **kwargs: Any) -> None:
    """Like :func:`process`, but any error aborts the program.

    Raises:
        SystemExit: Carrying the error message, chained from the error.
    """

    try:
        process(target, prefix, **kwargs)
    except EnvError as e:
        log.critical("env_process_failed", error=str(e), error_type=type(e).__name__)
        raise SystemExit(str(e)) from e

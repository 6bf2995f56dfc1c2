from __future__ import annotations

import pytest

from envbind.binder import bind, derive_key
from envbind.errors import (
    ConversionError,
    OptionNotAllowedError,
    RequiredMissingError,
    UnsupportedTypeError,
)
from envbind.fields import FieldDescriptor


def test_derive_key_concatenates_then_uppercases() -> None:
    assert derive_key("APP_", "Port") == "APP_PORT"
    assert derive_key("app_", "port") == "APP_PORT"
    assert derive_key("", "name") == "NAME"


def test_value_from_environ() -> None:
    d = FieldDescriptor(name="port", type=int)
    assert bind("APP_", d, {"APP_PORT": "8080"}) == 8080


def test_key_override_keeps_prefix() -> None:
    d = FieldDescriptor(name="port", type=int, tag="key=http_port")
    assert bind("app_", d, {"APP_HTTP_PORT": "81", "APP_PORT": "82"}) == 81


def test_zero_value_when_absent() -> None:
    assert bind("", FieldDescriptor(name="name", type=str), {}) == ""
    assert bind("", FieldDescriptor(name="port", type=int), {}) == 0
    assert bind("", FieldDescriptor(name="debug", type=bool), {}) is False


def test_empty_value_is_treated_as_absent() -> None:
    d = FieldDescriptor(name="port", type=int, tag="default=7")
    assert bind("", d, {"PORT": ""}) == 7


def test_present_zero_is_not_replaced_by_default() -> None:
    d = FieldDescriptor(name="port", type=int, tag="default=7")
    assert bind("", d, {"PORT": "0"}) == 0


def test_default_used_when_absent() -> None:
    d = FieldDescriptor(name="port", type=int, tag="default=7")
    assert bind("", d, {}) == 7


def test_required_missing_ignores_default() -> None:
    d = FieldDescriptor(name="port", type=int, tag="required default=7")

    with pytest.raises(RequiredMissingError) as ei:
        bind("APP_", d, {})

    assert ei.value.key == "APP_PORT"
    assert str(ei.value) == "APP_PORT required"


def test_required_present() -> None:
    d = FieldDescriptor(name="port", type=int, tag="required")
    assert bind("", d, {"PORT": "1"}) == 1


def test_conversion_error_carries_key() -> None:
    d = FieldDescriptor(name="port", type=int)

    with pytest.raises(ConversionError) as ei:
        bind("", d, {"PORT": "eighty"})

    assert ei.value.key == "PORT"
    assert str(ei.value) == 'PORT: could not convert value "eighty" into int type'


def test_option_not_allowed() -> None:
    d = FieldDescriptor(name="mode", type=str, tag="options=a,b,c")

    with pytest.raises(OptionNotAllowedError) as ei:
        bind("", d, {"MODE": "d"})

    assert ei.value.key == "MODE"
    assert ei.value.value == "d"
    assert ei.value.options == ("a", "b", "c")
    assert str(ei.value) == 'MODE="d" not in allowed options: [a b c]'


def test_option_allowed() -> None:
    d = FieldDescriptor(name="mode", type=str, tag="options=a,b,c")
    assert bind("", d, {"MODE": "b"}) == "b"


def test_options_apply_to_default_and_zero_value() -> None:
    with_default = FieldDescriptor(name="mode", type=str, tag="default=z options=a,b")
    with pytest.raises(OptionNotAllowedError):
        bind("", with_default, {})

    zero = FieldDescriptor(name="level", type=int, tag="options=1,2")
    with pytest.raises(OptionNotAllowedError) as ei:
        bind("", zero, {})
    assert str(ei.value) == 'LEVEL="0" not in allowed options: [1 2]'


def test_bool_options_render_lowercase() -> None:
    d = FieldDescriptor(name="debug", type=bool, tag="options=true")

    with pytest.raises(OptionNotAllowedError) as ei:
        bind("", d, {"DEBUG": "0"})

    assert str(ei.value) == 'DEBUG="false" not in allowed options: [true]'


def test_unsupported_type_names_field() -> None:
    d = FieldDescriptor(name="ratio", type=float)

    with pytest.raises(UnsupportedTypeError) as ei:
        bind("", d, {})

    assert ei.value.field == "ratio"
    assert ei.value.type_name == "float"

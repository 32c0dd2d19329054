from __future__ import annotations

import dataclasses

import pytest

from rdpsigner.core.types import (
    BINARY_TYPE,
    INTEGER_TYPE,
    STRING_TYPE,
    RdpSetting,
    RdpSignerError,
    SettingValidationError,
    UnknownScopeError,
)


@pytest.mark.parametrize("setting_type", [STRING_TYPE, INTEGER_TYPE, BINARY_TYPE])
def test_setting_accepts_each_valid_type(setting_type: str) -> None:
    setting = RdpSetting("audiomode", setting_type, "0")

    assert setting.type == setting_type
    assert (setting.name, setting.value) == ("audiomode", "0")


@pytest.mark.parametrize("name", ["", "   ", "\t"])
def test_setting_rejects_blank_names(name: str) -> None:
    with pytest.raises(SettingValidationError):
        RdpSetting(name, STRING_TYPE, "value")


def test_setting_rejects_colon_in_name() -> None:
    with pytest.raises(SettingValidationError):
        RdpSetting("full:address", STRING_TYPE, "value")


@pytest.mark.parametrize("setting_type", ["z", "S", "", "si", None])
def test_setting_rejects_unknown_types(setting_type: object) -> None:
    with pytest.raises(SettingValidationError) as excinfo:
        RdpSetting("full address", setting_type, "value")  # type: ignore[arg-type]

    assert isinstance(excinfo.value, ValueError)
    assert isinstance(excinfo.value, RdpSignerError)


def test_setting_value_may_be_empty_and_hold_colons() -> None:
    assert RdpSetting("loadbalanceinfo", STRING_TYPE, "").value == ""
    assert RdpSetting("full address", STRING_TYPE, "host:3389").value == "host:3389"


def test_setting_is_immutable() -> None:
    setting = RdpSetting("full address", STRING_TYPE, "host")

    with pytest.raises(dataclasses.FrozenInstanceError):
        setting.value = "other"  # type: ignore[misc]


def test_setting_name_matching_is_case_insensitive() -> None:
    setting = RdpSetting("Full Address", STRING_TYPE, "host")

    assert setting.key == "full address"
    assert setting.matches("FULL ADDRESS")
    assert not setting.matches("alternate full address")


def test_with_name_copies_type_and_value() -> None:
    original = RdpSetting("full address", INTEGER_TYPE, "42")

    renamed = original.with_name("alternate full address")

    assert renamed == RdpSetting("alternate full address", INTEGER_TYPE, "42")
    assert original.name == "full address"


def test_unknown_scope_error_is_a_key_error_with_readable_message() -> None:
    error = UnknownScopeError("screen mode id")

    assert isinstance(error, KeyError)
    assert error.name == "screen mode id"
    assert "screen mode id" in str(error)

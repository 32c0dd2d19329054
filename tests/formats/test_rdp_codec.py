from __future__ import annotations

from textwrap import dedent

import pytest

from rdpsigner.core.types import BINARY_TYPE, INTEGER_TYPE, STRING_TYPE, RdpSetting
from rdpsigner.formats.rdp import (
    LINE_TERMINATOR,
    find_setting,
    parse_setting,
    parse_settings,
    serialize_setting,
    serialize_settings,
)


@pytest.fixture()
def sample_settings() -> list[RdpSetting]:
    return [
        RdpSetting("full address", STRING_TYPE, "server.example.com:3389"),
        RdpSetting("screen mode id", INTEGER_TYPE, "2"),
        RdpSetting("password 51", BINARY_TYPE, "01000000D08C9DDF"),
        RdpSetting("alternate shell", STRING_TYPE, ""),
    ]


def test_parse_setting_splits_on_first_two_colons() -> None:
    setting = parse_setting("full address:s:server.example.com:3389")

    assert setting == RdpSetting("full address", STRING_TYPE, "server.example.com:3389")


def test_parse_setting_keeps_name_and_value_verbatim() -> None:
    setting = parse_setting(" Full Address :s: host ")

    assert setting is not None
    assert setting.name == " Full Address "
    assert setting.value == " host "


def test_parse_setting_excludes_trailing_line_break_from_value() -> None:
    assert parse_setting("a:s:b\n") == RdpSetting("a", STRING_TYPE, "b")
    assert parse_setting("a:s:b\nc") is None


@pytest.mark.parametrize(
    "line",
    [
        "",
        "   ",
        "foo:z:bar",
        "just text no colons",
        ":s:missing name",
        "   :s:blank name",
        "name:s",
        "name::value",
        "name:ss:value",
    ],
)
def test_parse_setting_skips_non_settings(line: str) -> None:
    assert parse_setting(line) is None


def test_parse_settings_drops_malformed_lines() -> None:
    text = dedent(
        """
        full address:s:server.example.com
        foo:z:bar
        just text no colons

        redirectclipboard:i:1
        """
    )

    settings = parse_settings(text)

    assert settings == [
        RdpSetting("full address", STRING_TYPE, "server.example.com"),
        RdpSetting("redirectclipboard", INTEGER_TYPE, "1"),
    ]


@pytest.mark.parametrize("text", ["", "   ", "\r\n\r\n", "\t\n"])
def test_parse_settings_handles_blank_documents(text: str) -> None:
    assert parse_settings(text) == []


def test_parse_settings_accepts_mixed_line_endings() -> None:
    text = "a:s:1\r\nb:i:2\nc:b:03\rd:s:4"

    names = [setting.name for setting in parse_settings(text)]

    assert names == ["a", "b", "c", "d"]


def test_parse_settings_does_not_split_on_unicode_separators() -> None:
    settings = parse_settings("remoteapplicationname:s:one\u2028two\r\n")

    assert settings == [RdpSetting("remoteapplicationname", STRING_TYPE, "one\u2028two")]


def test_serialize_setting_has_no_escaping() -> None:
    setting = RdpSetting("full address", STRING_TYPE, "host:3389")

    assert serialize_setting(setting) == "full address:s:host:3389"


def test_serialize_settings_terminates_every_line_with_crlf(
    sample_settings: list[RdpSetting],
) -> None:
    text = serialize_settings(sample_settings)

    assert LINE_TERMINATOR == "\r\n"
    assert text.endswith("alternate shell:s:\r\n")
    assert text.count("\r\n") == len(sample_settings)
    assert "\n" not in text.replace("\r\n", "")


def test_serialize_settings_of_nothing_is_empty() -> None:
    assert serialize_settings([]) == ""


def test_document_round_trip_preserves_order(sample_settings: list[RdpSetting]) -> None:
    assert parse_settings(serialize_settings(sample_settings)) == sample_settings
    for setting in sample_settings:
        assert parse_setting(serialize_setting(setting)) == setting


def test_find_setting_is_case_insensitive(sample_settings: list[RdpSetting]) -> None:
    assert find_setting(sample_settings, "FULL ADDRESS") is sample_settings[0]
    assert find_setting(sample_settings, "gatewayhostname") is None

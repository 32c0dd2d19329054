"""Line-oriented codec for RDP connection files.

Each line of an ``.rdp`` file carries one ``name:type:value`` setting. The
parser is lenient: blank lines, lines that do not follow the grammar, and
lines whose fields fail validation are skipped rather than raised, because
stray lines are common in real-world files. Serialisation always terminates
every line with CRLF since signatures are computed over those exact bytes.
"""

from __future__ import annotations

import logging
import re
from typing import Iterable, List, Optional

from ..core.types import VALID_SETTING_TYPES, RdpSetting, SettingValidationError

logger = logging.getLogger(__name__)

LINE_TERMINATOR = "\r\n"

_SETTING_PATTERN = re.compile(
    rf"(?P<name>[^:]+):(?P<type>[{VALID_SETTING_TYPES}]):(?P<value>.*)$"
)
# Only CR, LF and CRLF end a line; other Unicode separators stay in values.
_LINE_BREAK_PATTERN = re.compile(r"\r\n|\r|\n")


def parse_setting(line: str) -> Optional[RdpSetting]:
    """Parse ``line`` into a setting, returning ``None`` when it is not one."""

    if not line or not line.strip():
        return None
    match = _SETTING_PATTERN.match(line)
    if match is None:
        return None
    try:
        return RdpSetting(
            name=match.group("name"),
            type=match.group("type"),
            value=match.group("value"),
        )
    except SettingValidationError:
        return None


def iter_lines(text: str) -> List[str]:
    if not text:
        return []
    lines = _LINE_BREAK_PATTERN.split(text)
    # A trailing terminator does not open another line.
    if lines and lines[-1] == "":
        lines.pop()
    return lines


def parse_settings(text: str) -> List[RdpSetting]:
    """Parse a whole document into its ordered settings."""

    settings: List[RdpSetting] = []
    if not text or not text.strip():
        return settings

    skipped = 0
    for line in iter_lines(text):
        if not line.strip():
            continue
        setting = parse_setting(line)
        if setting is None:
            skipped += 1
            continue
        settings.append(setting)

    if skipped:
        logger.debug("Skipped %s malformed line(s) while parsing RDP text.", skipped)
    return settings


def serialize_setting(setting: RdpSetting) -> str:
    return f"{setting.name}:{setting.type}:{setting.value}"


def serialize_settings(settings: Iterable[RdpSetting]) -> str:
    """Render ``settings`` with a CRLF after every entry, the last included."""

    return "".join(serialize_setting(setting) + LINE_TERMINATOR for setting in settings)


def find_setting(settings: Iterable[RdpSetting], name: str) -> Optional[RdpSetting]:
    """Return the first setting named ``name`` (case-insensitive)."""

    for setting in settings:
        if setting.matches(name):
            return setting
    return None


__all__ = [
    "LINE_TERMINATOR",
    "find_setting",
    "iter_lines",
    "parse_setting",
    "parse_settings",
    "serialize_setting",
    "serialize_settings",
]

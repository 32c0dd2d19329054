"""RDP file format helpers."""

from .encoding import decode_rdp_bytes, encode_rdp_text
from .rdp import (
    LINE_TERMINATOR,
    find_setting,
    parse_setting,
    parse_settings,
    serialize_setting,
    serialize_settings,
)

__all__ = [
    "LINE_TERMINATOR",
    "decode_rdp_bytes",
    "encode_rdp_text",
    "find_setting",
    "parse_setting",
    "parse_settings",
    "serialize_setting",
    "serialize_settings",
]

"""Byte-level helpers for reading and writing ``.rdp`` files.

Connection files show up as UTF-8, UTF-8 with BOM, or UTF-16 with or without
a BOM depending on which tool produced them. Signed output is always written
as UTF-16 LE with a BOM, matching what the Windows tooling emits.
"""

from __future__ import annotations

import codecs
from typing import Tuple

OUTPUT_CODEC = "utf-16-le"

_ASCII_WHITELIST = {*range(32, 127), 9, 10, 13}
_BOMS = (
    (codecs.BOM_UTF8, "utf-8"),
    (codecs.BOM_UTF16_LE, "utf-16-le"),
    (codecs.BOM_UTF16_BE, "utf-16-be"),
)


def _strip_bom(sample: bytes) -> tuple[bytes, str | None]:
    for bom, codec in _BOMS:
        if sample.startswith(bom):
            return sample[len(bom) :], codec
    return sample, None


def _ascii_ratio(data: bytes) -> float:
    if not data:
        return 1.0
    matches = sum(1 for b in data if b in _ASCII_WHITELIST)
    return matches / len(data)


def _guess_utf16(sample: bytes, thresh: float = 0.90) -> str | None:
    """Spot BOM-less UTF-16 by its interleaved NUL bytes."""

    if len(sample) < 2 or sample.count(0) < len(sample) // 4:
        return None
    even_bytes = sample[::2]
    odd_bytes = sample[1::2]
    if _ascii_ratio(even_bytes) >= thresh and odd_bytes.count(0) / max(len(odd_bytes), 1) >= 0.6:
        return "utf-16-le"
    if _ascii_ratio(odd_bytes) >= thresh and even_bytes.count(0) / max(len(even_bytes), 1) >= 0.6:
        return "utf-16-be"
    return None


def decode_rdp_bytes(data: bytes) -> Tuple[str, str]:
    """Decode ``data`` and return the resulting text and codec name."""

    payload, bom_codec = _strip_bom(data)
    candidates = []
    if bom_codec:
        candidates.append(bom_codec)
    guessed = _guess_utf16(payload)
    if guessed:
        candidates.append(guessed)
    candidates.extend(["utf-8", "latin-1"])

    seen: set[str] = set()
    for encoding in candidates:
        if encoding in seen:
            continue
        seen.add(encoding)
        try:
            text = payload.decode(encoding)
        except UnicodeDecodeError:
            continue
        return text.lstrip("\ufeff"), encoding
    return payload.decode("latin-1", errors="replace"), "latin-1"


def encode_rdp_text(text: str) -> bytes:
    """Encode ``text`` the way signed files are persisted (UTF-16 LE + BOM)."""

    return codecs.BOM_UTF16_LE + text.encode(OUTPUT_CODEC)


__all__ = ["OUTPUT_CODEC", "decode_rdp_bytes", "encode_rdp_text"]

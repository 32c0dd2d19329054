from __future__ import annotations

import codecs

import pytest

from rdpsigner.formats.encoding import decode_rdp_bytes, encode_rdp_text

SAMPLE = "full address:s:server.example.com\r\nredirectclipboard:i:1\r\n"


@pytest.mark.parametrize(
    ("raw", "codec"),
    [
        (SAMPLE.encode("utf-8"), "utf-8"),
        (codecs.BOM_UTF8 + SAMPLE.encode("utf-8"), "utf-8"),
        (codecs.BOM_UTF16_LE + SAMPLE.encode("utf-16-le"), "utf-16-le"),
        (codecs.BOM_UTF16_BE + SAMPLE.encode("utf-16-be"), "utf-16-be"),
        (SAMPLE.encode("utf-16-le"), "utf-16-le"),
        (SAMPLE.encode("utf-16-be"), "utf-16-be"),
    ],
)
def test_decode_rdp_bytes_detects_common_encodings(raw: bytes, codec: str) -> None:
    text, detected = decode_rdp_bytes(raw)

    assert text == SAMPLE
    assert detected == codec


def test_decode_rdp_bytes_falls_back_to_latin1() -> None:
    raw = "remoteapplicationname:s:Caf\xe9\r\n".encode("latin-1")

    text, detected = decode_rdp_bytes(raw)

    assert detected == "latin-1"
    assert text.endswith("Caf\xe9\r\n")


def test_decode_rdp_bytes_handles_empty_input() -> None:
    assert decode_rdp_bytes(b"") == ("", "utf-8")


def test_encode_rdp_text_writes_utf16_le_with_bom() -> None:
    encoded = encode_rdp_text("a:s:1\r\n")

    assert encoded.startswith(codecs.BOM_UTF16_LE)
    assert encoded[2:] == "a:s:1\r\n".encode("utf-16-le")


def test_encoded_output_decodes_back() -> None:
    assert decode_rdp_bytes(encode_rdp_text(SAMPLE)) == (SAMPLE, "utf-16-le")

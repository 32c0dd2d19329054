"""Builders for the ``signscope`` and ``signature`` settings.

The ``signature`` value is a binary envelope rendered as Base64::

    01 00 01 00 01 00 00 00   fixed header
    xx xx xx xx               uint32 little-endian length of the CMS blob
    ...                       DER-encoded detached CMS signature

The CMS blob signs the CRLF-serialised signable settings (``signscope``
included) encoded as UTF-16 LE and followed by a UTF-16 NUL terminator.
Every byte of that recipe is checked by the client, so nothing here may
depend on the host platform.
"""

from __future__ import annotations

import base64
import binascii
import logging
import re
import struct
from typing import Sequence

from ..core.types import (
    SIGNATURE_SETTING_NAME,
    SIGN_SCOPE_SETTING_NAME,
    STRING_TYPE,
    EmptySignScopeError,
    EnvelopeFormatError,
    RdpSetting,
)
from ..formats.rdp import serialize_settings
from ..scopes import DEFAULT_SCOPE_REGISTRY, ScopeRegistry
from .cms import CmsSigner, SigningCertificate, sign_detached

logger = logging.getLogger(__name__)

SIGNATURE_HEADER = bytes((0x01, 0x00, 0x01, 0x00, 0x01, 0x00, 0x00, 0x00))
PAYLOAD_TERMINATOR = b"\x00\x00"
PAYLOAD_CODEC = "utf-16-le"

BASE64_LINE_WIDTH = 64
BASE64_SEPARATOR = "  "

_LENGTH_FORMAT = "<I"
_PREFIX_SIZE = len(SIGNATURE_HEADER) + struct.calcsize(_LENGTH_FORMAT)
_BASE64_RUN = re.compile(rf".{{{BASE64_LINE_WIDTH}}}")
_WHITESPACE = re.compile(r"\s+")


def build_sign_scope_setting(
    settings: Sequence[RdpSetting],
    *,
    registry: ScopeRegistry = DEFAULT_SCOPE_REGISTRY,
) -> RdpSetting:
    """Return the ``signscope`` setting listing the labels of ``settings``."""

    if not settings:
        raise EmptySignScopeError("No signable settings were supplied; nothing to sign.")
    labels = [registry.label_for(setting.name) for setting in settings]
    logger.debug("Sign scope covers %s setting(s): %s", len(labels), ",".join(labels))
    return RdpSetting(SIGN_SCOPE_SETTING_NAME, STRING_TYPE, ",".join(labels))


def signing_payload(settings: Sequence[RdpSetting]) -> bytes:
    """Return the exact bytes handed to the CMS signer for ``settings``."""

    return serialize_settings(settings).encode(PAYLOAD_CODEC) + PAYLOAD_TERMINATOR


def pack_envelope(signature: bytes) -> bytes:
    if not signature:
        raise EnvelopeFormatError("CMS signer returned an empty signature.")
    return SIGNATURE_HEADER + struct.pack(_LENGTH_FORMAT, len(signature)) + signature


def unpack_envelope(envelope: bytes) -> bytes:
    """Return the CMS blob held by ``envelope`` after checking its framing.

    This only checks the header and the declared length; the signature itself
    is never validated.
    """

    if len(envelope) < _PREFIX_SIZE:
        raise EnvelopeFormatError("Signature envelope is truncated.")
    if envelope[: len(SIGNATURE_HEADER)] != SIGNATURE_HEADER:
        raise EnvelopeFormatError("Signature envelope header is not recognised.")
    (length,) = struct.unpack_from(_LENGTH_FORMAT, envelope, len(SIGNATURE_HEADER))
    signature = envelope[_PREFIX_SIZE:]
    if len(signature) != length:
        raise EnvelopeFormatError(
            f"Signature envelope declares {length} bytes but carries {len(signature)}."
        )
    return signature


def wrap_base64(text: str) -> str:
    """Insert the two-space separator after every full 64 character run."""

    return _BASE64_RUN.sub(lambda match: match.group(0) + BASE64_SEPARATOR, text)


def unwrap_base64(value: str) -> bytes:
    try:
        return base64.b64decode(_WHITESPACE.sub("", value), validate=True)
    except binascii.Error as exc:
        raise EnvelopeFormatError(f"Signature value is not valid Base64: {exc}") from exc


def build_signature_setting(
    settings: Sequence[RdpSetting],
    certificate: SigningCertificate,
    *,
    signer: CmsSigner = sign_detached,
) -> RdpSetting:
    """Sign ``settings`` and return the resulting ``signature`` setting.

    ``settings`` must already contain the ``signscope`` setting; the signature
    never covers itself.
    """

    payload = signing_payload(settings)
    envelope = pack_envelope(signer(payload, certificate))
    encoded = base64.b64encode(envelope).decode("ascii")
    logger.debug(
        "Built %s byte signature envelope over %s setting(s).", len(envelope), len(settings)
    )
    return RdpSetting(SIGNATURE_SETTING_NAME, STRING_TYPE, wrap_base64(encoded))


__all__ = [
    "BASE64_LINE_WIDTH",
    "BASE64_SEPARATOR",
    "PAYLOAD_TERMINATOR",
    "SIGNATURE_HEADER",
    "build_sign_scope_setting",
    "build_signature_setting",
    "pack_envelope",
    "signing_payload",
    "unpack_envelope",
    "unwrap_base64",
    "wrap_base64",
]

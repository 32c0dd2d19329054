"""Signing pipeline for RDP connection files.

Examples
--------
>>> from rdpsigner.pipeline import sign_rdp_text
>>> def fake_signer(payload, certificate):
...     return b"signature-bytes"
>>> signed = sign_rdp_text(
...     "full address:s:server.example.com:3389\\r\\n",
...     certificate=None,
...     signer=fake_signer,
... )
>>> signed.splitlines()[:3]
['full address:s:server.example.com:3389', 'alternate full address:s:server.example.com:3389', 'signscope:s:Full Address,Alternate Full Address']
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

from .core.types import (
    ALTERNATE_FULL_ADDRESS_SETTING_NAME,
    FULL_ADDRESS_SETTING_NAME,
    SIGNATURE_SETTING_NAME,
    SIGN_SCOPE_SETTING_NAME,
    MissingFullAddressError,
    RdpSetting,
    SignerClosedError,
)
from .formats.encoding import decode_rdp_bytes, encode_rdp_text
from .formats.rdp import find_setting, parse_settings, serialize_settings
from .scopes import DEFAULT_SCOPE_REGISTRY, ScopeRegistry
from .signing.cms import CmsSigner, SigningCertificate, sign_detached
from .signing.envelope import build_sign_scope_setting, build_signature_setting

logger = logging.getLogger(__name__)

_SIGN_SETTING_NAMES = frozenset({SIGNATURE_SETTING_NAME, SIGN_SCOPE_SETTING_NAME})


def remove_sign_settings(settings: List[RdpSetting]) -> int:
    """Drop stale ``signature``/``signscope`` entries in place."""

    kept = [setting for setting in settings if setting.key not in _SIGN_SETTING_NAMES]
    removed = len(settings) - len(kept)
    settings[:] = kept
    if removed:
        logger.debug("Removed %s existing signature setting(s).", removed)
    return removed


def ensure_alternate_full_address(settings: List[RdpSetting]) -> None:
    """Append an ``alternate full address`` mirroring ``full address`` if missing.

    Older clients only check ``full address``; signing a copy under the
    alternate name stops anyone from retargeting a signed file by appending a
    different unsigned address.
    """

    if find_setting(settings, ALTERNATE_FULL_ADDRESS_SETTING_NAME) is not None:
        return
    full_address = find_setting(settings, FULL_ADDRESS_SETTING_NAME)
    if full_address is None:
        raise MissingFullAddressError(
            f"Supplied RDP settings do not contain a {FULL_ADDRESS_SETTING_NAME!r} setting."
        )
    settings.append(full_address.with_name(ALTERNATE_FULL_ADDRESS_SETTING_NAME))
    logger.debug("Added %r mirroring %r.", ALTERNATE_FULL_ADDRESS_SETTING_NAME, FULL_ADDRESS_SETTING_NAME)


def select_signable_settings(
    settings: List[RdpSetting],
    registry: ScopeRegistry = DEFAULT_SCOPE_REGISTRY,
) -> List[RdpSetting]:
    return [setting for setting in settings if registry.is_signable(setting.name)]


def sign_settings(
    settings: List[RdpSetting],
    certificate: SigningCertificate,
    *,
    signer: CmsSigner = sign_detached,
    registry: ScopeRegistry = DEFAULT_SCOPE_REGISTRY,
) -> List[RdpSetting]:
    """Return a signed copy of ``settings`` with scope and signature appended."""

    signed = list(settings)
    remove_sign_settings(signed)
    ensure_alternate_full_address(signed)

    to_sign = select_signable_settings(signed, registry)
    scope = build_sign_scope_setting(to_sign, registry=registry)
    signed.append(scope)
    to_sign.append(scope)

    signed.append(build_signature_setting(to_sign, certificate, signer=signer))
    return signed


def sign_rdp_text(
    text: str,
    certificate: SigningCertificate,
    *,
    signer: CmsSigner = sign_detached,
    registry: ScopeRegistry = DEFAULT_SCOPE_REGISTRY,
) -> str:
    """Sign the contents of an ``.rdp`` file and return the signed text."""

    settings = parse_settings(text)
    signed = sign_settings(settings, certificate, signer=signer, registry=registry)
    return serialize_settings(signed)


def _require_path(value: Path | str | None, label: str) -> Path:
    if value is None or not str(value).strip():
        raise ValueError(f"{label} must be a valid path.")
    return Path(value)


def sign_rdp_file(
    source: Path | str,
    certificate: SigningCertificate,
    output: Path | str | None = None,
    *,
    signer: CmsSigner = sign_detached,
    registry: ScopeRegistry = DEFAULT_SCOPE_REGISTRY,
) -> Path:
    """Sign ``source`` and write the result to ``output`` (in place by default).

    The output is only written once signing succeeded, as UTF-16 LE with BOM.
    """

    source_path = _require_path(source, "source")
    output_path = source_path if output is None else _require_path(output, "output")
    if not source_path.is_file():
        raise FileNotFoundError(f"File does not exist: {source_path}")

    text, codec = decode_rdp_bytes(source_path.read_bytes())
    logger.debug("Decoded %s as %s.", source_path, codec)
    signed = sign_settings(parse_settings(text), certificate, signer=signer, registry=registry)

    output_path.write_bytes(encode_rdp_text(serialize_settings(signed)))
    logger.info(
        "Signed %s -> %s (%s signable setting(s)).",
        source_path,
        output_path,
        len(select_signable_settings(signed, registry)),
    )
    return output_path


class RdpSigner:
    """Signs RDP text and files with a certificate held for its lifetime.

    ``close()`` (or leaving a ``with`` block, error paths included) releases
    the certificate; a closed signer refuses further work.
    """

    def __init__(
        self,
        certificate: SigningCertificate,
        *,
        signer: CmsSigner = sign_detached,
        registry: ScopeRegistry = DEFAULT_SCOPE_REGISTRY,
        owns_certificate: bool = True,
    ) -> None:
        self._certificate: Optional[SigningCertificate] = certificate
        self._signer = signer
        self._registry = registry
        self._owns_certificate = owns_certificate
        self._closed = False

    def __enter__(self) -> "RdpSigner":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def certificate(self) -> SigningCertificate:
        if self._closed or self._certificate is None:
            raise SignerClosedError("RdpSigner has been closed.")
        return self._certificate

    def sign(self, text: str) -> str:
        return sign_rdp_text(
            text, self.certificate, signer=self._signer, registry=self._registry
        )

    def sign_file(self, source: Path | str, output: Path | str | None = None) -> Path:
        return sign_rdp_file(
            source,
            self.certificate,
            output,
            signer=self._signer,
            registry=self._registry,
        )

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        if self._owns_certificate:
            self._certificate = None


__all__ = [
    "RdpSigner",
    "ensure_alternate_full_address",
    "remove_sign_settings",
    "select_signable_settings",
    "sign_rdp_file",
    "sign_rdp_text",
    "sign_settings",
]

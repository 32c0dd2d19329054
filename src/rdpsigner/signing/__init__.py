"""Signature construction for RDP files."""

from .cms import (
    CmsSigner,
    SigningCertificate,
    load_pem,
    load_pem_files,
    load_pkcs12,
    load_pkcs12_file,
    sign_detached,
)
from .envelope import (
    SIGNATURE_HEADER,
    build_sign_scope_setting,
    build_signature_setting,
    pack_envelope,
    signing_payload,
    unpack_envelope,
    unwrap_base64,
    wrap_base64,
)

__all__ = [
    "CmsSigner",
    "SIGNATURE_HEADER",
    "SigningCertificate",
    "build_sign_scope_setting",
    "build_signature_setting",
    "load_pem",
    "load_pem_files",
    "load_pkcs12",
    "load_pkcs12_file",
    "pack_envelope",
    "sign_detached",
    "signing_payload",
    "unpack_envelope",
    "unwrap_base64",
    "wrap_base64",
]

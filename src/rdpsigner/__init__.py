"""rdpsigner package.

Builds signed RDP connection files: the settings codec, the sign-scope
registry, the signature envelope, and the pipeline tying them together.
"""

from __future__ import annotations

from .core import (
    RdpSetting,
    RdpSignerError,
    SettingValidationError,
    MissingFullAddressError,
    EmptySignScopeError,
    UnknownScopeError,
    EnvelopeFormatError,
    CertificateLoadError,
    SignerClosedError,
)
from .formats import parse_setting, parse_settings, serialize_setting, serialize_settings
from .pipeline import RdpSigner, sign_rdp_file, sign_rdp_text
from .scopes import DEFAULT_SCOPE_REGISTRY, ScopeRegistry, SignScope
from .signing import (
    SigningCertificate,
    build_sign_scope_setting,
    build_signature_setting,
    load_pem,
    load_pkcs12,
    sign_detached,
)

__version__ = "0.1.0"

__all__ = [
    "CertificateLoadError",
    "DEFAULT_SCOPE_REGISTRY",
    "EmptySignScopeError",
    "EnvelopeFormatError",
    "MissingFullAddressError",
    "RdpSetting",
    "RdpSigner",
    "RdpSignerError",
    "ScopeRegistry",
    "SettingValidationError",
    "SignScope",
    "SignerClosedError",
    "SigningCertificate",
    "UnknownScopeError",
    "build_sign_scope_setting",
    "build_signature_setting",
    "load_pem",
    "load_pkcs12",
    "parse_setting",
    "parse_settings",
    "serialize_setting",
    "serialize_settings",
    "sign_detached",
    "sign_rdp_file",
    "sign_rdp_text",
]

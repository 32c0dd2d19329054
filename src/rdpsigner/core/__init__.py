"""rdpsigner core module exports."""

from .types import (
    ALTERNATE_FULL_ADDRESS_SETTING_NAME,
    BINARY_TYPE,
    CertificateLoadError,
    EmptySignScopeError,
    EnvelopeFormatError,
    FULL_ADDRESS_SETTING_NAME,
    INTEGER_TYPE,
    MissingFullAddressError,
    RdpSetting,
    RdpSignerError,
    SIGNATURE_SETTING_NAME,
    SIGN_SCOPE_SETTING_NAME,
    STRING_TYPE,
    SettingValidationError,
    SignerClosedError,
    UnknownScopeError,
    VALID_SETTING_TYPES,
)

__all__ = [
    "ALTERNATE_FULL_ADDRESS_SETTING_NAME",
    "BINARY_TYPE",
    "CertificateLoadError",
    "EmptySignScopeError",
    "EnvelopeFormatError",
    "FULL_ADDRESS_SETTING_NAME",
    "INTEGER_TYPE",
    "MissingFullAddressError",
    "RdpSetting",
    "RdpSignerError",
    "SIGNATURE_SETTING_NAME",
    "SIGN_SCOPE_SETTING_NAME",
    "STRING_TYPE",
    "SettingValidationError",
    "SignerClosedError",
    "UnknownScopeError",
    "VALID_SETTING_TYPES",
]

"""Shared data structures and error types for the rdpsigner core.

This module centralises the setting dataclass and the exception hierarchy
raised by the codec, the scope registry, and the signing pipeline.

Example
-------
>>> setting = RdpSetting("full address", STRING_TYPE, "server.example.com:3389")
>>> setting.key
'full address'
>>> setting.matches("Full Address")
True
>>> setting.with_name("alternate full address").value
'server.example.com:3389'
"""

from __future__ import annotations

from dataclasses import dataclass

STRING_TYPE = "s"
INTEGER_TYPE = "i"
BINARY_TYPE = "b"

VALID_SETTING_TYPES = STRING_TYPE + INTEGER_TYPE + BINARY_TYPE

FULL_ADDRESS_SETTING_NAME = "full address"
ALTERNATE_FULL_ADDRESS_SETTING_NAME = "alternate full address"
SIGNATURE_SETTING_NAME = "signature"
SIGN_SCOPE_SETTING_NAME = "signscope"


class RdpSignerError(Exception):
    """Base class for failures raised while building a signed RDP file."""


class SettingValidationError(RdpSignerError, ValueError):
    """Raised when a setting is constructed with an invalid name or type."""


class MissingFullAddressError(RdpSignerError):
    """Raised when neither ``full address`` nor ``alternate full address`` exist."""


class EmptySignScopeError(RdpSignerError):
    """Raised when a sign scope is requested for zero signable settings."""


class UnknownScopeError(RdpSignerError, KeyError):
    """Raised when a setting has no entry in the scope registry."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(name)

    def __str__(self) -> str:
        return (
            f"Setting {self.name!r} has no known sign scope "
            "(is it a signable setting?)"
        )


class EnvelopeFormatError(RdpSignerError, ValueError):
    """Raised when a signature envelope cannot be built or decoded."""


class CertificateLoadError(RdpSignerError):
    """Raised when signing material is missing a certificate or private key."""


class SignerClosedError(RdpSignerError):
    """Raised when a closed :class:`~rdpsigner.pipeline.RdpSigner` is reused."""


@dataclass(frozen=True)
class RdpSetting:
    """A single ``name:type:value`` entry of an RDP connection file."""

    name: str
    type: str
    value: str

    def __post_init__(self) -> None:
        if not isinstance(self.name, str) or not self.name.strip():
            raise SettingValidationError("Setting name is required.")
        if ":" in self.name:
            raise SettingValidationError(
                f"Setting name {self.name!r} cannot contain ':'."
            )
        if (
            not isinstance(self.type, str)
            or len(self.type) != 1
            or self.type not in VALID_SETTING_TYPES
        ):
            raise SettingValidationError(
                f"Setting type {self.type!r} is not valid "
                f"(valid values are {VALID_SETTING_TYPES!r})."
            )
        if not isinstance(self.value, str):
            raise SettingValidationError("Setting value must be a string.")

    @property
    def key(self) -> str:
        """Case-insensitive identity of the setting."""

        return self.name.lower()

    def matches(self, name: str) -> bool:
        return self.key == name.lower()

    def with_name(self, name: str) -> "RdpSetting":
        return RdpSetting(name=name, type=self.type, value=self.value)

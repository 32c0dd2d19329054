"""Sign-scope registry for RDP connection files.

Only a fixed set of settings is covered by an RDP signature. Each of them has
a display label that ends up in the ``signscope`` setting so the client knows
which entries the signature vouches for. ``DEFAULT_SCOPE_REGISTRY`` holds the
table recognised by the Windows client; lookups are case-insensitive.

``signature`` and ``signscope`` are produced by the signer itself and are
deliberately absent from the table.

>>> DEFAULT_SCOPE_REGISTRY.label_for("Full Address")
'Full Address'
>>> DEFAULT_SCOPE_REGISTRY.is_signable("signscope")
False
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Iterable, Iterator, Mapping, Tuple

from .core.types import (
    ALTERNATE_FULL_ADDRESS_SETTING_NAME,
    FULL_ADDRESS_SETTING_NAME,
    UnknownScopeError,
)


@dataclass(frozen=True)
class SignScope:
    """Signable setting name and the label reported for it."""

    name: str
    label: str


class ScopeRegistry:
    """Immutable, case-insensitive mapping of setting names to scope labels."""

    def __init__(self, entries: Iterable[SignScope]) -> None:
        ordered: list[SignScope] = []
        index: dict[str, SignScope] = {}
        for entry in entries:
            key = entry.name.lower()
            if key in index:
                raise ValueError(
                    f"A scope for {entry.name!r} is already registered: {index[key]!r}"
                )
            index[key] = entry
            ordered.append(entry)
        self._entries: Tuple[SignScope, ...] = tuple(ordered)
        self._index: Mapping[str, SignScope] = MappingProxyType(index)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.lower() in self._index

    def __iter__(self) -> Iterator[SignScope]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:  # pragma: no cover - trivial wrapper
        return f"ScopeRegistry({len(self._entries)} entries)"

    @property
    def entries(self) -> Tuple[SignScope, ...]:
        return self._entries

    def names(self) -> Tuple[str, ...]:
        return tuple(entry.name for entry in self._entries)

    def is_signable(self, name: str) -> bool:
        return name in self

    def label_for(self, name: str) -> str:
        """Return the scope label for ``name``.

        Raises:
            UnknownScopeError: If ``name`` is not a signable setting.
        """

        entry = self._index.get(name.lower())
        if entry is None:
            raise UnknownScopeError(name)
        return entry.label


DEFAULT_SCOPE_REGISTRY = ScopeRegistry(
    (
        SignScope(FULL_ADDRESS_SETTING_NAME, "Full Address"),
        SignScope(ALTERNATE_FULL_ADDRESS_SETTING_NAME, "Alternate Full Address"),
        SignScope("pcb", "PCB"),
        SignScope("use redirection server name", "Use Redirection Server Name"),
        SignScope("server port", "Server Port"),
        SignScope("negotiate security layer", "Negotiate Security Layer"),
        SignScope("enablecredsspsupport", "EnableCredSspSupport"),
        SignScope("disableconnectionsharing", "DisableConnectionSharing"),
        SignScope("autoreconnection enabled", "AutoReconnection Enabled"),
        SignScope("gatewayhostname", "GatewayHostname"),
        SignScope("gatewayusagemethod", "GatewayUsageMethod"),
        SignScope("gatewayprofileusagemethod", "GatewayProfileUsageMethod"),
        SignScope("gatewaycredentialssource", "GatewayCredentialsSource"),
        SignScope("support url", "Support URL"),
        SignScope("promptcredentialonce", "PromptCredentialOnce"),
        SignScope("require pre-authentication", "Require pre-authentication"),
        SignScope("pre-authentication server address", "Pre-authentication server address"),
        SignScope("alternate shell", "Alternate Shell"),
        SignScope("shell working directory", "Shell Working Directory"),
        SignScope("remoteapplicationprogram", "RemoteApplicationProgram"),
        SignScope("remoteapplicationexpandworkingdir", "RemoteApplicationExpandWorkingdir"),
        SignScope("remoteapplicationmode", "RemoteApplicationMode"),
        SignScope("remoteapplicationguid", "RemoteApplicationGuid"),
        SignScope("remoteapplicationname", "RemoteApplicationName"),
        SignScope("remoteapplicationicon", "RemoteApplicationIcon"),
        SignScope("remoteapplicationfile", "RemoteApplicationFile"),
        SignScope("remoteapplicationfileextensions", "RemoteApplicationFileExtensions"),
        SignScope("remoteapplicationcmdline", "RemoteApplicationCmdLine"),
        SignScope("remoteapplicationexpandcmdline", "RemoteApplicationExpandCmdLine"),
        SignScope("prompt for credentials", "Prompt For Credentials"),
        SignScope("authentication level", "Authentication Level"),
        SignScope("audiomode", "AudioMode"),
        SignScope("redirectdrives", "RedirectDrives"),
        SignScope("redirectprinters", "RedirectPrinters"),
        SignScope("redirectcomports", "RedirectCOMPorts"),
        SignScope("redirectsmartcards", "RedirectSmartCards"),
        SignScope("redirectposdevices", "RedirectPOSDevices"),
        SignScope("redirectclipboard", "RedirectClipboard"),
        SignScope("devicestoredirect", "DevicesToRedirect"),
        SignScope("drivestoredirect", "DrivesToRedirect"),
        SignScope("loadbalanceinfo", "LoadBalanceInfo"),
        SignScope("redirectdirectx", "RedirectDirectX"),
        SignScope("rdgiskdcproxy", "RDGIsKDCProxy"),
        SignScope("kdcproxyname", "KDCProxyName"),
        SignScope("eventloguploadaddress", "EventLogUploadAddress"),
    )
)


def is_signable(name: str) -> bool:
    return DEFAULT_SCOPE_REGISTRY.is_signable(name)


def scope_label(name: str) -> str:
    return DEFAULT_SCOPE_REGISTRY.label_for(name)


__all__ = [
    "DEFAULT_SCOPE_REGISTRY",
    "ScopeRegistry",
    "SignScope",
    "is_signable",
    "scope_label",
]

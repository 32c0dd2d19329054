"""JSON configuration for the rdpsigner command-line tool.

```
>>> from rdpsigner import config
>>> cfg = config.load_config(path_to_config)
>>> certificate = cfg.certificate.load()
```

Passwords are never stored in the file; ``password_env`` names the
environment variable holding one. Relative paths resolve against the
directory containing the config file.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping, Optional, Sequence, Tuple

from .signing.cms import SigningCertificate, load_pem_files, load_pkcs12_file

_LOG_LEVELS = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}


class ConfigError(ValueError):
    """Raised when a signer configuration is malformed."""


def _expand_path(text: Any, base_dir: Optional[Path]) -> Path:
    if not isinstance(text, str) or not text.strip():
        raise ConfigError(f"Expected a non-empty path, got {text!r}.")
    path = Path(os.path.expandvars(text)).expanduser()
    if base_dir is not None and not path.is_absolute():
        path = base_dir / path
    return path


def _optional_path(value: Any, base_dir: Optional[Path]) -> Optional[Path]:
    if value is None:
        return None
    return _expand_path(value, base_dir)


@dataclass(frozen=True)
class CertificateSource:
    pkcs12: Optional[Path] = None
    certificate: Optional[Path] = None
    private_key: Optional[Path] = None
    chain: Tuple[Path, ...] = ()
    password_env: Optional[str] = None

    def __post_init__(self) -> None:
        if self.pkcs12 is not None and (self.certificate or self.private_key):
            raise ConfigError("Use either 'pkcs12' or 'certificate'/'private_key', not both.")
        if self.pkcs12 is None and not (self.certificate and self.private_key):
            raise ConfigError(
                "Certificate source requires 'pkcs12' or both 'certificate' and 'private_key'."
            )

    @classmethod
    def from_dict(
        cls, payload: Mapping[str, Any], *, base_dir: Optional[Path] = None
    ) -> "CertificateSource":
        if not isinstance(payload, Mapping):
            raise ConfigError("'certificate' must be a mapping.")

        chain_payload = payload.get("chain", ())
        if isinstance(chain_payload, str):
            chain_payload = (chain_payload,)
        if not isinstance(chain_payload, Sequence):
            raise ConfigError("'chain' must be a path or a list of paths.")

        password_env = payload.get("password_env")
        if password_env is not None and (not isinstance(password_env, str) or not password_env.strip()):
            raise ConfigError("'password_env' must name an environment variable.")

        return cls(
            pkcs12=_optional_path(payload.get("pkcs12"), base_dir),
            certificate=_optional_path(payload.get("certificate"), base_dir),
            private_key=_optional_path(payload.get("private_key"), base_dir),
            chain=tuple(_expand_path(entry, base_dir) for entry in chain_payload),
            password_env=password_env.strip() if password_env else None,
        )

    def password(self, environ: Optional[Mapping[str, str]] = None) -> Optional[str]:
        if not self.password_env:
            return None
        env = os.environ if environ is None else environ
        value = env.get(self.password_env)
        if value is None:
            raise ConfigError(f"Environment variable {self.password_env!r} is not set.")
        return value

    def load(self, environ: Optional[Mapping[str, str]] = None) -> SigningCertificate:
        password = self.password(environ)
        if self.pkcs12 is not None:
            return load_pkcs12_file(self.pkcs12, password)
        return load_pem_files(
            self.certificate,  # type: ignore[arg-type]
            self.private_key,  # type: ignore[arg-type]
            password=password,
            chain_paths=self.chain,
        )


@dataclass(frozen=True)
class OutputSettings:
    directory: Optional[Path] = None
    suffix: Optional[str] = None

    @classmethod
    def from_dict(
        cls, payload: Mapping[str, Any] | None, *, base_dir: Optional[Path] = None
    ) -> "OutputSettings":
        if not payload:
            return cls()
        if not isinstance(payload, Mapping):
            raise ConfigError("'output' must be a mapping if provided.")
        suffix = payload.get("suffix")
        if suffix is not None and not str(suffix).strip():
            suffix = None
        return cls(
            directory=_optional_path(payload.get("directory"), base_dir),
            suffix=str(suffix) if suffix else None,
        )

    def destination_for(self, source: Path) -> Path:
        """Return where the signed copy of ``source`` is written."""

        name = source.name
        if self.suffix:
            name = f"{source.stem}{self.suffix}{source.suffix}"
        directory = self.directory if self.directory is not None else source.parent
        return directory / name


@dataclass(frozen=True)
class SignerConfig:
    certificate: Optional[CertificateSource] = None
    output: OutputSettings = field(default_factory=OutputSettings)
    log_level: str = "WARNING"

    @classmethod
    def from_dict(
        cls, payload: Mapping[str, Any], *, base_dir: Optional[Path] = None
    ) -> "SignerConfig":
        if not isinstance(payload, Mapping):
            raise ConfigError("Config payload must be a mapping.")

        certificate_payload = payload.get("certificate")
        certificate = (
            CertificateSource.from_dict(certificate_payload, base_dir=base_dir)
            if certificate_payload is not None
            else None
        )

        log_level = str(payload.get("log_level", "WARNING")).upper()
        if log_level not in _LOG_LEVELS:
            raise ConfigError(f"Unknown log_level {log_level!r}.")

        return cls(
            certificate=certificate,
            output=OutputSettings.from_dict(payload.get("output"), base_dir=base_dir),
            log_level=log_level,
        )


def load_config(path: Path | str) -> SignerConfig:
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigError(f"{path}: unable to read config ({exc})") from exc
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ConfigError(f"{path}: invalid JSON ({exc})") from exc
    return SignerConfig.from_dict(payload, base_dir=path.parent)


__all__ = [
    "CertificateSource",
    "ConfigError",
    "OutputSettings",
    "SignerConfig",
    "load_config",
]

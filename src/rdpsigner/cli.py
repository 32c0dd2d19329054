"""Command-line entry point for signing ``.rdp`` files.

* Load signing material from a PKCS#12 bundle or PEM certificate/key pair,
  either from flags or from a JSON config (see :mod:`rdpsigner.config`).
* Sign each file in place, next to itself with a suffix, or to ``--output``.
* Report one line per signed file; failures go to stderr and exit code 1.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence, Tuple

from cryptography.exceptions import UnsupportedAlgorithm

from .config import CertificateSource, ConfigError, OutputSettings, SignerConfig, load_config
from .core.types import RdpSignerError
from .pipeline import RdpSigner
from .signing.cms import SigningCertificate

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="rdpsigner", description="Sign RDP connection files."
    )
    parser.add_argument(
        "paths",
        nargs="+",
        type=Path,
        metavar="rdp_file",
        help="One or more .rdp files to sign.",
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="JSON config describing the certificate and output options.",
    )
    parser.add_argument(
        "--pkcs12",
        type=Path,
        help="PKCS#12 (.pfx/.p12) bundle holding the key and certificate chain.",
    )
    parser.add_argument(
        "--certificate",
        type=Path,
        help="PEM certificate (leaf first, optionally followed by its chain).",
    )
    parser.add_argument(
        "--private-key",
        type=Path,
        help="PEM private key matching --certificate.",
    )
    parser.add_argument(
        "--chain",
        action="append",
        type=Path,
        default=[],
        help="Additional PEM chain certificate (repeatable).",
    )
    parser.add_argument(
        "--password-env",
        help="Environment variable holding the key/bundle password.",
    )
    parser.add_argument(
        "--output",
        type=Path,
        help="Write the signed file here instead of signing in place (single input only).",
    )
    parser.add_argument(
        "--suffix",
        help=(
            "Write <name><suffix>.rdp next to each input instead of signing in place "
            "(use --suffix=-signed for suffixes starting with a dash)."
        ),
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging.",
    )
    return parser


def _resolve_config(
    args: argparse.Namespace,
) -> Tuple[CertificateSource, OutputSettings, str]:
    config = load_config(args.config) if args.config else SignerConfig()

    certificate = config.certificate
    if args.pkcs12 or args.certificate or args.private_key:
        certificate = CertificateSource(
            pkcs12=args.pkcs12,
            certificate=args.certificate,
            private_key=args.private_key,
            chain=tuple(args.chain),
            password_env=args.password_env,
        )
    elif certificate is not None and args.password_env:
        certificate = CertificateSource(
            pkcs12=certificate.pkcs12,
            certificate=certificate.certificate,
            private_key=certificate.private_key,
            chain=certificate.chain,
            password_env=args.password_env,
        )
    if certificate is None:
        raise ConfigError(
            "A certificate is required (--pkcs12, --certificate/--private-key or --config)."
        )

    output = config.output
    if args.suffix:
        output = OutputSettings(directory=output.directory, suffix=args.suffix)

    return certificate, output, config.log_level


def _load_certificate(source: CertificateSource) -> SigningCertificate:
    try:
        return source.load()
    except (ConfigError, RdpSignerError):
        raise
    except (OSError, ValueError, TypeError, UnsupportedAlgorithm) as exc:
        raise ConfigError(f"Unable to load signing certificate: {exc}") from exc


def main(argv: Sequence[str] | None = None) -> int:
    if argv is None:
        argv = list(sys.argv[1:])
    else:
        argv = list(argv)

    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.output is not None and len(args.paths) > 1:
        parser.error("--output can only be used with a single input file")

    try:
        source, output, log_level = _resolve_config(args)
        logging.basicConfig(
            level=logging.DEBUG if args.verbose else log_level,
            format="%(levelname)s %(name)s: %(message)s",
        )
        certificate = _load_certificate(source)
    except (ConfigError, RdpSignerError) as exc:
        parser.error(str(exc))

    failures = 0
    with RdpSigner(certificate) as signer:
        for path in args.paths:
            destination: Optional[Path] = args.output or output.destination_for(path)
            try:
                written = signer.sign_file(path, destination)
            except (RdpSignerError, OSError) as exc:
                failures += 1
                logger.error("Failed to sign %s: %s", path, exc)
                print(f"{path}: {exc}", file=sys.stderr)
                continue
            print(f"Signed {path} -> {written}")

    return 1 if failures else 0


def console_main() -> None:
    """Entry point for ``rdpsigner`` console script."""

    sys.exit(main())


if __name__ == "__main__":  # pragma: no cover - CLI entry
    console_main()

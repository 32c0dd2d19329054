"""CMS/PKCS#7 signing backed by the ``cryptography`` package.

RDP signatures are detached CMS ``SignedData`` blobs computed with SHA-256,
identifying the signer by issuer and serial number, and embedding the whole
certificate chain so the client can build a path to its trust store.

Any callable with the shape of :func:`sign_detached` can stand in for it,
e.g. a hardware-backed signer, via the ``signer`` arguments of the pipeline.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Optional, Sequence, Tuple, Union

from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec, rsa
from cryptography.hazmat.primitives.serialization import pkcs7, pkcs12

from ..core.types import CertificateLoadError

logger = logging.getLogger(__name__)

SIGNATURE_DIGEST = "sha256"
_DIGESTS = {"sha256": hashes.SHA256}

SigningKey = Union[rsa.RSAPrivateKey, ec.EllipticCurvePrivateKey]
Password = Union[str, bytes, None]

_SIGN_OPTIONS = (
    pkcs7.PKCS7Options.DetachedSignature,
    pkcs7.PKCS7Options.Binary,
    pkcs7.PKCS7Options.NoCapabilities,
)


@dataclass(frozen=True)
class SigningCertificate:
    """Leaf certificate, its private key, and the rest of its chain."""

    certificate: x509.Certificate
    private_key: SigningKey = field(repr=False)
    chain: Tuple[x509.Certificate, ...] = ()

    @property
    def subject(self) -> str:
        return self.certificate.subject.rfc4514_string()

    @property
    def issuer(self) -> str:
        return self.certificate.issuer.rfc4514_string()

    @property
    def serial_number(self) -> int:
        return self.certificate.serial_number


CmsSigner = Callable[[bytes, SigningCertificate], bytes]


def _password_bytes(password: Password) -> Optional[bytes]:
    if password is None:
        return None
    if isinstance(password, str):
        return password.encode("utf-8")
    return password


def _without_leaf(
    leaf: x509.Certificate, certificates: Sequence[x509.Certificate]
) -> Tuple[x509.Certificate, ...]:
    return tuple(cert for cert in certificates if cert != leaf)


def _checked_key(certificate: x509.Certificate, key: object) -> SigningKey:
    """Return ``key`` once it is known to sign for ``certificate``."""

    if not isinstance(key, (rsa.RSAPrivateKey, ec.EllipticCurvePrivateKey)):
        raise CertificateLoadError(
            f"Unsupported private key type {type(key).__name__}; only RSA and EC keys can sign."
        )
    public_key = certificate.public_key()
    if not isinstance(public_key, (rsa.RSAPublicKey, ec.EllipticCurvePublicKey)) or (
        key.public_key().public_numbers() != public_key.public_numbers()
    ):
        raise CertificateLoadError(
            f"Private key does not match certificate {certificate.subject.rfc4514_string()}."
        )
    return key


def load_pkcs12(data: bytes, password: Password = None) -> SigningCertificate:
    """Load signing material from a PKCS#12 (``.pfx``) bundle."""

    key, certificate, additional = pkcs12.load_key_and_certificates(
        data, _password_bytes(password)
    )
    if key is None:
        raise CertificateLoadError("PKCS#12 bundle does not contain a private key.")
    if certificate is None:
        raise CertificateLoadError("PKCS#12 bundle does not contain a certificate.")
    return SigningCertificate(
        certificate=certificate,
        private_key=_checked_key(certificate, key),
        chain=_without_leaf(certificate, additional or ()),
    )


def load_pkcs12_file(path: Path | str, password: Password = None) -> SigningCertificate:
    return load_pkcs12(Path(path).read_bytes(), password)


def load_pem(
    certificate_data: bytes,
    key_data: bytes,
    password: Password = None,
    chain_data: Optional[bytes] = None,
) -> SigningCertificate:
    """Load signing material from PEM-encoded certificate and key blobs.

    ``certificate_data`` may hold the full chain, leaf first; ``chain_data``
    supplies further intermediates.
    """

    certificates = x509.load_pem_x509_certificates(certificate_data)
    if not certificates:
        raise CertificateLoadError("No certificate found in PEM data.")
    leaf = certificates[0]
    chain = list(certificates[1:])
    if chain_data:
        chain.extend(x509.load_pem_x509_certificates(chain_data))
    key = serialization.load_pem_private_key(key_data, password=_password_bytes(password))
    return SigningCertificate(
        certificate=leaf,
        private_key=_checked_key(leaf, key),
        chain=_without_leaf(leaf, chain),
    )


def load_pem_files(
    certificate_path: Path | str,
    key_path: Path | str,
    password: Password = None,
    chain_paths: Sequence[Path | str] = (),
) -> SigningCertificate:
    chain_data = b"".join(Path(path).read_bytes() for path in chain_paths)
    return load_pem(
        Path(certificate_path).read_bytes(),
        Path(key_path).read_bytes(),
        password=password,
        chain_data=chain_data or None,
    )


def sign_detached(payload: bytes, certificate: SigningCertificate) -> bytes:
    """Return the DER-encoded detached CMS signature of ``payload``."""

    logger.debug(
        "Signing %s byte payload as %s (serial %s).",
        len(payload),
        certificate.subject,
        certificate.serial_number,
    )
    builder = (
        pkcs7.PKCS7SignatureBuilder()
        .set_data(payload)
        .add_signer(certificate.certificate, certificate.private_key, _DIGESTS[SIGNATURE_DIGEST]())
    )
    for extra in certificate.chain:
        builder = builder.add_certificate(extra)
    return builder.sign(serialization.Encoding.DER, list(_SIGN_OPTIONS))


__all__ = [
    "CmsSigner",
    "SIGNATURE_DIGEST",
    "SigningCertificate",
    "load_pem",
    "load_pem_files",
    "load_pkcs12",
    "load_pkcs12_file",
    "sign_detached",
]

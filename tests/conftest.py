from __future__ import annotations

import datetime
from dataclasses import dataclass
from pathlib import Path
from typing import List, Tuple

import pytest
from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.hazmat.primitives.serialization import pkcs12
from cryptography.x509.oid import NameOID

from rdpsigner.signing.cms import SigningCertificate

PKCS12_PASSWORD = "correct horse"


def _name(common_name: str) -> x509.Name:
    return x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, common_name)])


def _issue(
    subject: str,
    subject_key: ec.EllipticCurvePrivateKey,
    issuer: str,
    issuer_key: ec.EllipticCurvePrivateKey,
    *,
    ca: bool,
) -> x509.Certificate:
    now = datetime.datetime.now(datetime.timezone.utc)
    return (
        x509.CertificateBuilder()
        .subject_name(_name(subject))
        .issuer_name(_name(issuer))
        .public_key(subject_key.public_key())
        .serial_number(x509.random_serial_number())
        .not_valid_before(now - datetime.timedelta(days=1))
        .not_valid_after(now + datetime.timedelta(days=30))
        .add_extension(x509.BasicConstraints(ca=ca, path_length=None), critical=True)
        .sign(issuer_key, hashes.SHA256())
    )


@pytest.fixture(scope="session")
def signing_certificate() -> SigningCertificate:
    """Leaf issued by an intermediate issued by a self-signed root."""

    root_key = ec.generate_private_key(ec.SECP256R1())
    intermediate_key = ec.generate_private_key(ec.SECP256R1())
    leaf_key = ec.generate_private_key(ec.SECP256R1())

    root = _issue("Test Root CA", root_key, "Test Root CA", root_key, ca=True)
    intermediate = _issue(
        "Test Intermediate CA", intermediate_key, "Test Root CA", root_key, ca=True
    )
    leaf = _issue("rdp.example.com", leaf_key, "Test Intermediate CA", intermediate_key, ca=False)
    return SigningCertificate(certificate=leaf, private_key=leaf_key, chain=(intermediate, root))


@pytest.fixture()
def pem_files(tmp_path: Path, signing_certificate: SigningCertificate) -> Tuple[Path, Path, Path]:
    """Write leaf certificate, unencrypted key, and chain as separate PEM files."""

    cert_path = tmp_path / "leaf.pem"
    key_path = tmp_path / "leaf.key"
    chain_path = tmp_path / "chain.pem"
    cert_path.write_bytes(signing_certificate.certificate.public_bytes(serialization.Encoding.PEM))
    key_path.write_bytes(
        signing_certificate.private_key.private_bytes(
            serialization.Encoding.PEM,
            serialization.PrivateFormat.PKCS8,
            serialization.NoEncryption(),
        )
    )
    chain_path.write_bytes(
        b"".join(cert.public_bytes(serialization.Encoding.PEM) for cert in signing_certificate.chain)
    )
    return cert_path, key_path, chain_path


@pytest.fixture()
def pkcs12_password() -> str:
    return PKCS12_PASSWORD


@pytest.fixture()
def pkcs12_file(tmp_path: Path, signing_certificate: SigningCertificate) -> Path:
    path = tmp_path / "signing.pfx"
    path.write_bytes(
        pkcs12.serialize_key_and_certificates(
            b"rdp-signing",
            signing_certificate.private_key,
            signing_certificate.certificate,
            list(signing_certificate.chain),
            serialization.BestAvailableEncryption(PKCS12_PASSWORD.encode("utf-8")),
        )
    )
    return path


@dataclass
class RecordingSigner:
    """Deterministic stand-in for the CMS signer."""

    signature: bytes = b"\x30\x82fake-cms-signature"

    def __post_init__(self) -> None:
        self.calls: List[Tuple[bytes, object]] = []

    def __call__(self, payload: bytes, certificate: object) -> bytes:
        self.calls.append((payload, certificate))
        return self.signature


@pytest.fixture()
def fake_signer() -> RecordingSigner:
    return RecordingSigner()

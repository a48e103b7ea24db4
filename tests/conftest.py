"""Shared test fixtures for certtoken."""

import os
from collections.abc import Callable, Iterator
from datetime import UTC, datetime, timedelta

import pytest
import structlog
from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from cryptography.x509.oid import NameOID

FIXED_NOW = 1_700_000_000


@pytest.fixture(autouse=True)
def _clear_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep CERTTOKEN_* variables from the host out of settings."""
    for name in list(os.environ):
        if name.startswith("CERTTOKEN_"):
            monkeypatch.delenv(name)


@pytest.fixture(autouse=True)
def _reset_logging() -> Iterator[None]:
    """Undo logging configuration done by the CLI."""
    yield
    structlog.reset_defaults()


class FixedClock:
    """Deterministic clock returning sequential jti values."""

    def __init__(self, now: int = FIXED_NOW) -> None:
        self._now = now
        self._counter = 0

    def now(self) -> int:
        return self._now

    def new_jti(self) -> str:
        self._counter += 1
        return f"00000000-0000-4000-8000-{self._now:08d}{self._counter:04d}"


@pytest.fixture
def make_clock() -> Callable[[int], FixedClock]:
    """Factory for fixed clocks at a chosen unix time."""
    return FixedClock


@pytest.fixture
def fixed_clock() -> FixedClock:
    return FixedClock()


@pytest.fixture(scope="session")
def rsa_key() -> rsa.RSAPrivateKey:
    """A 2048-bit RSA key shared across the session."""
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture(scope="session")
def private_key_pem(rsa_key: rsa.RSAPrivateKey) -> bytes:
    return rsa_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    )


@pytest.fixture(scope="session")
def certificate(rsa_key: rsa.RSAPrivateKey) -> x509.Certificate:
    """Self-signed certificate for the session key."""
    name = x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, "certtoken-test")])
    now = datetime.now(UTC)
    return (
        x509.CertificateBuilder()
        .subject_name(name)
        .issuer_name(name)
        .public_key(rsa_key.public_key())
        .serial_number(x509.random_serial_number())
        .not_valid_before(now - timedelta(days=1))
        .not_valid_after(now + timedelta(days=30))
        .sign(rsa_key, hashes.SHA256())
    )


@pytest.fixture(scope="session")
def certificate_pem(certificate: x509.Certificate) -> bytes:
    return certificate.public_bytes(serialization.Encoding.PEM)


@pytest.fixture(scope="session")
def certificate_der(certificate: x509.Certificate) -> bytes:
    return certificate.public_bytes(serialization.Encoding.DER)

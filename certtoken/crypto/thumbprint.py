"""Certificate loading and x5t thumbprint derivation."""

import re
from pathlib import Path

import structlog
from cryptography import x509
from cryptography.hazmat.primitives import hashes

from certtoken.core.errors import CertificateError
from certtoken.crypto.encoding import b64url_encode

SHA1_DIGEST_SIZE = 20
PEM_MARKER = b"-----BEGIN"

_HEX_SEPARATORS = re.compile(r"[\s:\-]")

log = structlog.get_logger()


def load_certificate(data: bytes) -> x509.Certificate:
    """Parse a PEM or DER X.509 certificate."""
    try:
        if PEM_MARKER in data:
            return x509.load_pem_x509_certificate(data)
        return x509.load_der_x509_certificate(data)
    except ValueError as exc:
        raise CertificateError(f"invalid X.509 certificate: {exc}") from exc


def read_certificate(path: str | Path) -> bytes:
    """Read PEM or DER certificate bytes from a file."""
    try:
        return Path(path).read_bytes()
    except OSError as exc:
        raise CertificateError(f"cannot read certificate {path}: {exc}") from exc


def certificate_thumbprint(cert: x509.Certificate) -> str:
    """Return the x5t header value: base64url SHA-1 of the DER certificate."""
    x5t = b64url_encode(cert.fingerprint(hashes.SHA1()))
    log.debug("thumbprint.derived", x5t=x5t)
    return x5t


def fingerprint_from_hex(text: str) -> bytes:
    """Decode a textual SHA-1 fingerprint (e.g. `AA:BB:...`) to raw bytes."""
    digits = _HEX_SEPARATORS.sub("", text)
    try:
        raw = bytes.fromhex(digits)
    except ValueError as exc:
        raise CertificateError(f"fingerprint is not hex: {text!r}") from exc
    if len(raw) != SHA1_DIGEST_SIZE:
        raise CertificateError(
            f"fingerprint must be {SHA1_DIGEST_SIZE} bytes, got {len(raw)}"
        )
    return raw


def thumbprint_from_hex(text: str) -> str:
    """Return the x5t header value for a textual SHA-1 fingerprint."""
    return b64url_encode(fingerprint_from_hex(text))

"""RSA private key loading and RS256 signing."""

from collections.abc import Callable
from functools import partial
from pathlib import Path

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.rsa import RSAPrivateKey
from jwt.algorithms import RSAAlgorithm

from certtoken.core.errors import PrivateKeyError, SigningError

MIN_RSA_KEY_SIZE = 2048

SignFn = Callable[[str], bytes]

_rs256 = RSAAlgorithm(RSAAlgorithm.SHA256)


def read_private_key(path: str | Path) -> bytes:
    """Read PEM private key bytes from a file."""
    try:
        return Path(path).read_bytes()
    except OSError as exc:
        raise PrivateKeyError(f"cannot read private key {path}: {exc}") from exc


def load_private_key(pem: bytes, passphrase: bytes | None = None) -> RSAPrivateKey:
    """Load an RSA private key from PEM, decrypting it if a passphrase is given."""
    try:
        key = serialization.load_pem_private_key(pem, password=passphrase)
    except (ValueError, TypeError, UnsupportedAlgorithm) as exc:
        raise PrivateKeyError(f"cannot load private key: {exc}") from exc
    if not isinstance(key, RSAPrivateKey):
        raise PrivateKeyError(
            f"private key must be RSA, got {type(key).__name__}"
        )
    return key


def sign(private_key_pem: bytes, message: str, passphrase: bytes | None = None) -> bytes:
    """RSASSA-PKCS1-v1_5 / SHA-256 signature over the UTF-8 bytes of `message`."""
    key = load_private_key(private_key_pem, passphrase)
    if key.key_size < MIN_RSA_KEY_SIZE:
        raise SigningError(
            f"RSA key is {key.key_size} bits, at least {MIN_RSA_KEY_SIZE} required"
        )
    try:
        return _rs256.sign(message.encode("utf-8"), key)
    except ValueError as exc:
        raise SigningError(f"RS256 signing failed: {exc}") from exc


def make_signer(private_key_pem: bytes, passphrase: bytes | None = None) -> SignFn:
    """Bind key material into a callback that signs an encoded header.claims string."""
    return partial(sign, private_key_pem, passphrase=passphrase)

"""Error kinds raised while issuing a certificate-credential token."""

from enum import StrEnum
from typing import Any

EXIT_CONFIGURATION = 2
EXIT_CREDENTIAL = 3
EXIT_TRANSPORT = 4
EXIT_PROVIDER = 5


class CertTokenError(Exception):
    """Base class for every failure of a single issuance."""

    exit_code = 1


class ConfigurationError(CertTokenError):
    """Settings are missing or invalid."""

    exit_code = EXIT_CONFIGURATION


class CertificateError(CertTokenError):
    """Certificate is unreadable or not a valid X.509 encoding."""

    exit_code = EXIT_CREDENTIAL


class PrivateKeyError(CertTokenError):
    """Private key is unreadable, malformed, encrypted, or not RSA."""

    exit_code = EXIT_CREDENTIAL


class SigningError(CertTokenError):
    """RS256 signing failed or the key cannot produce a usable signature."""

    exit_code = EXIT_CREDENTIAL


class TransportErrorKind(StrEnum):
    """Transport failure categories."""

    TIMEOUT = "timeout"
    TLS = "tls"
    CONNECT = "connect"
    NETWORK = "network"


class TransportError(CertTokenError):
    """The token endpoint could not be reached."""

    exit_code = EXIT_TRANSPORT

    def __init__(self, kind: TransportErrorKind, message: str) -> None:
        super().__init__(f"{kind}: {message}")
        self.kind = kind


class ProviderError(CertTokenError):
    """The token endpoint answered without issuing a token."""

    exit_code = EXIT_PROVIDER

    def __init__(self, status: int, body: Any, message: str = "") -> None:
        super().__init__(message or f"token endpoint returned HTTP {status}")
        self.status = status
        self.body = body

    @property
    def error_code(self) -> str | None:
        """OAuth2 `error` field from the body, when present."""
        if isinstance(self.body, dict):
            return self.body.get("error")
        return None

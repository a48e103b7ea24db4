"""Certificate-credential token issuance: thumbprint, assertion, exchange."""

from certtoken.core.errors import CertificateError
from certtoken.core.settings import IssuerSettings
from certtoken.crypto.signer import make_signer, read_private_key
from certtoken.crypto.thumbprint import (
    certificate_thumbprint,
    load_certificate,
    read_certificate,
    thumbprint_from_hex,
)
from certtoken.oidc.assertion import build_client_assertion, token_endpoint
from certtoken.oidc.clock import Clock, SystemClock
from certtoken.oidc.exchange import ClientAssertionExchanger
from certtoken.oidc.types import TokenRequest, TokenResponse


def request_from_settings(settings: IssuerSettings) -> TokenRequest:
    """Read the certificate and key files named in settings."""
    certificate = None
    if settings.certificate_path is not None:
        certificate = read_certificate(settings.certificate_path)
    passphrase = None
    if settings.private_key_passphrase is not None:
        passphrase = settings.private_key_passphrase.get_secret_value().encode()
    return TokenRequest(
        tenant_id=settings.tenant_id,
        client_id=settings.client_id,
        scope=settings.scope,
        private_key_pem=read_private_key(settings.private_key_path),
        certificate=certificate,
        thumbprint=settings.thumbprint,
        passphrase=passphrase,
        authority=settings.authority,
    )


def resolve_thumbprint(request: TokenRequest) -> str:
    """x5t from the certificate, or from a configured hex fingerprint."""
    if request.certificate is not None:
        return certificate_thumbprint(load_certificate(request.certificate))
    if request.thumbprint is not None:
        return thumbprint_from_hex(request.thumbprint)
    raise CertificateError("either a certificate or a thumbprint is required")


def build_assertion_for(request: TokenRequest, clock: Clock) -> str:
    """Signed client assertion for the request's application identity."""
    passphrase = request.passphrase.get_secret_value() if request.passphrase else None
    signer = make_signer(request.private_key_pem.get_secret_value(), passphrase)
    return build_client_assertion(
        resolve_thumbprint(request),
        request.tenant_id,
        request.client_id,
        signer,
        clock,
        authority=request.authority,
    )


def issue_token(
    request: TokenRequest,
    *,
    clock: Clock | None = None,
    exchanger: ClientAssertionExchanger | None = None,
) -> TokenResponse:
    """Issue one access token; every failure propagates to the caller."""
    assertion = build_assertion_for(request, clock or SystemClock())
    if exchanger is None:
        exchanger = ClientAssertionExchanger(
            token_endpoint(request.tenant_id, request.authority)
        )
    return exchanger.exchange(request.client_id, request.scope, assertion)

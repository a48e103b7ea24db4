"""Client assertion exchange against the token endpoint via httpx.

One form-encoded POST per exchange, no retry. TLS verification is never
disabled; a CA bundle only supplies trust roots. Transport failures become
`TransportError`, non-2xx answers become `ProviderError`.
"""

import ssl
from pathlib import Path
from typing import Any

import httpx
import structlog
from pydantic import ValidationError

from certtoken.core.errors import (
    ConfigurationError,
    ProviderError,
    TransportError,
    TransportErrorKind,
)
from certtoken.oidc.assertion import CLIENT_ASSERTION_TYPE
from certtoken.oidc.types import TokenResponse

DEFAULT_TIMEOUT_SECONDS = 30.0
GRANT_TYPE = "client_credentials"

log = structlog.get_logger()


def _response_body(response: httpx.Response) -> Any:
    """Parsed JSON body, or the raw text when the body is not JSON."""
    try:
        return response.json()
    except ValueError:
        return response.text


def _classify_connect_error(exc: httpx.ConnectError) -> TransportErrorKind:
    cause: BaseException | None = exc
    while cause is not None:
        if isinstance(cause, ssl.SSLError):
            return TransportErrorKind.TLS
        cause = cause.__cause__ or cause.__context__
    return TransportErrorKind.CONNECT


class ClientAssertionExchanger:
    """Exchanges a signed client assertion for an access token."""

    def __init__(
        self,
        token_url: str,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        ca_bundle: str | Path | None = None,
    ) -> None:
        self._token_url = token_url
        self._timeout = timeout
        self._ca_bundle = ca_bundle

    def _verify(self) -> ssl.SSLContext | bool:
        if self._ca_bundle is None:
            return True
        try:
            return ssl.create_default_context(cafile=str(self._ca_bundle))
        except OSError as exc:
            raise ConfigurationError(
                f"cannot load CA bundle {self._ca_bundle}: {exc}"
            ) from exc

    def exchange(
        self, client_id: str, scope: str, client_assertion: str
    ) -> TokenResponse:
        """POST the assertion and return the provider's token response."""
        form = {
            "client_id": client_id,
            "scope": scope,
            "client_assertion_type": CLIENT_ASSERTION_TYPE,
            "client_assertion": client_assertion,
            "grant_type": GRANT_TYPE,
        }
        log.info("token.requested", token_url=self._token_url, scope=scope)
        response = self._post(form)

        body = _response_body(response)
        if not response.is_success:
            log.warning(
                "token.rejected",
                status=response.status_code,
                error=body.get("error") if isinstance(body, dict) else None,
            )
            raise ProviderError(response.status_code, body)
        if not isinstance(body, dict):
            raise ProviderError(
                response.status_code, body, "token endpoint returned a non-JSON body"
            )
        try:
            token = TokenResponse.model_validate(body)
        except ValidationError as exc:
            raise ProviderError(
                response.status_code, body, f"malformed token response: {exc}"
            ) from exc
        log.info(
            "token.issued",
            token_type=token.token_type,
            expires_in=token.expires_in,
        )
        return token

    def _post(self, form: dict[str, str]) -> httpx.Response:
        verify = self._verify()
        try:
            with httpx.Client(timeout=self._timeout, verify=verify) as client:
                return client.post(self._token_url, data=form)
        except httpx.InvalidURL as exc:
            raise ConfigurationError(
                f"invalid token endpoint {self._token_url!r}: {exc}"
            ) from exc
        except httpx.TimeoutException as exc:
            log.error("token.transport_failed", kind=TransportErrorKind.TIMEOUT)
            raise TransportError(TransportErrorKind.TIMEOUT, str(exc)) from exc
        except httpx.ConnectError as exc:
            kind = _classify_connect_error(exc)
            log.error("token.transport_failed", kind=kind)
            raise TransportError(kind, str(exc)) from exc
        except httpx.TransportError as exc:
            log.error("token.transport_failed", kind=TransportErrorKind.NETWORK)
            raise TransportError(TransportErrorKind.NETWORK, str(exc)) from exc

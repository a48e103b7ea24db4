"""Client assertion construction for the JWT-bearer client authentication flow."""

import json
from typing import Any

import structlog
from pydantic import BaseModel

from certtoken.crypto.encoding import b64url_decode, b64url_encode
from certtoken.crypto.signer import SignFn
from certtoken.crypto.types import JWTClaims, JWTHeader
from certtoken.oidc.clock import Clock

DEFAULT_AUTHORITY = "https://login.microsoftonline.com"
CLIENT_ASSERTION_TYPE = "urn:ietf:params:oauth:client-assertion-type:jwt-bearer"

log = structlog.get_logger()


def token_endpoint(tenant_id: str, authority: str = DEFAULT_AUTHORITY) -> str:
    """v2.0 token endpoint for a tenant; also the assertion audience."""
    return f"{authority.rstrip('/')}/{tenant_id}/oauth2/v2.0/token"


def encode_segment(model: BaseModel) -> str:
    """Compact JSON, then unpadded base64url."""
    payload = json.dumps(model.model_dump(), separators=(",", ":"))
    return b64url_encode(payload.encode("utf-8"))


def decode_segment(segment: str) -> dict[str, Any]:
    """Inverse of `encode_segment`."""
    return json.loads(b64url_decode(segment))


def build_client_assertion(
    x5t: str,
    tenant_id: str,
    client_id: str,
    sign: SignFn,
    clock: Clock,
    authority: str = DEFAULT_AUTHORITY,
) -> str:
    """Build and sign a compact JWT client assertion.

    `sign` receives exactly the `header.claims` string that ends up as the
    first two segments of the result.
    """
    header = JWTHeader(x5t=x5t)
    claims = JWTClaims.for_client(
        aud=token_endpoint(tenant_id, authority),
        client_id=client_id,
        now=clock.now(),
        jti=clock.new_jti(),
    )
    signing_input = f"{encode_segment(header)}.{encode_segment(claims)}"
    signature = sign(signing_input)
    log.info(
        "assertion.built",
        client_id=client_id,
        aud=claims.aud,
        jti=claims.jti,
        nbf=claims.nbf,
        exp=claims.exp,
    )
    return f"{signing_input}.{b64url_encode(signature)}"

"""Type definitions for the token request and response."""

import json
from typing import Any

from pydantic import BaseModel, ConfigDict, SecretBytes

from certtoken.oidc.assertion import DEFAULT_AUTHORITY


class TokenResponse(BaseModel):
    """Successful token endpoint response, provider fields kept as sent.

    Only `access_token` is checked; other fields are passed through uncoerced.
    """

    model_config = ConfigDict(extra="allow", frozen=True)

    access_token: str
    token_type: Any = "Bearer"
    expires_in: Any = None
    ext_expires_in: Any = None

    def provider_fields(self) -> dict[str, Any]:
        """The fields the provider actually returned."""
        data = self.model_dump(exclude_unset=True)
        data.update(self.model_extra or {})
        return data

    def to_json(self) -> str:
        return json.dumps(self.provider_fields())


class TokenRequest(BaseModel):
    """Inputs for one certificate-credential token issuance."""

    model_config = ConfigDict(frozen=True)

    tenant_id: str
    client_id: str
    scope: str
    private_key_pem: SecretBytes
    certificate: bytes | None = None
    thumbprint: str | None = None
    passphrase: SecretBytes | None = None
    authority: str = DEFAULT_AUTHORITY

"""Type definitions for the client assertion JWT."""

from typing import Literal, Self

from pydantic import BaseModel, ConfigDict, model_validator

ASSERTION_LIFETIME_SECONDS = 300


class JWTHeader(BaseModel):
    """JOSE header of a certificate-credential client assertion."""

    model_config = ConfigDict(frozen=True)

    alg: Literal["RS256"] = "RS256"
    typ: Literal["JWT"] = "JWT"
    x5t: str


class JWTClaims(BaseModel):
    """Claim set of a client assertion (RFC 7523)."""

    model_config = ConfigDict(frozen=True)

    aud: str
    nbf: int
    exp: int
    jti: str
    iss: str
    sub: str

    @model_validator(mode="after")
    def _check_window(self) -> Self:
        if self.exp != self.nbf + ASSERTION_LIFETIME_SECONDS:
            raise ValueError(
                f"exp must be nbf + {ASSERTION_LIFETIME_SECONDS} seconds"
            )
        if self.iss != self.sub:
            raise ValueError("iss and sub must both be the client id")
        return self

    @classmethod
    def for_client(cls, *, aud: str, client_id: str, now: int, jti: str) -> Self:
        """Build claims valid from `now` for the assertion lifetime."""
        return cls(
            aud=aud,
            nbf=now,
            exp=now + ASSERTION_LIFETIME_SECONDS,
            jti=jti,
            iss=client_id,
            sub=client_id,
        )

"""Issuer settings loaded from a JSON config file and environment variables."""

import json
from pathlib import Path
from typing import Any, Self

from pydantic import FilePath, SecretStr, ValidationError, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from certtoken.core.errors import ConfigurationError
from certtoken.oidc.assertion import DEFAULT_AUTHORITY
from certtoken.oidc.exchange import DEFAULT_TIMEOUT_SECONDS


class IssuerSettings(BaseSettings):
    """Application identity and credential locations for token issuance."""

    model_config = SettingsConfigDict(env_prefix="CERTTOKEN_", extra="ignore")

    tenant_id: str
    client_id: str
    scope: str
    private_key_path: Path
    certificate_path: Path | None = None
    thumbprint: str | None = None
    private_key_passphrase: SecretStr | None = None
    authority: str = DEFAULT_AUTHORITY
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    ca_bundle: FilePath | None = None
    log_level: str = "INFO"

    @model_validator(mode="after")
    def _check_identity(self) -> Self:
        for name in ("tenant_id", "client_id", "scope"):
            if not getattr(self, name).strip():
                raise ValueError(f"{name} must not be empty")
        if self.certificate_path is None and not self.thumbprint:
            raise ValueError("set certificate_path or thumbprint")
        if self.timeout_seconds <= 0:
            raise ValueError("timeout_seconds must be positive")
        return self


def _read_config_file(path: str | Path) -> dict[str, Any]:
    try:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
    except OSError as exc:
        raise ConfigurationError(f"cannot read config file {path}: {exc}") from exc
    except ValueError as exc:
        raise ConfigurationError(f"config file {path} is not JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigurationError(f"config file {path} must hold a JSON object")
    return data


def load_settings(
    config_file: str | Path | None = None, **overrides: Any
) -> IssuerSettings:
    """Build settings: overrides, then config file, then CERTTOKEN_* env vars."""
    values: dict[str, Any] = {}
    if config_file is not None:
        values.update(_read_config_file(config_file))
    values.update({k: v for k, v in overrides.items() if v is not None})
    try:
        return IssuerSettings(**values)
    except ValidationError as exc:
        raise ConfigurationError(f"invalid settings: {exc}") from exc

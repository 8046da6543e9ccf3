"""Environment-sourced configuration."""

import os
from typing import Mapping, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator

# Older deployments prefix every variable with this.
LEGACY_PREFIX = "COPERNIQ_"

ENV_FIELDS = {
    "BASE_URL": "base_url",
    "API_KEY": "api_key",
    "MATCH_BY": "match_by",
    "MATCH_STRATEGY": "match_strategy",
    "ALLOW_OPTIONS": "allow_options",
    "BATCH_SIZE": "batch_size",
    "BATCH_TIMEOUT_MS": "batch_timeout_ms",
}


class ConfigError(Exception):
    """Required configuration is missing or invalid."""


class Settings(BaseModel):
    """Runtime settings for the ingest run."""

    base_url: str = Field(..., min_length=1)
    api_key: str = Field(..., min_length=1)
    match_by: str = "primaryEmail"
    match_strategy: str = "skip"
    allow_options: str = "true"
    batch_size: int = Field(default=10, ge=1)
    batch_timeout_ms: int = Field(default=1000, ge=0)

    @field_validator("base_url")
    @classmethod
    def _strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    def query_params(self) -> dict[str, str]:
        """Query string sent with every project submission."""
        return {
            "match_by": self.match_by,
            "match_found_strategy": self.match_strategy,
            "allow_new_options": self.allow_options,
        }


def _lookup(environ: Mapping[str, str], name: str) -> Optional[str]:
    value = environ.get(name)
    if value is None or value == "":
        value = environ.get(LEGACY_PREFIX + name)
    if value is None or value == "":
        return None
    return value


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """
    Build Settings from environment variables (os.environ by default).
    Raises ConfigError listing every missing or invalid variable.
    """
    environ = os.environ if environ is None else environ
    data: dict[str, str] = {}
    for env_name, field in ENV_FIELDS.items():
        value = _lookup(environ, env_name)
        if value is not None:
            data[field] = value.strip() if field in ("batch_size", "batch_timeout_ms") else value

    missing = [n for n in ("BASE_URL", "API_KEY") if ENV_FIELDS[n] not in data]
    if missing:
        raise ConfigError(f"Missing required environment variables: {', '.join(missing)}")

    field_to_env = {field: env for env, field in ENV_FIELDS.items()}
    try:
        return Settings.model_validate(data)
    except ValidationError as e:
        problems = [
            f"{field_to_env.get(str(err['loc'][0]), err['loc'][0])}: {err['msg']}"
            for err in e.errors()
        ]
        raise ConfigError(f"Invalid configuration: {'; '.join(problems)}") from e

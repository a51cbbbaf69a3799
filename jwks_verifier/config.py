"""
Configuration for the JWKS verifier.
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class VerifierSettings(BaseSettings):
    """Verifier settings read from ``JWKS_VERIFIER_*`` environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="JWKS_VERIFIER_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore"
    )

    # Key set
    jwks_url: Optional[str] = Field(default=None)
    cache_ttl_seconds: int = Field(default=300, ge=0)
    http_timeout_seconds: float = Field(default=10.0, gt=0)

    # Claim policy
    leeway_seconds: int = Field(default=300, ge=0)
    expected_issuer: Optional[str] = Field(default=None)
    expected_audience: Optional[str] = Field(default=None)

    # Observability
    log_level: str = Field(default="info")


@lru_cache
def get_settings() -> VerifierSettings:
    """Get the process-wide settings instance."""
    return VerifierSettings()

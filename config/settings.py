"""
Opinion Portfolio Tracker configuration

- Settings: environment-driven configuration (Pydantic)
- Constants for candidate-field policies live in config.system_constants
"""

from __future__ import annotations
from pydantic_settings import BaseSettings
from typing import Dict, Any


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # --- UPSTREAM (Opinion OpenAPI) ---
    OPINION_API_URL: str = "https://openapi.opinion.trade/openapi"
    OPINION_API_KEY: str = ""
    OPINION_OPENAPI_KEY: str = ""  # older deployments used this name
    API_KEY: str = ""
    OPINION_API_KEY_HEADER: str = "apikey"
    HTTP_TIMEOUT_SECONDS: float = 30.0

    # --- PAGING ---
    POSITIONS_DEFAULT_LIMIT: int = 50
    TRADES_DEFAULT_LIMIT: int = 100
    MAX_PAGE_LIMIT: int = 200

    # --- DASHBOARD ---
    DASHBOARD_API_URL: str = "http://localhost:8000/api"
    ENRICHMENT_MAX_LOOKUPS: int = 20
    ENRICHMENT_CONCURRENCY: int = 1
    VOLUME_WINDOW_DAYS: int = 14
    CATEGORY_TOP_N: int = 5
    RECENT_TRADES_ROWS: int = 30

    # --- ENV / LOGGING ---
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    # --- API SERVER ---
    API_HOST: str = "0.0.0.0"
    API_PORT: int = 8000

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False
        extra = "allow"  # allow unknown keys in .env for forward compatibility

    @property
    def resolved_api_key(self) -> str:
        """First configured key among OPINION_API_KEY, OPINION_OPENAPI_KEY, API_KEY."""
        for key in (self.OPINION_API_KEY, self.OPINION_OPENAPI_KEY, self.API_KEY):
            if key and key.strip():
                return key.strip()
        return ""

    def validate_upstream_config(self) -> Dict[str, Any]:
        """
        Validate upstream configuration.

        Returns:
            Dictionary with:
            - valid: Whether configuration is usable
            - errors: List of error messages
            - warnings: List of warning messages
        """
        errors = []
        warnings = []

        if not self.OPINION_API_URL.startswith(("http://", "https://")):
            errors.append(f"OPINION_API_URL must be an http(s) URL: {self.OPINION_API_URL}")

        if not self.resolved_api_key:
            warnings.append("No Opinion API key configured - upstream may reject requests")

        if self.ENRICHMENT_CONCURRENCY < 1:
            errors.append("ENRICHMENT_CONCURRENCY must be at least 1")

        if self.VOLUME_WINDOW_DAYS < 1:
            errors.append("VOLUME_WINDOW_DAYS must be at least 1")

        return {
            "valid": len(errors) == 0,
            "errors": errors,
            "warnings": warnings,
        }


# Global settings instance
settings = Settings()

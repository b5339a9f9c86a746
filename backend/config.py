"""
Configuration management for the Baroque Print API.

Loads settings from .env via pydantic-settings.

Security notes:
    - Secrets (Stripe keys, Prodigi key) are only ever presence-checked
      when reported or logged, never echoed.
    - validate_production_settings() refuses to start a production
      deployment without its secrets or with wildcard CORS.
"""
import logging
from typing import List, Literal, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # ── Stripe (payment processor) ──────────────────────────────────
    stripe_secret_key: str = ""
    stripe_webhook_secret: str = ""
    stripe_webhook_tolerance: int = 300  # seconds
    currency: str = "usd"
    product_description: str = "The Mirror's Echo - AI Portrait Print"
    product_image_url: str = "https://baroque-mirror-production.up.railway.app/og-image.jpg"

    # ── Prodigi (print-on-demand fulfillment) ───────────────────────
    prodigi_api_key: str = ""
    prodigi_api_url: str = "https://api.prodigi.com/v4.0"  # sandbox: https://api.sandbox.prodigi.com/v4.0
    prodigi_shipping_method: str = "Standard"

    # ── Image staging ───────────────────────────────────────────────
    # upload: push to the asset host before checkout (asset id in metadata)
    # url:    client supplies a public URL (embedded as-is)
    # buffer: hold decoded bytes in memory until the order is fulfilled
    image_strategy: Literal["upload", "url", "buffer"] = "upload"
    asset_host_url: str = ""  # defaults to <prodigi_api_url>/assets
    asset_host_api_key: str = ""  # defaults to prodigi_api_key
    image_ttl_seconds: int = 24 * 60 * 60

    # ── Fulfillment ─────────────────────────────────────────────────
    dedupe_completed_sessions: bool = False
    processed_session_ttl_seconds: int = 7 * 24 * 60 * 60

    # ── Outbound HTTP ───────────────────────────────────────────────
    http_timeout_seconds: float = 30.0
    asset_upload_timeout_seconds: float = 60.0

    # ── Application ─────────────────────────────────────────────────
    environment: str = "development"
    log_level: str = "INFO"
    port: int = 3001

    # ── CORS ────────────────────────────────────────────────────────
    cors_origins: str = (
        "https://baroque-mirror-production.up.railway.app,"
        "https://baroque-dance-production.up.railway.app,"
        "http://localhost:3000"
    )
    cors_origin_regex: Optional[str] = r"file://.*"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # allow unknown .env keys without crashing
    )

    @property
    def cors_origins_list(self) -> List[str]:
        """Parse CORS origins from comma-separated string."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    @property
    def resolved_asset_host_url(self) -> str:
        return self.asset_host_url or f"{self.prodigi_api_url.rstrip('/')}/assets"

    @property
    def resolved_asset_host_api_key(self) -> str:
        return self.asset_host_api_key or self.prodigi_api_key

    def configured_credentials(self) -> dict:
        """Which external credentials are present (booleans only, never values)."""
        return {
            "stripe": bool(self.stripe_secret_key),
            "webhook": bool(self.stripe_webhook_secret),
            "prodigi": bool(self.prodigi_api_key),
            "assetHost": bool(self.resolved_asset_host_api_key),
        }

    def validate_production_settings(self):
        """
        Validate settings for production safety.

        Called during app startup. Production refuses to boot without its
        secrets; other environments only warn.
        """
        problems = []
        if not self.stripe_secret_key:
            problems.append("STRIPE_SECRET_KEY is not set")
        if not self.stripe_webhook_secret:
            problems.append("STRIPE_WEBHOOK_SECRET is not set (webhooks will be rejected)")
        if not self.prodigi_api_key:
            problems.append("PRODIGI_API_KEY is not set")
        if "*" in self.cors_origins:
            problems.append("CORS_ORIGINS contains '*' (open access)")

        if self.environment == "production":
            if problems:
                raise ValueError(
                    "Refusing to start in production: " + "; ".join(problems)
                )
            logger.info("✅ Production settings validated")
        else:
            for problem in problems:
                logger.warning(f"⚠️  {problem}")


# Global settings instance
settings = Settings()

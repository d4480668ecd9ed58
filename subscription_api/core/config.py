from pydantic import BaseModel
import os
import logging
from typing import List

logger = logging.getLogger(__name__)


def _env_bool(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() == "true"


class Settings(BaseModel):
    # Environment and Debug Settings
    ENV: str = os.getenv("ENV", "dev")  # dev, staging, prod
    PORT: int = int(os.getenv("PORT", "8080"))
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./sessions.db")

    # Identity oracle (bearer token verification)
    IDENTITY_PROVIDER: str = os.getenv("IDENTITY_PROVIDER", "stub")  # jwt, stub
    JWT_SECRET: str = os.getenv("JWT_SECRET", "dev-secret-change-me")
    JWT_ALGORITHM: str = os.getenv("JWT_ALGORITHM", "HS256")
    JWT_AUDIENCE: str = os.getenv("JWT_AUDIENCE", "")
    JWT_ISSUER: str = os.getenv("JWT_ISSUER", "")

    # Upstream telecom providers
    MOBITEL_BASE_URL: str = os.getenv("MOBITEL_BASE_URL", "https://api.mspace.lk")
    MOBITEL_APP_ID: str = os.getenv("MOBITEL_APP_ID", "")
    MOBITEL_APP_PASSWORD: str = os.getenv("MOBITEL_APP_PASSWORD", "")
    DIALOG_BASE_URL: str = os.getenv("DIALOG_BASE_URL", "")  # no public default; unset means not configured
    DIALOG_APP_ID: str = os.getenv("DIALOG_APP_ID", "")
    DIALOG_APP_PASSWORD: str = os.getenv("DIALOG_APP_PASSWORD", "")
    UPSTREAM_TIMEOUT_SECONDS: float = float(os.getenv("UPSTREAM_TIMEOUT_SECONDS", "15"))

    # Whitelist bypass for test subscribers
    ENABLE_WHITELIST: bool = _env_bool("ENABLE_WHITELIST")
    WHITELISTED_SUBSCRIBER_IDS: str = os.getenv("WHITELISTED_SUBSCRIBER_IDS", "")

    # Identity persistence retry after a successful OTP verify
    IDENTITY_SAVE_MAX_ATTEMPTS: int = int(os.getenv("IDENTITY_SAVE_MAX_ATTEMPTS", "5"))
    IDENTITY_SAVE_BACKOFF_SECONDS: float = float(os.getenv("IDENTITY_SAVE_BACKOFF_SECONDS", "0"))

    # Per-IP rate limiting
    RATE_LIMIT_ENABLED: bool = _env_bool("RATE_LIMIT_ENABLED", "true")
    RATE_LIMIT_MAX_REQUESTS: int = int(os.getenv("RATE_LIMIT_MAX_REQUESTS", "100"))
    RATE_LIMIT_WINDOW_SECONDS: int = int(os.getenv("RATE_LIMIT_WINDOW_SECONDS", "900"))  # 15 minutes

    @property
    def database_url(self) -> str:
        return self.DATABASE_URL

    @property
    def whitelisted_subscriber_ids(self) -> List[str]:
        """Split comma-separated whitelist into a list of canonical ids."""
        return [s.strip() for s in self.WHITELISTED_SUBSCRIBER_IDS.split(",") if s.strip()]

    @property
    def is_prod(self) -> bool:
        return self.ENV.lower() in {"prod", "production"}


settings = Settings()


def validate_config(config: Settings = settings):
    """Validate configuration at startup. Raises ValueError if invalid."""
    if config.is_prod:
        if config.IDENTITY_PROVIDER == "stub":
            error_msg = "IDENTITY_PROVIDER=stub is not allowed in production"
            logger.error(error_msg)
            raise ValueError(error_msg)

        if not config.JWT_SECRET or config.JWT_SECRET in ("dev-secret-change-me", "dev-secret"):
            error_msg = (
                "CRITICAL SECURITY ERROR: JWT_SECRET must be set and not use default value in production."
            )
            logger.error(error_msg)
            raise ValueError(error_msg)

        if config.ENABLE_WHITELIST:
            error_msg = "ENABLE_WHITELIST=true is not allowed in production"
            logger.error(error_msg)
            raise ValueError(error_msg)

        if config.database_url.startswith("sqlite"):
            error_msg = (
                "CRITICAL: SQLite database is not supported in production. "
                "Please use PostgreSQL."
            )
            logger.error(error_msg)
            raise ValueError(error_msg)

    # A provider without credentials still boots; calls routed to it fail per request
    for name, base_url, app_id, password in (
        ("MOBITEL", config.MOBITEL_BASE_URL, config.MOBITEL_APP_ID, config.MOBITEL_APP_PASSWORD),
        ("DIALOG", config.DIALOG_BASE_URL, config.DIALOG_APP_ID, config.DIALOG_APP_PASSWORD),
    ):
        if not base_url:
            logger.warning(f"{name}_BASE_URL not configured")
        if not app_id or not password:
            logger.warning(f"{name}_APP_ID or {name}_APP_PASSWORD not configured")

    if config.IDENTITY_SAVE_MAX_ATTEMPTS < 1:
        raise ValueError("IDENTITY_SAVE_MAX_ATTEMPTS must be at least 1")

    logger.info("Configuration validation complete")
    logger.info(f"Environment: {config.ENV}")
    logger.info(f"Identity provider: {config.IDENTITY_PROVIDER}")
    if config.ENABLE_WHITELIST:
        logger.info(f"Whitelist bypass enabled for {len(config.whitelisted_subscriber_ids)} subscriber(s)")

"""Centralized configuration — all env vars in one place."""

import os
from dataclasses import dataclass

# Date ranges (days) offered by the admin settings page.
ALLOWED_DATE_RANGES = (30, 90, 180, 365)
DEFAULT_DATE_RANGE = 30


def _flag(name: str) -> bool:
    return os.getenv(name, "").strip().lower() in ("1", "true", "yes", "on")


def _date_range(raw: str | None) -> int:
    try:
        days = int(raw) if raw else DEFAULT_DATE_RANGE
    except ValueError:
        return DEFAULT_DATE_RANGE
    return days if days in ALLOWED_DATE_RANGES else DEFAULT_DATE_RANGE


@dataclass(frozen=True)
class ServiceConfig:
    """Everything SearchConsoleService needs, passed in at construction."""

    selected_property: str | None = None
    site_url: str | None = None
    date_range: int = DEFAULT_DATE_RANGE
    cache_ttl_seconds: int = 72 * 60 * 60
    error_ttl_seconds: int = 5 * 60
    row_limit: int = 10
    show_extra_columns: bool = False
    combine_clicks_impressions: bool = False


class Settings:
    """Application settings loaded from environment variables."""

    def __init__(self):
        self.cors_origins: list[str] = os.getenv("CORS_ORIGINS", "*").split(",")
        self.git_sha: str = os.getenv("GIT_SHA", "unknown")
        self.environment: str = os.getenv("ENVIRONMENT", "local")

        # Google service account (file path wins over inline JSON)
        self.service_account_key_path: str | None = os.getenv("GSCD_SERVICE_ACCOUNT_KEY_PATH")
        self.service_account_key: str | None = os.getenv("GSCD_SERVICE_ACCOUNT_KEY")

        # Site / property
        self.site_url: str | None = os.getenv("GSCD_SITE_URL")
        self.selected_property: str | None = os.getenv("GSCD_SELECTED_PROPERTY")
        self.date_range: int = _date_range(os.getenv("GSCD_DATE_RANGE"))

        # Display
        self.show_extra_columns: bool = _flag("GSCD_SHOW_EXTRA_COLUMNS")
        self.combine_clicks_impressions: bool = _flag("GSCD_COMBINE_CLICKS_IMPRESSIONS")

        # Cache / upstream
        self.cache_ttl_seconds: int = int(os.getenv("GSCD_CACHE_TTL_SECONDS", str(72 * 60 * 60)))
        self.error_ttl_seconds: int = int(os.getenv("GSCD_ERROR_TTL_SECONDS", "300"))
        self.row_limit: int = int(os.getenv("GSCD_ROW_LIMIT", "10"))
        self.http_timeout: float = float(os.getenv("GSCD_HTTP_TIMEOUT", "30"))

        # Debug log file; disabled when unset
        self.debug_log_path: str | None = os.getenv("GSCD_DEBUG_LOG_PATH")

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    def service_config(self) -> ServiceConfig:
        return ServiceConfig(
            selected_property=self.selected_property,
            site_url=self.site_url,
            date_range=self.date_range,
            cache_ttl_seconds=self.cache_ttl_seconds,
            error_ttl_seconds=self.error_ttl_seconds,
            row_limit=self.row_limit,
            show_extra_columns=self.show_extra_columns,
            combine_clicks_impressions=self.combine_clicks_impressions,
        )

    def validate(self) -> list[str]:
        """Return list of missing env vars needed to show Search Console data."""
        missing = []
        if not (self.service_account_key_path or self.service_account_key):
            missing.append("GSCD_SERVICE_ACCOUNT_KEY_PATH or GSCD_SERVICE_ACCOUNT_KEY")
        missing += [var for var in ("GSCD_SITE_URL", "GSCD_SELECTED_PROPERTY") if not getattr(self, _attr_for(var))]
        return missing


settings = Settings()


def _attr_for(env_var: str) -> str:
    """Map env var name to Settings attribute name."""
    mapping = {
        "GSCD_SITE_URL": "site_url",
        "GSCD_SELECTED_PROPERTY": "selected_property",
    }
    return mapping.get(env_var, env_var.lower())

"""
sitebridge Configuration
"""
from __future__ import annotations
from typing import Optional
from pathlib import Path
from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application Configuration
    app_name: str = "sitebridge"
    debug: bool = True

    # Server Configuration
    host: str = "0.0.0.0"
    port: int = 8000

    # Site Configuration
    # The main domain hosts the central (authentication) routes and never
    # receives SSO beacons, even when a site is also served from it
    main_domain: str = "localhost"
    model_repository: str = "sitebridge.services.repository:ConfigSiteRepository"
    sites_config: Path = Path("sites/config.yaml")

    # Python package holding optional `main` and `global` route modules
    routes_package: Optional[str] = None

    # Storage Configuration
    # Each site reads its assets from assets_path/<site slug>
    assets_path: Path = Path("sites/assets")
    default_storage: str = "local"

    # Session Configuration
    secret_key: str = "change-me-in-production"
    session_cookie: str = "sitebridge_session"
    session_ttl_seconds: int = 3600  # 1 hour

    # Cross-domain session bridge
    sso_query_param: str = "s_code"
    beacon_path: str = "/_sitebridge/beacon.gif"
    url_default_prefix: str = "__site_"

    # Logging
    log_level: str = "INFO"
    log_json: bool = False

    class Config:
        env_prefix = "SITEBRIDGE_"
        env_file = ".env"
        env_file_encoding = "utf-8"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()

"""Application configuration via environment variables.

Uses pydantic-settings to load config from env vars with SEONA_ prefix.
No config files — just env vars (12-factor app style).

Learn: The only thing this service persists for authentication is the
site identifier (in the options table). Everything here is
non-secret deployment wiring: where the key authority lives, how long
to wait for it, where media goes.
"""

from pydantic import model_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """All app configuration. Set via SEONA_* env vars."""

    # Database
    database_url: str = "sqlite+aiosqlite:///./seona.db"

    # Route namespace (also the ownership tag meta key)
    namespace: str = "seona"

    # Remote key authority
    key_endpoint: str = "https://seonaapi.usestyle.ai/api/keys/wordpress"
    key_fetch_timeout_seconds: float = 10.0
    key_cache_ttl_seconds: int = 0  # 0 = fetch a fresh key on every request

    # Site
    site_url: str = "http://localhost:8000"
    media_dir: str = "./media"

    # Behaviour
    auto_activate: bool = True  # generate the identifier on startup
    strict_update_ownership: bool = True  # updates by id require the tag

    # Server
    environment: str = "development"
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 8000

    model_config = {"env_prefix": "SEONA_"}

    @model_validator(mode="after")
    def validate_production_settings(self):
        """Refuse to fetch verification keys over plain HTTP outside development."""
        if (
            self.environment != "development"
            and not self.key_endpoint.startswith("https://")
        ):
            raise ValueError(
                "SEONA_KEY_ENDPOINT must use https:// in "
                "non-development environments."
            )
        return self

    @property
    def identifier_option(self) -> str:
        return f"{self.namespace}_identifier"

    @property
    def site_verification_token_option(self) -> str:
        return f"{self.namespace}_site_verification_token"

    @property
    def media_url(self) -> str:
        return f"{self.site_url.rstrip('/')}/media"


# Singleton — import this everywhere
settings = Settings()

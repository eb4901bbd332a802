"""
CivicMap Backend — Application Configuration
=============================================

What:  Centralized configuration management using Pydantic Settings.
How:   Pydantic Settings reads from environment variables (or .env file),
       validates types/ranges, and provides a singleton `settings` object.
Who:   Imported by every module that needs configuration values.
When:  Loaded once at module import time; store settings re-checked at startup.
"""

from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

# Fields the bulletin and location mappers read; the store key must not shadow them
MAPPED_DOCUMENT_FIELDS = {"id", "title", "content", "name", "latitude", "longitude", "road", "isValid"}


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings have development defaults matching the original deployment
    (a local MongoDB holding the `announcement_db` database).
    """

    # ── Document Store ────────────────────────────────────────────────────
    mongodb_url: str = Field(
        default="mongodb://localhost:27017",
        description="MongoDB connection string",
    )
    mongodb_database: str = Field(default="announcement_db")

    bulletins_collection: str = Field(default="bulletins", min_length=1)
    locations_collection: str = Field(default="locations", min_length=1)
    parking_collection: str = Field(default="parklocations", min_length=1)

    # What: Name of the storage primary key projected away from bulletins/locations
    # Older deployments stored a custom key instead of Mongo's `_id`
    store_key_field: str = Field(default="_id", min_length=1)

    # What: How long the driver waits to find a usable server before failing a query
    store_server_selection_timeout_ms: int = Field(default=5000, ge=100, le=120_000)

    # What: Startup-only connectivity check (ping) retry budget
    # Requests are never retried; a store outage surfaces as a 500 immediately.
    store_connect_attempts: int = Field(default=3, ge=1, le=10)
    store_connect_min_wait: int = Field(default=1, ge=0, le=30)
    store_connect_max_wait: int = Field(default=5, ge=1, le=120)

    # ── Welcome Message ───────────────────────────────────────────────────
    # Relative paths resolve against the process working directory
    welcome_file_path: str = Field(default="welcome.txt")

    # ── Parking Space Response Shape ──────────────────────────────────────
    # Schema-version-optional fields; when enabled they are emitted only if stored
    parking_include_park_type: bool = Field(default=True)
    parking_include_valid: bool = Field(default=True)

    # ── HTTP ──────────────────────────────────────────────────────────────
    # The Vue frontend of the original deployment called /api/welcome/...
    api_prefix: str = Field(default="")

    @field_validator("api_prefix")
    @classmethod
    def validate_api_prefix(cls, v: str) -> str:
        """Normalizes the prefix to '' or '/segment' without a trailing slash."""
        v = v.strip().rstrip("/")
        if v and not v.startswith("/"):
            raise ValueError(f"Invalid api_prefix '{v}'. It must start with '/'.")
        return v

    # Comma-separated; "*" allows any origin (the original policy)
    cors_origins: str = Field(default="*")

    @property
    def cors_origins_list(self) -> List[str]:
        """Splits comma-separated CORS origins into a list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    # Comma-separated paths left out of the access log (probes, API docs)
    access_log_skip_paths: str = Field(default="/health")

    @property
    def access_log_skip_paths_list(self) -> List[str]:
        return [path.strip() for path in self.access_log_skip_paths.split(",") if path.strip()]

    # ── Server ────────────────────────────────────────────────────────────
    backend_host: str = Field(default="0.0.0.0")
    backend_port: int = Field(default=8000, ge=1024, le=65535)

    # Valid: DEBUG, INFO, WARNING, ERROR, CRITICAL
    log_level: str = Field(default="INFO")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensures log level is a valid Python logging level name."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid_levels:
            raise ValueError(f"Invalid log_level '{v}'. Must be one of: {valid_levels}")
        return upper

    # ── Pydantic Settings Config ──────────────────────────────────────────
    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,  # MONGODB_URL and mongodb_url both work
    }

    def validate_store_settings(self) -> None:
        """
        What:  Cross-field checks on the document store configuration.
        When:  Called during app startup (lifespan).
        Raises ValueError listing every problem found.
        """
        errors = []
        names = [self.bulletins_collection, self.locations_collection, self.parking_collection]
        if len(set(names)) != len(names):
            errors.append(f"Collection names must be distinct, got {names}")
        if self.store_key_field in MAPPED_DOCUMENT_FIELDS:
            errors.append(
                f"STORE_KEY_FIELD '{self.store_key_field}' collides with a mapped "
                f"document field and would be projected away"
            )
        if self.store_connect_min_wait > self.store_connect_max_wait:
            errors.append("STORE_CONNECT_MIN_WAIT must not exceed STORE_CONNECT_MAX_WAIT")
        if errors:
            raise ValueError(
                "Configuration validation failed:\n" + "\n".join(f"  - {e}" for e in errors)
            )


# Singleton instance, imported throughout the application
settings = Settings()

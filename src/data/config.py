"""
Reelview Configuration Module
=============================

Centralized configuration management using environment variables.
Supports both .env files and system environment variables.

Environment Variables:
    YOUTUBE_API_KEY: YouTube Data API v3 key (YOUTUBE_DATA_API_KEY also accepted)
    YOUTUBE_MAX_RESULTS: Videos fetched per product (default: 10)
    YOUTUBE_REQUEST_TIMEOUT: Request timeout in seconds (default: 15)

    TRANSCRIPT_SERVER_URL: Transcript server base URL (default: http://localhost:4000)
    TRANSCRIPT_ENABLED: Fetch transcripts for each video (default: true)
    TRANSCRIPT_REQUEST_TIMEOUT: Request timeout in seconds (default: 20)

    DATABASE_HOST: PostgreSQL host (default: localhost)
    DATABASE_PORT: PostgreSQL port (default: 5432)
    DATABASE_NAME: Database name (default: reelview)
    DATABASE_USER: Database user (default: reelview_app)
    DATABASE_PASSWORD: Database password (default: empty)
    DATABASE_POOL_MIN: Minimum pool connections (default: 1)
    DATABASE_POOL_MAX: Maximum pool connections (default: 10)

    ANALYSIS_MAX_PROS: Pros kept per feature (default: 3)
    ANALYSIS_MAX_CONS: Cons kept per feature (default: 3)
    ANALYSIS_MAX_QUOTES: Quotes kept per feature (default: 2)

    LOG_LEVEL / LOG_FILE / LOG_JSON: Logging options
"""

import os
from dataclasses import dataclass, field
from typing import Optional
from pathlib import Path
from dotenv import load_dotenv


# Load environment variables from .env file if present
env_path = Path(__file__).parent.parent.parent / ".env"
if env_path.exists():
    load_dotenv(env_path)


def get_env(key: str, default: Optional[str] = None, required: bool = False) -> Optional[str]:
    """
    Get environment variable with optional default and required validation.

    Raises:
        ValueError: If required=True and variable is not set
    """
    value = os.getenv(key, default)
    if required and value is None:
        raise ValueError(f"Required environment variable '{key}' is not set")
    return value


def get_env_int(key: str, default: int) -> int:
    """Get environment variable as integer."""
    value = os.getenv(key)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        raise ValueError(f"Environment variable '{key}' must be an integer, got: {value}")


def get_env_float(key: str, default: float) -> float:
    """Get environment variable as float."""
    value = os.getenv(key)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        raise ValueError(f"Environment variable '{key}' must be a float, got: {value}")


def get_env_bool(key: str, default: bool) -> bool:
    """Get environment variable as boolean."""
    value = os.getenv(key)
    if value is None:
        return default
    return value.lower() in ("true", "1", "yes", "on")


@dataclass
class YouTubeConfig:
    """YouTube Data API configuration."""

    # Checked lazily by YouTubeClient so the API can start without it
    api_key: Optional[str] = field(
        default_factory=lambda: get_env("YOUTUBE_API_KEY") or get_env("YOUTUBE_DATA_API_KEY")
    )
    base_url: str = field(default_factory=lambda: get_env(
        "YOUTUBE_API_BASE_URL", "https://www.googleapis.com/youtube/v3"
    ))
    max_results: int = field(default_factory=lambda: get_env_int("YOUTUBE_MAX_RESULTS", 10))
    request_timeout: int = field(default_factory=lambda: get_env_int("YOUTUBE_REQUEST_TIMEOUT", 15))

    def __post_init__(self):
        if not 1 <= self.max_results <= 50:
            raise ValueError("max_results must be between 1 and 50")

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)


@dataclass
class TranscriptConfig:
    """Transcript server configuration."""

    server_url: str = field(default_factory=lambda: get_env(
        "TRANSCRIPT_SERVER_URL", "http://localhost:4000"
    ))
    enabled: bool = field(default_factory=lambda: get_env_bool("TRANSCRIPT_ENABLED", True))
    request_timeout: int = field(default_factory=lambda: get_env_int("TRANSCRIPT_REQUEST_TIMEOUT", 20))


@dataclass
class DatabaseConfig:
    """PostgreSQL database configuration."""

    host: str = field(default_factory=lambda: get_env("DATABASE_HOST", "localhost"))
    port: int = field(default_factory=lambda: get_env_int("DATABASE_PORT", 5432))
    name: str = field(default_factory=lambda: get_env("DATABASE_NAME", "reelview"))
    user: str = field(default_factory=lambda: get_env("DATABASE_USER", "reelview_app"))
    password: str = field(default_factory=lambda: get_env("DATABASE_PASSWORD", ""))

    # Connection pool settings
    pool_min_size: int = field(default_factory=lambda: get_env_int("DATABASE_POOL_MIN", 1))
    pool_max_size: int = field(default_factory=lambda: get_env_int("DATABASE_POOL_MAX", 10))

    connect_timeout: int = field(default_factory=lambda: get_env_int("DATABASE_CONNECT_TIMEOUT", 10))

    # SSL mode: disable, allow, prefer, require, verify-ca, verify-full
    ssl_mode: str = field(default_factory=lambda: get_env("DATABASE_SSL_MODE", "prefer"))

    @property
    def connection_dict(self) -> dict:
        """Connection parameters as dictionary for psycopg2."""
        return {
            "host": self.host,
            "port": self.port,
            "dbname": self.name,
            "user": self.user,
            "password": self.password,
            "sslmode": self.ssl_mode,
            "connect_timeout": self.connect_timeout,
        }

    def __post_init__(self):
        """Validate configuration."""
        if self.pool_min_size > self.pool_max_size:
            raise ValueError("pool_min_size cannot exceed pool_max_size")


@dataclass
class AnalysisConfig:
    """Feature aggregation caps."""

    max_pros: int = field(default_factory=lambda: get_env_int("ANALYSIS_MAX_PROS", 3))
    max_cons: int = field(default_factory=lambda: get_env_int("ANALYSIS_MAX_CONS", 3))
    max_quotes: int = field(default_factory=lambda: get_env_int("ANALYSIS_MAX_QUOTES", 2))

    def __post_init__(self):
        if min(self.max_pros, self.max_cons, self.max_quotes) < 0:
            raise ValueError("analysis caps cannot be negative")


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = field(default_factory=lambda: get_env("LOG_LEVEL", "INFO"))
    # Empty LOG_FILE means console only
    log_file: Optional[str] = field(default_factory=lambda: get_env("LOG_FILE") or None)
    max_bytes: int = field(default_factory=lambda: get_env_int("LOG_MAX_BYTES", 10 * 1024 * 1024))
    backup_count: int = field(default_factory=lambda: get_env_int("LOG_BACKUP_COUNT", 5))

    # Structured logging
    json_logs: bool = field(default_factory=lambda: get_env_bool("LOG_JSON", False))


@dataclass
class Settings:
    """Main application settings container."""

    youtube: YouTubeConfig = field(default_factory=YouTubeConfig)
    transcript: TranscriptConfig = field(default_factory=TranscriptConfig)
    database: DatabaseConfig = field(default_factory=DatabaseConfig)
    analysis: AnalysisConfig = field(default_factory=AnalysisConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    # Application metadata
    app_name: str = "reelview"
    app_version: str = "0.1.0"
    environment: str = field(default_factory=lambda: get_env("ENVIRONMENT", "development"))

    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment.lower() in ("production", "prod")


def load_settings() -> Settings:
    """
    Load and validate all application settings.

    Raises:
        ValueError: If configuration is invalid
    """
    return Settings()


# Global settings instance (lazy-loaded)
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance (singleton pattern)."""
    global _settings
    if _settings is None:
        _settings = load_settings()
    return _settings


def reset_settings():
    """Drop the cached settings so the next get_settings() re-reads the environment."""
    global _settings
    _settings = None

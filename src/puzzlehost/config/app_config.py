"""Application configuration loader.

Loads centralized configuration from config/puzzlehost.yaml, falling back
to built-in defaults when the file is missing. Variables in a .env file at
the project root are added to the environment first; variables already set
in the environment keep their value.

Usage:
    from puzzlehost.config.app_config import load_app_config

    config = load_app_config()
    port = config.server.port
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import structlog
import yaml
from dotenv import load_dotenv

logger = structlog.get_logger(__name__)

# Config file path (relative to project root)
CONFIG_FILE = Path("config/puzzlehost.yaml")

# Optional KEY=value file, e.g. DB_CONNECTION=sqlite:///db/puzzlehost.db
ENV_FILE = Path(".env")

# Environment variable that overrides database.connection
DB_CONNECTION_ENV = "DB_CONNECTION"


@dataclass
class ServerConfig:
    """Where the HTTP server listens."""

    host: str = "127.0.0.1"
    port: int = 8888


@dataclass
class DatabaseConfig:
    """Database connection settings."""

    connection: str = "sqlite:///db/puzzlehost.db"

    def resolve_connection(self) -> str:
        """Get connection string, preferring the DB_CONNECTION env var."""
        return os.environ.get(DB_CONNECTION_ENV) or self.connection


@dataclass
class CorsConfig:
    """CORS headers sent to browser clients."""

    allow_origins: list[str] = field(default_factory=lambda: ["*"])
    allow_methods: list[str] = field(
        default_factory=lambda: ["GET", "PUT", "POST", "DELETE", "OPTIONS"]
    )
    allow_headers: list[str] = field(
        default_factory=lambda: ["Origin", "Content-Type", "Accept"]
    )


@dataclass
class AuthConfig:
    """Settings for the default authorization middleware."""

    user_header: str = "X-User-Id"
    default_user: str | None = "123456789"


@dataclass
class AppConfig:
    """Application-wide configuration."""

    server: ServerConfig = field(default_factory=ServerConfig)
    database: DatabaseConfig = field(default_factory=DatabaseConfig)
    cors: CorsConfig = field(default_factory=CorsConfig)
    auth: AuthConfig = field(default_factory=AuthConfig)


# Module-level cache
_cached_config: AppConfig | None = None


def _parse_config(data: dict[str, Any]) -> AppConfig:
    """Parse configuration dictionary into AppConfig object."""
    defaults = AppConfig()

    server_data = data.get("server") or {}
    server = ServerConfig(
        host=server_data.get("host", defaults.server.host),
        port=int(server_data.get("port", defaults.server.port)),
    )

    db_data = data.get("database") or {}
    database = DatabaseConfig(
        connection=db_data.get("connection", defaults.database.connection),
    )

    cors_data = data.get("cors") or {}
    cors = CorsConfig(
        allow_origins=list(cors_data.get("allow_origins", defaults.cors.allow_origins)),
        allow_methods=list(cors_data.get("allow_methods", defaults.cors.allow_methods)),
        allow_headers=list(cors_data.get("allow_headers", defaults.cors.allow_headers)),
    )

    auth_data = data.get("auth") or {}
    auth = AuthConfig(
        user_header=auth_data.get("user_header", defaults.auth.user_header),
        default_user=auth_data.get("default_user", defaults.auth.default_user),
    )

    return AppConfig(server=server, database=database, cors=cors, auth=auth)


def load_app_config(force_reload: bool = False) -> AppConfig:
    """Load application config.

    Args:
        force_reload: If True, ignore cached config and reload from file.

    Returns:
        AppConfig object with all settings.
    """
    global _cached_config

    if _cached_config is not None and not force_reload:
        return _cached_config

    if ENV_FILE.exists():
        logger.debug("loading_env_file", source=str(ENV_FILE))
        load_dotenv(ENV_FILE, override=False)

    data: dict[str, Any]

    if CONFIG_FILE.exists():
        logger.debug("loading_app_config", source=str(CONFIG_FILE))
        data = yaml.safe_load(CONFIG_FILE.read_text(encoding="utf-8")) or {}
    else:
        logger.info("using_default_config")
        data = {}

    _cached_config = _parse_config(data)
    return _cached_config


def clear_config_cache() -> None:
    """Clear the configuration cache.

    Useful for testing or when config is modified at runtime.
    """
    global _cached_config
    _cached_config = None

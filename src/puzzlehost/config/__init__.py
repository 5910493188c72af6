"""Configuration package for puzzlehost."""

from puzzlehost.config.app_config import (
    AppConfig,
    AuthConfig,
    CorsConfig,
    DatabaseConfig,
    ServerConfig,
    clear_config_cache,
    load_app_config,
)

__all__ = [
    "AppConfig",
    "AuthConfig",
    "CorsConfig",
    "DatabaseConfig",
    "ServerConfig",
    "clear_config_cache",
    "load_app_config",
]

"""
Configuration management for smartinv.

This module loads the upstream API, listener, route and locale settings from
TOML files. The packaged `defaults.toml` is used unless another path is given.
"""

from __future__ import annotations

import logging
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from smartinv.core.i18n import DEFAULT_LOCALE
from smartinv.core.routing import DEFAULT_LISTING_PATH, DEFAULT_RESOURCE_ROOT, RoutePaths

logger = logging.getLogger(__name__)

# Path to the config directory
CONFIG_DIR = Path(__file__).parent


@dataclass
class ApiConfig:
    """Where and how to reach the inventories API."""

    base_url: str = "http://localhost:8013"
    token: str | None = None
    timeout: float = 30.0
    verify_ssl: bool = True


@dataclass
class ServerConfig:
    """HTTP listener settings."""

    host: str = "0.0.0.0"
    port: int = 9010
    session_cookie: str = "smartinv_session"
    page_idle_timeout: float = 1800.0
    prune_interval: float = 60.0


@dataclass
class RouteConfig:
    """URL layout of the detail page."""

    resource_root: str = DEFAULT_RESOURCE_ROOT
    listing_path: str = DEFAULT_LISTING_PATH

    def to_paths(self) -> RoutePaths:
        return RoutePaths(resource_root=self.resource_root, listing_path=self.listing_path)


@dataclass
class I18nConfig:
    default_locale: str = DEFAULT_LOCALE


@dataclass
class AppConfig:
    """Loaded application configuration."""

    api: ApiConfig = field(default_factory=ApiConfig)
    server: ServerConfig = field(default_factory=ServerConfig)
    routes: RouteConfig = field(default_factory=RouteConfig)
    i18n: I18nConfig = field(default_factory=I18nConfig)


def _parse_api(data: dict[str, Any]) -> ApiConfig:
    defaults = ApiConfig()
    return ApiConfig(
        base_url=str(data.get("base_url", defaults.base_url)),
        token=data.get("token") or None,
        timeout=float(data.get("timeout", defaults.timeout)),
        verify_ssl=bool(data.get("verify_ssl", defaults.verify_ssl)),
    )


def _parse_server(data: dict[str, Any]) -> ServerConfig:
    defaults = ServerConfig()
    return ServerConfig(
        host=str(data.get("host", defaults.host)),
        port=int(data.get("port", defaults.port)),
        session_cookie=str(data.get("session_cookie", defaults.session_cookie)),
        page_idle_timeout=float(data.get("page_idle_timeout", defaults.page_idle_timeout)),
        prune_interval=float(data.get("prune_interval", defaults.prune_interval)),
    )


def _parse_routes(data: dict[str, Any]) -> RouteConfig:
    return RouteConfig(
        resource_root=str(data.get("resource_root", DEFAULT_RESOURCE_ROOT)),
        listing_path=str(data.get("listing_path", DEFAULT_LISTING_PATH)),
    )


def load_config(config_path: Path | None = None) -> AppConfig:
    """
    Load configuration from a TOML file.

    Args:
        config_path: Path to a config file. If None, uses the packaged defaults.

    Returns:
        Loaded AppConfig instance. Missing sections or keys keep their defaults.
    """
    if config_path is None:
        config_path = CONFIG_DIR / "defaults.toml"

    logger.debug("Loading config from %s", config_path)

    with config_path.open("rb") as f:
        data = tomllib.load(f)

    return AppConfig(
        api=_parse_api(data.get("api", {})),
        server=_parse_server(data.get("server", {})),
        routes=_parse_routes(data.get("routes", {})),
        i18n=I18nConfig(default_locale=str(data.get("i18n", {}).get("default_locale", DEFAULT_LOCALE))),
    )


# Global singleton instance (lazy loaded)
_config: AppConfig | None = None


def get_config() -> AppConfig:
    """
    Get the global configuration (lazy loaded singleton).

    Returns:
        The AppConfig instance.
    """
    global _config

    if _config is None:
        _config = load_config()

    return _config


def reload_config(config_path: Path | None = None) -> AppConfig:
    """
    Force reload of the configuration.

    Returns:
        The newly loaded AppConfig instance.
    """
    global _config
    _config = load_config(config_path)
    return _config

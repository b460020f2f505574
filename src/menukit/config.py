"""Configuration management for menukit.

Supports TOML configuration format with auto-discovery.

Example::

    [server]
    port = 8080

    [routes]
    base_url = "https://example.com"

    [routes.patterns]
    home = "/"
    team = "/about/team"
    user_show = "/users/{id}"

    [menus.main.".defaults"]
    visible_if_disabled = false

    [menus.main.home]
    title = "Home"
"""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

CONFIG_FILENAME = "menukit.toml"


@dataclass
class ServerConfig:
    """Server configuration."""

    host: str = "127.0.0.1"
    port: int = 8080


@dataclass
class RoutesConfig:
    """Route table used for URL generation outside a host application."""

    base_url: str = ""
    patterns: dict[str, str] = field(default_factory=dict)


@dataclass
class SecurityConfig:
    """Roles granted by the static request context."""

    granted_roles: list[str] = field(default_factory=list)


@dataclass
class Config:
    """Application configuration."""

    server: ServerConfig
    routes: RoutesConfig
    security: SecurityConfig
    item_kinds: dict[str, str] = field(default_factory=dict)
    sources: dict[str, list[dict[str, Any]]] = field(default_factory=dict)
    menus: dict[str, dict[str, Any]] = field(default_factory=dict)
    config_path: Path | None = None

    @classmethod
    def load(cls, config_path: Path | None = None) -> Config:
        """Load configuration from file.

        If config_path is provided, loads from that file.
        Otherwise, searches for menukit.toml in current directory and parents.

        Args:
            config_path: Optional explicit path to config file

        Returns:
            Config instance with defaults for missing sections

        Raises:
            FileNotFoundError: If explicit config_path doesn't exist
            ValueError: If configuration is invalid
        """
        if config_path is not None:
            if not config_path.exists():
                raise FileNotFoundError(f"Configuration file not found: {config_path}")
            return cls._load_from_file(config_path)

        discovered_path = cls._discover_config()
        if discovered_path is None:
            return cls._default()

        return cls._load_from_file(discovered_path)

    @classmethod
    def _discover_config(cls) -> Path | None:
        """Search for config file in current directory and parents."""
        current = Path.cwd()
        while True:
            candidate = current / CONFIG_FILENAME
            if candidate.exists():
                return candidate
            parent = current.parent
            if parent == current:
                return None
            current = parent

    @classmethod
    def _default(cls) -> Config:
        return cls(
            server=ServerConfig(),
            routes=RoutesConfig(),
            security=SecurityConfig(),
        )

    @classmethod
    def _load_from_file(cls, path: Path) -> Config:
        """Load configuration from a specific file.

        Raises:
            ValueError: If configuration is invalid
        """
        with path.open("rb") as f:
            data = tomllib.load(f)

        return cls.from_dict(data, config_path=path)

    @classmethod
    def from_dict(cls, data: object, *, config_path: Path | None = None) -> Config:
        """Build configuration from already parsed data.

        Raises:
            ValueError: If configuration is invalid
        """
        if not isinstance(data, dict):
            raise ValueError("Configuration must be a dictionary")

        return cls(
            server=cls._parse_server(data.get("server")),
            routes=cls._parse_routes(data.get("routes")),
            security=cls._parse_security(data.get("security")),
            item_kinds=cls._parse_item_kinds(data.get("item_kinds")),
            sources=cls._parse_sources(data.get("sources")),
            menus=cls._parse_menus(data.get("menus")),
            config_path=config_path,
        )

    @classmethod
    def _parse_server(cls, data: object) -> ServerConfig:
        if data is None:
            return ServerConfig()

        if not isinstance(data, dict):
            raise ValueError("server section must be a dictionary")

        host = data.get("host", "127.0.0.1")
        if not isinstance(host, str):
            raise ValueError("server.host must be a string")

        port = data.get("port", 8080)
        if not isinstance(port, int) or isinstance(port, bool):
            raise ValueError("server.port must be an integer")

        return ServerConfig(host=host, port=port)

    @classmethod
    def _parse_routes(cls, data: object) -> RoutesConfig:
        if data is None:
            return RoutesConfig()

        if not isinstance(data, dict):
            raise ValueError("routes section must be a dictionary")

        base_url = data.get("base_url", "")
        if not isinstance(base_url, str):
            raise ValueError("routes.base_url must be a string")

        patterns_raw = data.get("patterns", {})
        if not isinstance(patterns_raw, dict):
            raise ValueError("routes.patterns must be a dictionary")
        patterns: dict[str, str] = {}
        for name, pattern in patterns_raw.items():
            if not isinstance(pattern, str):
                raise ValueError(f"routes.patterns.{name} must be a string")
            patterns[name] = pattern

        return RoutesConfig(base_url=base_url, patterns=patterns)

    @classmethod
    def _parse_security(cls, data: object) -> SecurityConfig:
        if data is None:
            return SecurityConfig()

        if not isinstance(data, dict):
            raise ValueError("security section must be a dictionary")

        roles_raw = data.get("granted_roles", [])
        if not isinstance(roles_raw, list):
            raise ValueError("security.granted_roles must be a list")
        for role in roles_raw:
            if not isinstance(role, str):
                raise ValueError("security.granted_roles items must be strings")

        return SecurityConfig(granted_roles=list(roles_raw))

    @classmethod
    def _parse_item_kinds(cls, data: object) -> dict[str, str]:
        if data is None:
            return {}

        if not isinstance(data, dict):
            raise ValueError("item_kinds section must be a dictionary")

        for name, path in data.items():
            if not isinstance(path, str):
                raise ValueError(f"item_kinds.{name} must be a string")

        return dict(data)

    @classmethod
    def _parse_sources(cls, data: object) -> dict[str, list[dict[str, Any]]]:
        if data is None:
            return {}

        if not isinstance(data, dict):
            raise ValueError("sources section must be a dictionary")

        sources: dict[str, list[dict[str, Any]]] = {}
        for name, section in data.items():
            if not isinstance(section, dict):
                raise ValueError(f"sources.{name} must be a dictionary")
            records = section.get("records", [])
            if not isinstance(records, list):
                raise ValueError(f"sources.{name}.records must be a list")
            for record in records:
                if not isinstance(record, dict):
                    raise ValueError(f"sources.{name}.records items must be tables")
            sources[name] = list(records)

        return sources

    @classmethod
    def _parse_menus(cls, data: object) -> dict[str, dict[str, Any]]:
        # Item options are validated when a menu is built.
        if data is None:
            return {}

        if not isinstance(data, dict):
            raise ValueError("menus section must be a dictionary")

        for name, definition in data.items():
            if not isinstance(definition, dict):
                raise ValueError(f"menus.{name} must be a dictionary")

        return dict(data)

    def with_overrides(
        self,
        *,
        host: str | None = None,
        port: int | None = None,
    ) -> Config:
        """Create a new Config with CLI overrides applied.

        Only non-None values override the existing config. The original
        Config is not modified.
        """
        server = self.server
        if host is not None or port is not None:
            server = replace(
                self.server,
                host=host if host is not None else self.server.host,
                port=port if port is not None else self.server.port,
            )

        return replace(self, server=server)

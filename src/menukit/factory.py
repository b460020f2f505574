"""Wiring from configuration to menu objects."""

from collections.abc import Mapping
from typing import Any

from menukit.config import Config
from menukit.context import RouteTable, StaticContext
from menukit.core.builder import MenuBuilder
from menukit.core.sources import StaticDataSource


def create_menu_builder(config: Config) -> MenuBuilder:
    """Create a builder for all menus in the configuration."""
    data_sources = {
        name: StaticDataSource(records) for name, records in config.sources.items()
    }
    return MenuBuilder(
        config.menus,
        item_kinds=config.item_kinds,
        data_sources=data_sources,
    )


def create_route_table(config: Config) -> RouteTable:
    return RouteTable(
        patterns=dict(config.routes.patterns),
        base_url=config.routes.base_url,
    )


def create_context(
    config: Config,
    route_name: str | None = None,
    variables: Mapping[str, Any] | None = None,
    roles: list[str] | None = None,
) -> StaticContext:
    """Create a request context for a given current route.

    Args:
        config: Application configuration
        route_name: Route treated as current
        variables: Request variables
        roles: Roles granted in addition to security.granted_roles
    """
    granted = set(config.security.granted_roles)
    granted.update(roles or [])
    return StaticContext(
        route_name=route_name,
        variables=dict(variables or {}),
        routes=create_route_table(config),
        granted_roles=frozenset(granted),
    )

"""Shared test fixtures."""

from collections.abc import Callable
from typing import Any

import pytest
from menukit.context import RouteTable, StaticContext

MakeContext = Callable[..., StaticContext]


@pytest.fixture
def routes() -> RouteTable:
    """Route table covering the routes used across tests."""
    return RouteTable(
        patterns={
            "home": "/",
            "about": "/about",
            "team": "/about/team",
            "contact": "/contact",
            "user_show": "/users/{id}",
            "user_list": "/users",
            "page": "/page",
        },
        base_url="https://example.com",
    )


@pytest.fixture
def make_context(routes: RouteTable) -> MakeContext:
    """Create a StaticContext for a current route.

    Keyword arguments become request variables; ``roles`` is the set of
    granted roles.
    """

    def factory(
        route_name: str | None = None,
        roles: tuple[str, ...] = (),
        **variables: Any,
    ) -> StaticContext:
        return StaticContext(
            route_name=route_name,
            variables=variables,
            routes=routes,
            granted_roles=frozenset(roles),
        )

    return factory


@pytest.fixture
def site_definition() -> dict[str, Any]:
    """Small site menu: home, about with team, contact."""
    return {
        "home": {"title": "Home"},
        "about": {
            "title": "About",
            "children": {
                "team": {"title": "Team"},
            },
        },
        "contact": {"title": "Contact"},
    }

"""Capability context consumed by menu items at query time.

Menu trees are request independent. Everything that depends on the live
request (current route, request variables, URL generation, permissions)
is reached through a ``RequestContext`` passed into each query.
"""

import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Protocol
from urllib.parse import unquote_plus, urlencode, urlsplit, urlunsplit

from menukit.errors import MissingRouteParameterError, UnknownRouteError

_PLACEHOLDER_RE = re.compile(r"\{(\w+)\}")


class RequestContext(Protocol):
    """Per-request capabilities supplied by the host application."""

    def current_route_name(self) -> str | None:
        """Return the route name of the active request."""
        ...

    def request_variable(self, name: str) -> Any:
        """Return a named request parameter, or None if absent."""
        ...

    def generate_url(
        self,
        route_name: str,
        params: Mapping[str, Any],
        absolute: bool = False,
    ) -> str:
        """Generate a URL for a route name and parameters."""
        ...

    def is_granted(self, role: str, subject: object | None = None) -> bool:
        """Check a permission. Must return False when nobody is logged in."""
        ...


def append_query(url: str, params: Mapping[str, Any]) -> str:
    """Merge params into the query string of url.

    Pairs already in the URL are kept as written, except those whose key is
    replaced by params. None values are skipped and the fragment is kept in
    place.

    Args:
        url: URL that may already carry a query string
        params: Parameters to merge

    Returns:
        URL with the merged query string
    """
    extra = {
        key: _query_value(value) for key, value in params.items() if value is not None
    }
    if not extra:
        return url

    parts = urlsplit(url)
    query = [
        pair
        for pair in parts.query.split("&")
        if pair and unquote_plus(pair.partition("=")[0]) not in extra
    ]
    query.append(urlencode(list(extra.items())))
    return urlunsplit(parts._replace(query="&".join(query)))


def _query_value(value: Any) -> str:
    if isinstance(value, bool):
        return "1" if value else "0"
    return str(value)


@dataclass
class RouteTable:
    """Route name to path pattern mapping.

    Patterns use ``{param}`` placeholders, e.g. ``/users/{id}``. Parameters
    that do not fill a placeholder end up in the query string.
    """

    patterns: dict[str, str] = field(default_factory=dict)
    base_url: str = ""

    def __contains__(self, route_name: object) -> bool:
        return route_name in self.patterns

    def generate(
        self,
        route_name: str,
        params: Mapping[str, Any],
        absolute: bool = False,
    ) -> str:
        """Build the URL for a route.

        Raises:
            UnknownRouteError: If the route is not in the table
            MissingRouteParameterError: If a placeholder has no value
        """
        pattern = self.patterns.get(route_name)
        if pattern is None:
            raise UnknownRouteError(route_name)

        remaining = dict(params)

        def substitute(match: re.Match[str]) -> str:
            name = match.group(1)
            value = remaining.pop(name, None)
            if value is None:
                raise MissingRouteParameterError(route_name, name)
            return str(value)

        path = _PLACEHOLDER_RE.sub(substitute, pattern)
        url = append_query(path, remaining)
        if absolute:
            return self.base_url.rstrip("/") + url
        return url


@dataclass
class StaticContext:
    """Request context built from plain values.

    Used by the CLI, the standalone preview server and tests. The current
    route and variables are fixed for the lifetime of the context.
    """

    route_name: str | None = None
    variables: dict[str, Any] = field(default_factory=dict)
    routes: RouteTable = field(default_factory=RouteTable)
    granted_roles: frozenset[str] = frozenset()

    def current_route_name(self) -> str | None:
        return self.route_name

    def request_variable(self, name: str) -> Any:
        if name == "_route":
            return self.route_name
        return self.variables.get(name)

    def generate_url(
        self,
        route_name: str,
        params: Mapping[str, Any],
        absolute: bool = False,
    ) -> str:
        return self.routes.generate(route_name, params, absolute)

    def is_granted(self, role: str, subject: object | None = None) -> bool:
        return role in self.granted_roles

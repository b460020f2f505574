"""Request context backed by a live aiohttp request."""

import re
from collections.abc import Callable, Mapping
from functools import cached_property
from typing import Any

from aiohttp import web

from menukit.errors import MissingRouteParameterError, UnknownRouteError

RoleChecker = Callable[[web.Request, str, object | None], bool]

_PLACEHOLDER_RE = re.compile(r"\{(\w+)\}")


class AiohttpRequestContext:
    """Adapt an aiohttp request to the menu request context.

    The current route is the name of the matched resource. Request
    variables come from the URL match info first, then the query string.
    URLs are generated through the application's named resources.
    Permission checks are delegated to role_checker; without one nothing
    is granted.
    """

    def __init__(
        self,
        request: web.Request,
        *,
        role_checker: RoleChecker | None = None,
    ) -> None:
        self._request = request
        self._role_checker = role_checker

    @cached_property
    def _route_name(self) -> str | None:
        return self._request.match_info.route.name

    def current_route_name(self) -> str | None:
        return self._route_name

    def request_variable(self, name: str) -> Any:
        if name == "_route":
            return self._route_name
        value = self._request.match_info.get(name)
        if value is not None:
            return value
        return self._request.query.get(name)

    def generate_url(
        self,
        route_name: str,
        params: Mapping[str, Any],
        absolute: bool = False,
    ) -> str:
        """Generate a URL for a named aiohttp resource.

        Raises:
            UnknownRouteError: If no resource has this name
            MissingRouteParameterError: If a path placeholder has no value
        """
        resource = self._request.app.router.named_resources().get(route_name)
        if resource is None:
            raise UnknownRouteError(route_name)

        info = resource.get_info()
        placeholders = _PLACEHOLDER_RE.findall(info.get("formatter", ""))
        remaining = {key: value for key, value in params.items() if value is not None}

        parts: dict[str, str] = {}
        for name in placeholders:
            if name not in remaining:
                raise MissingRouteParameterError(route_name, name)
            parts[name] = str(remaining.pop(name))

        url = resource.url_for(**parts)
        if remaining:
            url = url.update_query(
                {key: str(value) for key, value in remaining.items()}
            )
        if absolute:
            url = self._request.url.origin().join(url)
        return str(url)

    def is_granted(self, role: str, subject: object | None = None) -> bool:
        if self._role_checker is None:
            return False
        return bool(self._role_checker(self._request, role, subject))

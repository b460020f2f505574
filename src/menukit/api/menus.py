"""Menu API endpoints.

Serves resolved menu trees and breadcrumb trails. The ``route`` query
parameter selects the current route; every other query parameter is
exposed as a request variable.
"""

import logging

from aiohttp import web

from menukit.app_keys import builder_key, config_key
from menukit.context import StaticContext
from menukit.core.item import MenuItem
from menukit.errors import (
    MenuError,
    MenuNotFoundError,
    MissingRouteParameterError,
    UnknownRouteError,
)
from menukit.factory import create_context

logger = logging.getLogger(__name__)


def create_menu_routes() -> list[web.RouteDef]:
    return [
        web.get("/api/menus", list_menus),
        web.get("/api/menus/{name}", get_menu),
        web.get("/api/menus/{name}/breadcrumbs", get_breadcrumbs),
    ]


async def list_menus(request: web.Request) -> web.Response:
    builder = request.app[builder_key]
    return web.json_response({"menus": builder.menu_names})


async def get_menu(request: web.Request) -> web.Response:
    name = request.match_info["name"]
    context = _context_from_request(request)

    try:
        menu = request.app[builder_key].get_menu(name)
        data = menu.to_dict(context)
    except MenuError as e:
        return _error_response(name, e)

    return web.json_response(data)


async def get_breadcrumbs(request: web.Request) -> web.Response:
    name = request.match_info["name"]
    context = _context_from_request(request)

    try:
        menu = request.app[builder_key].get_menu(name)
        breadcrumbs = [
            _breadcrumb(item, context) for item in menu.get_breadcrumb_items(context)
        ]
    except MenuError as e:
        return _error_response(name, e)

    return web.json_response(
        {
            "name": name,
            "breadcrumbs": breadcrumbs,
            "current": breadcrumbs[-1] if breadcrumbs else None,
        }
    )


def _context_from_request(request: web.Request) -> StaticContext:
    variables = {key: value for key, value in request.query.items() if key != "route"}
    return create_context(
        request.app[config_key],
        route_name=request.query.get("route"),
        variables=variables,
    )


def _breadcrumb(item: MenuItem, context: StaticContext) -> dict[str, str | None]:
    return {
        "key": item.key,
        "title": item.title,
        "url": item.get_url(context) if item.is_enabled(context) else None,
    }


def _error_response(name: str, error: MenuError) -> web.Response:
    if isinstance(error, MenuNotFoundError):
        return web.json_response({"error": "Menu not found", "name": name}, status=404)
    if isinstance(error, UnknownRouteError):
        return web.json_response(
            {"error": "Unknown route", "name": name, "route": error.route_name},
            status=422,
        )
    if isinstance(error, MissingRouteParameterError):
        return web.json_response(
            {
                "error": "Missing route parameter",
                "name": name,
                "route": error.route_name,
                "parameter": error.parameter,
            },
            status=422,
        )
    logger.error(f"Failed to build menu {name!r}: {error}")
    return web.json_response({"error": str(error), "name": name}, status=500)

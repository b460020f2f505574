"""Tests for the aiohttp-backed request context."""

import pytest
from aiohttp import web
from aiohttp.test_utils import TestClient
from menukit.api import AiohttpRequestContext
from menukit.core.menu import Menu
from menukit.errors import MissingRouteParameterError, UnknownRouteError

MENU = Menu(
    {
        "home": {"title": "Home"},
        "users": {
            "title": "Users",
            "custom_route_name": "user_list",
            "children": {
                "user_show": {
                    "title": "Current user",
                    "add_request_variables": ["id"],
                },
            },
        },
        "admin": {"title": "Admin", "require_role": "ROLE_ADMIN"},
    }
)


def _granted(request: web.Request, role: str, subject: object | None) -> bool:
    return request.headers.get("X-Role") == role


async def describe(request: web.Request) -> web.Response:
    context = AiohttpRequestContext(request, role_checker=_granted)
    current = MENU.get_current_item(context)
    return web.json_response(
        {
            "route": context.current_route_name(),
            "id": context.request_variable("id"),
            "page": context.request_variable("page"),
            "current": current.key if current is not None else None,
            "breadcrumbs": [item.key for item in MENU.get_breadcrumb_items(context)],
            "admin_enabled": MENU.get_all_items()[2].is_enabled(context),
        }
    )


async def urls(request: web.Request) -> web.Response:
    context = AiohttpRequestContext(request)
    try:
        context.generate_url("missing", {})
    except UnknownRouteError as e:
        missing = str(e)
    try:
        context.generate_url("user_show", {})
    except MissingRouteParameterError as e:
        incomplete = str(e)
    return web.json_response(
        {
            "home": context.generate_url("home", {}),
            "user": context.generate_url(
                "user_show", {"id": 7, "tab": "posts", "skip": None}
            ),
            "absolute": context.generate_url("user_show", {"id": 7}, absolute=True),
            "admin_enabled": MENU.get_all_items()[2].is_enabled(context),
            "missing": missing,
            "incomplete": incomplete,
        }
    )


def _make_app() -> web.Application:
    app = web.Application()
    app.router.add_get("/", describe, name="home")
    app.router.add_get("/users", describe, name="user_list")
    app.router.add_get("/users/{id}", describe, name="user_show")
    app.router.add_get("/debug/urls", urls, name="urls")
    return app


@pytest.fixture
def client(aiohttp_client) -> TestClient:
    """Create test client with named routes."""
    return aiohttp_client(_make_app())


class TestAiohttpRequestContext:
    """Tests for AiohttpRequestContext."""

    @pytest.mark.asyncio
    async def test__route_name__from_matched_resource(self, client) -> None:
        test_client = await client
        response = await test_client.get("/users")

        data = await response.json()
        assert data["route"] == "user_list"
        assert data["current"] == "users"
        assert data["breadcrumbs"] == ["users"]

    @pytest.mark.asyncio
    async def test__variables__match_info_then_query(self, client) -> None:
        test_client = await client
        response = await test_client.get("/users/3", params={"id": "9", "page": "2"})

        data = await response.json()
        assert data["id"] == "3"
        assert data["page"] == "2"

    @pytest.mark.asyncio
    async def test__nested_current_item(self, client) -> None:
        test_client = await client
        response = await test_client.get("/users/3")

        data = await response.json()
        assert data["route"] == "user_show"
        assert data["breadcrumbs"] == ["users", "user_show"]

    @pytest.mark.asyncio
    async def test__role_checker__grants_role(self, client) -> None:
        test_client = await client
        response = await test_client.get("/", headers={"X-Role": "ROLE_ADMIN"})

        data = await response.json()
        assert data["admin_enabled"] is True

    @pytest.mark.asyncio
    async def test__role_checker__denies_role(self, client) -> None:
        test_client = await client
        response = await test_client.get("/")

        data = await response.json()
        assert data["admin_enabled"] is False

    @pytest.mark.asyncio
    async def test__generate_url(self, client) -> None:
        test_client = await client
        response = await test_client.get("/debug/urls")

        assert response.status == 200
        data = await response.json()
        assert data["home"] == "/"
        assert data["user"] == "/users/7?tab=posts"
        assert data["absolute"].endswith("/users/7")
        assert data["absolute"].startswith("http://")
        assert data["admin_enabled"] is False
        assert data["missing"] == "Unknown route: missing"
        assert data["incomplete"] == "Missing parameter id for route user_show"

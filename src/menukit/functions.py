"""Template functions.

Binds a builder and a request context into plain callables that can be
registered as globals with a templating engine.
"""

from collections.abc import Callable
from typing import Any

from menukit.context import RequestContext
from menukit.core.builder import MenuBuilder
from menukit.core.item import MenuItem


def menu_items(builder: MenuBuilder, menu_name: str = "default") -> list[MenuItem]:
    return builder.get_menu(menu_name).get_all_items()


def breadcrumb_items(
    builder: MenuBuilder,
    context: RequestContext,
    menu_name: str = "default",
) -> list[MenuItem]:
    return builder.get_menu(menu_name).get_breadcrumb_items(context)


def current_menu_item(
    builder: MenuBuilder,
    context: RequestContext,
    menu_name: str = "default",
) -> MenuItem | None:
    return builder.get_menu(menu_name).get_current_item(context)


def template_functions(
    builder: MenuBuilder,
    context: RequestContext,
) -> dict[str, Callable[..., Any]]:
    """Create the template globals for one request.

    Returns:
        Mapping with ``menu_items``, ``breadcrumb_items`` and
        ``current_menu_item``, each taking an optional menu name
    """

    def bound_breadcrumb_items(menu_name: str = "default") -> list[MenuItem]:
        return breadcrumb_items(builder, context, menu_name)

    def bound_current_menu_item(menu_name: str = "default") -> MenuItem | None:
        return current_menu_item(builder, context, menu_name)

    return {
        "menu_items": lambda menu_name="default": menu_items(builder, menu_name),
        "breadcrumb_items": bound_breadcrumb_items,
        "current_menu_item": bound_current_menu_item,
    }

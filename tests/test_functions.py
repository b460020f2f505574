"""Tests for template functions."""

from typing import Any

import pytest
from menukit.core.builder import MenuBuilder
from menukit.errors import MenuNotFoundError
from menukit.functions import (
    breadcrumb_items,
    current_menu_item,
    menu_items,
    template_functions,
)

from tests.conftest import MakeContext

TOP_LEVEL = ["home", "about", "contact"]


@pytest.fixture
def builder(site_definition: dict[str, Any]) -> MenuBuilder:
    return MenuBuilder(
        {
            "default": site_definition,
            "footer": {"imprint": {"title": "Imprint", "custom_url": "/imprint"}},
        }
    )


class TestFunctions:
    """Tests for the module level helpers."""

    def test__menu_items(self, builder: MenuBuilder) -> None:
        assert [item.key for item in menu_items(builder)] == TOP_LEVEL
        assert [item.key for item in menu_items(builder, "footer")] == ["imprint"]

    def test__breadcrumb_items(
        self,
        builder: MenuBuilder,
        make_context: MakeContext,
    ) -> None:
        items = breadcrumb_items(builder, make_context("team"))

        assert [item.title for item in items] == ["About", "Team"]

    def test__current_menu_item(
        self,
        builder: MenuBuilder,
        make_context: MakeContext,
    ) -> None:
        item = current_menu_item(builder, make_context("team"))

        assert item is not None
        assert item.key == "team"

    def test__current_menu_item__none(
        self,
        builder: MenuBuilder,
        make_context: MakeContext,
    ) -> None:
        assert current_menu_item(builder, make_context("team"), "footer") is None

    def test__unknown_menu__raises(self, builder: MenuBuilder) -> None:
        with pytest.raises(MenuNotFoundError):
            menu_items(builder, "sidebar")


class TestTemplateFunctions:
    """Tests for template_functions()."""

    def test__names(self, builder: MenuBuilder, make_context: MakeContext) -> None:
        functions = template_functions(builder, make_context())

        assert sorted(functions) == [
            "breadcrumb_items",
            "current_menu_item",
            "menu_items",
        ]

    def test__bound_to_context(
        self,
        builder: MenuBuilder,
        make_context: MakeContext,
    ) -> None:
        functions = template_functions(builder, make_context("about"))

        assert [item.key for item in functions["menu_items"]()] == TOP_LEVEL
        assert [item.key for item in functions["breadcrumb_items"]()] == ["about"]
        assert functions["current_menu_item"]().key == "about"
        assert functions["current_menu_item"]("footer") is None

"""Tests for MenuBuilder."""

from typing import Any

import pytest
from menukit.core.builder import MenuBuilder
from menukit.core.item import MenuItem
from menukit.core.kinds import ItemKindRegistry
from menukit.core.menu import Menu
from menukit.errors import (
    InvalidConfigurationError,
    MenuNotFoundError,
    OptionRequiredError,
)

HOME_ONLY = {"home": {"title": "Home"}}


class SidebarMenu(Menu):
    def configure(self) -> None:
        self.configured = True


class BadgeItem(MenuItem):
    pass


class TestMenuBuilder:
    """Tests for MenuBuilder."""

    def test__menu_names__in_definition_order(
        self,
        site_definition: dict[str, Any],
    ) -> None:
        builder = MenuBuilder({"main": site_definition, "footer": HOME_ONLY})

        assert builder.menu_names == ["main", "footer"]
        assert builder.has_menu("footer") is True
        assert builder.has_menu("sidebar") is False

    def test__get_menu__builds_named_menu(
        self,
        site_definition: dict[str, Any],
    ) -> None:
        builder = MenuBuilder({"main": site_definition})

        menu = builder.get_menu("main")

        assert menu.name == "main"
        keys = [item.key for item in menu.get_all_items()]
        assert keys == ["home", "about", "contact"]

    def test__get_menu__default_name(self, site_definition: dict[str, Any]) -> None:
        builder = MenuBuilder({"default": site_definition})

        assert builder.get_menu().name == "default"

    def test__get_menu__cached(self, site_definition: dict[str, Any]) -> None:
        builder = MenuBuilder({"main": site_definition})

        assert builder.get_menu("main") is builder.get_menu("main")

    def test__get_menu__unknown__raises(self) -> None:
        builder = MenuBuilder({})

        with pytest.raises(MenuNotFoundError, match="Menu sidebar does not exist"):
            builder.get_menu("sidebar")

    def test__menus_built_lazily(self, site_definition: dict[str, Any]) -> None:
        """A broken definition only fails when that menu is requested."""
        builder = MenuBuilder({"main": site_definition, "broken": {"home": {}}})

        assert builder.get_menu("main").name == "main"
        with pytest.raises(OptionRequiredError):
            builder.get_menu("broken")

    def test__failed_build__not_cached(self) -> None:
        builder = MenuBuilder({"broken": {"home": {}}})

        with pytest.raises(OptionRequiredError):
            builder.get_menu("broken")
        with pytest.raises(OptionRequiredError):
            builder.get_menu("broken")

    def test__get_menus__builds_all(self, site_definition: dict[str, Any]) -> None:
        builder = MenuBuilder({"main": site_definition, "footer": HOME_ONLY})

        menus = builder.get_menus()

        assert list(menus) == ["main", "footer"]
        assert menus["main"] is builder.get_menu("main")

    def test__definitions_copied(self, site_definition: dict[str, Any]) -> None:
        definitions = {"main": site_definition}
        builder = MenuBuilder(definitions)

        definitions["extra"] = {}

        assert builder.menu_names == ["main"]


class TestMenuClass:
    """Tests for the .menu_class key."""

    def test__class_object(self) -> None:
        builder = MenuBuilder({"side": {".menu_class": SidebarMenu, **HOME_ONLY}})

        menu = builder.get_menu("side")

        assert isinstance(menu, SidebarMenu)
        assert menu.configured is True
        assert [item.key for item in menu.get_all_items()] == ["home"]

    def test__import_path(self) -> None:
        menu_class = f"{__name__}:SidebarMenu"
        builder = MenuBuilder({"side": {".menu_class": menu_class, **HOME_ONLY}})

        assert isinstance(builder.get_menu("side"), SidebarMenu)

    def test__not_a_menu__raises(self) -> None:
        builder = MenuBuilder({"side": {".menu_class": BadgeItem}})

        with pytest.raises(InvalidConfigurationError, match="does not extend"):
            builder.get_menu("side")

    def test__unimportable__raises(self) -> None:
        builder = MenuBuilder({"side": {".menu_class": "missing.module:Menu"}})

        with pytest.raises(InvalidConfigurationError, match="Cannot load menu class"):
            builder.get_menu("side")

    def test__definition_not_mapping__raises(self) -> None:
        builder = MenuBuilder({"side": ["home"]})  # type: ignore[dict-item]

        with pytest.raises(InvalidConfigurationError, match="must be a mapping"):
            builder.get_menu("side")


class TestItemKinds:
    """Tests for item kind wiring."""

    def test__alias_mapping(self) -> None:
        builder = MenuBuilder(
            {"main": {"home": {"title": "Home", "item_class": "badge"}}},
            item_kinds={"badge": BadgeItem},
        )

        assert isinstance(builder.get_menu("main").get_item("home"), BadgeItem)

    def test__shared_registry(self) -> None:
        registry = ItemKindRegistry()
        registry.register("badge", f"{__name__}:BadgeItem")
        builder = MenuBuilder(
            {"main": {"home": {"title": "Home", "item_class": "badge"}}},
            item_kinds=registry,
        )

        assert builder.item_kinds is registry
        assert isinstance(builder.get_menu("main").get_item("home"), BadgeItem)

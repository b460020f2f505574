"""Menu registry.

Holds named menu definitions and builds each ``Menu`` lazily on first
access.
"""

import logging
from collections.abc import Mapping
from typing import Any

from menukit.core.kinds import ItemClassSpec, ItemKindRegistry, import_class
from menukit.core.menu import Menu
from menukit.core.sources import DataSource
from menukit.errors import (
    InvalidConfigurationError,
    InvalidItemVariantError,
    MenuNotFoundError,
)

logger = logging.getLogger(__name__)

MENU_CLASS_KEY = ".menu_class"


class MenuBuilder:
    """Named menu registry with lazy construction.

    Menus are request independent, so one builder can be shared for the
    lifetime of the process. A menu whose construction fails is not cached
    and fails again on the next access.
    """

    def __init__(
        self,
        definitions: Mapping[str, Mapping[str, Any]],
        *,
        item_kinds: ItemKindRegistry | Mapping[str, ItemClassSpec] | None = None,
        data_sources: Mapping[str, DataSource] | None = None,
    ) -> None:
        """Initialize builder.

        Args:
            definitions: Menu name to menu definition
            item_kinds: Item kind registry, or extra aliases for a new one
            data_sources: Named sources for ``children_source`` options
        """
        self._definitions = dict(definitions)
        if isinstance(item_kinds, ItemKindRegistry):
            self._item_kinds = item_kinds
        else:
            self._item_kinds = ItemKindRegistry(item_kinds)
        self._data_sources = dict(data_sources or {})
        self._menus: dict[str, Menu] = {}

    @property
    def menu_names(self) -> list[str]:
        return list(self._definitions)

    @property
    def item_kinds(self) -> ItemKindRegistry:
        return self._item_kinds

    def has_menu(self, name: str) -> bool:
        return name in self._definitions

    def get_menu(self, name: str = "default") -> Menu:
        """Get a menu by name, building it on first access.

        Raises:
            MenuNotFoundError: If no definition exists under name
            MenuError: If the menu cannot be built
        """
        menu = self._menus.get(name)
        if menu is not None:
            return menu

        if name not in self._definitions:
            raise MenuNotFoundError(name)

        menu = self._build(name, self._definitions[name])
        self._menus[name] = menu
        return menu

    def get_menus(self) -> dict[str, Menu]:
        """Build (if needed) and return every defined menu."""
        return {name: self.get_menu(name) for name in self._definitions}

    def _build(self, name: str, definition: Mapping[str, Any]) -> Menu:
        if not isinstance(definition, Mapping):
            raise InvalidConfigurationError(
                f"Definition of menu {name!r} must be a mapping"
            )

        item_data = dict(definition)
        menu_class = _resolve_menu_class(item_data.pop(MENU_CLASS_KEY, Menu))

        menu = menu_class(
            item_data,
            name=name,
            item_kinds=self._item_kinds,
            data_sources=self._data_sources,
        )
        logger.info(f"Built menu {name!r}")
        return menu


def _resolve_menu_class(spec: object) -> type[Menu]:
    target = spec
    if isinstance(target, str):
        try:
            target = import_class(target)
        except InvalidItemVariantError as e:
            raise InvalidConfigurationError(f"Cannot load menu class {spec!r}") from e

    if not isinstance(target, type) or not issubclass(target, Menu):
        raise InvalidConfigurationError(
            f"Menu class {spec!r} does not extend {Menu.__module__}.Menu"
        )
    return target

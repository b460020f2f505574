"""Menu: one item tree built from a menu definition.

The tree hangs below a synthetic, always invisible root item. The
definition's top-level ``.defaults`` block becomes the default option set
every item inherits; nested ``.defaults`` blocks refine it per level.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping
from typing import Any, TypedDict

from menukit.context import RequestContext
from menukit.core.item import DEFAULTS_KEY, MenuItem, MenuItemDict
from menukit.core.kinds import DEFAULT_ITEM_KIND, ItemClassSpec, ItemKindRegistry
from menukit.core.sources import DataSource
from menukit.errors import InvalidConfigurationError

logger = logging.getLogger(__name__)

ROOT_KEY = ""


class MenuDict(TypedDict):
    """Dictionary representation of a resolved menu."""

    name: str
    items: list[MenuItemDict]


class Menu:
    """Item tree for one named menu definition."""

    def __init__(
        self,
        item_data: Mapping[str, Any],
        *,
        name: str = "default",
        item_kinds: ItemKindRegistry | None = None,
        data_sources: Mapping[str, DataSource] | None = None,
    ) -> None:
        """Build the whole item tree.

        Args:
            item_data: Item key to option map, with optional ``.defaults``
            name: Menu name
            item_kinds: Registry used to resolve ``item_class`` options
            data_sources: Named sources for ``children_source`` options

        Raises:
            MenuError: Any construction error, no partial tree is kept
        """
        self.name = name
        self._item_kinds = item_kinds or ItemKindRegistry()
        self._data_sources = dict(data_sources or {})
        self._item_data, self._defaults = self._fetch_defaults(item_data)

        self.configure()
        self._root = self._initialize()

    def _fetch_defaults(
        self,
        item_data: Mapping[str, Any],
    ) -> tuple[dict[str, Any], dict[str, Any]]:
        if not isinstance(item_data, Mapping):
            raise InvalidConfigurationError(
                f"Definition of menu {self.name!r} must be a mapping"
            )

        data = dict(item_data)
        defaults = data.pop(DEFAULTS_KEY, None)
        if defaults is None:
            defaults = {}
        if not isinstance(defaults, Mapping):
            raise InvalidConfigurationError(
                f"{DEFAULTS_KEY} of menu {self.name!r} must be a mapping"
            )

        defaults = dict(defaults)
        defaults.setdefault("item_class", self.default_item_class())
        return data, defaults

    def configure(self) -> None:
        """Hook for subclasses, runs before the tree is built."""

    def default_item_class(self) -> ItemClassSpec:
        """Item class used when an item does not configure one."""
        return DEFAULT_ITEM_KIND

    def _initialize(self) -> MenuItem:
        root = self.create_item(
            ROOT_KEY,
            {
                "title": "",
                "visible": False,
                "item_class": MenuItem,
                "children": self._item_data,
            },
            defaults=self._defaults,
        )
        count = sum(1 for _ in root.iter_descendants())
        logger.debug(f"Built menu {self.name!r} with {count} items")
        return root

    def create_item(
        self,
        key: str,
        options: Mapping[str, Any],
        defaults: Mapping[str, Any] | None = None,
    ) -> MenuItem:
        """Instantiate the configured item kind.

        Raises:
            InvalidItemVariantError: If item_class is not a MenuItem kind
        """
        spec = options.get("item_class") or self.default_item_class()
        item_class = self._item_kinds.resolve(spec)
        return item_class(key, options, self, defaults)

    def get_data_source(self, name: str) -> DataSource:
        """Look up a registered data source.

        Raises:
            InvalidConfigurationError: If the name is unknown or does not
                refer to a data source
        """
        source = self._data_sources.get(name)
        if source is None:
            raise InvalidConfigurationError(
                f"Unknown data source {name!r} in menu {self.name!r}"
            )
        if not isinstance(source, DataSource):
            raise InvalidConfigurationError(
                f"Data source {name!r} has no fetch() method"
            )
        return source

    @property
    def defaults(self) -> dict[str, Any]:
        return dict(self._defaults)

    @property
    def root(self) -> MenuItem:
        return self._root

    def get_all_items(self) -> list[MenuItem]:
        """Top-level items."""
        return self._root.children

    def iter_items(self) -> Iterator[MenuItem]:
        """Walk every item below the root, depth first."""
        return self._root.iter_descendants()

    def get_item(self, key: str) -> MenuItem | None:
        """Return the first item with the given key."""
        for item in self.iter_items():
            if item.key == key:
                return item
        return None

    def get_breadcrumb_items(self, context: RequestContext) -> list[MenuItem]:
        """Items on the current path, top-level item first."""
        items: list[MenuItem] = []
        item = self._root
        while (current := item.get_current_child(context)) is not None:
            items.append(current)
            item = current
        return items

    def get_current_item(self, context: RequestContext) -> MenuItem | None:
        """The deepest item on the current path, None if nothing matches."""
        items = self.get_breadcrumb_items(context)
        if not items:
            return None
        return items[-1]

    def to_dict(
        self,
        context: RequestContext,
        *,
        visible_only: bool = True,
    ) -> MenuDict:
        """Convert to dictionary for JSON serialization."""
        if visible_only:
            items = self._root.visible_children(context)
        else:
            items = self._root.children
        return {
            "name": self.name,
            "items": [
                item.to_dict(context, visible_only=visible_only) for item in items
            ],
        }

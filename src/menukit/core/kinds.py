"""Item kind registry.

Maps symbolic item class names used in configuration to ``MenuItem``
subclasses. Names that are not registered are treated as import paths
(``package.module:Class`` or ``package.module.Class``).
"""

import importlib
import logging
from collections.abc import Mapping

from menukit.core.item import MenuItem
from menukit.core.variants import AdminGeneratorMenuItem, SinglePageMenuItem
from menukit.errors import InvalidItemVariantError

logger = logging.getLogger(__name__)

DEFAULT_ITEM_KIND = "default"

BUILTIN_KINDS: dict[str, type[MenuItem]] = {
    DEFAULT_ITEM_KIND: MenuItem,
    "menu_item": MenuItem,
    "admin_generator": AdminGeneratorMenuItem,
    "single_page": SinglePageMenuItem,
}

ItemClassSpec = str | type


class ItemKindRegistry:
    """Resolves configured item classes to MenuItem subclasses.

    Resolution results are cached per spec, so every class is checked and
    imported at most once per registry.
    """

    def __init__(self, aliases: Mapping[str, ItemClassSpec] | None = None) -> None:
        """Initialize registry with builtin kinds plus aliases.

        Args:
            aliases: Extra name to class (or import path) mappings; an alias
                may also point at another alias
        """
        self._aliases: dict[str, ItemClassSpec] = {**BUILTIN_KINDS, **(aliases or {})}
        self._resolved: dict[ItemClassSpec, type[MenuItem]] = {}

    @property
    def names(self) -> list[str]:
        return sorted(self._aliases)

    def register(self, name: str, item_class: ItemClassSpec) -> None:
        self._aliases[name] = item_class
        self._resolved.clear()

    def resolve(self, spec: ItemClassSpec) -> type[MenuItem]:
        """Resolve a class, alias name or import path.

        Raises:
            InvalidItemVariantError: If the value does not name a MenuItem
                subclass
        """
        if not isinstance(spec, (str, type)):
            raise InvalidItemVariantError(
                f"Item class must be a name or a class, got {spec!r}"
            )

        cached = self._resolved.get(spec)
        if cached is not None:
            return cached

        target = spec
        seen: set[str] = set()
        while isinstance(target, str) and target in self._aliases:
            if target in seen:
                raise InvalidItemVariantError(f"Item class alias loop at {target!r}")
            seen.add(target)
            target = self._aliases[target]

        if isinstance(target, str):
            target = import_class(target)

        if not isinstance(target, type) or not issubclass(target, MenuItem):
            raise InvalidItemVariantError(
                f"Item class {spec!r} does not extend {MenuItem.__module__}.MenuItem"
            )

        logger.debug(
            f"Resolved item class {spec!r} to {target.__module__}.{target.__qualname__}"
        )
        self._resolved[spec] = target
        return target


def import_class(path: str) -> object:
    if ":" in path:
        module_name, _, attribute = path.partition(":")
    else:
        module_name, _, attribute = path.rpartition(".")
    if not module_name or not attribute:
        raise InvalidItemVariantError(f"Unknown item class {path!r}")

    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise InvalidItemVariantError(f"Cannot import item class {path!r}: {e}") from e

    try:
        return getattr(module, attribute)
    except AttributeError as e:
        raise InvalidItemVariantError(f"Unknown item class {path!r}") from e

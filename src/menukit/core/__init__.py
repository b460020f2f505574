"""Menu tree construction and resolution."""

from menukit.core.builder import MenuBuilder
from menukit.core.item import MenuItem
from menukit.core.kinds import ItemKindRegistry
from menukit.core.menu import Menu
from menukit.core.sources import DataSource, StaticDataSource
from menukit.core.variants import AdminGeneratorMenuItem, SinglePageMenuItem

__all__ = [
    "AdminGeneratorMenuItem",
    "DataSource",
    "ItemKindRegistry",
    "Menu",
    "MenuBuilder",
    "MenuItem",
    "SinglePageMenuItem",
    "StaticDataSource",
]

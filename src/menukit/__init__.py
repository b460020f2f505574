"""menukit - hierarchical navigation menus from declarative configuration."""

from menukit.context import RequestContext, RouteTable, StaticContext
from menukit.core import (
    AdminGeneratorMenuItem,
    DataSource,
    ItemKindRegistry,
    Menu,
    MenuBuilder,
    MenuItem,
    SinglePageMenuItem,
    StaticDataSource,
)
from menukit.errors import (
    InvalidConfigurationError,
    InvalidItemVariantError,
    MenuError,
    MenuNotFoundError,
    OptionRequiredError,
    UnknownRouteError,
)

__all__ = [
    "AdminGeneratorMenuItem",
    "DataSource",
    "InvalidConfigurationError",
    "InvalidItemVariantError",
    "ItemKindRegistry",
    "Menu",
    "MenuBuilder",
    "MenuError",
    "MenuItem",
    "MenuNotFoundError",
    "OptionRequiredError",
    "RequestContext",
    "RouteTable",
    "SinglePageMenuItem",
    "StaticContext",
    "StaticDataSource",
    "UnknownRouteError",
]

"""Error taxonomy for menu construction and lookup.

Construction errors are fatal for the menu being built: they propagate
out of ``Menu(...)`` and ``MenuBuilder.get_menu()`` and no partial tree
is kept.
"""


class MenuError(Exception):
    """Base class for all menukit errors."""


class OptionRequiredError(MenuError):
    """A required item option is missing."""

    def __init__(self, option: str, key: str | None = None) -> None:
        self.option = option
        self.key = key
        where = f" (item {key!r})" if key is not None else ""
        super().__init__(f"The menu item option {option} is required{where}")


class InvalidItemVariantError(MenuError):
    """Configured item class is not a MenuItem specialization."""


class InvalidConfigurationError(MenuError):
    """Malformed item or menu configuration."""


class MenuNotFoundError(MenuError):
    """No menu definition exists under the requested name."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Menu {name} does not exist")


class UnknownRouteError(MenuError):
    """A URL was requested for a route the context does not know."""

    def __init__(self, route_name: str) -> None:
        self.route_name = route_name
        super().__init__(f"Unknown route: {route_name}")


class MissingRouteParameterError(MenuError):
    """A route placeholder has no value in the URL parameters."""

    def __init__(self, route_name: str, parameter: str) -> None:
        self.route_name = route_name
        self.parameter = parameter
        super().__init__(f"Missing parameter {parameter} for route {route_name}")

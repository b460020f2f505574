"""Specialized menu item kinds."""

from typing import Any

from menukit.context import RequestContext
from menukit.core.item import MenuItem
from menukit.errors import InvalidConfigurationError, OptionRequiredError
from menukit.options import OptionSpec, as_bool

ADMIN_LIST_SUFFIX = "_list"
ADMIN_ACTIONS = (
    "edit",
    "update",
    "show",
    "object",
    "batch",
    "new",
    "create",
    "filters",
    "scopes",
)


class AdminGeneratorMenuItem(MenuItem):
    """Item for admin generator list pages.

    The route name must end with ``_list``. All conventional action routes
    of the same module (``<base>_edit``, ``<base>_new``, ...) are added as
    alias routes, so the list entry stays current on every admin page.
    """

    def _fetch_alias_route_names(self, spec: OptionSpec) -> None:
        if not self.route_name.endswith(ADMIN_LIST_SUFFIX):
            raise InvalidConfigurationError(
                "Route name used for admin generator items must end with "
                f"{ADMIN_LIST_SUFFIX}: {self.route_name!r}"
            )
        base_name = self.route_name[: -len("list")]
        self.add_alias_routes([f"{base_name}{action}" for action in ADMIN_ACTIONS])
        super()._fetch_alias_route_names(spec)


class SinglePageMenuItem(MenuItem):
    """Item for a section of a single page layout.

    The key uses ``route/content`` notation, or the ``content_name`` option
    supplies the content part. The content name becomes the URL anchor.
    While the route is active the URL is the bare anchor, so selection is
    left to client-side scripting; ``is_selected`` marks the section that
    counts as current.
    """

    content_name: str = ""
    is_content_selected: bool = False

    OPTIONS = (
        *MenuItem.OPTIONS,
        OptionSpec("is_selected", field="is_content_selected", parse=as_bool),
    )

    def prepare(self, key: str, options: dict[str, Any]) -> tuple[str, dict[str, Any]]:
        if "/" in key:
            key, self.content_name = key.split("/", 1)
        elif options.get("content_name"):
            self.content_name = str(options["content_name"])
        else:
            raise OptionRequiredError("content_name", key)

        options["content_name"] = self.content_name
        options["anchor"] = self.content_name
        return key, options

    def is_current(self, context: RequestContext) -> bool:
        return self.is_content_selected and super().is_current(context)

    def generate_standard_url(
        self,
        context: RequestContext,
        url_parameters: dict[str, Any],
        absolute: bool = False,
    ) -> str:
        if super().is_current(context):
            return f"#{self.anchor}"
        return super().generate_standard_url(context, url_parameters, absolute)

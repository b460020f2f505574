"""Menu item tree nodes.

A ``MenuItem`` is built from a defaults-merged option map. Construction
resolves the item's option schema, runs the ``configure()`` hook and then
recursively creates its children through the owning menu's factory.

The finished tree is request independent. Visibility, enablement,
selection state and URLs are computed on every call from the item fields
and the ``RequestContext`` passed in.
"""

from __future__ import annotations

import html
import logging
import weakref
from collections.abc import Iterator, Mapping
from typing import TYPE_CHECKING, Any, ClassVar, TypedDict

from menukit.context import RequestContext, append_query
from menukit.core.sources import ChildrenSource
from menukit.errors import InvalidConfigurationError, OptionRequiredError
from menukit.options import (
    OptionSpec,
    as_bool,
    as_mapping,
    as_optional_str,
    as_str_list,
    get_option,
    has_option,
    resolve_options,
)

if TYPE_CHECKING:
    from menukit.core.menu import Menu

logger = logging.getLogger(__name__)

DEFAULTS_KEY = ".defaults"

# Key prefixes that mark structural items. Not validated against real
# route names.
DIVIDER_PREFIX = "__divider"
SECTION_HEADER_PREFIX = "__section"

# Never inherited through a defaults block
STRUCTURAL_KEYS = frozenset({"children", "children_source", "copy_as_first_child"})

Position = int | str


class MenuItemDict(TypedDict, total=False):
    """Dictionary representation of a resolved menu item."""

    key: str
    route_name: str
    title: str
    url: str | None
    visible: bool
    enabled: bool
    current: bool
    on_current_path: bool
    item_group: str
    icon: str | None
    is_divider: bool
    is_section_header: bool
    section_header: str | None
    pre_divider: bool
    post_divider: bool
    template: str | None
    children_template: str | None
    children: list[MenuItemDict]


class MenuItem:
    """Base menu item.

    Options (keys of the configuration map):

    * ``title``                  Display title, the only required option
                                 (dividers may omit it)
    * ``title_in_menu_header``   Alternate title used inside menu headers
    * ``item_group``             Group name to split one level into groups
    * ``visible``                False always hides the item
    * ``visible_if_disabled``    False hides the item while it is disabled
    * ``pre_divider``            Divider before the item
    * ``post_divider``           Divider after the item
    * ``section_header``         Section header text shown before the item
    * ``is_divider``             Item is a divider (also ``__divider*`` keys)
    * ``is_section_header``      Item is a header (also ``__section*`` keys)
    * ``custom_route_name``      Route name to use instead of the item key
    * ``alias_route_names``      Extra route names that mark the item current
    * ``require_route_name``     Item is disabled unless the current route
                                 matches; a leading ``!`` inverts the check
    * ``custom_url``             Fixed URL used instead of route generation
    * ``custom_url_icon``        Icon shown next to custom URLs
    * ``add_request_variables``  Request variable names passed into the URL
    * ``set_request_variables``  Fixed parameters added to the URL
    * ``match_request_variables`` Request variables that must match for the
                                 item to be current
    * ``anchor``                 Fragment appended to routed URLs
    * ``icon``                   Icon identifier
    * ``require_role``           Role needed for the item to be enabled
    * ``enabled_if_role_missing`` Keep the item enabled without the role
    * ``template``               Template override for the item
    * ``children_template``      Template override for the item's children
    * ``custom_object``          Arbitrary payload for templates
    * ``copy_as_first_child``    Prepend a copy of the item as first child;
                                 a string sets the copy's title
    * ``children_source``        Generate children from a data source
    * ``children``               Child definitions, with optional ``.defaults``
    """

    OPTIONS: ClassVar[tuple[OptionSpec, ...]] = (
        OptionSpec("is_divider", parse=as_bool, fetch="_fetch_key_marker"),
        OptionSpec("is_section_header", parse=as_bool, fetch="_fetch_key_marker"),
        OptionSpec("title", required=True, parse=str, fetch="_fetch_title"),
        OptionSpec("title_in_menu_header", parse=as_optional_str),
        OptionSpec("item_group", parse=str),
        OptionSpec("visible", parse=as_bool),
        OptionSpec("visible_if_disabled", parse=as_bool),
        OptionSpec("pre_divider", parse=as_bool),
        OptionSpec("post_divider", parse=as_bool),
        OptionSpec("section_header", parse=as_optional_str),
        OptionSpec("custom_route_name", field="route_name", parse=str),
        OptionSpec("alias_route_names", fetch="_fetch_alias_route_names"),
        OptionSpec("require_route_name", fetch="_fetch_require_route_name"),
        OptionSpec("custom_url", parse=as_optional_str),
        OptionSpec("custom_url_icon", parse=as_optional_str),
        OptionSpec("add_request_variables", parse=as_str_list),
        OptionSpec("set_request_variables", parse=as_mapping),
        OptionSpec("match_request_variables", parse=as_mapping),
        OptionSpec("anchor", parse=as_optional_str),
        OptionSpec("icon", parse=as_optional_str),
        OptionSpec("require_role", parse=as_optional_str),
        OptionSpec("enabled_if_role_missing", parse=as_bool),
        OptionSpec("template", parse=as_optional_str),
        OptionSpec("children_template", parse=as_optional_str),
        OptionSpec("custom_object"),
        OptionSpec("copy_as_first_child"),
        OptionSpec("children_source", parse=ChildrenSource.from_options),
    )

    title: str = ""
    title_in_menu_header: str | None = None
    item_group: str = "default"
    visible: bool = True
    visible_if_disabled: bool = True
    pre_divider: bool = False
    post_divider: bool = False
    section_header: str | None = None
    is_divider: bool = False
    is_section_header: bool = False
    require_route_name: str | None = None
    invert_require_route_name: bool = False
    custom_url: str | None = None
    custom_url_icon: str | None = None
    anchor: str | None = None
    icon: str | None = None
    require_role: str | None = None
    enabled_if_role_missing: bool = False
    template: str | None = None
    children_template: str | None = None
    custom_object: Any = None
    copy_as_first_child: bool | str = False
    children_source: ChildrenSource | None = None

    def __init__(
        self,
        key: str,
        options: Mapping[str, Any],
        menu: Menu,
        defaults: Mapping[str, Any] | None = None,
    ) -> None:
        """Build the item and its whole subtree.

        Args:
            key: Configuration key, used as route name unless overridden
            options: Defaults-merged option map
            menu: Owning menu, used as item factory
            defaults: Default option set inherited by this item's children

        Raises:
            OptionRequiredError: If a required option is missing
            InvalidConfigurationError: If an option is malformed
            InvalidItemVariantError: If a child names an invalid item class
        """
        self._menu = menu
        self._parent: weakref.ref[MenuItem] | None = None
        self._children: list[MenuItem] = []
        self.alias_route_names: dict[str, str] = {}
        self.add_request_variables: list[str] = []
        self.set_request_variables: dict[str, Any] = {}
        self.match_request_variables: dict[str, Any] = {}

        key, prepared = self.prepare(key, dict(options))
        self.key = key
        self.route_name = key
        self._options = prepared
        self._defaults = {
            k: v for k, v in (defaults or {}).items() if k not in STRUCTURAL_KEYS
        }
        self._child_defaults = dict(self._defaults)

        resolve_options(self, self._options, self.OPTIONS, item_key=key)
        self.configure()
        self.generate_children()

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.key!r})"

    # Construction hooks

    def prepare(self, key: str, options: dict[str, Any]) -> tuple[str, dict[str, Any]]:
        """Adjust the key and raw options before they are resolved."""
        return key, options

    def configure(self) -> None:
        """Extra configuration, run before children are generated."""

    # Options

    @property
    def menu(self) -> Menu:
        return self._menu

    @property
    def options(self) -> dict[str, Any]:
        return dict(self._options)

    @property
    def defaults(self) -> dict[str, Any]:
        """Default option set this item was created with."""
        return dict(self._defaults)

    def has_option(self, key: str) -> bool:
        return has_option(self._options, key)

    def get_option(self, key: str, default: Any = None) -> Any:
        return get_option(self._options, key, default)

    def _fetch_key_marker(self, spec: OptionSpec) -> None:
        prefix = DIVIDER_PREFIX if spec.key == "is_divider" else SECTION_HEADER_PREFIX
        if self.has_option(spec.key):
            setattr(self, spec.target, as_bool(self.get_option(spec.key)))
        elif self.key.startswith(prefix):
            setattr(self, spec.target, True)

    def _fetch_title(self, spec: OptionSpec) -> None:
        if self.has_option(spec.key):
            self.title = str(self.get_option(spec.key))
        elif not self.is_divider:
            raise OptionRequiredError(spec.key, self.key)

    def _fetch_alias_route_names(self, spec: OptionSpec) -> None:
        self.add_alias_routes(as_str_list(self.get_option(spec.key)))

    def _fetch_require_route_name(self, spec: OptionSpec) -> None:
        value = as_optional_str(self.get_option(spec.key))
        if value and value.startswith("!"):
            self.invert_require_route_name = True
            value = value[1:]
        self.require_route_name = value

    def add_alias_routes(self, route_names: str | list[str]) -> None:
        """Add one or more alias route names, keeping insertion order."""
        for name in as_str_list(route_names):
            self.alias_route_names[name] = name

    # Children

    def generate_children(self) -> None:
        """Create child items from the ``children`` option and data source."""
        children = self.get_option("children")
        if children is None:
            children = {}
        if not isinstance(children, Mapping):
            raise InvalidConfigurationError(
                f"children of menu item {self.key!r} must be a mapping"
            )

        override = children.get(DEFAULTS_KEY)
        if override is not None and not isinstance(override, Mapping):
            raise InvalidConfigurationError(
                f"{DEFAULTS_KEY} of menu item {self.key!r} must be a mapping"
            )
        self._child_defaults = self._merge_defaults(override)

        for key, options in children.items():
            if key == DEFAULTS_KEY:
                continue
            self.add_child_by_data(str(key), options)

        if self.children_source is not None:
            source = self._menu.get_data_source(self.children_source.source)
            generated = self.children_source.generate(source)
            logger.debug(
                f"Generated {len(generated)} children for {self.key!r} "
                f"from {self.children_source.source!r}"
            )
            for key, options in generated:
                self.add_child_by_data(key, options)

        if self.copy_as_first_child:
            self._add_copy_as_first_child()

    def _merge_defaults(self, override: Mapping[str, Any] | None) -> dict[str, Any]:
        # More specific defaults win, item options win over both.
        merged = dict(self._defaults)
        if override:
            merged.update(
                {k: v for k, v in override.items() if k not in STRUCTURAL_KEYS}
            )
        return merged

    def _add_copy_as_first_child(self) -> None:
        options = {k: v for k, v in self._options.items() if k not in STRUCTURAL_KEYS}
        if isinstance(self.copy_as_first_child, str):
            options["title"] = self.copy_as_first_child
        item = self._menu.create_item(self.key, options, defaults=self._child_defaults)
        self.add_child(item, "first")

    def add_child_by_data(
        self,
        key: str,
        options: Mapping[str, Any] | None,
        position: Position = "last",
    ) -> MenuItem:
        """Create a child from option data and insert it.

        The item's child defaults are merged under the given options.

        Returns:
            The created item
        """
        if options is None:
            options = {}
        if not isinstance(options, Mapping):
            raise InvalidConfigurationError(
                f"Options of menu item {key!r} must be a mapping"
            )
        defaults = self._child_defaults
        item = self._menu.create_item(key, {**defaults, **options}, defaults=defaults)
        return self.add_child(item, position)

    def add_child(self, item: MenuItem, position: Position = "last") -> MenuItem:
        """Insert a child item.

        Positions:
            ``"last"``: append (default)
            ``"first"``: prepend
            non-negative int: insert at this zero-based index
            negative int: insert counting from the end, ``-1`` puts the
            item before the current last child

        Returns:
            The inserted item
        """
        if position == "last":
            self._children.append(item)
        elif position == "first":
            self._children.insert(0, item)
        else:
            self._children.insert(_parse_position(position), item)

        item._parent = weakref.ref(self)
        return item

    def add_sibling_by_data(
        self,
        key: str,
        options: Mapping[str, Any] | None,
    ) -> MenuItem:
        """Create an item right after this one in the parent's children."""
        parent = self.parent
        if parent is None:
            raise ValueError(f"Menu item {self.key!r} has no parent")
        return parent.add_child_by_data(key, options, self.position + 1)

    @property
    def children(self) -> list[MenuItem]:
        return list(self._children)

    def has_children(self) -> bool:
        return bool(self._children)

    @property
    def parent(self) -> MenuItem | None:
        if self._parent is None:
            return None
        return self._parent()

    def has_parent(self) -> bool:
        return self.parent is not None

    @property
    def position(self) -> int:
        """Index of this item among its parent's children."""
        parent = self.parent
        if parent is None:
            return 0
        for index, child in enumerate(parent._children):
            if child is self:
                return index
        raise ValueError(f"Menu item {self.key!r} is not a child of its parent")

    def iter_descendants(self) -> Iterator[MenuItem]:
        """Yield all descendants depth first, in child order."""
        for child in self._children:
            yield child
            yield from child.iter_descendants()

    def has_enabled_children(self, context: RequestContext) -> bool:
        return any(child.is_enabled(context) for child in self._children)

    def visible_children(self, context: RequestContext) -> list[MenuItem]:
        return [child for child in self._children if child.is_visible(context)]

    def has_visible_children(self, context: RequestContext) -> bool:
        return any(child.is_visible(context) for child in self._children)

    # Titles

    def get_title_in_menu_header(self) -> str:
        if self.title_in_menu_header is not None:
            return self.title_in_menu_header
        return self.title

    @property
    def escaped_title(self) -> str:
        return html.escape(self.title)

    def has_anchor(self) -> bool:
        return self.anchor is not None

    def has_section_header(self) -> bool:
        return self.section_header is not None

    # Request dependent state

    def is_visible(self, context: RequestContext) -> bool:
        """Check if the item should be rendered."""
        if not self.visible:
            return False
        if self.visible_if_disabled:
            return True
        return self.is_enabled(context)

    def is_enabled(self, context: RequestContext) -> bool:
        """Check if the item should be rendered as a link.

        The require_route_name gate is checked first. enabled_if_role_missing
        only relaxes the require_role gate and never enables an item whose
        route gate failed.
        """
        if self.require_route_name is not None:
            matches = context.current_route_name() == self.require_route_name
            if not (matches ^ self.invert_require_route_name):
                return False

        if self.require_role is None:
            return True
        if context.is_granted(self.require_role, self.custom_object):
            return True
        return self.enabled_if_role_missing

    def is_current(self, context: RequestContext) -> bool:
        """Check if the item itself is the current endpoint."""
        current = context.current_route_name()
        if current is None:
            return False
        if current != self.route_name and current not in self.alias_route_names:
            return False
        return self.matches_request_variables(context)

    def matches_request_variables(self, context: RequestContext) -> bool:
        """Compare match_request_variables to live values, as strings."""
        for name, expected in self.match_request_variables.items():
            actual = context.request_variable(name)
            if actual is None or str(actual) != str(expected):
                return False
        return True

    def is_on_current_path(self, context: RequestContext) -> bool:
        """Check if the item or any descendant is the current endpoint."""
        if self.is_current(context):
            return True
        return any(child.is_on_current_path(context) for child in self._children)

    def get_current_child(self, context: RequestContext) -> MenuItem | None:
        """Return the first child on the current path."""
        for child in self._children:
            if child.is_on_current_path(context):
                return child
        return None

    # URLs

    def get_url(
        self,
        context: RequestContext,
        url_parameters: Mapping[str, Any] | None = None,
        absolute: bool = False,
    ) -> str:
        """Get the URL for this item."""
        return self.generate_url(context, dict(url_parameters or {}), absolute)

    def generate_url(
        self,
        context: RequestContext,
        url_parameters: dict[str, Any],
        absolute: bool = False,
    ) -> str:
        if self.custom_url:
            return self.generate_custom_url(context)
        return self.generate_standard_url(context, url_parameters, absolute)

    def generate_custom_url(self, context: RequestContext) -> str:
        assert self.custom_url is not None
        return append_query(self.custom_url, self.request_variable_parameters(context))

    def generate_standard_url(
        self,
        context: RequestContext,
        url_parameters: dict[str, Any],
        absolute: bool = False,
    ) -> str:
        """Generate a URL through the context's router."""
        params = {**url_parameters, **self.request_variable_parameters(context)}
        url = context.generate_url(self.route_name, params, absolute)
        if self.has_anchor():
            url = f"{url}#{self.anchor}"
        return url

    def request_variable_parameters(self, context: RequestContext) -> dict[str, Any]:
        """Collect add_request_variables values, then set_request_variables."""
        params: dict[str, Any] = {}
        for name in self.add_request_variables:
            value = context.request_variable(name)
            if value is None:
                logger.debug(
                    f"Request variable {name!r} missing for menu item {self.key!r}"
                )
                continue
            params[name] = value
        params.update(self.set_request_variables)
        return params

    def to_dict(
        self,
        context: RequestContext,
        *,
        visible_only: bool = True,
    ) -> MenuItemDict:
        """Convert to dictionary for JSON serialization."""
        structural = self.is_divider or self.is_section_header
        result: MenuItemDict = {
            "key": self.key,
            "route_name": self.route_name,
            "title": self.title,
            "url": None if structural else self.get_url(context),
            "visible": self.is_visible(context),
            "enabled": self.is_enabled(context),
            "current": self.is_current(context),
            "on_current_path": self.is_on_current_path(context),
            "item_group": self.item_group,
            "icon": self.icon,
            "is_divider": self.is_divider,
            "is_section_header": self.is_section_header,
            "section_header": self.section_header,
            "pre_divider": self.pre_divider,
            "post_divider": self.post_divider,
            "template": self.template,
            "children_template": self.children_template,
        }
        children = self.visible_children(context) if visible_only else self._children
        if children:
            result["children"] = [
                child.to_dict(context, visible_only=visible_only) for child in children
            ]
        return result


def _parse_position(position: Position) -> int:
    if isinstance(position, bool):
        raise ValueError(f"Invalid child position: {position!r}")
    if isinstance(position, int):
        return position
    if isinstance(position, str):
        text = position.strip()
        digits = text[1:] if text.startswith("-") else text
        if digits.isdigit():
            return int(text)
    raise ValueError(f"Invalid child position: {position!r}")

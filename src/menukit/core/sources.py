"""Data-driven child generation.

An item's ``children_source`` option names a registered ``DataSource`` and
describes how each fetched element becomes a child item::

    children_source = {
        "source": "teams",
        "query": {"active": True},
        "route": "team_show",
        "route_parameters": {"id": "id"},
        "title_field": "name",
        "options": {"icon": "users"},
    }
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable

from menukit.errors import InvalidConfigurationError

_REQUIRED_KEYS = ("route", "title_field")


@runtime_checkable
class DataSource(Protocol):
    """External collection that child items are generated from."""

    def fetch(self, query: Mapping[str, Any]) -> Iterable[Any]:
        """Return the elements matching query."""
        ...


@dataclass
class StaticDataSource:
    """In-memory data source over a list of records.

    A record matches when every query key equals the record's value.
    """

    records: list[Mapping[str, Any]] = field(default_factory=list)

    def fetch(self, query: Mapping[str, Any]) -> Iterable[Any]:
        return [
            record
            for record in self.records
            if all(record.get(key) == value for key, value in query.items())
        ]


def get_field(element: Any, name: str) -> Any:
    """Read a field from a mapping or an attribute from an object."""
    if isinstance(element, Mapping):
        if name in element:
            return element[name]
    elif hasattr(element, name):
        return getattr(element, name)
    raise InvalidConfigurationError(
        f"Data source element {element!r} has no field {name!r}"
    )


@dataclass(frozen=True)
class ChildrenSource:
    """Parsed ``children_source`` option block."""

    source: str
    route: str
    title_field: str
    query: dict[str, Any] = field(default_factory=dict)
    route_parameters: dict[str, str] = field(default_factory=dict)
    options: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_options(cls, data: object) -> ChildrenSource | None:
        """Parse a children_source block.

        Raises:
            InvalidConfigurationError: If the block is malformed
        """
        if data is None:
            return None
        if not isinstance(data, Mapping):
            raise InvalidConfigurationError("children_source must be a mapping")

        source = data.get("source", data.get("class"))
        if not isinstance(source, str) or not source:
            raise InvalidConfigurationError(
                "children_source.source must be a non-empty string"
            )

        for key in _REQUIRED_KEYS:
            if not isinstance(data.get(key), str) or not data[key]:
                raise InvalidConfigurationError(
                    f"children_source.{key} must be a non-empty string"
                )

        query = data.get("query", {})
        if not isinstance(query, Mapping):
            raise InvalidConfigurationError("children_source.query must be a mapping")

        route_parameters = data.get("route_parameters", {})
        if not isinstance(route_parameters, Mapping):
            raise InvalidConfigurationError(
                "children_source.route_parameters must be a mapping"
            )
        for param, field_name in route_parameters.items():
            if not isinstance(field_name, str):
                raise InvalidConfigurationError(
                    f"children_source.route_parameters.{param} must be a field name"
                )

        options = data.get("options", {})
        if not isinstance(options, Mapping):
            raise InvalidConfigurationError("children_source.options must be a mapping")

        return cls(
            source=source,
            route=data["route"],
            title_field=data["title_field"],
            query=dict(query),
            route_parameters=dict(route_parameters),
            options=dict(options),
        )

    def generate(self, source: DataSource) -> list[tuple[str, dict[str, Any]]]:
        """Produce (key, options) pairs for every fetched element.

        Errors raised by the source propagate unchanged.
        """
        children: list[tuple[str, dict[str, Any]]] = []
        for index, element in enumerate(source.fetch(self.query)):
            parameters = {
                param: get_field(element, name)
                for param, name in self.route_parameters.items()
            }
            options = {
                **self.options,
                "title": str(get_field(element, self.title_field)),
                "custom_route_name": self.route,
                "set_request_variables": parameters,
                "match_request_variables": parameters,
                "custom_object": element,
            }
            children.append((f"{self.route}#{index}", options))
        return children

"""Tests for data-driven child generation."""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

import pytest
from menukit.core.menu import Menu
from menukit.core.sources import ChildrenSource, StaticDataSource, get_field
from menukit.errors import InvalidConfigurationError

from tests.conftest import MakeContext

USERS = [
    {"id": 1, "name": "Alice", "active": True},
    {"id": 2, "name": "Bob", "active": False},
    {"id": 3, "name": "Carol", "active": True},
]

BASE_SOURCE = {"source": "users", "route": "user_show", "title_field": "name"}


@dataclass
class Team:
    slug: str
    label: str


class FailingSource:
    def fetch(self, query: Mapping[str, Any]) -> Iterable[Any]:
        raise RuntimeError("database unavailable")


def users_menu(**source: Any) -> dict[str, Any]:
    return {
        "users": {
            "title": "Users",
            "custom_route_name": "user_list",
            "children_source": {
                "source": "users",
                "route": "user_show",
                "title_field": "name",
                "route_parameters": {"id": "id"},
                **source,
            },
        },
    }


class TestStaticDataSource:
    """Tests for StaticDataSource."""

    def test__empty_query__returns_all(self) -> None:
        assert StaticDataSource(USERS).fetch({}) == USERS

    def test__query__filters_by_equality(self) -> None:
        result = StaticDataSource(USERS).fetch({"active": True})

        assert [record["name"] for record in result] == ["Alice", "Carol"]

    def test__no_match__returns_empty(self) -> None:
        assert list(StaticDataSource(USERS).fetch({"name": "Dave"})) == []


class TestGetField:
    """Tests for get_field()."""

    def test__mapping_key(self) -> None:
        assert get_field({"name": "Alice"}, "name") == "Alice"

    def test__attribute(self) -> None:
        assert get_field(Team(slug="core", label="Core"), "label") == "Core"

    def test__missing__raises(self) -> None:
        with pytest.raises(InvalidConfigurationError, match="no field 'email'"):
            get_field({"name": "Alice"}, "email")


class TestChildrenSourceParsing:
    """Tests for ChildrenSource.from_options()."""

    def test__none__returns_none(self) -> None:
        assert ChildrenSource.from_options(None) is None

    def test__full_block(self) -> None:
        source = ChildrenSource.from_options(
            {
                "source": "users",
                "route": "user_show",
                "title_field": "name",
                "query": {"active": True},
                "route_parameters": {"id": "id"},
                "options": {"icon": "user"},
            }
        )

        assert source == ChildrenSource(
            source="users",
            route="user_show",
            title_field="name",
            query={"active": True},
            route_parameters={"id": "id"},
            options={"icon": "user"},
        )

    def test__class_key__accepted_as_source(self) -> None:
        source = ChildrenSource.from_options(
            {"class": "users", "route": "user_show", "title_field": "name"}
        )

        assert source is not None
        assert source.source == "users"

    def test__not_mapping__raises(self) -> None:
        with pytest.raises(InvalidConfigurationError, match="must be a mapping"):
            ChildrenSource.from_options("users")

    def test__missing_source__raises(self) -> None:
        with pytest.raises(InvalidConfigurationError, match="children_source.source"):
            ChildrenSource.from_options({"route": "user_show", "title_field": "name"})

    def test__missing_route__raises(self) -> None:
        with pytest.raises(InvalidConfigurationError, match="children_source.route"):
            ChildrenSource.from_options({"source": "users", "title_field": "name"})

    def test__missing_title_field__raises(self) -> None:
        match = "children_source.title_field"
        with pytest.raises(InvalidConfigurationError, match=match):
            ChildrenSource.from_options({"source": "users", "route": "user_show"})

    def test__query_not_mapping__raises(self) -> None:
        with pytest.raises(InvalidConfigurationError, match="children_source.query"):
            ChildrenSource.from_options({**BASE_SOURCE, "query": ["active"]})

    def test__route_parameter_not_string__raises(self) -> None:
        with pytest.raises(InvalidConfigurationError, match="route_parameters.id"):
            ChildrenSource.from_options({**BASE_SOURCE, "route_parameters": {"id": 1}})


class TestGeneratedChildren:
    """Tests for children generated from a data source."""

    def test__one_child_per_element(self) -> None:
        menu = Menu(users_menu(), data_sources={"users": StaticDataSource(USERS)})
        users = menu.get_item("users")
        assert users is not None

        children = users.children

        assert [child.title for child in children] == ["Alice", "Bob", "Carol"]
        assert [child.key for child in children] == [
            "user_show#0",
            "user_show#1",
            "user_show#2",
        ]
        assert all(child.route_name == "user_show" for child in children)

    def test__query__filters_children(self) -> None:
        menu = Menu(
            users_menu(query={"active": True}),
            data_sources={"users": StaticDataSource(USERS)},
        )
        users = menu.get_item("users")
        assert users is not None

        assert [child.title for child in users.children] == ["Alice", "Carol"]

    def test__element__becomes_custom_object(self) -> None:
        menu = Menu(users_menu(), data_sources={"users": StaticDataSource(USERS)})
        child = menu.get_item("user_show#1")
        assert child is not None

        assert child.custom_object == USERS[1]

    def test__route_parameters__build_url(self, make_context: MakeContext) -> None:
        menu = Menu(users_menu(), data_sources={"users": StaticDataSource(USERS)})
        child = menu.get_item("user_show#2")
        assert child is not None

        assert child.get_url(make_context()) == "/users/3"

    def test__route_parameters__select_current_child(
        self,
        make_context: MakeContext,
    ) -> None:
        menu = Menu(users_menu(), data_sources={"users": StaticDataSource(USERS)})
        context = make_context("user_show", id="2")

        current = menu.get_current_item(context)

        assert current is not None
        assert current.title == "Bob"
        breadcrumbs = menu.get_breadcrumb_items(context)
        assert [item.key for item in breadcrumbs] == ["users", "user_show#1"]

    def test__extra_options__applied(self) -> None:
        menu = Menu(
            users_menu(options={"icon": "user"}),
            data_sources={"users": StaticDataSource(USERS)},
        )
        child = menu.get_item("user_show#0")
        assert child is not None

        assert child.icon == "user"

    def test__attribute_elements(self) -> None:
        definition = {
            "teams": {
                "title": "Teams",
                "children_source": {
                    "source": "teams",
                    "route": "team",
                    "title_field": "label",
                },
            },
        }
        teams = [Team(slug="core", label="Core"), Team(slug="web", label="Web")]
        sources = {"teams": StaticDataSource(teams)}  # type: ignore[list-item]
        menu = Menu(definition, data_sources=sources)
        item = menu.get_item("teams")
        assert item is not None

        assert [child.title for child in item.children] == ["Core", "Web"]

    def test__generated_after_static_children(self) -> None:
        definition = users_menu()
        definition["users"]["children"] = {"new_user": {"title": "New user"}}
        menu = Menu(definition, data_sources={"users": StaticDataSource(USERS)})
        users = menu.get_item("users")
        assert users is not None

        keys = [child.key for child in users.children]
        assert keys[:2] == ["new_user", "user_show#0"]

    def test__unknown_source__raises(self) -> None:
        match = "Unknown data source 'users'"
        with pytest.raises(InvalidConfigurationError, match=match):
            Menu(users_menu())

    def test__object_without_fetch__raises(self) -> None:
        with pytest.raises(InvalidConfigurationError, match="no fetch"):
            Menu(users_menu(), data_sources={"users": USERS})  # type: ignore[dict-item]

    def test__missing_title_field__raises(self) -> None:
        with pytest.raises(InvalidConfigurationError, match="no field 'nickname'"):
            Menu(
                users_menu(title_field="nickname"),
                data_sources={"users": StaticDataSource(USERS)},
            )

    def test__source_error__propagates(self) -> None:
        with pytest.raises(RuntimeError, match="database unavailable"):
            Menu(users_menu(), data_sources={"users": FailingSource()})

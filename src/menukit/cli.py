"""CLI interface for menukit.

Command-line tool for inspecting configured menus and serving them as JSON.
"""

import logging
from pathlib import Path

import click

from menukit.config import Config
from menukit.context import RequestContext
from menukit.core.item import MenuItem
from menukit.errors import MenuError
from menukit.factory import create_context, create_menu_builder

config_option = click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True, path_type=Path),
    default=None,
    help="Path to configuration file (default: auto-discover menukit.toml)",
)

verbose_option = click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose output (debug logging)",
)

route_option = click.option(
    "--route",
    "-r",
    default=None,
    help="Route name treated as the current page",
)

var_option = click.option(
    "--var",
    "variables",
    multiple=True,
    metavar="NAME=VALUE",
    help="Request variable, may be repeated",
)

role_option = click.option(
    "--role",
    "roles",
    multiple=True,
    help="Granted role, may be repeated",
)


@click.group()
def cli() -> None:
    """menukit - navigation menus from declarative configuration."""


@cli.command("list")
@config_option
@verbose_option
def list_menus(config_path: Path | None, verbose: bool) -> None:
    """List configured menus."""
    _setup_logging(verbose)
    config = _load_config(config_path)
    builder = create_menu_builder(config)
    if not builder.menu_names:
        click.echo("No menus configured")
        return
    for name in builder.menu_names:
        click.echo(name)


@cli.command()
@click.argument("menu_name", default="default")
@config_option
@route_option
@var_option
@role_option
@click.option("--all", "show_all", is_flag=True, help="Include invisible items")
@verbose_option
def show(
    menu_name: str,
    config_path: Path | None,
    route: str | None,
    variables: tuple[str, ...],
    roles: tuple[str, ...],
    show_all: bool,
    verbose: bool,
) -> None:
    """Print a menu tree with its state for the current route."""
    _setup_logging(verbose)
    config = _load_config(config_path)
    context = create_context(config, route, _parse_variables(variables), list(roles))

    try:
        menu = create_menu_builder(config).get_menu(menu_name)
        lines: list[str] = []
        for item in menu.get_all_items():
            _render_item(item, context, lines, depth=0, show_all=show_all)
    except MenuError as e:
        raise click.ClickException(str(e)) from e

    if not lines:
        click.echo("(empty menu)")
        return
    for line in lines:
        click.echo(line)


@cli.command()
@click.argument("menu_name", default="default")
@config_option
@route_option
@var_option
@role_option
@verbose_option
def breadcrumbs(
    menu_name: str,
    config_path: Path | None,
    route: str | None,
    variables: tuple[str, ...],
    roles: tuple[str, ...],
    verbose: bool,
) -> None:
    """Print the breadcrumb trail for the current route."""
    _setup_logging(verbose)
    config = _load_config(config_path)
    context = create_context(config, route, _parse_variables(variables), list(roles))

    try:
        menu = create_menu_builder(config).get_menu(menu_name)
        items = menu.get_breadcrumb_items(context)
    except MenuError as e:
        raise click.ClickException(str(e)) from e

    if not items:
        click.echo("No current item")
        return
    click.echo(" > ".join(item.title for item in items))


@cli.command()
@config_option
@click.option(
    "--host",
    default=None,
    help="Host to bind to (overrides config)",
)
@click.option(
    "--port",
    "-p",
    type=int,
    default=None,
    help="Port to bind to (overrides config)",
)
@verbose_option
def serve(
    config_path: Path | None,
    host: str | None,
    port: int | None,
    verbose: bool,
) -> None:
    """Start the menu preview server."""
    from menukit.server import run_server

    _setup_logging(verbose)
    config = _load_config(config_path).with_overrides(host=host, port=port)

    click.echo(f"Starting server on {config.server.host}:{config.server.port}")
    click.echo(f"Menus: {', '.join(config.menus) or '(none)'}")

    run_server(config)


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _load_config(config_path: Path | None) -> Config:
    try:
        return Config.load(config_path)
    except (FileNotFoundError, ValueError) as e:
        raise click.ClickException(str(e)) from e


def _parse_variables(variables: tuple[str, ...]) -> dict[str, str]:
    result: dict[str, str] = {}
    for entry in variables:
        name, sep, value = entry.partition("=")
        if not sep or not name:
            raise click.BadParameter(
                f"Expected NAME=VALUE, got {entry!r}", param_hint="--var"
            )
        result[name] = value
    return result


def _render_item(
    item: MenuItem,
    context: RequestContext,
    lines: list[str],
    *,
    depth: int,
    show_all: bool,
) -> None:
    if not show_all and not item.is_visible(context):
        return

    indent = "  " * depth
    if item.is_divider:
        lines.append(f"{indent}----")
    else:
        marker = _marker(item, context)
        lines.append(f"{indent}{marker} {item.title}{_url_suffix(item, context)}")

    for child in item.children:
        _render_item(child, context, lines, depth=depth + 1, show_all=show_all)


def _marker(item: MenuItem, context: RequestContext) -> str:
    if item.is_current(context):
        return "*"
    if item.is_on_current_path(context):
        return ">"
    if not item.is_enabled(context):
        return "x"
    return "-"


def _url_suffix(item: MenuItem, context: RequestContext) -> str:
    if item.is_section_header or not item.is_enabled(context):
        return ""
    return f"  ({item.get_url(context)})"

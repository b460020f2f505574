"""aiohttp server for menukit.

Application factory for the standalone menu preview server.
"""

from aiohttp import web

from menukit.api.menus import create_menu_routes
from menukit.app_keys import builder_key, config_key
from menukit.config import Config
from menukit.factory import create_menu_builder


def create_app(config: Config) -> web.Application:
    """Create aiohttp application.

    Args:
        config: Application configuration

    Returns:
        Configured aiohttp application
    """
    app = web.Application()

    app[config_key] = config
    app[builder_key] = create_menu_builder(config)

    app.router.add_routes(create_menu_routes())

    return app


def run_server(config: Config) -> None:
    """Run the server."""
    app = create_app(config)
    web.run_app(app, host=config.server.host, port=config.server.port)

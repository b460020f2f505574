"""Application keys for type-safe app configuration access."""

from aiohttp import web

from menukit.config import Config
from menukit.core.builder import MenuBuilder

builder_key = web.AppKey("builder", MenuBuilder)
config_key = web.AppKey("config", Config)

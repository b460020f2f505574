"""HTTP layer for menukit.

Provides JSON menu endpoints and the request context adapter for host
aiohttp applications.
"""

from .request_context import AiohttpRequestContext

__all__ = ["AiohttpRequestContext"]

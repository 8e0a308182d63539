"""
Middleware modules for the Streamo server.
"""

from .logfire_middleware import LogfireMiddleware

__all__ = ["LogfireMiddleware"]

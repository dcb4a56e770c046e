"""HTTP Server Infrastructure"""

from .staging_server import create_app

__all__ = ["create_app"]

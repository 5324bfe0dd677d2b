"""HTTP surface for the format detector."""

from .server import create_app

__all__ = ["create_app"]

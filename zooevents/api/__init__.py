"""HTTP adapter for zooevents."""

from .server import create_app, start_server

__all__ = ["create_app", "start_server"]

"""Loopback-only HTTP file server."""
from .app import create_app
from .main import FileServer, setup_logging

__all__ = ["create_app", "FileServer", "setup_logging"]

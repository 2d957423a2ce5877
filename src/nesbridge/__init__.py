"""Loopback session host and input bridge for a web-based NES emulator core."""

__version__ = "0.1.0"

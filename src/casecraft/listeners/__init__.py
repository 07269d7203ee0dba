"""Bundled listeners."""

from casecraft.listeners.console import ConsoleListener

__all__ = ["ConsoleListener"]

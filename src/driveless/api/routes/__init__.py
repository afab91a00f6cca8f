"""Route group exports."""

from . import admin, health, history

__all__ = ["admin", "health", "history"]

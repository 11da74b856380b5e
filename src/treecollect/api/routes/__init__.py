"""Route group exports."""

from . import admin, health, territories

__all__ = ["territories", "admin", "health"]

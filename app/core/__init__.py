"""Core module containing interfaces."""

from app.core.interfaces import ICoffeeRepository

__all__ = ["ICoffeeRepository"]

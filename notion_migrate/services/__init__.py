"""Service layer for the migration tool."""

from .mapper import PropertyMapper

__all__ = [
    "PropertyMapper",
]

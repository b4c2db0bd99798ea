"""Declarative record schemas with lazily loaded one-to-many associations."""

__version__ = "0.1.0"

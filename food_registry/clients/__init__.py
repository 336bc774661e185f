"""Client modules for storage backends."""

from food_registry.clients.sqlite_client import SqliteClient

__all__ = ["SqliteClient"]

"""
Record store package.

``Storage`` is the contract; ``MemoryStorage`` and ``SqliteStorage``
implement it.  ``build_storage`` picks an implementation from the
settings and ``get_storage`` is the FastAPI dependency that hands the
application's store to route handlers.
"""

from fastapi import Request

from ..core.config import Settings
from ..core.db import get_database_path
from .base import Storage
from .memory import MemoryStorage
from .sqlite import SqliteStorage

__all__ = ["Storage", "MemoryStorage", "SqliteStorage", "build_storage", "get_storage"]


def build_storage(settings: Settings) -> Storage:
    """Construct the store selected by ``settings.storage_backend``."""
    backend = settings.storage_backend.lower()
    if backend == "memory":
        return MemoryStorage()
    if backend == "sqlite":
        return SqliteStorage(get_database_path(settings.database_url))
    raise ValueError(f"Unknown storage backend: {settings.storage_backend}")


def get_storage(request: Request) -> Storage:
    """Return the store attached to the running application."""
    return request.app.state.storage

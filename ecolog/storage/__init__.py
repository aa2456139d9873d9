"""Storage backends for EcoLog."""

from ecolog.storage.base import Storage, create_storage, resolve_backend
from ecolog.storage.memory import InMemoryStorage

__all__ = [
    "Storage",
    "create_storage",
    "resolve_backend",
    "InMemoryStorage",
]

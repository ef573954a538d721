from .base import StorageProvider
from .inmemory import InMemoryProvider

__all__ = [
    "StorageProvider",
    "InMemoryProvider",
]

from abc import ABC, abstractmethod
from typing import Iterable

from ..schema import ParsedDocument


class StorageProvider(ABC):
    """Base class for backends that keep parsed documents.

    Providers receive fully parsed documents only; a document that fails to
    parse never reaches storage.
    """

    def __init__(self, *, index_name: str | None = None, **kwargs):
        self.index_name = index_name

    @abstractmethod
    def add(self, documents: Iterable["ParsedDocument"]):
        """Store documents, replacing any with the same key."""
        pass

    @abstractmethod
    def get(self, document_key: str) -> "ParsedDocument | None":
        """Get a stored document by its key."""
        pass

    @abstractmethod
    def delete(self, document_keys: Iterable[str]):
        """Delete documents by their keys."""
        pass

    @abstractmethod
    def clear(self):
        """Remove every stored document."""
        ...

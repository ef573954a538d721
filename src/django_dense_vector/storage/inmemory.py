from typing import Iterable

from ..schema import ParsedDocument
from .base import StorageProvider


class InMemoryProvider(StorageProvider):
    """Simple in-memory storage for testing."""

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.documents: dict[str, "ParsedDocument"] = {}

    def add(self, documents: Iterable["ParsedDocument"]):
        """Store documents in memory."""
        for document in documents:
            self.documents[document.document_key] = document

    def get(self, document_key: str) -> "ParsedDocument | None":
        return self.documents.get(document_key)

    def delete(self, document_keys: Iterable[str]):
        """Delete documents by their keys."""
        for key in document_keys:
            self.documents.pop(key, None)

    def clear(self):
        """Clear all stored documents."""
        self.documents.clear()

"""
Data structures for documents passing through a mapping.

A document is parsed once, producing a ParsedDocument holding the binary value
of each dense vector field keyed by the field's name. The original source is
kept alongside so values can be returned as they were supplied.
"""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .tokens import TokenParser


@dataclass(frozen=True)
class SourceToParse:
    """A document as supplied by a caller, before any field has seen it."""

    document_key: str
    source: Any


@dataclass(frozen=True)
class BinaryDocValue:
    """The encoded value of one field in one document."""

    name: str
    value: bytes


@dataclass
class ParsedDocument:
    """
    Represents a document after parsing.

    Each field key holds at most one value; callers check get_by_key before
    adding so an existing value is never overwritten.
    """

    document_key: str
    source: Any
    fields: dict[str, BinaryDocValue] = field(default_factory=dict)

    def get_by_key(self, key: str) -> BinaryDocValue | None:
        return self.fields.get(key)

    def add_with_key(self, key: str, value: BinaryDocValue):
        if key in self.fields:
            raise KeyError(f"Document [{self.document_key}] already has key [{key}]")
        self.fields[key] = value


@dataclass
class ParseContext:
    """State handed to a field while it parses its value out of a document."""

    parser: "TokenParser"
    source: SourceToParse
    doc: ParsedDocument

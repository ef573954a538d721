from .base import VectorIndex
from .encoding import blob_length, decode_magnitude, decode_vector, encode_vector
from .exceptions import (
    ArityError,
    ConfigurationError,
    DenseVectorError,
    DocumentParsingError,
    DuplicateValueError,
    UnsupportedFormatError,
    UnsupportedOperationError,
    VectorValueTypeError,
)
from .fetch import SourceValueFetcher
from .fields import DenseVectorField, DenseVectorFieldType
from .mapper import DocumentMapper
from .schema import ParsedDocument, SourceToParse
from .storage import InMemoryProvider, StorageProvider

__all__ = [
    "ArityError",
    "ConfigurationError",
    "DenseVectorError",
    "DenseVectorField",
    "DenseVectorFieldType",
    "DocumentMapper",
    "DocumentParsingError",
    "DuplicateValueError",
    "InMemoryProvider",
    "ParsedDocument",
    "SourceToParse",
    "SourceValueFetcher",
    "StorageProvider",
    "UnsupportedFormatError",
    "UnsupportedOperationError",
    "VectorIndex",
    "VectorValueTypeError",
    "blob_length",
    "decode_magnitude",
    "decode_vector",
    "encode_vector",
]

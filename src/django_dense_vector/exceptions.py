from django.core.exceptions import ImproperlyConfigured


class DenseVectorError(Exception):
    """Base class for all dense vector field errors."""


class ConfigurationError(DenseVectorError, ImproperlyConfigured):
    """A dense vector field was declared with invalid options."""


class DocumentParsingError(DenseVectorError, ValueError):
    """A document supplied an invalid value for a dense vector field."""

    def __init__(self, message: str, *, field_name: str, document_key: str | None):
        super().__init__(message)
        self.field_name = field_name
        self.document_key = document_key


class ArityError(DocumentParsingError):
    """The vector has more or fewer values than the field's dimensions."""


class VectorValueTypeError(DocumentParsingError, TypeError):
    """The vector contains something other than a number."""


class DuplicateValueError(DocumentParsingError):
    """A second value was supplied for the field within one document."""


class UnsupportedOperationError(DenseVectorError, NotImplementedError):
    """The field was used for something it does not support."""


class UnsupportedFormatError(UnsupportedOperationError):
    """A format was requested when fetching the field's values."""

import base64
import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, ClassVar, Iterator, Mapping

from django.db import models

from . import encoding
from .conf import (
    IndexVersion,
    get_current_index_version,
    parse_index_version,
    supports_norm_suffix,
)
from .exceptions import (
    ArityError,
    ConfigurationError,
    DuplicateValueError,
    UnsupportedFormatError,
    UnsupportedOperationError,
    VectorValueTypeError,
)
from .fetch import SourceValueFetcher
from .schema import BinaryDocValue, ParseContext, ParsedDocument, SourceToParse
from .tokens import Token, TokenParser
from .validators import validate_dims, validate_meta

logger = logging.getLogger(__name__)

CONTENT_TYPE = "dense_vector"


@dataclass(frozen=True)
class DenseVectorFieldType:
    """
    The declared shape of a dense vector field.

    Instances are immutable and safe to share between threads. Changing a
    field's options produces a new instance; the index version a field was
    created on is carried forward unchanged.
    """

    name: str | None
    dims: int
    index_version: IndexVersion
    meta: Mapping[str, str] = field(default_factory=dict, hash=False)

    is_searchable: ClassVar[bool] = False
    is_aggregatable: ClassVar[bool] = False
    has_doc_values: ClassVar[bool] = True

    def __post_init__(self):
        dims = validate_dims(self.dims, field_name=self.name)
        object.__setattr__(self, "dims", dims)
        meta = validate_meta(self.meta, field_name=self.name)
        object.__setattr__(self, "meta", MappingProxyType(meta))

    def type_name(self) -> str:
        return CONTENT_TYPE

    @property
    def norm_suffix(self) -> bool:
        """Whether blobs for this field end with the vector's magnitude."""
        return supports_norm_suffix(self.index_version)

    def blob_length(self) -> int:
        return encoding.blob_length(self.dims, self.norm_suffix)

    def term_query(self, value: Any):
        raise UnsupportedOperationError(
            f"Field [{self.name}] of type [{self.type_name()}] doesn't support queries"
        )

    def range_query(
        self,
        lower: Any = None,
        upper: Any = None,
        *,
        include_lower: bool = True,
        include_upper: bool = True,
    ):
        raise UnsupportedOperationError(
            f"Field [{self.name}] of type [{self.type_name()}] doesn't support queries"
        )

    def doc_value_format(self, format: str | None = None, time_zone: Any = None):
        raise UnsupportedOperationError(
            f"Field [{self.name}] of type [{self.type_name()}] doesn't support "
            "docvalue_fields or aggregations"
        )

    def aggregation_source(self):
        raise UnsupportedOperationError(
            f"Field [{self.name}] of type [{self.type_name()}] doesn't support "
            "docvalue_fields or aggregations"
        )


class DenseVectorField(models.Field):
    """
    A fixed length vector of floats, stored as a binary blob.

    The value is supplied as a sequence of exactly ``dims`` numbers and is
    encoded on save. The field cannot be queried, aggregated or formatted.

    Example:
        class Article(models.Model):
            embedding = DenseVectorField(dims=768)
    """

    description = "Dense vector of %(dims)s floats"
    parses_array_value = True

    def __init__(
        self,
        *args,
        dims: int | None = None,
        meta: Mapping[str, str] | None = None,
        index_version: IndexVersion | str | None = None,
        **kwargs,
    ):
        kwargs.setdefault("editable", False)
        super().__init__(*args, **kwargs)

        self.dims = dims
        self.meta = meta
        # Fields declared on a model only get their name in contribute_to_class
        if self.name is not None:
            self._validate_options()

        if index_version is None:
            index_version = get_current_index_version()
        self.index_version = parse_index_version(index_version)

        self._field_type: DenseVectorFieldType | None = None

    def _validate_options(self):
        self.dims = validate_dims(self.dims, field_name=self.name)
        self.meta = validate_meta(self.meta, field_name=self.name)

    def set_attributes_from_name(self, name):
        super().set_attributes_from_name(name)
        self._validate_options()

    @property
    def field_type(self) -> DenseVectorFieldType:
        # The name is only known once the field is attached to a model
        if self._field_type is None or self._field_type.name != self.name:
            self._field_type = DenseVectorFieldType(
                name=self.name,
                dims=self.dims,
                index_version=self.index_version,
                meta=self.meta,
            )
        return self._field_type

    def type_name(self) -> str:
        return CONTENT_TYPE

    def deconstruct(self):
        name, path, args, kwargs = super().deconstruct()
        if self.editable:
            kwargs["editable"] = True
        else:
            kwargs.pop("editable", None)
        kwargs["dims"] = self.dims
        if self.meta:
            kwargs["meta"] = dict(self.meta)
        kwargs["index_version"] = ".".join(str(part) for part in self.index_version)
        return name, path, args, kwargs

    def merge(
        self, *, dims: int | None = None, meta: Mapping[str, str] | None = None
    ) -> "DenseVectorField":
        """Build a new field from this one with updated options.

        The number of dimensions can't change once a field exists, and the
        new field keeps this field's index version.

        Raises:
            ConfigurationError: dims is invalid or differs from the current value
        """
        name, path, args, kwargs = self.deconstruct()

        if dims is not None:
            dims = validate_dims(dims, field_name=self.name)
            if dims != self.dims:
                raise ConfigurationError(
                    f"Mapper for [{self.name}] conflicts with existing mapper: "
                    f"Cannot update parameter [dims] from [{self.dims}] to [{dims}]"
                )

        if meta is not None:
            kwargs["meta"] = meta

        return self.__class__(*args, name=name, **kwargs)

    def get_internal_type(self):
        return "BinaryField"

    def get_lookup(self, lookup_name):
        raise UnsupportedOperationError(
            f"Field [{self.name}] of type [{CONTENT_TYPE}] doesn't support queries"
        )

    def get_transform(self, lookup_name):
        raise UnsupportedOperationError(
            f"Field [{self.name}] of type [{CONTENT_TYPE}] doesn't support queries"
        )

    def iter_vector_values(self, context: ParseContext) -> Iterator[float]:
        """Yield the values of the array the parser is positioned on.

        Fails as soon as more than ``dims`` values have been seen, without
        reading the rest of the array.
        """
        parser = context.parser
        document_key = context.source.document_key
        dims = self.dims

        dim = 0
        token = parser.next_token()
        while token is not Token.END_ARRAY:
            if dim >= dims:
                raise ArityError(
                    f"Field [{self.name}] of type [{CONTENT_TYPE}] of doc "
                    f"[{document_key}] has exceeded the number of dimensions "
                    f"[{dims}] defined in mapping",
                    field_name=self.name,
                    document_key=document_key,
                )
            if token is not Token.VALUE_NUMBER:
                found = token.name if token is not None else "end of input"
                raise VectorValueTypeError(
                    f"Field [{self.name}] of type [{CONTENT_TYPE}] of doc "
                    f"[{document_key}] expected a number at position [{dim}] "
                    f"but found [{found}]",
                    field_name=self.name,
                    document_key=document_key,
                )
            dim += 1
            yield parser.float_value()
            token = parser.next_token()

        if dim != dims:
            raise ArityError(
                f"Field [{self.name}] of type [{CONTENT_TYPE}] of doc "
                f"[{document_key}] has number of dimensions [{dim}] less than "
                f"defined in the mapping [{dims}]",
                field_name=self.name,
                document_key=document_key,
            )

    def parse(self, context: ParseContext):
        """Encode the array the parser is positioned on and add it to the document."""
        field_type = self.field_type
        document_key = context.source.document_key

        if context.parser.current_token is not Token.START_ARRAY:
            found = context.parser.current_token
            raise VectorValueTypeError(
                f"Field [{self.name}] of type [{CONTENT_TYPE}] of doc "
                f"[{document_key}] expected an array of numbers but found "
                f"[{found.name if found is not None else 'end of input'}]",
                field_name=self.name,
                document_key=document_key,
            )

        if context.doc.get_by_key(field_type.name) is not None:
            raise DuplicateValueError(
                f"Field [{self.name}] of type [{CONTENT_TYPE}] doesn't support "
                "indexing multiple values for the same field in the same document",
                field_name=self.name,
                document_key=document_key,
            )

        blob = encoding.encode_vector(
            self.iter_vector_values(context),
            dims=field_type.dims,
            norm_suffix=field_type.norm_suffix,
        )
        context.doc.add_with_key(
            field_type.name, BinaryDocValue(name=field_type.name, value=blob)
        )
        logger.debug(
            f"Encoded {field_type.dims} dimension vector for field {self.name} "
            f"of doc {document_key} ({len(blob)} bytes)"
        )

    def encode(self, value: Any, *, document_key: str | None = None) -> bytes:
        """Encode a single vector value outside of a document mapping."""
        parser = TokenParser.from_value(value)
        parser.next_token()
        source = SourceToParse(document_key=document_key, source=value)
        doc = ParsedDocument(document_key=document_key, source=value)
        self.parse(ParseContext(parser=parser, source=source, doc=doc))
        return doc.get_by_key(self.field_type.name).value

    def value_fetcher(self, format: str | None = None) -> SourceValueFetcher:
        """Get a fetcher returning this field's values as they were supplied.

        Raises:
            UnsupportedFormatError: a format was requested
        """
        if format is not None:
            raise UnsupportedFormatError(
                f"Field [{self.name}] of type [{CONTENT_TYPE}] doesn't support formats."
            )
        return SourceValueFetcher(self.name)

    def _check_blob(self, blob: bytes, document_key: str | None = None) -> bytes:
        expected = self.field_type.blob_length()
        if len(blob) != expected:
            raise ArityError(
                f"Field [{self.name}] of type [{CONTENT_TYPE}] of doc "
                f"[{document_key}] was given an encoded value of {len(blob)} bytes "
                f"but {expected} bytes are needed for [{self.dims}] dimensions",
                field_name=self.name,
                document_key=document_key,
            )
        return blob

    def pre_save(self, model_instance, add):
        value = getattr(model_instance, self.attname)
        document_key = None if model_instance.pk is None else str(model_instance.pk)
        if value is None:
            return value
        if isinstance(value, (bytes, bytearray, memoryview)):
            return self._check_blob(bytes(value), document_key)
        return self.encode(value, document_key=document_key)

    def get_prep_value(self, value):
        value = super().get_prep_value(value)
        if value is None:
            return value
        if isinstance(value, (bytes, bytearray, memoryview)):
            return self._check_blob(bytes(value))
        return self.encode(value)

    def get_db_prep_value(self, value, connection, prepared=False):
        value = super().get_db_prep_value(value, connection, prepared)
        if value is not None:
            return connection.Database.Binary(value)
        return value

    def from_db_value(self, value, expression, connection):
        if value is None:
            return value
        return bytes(value)

    def value_to_string(self, obj):
        """Binary data is serialized as base64"""
        value = self.value_from_object(obj)
        if value is None:
            return value
        if not isinstance(value, (bytes, bytearray, memoryview)):
            document_key = None if obj.pk is None else str(obj.pk)
            value = self.encode(value, document_key=document_key)
        return base64.b64encode(bytes(value)).decode("ascii")

    def to_python(self, value):
        # If it's a string, it should be base64-encoded data
        if isinstance(value, str):
            return base64.b64decode(value.encode("ascii"))
        return value

import logging
from typing import Any, Iterable, Mapping

from .exceptions import VectorValueTypeError
from .fields import CONTENT_TYPE, DenseVectorField
from .schema import ParseContext, ParsedDocument, SourceToParse
from .tokens import ObjectPairs, Token, TokenParser, loads

logger = logging.getLogger(__name__)


class DocumentMapper:
    """Parses whole documents for a set of dense vector fields.

    Fields are looked up by name among the top level keys of the document
    source. Keys without a mapped field are skipped.
    """

    def __init__(self, fields: Iterable[DenseVectorField]):
        self.fields: dict[str, DenseVectorField] = {}
        for field in fields:
            if not field.name:
                raise ValueError("Fields must be named before they can be mapped")
            if field.name in self.fields:
                raise ValueError(f"Field [{field.name}] is mapped more than once")
            self.fields[field.name] = field

    def get_field(self, name: str) -> DenseVectorField:
        if name not in self.fields:
            raise KeyError(f"Field '{name}' not found")
        return self.fields[name]

    def _decode_source(self, source: Any) -> Any:
        if isinstance(source, (str, bytes, bytearray)):
            return loads(source)
        return source

    def parse(self, source_to_parse: SourceToParse) -> ParsedDocument:
        """Parse a document, encoding a value for each mapped field present.

        Raises:
            DocumentParsingError: a field's value is invalid or repeated
            ValueError: the source is not an object
        """
        source = self._decode_source(source_to_parse.source)
        if not isinstance(source, (Mapping, ObjectPairs)):
            raise ValueError(
                f"Source of doc [{source_to_parse.document_key}] must be an object"
            )

        doc = ParsedDocument(document_key=source_to_parse.document_key, source=source)
        parser = TokenParser.from_value(source)
        context = ParseContext(parser=parser, source=source_to_parse, doc=doc)

        parser.next_token()  # START_OBJECT
        token = parser.next_token()
        while token is Token.FIELD_NAME:
            name = parser.current_value
            token = parser.next_token()
            field = self.fields.get(name)

            if field is None:
                parser.skip_children()
            elif token is Token.VALUE_NULL:
                pass
            elif token is Token.START_ARRAY:
                field.parse(context)
            else:
                raise VectorValueTypeError(
                    f"Field [{name}] of type [{CONTENT_TYPE}] of doc "
                    f"[{source_to_parse.document_key}] expected an array of "
                    f"numbers but found [{token.name}]",
                    field_name=name,
                    document_key=source_to_parse.document_key,
                )
            token = parser.next_token()

        logger.debug(
            f"Parsed doc {doc.document_key} with fields {sorted(doc.fields.keys())}"
        )
        return doc

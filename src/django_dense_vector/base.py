import logging
from typing import TYPE_CHECKING, Any, ClassVar, Iterable

from django.utils.text import slugify

from .exceptions import DocumentParsingError
from .mapper import DocumentMapper
from .schema import SourceToParse

if TYPE_CHECKING:
    from .fields import DenseVectorField
    from .schema import ParsedDocument
    from .storage.base import StorageProvider


logger = logging.getLogger(__name__)


class VectorIndex:
    """
    A set of dense vector fields backed by a storage provider.

    Subclasses declare their fields and where documents are stored:

        class ArticleIndex(VectorIndex):
            fields = [DenseVectorField(name="embedding", dims=768)]
            storage_provider = InMemoryProvider()
    """

    fields: ClassVar[list["DenseVectorField"]]
    storage_provider: ClassVar["StorageProvider"]

    @property
    def index_id(self):
        class_name_slug = slugify(self.__class__.__name__)
        return class_name_slug

    def __init__(self):
        self.mapper = DocumentMapper(self.fields)

        # Set the storage provider index name from the index ID
        self.storage_provider.index_name = f"{self.index_id}_index"

    def index_document(self, document_key: str, source: Any) -> "ParsedDocument":
        """
        Parse a document and hand it to the storage provider.

        Nothing is stored if any field fails to parse.

        Returns:
            The parsed document
        """
        try:
            doc = self.mapper.parse(
                SourceToParse(document_key=document_key, source=source)
            )
        except DocumentParsingError as e:
            logger.warning(f"Rejected document {document_key}: {e}")
            raise

        self.storage_provider.add([doc])
        logger.info(f"Stored document {document_key} in {self.index_id}")
        return doc

    def delete(self, document_keys: Iterable[str]):
        self.storage_provider.delete(document_keys)

    def fetch_values(
        self, document_key: str, field_name: str, format: str | None = None
    ) -> list[Any]:
        """Get a field's values for a stored document, as they were supplied.

        Raises:
            KeyError: the field or document doesn't exist
            UnsupportedFormatError: a format was requested
        """
        fetcher = self.mapper.get_field(field_name).value_fetcher(format)

        doc = self.storage_provider.get(document_key)
        if doc is None:
            raise KeyError(f"Document '{document_key}' not found")

        return fetcher.fetch_values(doc.source)

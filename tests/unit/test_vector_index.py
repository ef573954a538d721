import logging
from typing import ClassVar

import pytest

from django_dense_vector.base import VectorIndex
from django_dense_vector.exceptions import ArityError, UnsupportedFormatError
from django_dense_vector.fields import DenseVectorField
from django_dense_vector.storage.inmemory import InMemoryProvider


class ArticleIndex(VectorIndex):
    fields: ClassVar = [
        DenseVectorField(name="embedding", dims=3, index_version="7.10.0"),
    ]
    storage_provider: ClassVar = InMemoryProvider()


@pytest.fixture
def index():
    index = ArticleIndex()
    yield index
    index.storage_provider.clear()


class TestVectorIndex:
    def test_storage_index_name(self, index):
        assert index.index_id == "articleindex"
        assert index.storage_provider.index_name == "articleindex_index"

    def test_index_document(self, index):
        doc = index.index_document("a:1", {"title": "Dune", "embedding": [1, 2, 2]})

        assert index.storage_provider.get("a:1") is doc
        assert len(doc.get_by_key("embedding").value) == 16

    def test_failed_document_is_not_stored(self, index, caplog):
        with caplog.at_level(logging.WARNING, logger="django_dense_vector"):
            with pytest.raises(ArityError):
                index.index_document("a:1", {"embedding": [1, 2]})

        assert index.storage_provider.get("a:1") is None
        assert "Rejected document a:1" in caplog.text

    def test_fetch_values_returns_source(self, index):
        index.index_document("a:1", '{"embedding": [1, 2.5, 2]}')

        assert index.fetch_values("a:1", "embedding") == [[1, 2.5, 2]]

    def test_fetch_values_after_leading_null(self, index):
        index.index_document("a:1", '{"embedding": null, "embedding": [1, 2, 3]}')

        assert index.storage_provider.get("a:1").get_by_key("embedding") is not None
        assert index.fetch_values("a:1", "embedding") == [[1, 2, 3]]

    def test_fetch_values_with_format(self, index):
        index.index_document("a:1", {"embedding": [1, 2, 2]})

        with pytest.raises(UnsupportedFormatError):
            index.fetch_values("a:1", "embedding", format="binary")

    def test_fetch_values_missing_document(self, index):
        with pytest.raises(KeyError):
            index.fetch_values("a:2", "embedding")

    def test_fetch_values_missing_field(self, index):
        with pytest.raises(KeyError):
            index.fetch_values("a:1", "title")

    def test_delete(self, index):
        index.index_document("a:1", {"embedding": [1, 2, 2]})

        index.delete(["a:1"])

        assert index.storage_provider.get("a:1") is None


def test_index_with_mixed_index_versions():
    from testapp.indexes import MediaIndex

    index = MediaIndex()
    try:
        doc = index.index_document(
            "film:1", {"title_vector": [1, 2, 2], "cover_vector": [3, 4]}
        )
    finally:
        index.storage_provider.clear()

    assert len(doc.get_by_key("title_vector").value) == 16
    assert len(doc.get_by_key("cover_vector").value) == 8

"""Tests for search protocols and value types."""

from __future__ import annotations

from dataclasses import FrozenInstanceError

import pytest

from chatfs.search.protocols import EmbeddingProvider, VectorStore
from chatfs.search.types import CollectionInfo, SearchResult, VectorEntry, VectorSearchResult
from chatfs.types import FileHit, IndexResult, SearchResponse
from tests._fakes import FakeProvider

# ==================================================================
# Data types — frozen dataclasses
# ==================================================================


class TestVectorEntry:
    def test_construction(self):
        ve = VectorEntry(id="p1", vector=[0.1, 0.2, 0.3])
        assert ve.metadata == {}

    def test_frozen(self):
        ve = VectorEntry(id="p1", vector=[0.1])
        with pytest.raises(FrozenInstanceError):
            ve.id = "p2"  # type: ignore[misc]


class TestVectorSearchResult:
    def test_payload_accessors(self):
        r = VectorSearchResult(id="p1", score=0.9, metadata={"file_path": "/a.md", "content": "a"})
        assert r.file_path == "/a.md"
        assert r.content == "a"

    def test_missing_payload_defaults(self):
        r = VectorSearchResult(id="p1", score=0.9)
        assert r.file_path == "unknown"
        assert r.content == ""

    def test_non_string_payload_defaults(self):
        r = VectorSearchResult(id="p1", score=0.9, metadata={"file_path": 7, "content": None})
        assert r.file_path == "unknown"
        assert r.content == ""

    def test_to_search_result(self):
        r = VectorSearchResult(id="p1", score=0.75, metadata={"file_path": "/b.md", "content": "b"})
        assert SearchResult.from_vector_result(r) == SearchResult("/b.md", "b", 0.75)


class TestResultTypes:
    def test_collection_info_defaults(self):
        info = CollectionInfo(name="c", dimension=384)
        assert info.metric == "cosine"
        assert info.point_count == 0

    def test_file_hit_frozen(self):
        hit = FileHit(path="/a.md", snippet="a", score=0.8)
        with pytest.raises(FrozenInstanceError):
            hit.score = 1.0  # type: ignore[misc]

    def test_index_result_defaults(self):
        result = IndexResult(success=False, message="nope")
        assert (result.indexed, result.skipped, result.path) == (0, 0, None)

    def test_search_response_results_not_shared(self):
        a = SearchResponse(success=True, message="")
        b = SearchResponse(success=True, message="")
        a.results.append(FileHit("/a.md", "", 1.0))
        assert b.results == []


# ==================================================================
# Protocols — runtime checks
# ==================================================================


class TestProtocols:
    def test_fake_provider_is_embedding_provider(self):
        assert isinstance(FakeProvider(), EmbeddingProvider)

    def test_object_is_not_vector_store(self):
        assert not isinstance(object(), VectorStore)

    def test_provider_is_not_vector_store(self):
        assert not isinstance(FakeProvider(), VectorStore)

"""Tests for LocalVectorStore — in-process usearch HNSW vector store."""

from __future__ import annotations

import json
import math
import uuid
from typing import TYPE_CHECKING

import pytest

from chatfs.exceptions import DimensionMismatchError, StoreUnavailableError
from chatfs.search.protocols import VectorStore
from chatfs.search.stores.local import LocalVectorStore
from chatfs.search.types import CollectionInfo, VectorSearchResult
from tests._fakes import axis, unit

if TYPE_CHECKING:
    from pathlib import Path


def _meta(path: str, content: str = "content") -> dict:
    return {
        "file_path": path,
        "content": content,
        "file_name": path.rsplit("/", 1)[-1],
        "file_extension": "md",
    }


# ==================================================================
# Upsert
# ==================================================================


class TestUpsert:
    @pytest.mark.asyncio
    async def test_returns_fresh_uuid(self, small_store: LocalVectorStore):
        point_id = await small_store.upsert(axis(0), _meta("/a.md"))
        assert uuid.UUID(point_id)
        assert len(small_store) == 1

    @pytest.mark.asyncio
    async def test_same_path_creates_second_point(self, small_store: LocalVectorStore):
        first = await small_store.upsert(axis(0), _meta("/a.md", "v1"))
        second = await small_store.upsert(axis(0), _meta("/a.md", "v2"))
        assert first != second
        assert len(small_store) == 2
        contents = sorted(e.metadata["content"] for e in small_store.entries())
        assert contents == ["v1", "v2"]

    @pytest.mark.asyncio
    async def test_wrong_dimension_rejected(self, small_store: LocalVectorStore):
        with pytest.raises(DimensionMismatchError, match="requires 4"):
            await small_store.upsert([1.0, 0.0], _meta("/a.md"))
        assert len(small_store) == 0

    @pytest.mark.asyncio
    async def test_entries_round_trip_vectors(self, small_store: LocalVectorStore):
        await small_store.upsert(axis(2), _meta("/c.md"))
        (entry,) = small_store.entries()
        assert entry.vector == pytest.approx(axis(2))
        assert entry.metadata["file_path"] == "/c.md"


# ==================================================================
# Search
# ==================================================================


class TestSearch:
    @pytest.mark.asyncio
    async def test_empty_store_returns_empty(self, small_store: LocalVectorStore):
        assert await small_store.search(axis(0), k=5) == []

    @pytest.mark.asyncio
    async def test_exact_match_scores_one(self, small_store: LocalVectorStore):
        await small_store.upsert(axis(0), _meta("/a.md", "alpha"))
        results = await small_store.search(axis(0), k=5)
        assert len(results) == 1
        assert isinstance(results[0], VectorSearchResult)
        assert results[0].score == pytest.approx(1.0, abs=1e-4)
        assert results[0].file_path == "/a.md"
        assert results[0].content == "alpha"

    @pytest.mark.asyncio
    async def test_below_threshold_excluded(self, small_store: LocalVectorStore):
        await small_store.upsert(axis(0), _meta("/x.md"))
        await small_store.upsert(axis(1), _meta("/y.md"))
        # cos(query, x) ≈ 0.8, cos(query, y) ≈ 0.6
        query = unit([0.8, 0.6, 0.0, 0.0])
        results = await small_store.search(query, k=5)
        assert [r.file_path for r in results] == ["/x.md"]
        assert results[0].score == pytest.approx(0.8, abs=1e-3)

    @pytest.mark.asyncio
    async def test_ordered_by_descending_score(self, small_store: LocalVectorStore):
        await small_store.upsert(unit([0.75, 0.66, 0.0, 0.0]), _meta("/mid.md"))
        await small_store.upsert(axis(0), _meta("/best.md"))
        await small_store.upsert(unit([0.9, 0.44, 0.0, 0.0]), _meta("/good.md"))
        results = await small_store.search(axis(0), k=10)
        assert [r.file_path for r in results] == ["/best.md", "/good.md", "/mid.md"]
        scores = [r.score for r in results]
        assert scores == sorted(scores, reverse=True)
        assert all(s >= 0.7 for s in scores)

    @pytest.mark.asyncio
    async def test_limit_respected(self, small_store: LocalVectorStore):
        for i in range(6):
            await small_store.upsert(axis(0), _meta(f"/f{i}.md"))
        results = await small_store.search(axis(0), k=3)
        assert len(results) == 3

    @pytest.mark.asyncio
    @pytest.mark.parametrize("cosine", [0.7, 0.75, 0.8, 0.9])
    async def test_score_equal_to_threshold_is_kept(self, cosine: float):
        store = LocalVectorStore(dimension=4, score_threshold=cosine)
        await store.upsert(axis(0), _meta("/edge.md"))
        query = [cosine, math.sqrt(1.0 - cosine * cosine), 0.0, 0.0]
        results = await store.search(query, k=5)
        assert [r.file_path for r in results] == ["/edge.md"]
        assert results[0].score == pytest.approx(cosine, abs=1e-5)

    @pytest.mark.asyncio
    async def test_custom_threshold(self):
        store = LocalVectorStore(dimension=4, score_threshold=0.5)
        await store.upsert(axis(1), _meta("/y.md"))
        results = await store.search(unit([0.8, 0.6, 0.0, 0.0]), k=5)
        assert [r.file_path for r in results] == ["/y.md"]

    @pytest.mark.asyncio
    async def test_payload_returned_without_id(self, small_store: LocalVectorStore):
        point_id = await small_store.upsert(axis(0), _meta("/a.md"))
        (result,) = await small_store.search(axis(0))
        assert result.id == point_id
        assert set(result.metadata) == {"file_path", "content", "file_name", "file_extension"}

    @pytest.mark.asyncio
    async def test_wrong_query_dimension_rejected(self, small_store: LocalVectorStore):
        with pytest.raises(DimensionMismatchError):
            await small_store.search([1.0, 0.0, 0.0], k=1)


# ==================================================================
# Lifecycle and persistence
# ==================================================================


class TestLifecycle:
    def test_satisfies_protocol(self, small_store: LocalVectorStore):
        assert isinstance(small_store, VectorStore)

    @pytest.mark.asyncio
    async def test_info(self, small_store: LocalVectorStore):
        await small_store.upsert(axis(0), _meta("/a.md"))
        info = await small_store.info()
        assert info == CollectionInfo(name="small", dimension=4, metric="cosine", point_count=1)

    @pytest.mark.asyncio
    async def test_connect_without_data_dir_is_noop(self, small_store: LocalVectorStore):
        await small_store.connect()
        await small_store.connect()
        assert len(small_store) == 0

    @pytest.mark.asyncio
    async def test_close_saves_and_connect_loads(self, tmp_path: Path):
        store = LocalVectorStore(collection_name="notes", dimension=4, data_dir=str(tmp_path))
        await store.connect()
        point_id = await store.upsert(axis(3), _meta("/d.md", "delta"))
        await store.close()
        assert (tmp_path / "notes" / "search_meta.json").exists()

        reopened = LocalVectorStore(collection_name="notes", dimension=4, data_dir=str(tmp_path))
        await reopened.connect()
        assert len(reopened) == 1
        (result,) = await reopened.search(axis(3))
        assert result.id == point_id
        assert result.content == "delta"

        # New points after reload never reuse an old key
        await reopened.upsert(axis(3), _meta("/d.md", "delta again"))
        assert len(await reopened.search(axis(3))) == 2

    @pytest.mark.asyncio
    async def test_load_with_other_dimension_fails(self, tmp_path: Path):
        store = LocalVectorStore(collection_name="notes", dimension=4, data_dir=str(tmp_path))
        await store.upsert(axis(0), _meta("/a.md"))
        await store.close()

        other = LocalVectorStore(collection_name="notes", dimension=8, data_dir=str(tmp_path))
        with pytest.raises(DimensionMismatchError, match="has 4 dimensions"):
            await other.connect()

    @pytest.mark.asyncio
    async def test_sidecar_without_next_key_is_unavailable(self, tmp_path: Path):
        store = LocalVectorStore(collection_name="notes", dimension=4, data_dir=str(tmp_path))
        await store.upsert(axis(0), _meta("/a.md"))
        await store.close()

        meta_path = tmp_path / "notes" / "search_meta.json"
        sidecar = json.loads(meta_path.read_text())
        del sidecar["next_key"]
        meta_path.write_text(json.dumps(sidecar))

        reopened = LocalVectorStore(collection_name="notes", dimension=4, data_dir=str(tmp_path))
        with pytest.raises(StoreUnavailableError, match="next_key"):
            await reopened.connect()

    @pytest.mark.asyncio
    async def test_sidecar_not_an_object_is_unavailable(self, tmp_path: Path):
        (tmp_path / "notes").mkdir()
        (tmp_path / "notes" / "search_meta.json").write_text("[1, 2, 3]")
        store = LocalVectorStore(collection_name="notes", dimension=4, data_dir=str(tmp_path))
        with pytest.raises(StoreUnavailableError, match="JSON object"):
            await store.connect()

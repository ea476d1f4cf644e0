"""LocalVectorStore — in-process usearch HNSW vector store."""

from __future__ import annotations

import json
import logging
import threading
import uuid
from pathlib import Path
from typing import Any

import numpy as np
from usearch.index import Index

from chatfs.exceptions import (
    DimensionMismatchError,
    StoreQueryError,
    StoreUnavailableError,
    StoreWriteError,
)
from chatfs.search.types import CollectionInfo, VectorEntry, VectorSearchResult

logger = logging.getLogger(__name__)

_INDEX_FILE = "search.usearch"
_META_FILE = "search_meta.json"

# usearch distances are float32; a cosine equal to the threshold can land just below it
_SCORE_TOLERANCE = 1e-6


class LocalVectorStore:
    """In-process vector store backed by a usearch HNSW index.

    Implements the ``VectorStore`` protocol for development and for
    desktop use without a Qdrant server.  Scores are cosine similarity
    (``1 - cosine distance``).  When *data_dir* is given, the collection is
    loaded from ``<data_dir>/<collection_name>`` on :meth:`connect` and
    saved there on :meth:`close`.

    Index access is serialised with a :class:`threading.Lock`.
    """

    def __init__(
        self,
        *,
        collection_name: str = "local",
        dimension: int = 384,
        score_threshold: float = 0.7,
        data_dir: str | None = None,
    ) -> None:
        self._collection_name = collection_name
        self._dimension = dimension
        self._score_threshold = score_threshold
        self._data_dir = data_dir

        self._index = Index(ndim=dimension, metric="cos", dtype="f32")
        self._lock = threading.Lock()
        self._next_key: int = 0

        # usearch key → {"id": ..., **payload}
        self._key_to_meta: dict[int, dict[str, Any]] = {}

    # ------------------------------------------------------------------
    # VectorStore protocol
    # ------------------------------------------------------------------

    async def connect(self) -> None:
        """Load a previously saved collection from *data_dir*, if any."""
        directory = self._collection_dir()
        if directory is None or not (directory / _META_FILE).exists():
            return
        try:
            self.load(str(directory))
        except (OSError, ValueError, RuntimeError) as e:
            msg = f"Cannot load collection {self._collection_name!r} from {directory}: {e}"
            raise StoreUnavailableError(msg) from e

    async def upsert(self, vector: list[float], metadata: dict[str, Any]) -> str:
        """Insert one point under a fresh UUID."""
        self._check_dimension(vector)
        point_id = str(uuid.uuid4())

        with self._lock:
            key = self._next_key
            try:
                self._index.add(key, np.array(vector, dtype=np.float32))
            except (RuntimeError, ValueError) as e:
                msg = f"Failed to write point for {metadata.get('file_path', point_id)}: {e}"
                raise StoreWriteError(msg) from e
            self._next_key += 1
            self._key_to_meta[key] = {"id": point_id, **metadata}

        return point_id

    async def search(self, vector: list[float], *, k: int = 10) -> list[VectorSearchResult]:
        """Return up to *k* points scoring at or above the threshold."""
        self._check_dimension(vector)

        if len(self) == 0:
            return []

        query = np.array(vector, dtype=np.float32)
        with self._lock:
            try:
                matches = self._index.search(query, min(k, len(self._key_to_meta)))
            except (RuntimeError, ValueError) as e:
                msg = f"Search in collection {self._collection_name!r} failed: {e}"
                raise StoreQueryError(msg) from e

        results: list[VectorSearchResult] = []
        for match_key, distance in zip(
            matches.keys.tolist(), matches.distances.tolist(), strict=True
        ):
            meta = self._key_to_meta.get(int(match_key))
            if meta is None:
                continue

            score = 1.0 - distance
            if score < self._score_threshold - _SCORE_TOLERANCE:
                continue

            results.append(
                VectorSearchResult(
                    id=meta["id"],
                    score=score,
                    metadata={mk: mv for mk, mv in meta.items() if mk != "id"},
                )
            )

        results.sort(key=lambda r: r.score, reverse=True)
        return results[:k]

    async def info(self) -> CollectionInfo:
        """Describe the collection."""
        return CollectionInfo(
            name=self._collection_name,
            dimension=self._dimension,
            metric="cosine",
            point_count=len(self),
        )

    async def close(self) -> None:
        """Save to *data_dir* when one is configured."""
        directory = self._collection_dir()
        if directory is not None:
            self.save(str(directory))

    @property
    def collection_name(self) -> str:
        """Return the collection name."""
        return self._collection_name

    @property
    def dimension(self) -> int:
        """Return the collection dimensionality."""
        return self._dimension

    # ------------------------------------------------------------------
    # Local-specific methods
    # ------------------------------------------------------------------

    def entries(self) -> list[VectorEntry]:
        """Return every stored point (vectors read back from the index)."""
        entries: list[VectorEntry] = []
        with self._lock:
            for key, meta in self._key_to_meta.items():
                vector = self._index.get(key)
                entries.append(
                    VectorEntry(
                        id=meta["id"],
                        vector=[] if vector is None else vector.tolist(),
                        metadata={mk: mv for mk, mv in meta.items() if mk != "id"},
                    )
                )
        return entries

    def __len__(self) -> int:
        """Return the number of stored points."""
        return len(self._key_to_meta)

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def save(self, directory: str) -> None:
        """Persist the index and payloads to *directory*."""
        dir_path = Path(directory)
        dir_path.mkdir(parents=True, exist_ok=True)
        index_path = dir_path / _INDEX_FILE
        meta_path = dir_path / _META_FILE

        with self._lock:
            self._index.save(str(index_path))
            sidecar: dict[str, Any] = {
                "collection_name": self._collection_name,
                "dimension": self._dimension,
                "next_key": self._next_key,
                "key_to_meta": {str(k): v for k, v in self._key_to_meta.items()},
            }

        with meta_path.open("w") as f:
            json.dump(sidecar, f)
        logger.debug("Saved %d points to %s", len(sidecar["key_to_meta"]), dir_path)

    def load(self, directory: str) -> None:
        """Load a previously saved collection from *directory*."""
        dir_path = Path(directory)
        index_path = dir_path / _INDEX_FILE
        meta_path = dir_path / _META_FILE

        with meta_path.open() as f:
            sidecar = json.load(f)
        if not isinstance(sidecar, dict):
            msg = f"Sidecar {meta_path} is not a JSON object"
            raise ValueError(msg)

        stored_dimension = sidecar.get("dimension", self._dimension)
        if stored_dimension != self._dimension:
            msg = (
                f"Collection {self._collection_name!r} has {stored_dimension} dimensions, "
                f"configured for {self._dimension}"
            )
            raise DimensionMismatchError(msg)

        next_key = sidecar.get("next_key")
        if not isinstance(next_key, int) or isinstance(next_key, bool) or next_key < 0:
            msg = f"Sidecar {meta_path} has no valid next_key"
            raise ValueError(msg)

        with self._lock:
            self._index.load(str(index_path))
            self._next_key = next_key
            self._key_to_meta = {
                int(k_str): meta for k_str, meta in sidecar.get("key_to_meta", {}).items()
            }
        logger.debug("Loaded %d points from %s", len(self._key_to_meta), dir_path)

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _collection_dir(self) -> Path | None:
        if self._data_dir is None:
            return None
        return Path(self._data_dir) / self._collection_name

    def _check_dimension(self, vector: list[float]) -> None:
        if len(vector) != self._dimension:
            msg = (
                f"Vector has {len(vector)} dimensions, collection "
                f"{self._collection_name!r} requires {self._dimension}"
            )
            raise DimensionMismatchError(msg)

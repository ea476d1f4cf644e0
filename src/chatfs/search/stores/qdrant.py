"""QdrantVectorStore — Qdrant vector database backend."""

from __future__ import annotations

import logging
import math
import uuid
from typing import Any

from chatfs.exceptions import (
    DimensionMismatchError,
    StoreQueryError,
    StoreUnavailableError,
    StoreWriteError,
)
from chatfs.search.types import CollectionInfo, VectorSearchResult

try:
    from qdrant_client import AsyncQdrantClient, models

    _HAS_QDRANT = True
except ImportError:  # pragma: no cover
    AsyncQdrantClient = None  # type: ignore[assignment,misc]
    models = None  # type: ignore[assignment]
    _HAS_QDRANT = False

logger = logging.getLogger(__name__)

MEMORY_LOCATION = ":memory:"


class QdrantVectorStore:
    """Qdrant-backed store for a single cosine-distance collection.

    Usage::

        store = QdrantVectorStore(collection_name="chatfs_files")
        await store.connect()
        point_id = await store.upsert([0.1, ...], {"file_path": "/a.md", ...})
        results = await store.search([0.1, ...], k=5)
        await store.close()

    Pass ``url=":memory:"`` to run Qdrant's in-process local mode.
    """

    def __init__(
        self,
        *,
        collection_name: str,
        dimension: int = 384,
        url: str = "http://localhost:6333",
        api_key: str | None = None,
        score_threshold: float = 0.7,
        timeout: float = 10.0,
    ) -> None:
        if not _HAS_QDRANT:
            msg = (
                "qdrant-client is required for QdrantVectorStore. "
                "Install it with: pip install qdrant-client"
            )
            raise ImportError(msg)

        self._collection_name = collection_name
        self._dimension = dimension
        self._url = url
        self._api_key = api_key
        self._score_threshold = score_threshold
        self._timeout = timeout
        self._client: Any = None

    # ------------------------------------------------------------------
    # VectorStore protocol
    # ------------------------------------------------------------------

    async def connect(self) -> None:
        """Create the client and make sure the collection exists."""
        if self._client is None:
            if self._url == MEMORY_LOCATION:
                self._client = AsyncQdrantClient(location=MEMORY_LOCATION)
            else:
                self._client = AsyncQdrantClient(
                    url=self._url,
                    api_key=self._api_key,
                    timeout=math.ceil(self._timeout),
                )

        try:
            exists = await self._client.collection_exists(self._collection_name)
            if not exists:
                logger.info(
                    "Creating collection %r (%d dimensions, cosine)",
                    self._collection_name,
                    self._dimension,
                )
                await self._client.create_collection(
                    collection_name=self._collection_name,
                    vectors_config=models.VectorParams(
                        size=self._dimension,
                        distance=models.Distance.COSINE,
                    ),
                )
                return
            info = await self._client.get_collection(self._collection_name)
        except Exception as e:
            msg = f"Vector store at {self._url} is unavailable: {e}"
            raise StoreUnavailableError(msg) from e

        logger.debug("Collection %r already exists", self._collection_name)
        existing = self._existing_dimension(info)
        if existing is not None and existing != self._dimension:
            msg = (
                f"Collection {self._collection_name!r} has {existing} dimensions, "
                f"configured for {self._dimension}"
            )
            raise DimensionMismatchError(msg)

    async def upsert(self, vector: list[float], metadata: dict[str, Any]) -> str:
        """Insert one point under a fresh UUID."""
        self._check_dimension(vector)
        client = self._require_client()
        point_id = str(uuid.uuid4())

        try:
            await client.upsert(
                collection_name=self._collection_name,
                points=[models.PointStruct(id=point_id, vector=vector, payload=metadata)],
                wait=True,
            )
        except Exception as e:
            msg = f"Failed to write point for {metadata.get('file_path', point_id)}: {e}"
            raise StoreWriteError(msg) from e

        return point_id

    async def search(self, vector: list[float], *, k: int = 10) -> list[VectorSearchResult]:
        """Query the collection; the score threshold is applied by Qdrant."""
        self._check_dimension(vector)
        client = self._require_client()

        try:
            response = await client.query_points(
                collection_name=self._collection_name,
                query=vector,
                limit=k,
                score_threshold=self._score_threshold,
                with_payload=True,
            )
        except Exception as e:
            msg = f"Search in collection {self._collection_name!r} failed: {e}"
            raise StoreQueryError(msg) from e

        return [
            VectorSearchResult(
                id=str(point.id),
                score=point.score,
                metadata=dict(point.payload) if point.payload else {},
            )
            for point in response.points
        ]

    async def info(self) -> CollectionInfo:
        """Return the collection's dimensionality and point count."""
        client = self._require_client()
        try:
            info = await client.get_collection(self._collection_name)
        except Exception as e:
            msg = f"Cannot describe collection {self._collection_name!r}: {e}"
            raise StoreQueryError(msg) from e

        return CollectionInfo(
            name=self._collection_name,
            dimension=self._existing_dimension(info) or self._dimension,
            metric="cosine",
            point_count=info.points_count or 0,
        )

    async def close(self) -> None:
        """Close the async client."""
        if self._client is not None:
            await self._client.close()
            self._client = None

    @property
    def collection_name(self) -> str:
        """Return the collection name."""
        return self._collection_name

    @property
    def dimension(self) -> int:
        """Return the configured dimensionality."""
        return self._dimension

    @property
    def score_threshold(self) -> float:
        return self._score_threshold

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _check_dimension(self, vector: list[float]) -> None:
        if len(vector) != self._dimension:
            msg = (
                f"Vector has {len(vector)} dimensions, collection "
                f"{self._collection_name!r} requires {self._dimension}"
            )
            raise DimensionMismatchError(msg)

    @staticmethod
    def _existing_dimension(info: Any) -> int | None:
        """Read the vector size from a collection description, if unnamed."""
        vectors = getattr(info.config.params, "vectors", None)
        size = getattr(vectors, "size", None)
        return size if isinstance(size, int) else None

    def _require_client(self) -> Any:
        """Return the client, raising if not connected."""
        if self._client is None:
            msg = "Not connected. Call connect() first."
            raise RuntimeError(msg)
        return self._client

"""Search layer protocols — async-first interfaces for embedding and vector storage."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from chatfs.search.types import CollectionInfo, VectorSearchResult


@runtime_checkable
class EmbeddingProvider(Protocol):
    """Async-first protocol for text-to-vector embedding.

    Implementations convert text into fixed-dimension float vectors
    suitable for cosine similarity search.
    """

    async def embed(self, text: str) -> list[float]:
        """Embed a single text string into a vector."""
        ...

    @property
    def dimensions(self) -> int:
        """Number of dimensions in the embedding vectors."""
        ...

    @property
    def model_name(self) -> str:
        """Name of the embedding model."""
        ...


@runtime_checkable
class VectorStore(Protocol):
    """Async-first protocol for a single collection of file vectors.

    ``connect`` is idempotent and creates the collection when it does not
    exist.  ``upsert`` always inserts a new point; it never updates one.
    ``search`` only returns points scoring at or above the store's
    threshold, best first.
    """

    async def connect(self) -> None:
        """Open the backend and ensure the collection exists."""
        ...

    async def upsert(self, vector: list[float], metadata: dict[str, Any]) -> str:
        """Insert one point with a freshly generated ID and return the ID."""
        ...

    async def search(self, vector: list[float], *, k: int = 10) -> list[VectorSearchResult]:
        """Return up to *k* points most similar to *vector*."""
        ...

    async def info(self) -> CollectionInfo:
        """Describe the collection."""
        ...

    async def close(self) -> None:
        """Release connection / clean up resources."""
        ...

    @property
    def collection_name(self) -> str:
        """Name of the underlying collection."""
        ...

    @property
    def dimension(self) -> int:
        """Dimensionality every vector must have."""
        ...

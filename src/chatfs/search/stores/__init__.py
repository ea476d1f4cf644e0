"""Vector stores — VectorStore protocol implementations."""

from __future__ import annotations

from typing import TYPE_CHECKING

from chatfs.search.stores.local import LocalVectorStore

if TYPE_CHECKING:
    from chatfs.config import ChatFSConfig
    from chatfs.search.protocols import VectorStore

__all__ = [
    "LocalVectorStore",
    "create_vector_store",
    "open_vector_store",
]

# Optional stores — import-guarded, available only when deps are installed.
try:
    from chatfs.search.stores.qdrant import QdrantVectorStore

    __all__.append("QdrantVectorStore")
except ImportError:  # pragma: no cover
    pass


def create_vector_store(config: ChatFSConfig) -> VectorStore:
    """Build the (unconnected) store selected by ``config.store_backend``."""
    if config.store_backend == "local":
        return LocalVectorStore(
            collection_name=config.collection_name,
            dimension=config.dimensions,
            score_threshold=config.score_threshold,
            data_dir=config.data_dir,
        )

    from chatfs.search.stores.qdrant import QdrantVectorStore

    return QdrantVectorStore(
        collection_name=config.collection_name,
        dimension=config.dimensions,
        url=config.store_url,
        score_threshold=config.score_threshold,
        timeout=config.store_timeout,
    )


async def open_vector_store(config: ChatFSConfig) -> VectorStore:
    """Build and connect the store selected by *config*.

    Raises :class:`~chatfs.exceptions.StoreUnavailableError` when the
    backend cannot be reached.
    """
    store = create_vector_store(config)
    await store.connect()
    return store

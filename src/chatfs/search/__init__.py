"""Vector search layer — service, stores, embedding providers."""

from chatfs.search._service import SearchService, make_snippet
from chatfs.search.protocols import EmbeddingProvider, VectorStore
from chatfs.search.providers import FallbackEmbedding, HashEmbedding, create_embedding_provider
from chatfs.search.stores import LocalVectorStore, create_vector_store, open_vector_store
from chatfs.search.types import CollectionInfo, SearchResult, VectorEntry, VectorSearchResult

__all__ = [
    "CollectionInfo",
    "EmbeddingProvider",
    "FallbackEmbedding",
    "HashEmbedding",
    "LocalVectorStore",
    "SearchResult",
    "SearchService",
    "VectorEntry",
    "VectorSearchResult",
    "VectorStore",
    "create_embedding_provider",
    "create_vector_store",
    "make_snippet",
    "open_vector_store",
]

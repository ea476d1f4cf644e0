"""Embedding providers — protocol and implementations."""

from chatfs.search.protocols import EmbeddingProvider
from chatfs.search.providers.fallback import FallbackEmbedding, create_embedding_provider
from chatfs.search.providers.hashing import HashEmbedding, hash_vector

__all__ = [
    "EmbeddingProvider",
    "FallbackEmbedding",
    "HashEmbedding",
    "create_embedding_provider",
    "hash_vector",
]

# Optional providers — import-guarded, available only when deps are installed.
try:
    from chatfs.search.providers.openai import OpenAIEmbedding

    __all__.append("OpenAIEmbedding")
except ImportError:  # pragma: no cover
    pass

try:
    from chatfs.search.providers.sentence_transformers import SentenceTransformerEmbedding

    __all__.append("SentenceTransformerEmbedding")
except ImportError:  # pragma: no cover
    pass

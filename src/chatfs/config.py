"""ChatFSConfig — explicit configuration for providers, stores, and indexing."""

from __future__ import annotations

import os
from dataclasses import dataclass, field, replace
from typing import Any

from chatfs.scanner import DEFAULT_EXTENSIONS, DEFAULT_MAX_FILE_BYTES
from chatfs.search._service import DEFAULT_TOP_K, SNIPPET_LENGTH

DEFAULT_COLLECTION = "chatfs_files"
DEFAULT_DIMENSIONS = 384
DEFAULT_SCORE_THRESHOLD = 0.7
DEFAULT_QDRANT_URL = "http://localhost:6333"
DEFAULT_EMBEDDING_MODEL = "text-embedding-3-small"

_STORE_BACKENDS = ("qdrant", "local")
_EMBEDDING_BACKENDS = ("openai", "sentence-transformers")


@dataclass(frozen=True)
class ChatFSConfig:
    """Settings shared by the embedding provider, vector store, and indexer.

    Nothing in chatfs reads the process environment except
    :meth:`from_env`, so a config built by hand is fully self-contained.

    Attributes:
        collection_name: Name of the single collection all points live in.
        dimensions: Embedding dimensionality (fixed per collection).
        score_threshold: Minimum similarity for a point to be returned.
        store_backend: ``"qdrant"`` or ``"local"`` (in-process usearch).
        store_url: Qdrant endpoint, or ``":memory:"`` for Qdrant local mode.
        store_timeout: Seconds before a store call is abandoned.
        data_dir: Directory the local store is saved to / loaded from.
        openai_api_key: Credential for the remote embedding backend.  When
            absent the deterministic fallback is used for every call.
        embedding_backend: ``"openai"`` or ``"sentence-transformers"``.
        embedding_model: Model identifier sent to the embedding backend.
        embedding_timeout: Seconds before an embedding call is abandoned.
        max_file_bytes: Files larger than this are skipped.
        extensions: Allowed file extensions (without the leading dot).
        index_concurrency: Files embedded and upserted concurrently.
        top_k: Default number of search results.
        snippet_length: Characters of content kept in a search snippet.
    """

    collection_name: str = DEFAULT_COLLECTION
    dimensions: int = DEFAULT_DIMENSIONS
    score_threshold: float = DEFAULT_SCORE_THRESHOLD
    store_backend: str = "qdrant"
    store_url: str = DEFAULT_QDRANT_URL
    store_timeout: float = 10.0
    data_dir: str | None = None
    openai_api_key: str | None = field(default=None, repr=False)
    embedding_backend: str = "openai"
    embedding_model: str = DEFAULT_EMBEDDING_MODEL
    embedding_timeout: float = 30.0
    max_file_bytes: int = DEFAULT_MAX_FILE_BYTES
    extensions: frozenset[str] = DEFAULT_EXTENSIONS
    index_concurrency: int = 4
    top_k: int = DEFAULT_TOP_K
    snippet_length: int = SNIPPET_LENGTH

    def __post_init__(self) -> None:
        if self.dimensions < 1:
            msg = f"dimensions must be positive, got {self.dimensions}"
            raise ValueError(msg)
        if self.store_backend not in _STORE_BACKENDS:
            msg = f"Unknown store_backend {self.store_backend!r}; expected one of {_STORE_BACKENDS}"
            raise ValueError(msg)
        if self.embedding_backend not in _EMBEDDING_BACKENDS:
            msg = (
                f"Unknown embedding_backend {self.embedding_backend!r}; "
                f"expected one of {_EMBEDDING_BACKENDS}"
            )
            raise ValueError(msg)
        if self.index_concurrency < 1:
            msg = f"index_concurrency must be at least 1, got {self.index_concurrency}"
            raise ValueError(msg)
        if self.top_k < 1:
            msg = f"top_k must be at least 1, got {self.top_k}"
            raise ValueError(msg)
        # Accept any iterable of extensions but store an immutable set
        object.__setattr__(self, "extensions", frozenset(self.extensions))

    @classmethod
    def from_env(cls, **overrides: Any) -> ChatFSConfig:
        """Build a config from ``CHATFS_*`` / ``OPENAI_API_KEY`` variables.

        Keyword *overrides* win over the environment.
        """
        env: dict[str, Any] = {}
        mapping = {
            "CHATFS_COLLECTION": "collection_name",
            "CHATFS_STORE_BACKEND": "store_backend",
            "CHATFS_QDRANT_URL": "store_url",
            "CHATFS_DATA_DIR": "data_dir",
            "CHATFS_EMBEDDING_BACKEND": "embedding_backend",
            "CHATFS_EMBEDDING_MODEL": "embedding_model",
            "OPENAI_API_KEY": "openai_api_key",
        }
        for var, attr in mapping.items():
            value = os.environ.get(var)
            if value:
                env[attr] = value
        env.update(overrides)
        return cls(**env)

    def with_overrides(self, **changes: Any) -> ChatFSConfig:
        """Return a copy of this config with *changes* applied."""
        return replace(self, **changes)

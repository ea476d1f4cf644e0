"""SentenceTransformerEmbedding — local embedding provider (all-MiniLM-L6-v2)."""

from __future__ import annotations

import asyncio
import threading
from typing import Any

from chatfs.exceptions import EmbeddingError

try:
    from sentence_transformers import SentenceTransformer

    _HAS_SENTENCE_TRANSFORMERS = True
except ImportError:  # pragma: no cover
    _HAS_SENTENCE_TRANSFORMERS = False


class SentenceTransformerEmbedding:
    """Embedding provider backed by ``sentence-transformers``.

    The model is loaded lazily on the first call to :meth:`embed`.  The
    CPU-bound inference runs in a thread via :func:`asyncio.to_thread`.
    Loading or inference failures surface as
    :class:`~chatfs.exceptions.EmbeddingError`, as does a model whose
    output length differs from *dimensions*.
    """

    def __init__(self, model_name: str = "all-MiniLM-L6-v2", *, dimensions: int = 384) -> None:
        if not _HAS_SENTENCE_TRANSFORMERS:
            msg = (
                "sentence-transformers is required for SentenceTransformerEmbedding. "
                "Install it with: pip install chatfs[local]"
            )
            raise ImportError(msg)
        self._model_name = model_name
        self._dimensions = dimensions
        self._model: SentenceTransformer | None = None
        self._load_lock = threading.Lock()

    def _load_model(self) -> SentenceTransformer:
        if self._model is None:
            # Concurrent first calls run in worker threads; load only once
            with self._load_lock:
                if self._model is None:
                    self._model = SentenceTransformer(self._model_name)
        return self._model

    def embed_sync(self, text: str) -> list[float]:
        """Embed a single text string (synchronous)."""
        try:
            model = self._load_model()
            result: Any = model.encode([text])
            vector = [float(v) for v in result[0].tolist()]
        except Exception as e:
            msg = f"Local embedding with {self._model_name!r} failed: {e}"
            raise EmbeddingError(msg) from e

        if len(vector) != self._dimensions:
            msg = (
                f"Model {self._model_name!r} produced {len(vector)} dimensions, "
                f"expected {self._dimensions}"
            )
            raise EmbeddingError(msg)
        return vector

    async def embed(self, text: str) -> list[float]:
        """Embed a single text string in a thread pool."""
        return await asyncio.to_thread(self.embed_sync, text)

    @property
    def dimensions(self) -> int:
        """Return the embedding dimensionality."""
        return self._dimensions

    @property
    def model_name(self) -> str:
        """Return the model name."""
        return self._model_name

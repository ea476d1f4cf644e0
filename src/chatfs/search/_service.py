"""SearchService — read path wiring EmbeddingProvider + VectorStore."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from chatfs.search.types import SearchResult
from chatfs.types import FileHit

if TYPE_CHECKING:
    from chatfs.search.protocols import EmbeddingProvider, VectorStore

logger = logging.getLogger(__name__)

DEFAULT_TOP_K = 10
SNIPPET_LENGTH = 100
ELLIPSIS = "..."


def make_snippet(content: str, length: int = SNIPPET_LENGTH) -> str:
    """Return the first *length* characters of *content*.

    ``"..."`` is appended only when something was cut off.
    """
    if len(content) <= length:
        return content
    return content[:length] + ELLIPSIS


class SearchService:
    """Answers natural-language queries against the indexed collection.

    The query is embedded with the same provider used for indexing, the
    store returns the nearest points above its score threshold, and each
    result is shaped into a :class:`~chatfs.types.FileHit` with a
    bounded snippet.  Store failures propagate as
    :class:`~chatfs.exceptions.StoreQueryError` (a ``SearchError``).
    """

    def __init__(
        self,
        store: VectorStore,
        embedding_provider: EmbeddingProvider,
        *,
        snippet_length: int = SNIPPET_LENGTH,
    ) -> None:
        self._store = store
        self._embedding_provider = embedding_provider
        self._snippet_length = snippet_length

    async def search(self, query: str, top_k: int | None = None) -> list[FileHit]:
        """Return up to *top_k* (default 10) files most similar to *query*."""
        results = await self.search_full(query, top_k)
        return [
            FileHit(
                path=r.file_path,
                snippet=make_snippet(r.content, self._snippet_length),
                score=r.score,
            )
            for r in results
        ]

    async def search_full(self, query: str, top_k: int | None = None) -> list[SearchResult]:
        """Like :meth:`search` but keep each file's full content."""
        k = DEFAULT_TOP_K if top_k is None else top_k
        if k < 1:
            msg = f"top_k must be at least 1, got {k}"
            raise ValueError(msg)

        vector = await self._embedding_provider.embed(query)
        vs_results = await self._store.search(vector, k=k)
        logger.debug("Query %r matched %d files", query, len(vs_results))

        return [SearchResult.from_vector_result(r) for r in vs_results[:k]]

    @property
    def store(self) -> VectorStore:
        """Return the underlying :class:`VectorStore`."""
        return self._store

    @property
    def embedding_provider(self) -> EmbeddingProvider:
        """Return the :class:`EmbeddingProvider`."""
        return self._embedding_provider

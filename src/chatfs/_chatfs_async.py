"""ChatFSAsync — async entry points for indexing and searching a directory."""

from __future__ import annotations

import logging
import os
from typing import TYPE_CHECKING

from chatfs.config import ChatFSConfig
from chatfs.exceptions import ChatFSError, ConfigurationError, SearchError, StoreError
from chatfs.indexer import Indexer, IndexStats
from chatfs.scanner import DirectoryScanner
from chatfs.search._service import SearchService
from chatfs.search.providers import create_embedding_provider
from chatfs.search.stores import create_vector_store
from chatfs.types import IndexResult, SearchResponse

if TYPE_CHECKING:
    from chatfs.search.protocols import EmbeddingProvider, VectorStore
    from chatfs.search.types import CollectionInfo

logger = logging.getLogger(__name__)


class ChatFSAsync:
    """Async facade over the indexing and search pipelines.

    Both capabilities are injectable; when omitted they are built from
    *config* (which itself defaults to :meth:`ChatFSConfig.from_env`).
    The store is opened on first use and kept for the facade's lifetime.
    The indexer and search service are rebuilt per call and hold no state.

    Entry points never raise for pipeline failures: they return a result
    with ``success=False`` and a human-readable ``message``.

    Usage::

        async with ChatFSAsync(ChatFSConfig(store_backend="local")) as fs:
            await fs.index_directory("/path/to/notes")
            response = await fs.search("how do I configure logging?")
    """

    def __init__(
        self,
        config: ChatFSConfig | None = None,
        *,
        embedding_provider: EmbeddingProvider | None = None,
        store: VectorStore | None = None,
    ) -> None:
        self._config = config if config is not None else ChatFSConfig.from_env()
        self._embedding_provider = embedding_provider
        self._store = store
        self._connected = False
        self._closed = False

    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------

    async def index_directory(self, path: str | os.PathLike[str]) -> IndexResult:
        """Index every eligible file under *path*.

        Skipped files do not make the run fail; only an unreachable store,
        a bad root path, or a dimensionality mismatch does.
        """
        display = os.fspath(path)
        try:
            indexer = Indexer(
                await self._open_store(),
                self._provider(),
                scanner=DirectoryScanner(
                    extensions=self._config.extensions,
                    max_file_bytes=self._config.max_file_bytes,
                ),
                concurrency=self._config.index_concurrency,
            )
            stats = await indexer.index_directory(path)
        except (FileNotFoundError, NotADirectoryError) as e:
            return IndexResult(success=False, message=str(e), path=display)
        except (StoreError, ConfigurationError) as e:
            logger.error("Indexing %s failed: %s", display, e, exc_info=True)
            return IndexResult(success=False, message=f"Indexing failed: {e}", path=display)

        return IndexResult(
            success=True,
            message=self._summary(stats, display),
            path=display,
            indexed=stats.indexed,
            skipped=stats.skipped,
        )

    async def search(self, query: str, top_k: int | None = None) -> SearchResponse:
        """Return the indexed files most similar to *query*, best first."""
        k = self._config.top_k if top_k is None else top_k
        if k < 1:
            return SearchResponse(
                success=False, message=f"top_k must be at least 1, got {k}", query=query
            )

        try:
            service = SearchService(
                await self._open_store(),
                self._provider(),
                snippet_length=self._config.snippet_length,
            )
            hits = await service.search(query, k)
        except (SearchError, StoreError, ConfigurationError) as e:
            logger.error("Search for %r failed: %s", query, e, exc_info=True)
            return SearchResponse(success=False, message=f"Search failed: {e}", query=query)

        return SearchResponse(
            success=True,
            message=f"Found {len(hits)} matching files",
            query=query,
            results=hits,
        )

    async def info(self) -> CollectionInfo:
        """Describe the collection (raises on store failures)."""
        store = await self._open_store()
        return await store.info()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def close(self) -> None:
        """Close the store and the embedding provider."""
        if self._closed:
            return
        self._closed = True

        if self._store is not None and self._connected:
            try:
                await self._store.close()
            except ChatFSError:
                logger.warning("Failed to close vector store", exc_info=True)
        close = getattr(self._embedding_provider, "close", None)
        if close is not None:
            await close()

    async def __aenter__(self) -> ChatFSAsync:
        return self

    async def __aexit__(self, exc_type: object, exc_val: object, exc_tb: object) -> None:
        await self.close()

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def config(self) -> ChatFSConfig:
        return self._config

    @property
    def store(self) -> VectorStore | None:
        return self._store

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    async def _open_store(self) -> VectorStore:
        if self._closed:
            msg = "ChatFS is closed"
            raise RuntimeError(msg)
        if self._store is None:
            self._store = create_vector_store(self._config)
        if not self._connected:
            await self._store.connect()
            self._connected = True
        return self._store

    def _provider(self) -> EmbeddingProvider:
        if self._embedding_provider is None:
            self._embedding_provider = create_embedding_provider(self._config)
        return self._embedding_provider

    @staticmethod
    def _summary(stats: IndexStats, path: str) -> str:
        return f"Indexed {stats.indexed} files (skipped {stats.skipped}) from {path}"

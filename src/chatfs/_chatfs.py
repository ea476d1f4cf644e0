"""ChatFS — synchronous entry points backed by a private event loop."""

from __future__ import annotations

import asyncio
import threading
from typing import TYPE_CHECKING, Any

from chatfs._chatfs_async import ChatFSAsync

if TYPE_CHECKING:
    import os

    from chatfs.config import ChatFSConfig
    from chatfs.search.protocols import EmbeddingProvider, VectorStore
    from chatfs.search.types import CollectionInfo
    from chatfs.types import IndexResult, SearchResponse


class ChatFS:
    """Synchronous wrapper around :class:`ChatFSAsync`.

    Runs the async pipelines on a private event loop in a daemon thread,
    so a GUI shell or plain script can call :meth:`index_directory` and
    :meth:`search` without managing asyncio, even from inside a running
    loop.  Each call blocks until its work is finished.

    Usage::

        with ChatFS() as fs:
            result = fs.index_directory("/path/to/notes")
            print(result.message)
            for hit in fs.search("release checklist").results:
                print(hit.score, hit.path)
    """

    def __init__(
        self,
        config: ChatFSConfig | None = None,
        *,
        embedding_provider: EmbeddingProvider | None = None,
        store: VectorStore | None = None,
    ) -> None:
        self._closed = False
        self._async = ChatFSAsync(config, embedding_provider=embedding_provider, store=store)

        self._loop = asyncio.new_event_loop()
        self._thread = threading.Thread(target=self._loop.run_forever, daemon=True)
        self._thread.start()

    # ------------------------------------------------------------------
    # Entry points (sync)
    # ------------------------------------------------------------------

    def index_directory(self, path: str | os.PathLike[str]) -> IndexResult:
        """Index every eligible file under *path*."""
        return self._run(self._async.index_directory(path))

    def search(self, query: str, top_k: int | None = None) -> SearchResponse:
        """Return the indexed files most similar to *query*."""
        return self._run(self._async.search(query, top_k))

    def info(self) -> CollectionInfo:
        """Describe the collection."""
        return self._run(self._async.info())

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def close(self) -> None:
        """Close the pipelines, stop the event loop and join the thread."""
        if self._closed:
            return
        self._closed = True

        try:
            self._run(self._async.close())
        finally:
            self._loop.call_soon_threadsafe(self._loop.stop)
            self._thread.join(timeout=5)

    def __enter__(self) -> ChatFS:
        return self

    def __exit__(self, exc_type: object, exc_val: object, exc_tb: object) -> None:
        self.close()

    @property
    def config(self) -> ChatFSConfig:
        return self._async.config

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _run(self, coro: Any) -> Any:
        """Submit *coro* to the private loop and block for the result."""
        future = asyncio.run_coroutine_threadsafe(coro, self._loop)
        return future.result()

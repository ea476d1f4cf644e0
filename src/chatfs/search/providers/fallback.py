"""FallbackEmbedding — primary backend with a deterministic local fallback."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from chatfs.exceptions import ConfigurationError
from chatfs.search.providers.hashing import HashEmbedding

if TYPE_CHECKING:
    from chatfs.config import ChatFSConfig
    from chatfs.search.protocols import EmbeddingProvider

logger = logging.getLogger(__name__)

DEFAULT_LOCAL_MODEL = "all-MiniLM-L6-v2"


class FallbackEmbedding:
    """Embed with *primary* when available, otherwise with *fallback*.

    Any error or timeout from the primary is logged and answered by the
    fallback, so :meth:`embed` never fails because of a backend.  Without a
    primary every call goes straight to the fallback.
    """

    def __init__(
        self,
        primary: EmbeddingProvider | None,
        fallback: EmbeddingProvider,
        *,
        timeout: float | None = None,
    ) -> None:
        if primary is not None and primary.dimensions != fallback.dimensions:
            msg = (
                f"Primary provider {primary.model_name!r} has {primary.dimensions} "
                f"dimensions but fallback has {fallback.dimensions}"
            )
            raise ConfigurationError(msg)
        self._primary = primary
        self._fallback = fallback
        self._timeout = timeout

    async def embed(self, text: str) -> list[float]:
        """Embed *text*, falling back on any primary failure."""
        if self._primary is not None:
            try:
                return await asyncio.wait_for(self._primary.embed(text), self._timeout)
            except TimeoutError:
                logger.warning(
                    "Embedding via %s timed out after %ss, using fallback",
                    self._primary.model_name,
                    self._timeout,
                )
            except Exception as e:
                logger.warning(
                    "Embedding via %s failed, using fallback: %s", self._primary.model_name, e
                )
        return await self._fallback.embed(text)

    @property
    def primary(self) -> EmbeddingProvider | None:
        return self._primary

    @property
    def fallback(self) -> EmbeddingProvider:
        return self._fallback

    @property
    def dimensions(self) -> int:
        """Return the embedding dimensionality."""
        return self._fallback.dimensions

    @property
    def model_name(self) -> str:
        """Return the primary model name, or the fallback's when there is none."""
        if self._primary is not None:
            return self._primary.model_name
        return self._fallback.model_name

    async def close(self) -> None:
        """Close the primary provider if it holds a client."""
        close = getattr(self._primary, "close", None)
        if close is not None:
            await close()


def create_embedding_provider(config: ChatFSConfig) -> FallbackEmbedding:
    """Build the provider described by *config*.

    ``embedding_backend="openai"`` uses :class:`OpenAIEmbedding` only when
    an API key is configured; ``"sentence-transformers"`` uses a local
    model.  Either way the deterministic :class:`HashEmbedding` backs it.
    """
    fallback = HashEmbedding(config.dimensions)
    primary: EmbeddingProvider | None = None

    if config.embedding_backend == "sentence-transformers":
        from chatfs.config import DEFAULT_EMBEDDING_MODEL
        from chatfs.search.providers.sentence_transformers import SentenceTransformerEmbedding

        # The default model name targets the remote backend
        model = config.embedding_model
        if model == DEFAULT_EMBEDDING_MODEL:
            model = DEFAULT_LOCAL_MODEL
        primary = SentenceTransformerEmbedding(model, dimensions=config.dimensions)
    elif config.openai_api_key:
        from chatfs.search.providers.openai import OpenAIEmbedding

        primary = OpenAIEmbedding(
            api_key=config.openai_api_key,
            model=config.embedding_model,
            dimensions=config.dimensions,
            timeout=config.embedding_timeout,
        )
    else:
        logger.debug("No embedding credential configured; using %s", fallback.model_name)

    return FallbackEmbedding(primary, fallback, timeout=config.embedding_timeout)

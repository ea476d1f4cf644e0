"""OpenAIEmbedding — async embedding provider backed by OpenAI's API."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from chatfs.exceptions import EmbeddingError

try:
    from openai import AsyncOpenAI, OpenAIError

    _HAS_OPENAI = True
except ImportError:  # pragma: no cover
    _HAS_OPENAI = False

if TYPE_CHECKING:
    from openai import AsyncOpenAI as AsyncOpenAIType

logger = logging.getLogger(__name__)

# Models that accept a ``dimensions`` request parameter.
_SHORTENABLE_PREFIX = "text-embedding-3"


class OpenAIEmbedding:
    """Async embedding provider backed by the OpenAI Embeddings API.

    Every transport error, non-success status, timeout, or malformed
    response is raised as :class:`~chatfs.exceptions.EmbeddingError`; the
    caller decides whether to fall back.  Responses are checked to contain
    one vector of exactly *dimensions* numbers.

    Requires the ``openai`` package.
    """

    def __init__(
        self,
        *,
        api_key: str,
        model: str = "text-embedding-3-small",
        dimensions: int = 384,
        base_url: str | None = None,
        max_retries: int = 0,
        timeout: float = 30.0,
    ) -> None:
        if not _HAS_OPENAI:
            msg = (
                "openai is required for OpenAIEmbedding. "
                "Install it with: pip install openai"
            )
            raise ImportError(msg)
        if not api_key:
            msg = "No OpenAI API key provided."
            raise ValueError(msg)

        self._model = model
        self._dimensions = dimensions
        self._client: AsyncOpenAIType = AsyncOpenAI(
            api_key=api_key,
            base_url=base_url,
            max_retries=max_retries,
            timeout=timeout,
        )

    # ------------------------------------------------------------------
    # EmbeddingProvider protocol
    # ------------------------------------------------------------------

    async def embed(self, text: str) -> list[float]:
        """Embed a single text string via the OpenAI API."""
        kwargs: dict[str, Any] = {
            "input": text,
            "model": self._model,
        }
        if self._model.startswith(_SHORTENABLE_PREFIX):
            kwargs["dimensions"] = self._dimensions

        try:
            response = await self._client.embeddings.create(**kwargs)
        except OpenAIError as e:
            logger.debug("OpenAI embedding request with %s failed: %s", self._model, e)
            msg = f"OpenAI embedding request failed: {e}"
            raise EmbeddingError(msg) from e

        return self._parse(response)

    @property
    def dimensions(self) -> int:
        """Return the embedding dimensionality."""
        return self._dimensions

    @property
    def model_name(self) -> str:
        """Return the model name."""
        return self._model

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def close(self) -> None:
        """Close the underlying httpx client."""
        await self._client.close()

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _parse(self, response: Any) -> list[float]:
        """Extract the single vector from *response*, validating its shape."""
        data = getattr(response, "data", None)
        if not data:
            msg = "Invalid embedding response: no data"
            raise EmbeddingError(msg)

        item = min(data, key=lambda e: getattr(e, "index", 0))
        raw = getattr(item, "embedding", None)
        if not isinstance(raw, list):
            msg = "Invalid embedding response: embedding is not a list"
            raise EmbeddingError(msg)
        if len(raw) != self._dimensions:
            msg = (
                f"Invalid embedding response: expected {self._dimensions} "
                f"dimensions, got {len(raw)}"
            )
            raise EmbeddingError(msg)
        if not all(isinstance(v, (int, float)) and not isinstance(v, bool) for v in raw):
            msg = "Invalid embedding response: non-numeric component"
            raise EmbeddingError(msg)

        return [float(v) for v in raw]

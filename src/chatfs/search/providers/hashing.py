"""HashEmbedding — deterministic, dependency-free fallback embedding."""

from __future__ import annotations

import hashlib
import math

_MULTIPLIER = 1103515245
_INCREMENT = 12345
_MASK = (1 << 64) - 1
_BUCKETS = 1000


def hash_vector(text: str, dimensions: int) -> list[float]:
    """Return a reproducible unit vector derived from *text*.

    A 64-bit seed is taken from the SHA-256 digest of *text* and stepped
    through a linear congruential recurrence; each step contributes one
    component in ``[-0.5, 0.5)``.  The result is L2-normalised unless its
    norm is exactly zero, in which case it is returned as-is.
    """
    seed = int.from_bytes(hashlib.sha256(text.encode("utf-8")).digest()[:8], "big")

    vector: list[float] = []
    for _ in range(dimensions):
        seed = (seed * _MULTIPLIER + _INCREMENT) & _MASK
        vector.append((seed % _BUCKETS) / _BUCKETS - 0.5)

    norm = math.sqrt(sum(x * x for x in vector))
    if norm == 0.0:
        return vector
    return [x / norm for x in vector]


class HashEmbedding:
    """Embedding provider computing :func:`hash_vector` locally.

    Identical text always yields an identical vector.  This is for
    development and for use when no remote backend is configured; it
    carries no semantic meaning beyond exact-text equality.
    """

    def __init__(self, dimensions: int = 384) -> None:
        if dimensions < 1:
            msg = f"dimensions must be positive, got {dimensions}"
            raise ValueError(msg)
        self._dimensions = dimensions

    def embed_sync(self, text: str) -> list[float]:
        """Embed a single text string (synchronous)."""
        return hash_vector(text, self._dimensions)

    async def embed(self, text: str) -> list[float]:
        """Embed a single text string."""
        return self.embed_sync(text)

    @property
    def dimensions(self) -> int:
        """Return the embedding dimensionality."""
        return self._dimensions

    @property
    def model_name(self) -> str:
        """Return the model name."""
        return "hash-lcg"

"""Search layer data types — value objects for points, results, and collections."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

# ------------------------------------------------------------------
# Vector data
# ------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class VectorEntry:
    """A stored point: identifier, vector, and payload.

    Attributes:
        id: Unique identifier generated at write time.
        vector: Embedding vector.
        metadata: Payload stored alongside the vector (``file_path``,
            ``content``, ``file_name``, ``file_extension``).
    """

    id: str
    vector: list[float]
    metadata: dict[str, Any] = field(default_factory=dict)


# ------------------------------------------------------------------
# Results
# ------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class VectorSearchResult:
    """A single result from a VectorStore search.

    Attributes:
        id: Identifier of the matched point.
        score: Similarity score (higher is more similar).
        metadata: Payload stored with the point.
    """

    id: str
    score: float
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def file_path(self) -> str:
        value = self.metadata.get("file_path")
        return value if isinstance(value, str) else "unknown"

    @property
    def content(self) -> str:
        value = self.metadata.get("content")
        return value if isinstance(value, str) else ""


@dataclass(frozen=True, slots=True)
class SearchResult:
    """A matched file with its full content, before snippet shaping.

    Attributes:
        file_path: Path of the matched file.
        content: Full text stored at index time.
        score: Cosine similarity in the store's native scale.
    """

    file_path: str
    content: str
    score: float

    @classmethod
    def from_vector_result(cls, result: VectorSearchResult) -> SearchResult:
        return cls(file_path=result.file_path, content=result.content, score=result.score)


# ------------------------------------------------------------------
# Collection information
# ------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class CollectionInfo:
    """Information about the collection a store addresses.

    Attributes:
        name: Collection name.
        dimension: Vector dimensionality.
        metric: Distance metric.
        point_count: Number of points stored.
    """

    name: str
    dimension: int
    metric: str = "cosine"
    point_count: int = 0

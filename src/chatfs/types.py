"""Result types returned by the chatfs entry points."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True)
class FileHit:
    """A single file matched by a search.

    Attributes:
        path: Path of the matched file, as stored at index time.
        snippet: Bounded-length prefix of the file's content.
        score: Cosine similarity in the store's native scale.
    """

    path: str
    snippet: str
    score: float


@dataclass
class IndexResult:
    """Result of an index-directory operation."""

    success: bool
    message: str
    path: str | None = None
    indexed: int = 0
    skipped: int = 0


@dataclass
class SearchResponse:
    """Result of a search operation."""

    success: bool
    message: str
    query: str = ""
    results: list[FileHit] = field(default_factory=list)

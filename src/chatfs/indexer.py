"""Indexer — write path wiring DirectoryScanner, EmbeddingProvider, VectorStore."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from chatfs.exceptions import ConfigurationError
from chatfs.scanner import DirectoryScanner

if TYPE_CHECKING:
    import os

    from chatfs.scanner import FileRecord, ScanEntry
    from chatfs.search.protocols import EmbeddingProvider, VectorStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class FileOutcome:
    """What happened to one visited file.

    Attributes:
        path: File path.
        indexed: True when a point was written for the file.
        point_id: ID of the written point.
        reason: Why the file was skipped, when it was.
    """

    path: str
    indexed: bool
    point_id: str | None = None
    reason: str | None = None

    @classmethod
    def skipped(cls, path: str, reason: str) -> FileOutcome:
        return cls(path=path, indexed=False, reason=reason)


@dataclass
class IndexStats:
    """Counts accumulated over one indexing run.

    ``indexed + skipped`` equals the number of non-directory entries
    visited.  ``failures`` maps skipped paths to their reason.
    """

    indexed: int = 0
    skipped: int = 0
    failures: dict[str, str] = field(default_factory=dict)

    def record(self, outcome: FileOutcome) -> IndexStats:
        if outcome.indexed:
            self.indexed += 1
        else:
            self.skipped += 1
            self.failures[outcome.path] = outcome.reason or "skipped"
        return self

    @property
    def total(self) -> int:
        return self.indexed + self.skipped


def file_metadata(record: FileRecord) -> dict[str, Any]:
    """Build the payload stored with a file's vector."""
    return {
        "file_path": record.path,
        "content": record.content,
        "file_name": record.file_name,
        "file_extension": record.file_extension,
    }


class Indexer:
    """Populates a collection from a directory on a best-effort basis.

    Every eligible file is embedded and written as a new point.  A file
    that cannot be read, is filtered out, fails to embed, or fails to write
    is counted as skipped and the run continues.  Only fatal errors (such
    as a :class:`~chatfs.exceptions.DimensionMismatchError`) escape.

    Up to *concurrency* files are embedded and written at once.
    """

    def __init__(
        self,
        store: VectorStore,
        embedding_provider: EmbeddingProvider,
        *,
        scanner: DirectoryScanner | None = None,
        concurrency: int = 4,
    ) -> None:
        if concurrency < 1:
            msg = f"concurrency must be at least 1, got {concurrency}"
            raise ValueError(msg)
        self._store = store
        self._embedding_provider = embedding_provider
        self._scanner = scanner or DirectoryScanner()
        self._concurrency = concurrency

    async def index_directory(self, root: str | os.PathLike[str]) -> IndexStats:
        """Index every eligible file under *root* and return the counts."""
        logger.info("Starting to index directory: %s", root)
        stats = IndexStats()
        pending: list[FileRecord] = []

        for entry in self._scanner.walk(root):
            if entry.record is None:
                stats.record(self._skip_entry(entry))
                continue
            pending.append(entry.record)
            if len(pending) >= self._concurrency:
                await self._flush(pending, stats)
                pending = []

        if pending:
            await self._flush(pending, stats)

        logger.info("Indexing complete! Indexed: %d, Skipped: %d", stats.indexed, stats.skipped)
        return stats

    async def index_file(self, record: FileRecord) -> FileOutcome:
        """Embed and store a single file, reporting failure as an outcome."""
        try:
            vector = await self._embedding_provider.embed(record.content)
        except ConfigurationError:
            raise
        except Exception as e:
            logger.warning("Failed to generate embedding for %s: %s", record.path, e)
            return FileOutcome.skipped(record.path, f"embedding failed: {e}")

        try:
            point_id = await self._store.upsert(vector, file_metadata(record))
        except ConfigurationError:
            raise
        except Exception as e:
            logger.warning("Failed to add embedding for %s: %s", record.path, e)
            return FileOutcome.skipped(record.path, f"write failed: {e}")

        logger.debug("Indexed: %s", record.path)
        return FileOutcome(path=record.path, indexed=True, point_id=point_id)

    @property
    def scanner(self) -> DirectoryScanner:
        return self._scanner

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    async def _flush(self, records: list[FileRecord], stats: IndexStats) -> None:
        # Let every file in the window finish before re-raising a fatal error
        outcomes = await asyncio.gather(
            *(self.index_file(r) for r in records), return_exceptions=True
        )
        for outcome in outcomes:
            if isinstance(outcome, BaseException):
                raise outcome
            stats.record(outcome)

    @staticmethod
    def _skip_entry(entry: ScanEntry) -> FileOutcome:
        reason = entry.skip_reason.value if entry.skip_reason is not None else "skipped"
        if entry.detail:
            reason = f"{reason}: {entry.detail}"
        logger.debug("Skipping %s (%s)", entry.path, reason)
        return FileOutcome.skipped(entry.path, reason)

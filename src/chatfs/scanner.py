"""DirectoryScanner — walk a file tree and decide which files are indexable."""

from __future__ import annotations

import logging
import os
import stat
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

logger = logging.getLogger(__name__)

DEFAULT_EXTENSIONS: frozenset[str] = frozenset(
    {"rs", "js", "ts", "py", "md", "txt", "json", "toml", "yaml", "yml"}
)
DEFAULT_MAX_FILE_BYTES = 50_000
HIDDEN_PREFIX = "."


class SkipReason(Enum):
    """Why a visited file was not indexed."""

    HIDDEN = "hidden"
    EXTENSION = "extension"
    TOO_LARGE = "too_large"
    UNREADABLE = "unreadable"


@dataclass(frozen=True, slots=True)
class FileRecord:
    """An eligible file and its full text content.

    Attributes:
        path: Absolute, normalised path of the file.
        content: Decoded UTF-8 text.
        size_bytes: Length of the raw file content in bytes.
    """

    path: str
    content: str
    size_bytes: int

    @property
    def file_name(self) -> str:
        return os.path.basename(self.path)

    @property
    def file_extension(self) -> str:
        return _extension(self.file_name)


@dataclass(frozen=True, slots=True)
class ScanEntry:
    """One non-directory entry visited during a walk.

    Exactly one of *record* and *skip_reason* is set.
    """

    path: str
    record: FileRecord | None = None
    skip_reason: SkipReason | None = None
    detail: str | None = None

    @property
    def eligible(self) -> bool:
        return self.record is not None


def _extension(name: str) -> str:
    """Return the extension of *name* without the dot, or ``""``."""
    _, ext = os.path.splitext(name)
    return ext[1:] if ext else ""


class DirectoryScanner:
    """Walks a directory tree and filters files for indexing.

    Traversal is unbounded in depth and follows symbolic links.  Each
    directory (identified by device and inode) is entered at most once, so
    a link pointing back up the tree cannot loop forever.

    Filters, in order: hidden base name, extension allow-list, size
    ceiling, readability as UTF-8 text.  Hidden *directories* are still
    descended into; only file names are checked.
    """

    def __init__(
        self,
        *,
        extensions: Iterable[str] = DEFAULT_EXTENSIONS,
        max_file_bytes: int = DEFAULT_MAX_FILE_BYTES,
    ) -> None:
        self._extensions = frozenset(extensions)
        self._max_file_bytes = max_file_bytes

    @property
    def extensions(self) -> frozenset[str]:
        return self._extensions

    @property
    def max_file_bytes(self) -> int:
        return self._max_file_bytes

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def walk(self, root: str | os.PathLike[str]) -> Iterator[ScanEntry]:
        """Yield a :class:`ScanEntry` for every non-directory entry under *root*.

        Raises ``FileNotFoundError`` / ``NotADirectoryError`` immediately if
        *root* is not an existing directory.  The returned iterator is lazy
        and each call starts a fresh traversal.
        """
        root_path = os.path.abspath(os.fspath(root))
        if not os.path.exists(root_path):
            msg = f"Path does not exist: {root_path}"
            raise FileNotFoundError(msg)
        if not os.path.isdir(root_path):
            msg = f"Path is not a directory: {root_path}"
            raise NotADirectoryError(msg)
        return self._walk(root_path)

    def scan(self, root: str | os.PathLike[str]) -> Iterator[FileRecord]:
        """Yield only the eligible files under *root*."""
        return (entry.record for entry in self.walk(root) if entry.record is not None)

    def check(self, path: str) -> ScanEntry:
        """Apply every filter to a single file *path*."""
        name = os.path.basename(path)

        if name.startswith(HIDDEN_PREFIX):
            return ScanEntry(path=path, skip_reason=SkipReason.HIDDEN)

        if _extension(name) not in self._extensions:
            return ScanEntry(path=path, skip_reason=SkipReason.EXTENSION)

        try:
            st = os.stat(path)
            if not stat.S_ISREG(st.st_mode):
                return ScanEntry(
                    path=path,
                    skip_reason=SkipReason.UNREADABLE,
                    detail="not a regular file",
                )
            if st.st_size > self._max_file_bytes:
                return self._too_large(path, st.st_size)
            with open(path, "rb") as f:
                data = f.read(self._max_file_bytes + 1)
        except OSError as e:
            return ScanEntry(path=path, skip_reason=SkipReason.UNREADABLE, detail=str(e))

        # The file may have grown between stat() and read()
        if len(data) > self._max_file_bytes:
            return self._too_large(path, len(data))

        try:
            content = data.decode("utf-8")
        except UnicodeDecodeError as e:
            return ScanEntry(path=path, skip_reason=SkipReason.UNREADABLE, detail=str(e))

        return ScanEntry(
            path=path,
            record=FileRecord(path=path, content=content, size_bytes=len(data)),
        )

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _walk(self, root: str) -> Iterator[ScanEntry]:
        seen: set[tuple[int, int]] = set()
        self._first_visit(root, seen)

        for dirpath, dirnames, filenames in os.walk(
            root, followlinks=True, onerror=self._on_walk_error
        ):
            dirnames[:] = sorted(
                d for d in dirnames if self._first_visit(os.path.join(dirpath, d), seen)
            )
            for name in sorted(filenames):
                yield self.check(os.path.join(dirpath, name))

    @staticmethod
    def _first_visit(path: str, seen: set[tuple[int, int]]) -> bool:
        """Record *path*'s identity; return False if it was already seen."""
        try:
            st = os.stat(path)
        except OSError:
            return False
        identity = (st.st_dev, st.st_ino)
        if identity in seen:
            logger.debug("Skipping already visited directory %s", path)
            return False
        seen.add(identity)
        return True

    @staticmethod
    def _on_walk_error(error: OSError) -> None:
        logger.warning("Cannot list directory %s: %s", error.filename, error)

    @staticmethod
    def _too_large(path: str, size: int) -> ScanEntry:
        return ScanEntry(
            path=path,
            skip_reason=SkipReason.TOO_LARGE,
            detail=f"{size} bytes",
        )

"""Shared fixtures for chatfs tests."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from chatfs.search.providers.hashing import HashEmbedding
from chatfs.search.stores.local import LocalVectorStore

if TYPE_CHECKING:
    from pathlib import Path

_DIM = 384


@pytest.fixture
def hash_provider() -> HashEmbedding:
    return HashEmbedding(_DIM)


@pytest.fixture
def local_store() -> LocalVectorStore:
    """A 384-dimensional in-process store."""
    return LocalVectorStore(collection_name="test", dimension=_DIM)


@pytest.fixture
def small_store() -> LocalVectorStore:
    """A 4-dimensional in-process store for hand-built vectors."""
    return LocalVectorStore(collection_name="small", dimension=4)


@pytest.fixture
def sample_tree(tmp_path: Path) -> Path:
    """One indexable file next to a hidden, a binary, and an oversized one."""
    root = tmp_path / "tree"
    root.mkdir()
    (root / "a.md").write_text("# Notes\n" + "semantic search over files. " * 18)
    (root / ".hidden.md").write_text("hidden")
    (root / "b.bin").write_bytes(b"\x00\x01\x02")
    (root / "big.txt").write_text("x" * 60_000)
    return root

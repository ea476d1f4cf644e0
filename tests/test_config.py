"""Tests for ChatFSConfig."""

from __future__ import annotations

import dataclasses

import pytest

from chatfs.config import ChatFSConfig
from chatfs.scanner import DEFAULT_EXTENSIONS


class TestDefaults:
    def test_values(self):
        config = ChatFSConfig()
        assert config.collection_name == "chatfs_files"
        assert config.dimensions == 384
        assert config.score_threshold == 0.7
        assert config.store_backend == "qdrant"
        assert config.store_url == "http://localhost:6333"
        assert config.max_file_bytes == 50_000
        assert config.extensions == DEFAULT_EXTENSIONS
        assert config.top_k == 10
        assert config.snippet_length == 100
        assert config.openai_api_key is None

    def test_frozen(self):
        with pytest.raises(dataclasses.FrozenInstanceError):
            ChatFSConfig().dimensions = 8  # type: ignore[misc]

    def test_api_key_not_in_repr(self):
        assert "sk-secret" not in repr(ChatFSConfig(openai_api_key="sk-secret"))

    def test_extensions_frozen(self):
        config = ChatFSConfig(extensions=["md", "txt"])
        assert config.extensions == frozenset({"md", "txt"})


class TestValidation:
    @pytest.mark.parametrize(
        ("field", "value", "match"),
        [
            ("dimensions", 0, "dimensions"),
            ("store_backend", "pinecone", "store_backend"),
            ("embedding_backend", "cohere", "embedding_backend"),
            ("index_concurrency", 0, "index_concurrency"),
            ("top_k", 0, "top_k"),
        ],
    )
    def test_rejects(self, field: str, value: object, match: str):
        with pytest.raises(ValueError, match=match):
            ChatFSConfig(**{field: value})


class TestFromEnv:
    def test_reads_environment(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("CHATFS_COLLECTION", "notes")
        monkeypatch.setenv("CHATFS_STORE_BACKEND", "local")
        monkeypatch.setenv("CHATFS_DATA_DIR", "/var/lib/chatfs")
        monkeypatch.setenv("OPENAI_API_KEY", "sk-env")

        config = ChatFSConfig.from_env()

        assert config.collection_name == "notes"
        assert config.store_backend == "local"
        assert config.data_dir == "/var/lib/chatfs"
        assert config.openai_api_key == "sk-env"

    def test_empty_values_ignored(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("OPENAI_API_KEY", "")
        monkeypatch.delenv("CHATFS_QDRANT_URL", raising=False)
        config = ChatFSConfig.from_env()
        assert config.openai_api_key is None
        assert config.store_url == "http://localhost:6333"

    def test_overrides_win(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("CHATFS_QDRANT_URL", "http://qdrant:6333")
        config = ChatFSConfig.from_env(store_url=":memory:", top_k=3)
        assert config.store_url == ":memory:"
        assert config.top_k == 3

    def test_invalid_environment_rejected(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("CHATFS_STORE_BACKEND", "sqlite")
        with pytest.raises(ValueError, match="store_backend"):
            ChatFSConfig.from_env()


def test_with_overrides():
    base = ChatFSConfig()
    changed = base.with_overrides(collection_name="other", score_threshold=0.5)
    assert changed.collection_name == "other"
    assert changed.score_threshold == 0.5
    assert base.collection_name == "chatfs_files"

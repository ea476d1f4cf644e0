"""chatfs: semantic search over a directory of text files.

Index a file tree into a vector collection, then ask for the files most
relevant to a natural-language query.
"""

__version__ = "0.1.0"

from chatfs._chatfs import ChatFS
from chatfs._chatfs_async import ChatFSAsync
from chatfs.config import ChatFSConfig
from chatfs.exceptions import (
    ChatFSError,
    ConfigurationError,
    DimensionMismatchError,
    EmbeddingError,
    SearchError,
    StoreError,
    StoreQueryError,
    StoreUnavailableError,
    StoreWriteError,
)
from chatfs.indexer import FileOutcome, Indexer, IndexStats
from chatfs.scanner import DEFAULT_EXTENSIONS, DirectoryScanner, FileRecord, ScanEntry, SkipReason
from chatfs.search import (
    EmbeddingProvider,
    FallbackEmbedding,
    HashEmbedding,
    LocalVectorStore,
    SearchResult,
    SearchService,
    VectorStore,
    create_embedding_provider,
    open_vector_store,
)
from chatfs.types import FileHit, IndexResult, SearchResponse

__all__ = [
    "DEFAULT_EXTENSIONS",
    "ChatFS",
    "ChatFSAsync",
    "ChatFSConfig",
    "ChatFSError",
    "ConfigurationError",
    "DimensionMismatchError",
    "DirectoryScanner",
    "EmbeddingError",
    "EmbeddingProvider",
    "FallbackEmbedding",
    "FileHit",
    "FileOutcome",
    "FileRecord",
    "HashEmbedding",
    "IndexResult",
    "IndexStats",
    "Indexer",
    "LocalVectorStore",
    "ScanEntry",
    "SearchError",
    "SearchResponse",
    "SearchResult",
    "SearchService",
    "SkipReason",
    "StoreError",
    "StoreQueryError",
    "StoreUnavailableError",
    "StoreWriteError",
    "VectorStore",
    "__version__",
    "create_embedding_provider",
    "open_vector_store",
]

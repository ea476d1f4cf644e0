"""Custom exception hierarchy for chatfs."""


class ChatFSError(Exception):
    """Base exception for all chatfs errors."""


class EmbeddingError(ChatFSError):
    """Raised when an embedding backend fails or returns a malformed vector."""


class ConfigurationError(ChatFSError):
    """Raised when components are wired with incompatible settings."""


class DimensionMismatchError(ConfigurationError):
    """Raised when a vector's length does not match the collection dimensionality."""


class SearchError(ChatFSError):
    """Raised when a search cannot be answered."""


class StoreError(ChatFSError):
    """Base exception for vector store backend failures."""


class StoreUnavailableError(StoreError):
    """Raised when the vector store backend cannot be reached at open time."""


class StoreWriteError(StoreError):
    """Raised when a point cannot be written to the collection."""


class StoreQueryError(StoreError, SearchError):
    """Raised when a similarity query against the collection fails."""

"""
Custom Exceptions

This module defines the exceptions raised by the store, the key codec
and the service layer. Endpoints translate them into HTTP status codes:
- InvalidURLError -> 400
- ShortKeyNotFoundError (and CollectionMissingError) -> 404
- StorageError, EncodeError -> 500
"""


class URLCutterException(Exception):
    """Base exception for URL cutter service."""
    pass


class InvalidURLError(URLCutterException):
    """Raised when URL validation fails."""

    def __init__(self, url: str, reason: str = "Invalid URL format"):
        self.url = url
        self.reason = reason
        super().__init__(f"{reason}: {url}")


class ShortKeyNotFoundError(URLCutterException):
    """Raised when a short key is not found in the store."""

    def __init__(self, key: str, message: str = None):
        self.key = key
        super().__init__(message or f"Short key '{key}' not found")


class CollectionMissingError(ShortKeyNotFoundError):
    """Raised on lookup before anything was ever written to the collection."""

    def __init__(self, key: str, collection: str):
        self.collection = collection
        super().__init__(
            key, f"Collection '{collection}' does not exist (looking up '{key}')"
        )


class StorageError(URLCutterException):
    """Raised when store operations fail."""

    def __init__(self, message: str, original_error: Exception = None):
        self.original_error = original_error
        super().__init__(f"Storage error: {message}")


class EncodeError(URLCutterException):
    """Raised when a value cannot be converted to or from a short key."""

    def __init__(self, value, reason: str = "cannot encode"):
        self.value = value
        self.reason = reason
        super().__init__(f"{reason}: {value!r}")

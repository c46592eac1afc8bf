"""
Exception hierarchy raised by the store, query and pagination layers.

Every public operation raises a subclass of StoreError so callers can tell
bad input, missing data, undecodable data and store failures apart.
"""
from typing import Optional


class StoreError(Exception):
    """Base class for all firerepo errors."""


class InvalidArgumentError(StoreError, ValueError):
    """Raised locally for bad input before the store is contacted."""


class LimitExceededError(InvalidArgumentError):
    """Raised when a batch holds more items than the store accepts."""


class InvalidDestinationError(InvalidArgumentError):
    """Raised when a query destination is not a list of record instances."""


class DataNotFoundError(StoreError, LookupError):
    """Raised when the requested record does not exist."""

    def __init__(self, collection: str, doc_id: str):
        super().__init__(f"data not found: {collection}/{doc_id}")
        self.collection = collection
        self.doc_id = doc_id


class DecodeError(StoreError):
    """Raised when a stored record cannot be converted into the requested type."""


class TransportError(StoreError):
    """
    Wraps any failure reported by the Firestore client.

    The original exception is kept as __cause__.
    """

    def __init__(self, message: str, collection: Optional[str] = None, doc_id: Optional[str] = None):
        super().__init__(message)
        self.collection = collection
        self.doc_id = doc_id

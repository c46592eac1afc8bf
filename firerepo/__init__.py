from typing import Optional

from firerepo.errors import (
    DataNotFoundError,
    DecodeError,
    InvalidArgumentError,
    InvalidDestinationError,
    LimitExceededError,
    StoreError,
    TransportError,
)
from firerepo.models import Identifiable, Record
from firerepo.services.base import BaseService
from firerepo.services.query import Criteria, Operator, Predicate, QueryExecutor
from firerepo.services.store import RecordStore, get_client
from firerepo.utils.destination import Destination
from firerepo.utils.paginator import Pager


def create_store(project_id: Optional[str] = None, root_path: Optional[str] = None) -> RecordStore:
    """
    Build a RecordStore backed by a new Firestore client.

    Credentials are resolved by the client (GOOGLE_APPLICATION_CREDENTIALS
    or the ambient service account).
    """
    return RecordStore(get_client(project_id), root_path=root_path)


__all__ = [
    'BaseService',
    'Criteria',
    'DataNotFoundError',
    'DecodeError',
    'Destination',
    'Identifiable',
    'InvalidArgumentError',
    'InvalidDestinationError',
    'LimitExceededError',
    'Operator',
    'Pager',
    'Predicate',
    'QueryExecutor',
    'Record',
    'RecordStore',
    'StoreError',
    'TransportError',
    'create_store',
    'get_client',
]

from typing import Any, Generic, List, Mapping, Optional, Sequence, Type, TypeVar

from firerepo.errors import DataNotFoundError
from firerepo.services.query import Criteria, Predicate, QueryExecutor
from firerepo.services.store import RecordStore

T = TypeVar('T')


class BaseService(Generic[T]):
    """
    Base service class providing typed CRUD and query operations for one collection.

    Subclasses pass the Record model and collection name they work with.
    """

    def __init__(self, model_class: Type[T], collection_name: str, store: RecordStore):
        """
        Initialize the service.

        Args:
            model_class: The Record model documents are decoded into
            collection_name: Firestore collection holding the records
            store: RecordStore used for every operation
        """
        self.model_class = model_class
        self.collection_name = collection_name
        self.store = store
        self.executor = QueryExecutor(store)

    def get_by_id(self, doc_id: str) -> Optional[T]:
        """
        Retrieve a document by its document ID.

        Returns:
            Model instance if found, None otherwise
        """
        try:
            return self.store.get(self.collection_name, doc_id, self.model_class)
        except DataNotFoundError:
            return None

    def save(self, doc_id: str, instance: T) -> T:
        """Create or fully replace the document at doc_id."""
        self.store.save(self.collection_name, doc_id, instance)
        return instance

    def update(self, doc_id: str, patch: Optional[Mapping[str, Any]] = None, **fields) -> None:
        """
        Update selected fields of an existing document.

        Field paths may be passed as a mapping (needed for dotted paths) or
        as keyword arguments.
        """
        changes = dict(patch or {})
        changes.update(fields)
        self.store.update(self.collection_name, doc_id, changes)

    def delete(self, doc_id: str) -> None:
        self.store.delete(self.collection_name, doc_id)

    def save_all(self, instances: Sequence[T]) -> None:
        """Save identifiable instances in one batch write."""
        self.store.batch_save(self.collection_name, instances)

    def find(self, *predicates: Predicate, order_by: str = '', descending: bool = False, limit: int = 0) -> List[T]:
        """
        Query the collection.

        Example:
            service.find(Predicate('author', '==', 'Douglas Adams'), order_by='published', descending=True)
        """
        criteria = Criteria(
            collection=self.collection_name,
            predicates=list(predicates),
            order_by=order_by,
            descending=descending,
            limit=limit,
        )
        return self.executor.fetch(criteria, self.model_class)

    def list_all(self, order_by: str = '', descending: bool = False, limit: int = 0) -> List[T]:
        """Retrieve all documents from the collection."""
        return self.find(order_by=order_by, descending=descending, limit=limit)

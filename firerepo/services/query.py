"""
Criteria model and query execution against Firestore collections.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Optional, Type, TypeVar

from google.cloud import firestore
from google.cloud.firestore_v1.base_query import FieldFilter

from firerepo import codec
from firerepo.errors import DecodeError, InvalidArgumentError
from firerepo.logger import get_logger
from firerepo.services.store import TRANSPORT_ERRORS, RecordStore
from firerepo.utils.destination import Destination

logger = get_logger()

T = TypeVar('T')


class Operator(str, Enum):
    """Comparison operators supported by Firestore field filters."""
    EQUAL = "=="
    NOT_EQUAL = "!="
    LESS_THAN = "<"
    LESS_THAN_OR_EQUAL = "<="
    GREATER_THAN = ">"
    GREATER_THAN_OR_EQUAL = ">="
    ARRAY_CONTAINS = "array-contains"
    ARRAY_CONTAINS_ANY = "array-contains-any"
    IN = "in"
    NOT_IN = "not-in"

    @classmethod
    def list_all(cls) -> list[str]:
        """Get a list of all operator strings."""
        return [op.value for op in cls]

    @classmethod
    def from_string(cls, value: str) -> 'Operator':
        """Get Operator enum from its string form."""
        for op in cls:
            if op.value == value:
                return op
        raise InvalidArgumentError(f"Unknown operator: {value}")

    def __str__(self) -> str:
        return self.value


@dataclass
class Predicate:
    """A single field/operator/value filter applied by the store."""
    field_path: str
    operator: Operator
    value: Any = None

    def __post_init__(self):
        if not self.field_path:
            raise InvalidArgumentError("predicate field path required")
        if not isinstance(self.operator, Operator):
            self.operator = Operator.from_string(self.operator)


@dataclass
class Criteria:
    """
    Filter, sort and limit specification for one query.

    All predicates are combined with AND. A limit of 0 leaves the result
    size to the store, an empty order_by requests no ordering.
    """
    collection: str
    predicates: List[Predicate] = field(default_factory=list)
    order_by: str = ''
    descending: bool = False
    limit: int = 0

    def where(self, field_path: str, operator, value: Any) -> 'Criteria':
        """Add a predicate and return self for chaining."""
        self.predicates.append(Predicate(field_path, operator, value))
        return self

    def validate(self) -> None:
        if not self.collection:
            raise InvalidArgumentError(f"valid query required: {self!r}")
        if self.limit < 0:
            raise InvalidArgumentError(f"query limit must not be negative, got {self.limit}")


class QueryExecutor:
    """
    Runs Criteria against Firestore and materializes the results.

    Filtering, ordering and limiting are done by the store; results are
    appended to the destination in the order the store returns them.
    """

    def __init__(self, store: RecordStore):
        if store is None:
            raise InvalidArgumentError("nil store")
        self.store = store

    def build(self, criteria: Criteria):
        """Translate criteria into a Firestore query."""
        query = self.store.get_collection(criteria.collection)

        for predicate in criteria.predicates:
            query = query.where(filter=FieldFilter(predicate.field_path, predicate.operator.value, predicate.value))

        if criteria.order_by:
            direction = firestore.Query.DESCENDING if criteria.descending else firestore.Query.ASCENDING
            query = query.order_by(criteria.order_by, direction=direction)

        if criteria.limit > 0:
            query = query.limit(criteria.limit)

        return query

    def query(
        self,
        criteria: Criteria,
        items: List[T],
        item_type: Type[T],
        by_reference: bool = False,
        timeout: Optional[float] = None,
    ) -> int:
        """
        Run criteria and fill items with decoded records.

        items is emptied first. If decoding or streaming fails part way,
        items is emptied again before the error is raised, so callers never
        see a partial result.

        Args:
            criteria: What to query
            items: Caller-owned list to fill
            item_type: Record model to decode every document into
            by_reference: Store decoded instances instead of copies

        Returns:
            Number of records appended

        Raises:
            InvalidArgumentError: If criteria is missing or invalid
            InvalidDestinationError: If items/item_type cannot hold records
            DecodeError: If a document does not fit item_type
            TransportError: If the store fails while streaming
        """
        if criteria is None:
            raise InvalidArgumentError("valid query required: None")
        criteria.validate()

        destination = Destination.bind(items, item_type, by_reference)
        query = self.build(criteria)

        logger.debug(
            f"Querying {criteria.collection} with {len(criteria.predicates)} predicates, "
            f"order_by={criteria.order_by!r} desc={criteria.descending} limit={criteria.limit}"
        )

        try:
            for snapshot in query.stream(timeout=self.store.resolve_timeout(timeout)):
                element = destination.new_element()
                try:
                    codec.decode_into(snapshot.to_dict() or {}, element)
                except DecodeError as e:
                    raise DecodeError(f"error converting {criteria.collection} record {snapshot.id}: {e}") from e
                destination.append(element)
        except DecodeError:
            destination.clear()
            raise
        except TRANSPORT_ERRORS as e:
            destination.clear()
            raise self.store.transport_error(e, "querying", criteria.collection) from e

        return len(destination)

    def fetch(self, criteria: Criteria, item_type: Type[T], timeout: Optional[float] = None) -> List[T]:
        """Run criteria and return the decoded records as a new list."""
        items: List[T] = []
        self.query(criteria, items, item_type, timeout=timeout)
        return items

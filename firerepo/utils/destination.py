"""
Binding between query results and a caller-owned list.
"""
from typing import Generic, List, Type, TypeVar

from pydantic import BaseModel

from firerepo import codec
from firerepo.errors import InvalidDestinationError

T = TypeVar('T', bound=BaseModel)


class Destination(Generic[T]):
    """
    Grows a caller-owned list with decoded records of one model type.

    A Python list does not say whether it holds values or shared
    references, so the caller picks the storage convention with
    ``by_reference``. With ``by_reference=True`` the decoded instance itself
    is stored; otherwise a deep copy is stored and the decoded instance is
    left to be discarded, so nothing done to it later reaches the list.
    """

    def __init__(self, items: List[T], item_type: Type[T], by_reference: bool = False):
        self._items = items
        self._item_type = item_type
        self._by_reference = by_reference

    @classmethod
    def bind(cls, items: List[T], item_type: Type[T], by_reference: bool = False) -> 'Destination[T]':
        """
        Validate the destination and empty it in place.

        Args:
            items: The list to append results to (existing contents are discarded)
            item_type: Pydantic model every element is decoded into
            by_reference: Store decoded instances instead of copies

        Raises:
            InvalidDestinationError: If items is not a list or item_type is not a model class
        """
        if items is None:
            raise InvalidDestinationError("destination must be a non nil list")

        if not isinstance(items, list):
            raise InvalidDestinationError(f"destination must be a list, got: {type(items).__name__}")

        if not codec.is_record_type(item_type):
            raise InvalidDestinationError(f"destination element must be a record model, got: {item_type!r}")

        del items[:]

        return cls(items, item_type, by_reference)

    @property
    def items(self) -> List[T]:
        return self._items

    @property
    def item_type(self) -> Type[T]:
        return self._item_type

    @property
    def by_reference(self) -> bool:
        return self._by_reference

    def new_element(self) -> T:
        """Return a fresh zero-valued element to decode into."""
        return codec.zero_value(self._item_type)

    def append(self, element: T) -> None:
        if not isinstance(element, self._item_type):
            raise TypeError(
                f"cannot append {type(element).__name__} to a list of {self._item_type.__name__}"
            )
        self._items.append(element if self._by_reference else element.model_copy(deep=True))

    def clear(self) -> None:
        del self._items[:]

    def __len__(self) -> int:
        return len(self._items)

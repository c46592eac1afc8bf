"""
Field-mapping convention between record models and Firestore documents.

Records are pydantic models. A field is stored under its alias
(``Field(alias="title")``) or, without one, under its attribute name.
Decoding validates every stored value against the field's annotation.
"""
import datetime
import enum
import types
import typing
from typing import Any, Dict, Mapping, Type, TypeVar, Union

from google.cloud import firestore
from google.cloud.firestore_v1 import transforms
from pydantic import BaseModel, ValidationError

from firerepo.errors import DecodeError, InvalidArgumentError

T = TypeVar('T', bound=BaseModel)

# Leaf values the Firestore client can convert to a document Value
FIRESTORE_LEAF_TYPES = (
    type(None), bool, int, float, str, bytes,
    datetime.datetime,
    firestore.GeoPoint,
    firestore.DocumentReference,
    transforms.Sentinel,
    transforms.ArrayUnion,
    transforms.ArrayRemove,
    transforms.Increment,
    transforms.Maximum,
    transforms.Minimum,
)


def is_record_type(item_type: Any) -> bool:
    """True when item_type is a pydantic model class."""
    return isinstance(item_type, type) and issubclass(item_type, BaseModel)


def _zero_for(annotation: Any) -> Any:
    origin = typing.get_origin(annotation) or annotation
    if origin in (Union, types.UnionType):
        return None
    if origin in (list, set, dict, frozenset, tuple):
        return origin()
    if annotation in (str, int, float, bool, bytes):
        return annotation()
    if is_record_type(annotation):
        return zero_value(annotation)
    return None


def zero_value(item_type: Type[T]) -> T:
    """
    Build a fresh zero-valued instance of item_type without validation.

    Fields with a default keep it; required fields receive the zero value
    of their annotation (``""``, ``0``, ``False``, empty containers, None).
    """
    zeros = {
        name: _zero_for(f.annotation)
        for name, f in item_type.model_fields.items()
        if f.is_required()
    }
    return item_type.model_construct(**zeros)


def to_firestore(value: Any, path: str = '') -> Any:
    """
    Normalize a value into types the Firestore client accepts.

    Enums are stored by value, sets and tuples as arrays.

    Raises:
        InvalidArgumentError: If a leaf value has no Firestore representation
    """
    if isinstance(value, enum.Enum):
        return to_firestore(value.value, path)
    if isinstance(value, BaseModel):
        return to_firestore(value.model_dump(by_alias=True), path)
    if isinstance(value, Mapping):
        return {str(k): to_firestore(v, f"{path}.{k}" if path else str(k)) for k, v in value.items()}
    if isinstance(value, (list, tuple, set, frozenset)):
        return [to_firestore(v, f"{path}[{i}]") for i, v in enumerate(value)]
    if isinstance(value, FIRESTORE_LEAF_TYPES):
        return value
    raise InvalidArgumentError(f"field {path or '<value>'!r}: {type(value).__name__} cannot be stored in Firestore")


def encode(value: Any) -> Dict[str, Any]:
    """
    Convert a record model (or mapping) into a Firestore document map.

    Raises:
        InvalidArgumentError: If value is None, not a record or holds unsupported values
    """
    if value is None:
        raise InvalidArgumentError("nil value to encode")

    if isinstance(value, BaseModel):
        return to_firestore(value.model_dump(by_alias=True))

    if isinstance(value, Mapping):
        return to_firestore(dict(value))

    raise InvalidArgumentError(f"cannot store {type(value).__name__} as a document")


def decode_into(data: Any, element: T) -> T:
    """
    Populate element from a Firestore document map.

    Keys missing from data leave the element's zero values untouched; keys
    with no matching field are ignored.

    Raises:
        DecodeError: If data is not a map or a value does not fit its field
    """
    if not isinstance(data, Mapping):
        raise DecodeError(f"expected a document map, got {type(data).__name__}")

    validator = type(element).__pydantic_validator__
    for name, f in type(element).model_fields.items():
        key = f.alias or name
        if key not in data:
            continue
        try:
            validator.validate_assignment(element, name, data[key])
        except ValidationError as e:
            raise DecodeError(f"field {key!r} of {type(element).__name__}: {e}") from e

    return element

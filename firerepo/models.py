from typing import Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict


class Record(BaseModel):
    """
    Base class for stored records.
    Fields may be set by attribute name even when they carry an alias,
    and assignments are validated.
    """
    model_config = ConfigDict(populate_by_name=True, validate_assignment=True)


@runtime_checkable
class Identifiable(Protocol):
    """
    Anything that knows its own document id.
    Required for items written through RecordStore.batch_save().
    """

    def get_id(self) -> str:
        ...

"""
Record protocol for values stored through a Collection.

A record exposes its identifier explicitly instead of being inspected for an
`ID` field. `Document` is the ready-made pydantic implementation.
"""

from typing import Any, Dict, Mapping, Protocol, Type, TypeVar, runtime_checkable

from bson import ObjectId
from pydantic import BaseModel, ConfigDict, Field

from .exceptions import CrudError, ErrorKind
from .identifiers import NIL_OBJECT_ID, is_nil


@runtime_checkable
class Record(Protocol):
    """Protocol for anything a Collection can insert or replace."""

    def get_id(self) -> ObjectId: ...

    def set_id(self, oid: ObjectId) -> None: ...

    def to_document(self) -> Dict[str, Any]: ...


D = TypeVar("D", bound="Document")


class Document(BaseModel):
    """Base model for stored records. The id is persisted as `_id`."""

    model_config = ConfigDict(arbitrary_types_allowed=True, populate_by_name=True, validate_assignment=True)

    id: ObjectId = Field(default=NIL_OBJECT_ID, alias="_id")

    def get_id(self) -> ObjectId:
        return self.id

    def set_id(self, oid: ObjectId) -> None:
        self.id = oid

    def to_document(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)

    @classmethod
    def from_document(cls: Type[D], doc: Mapping[str, Any]) -> D:
        return cls.model_validate(dict(doc))


# Values passed by value rather than by reference
_VALUE_TYPES = (str, bytes, bytearray, int, float, complex, bool, tuple, frozenset)


def check_record(value: Any) -> Record:
    """Validate a record before insert/replace.

    Checks run in a fixed order: reference, structure, then a non-nil ObjectId id.
    Raises CrudError with the matching precondition kind.
    """
    if value is None or isinstance(value, type) or isinstance(value, _VALUE_TYPES):
        raise CrudError(ErrorKind.VALUE_NOT_POINTER)

    if not isinstance(value, Record):
        raise CrudError(ErrorKind.VALUE_NOT_STRUCT)

    # an id of any other type is not a usable identifier
    oid = value.get_id()
    if not isinstance(oid, ObjectId) or is_nil(oid):
        raise CrudError(ErrorKind.ID_BLANK)

    return value

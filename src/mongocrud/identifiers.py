"""
ObjectId helpers: the nil sentinel and hex decoding.
"""

from typing import Optional, Any

from bson import ObjectId
from bson.errors import InvalidId


# All-zero id, used as "no id assigned yet"
NIL_OBJECT_ID = ObjectId(b"\x00" * 12)


def is_nil(oid: Optional[ObjectId]) -> bool:
    """True when no usable id is present"""
    return oid is None or oid == NIL_OBJECT_ID


def new_object_id() -> ObjectId:
    return ObjectId()


def object_id_from_hex(value: Any) -> ObjectId:
    """Strict decode. Raises InvalidId for anything that is not 24 hex chars or an ObjectId."""
    if isinstance(value, ObjectId):
        return value
    if not isinstance(value, str) or not ObjectId.is_valid(value):
        raise InvalidId(f"{value!r} is not a valid ObjectId hex string")
    return ObjectId(value)


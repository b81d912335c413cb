"""
Generic CRUD over a single named collection.

Every operation works through the four CollectionHandle calls only, so the
handle can be a live Motor collection or a MemoryCollection.
"""

import asyncio
import logging
from typing import Any, Awaitable, Dict, Optional, TypeVar, Union

from bson import ObjectId
from bson.errors import InvalidId

from . import logger as log
from .capabilities import CollectionHandle, SingleResult
from .exceptions import CrudError, DocumentNotFound, ErrorKind
from .identifiers import NIL_OBJECT_ID, object_id_from_hex
from .record import check_record

# Fixed deadline for deletes, independent of any caller timeout
DELETE_TIMEOUT = 3.0

ID_KEYS = ("_id", "id")

T = TypeVar("T")


async def _bounded(aw: Awaitable[T], timeout: Optional[float]) -> T:
    if timeout is None:
        return await aw
    return await asyncio.wait_for(aw, timeout)


class Collection:
    """A named collection with record-level CRUD"""

    def __init__(self, name: str, handle: CollectionHandle, logger: Optional[logging.Logger] = None):
        self._name = name
        self._handle = handle
        self.logger = logger or log.get_logger()

    @property
    def name(self) -> str:
        return self._name

    @property
    def handle(self) -> CollectionHandle:
        """The underlying store handle"""
        return self._handle

    def __repr__(self) -> str:
        return f"Collection({self._name!r})"

    def identity_filter(self, by: str, value: Any) -> Dict[str, Any]:
        """Build the lookup filter for `by == value`.

        For "_id"/"id" the value is decoded as an ObjectId hex string. A value
        that does not decode matches the nil id, so lookups with a malformed id
        behave as "not found" rather than raising.
        """
        if by in ID_KEYS:
            try:
                oid = object_id_from_hex(value)
            except InvalidId:
                self.logger.warning(f"{self._name}: invalid id {value!r}, matching nil id")
                oid = NIL_OBJECT_ID
            return {"_id": oid}
        return {by: value}

    async def _lookup(self, filter: Dict[str, Any], timeout: Optional[float]) -> SingleResult:
        try:
            doc = await _bounded(self._handle.find_one(filter), timeout)
        except Exception as e:
            return SingleResult(err=e)
        return SingleResult(doc)

    async def new_item(self, record: Any, timeout: Optional[float] = None) -> SingleResult:
        """Insert a record and return it as persisted.

        The record must carry a caller-assigned, non-nil id.
        """
        record = check_record(record)
        oid = record.get_id()

        try:
            await _bounded(self._handle.insert_one(record.to_document()), timeout)
        except Exception as e:
            self.logger.error(f"{self._name}: new_item {oid} insert failed: {e}")
            raise CrudError(ErrorKind.INSERT_FAILED) from None

        self.logger.debug(f"{self._name}: new_item {oid} inserted")
        return await self.get_item("id", str(oid), timeout=timeout)

    async def item_exists(self, by: str, value: Any, timeout: Optional[float] = None) -> bool:
        """True if a lookup succeeds. Any lookup error counts as absent."""
        result = await self._lookup(self.identity_filter(by, value), timeout)
        exists = result.err is None
        if result.err is not None and not isinstance(result.err, DocumentNotFound):
            self.logger.error(f"{self._name}: item_exists {by}={value!r} lookup failed: {result.err!r}")
        self.logger.debug(f"{self._name}: item_exists {by}={value!r} -> {exists}")
        return exists

    async def get_item(self, by: str, value: Any, timeout: Optional[float] = None) -> SingleResult:
        result = await self._lookup(self.identity_filter(by, value), timeout)
        if isinstance(result.err, DocumentNotFound):
            self.logger.info(f"{self._name}: get_item {by}={value!r} not found")
            raise CrudError(ErrorKind.GET_FAILED)
        if result.err is not None:
            self.logger.error(f"{self._name}: get_item {by}={value!r} lookup failed: {result.err!r}")
            raise CrudError(ErrorKind.GET_FAILED)

        self.logger.debug(f"{self._name}: get_item {by}={value!r} found")
        return result

    async def update_item(self, record: Any, timeout: Optional[float] = None) -> SingleResult:
        """Replace the stored document with the record's id and return it as persisted.

        A replace that matches nothing is not an error here; the re-fetch that
        follows is what reports the missing document.
        """
        record = check_record(record)
        oid = record.get_id()

        try:
            await _bounded(self._handle.replace_one({"_id": oid}, record.to_document()), timeout)
        except Exception as e:
            self.logger.error(f"{self._name}: update_item {oid} replace failed: {e}")
            raise CrudError(ErrorKind.UPDATE_FAILED) from None

        self.logger.debug(f"{self._name}: update_item {oid} replaced")
        return await self.get_item("id", str(oid), timeout=timeout)

    async def delete_item(self, id: Union[ObjectId, str]) -> None:
        """Delete by id under DELETE_TIMEOUT. Takes no caller timeout."""
        oid = object_id_from_hex(id)

        try:
            await asyncio.wait_for(self._handle.delete_one({"_id": oid}), DELETE_TIMEOUT)
        except Exception as e:
            self.logger.error(f"{self._name}: delete_item {oid} failed: {e!r}")
            raise CrudError(ErrorKind.DELETE_FAILED) from None

        self.logger.debug(f"{self._name}: delete_item {oid} deleted")

"""
Minimal store-handle contract used by Collection, and the lazy lookup result.

A live `AsyncIOMotorCollection` satisfies CollectionHandle as-is; tests use
`MemoryCollection` instead.
"""

from typing import Any, Callable, Dict, Mapping, Optional, Protocol, Type, TypeVar, Union

from pymongo.results import DeleteResult, InsertOneResult, UpdateResult

from .exceptions import DocumentNotFound


class CollectionHandle(Protocol):
    """The only store operations a Collection may rely on."""

    async def insert_one(self, document: Mapping[str, Any]) -> InsertOneResult: ...

    async def find_one(self, filter: Mapping[str, Any]) -> Optional[Mapping[str, Any]]: ...

    async def replace_one(self, filter: Mapping[str, Any], replacement: Mapping[str, Any]) -> UpdateResult: ...

    async def delete_one(self, filter: Mapping[str, Any]) -> DeleteResult: ...


T = TypeVar("T")


class SingleResult:
    """Outcome of a single-document lookup. The error is checked on demand."""

    def __init__(self, document: Optional[Mapping[str, Any]] = None, err: Optional[BaseException] = None):
        if document is None and err is None:
            err = DocumentNotFound()
        self._document = document
        self._err = err

    @property
    def err(self) -> Optional[BaseException]:
        return self._err

    def raw(self) -> Dict[str, Any]:
        if self._err is not None:
            raise self._err
        return dict(self._document or {})

    def decode(self, record_type: Union[Type[T], Callable[[Dict[str, Any]], T]]) -> T:
        """Build a record from the document.

        Uses `record_type.from_document` when present, otherwise calls
        `record_type` with the mapping.
        """
        doc = self.raw()
        from_document = getattr(record_type, "from_document", None)
        if from_document is not None:
            return from_document(doc)
        return record_type(doc)  # type: ignore[call-arg]

    def __repr__(self) -> str:
        if self._err is not None:
            return f"SingleResult(err={self._err!r})"
        return f"SingleResult({self._document!r})"

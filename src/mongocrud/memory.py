"""
In-memory CollectionHandle for deterministic tests.
"""

import asyncio
import copy
from typing import Any, Dict, Iterable, List, Mapping, Optional

from pymongo.errors import DuplicateKeyError, OperationFailure
from pymongo.results import DeleteResult, InsertOneResult, UpdateResult


class MemoryCollection:
    """Dict-backed stand-in for a Motor collection.

    Supports equality filters on top-level fields. Operations named in
    `fail` raise OperationFailure; `delay` sleeps before every operation.
    """

    def __init__(self, documents: Iterable[Mapping[str, Any]] = (), fail: Iterable[str] = (), delay: float = 0.0):
        self._docs: Dict[Any, Dict[str, Any]] = {}
        self.fail = set(fail)
        self.delay = delay
        self.calls: List[tuple] = []
        for doc in documents:
            self._docs[doc["_id"]] = copy.deepcopy(dict(doc))

    def __len__(self) -> int:
        return len(self._docs)

    @property
    def documents(self) -> List[Dict[str, Any]]:
        return [copy.deepcopy(doc) for doc in self._docs.values()]

    async def _enter(self, op: str, *args: Any) -> None:
        self.calls.append((op, *args))
        if self.delay:
            await asyncio.sleep(self.delay)
        if op in self.fail:
            raise OperationFailure(f"{op} failed (injected)")

    def _match(self, filter: Mapping[str, Any]) -> Optional[Dict[str, Any]]:
        for doc in self._docs.values():
            if all(key in doc and doc[key] == value for key, value in filter.items()):
                return doc
        return None

    async def insert_one(self, document: Mapping[str, Any]) -> InsertOneResult:
        await self._enter("insert_one", document)
        doc = copy.deepcopy(dict(document))
        if "_id" not in doc:
            raise OperationFailure("document has no _id")
        if doc["_id"] in self._docs:
            raise DuplicateKeyError(f"E11000 duplicate key error _id: {doc['_id']}", code=11000)
        self._docs[doc["_id"]] = doc
        return InsertOneResult(doc["_id"], True)

    async def find_one(self, filter: Mapping[str, Any]) -> Optional[Dict[str, Any]]:
        await self._enter("find_one", filter)
        doc = self._match(filter)
        return copy.deepcopy(doc) if doc is not None else None

    async def replace_one(self, filter: Mapping[str, Any], replacement: Mapping[str, Any]) -> UpdateResult:
        await self._enter("replace_one", filter, replacement)
        doc = self._match(filter)
        if doc is None:
            return UpdateResult({"n": 0, "nModified": 0, "ok": 1.0}, True)

        new_doc = copy.deepcopy(dict(replacement))
        new_doc["_id"] = doc["_id"]
        modified = 0 if new_doc == doc else 1
        self._docs[doc["_id"]] = new_doc
        return UpdateResult({"n": 1, "nModified": modified, "ok": 1.0}, True)

    async def delete_one(self, filter: Mapping[str, Any]) -> DeleteResult:
        await self._enter("delete_one", filter)
        doc = self._match(filter)
        if doc is None:
            return DeleteResult({"n": 0, "ok": 1.0}, True)
        del self._docs[doc["_id"]]
        return DeleteResult({"n": 1, "ok": 1.0}, True)

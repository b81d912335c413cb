import asyncio, sys, pytest
from pathlib import Path
from typing import Optional

# Allow running the tests from a checkout without installing the package
sys.path.append(str(Path(__file__).parent.parent / "src"))

from pymongo.errors import OperationFailure, ServerSelectionTimeoutError

from mongocrud import Collection, Document, MemoryCollection, new_object_id


class Item(Document):
    name: str
    qty: int = 0
    tags: list = []


class PlainRecord:
    """A record that does not use pydantic"""

    def __init__(self, oid=None, title=""):
        self.oid = oid
        self.title = title

    def get_id(self):
        return self.oid

    def set_id(self, oid):
        self.oid = oid

    def to_document(self):
        return {"_id": self.oid, "title": self.title}


class FakeAdmin:
    def __init__(self, owner):
        self.owner = owner

    async def command(self, cmd, **kwargs):
        self.owner.commands.append((cmd, kwargs))
        if self.owner.fail_ping:
            raise ServerSelectionTimeoutError("no servers available")
        return {"ok": 1.0}


class FakeDatabase:
    def __init__(self, name, collections=None, fail_list=False):
        self.name = name
        self.handles = {n: MemoryCollection() for n in (collections or [])}
        self.fail_list = fail_list

    async def list_collection_names(self):
        if self.fail_list:
            raise OperationFailure("not authorized on db to execute command listCollections")
        return list(self.handles)

    def __getitem__(self, name):
        return self.handles.setdefault(name, MemoryCollection())


class FakeMotorClient:
    """Stands in for AsyncIOMotorClient: admin.command, item access and close."""

    def __init__(self, database: FakeDatabase, fail_ping: bool = False):
        self.database = database
        self.fail_ping = fail_ping
        self.commands = []
        self.uri: Optional[str] = None
        self.kwargs = {}
        self.closed = False
        self.admin = FakeAdmin(self)

    def __call__(self, uri, **kwargs):
        # used as the client factory
        self.uri = uri
        self.kwargs = kwargs
        return self

    def __getitem__(self, name):
        assert name == self.database.name
        return self.database

    def close(self):
        self.closed = True


def run(coro):
    return asyncio.run(coro)


@pytest.fixture()
def store():
    return MemoryCollection()


@pytest.fixture()
def items(store):
    return Collection("items", store)


@pytest.fixture()
def item():
    return Item(id=new_object_id(), name="widget", qty=3, tags=["a", "b"])

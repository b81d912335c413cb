"""
mongocrud package.

Generic record CRUD over MongoDB collections.

Architecture:
- DatabaseClient: connection bootstrap, collection registry, ping/list
- Collection: new/get/exists/update/delete for any Record
- CollectionHandle: the four store calls a Collection relies on
- MemoryCollection: in-memory CollectionHandle for tests
"""

__version__ = "0.1.0"

from .capabilities import CollectionHandle, SingleResult
from .client import DatabaseClient
from .collection import Collection, DELETE_TIMEOUT
from .config import DatabaseConfiguration, build_uri, from_env, load_config
from .exceptions import ConnectionFailed, CrudError, DocumentNotFound, ErrorKind
from .identifiers import NIL_OBJECT_ID, is_nil, new_object_id
from .memory import MemoryCollection
from .record import Document, Record, check_record

__all__ = [
    "CollectionHandle", "SingleResult",
    "DatabaseClient",
    "Collection", "DELETE_TIMEOUT",
    "DatabaseConfiguration", "build_uri", "from_env", "load_config",
    "ConnectionFailed", "CrudError", "DocumentNotFound", "ErrorKind",
    "NIL_OBJECT_ID", "is_nil", "new_object_id",
    "MemoryCollection",
    "Document", "Record", "check_record",
]

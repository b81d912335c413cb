"""
Error vocabulary for the data-access layer.
Organized by concern: record preconditions, store operations, connection bootstrap.
"""

from enum import Enum
from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from .client import DatabaseClient


class ErrorKind(Enum):
    """Closed set of failure kinds. The value is the public message."""
    ALREADY_EXISTS = "item already exists"
    INSERT_FAILED = "failed to insert"
    GET_FAILED = "failed to get"
    DELETE_FAILED = "failed to delete"
    UPDATE_FAILED = "failed to update"

    ID_BLANK = "id cannot be blank"

    VALUE_NOT_POINTER = "failed to accept argument, must be a pointer"
    VALUE_NOT_STRUCT = "failed to accept argument, must be a struct"

    PING_FAILED = "ping failed"
    LIST_FAILED = "failed to list collections"


PRECONDITION_KINDS = frozenset({
    ErrorKind.ID_BLANK,
    ErrorKind.VALUE_NOT_POINTER,
    ErrorKind.VALUE_NOT_STRUCT,
})


# ==================== Operation Exceptions ====================

class CrudError(Exception):
    """Raised by collection and client operations.

    Only the kind is exposed. Store error details go to the log, never here.
    """

    def __init__(self, kind: ErrorKind):
        self.kind = kind
        super().__init__(kind.value)

    @property
    def is_precondition(self) -> bool:
        """True for caller mistakes detected before any store interaction"""
        return self.kind in PRECONDITION_KINDS

    def __eq__(self, other: object) -> bool:
        if isinstance(other, CrudError):
            return self.kind is other.kind
        if isinstance(other, ErrorKind):
            return self.kind is other
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.kind)

    def __repr__(self) -> str:
        return f"CrudError({self.kind.name})"


class DocumentNotFound(Exception):
    """Carried by a SingleResult when a lookup matched nothing."""

    def __init__(self, e=None, message=None):
        if message:
            super().__init__(message)
        elif e:
            super().__init__(str(e))
        else:
            super().__init__("no documents in result")
        self.error = e
        self.message = message


# ==================== Bootstrap Exceptions ====================

class ConnectionFailed(Exception):
    """Raised when the client cannot be created or connected.

    The half-built client is kept on `client` so the caller can inspect
    which handles were bound before the failure.
    """

    def __init__(self, e=None, message=None, client: Optional["DatabaseClient"] = None):
        if message:
            super().__init__(message)
        elif e:
            super().__init__(str(e))
        else:
            super().__init__("Database connection failed")
        self.error = e
        self.message = message
        self.client = client

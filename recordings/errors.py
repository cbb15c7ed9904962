"""
Store error kinds.

Every store failure carries the operation name and the underlying driver
exception, so callers can branch on ``kind`` instead of parsing messages.
"""
from __future__ import annotations

from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    CONNECTION = "connection"
    QUERY = "query"
    NOT_FOUND = "not_found"
    ROW_SCAN = "row_scan"
    WRITE = "write"
    IDENTITY_RETRIEVAL = "identity_retrieval"


class AlbumStoreError(Exception):
    kind: ErrorKind = ErrorKind.QUERY

    def __init__(self, op: str, message: Optional[str] = None, cause: Optional[BaseException] = None):
        self.op = op
        self.cause = cause
        self.message = message or (str(cause) if cause is not None else self.kind.value)
        super().__init__(f"{op}: {self.message}")

    def to_dict(self) -> dict:
        return {
            "kind": self.kind.value,
            "op": self.op,
            "message": self.message,
            "cause": type(self.cause).__name__ if self.cause is not None else None,
        }


class DatabaseConnectionError(AlbumStoreError):
    """Opening the connection or the liveness check failed."""
    kind = ErrorKind.CONNECTION


class QueryError(AlbumStoreError):
    kind = ErrorKind.QUERY


class NotFoundError(AlbumStoreError):
    kind = ErrorKind.NOT_FOUND

    def __init__(self, op: str, album_id: int, cause: Optional[BaseException] = None):
        self.album_id = album_id
        super().__init__(op, f"no album with ID {album_id}", cause)


class RowScanError(AlbumStoreError):
    """A result row could not be mapped onto Album fields."""
    kind = ErrorKind.ROW_SCAN


class WriteError(AlbumStoreError):
    kind = ErrorKind.WRITE


class IdentityRetrievalError(AlbumStoreError):
    """The driver did not report a usable generated id after an insert."""
    kind = ErrorKind.IDENTITY_RETRIEVAL

"""
AlbumStore: owns one database connection and maps the three album
operations onto it.

Callers construct a store explicitly (``AlbumStore.open(cfg)``) and pass it
around; there is no module-level connection.
"""
from __future__ import annotations

import logging
import threading
from decimal import Decimal
from typing import Any, List, Optional, Sequence

from .db import DB_ERRORS, DBConfig, connect, load_config
from .errors import (
    DatabaseConnectionError,
    IdentityRetrievalError,
    NotFoundError,
    QueryError,
    RowScanError,
    WriteError,
)
from .models import Album
from .repository import album_repo

logger = logging.getLogger(__name__)

INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1


def scan_album(row: Sequence[Any]) -> Album:
    """Map an (id, title, artist, price) row onto an Album; raises TypeError/ValueError."""
    values = tuple(row)
    if len(values) != 4:
        raise ValueError(f"expected 4 columns, got {len(values)}")
    album_id, title, artist, price = values
    if isinstance(album_id, bool) or not isinstance(album_id, int):
        raise TypeError(f"id: expected integer, got {type(album_id).__name__}")
    if not isinstance(title, str):
        raise TypeError(f"title: expected text, got {type(title).__name__}")
    if not isinstance(artist, str):
        raise TypeError(f"artist: expected text, got {type(artist).__name__}")
    if isinstance(price, bool) or not isinstance(price, (int, float, Decimal)):
        raise TypeError(f"price: expected number, got {type(price).__name__}")
    return Album(id=album_id, title=title, artist=artist, price=float(price))


class AlbumStore:
    def __init__(self, conn: Any, config: Optional[DBConfig] = None):
        self._conn = conn
        self.config = config
        # one connection, shared by request threads
        self._lock = threading.Lock()

    @classmethod
    def open(cls, config: Optional[DBConfig] = None) -> "AlbumStore":
        """Connect and run the liveness check. Raises DatabaseConnectionError."""
        cfg = config or load_config()
        store = cls(connect(cfg), cfg)
        try:
            store.ping()
        except DatabaseConnectionError:
            store.close()
            raise
        logger.info(f"connected to {cfg.dsn()}")
        return store

    def __enter__(self) -> "AlbumStore":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def close(self) -> None:
        with self._lock:
            if self._conn is None:
                return
            try:
                self._conn.close()
            except DB_ERRORS as e:
                logger.warning(f"error while closing connection: {e}")
            finally:
                self._conn = None

    def ping(self) -> None:
        with self._lock:
            try:
                if self._conn is None:
                    raise DatabaseConnectionError("ping", "store is closed")
                if hasattr(self._conn, "ping"):
                    self._conn.ping(reconnect=False)
                else:
                    album_repo.select_one(self._conn)
            except DB_ERRORS + (OSError,) as e:
                raise DatabaseConnectionError("ping", cause=e) from e

    def list_by_artist(self, artist: str) -> List[Album]:
        """Albums whose artist equals ``artist``; order is whatever the database returns."""
        op = "list_by_artist"
        with self._lock:
            try:
                rows = album_repo.list_by_artist(self._require_conn(op), artist)
            except DB_ERRORS as e:
                raise QueryError(op, cause=e) from e
        albums = [self._scan(op, r) for r in rows]
        logger.debug(f"{op}: artist={artist!r} rows={len(albums)}")
        return albums

    def get_by_id(self, album_id: int) -> Album:
        op = "get_by_id"
        if not INT64_MIN <= album_id <= INT64_MAX:
            raise NotFoundError(op, album_id)
        with self._lock:
            try:
                row = album_repo.get_by_id(self._require_conn(op), album_id)
            except DB_ERRORS as e:
                raise QueryError(op, cause=e) from e
        if row is None:
            raise NotFoundError(op, album_id)
        return self._scan(op, row)

    def insert(self, album: Album) -> int:
        """Insert ``album`` (its ``id`` is ignored) and return the generated id."""
        op = "insert"
        with self._lock:
            try:
                new_id = album_repo.insert(self._require_conn(op, WriteError), album.title, album.artist, album.price)
            except DB_ERRORS + (OverflowError,) as e:
                raise WriteError(op, cause=e) from e
        if isinstance(new_id, bool) or not isinstance(new_id, int) or new_id <= 0:
            raise IdentityRetrievalError(op, f"driver reported no generated id (got {new_id!r})")
        logger.debug(f"{op}: id={new_id} title={album.title!r}")
        return new_id

    def init_schema(self, reset: bool = False, seed: bool = False) -> int:
        """Create the album table; returns the number of seed rows inserted."""
        op = "init_schema"
        with self._lock:
            try:
                conn = self._require_conn(op, WriteError)
                album_repo.create_table(conn, reset=reset)
                n = album_repo.seed(conn) if seed else 0
            except DB_ERRORS as e:
                raise WriteError(op, cause=e) from e
        logger.info(f"{op}: reset={reset} seeded={n}")
        return n

    def _require_conn(self, op: str, error: type = QueryError) -> Any:
        if self._conn is None:
            raise error(op, "store is closed")
        return self._conn

    @staticmethod
    def _scan(op: str, row: Sequence[Any]) -> Album:
        try:
            return scan_album(row)
        except (TypeError, ValueError) as e:
            raise RowScanError(op, cause=e) from e

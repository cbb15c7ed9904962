from __future__ import annotations

import sqlite3
from contextlib import closing
from typing import Any, Iterable, List, Optional, Sequence

DDL_SQLITE = """
CREATE TABLE IF NOT EXISTS album (
  id INTEGER PRIMARY KEY AUTOINCREMENT,
  title VARCHAR(128) NOT NULL,
  artist VARCHAR(255) NOT NULL,
  price REAL NOT NULL
)
"""

DDL_MYSQL = """
CREATE TABLE IF NOT EXISTS album (
  id INT AUTO_INCREMENT NOT NULL,
  title VARCHAR(128) NOT NULL,
  artist VARCHAR(255) NOT NULL,
  price DECIMAL(5,2) NOT NULL,
  PRIMARY KEY (`id`)
)
"""

SEED_ROWS = [
    ("Blue Train", "John Coltrane", 56.99),
    ("Giant Steps", "John Coltrane", 63.99),
    ("Jeru", "Gerry Mulligan", 17.99),
    ("Sarah Vaughan", "Sarah Vaughan", 34.98),
]


def _sql(conn: Any, sql: str) -> str:
    # sqlite3 uses qmark placeholders, PyMySQL uses format
    if isinstance(conn, sqlite3.Connection):
        return sql
    return sql.replace("?", "%s")


def _execute(conn: Any, sql: str, params: Sequence[Any] = ()):
    cur = conn.cursor()
    try:
        cur.execute(_sql(conn, sql), params)
    except BaseException:
        cur.close()
        raise
    return cur


def list_by_artist(conn: Any, artist: str) -> List[Sequence[Any]]:
    with closing(_execute(conn, "SELECT id, title, artist, price FROM album WHERE artist = ?", (artist,))) as cur:
        return list(cur.fetchall())


def get_by_id(conn: Any, album_id: int) -> Optional[Sequence[Any]]:
    with closing(_execute(conn, "SELECT id, title, artist, price FROM album WHERE id = ?", (album_id,))) as cur:
        return cur.fetchone()


def insert(conn: Any, title: str, artist: str, price: float) -> Optional[int]:
    """Insert one row; returns the driver's ``lastrowid`` unchecked."""
    with closing(_execute(conn, "INSERT INTO album (title, artist, price) VALUES (?, ?, ?)", (title, artist, price))) as cur:
        return cur.lastrowid


def create_table(conn: Any, reset: bool = False) -> None:
    if reset:
        with closing(_execute(conn, "DROP TABLE IF EXISTS album")):
            pass
    ddl = DDL_SQLITE if isinstance(conn, sqlite3.Connection) else DDL_MYSQL
    with closing(_execute(conn, ddl)):
        pass


def seed(conn: Any, rows: Iterable[Sequence[Any]] = SEED_ROWS) -> int:
    n = 0
    for title, artist, price in rows:
        insert(conn, title, artist, price)
        n += 1
    return n


def select_one(conn: Any) -> None:
    with closing(_execute(conn, "SELECT 1")) as cur:
        cur.fetchone()

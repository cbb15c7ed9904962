from __future__ import annotations

# recordings/db.py
import logging
import os
import sqlite3
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Iterator, Optional, Tuple

import pymysql
import yaml

from .errors import DatabaseConnectionError

logger = logging.getLogger(__name__)

# Connection settings are resolved in this order:
# 1) environment variables (DBUSER / DBPASS and the RECORDINGS_DB_* family)
# 2) config.yaml (path from RECORDINGS_CONFIG, else ./config.yaml)
# 3) DBConfig defaults: MySQL on 127.0.0.1:3306, database "recordings"
DRIVERS = ("mysql", "sqlite")

# Roots of the DB-API exception trees of both supported drivers.
DB_ERRORS = (sqlite3.Error, pymysql.MySQLError)

_ENV_KEYS = {
    "driver": "RECORDINGS_DB_DRIVER",
    "user": "DBUSER",
    "password": "DBPASS",
    "addr": "RECORDINGS_DB_ADDR",
    "db_name": "RECORDINGS_DB_NAME",
    "db_path": "RECORDINGS_DB_PATH",
}
_TIMEOUT_KEYS = ("connect_timeout", "read_timeout", "write_timeout")


@dataclass
class DBConfig:
    driver: str = "mysql"
    user: str = ""
    password: str = ""
    addr: str = "127.0.0.1:3306"
    db_name: str = "recordings"
    db_path: str = "recordings.db"
    connect_timeout: float = 10.0
    read_timeout: Optional[float] = None
    write_timeout: Optional[float] = None

    def host_port(self) -> Tuple[str, int]:
        host, sep, port = self.addr.rpartition(":")
        if not sep or not host:
            raise DatabaseConnectionError("connect", f"invalid address {self.addr!r}, expected host:port")
        try:
            return host, int(port)
        except ValueError as e:
            raise DatabaseConnectionError("connect", f"invalid port in address {self.addr!r}", e) from e

    def dsn(self) -> str:
        """Connection string for log lines; the password is masked."""
        if self.driver == "sqlite":
            return f"sqlite:///{self.db_path}"
        auth = self.user + (":***" if self.password else "")
        return f"mysql://{auth}@{self.addr}/{self.db_name}"


def _read_config_yaml(path: str) -> dict:
    if not os.path.exists(path):
        return {}
    try:
        with open(path, "r", encoding="utf-8") as f:
            cfg = yaml.safe_load(f) or {}
    except (OSError, UnicodeDecodeError, yaml.YAMLError) as e:
        logger.warning(f"ignoring unreadable config file {path}: {e}")
        return {}
    if not isinstance(cfg, dict):
        logger.warning(f"ignoring config file {path}: top level is not a mapping")
        return {}
    out: dict = {}
    for k in _ENV_KEYS:
        v = cfg.get(k)
        if isinstance(v, str) and v.strip():
            out[k] = v.strip()
    for k in _TIMEOUT_KEYS:
        v = cfg.get(k)
        if isinstance(v, (int, float)) and not isinstance(v, bool) and v > 0:
            out[k] = float(v)
    return out


def load_config(path: str | None = None) -> DBConfig:
    cfg_path = path or os.environ.get("RECORDINGS_CONFIG") or "config.yaml"
    values: dict[str, Any] = _read_config_yaml(cfg_path)
    for field, env_key in _ENV_KEYS.items():
        if env_key in os.environ:
            values[field] = os.environ[env_key]

    cfg = DBConfig(**values)
    cfg.driver = cfg.driver.strip().lower()
    if cfg.driver not in DRIVERS:
        raise DatabaseConnectionError("load_config", f"unsupported driver {cfg.driver!r}, expected one of {DRIVERS}")
    return cfg


def connect(cfg: DBConfig) -> Any:
    """
    Open a DB-API connection for ``cfg``. Both drivers run in autocommit mode,
    so every statement is its own transaction.
    """
    try:
        if cfg.driver == "sqlite":
            dirn = os.path.dirname(cfg.db_path) or "."
            os.makedirs(dirn, exist_ok=True)
            conn = sqlite3.connect(
                cfg.db_path,
                timeout=cfg.connect_timeout,
                detect_types=sqlite3.PARSE_DECLTYPES,
                check_same_thread=False,
                isolation_level=None,
            )
            conn.row_factory = sqlite3.Row
            return conn

        host, port = cfg.host_port()
        return pymysql.connect(
            host=host,
            port=port,
            user=cfg.user,
            password=cfg.password,
            database=cfg.db_name,
            charset="utf8mb4",
            autocommit=True,
            connect_timeout=cfg.connect_timeout,
            read_timeout=cfg.read_timeout,
            write_timeout=cfg.write_timeout,
        )
    except DB_ERRORS + (OSError,) as e:
        raise DatabaseConnectionError("connect", f"cannot open {cfg.dsn()}: {e}", e) from e


@contextmanager
def get_conn(cfg: DBConfig | None = None) -> Iterator[Any]:
    """Short-lived connection for scripts and fixtures; closed on exit."""
    conn = connect(cfg or load_config())
    try:
        yield conn
    finally:
        conn.close()

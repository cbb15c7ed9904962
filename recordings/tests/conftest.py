import pytest

from recordings.db import load_config
from recordings.store import AlbumStore

_DB_ENV = (
    "RECORDINGS_DB_DRIVER",
    "RECORDINGS_DB_ADDR",
    "RECORDINGS_DB_NAME",
    "RECORDINGS_DB_PATH",
    "RECORDINGS_CONFIG",
    "DBUSER",
    "DBPASS",
)


@pytest.fixture()
def clean_env(monkeypatch, tmp_path):
    # Never pick up a developer's real settings or ./config.yaml
    for k in _DB_ENV:
        monkeypatch.delenv(k, raising=False)
    monkeypatch.setenv("RECORDINGS_CONFIG", str(tmp_path / "absent.yaml"))
    return monkeypatch


@pytest.fixture()
def sqlite_cfg(clean_env, tmp_path):
    clean_env.setenv("RECORDINGS_DB_DRIVER", "sqlite")
    clean_env.setenv("RECORDINGS_DB_PATH", str(tmp_path / "db" / "recordings_test.db"))
    return load_config()


@pytest.fixture()
def store(sqlite_cfg):
    """Store over a temp SQLite file holding the four sample albums (ids 1-4)."""
    s = AlbumStore.open(sqlite_cfg)
    s.init_schema(reset=True, seed=True)
    yield s
    s.close()


@pytest.fixture()
def client(store):
    from fastapi.testclient import TestClient
    from recordings.api import create_app

    with TestClient(create_app(store=store)) as c:
        yield c

"""
AlbumStore against a temporary SQLite database.
"""
import pytest

from recordings.db import get_conn
from recordings.errors import ErrorKind, NotFoundError
from recordings.models import Album
from recordings.store import AlbumStore


def test_list_by_artist_returns_only_matching_rows(sqlite_cfg):
    with AlbumStore.open(sqlite_cfg) as store:
        store.init_schema(reset=True)
        store.insert(Album(title="Blue Train", artist="John Coltrane", price=56.99))
        store.insert(Album(title="Giant Steps", artist="John Coltrane", price=63.99))
        store.insert(Album(title="Jeru", artist="Gerry Mulligan", price=17.99))

        albums = store.list_by_artist("John Coltrane")

    assert len(albums) == 2
    assert {a.title for a in albums} == {"Blue Train", "Giant Steps"}
    assert all(a.artist == "John Coltrane" for a in albums)
    assert all(isinstance(a.id, int) and a.id > 0 for a in albums)


@pytest.mark.parametrize("artist", ["Nobody", "", "john coltrane "])
def test_list_by_artist_no_match_is_empty(store, artist):
    assert store.list_by_artist(artist) == []


def test_get_by_id_returns_exact_record(store):
    alb = store.get_by_id(2)
    assert alb == Album(id=2, title="Giant Steps", artist="John Coltrane", price=63.99)


@pytest.mark.parametrize("album_id", [0, -1, 999])
def test_get_by_id_missing_raises_not_found(store, album_id):
    with pytest.raises(NotFoundError) as ei:
        store.get_by_id(album_id)
    err = ei.value
    assert err.kind is ErrorKind.NOT_FOUND
    assert err.op == "get_by_id"
    assert err.album_id == album_id
    assert str(err) == f"get_by_id: no album with ID {album_id}"


def test_insert_returns_new_positive_id(store):
    existing = {a.id for a in store.list_by_artist("John Coltrane")} | {3, 4}

    new_id = store.insert(Album(title="The Modern Sound of Betty Carter", artist="Betty Carter", price=49.99))

    assert isinstance(new_id, int)
    assert new_id > 0
    assert new_id not in existing


def test_insert_then_get_round_trip(store):
    src = Album(title="The Modern Sound of Betty Carter", artist="Betty Carter", price=49.99)
    new_id = store.insert(src)

    got = store.get_by_id(new_id)
    assert (got.title, got.artist, got.price) == (src.title, src.artist, src.price)
    assert got.id == new_id


def test_insert_ignores_caller_id(store):
    new_id = store.insert(Album(id=2, title="Ballads", artist="John Coltrane", price=12.5))
    assert new_id != 2
    # album 2 is untouched
    assert store.get_by_id(2).title == "Giant Steps"
    assert store.get_by_id(new_id).title == "Ballads"


def test_inserted_ids_are_unique(store):
    ids = [store.insert(Album(title=f"Take {i}", artist="Dave Brubeck", price=9.99)) for i in range(10)]
    assert len(set(ids)) == len(ids)
    assert 0 not in ids
    assert len(store.list_by_artist("Dave Brubeck")) == 10


def test_integer_price_is_read_back_as_float(store):
    new_id = store.insert(Album(title="Kind of Blue", artist="Miles Davis", price=20))
    got = store.get_by_id(new_id)
    assert got.price == 20.0
    assert isinstance(got.price, float)


def test_init_schema_reset_drops_rows(store):
    assert store.init_schema(reset=True) == 0
    assert store.list_by_artist("John Coltrane") == []
    assert store.init_schema(seed=True) == 4
    assert len(store.list_by_artist("John Coltrane")) == 2


def test_rows_written_are_visible_to_other_connections(store, sqlite_cfg):
    new_id = store.insert(Album(title="Mingus Ah Um", artist="Charles Mingus", price=15.0))
    with get_conn(sqlite_cfg) as conn:
        row = conn.execute("SELECT title FROM album WHERE id = ?", (new_id,)).fetchone()
    assert row["title"] == "Mingus Ah Um"


def test_album_str_matches_record_layout():
    assert str(Album(id=2, title="Giant Steps", artist="John Coltrane", price=63.99)) == "{2 Giant Steps John Coltrane 63.99}"


@pytest.mark.parametrize("album_id", [2 ** 63, -(2 ** 63) - 1, 10 ** 30])
def test_get_by_id_outside_int64_is_not_found(store, album_id):
    with pytest.raises(NotFoundError) as ei:
        store.get_by_id(album_id)
    assert ei.value.album_id == album_id


def test_get_by_id_int64_bounds_reach_the_database(store):
    for album_id in (2 ** 63 - 1, -(2 ** 63)):
        with pytest.raises(NotFoundError):
            store.get_by_id(album_id)

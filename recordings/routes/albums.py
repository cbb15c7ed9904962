from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from pydantic import BaseModel

from ..errors import AlbumStoreError, NotFoundError
from ..logs import LogContext
from ..models import Album
from ..store import AlbumStore

router = APIRouter()


class AlbumCreate(BaseModel):
    title: str
    artist: str
    price: float


def get_store(request: Request) -> AlbumStore:
    store = getattr(request.app.state, "store", None)
    if store is None:
        raise HTTPException(status_code=503, detail="store not initialised")
    return store


@router.get("/albums")
def api_albums_by_artist(artist: str = Query(...), store: AlbumStore = Depends(get_store)):
    try:
        return [a.to_dict() for a in store.list_by_artist(artist)]
    except AlbumStoreError as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/albums/{album_id}")
def api_album_by_id(album_id: int, store: AlbumStore = Depends(get_store)):
    try:
        return store.get_by_id(album_id).to_dict()
    except NotFoundError:
        raise HTTPException(status_code=404, detail="album not found")
    except AlbumStoreError as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/albums", status_code=201)
def api_album_create(body: AlbumCreate, store: AlbumStore = Depends(get_store)):
    log = LogContext("CREATE_ALBUM")
    log.set_payload({"title": body.title, "artist": body.artist, "price": body.price})
    try:
        album = Album(title=body.title, artist=body.artist, price=body.price)
        album.id = store.insert(album)
        log.set_entity("album", album.id)
        log.set_after(album.to_dict())
        log.write("OK")
        return album.to_dict()
    except AlbumStoreError as e:
        log.write("ERROR", str(e))
        raise HTTPException(status_code=500, detail=str(e))

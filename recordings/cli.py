#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
recordings command line (MySQL or SQLite)

Commands:
  demo                Connect, list John Coltrane albums, fetch album 2, add a Betty Carter album
  init                Create the album table (optionally reset and seed sample rows)
  list                List albums by artist
  get                 Fetch one album by id
  add                 Insert an album and print its new id
  serve               Run the HTTP API with uvicorn

Notes:
- Connection settings come from DBUSER/DBPASS, RECORDINGS_DB_* and config.yaml.
- Any database error is fatal: it is logged and the process exits with status 1.
"""

import argparse
import logging
import sys

import pandas as pd

from .db import load_config
from .errors import AlbumStoreError
from .logs import LogContext
from .models import Album
from .store import AlbumStore

logger = logging.getLogger("recordings")


def format_albums(albums) -> str:
    return "[" + " ".join(str(a) for a in albums) + "]"


def albums_frame(albums) -> pd.DataFrame:
    return pd.DataFrame([a.to_dict() for a in albums], columns=["id", "title", "artist", "price"])


# ---------------- Commands ----------------

def cmd_demo(store: AlbumStore, args):
    albums = store.list_by_artist("John Coltrane")
    print(f"Albums found: {format_albums(albums)}")

    alb = store.get_by_id(2)
    print(f"Album found: {alb}")

    alb_id = store.insert(Album(title="The Modern Sound of Betty Carter", artist="Betty Carter", price=49.99))
    print(f"New album ID: {alb_id}")


def cmd_init(store: AlbumStore, args):
    n = store.init_schema(reset=args.reset, seed=args.seed)
    print(f"Album table ready ({n} sample rows inserted).")


def cmd_list(store: AlbumStore, args):
    df = albums_frame(store.list_by_artist(args.artist))
    if df.empty:
        print("(empty)")
    else:
        print(df.to_string(index=False))
    if args.csv:
        df.to_csv(args.csv, index=False, encoding="utf-8-sig")
        print(f"CSV exported to {args.csv}")


def cmd_get(store: AlbumStore, args):
    print(f"Album found: {store.get_by_id(args.id)}")


def cmd_add(store: AlbumStore, args):
    log = LogContext("CREATE_ALBUM", user="cli")
    log.set_payload({"title": args.title, "artist": args.artist, "price": args.price})
    try:
        new_id = store.insert(Album(title=args.title, artist=args.artist, price=args.price))
    except AlbumStoreError as e:
        log.write("ERROR", str(e))
        raise
    log.set_entity("album", new_id)
    log.write("OK")
    print(f"New album ID: {new_id}")


def cmd_serve(args, cfg):
    import uvicorn
    from .api import create_app

    uvicorn.run(create_app(cfg), host=args.host, port=args.port)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="recordings", description="Album store (MySQL / SQLite)")
    parser.add_argument("--config", default=None, help="path to config.yaml")
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    sub = parser.add_subparsers()

    p_demo = sub.add_parser("demo", help="run the sample queries")
    p_demo.set_defaults(func=cmd_demo)

    p_init = sub.add_parser("init", help="create the album table")
    p_init.add_argument("--reset", action="store_true", help="drop the table first")
    p_init.add_argument("--seed", action="store_true", help="insert sample albums")
    p_init.set_defaults(func=cmd_init)

    p_list = sub.add_parser("list", help="list albums by artist")
    p_list.add_argument("artist")
    p_list.add_argument("--csv", required=False, help="also export to this CSV file")
    p_list.set_defaults(func=cmd_list)

    p_get = sub.add_parser("get", help="fetch an album by id")
    p_get.add_argument("id", type=int)
    p_get.set_defaults(func=cmd_get)

    p_add = sub.add_parser("add", help="insert an album")
    p_add.add_argument("--title", required=True)
    p_add.add_argument("--artist", required=True)
    p_add.add_argument("--price", required=True, type=float)
    p_add.set_defaults(func=cmd_add)

    p_serve = sub.add_parser("serve", help="run the HTTP API")
    p_serve.add_argument("--host", default="127.0.0.1")
    p_serve.add_argument("--port", type=int, default=8000)
    p_serve.set_defaults(func=None, serve=True)
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        cfg = load_config(args.config)
        if getattr(args, "serve", False):
            cmd_serve(args, cfg)
            return 0
        func = getattr(args, "func", None) or cmd_demo
        with AlbumStore.open(cfg) as store:
            print("Connected!")
            func(store, args)
    except AlbumStoreError as e:
        logger.error(str(e))
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())

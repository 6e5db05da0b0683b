# cli.py - manage the bookmark CSV from the shell, or serve the start page

from __future__ import annotations

import argparse
import sys

from .colors import gradient
from .config import Config, configure_logging
from .drag import DragReorderController
from .errors import LauncherError
from .icons import SymbolLookup, resolve_icon
from .models import DEFAULT_HEX_COLOR, Bookmark, Category
from .store import BookmarkStore


def build_parser():
    parser = argparse.ArgumentParser(prog="bookmark-launcher",
                                     description="Manage the bookmark launcher CSV / reorder / preview icons")
    parser.add_argument("--csv", default=None, help=f"CSV file (default: $LAUNCHER_CSV or {Config.CSV_FILE})")
    sub = parser.add_subparsers(dest="cmd")

    sub.add_parser("list-categories", help="List categories in display order")

    lb = sub.add_parser("list-bookmarks", help="List bookmarks of a category in display order")
    lb.add_argument("--category", required=True, help="Category ID")

    addc = sub.add_parser("add-category", help="Add a category")
    addc.add_argument("--name", required=True)
    addc.add_argument("--color", default="")
    addc.add_argument("--symbol", default="", help="Default icon symbol for its bookmarks")

    addb = sub.add_parser("add-bookmark", help="Add bookmark to a category (appended at the end)")
    addb.add_argument("--category", required=True)
    addb.add_argument("--title", required=True)
    addb.add_argument("--url", required=True)
    addb.add_argument("--icon-type", default="favicon", choices=["favicon", "symbol", "custom", "generated"])
    addb.add_argument("--symbol", default="")
    addb.add_argument("--icon-url", default="")
    addb.add_argument("--color", default="")

    dup = sub.add_parser("duplicate-bookmark", help="Copy a bookmark as a new one")
    dup.add_argument("--id", required=True)

    delb = sub.add_parser("delete-bookmark", help="Delete bookmark by ID")
    delb.add_argument("--id", required=True)

    delc = sub.add_parser("delete-category", help="Delete a category (and its bookmarks)")
    delc.add_argument("--id", required=True)

    mv = sub.add_parser("move", help="Drag a bookmark onto another one's position")
    mv.add_argument("--category", required=True)
    mv.add_argument("--active", required=True, help="ID of the dragged bookmark")
    mv.add_argument("--over", required=True, help="ID of the bookmark it is dropped on")

    rc = sub.add_parser("reorder-categories", help="Set category display order")
    rc.add_argument("ids", nargs="+")

    gr = sub.add_parser("gradient", help="Show the tile gradient for a color")
    gr.add_argument("hex")
    gr.add_argument("--shift", type=float, default=Config.GRADIENT_SHIFT)

    ic = sub.add_parser("icon", help="Show which icon a bookmark would get")
    ic.add_argument("--type", default="favicon", choices=["favicon", "symbol", "custom", "generated"])
    ic.add_argument("--symbol", default="")
    ic.add_argument("--icon-url", default="")
    ic.add_argument("--title", default="")
    ic.add_argument("--category-symbol", default="")

    srv = sub.add_parser("serve", help="Run the start page")
    srv.add_argument("--host", default="127.0.0.1")
    srv.add_argument("--port", type=int, default=5000)
    srv.add_argument("--debug", action="store_true")

    return parser


def cli_main(argv):
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(Config.LOG_LEVEL)
    store = BookmarkStore(args.csv or Config.CSV_FILE)

    try:
        return run(args, store, parser)
    except LauncherError as e:
        print(str(e), file=sys.stderr)
        return 1


def run(args, store, parser):
    if args.cmd == "list-categories":
        for c in store.fetch_categories():
            print(f"{c.id}\t{c.sort_order}\t{c.hex_color}\t{c.name}\t({len(c.bookmarks)})")
        return 0

    if args.cmd == "list-bookmarks":
        for b in store.get_category(args.category).bookmarks:
            print(f"{b.id}\t{b.sort_order}\t{b.title}\t{b.url}")
        return 0

    if args.cmd == "add-category":
        c = store.create_category(Category(None, args.name, hex_color=args.color or DEFAULT_HEX_COLOR,
                                           default_symbol=args.symbol or None))
        print(f"category={c.id}")
        return 0

    if args.cmd == "add-bookmark":
        b = store.create_bookmark(Bookmark(None, args.title, args.url, args.category, icon_type=args.icon_type,
                                           symbol_name=args.symbol or None, icon_url=args.icon_url or None,
                                           hex_color=args.color or None))
        print(f"bookmark={b.id} sort_order={b.sort_order}")
        return 0

    if args.cmd == "duplicate-bookmark":
        b = store.duplicate_bookmark(args.id)
        print(f"bookmark={b.id} sort_order={b.sort_order}")
        return 0

    if args.cmd == "delete-bookmark":
        store.delete_bookmark(args.id)
        return 0

    if args.cmd == "delete-category":
        removed = store.delete_category(args.id)
        print(f"bookmarks_removed={removed}")
        return 0

    if args.cmd == "move":
        ctl = DragReorderController.for_category(store.get_category(args.category), on_reorder=store.apply_intent)
        ctl.start(args.active)
        ctl.over(args.over)
        if ctl.drop() is None:
            print("No move (same bookmark or not in this category)", file=sys.stderr)
            return 1
        for b in store.get_category(args.category).bookmarks:
            print(f"{b.sort_order}\t{b.id}\t{b.title}")
        return 0

    if args.cmd == "reorder-categories":
        for c in store.reorder_categories(args.ids):
            print(f"{c.sort_order}\t{c.id}\t{c.name}")
        return 0

    if args.cmd == "gradient":
        pair = gradient(args.hex, args.shift)
        print(f"start={pair.start} end={pair.end}")
        return 0

    if args.cmd == "icon":
        b = Bookmark(None, args.title, "", None, icon_type=args.type, symbol_name=args.symbol or None,
                     icon_url=args.icon_url or None)
        c = Category(None, "", default_symbol=args.category_symbol or None)
        ref = resolve_icon(b, c, SymbolLookup())
        print(f"{ref.kind}\t{ref.value}")
        return 0

    if args.cmd == "serve":
        from .app import create_app
        store.seed_defaults()
        app = create_app(store=store)
        app.run(debug=args.debug, host=args.host, port=args.port)
        return 0

    parser.print_help()
    return 0


def main():
    sys.exit(cli_main(sys.argv[1:]))

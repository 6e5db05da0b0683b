# store.py - CSV-backed bookmark storage
#
# This is the collaborator on the other side of the engine: it hands out
# Category snapshots (sorted, bookmarks nested) and writes back whatever the
# engine decided, including the full-category sort_order rewrite after a drag.
# No DB; one CSV file, read and written whole on every call.

from __future__ import annotations

import csv
import logging
import os
import uuid
from typing import Dict, Iterable, List

from .drag import ReorderIntent
from .errors import NotFoundError
from .models import FIELDS, Bookmark, Category
from .ordering import assign_sort_orders

log = logging.getLogger(__name__)


def new_id():
    return uuid.uuid4().hex


class BookmarkStore:
    def __init__(self, path: str):
        self.path = path

    # ----------------------------
    # Raw rows
    # ----------------------------
    def ensure(self):
        """Create file with header if missing."""
        if not os.path.exists(self.path):
            folder = os.path.dirname(self.path)
            if folder:
                os.makedirs(folder, exist_ok=True)
            with open(self.path, "w", newline="", encoding="utf-8") as f:
                csv.DictWriter(f, fieldnames=FIELDS).writeheader()

    def load_rows(self) -> List[Dict[str, str]]:
        self.ensure()
        with open(self.path, newline="", encoding="utf-8") as f:
            rows = list(csv.DictReader(f))
        for r in rows:
            for k in FIELDS:
                r.setdefault(k, "")
                if r[k] is None:
                    r[k] = ""
        return rows

    def save_rows(self, rows: Iterable[Dict[str, str]]):
        with open(self.path, "w", newline="", encoding="utf-8") as f:
            w = csv.DictWriter(f, fieldnames=FIELDS)
            w.writeheader()
            for r in rows:
                w.writerow({k: r.get(k, "") for k in FIELDS})

    @staticmethod
    def next_order(rows, predicate) -> int:
        orders = [int(r.get("order") or 0) for r in rows if predicate(r)]
        return (max(orders) + 1) if orders else 0

    @staticmethod
    def find_row(rows, rowtype, rid):
        for r in rows:
            if r.get("rowtype") == rowtype and r.get("id") == rid:
                return r
        raise NotFoundError(rowtype, rid)

    # ----------------------------
    # Snapshots
    # ----------------------------
    def fetch_categories(self) -> List[Category]:
        """All categories by sort_order, each with its bookmarks by sort_order."""
        rows = self.load_rows()
        cats = {r["id"]: Category.from_row(r) for r in rows if r.get("rowtype") == "category"}
        for r in rows:
            if r.get("rowtype") != "bookmark":
                continue
            cat = cats.get(r.get("category_id"))
            if cat is None:
                log.warning("bookmark %s points at missing category %s", r.get("id"), r.get("category_id"))
                continue
            cat.bookmarks.append(Bookmark.from_row(r))
        for c in cats.values():
            c.bookmarks.sort(key=lambda b: b.sort_order)
        return sorted(cats.values(), key=lambda c: c.sort_order)

    def get_category(self, category_id: str) -> Category:
        for c in self.fetch_categories():
            if c.id == category_id:
                return c
        raise NotFoundError("category", category_id)

    def get_bookmark(self, bookmark_id: str) -> Bookmark:
        return Bookmark.from_row(self.find_row(self.load_rows(), "bookmark", bookmark_id))

    # ----------------------------
    # Ordering
    # ----------------------------
    def reorder(self, category_id: str, ordered_ids: Iterable[str]) -> Category:
        """Renumber every bookmark of the category 0..N-1 in the given order.

        Unknown ids are dropped; members missing from ``ordered_ids`` keep
        their relative order behind the listed ones.
        """
        rows = self.load_rows()
        self.find_row(rows, "category", category_id)
        members = sorted(
            (r for r in rows if r.get("rowtype") == "bookmark" and r.get("category_id") == category_id),
            key=lambda r: int(r.get("order") or 0),
        )
        by_id = {r["id"]: r for r in members}

        wanted = []
        for bid in ordered_ids:
            if bid not in by_id:
                log.warning("reorder of category %s ignores unknown bookmark %s", category_id, bid)
            elif bid not in wanted:
                wanted.append(bid)
        wanted.extend(r["id"] for r in members if r["id"] not in wanted)

        for bid, pos in assign_sort_orders(wanted).items():
            by_id[bid]["order"] = str(pos)
        self.save_rows(rows)
        log.info("category %s reordered (%d bookmarks rewritten)", category_id, len(wanted))
        return self.get_category(category_id)

    def apply_intent(self, intent: ReorderIntent) -> Category:
        return self.reorder(intent.category_id, intent.ordered_ids)

    def reorder_categories(self, ordered_ids: Iterable[str]) -> List[Category]:
        rows = self.load_rows()
        cats = sorted((r for r in rows if r.get("rowtype") == "category"), key=lambda r: int(r.get("order") or 0))
        by_id = {r["id"]: r for r in cats}
        wanted = [cid for cid in dict.fromkeys(ordered_ids) if cid in by_id]
        wanted.extend(r["id"] for r in cats if r["id"] not in wanted)
        for cid, pos in assign_sort_orders(wanted).items():
            by_id[cid]["order"] = str(pos)
        self.save_rows(rows)
        return self.fetch_categories()

    # ----------------------------
    # Categories
    # ----------------------------
    def create_category(self, category: Category) -> Category:
        category = category.validated()
        rows = self.load_rows()
        category.id = new_id()
        category.sort_order = self.next_order(rows, lambda r: r.get("rowtype") == "category")
        category.bookmarks = []
        rows.append(category.to_row())
        self.save_rows(rows)
        log.info("created category %s (%s)", category.id, category.name)
        return category

    def update_category(self, category_id: str, changes: Dict[str, object]) -> Category:
        rows = self.load_rows()
        row = self.find_row(rows, "category", category_id)
        current = Category.from_row(row)
        merged = Category.from_dict({**current.to_dict(with_bookmarks=False), **changes, "id": category_id})
        merged = merged.validated()
        row.update(merged.to_row())
        self.save_rows(rows)
        return self.get_category(category_id)

    def delete_category(self, category_id: str) -> int:
        """Delete a category and its bookmarks; returns how many bookmarks went with it."""
        rows = self.load_rows()
        self.find_row(rows, "category", category_id)
        kept = [r for r in rows
                if not (r.get("rowtype") == "category" and r.get("id") == category_id)
                and not (r.get("rowtype") == "bookmark" and r.get("category_id") == category_id)]
        removed = len(rows) - len(kept) - 1
        self.save_rows(kept)
        log.info("deleted category %s with %d bookmark(s)", category_id, removed)
        return removed

    # ----------------------------
    # Bookmarks
    # ----------------------------
    def _next_item_order(self, rows, category_id) -> int:
        return self.next_order(rows, lambda r: r.get("rowtype") == "bookmark" and r.get("category_id") == category_id)

    def create_bookmark(self, bookmark: Bookmark) -> Bookmark:
        """Always appended at the end of its category; any sort_order given is ignored."""
        bookmark = bookmark.validated()
        rows = self.load_rows()
        self.find_row(rows, "category", bookmark.category_id)
        bookmark.id = new_id()
        bookmark.sort_order = self._next_item_order(rows, bookmark.category_id)
        rows.append(bookmark.to_row())
        self.save_rows(rows)
        log.info("created bookmark %s in category %s", bookmark.id, bookmark.category_id)
        return bookmark

    def update_bookmark(self, bookmark_id: str, changes: Dict[str, object]) -> Bookmark:
        rows = self.load_rows()
        row = self.find_row(rows, "bookmark", bookmark_id)
        current = Bookmark.from_row(row)
        merged = Bookmark.from_dict({**current.to_dict(), **changes, "id": bookmark_id}).validated()
        if merged.category_id != current.category_id:
            self.find_row(rows, "category", merged.category_id)
            merged.sort_order = self._next_item_order(rows, merged.category_id)
        else:
            merged.sort_order = current.sort_order
        row.update(merged.to_row())
        self.save_rows(rows)
        return merged

    def delete_bookmark(self, bookmark_id: str) -> None:
        rows = self.load_rows()
        self.find_row(rows, "bookmark", bookmark_id)
        self.save_rows([r for r in rows if not (r.get("rowtype") == "bookmark" and r.get("id") == bookmark_id)])

    def duplicate_bookmark(self, bookmark_id: str) -> Bookmark:
        return self.create_bookmark(self.get_bookmark(bookmark_id).duplicate())

    # ----------------------------
    # First run
    # ----------------------------
    def seed_defaults(self) -> bool:
        if any(r.get("rowtype") == "category" for r in self.load_rows()):
            return False
        news = self.create_category(Category(None, "News", hex_color="#f59e0b", default_symbol="newspaper"))
        dev = self.create_category(Category(None, "Dev Tools", hex_color="#3b82f6", default_symbol="code"))
        self.create_bookmark(Bookmark(None, "Hacker News", "https://news.ycombinator.com", news.id, icon_type="generated"))
        self.create_bookmark(Bookmark(None, "GitHub", "https://github.com", dev.id, icon_type="symbol", symbol_name="code"))
        self.create_bookmark(Bookmark(None, "Python docs", "https://docs.python.org", dev.id))
        return True


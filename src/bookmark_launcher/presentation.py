# presentation.py - everything the page needs to paint one bookmark tile

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from typing import Dict, Iterable, Optional

from .colors import DEFAULT_SHIFT, gradient_end
from .icons import IconRef, SymbolLookup, SymbolLookupFn, resolve_icon
from .models import DEFAULT_HEX_COLOR, Bookmark, Category


@dataclass(frozen=True)
class PresentationDescriptor:
    icon: IconRef
    color_start: str
    color_end: str

    def to_dict(self) -> Dict[str, object]:
        return {"icon": self.icon.to_dict(), "color_start": self.color_start, "color_end": self.color_end}


class PresentationBinder:
    """Icon + gradient per bookmark.

    The bookmark's own color wins over the category color. Results are cached
    on exactly the fields they depend on.
    """

    def __init__(self, symbol_lookup: Optional[SymbolLookupFn] = None,
                 shift: float = DEFAULT_SHIFT, cache_size: int = 1024):
        self.symbol_lookup = symbol_lookup or SymbolLookup()
        self.shift = shift
        self._cached = lru_cache(maxsize=cache_size)(self._compose)

    def bind(self, bookmark: Bookmark, category: Category) -> PresentationDescriptor:
        return self._cached(
            bookmark.id, bookmark.title, bookmark.hex_color, category.hex_color,
            bookmark.icon_type, bookmark.symbol_name, bookmark.icon_url, category.default_symbol,
        )

    def bind_all(self, categories: Iterable[Category]) -> Dict[str, PresentationDescriptor]:
        return {b.id: self.bind(b, c) for c in categories for b in c.bookmarks}

    def clear(self) -> None:
        self._cached.cache_clear()

    def _compose(self, bookmark_id, title, hex_color, category_hex_color,
                 icon_type, symbol_name, icon_url, default_symbol) -> PresentationDescriptor:
        bookmark = Bookmark(id=bookmark_id, title=title, url="", category_id=None, icon_type=icon_type,
                            symbol_name=symbol_name, icon_url=icon_url, hex_color=hex_color)
        category = Category(id=None, name="", hex_color=category_hex_color, default_symbol=default_symbol)
        start = hex_color or category_hex_color or DEFAULT_HEX_COLOR
        return PresentationDescriptor(
            icon=resolve_icon(bookmark, category, self.symbol_lookup),
            color_start=start,
            color_end=gradient_end(start, self.shift),
        )

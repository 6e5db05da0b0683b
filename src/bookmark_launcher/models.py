# models.py - categories and bookmarks as the engine sees them
#
# Both types are snapshots handed over by the store; the engine never mutates
# them in place. to_dict/from_dict speak the JSON field names of the API,
# to_row/from_row the CSV columns of the store.

from __future__ import annotations

import re
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional

from .errors import ValidationError

DEFAULT_HEX_COLOR = "#8b5cf6"
ICON_TYPES = ("favicon", "symbol", "custom", "generated")
HEX_COLOR_RE = re.compile(r"^#[0-9a-fA-F]{6}$")

# CSV schema:
# rowtype,id,category_id,order,name,url,color,icon_type,symbol_name,icon_url
FIELDS = ["rowtype", "id", "category_id", "order", "name", "url", "color", "icon_type", "symbol_name", "icon_url"]


def _int(v, default=0) -> int:
    try:
        return int(v)
    except (TypeError, ValueError):
        return default


def _text(v, what: str) -> str:
    if v is None:
        return ""
    if isinstance(v, (dict, list, tuple, set)):
        raise ValidationError(f"{what} must be a string")
    return str(v).strip()


def _opt(v, what: str = "value") -> Optional[str]:
    return _text(v, what) or None


def _items(v, what: str) -> list:
    if v is None:
        return []
    if not isinstance(v, list):
        raise ValidationError(f"{what} must be a list")
    return v


def normalize_url(u: str) -> str:
    if not u: return ""
    u = u.strip()
    if not u: return ""
    if not re.match(r"^[a-zA-Z][a-zA-Z0-9+.\-]*://", u):
        u = "https://" + u
    return u


def check_hex_color(value: Optional[str], what: str = "hex_color") -> Optional[str]:
    value = _opt(value, what)
    if value is not None and not HEX_COLOR_RE.match(value):
        raise ValidationError(f"{what} must look like #rrggbb, got {value!r}")
    return value.lower() if value else None


@dataclass
class Bookmark:
    id: Optional[str]
    title: str
    url: str
    category_id: Optional[str]
    icon_type: str = "favicon"
    symbol_name: Optional[str] = None
    icon_url: Optional[str] = None
    hex_color: Optional[str] = None
    sort_order: Optional[int] = 0

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "Bookmark":
        if not isinstance(d, dict):
            raise ValidationError("bookmark must be an object")
        return cls(
            id=_opt(d.get("id"), "id"),
            title=_text(d.get("title"), "title"),
            url=_text(d.get("url"), "url"),
            category_id=_opt(d.get("category_id"), "category_id"),
            icon_type=(_text(d.get("icon_type"), "icon_type") or "favicon").lower(),
            symbol_name=_opt(d.get("symbol_name"), "symbol_name"),
            icon_url=_opt(d.get("icon_url"), "icon_url"),
            hex_color=_opt(d.get("hex_color"), "hex_color"),
            sort_order=_int(d.get("sort_order"), 0) if d.get("sort_order") is not None else None,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "url": self.url,
            "category_id": self.category_id,
            "icon_type": self.icon_type,
            "symbol_name": self.symbol_name,
            "icon_url": self.icon_url,
            "hex_color": self.hex_color,
            "sort_order": self.sort_order,
        }

    @classmethod
    def from_row(cls, r: Dict[str, str]) -> "Bookmark":
        return cls(
            id=r["id"],
            title=r.get("name", ""),
            url=r.get("url", ""),
            category_id=r.get("category_id") or None,
            icon_type=r.get("icon_type") or "favicon",
            symbol_name=r.get("symbol_name") or None,
            icon_url=r.get("icon_url") or None,
            hex_color=r.get("color") or None,
            sort_order=_int(r.get("order")),
        )

    def to_row(self) -> Dict[str, str]:
        return dict(rowtype="bookmark", id=self.id or "", category_id=self.category_id or "",
                    order=str(self.sort_order or 0), name=self.title, url=self.url,
                    color=self.hex_color or "", icon_type=self.icon_type,
                    symbol_name=self.symbol_name or "", icon_url=self.icon_url or "")

    def validated(self) -> "Bookmark":
        """Checked, normalized copy; raises ValidationError."""
        if not self.title:
            raise ValidationError("title required")
        url = normalize_url(self.url)
        if not url:
            raise ValidationError("url required")
        if not self.category_id:
            raise ValidationError("category_id required")
        if self.icon_type not in ICON_TYPES:
            raise ValidationError(f"icon_type must be one of {', '.join(ICON_TYPES)}")
        if self.icon_type == "symbol" and not self.symbol_name:
            raise ValidationError("symbol_name required for symbol icons")
        if self.icon_type == "custom" and not self.icon_url:
            raise ValidationError("icon_url required for custom icons")
        return replace(
            self,
            url=url,
            # the other icon fields only mean something for their own type
            symbol_name=self.symbol_name if self.icon_type == "symbol" else None,
            icon_url=normalize_url(self.icon_url) if self.icon_type == "custom" else None,
            hex_color=check_hex_color(self.hex_color),
        )

    def duplicate(self) -> "Bookmark":
        """Unsaved copy; the store appends it at the end when it is created."""
        return replace(self, id=None, title=f"{self.title} (copy)", sort_order=None)


@dataclass
class Category:
    id: Optional[str]
    name: str
    hex_color: str = DEFAULT_HEX_COLOR
    default_symbol: Optional[str] = None
    sort_order: int = 0
    bookmarks: List[Bookmark] = field(default_factory=list)

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "Category":
        return cls(
            id=_opt(d.get("id"), "id"),
            name=_text(d.get("name"), "name"),
            hex_color=_opt(d.get("hex_color"), "hex_color") or DEFAULT_HEX_COLOR,
            default_symbol=_opt(d.get("default_symbol"), "default_symbol"),
            sort_order=_int(d.get("sort_order"), 0),
            bookmarks=[Bookmark.from_dict(b) for b in _items(d.get("bookmarks"), "bookmarks")],
        )

    def to_dict(self, with_bookmarks: bool = True) -> Dict[str, Any]:
        d = {
            "id": self.id,
            "name": self.name,
            "hex_color": self.hex_color,
            "default_symbol": self.default_symbol,
            "sort_order": self.sort_order,
        }
        if with_bookmarks:
            d["bookmarks"] = [b.to_dict() for b in self.bookmarks]
        return d

    @classmethod
    def from_row(cls, r: Dict[str, str]) -> "Category":
        return cls(
            id=r["id"],
            name=r.get("name", ""),
            hex_color=r.get("color") or DEFAULT_HEX_COLOR,
            default_symbol=r.get("symbol_name") or None,
            sort_order=_int(r.get("order")),
        )

    def to_row(self) -> Dict[str, str]:
        return dict(rowtype="category", id=self.id or "", category_id="", order=str(self.sort_order),
                    name=self.name, url="", color=self.hex_color or DEFAULT_HEX_COLOR, icon_type="",
                    symbol_name=self.default_symbol or "", icon_url="")

    def validated(self) -> "Category":
        if not self.name:
            raise ValidationError("category name required")
        return replace(self, hex_color=check_hex_color(self.hex_color, "category hex_color") or DEFAULT_HEX_COLOR)

    @property
    def bookmark_ids(self) -> List[str]:
        return [b.id for b in self.bookmarks]

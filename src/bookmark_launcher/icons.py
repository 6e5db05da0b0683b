# icons.py - pick the icon a bookmark tile shows
#
# Symbol names are typed by hand ("db", "Settings", "rocket"), so they go
# through an alias table before being matched against the outline icon set.

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, Optional

log = logging.getLogger(__name__)

SYMBOL = "symbol"
IMAGE = "image"
GLYPH = "glyph"

FALLBACK_SYMBOL = "bookmark"

ICON_ALIASES: Dict[str, str] = {
    "database": "circle-stack",
    "db": "circle-stack",
    "settings": "cog-6-tooth",
    "gear": "cog-6-tooth",
    "cog": "cog-6-tooth",
    "config": "adjustments-horizontal",
    "terminal": "command-line",
    "cli": "command-line",
    "console": "command-line",
    "code": "code-bracket",
    "mail": "envelope",
    "email": "envelope",
    "cart": "shopping-cart",
    "server": "server-stack",
    "chat": "chat-bubble-oval-left",
    "message": "chat-bubble-oval-left",
    "chatbot": "chat-bubble-left-right",
    "globe": "globe-alt",
    "world": "globe-alt",
    "lightbulb": "light-bulb",
    "bulb": "light-bulb",
    "music": "musical-note",
    "audio": "musical-note",
    "security": "shield-check",
    "shield": "shield-check",
    "lock": "lock-closed",
    "rocket": "rocket-launch",
    "launch": "rocket-launch",
    "tools": "wrench-screwdriver",
    "wrench": "wrench-screwdriver",
    "chart": "chart-bar",
    "analytics": "chart-bar",
    "graph": "chart-bar",
    "stats": "chart-bar",
    "puzzle": "puzzle-piece",
    "plugin": "puzzle-piece",
    "cpu": "cpu-chip",
    "chip": "cpu-chip",
    "ai": "sparkles",
    "magic": "sparkles",
    "payment": "credit-card",
    "card": "credit-card",
    "video": "play",
    "movie": "film",
}

# Outline icon names (kebab-case) the page knows how to draw.
HEROICONS = frozenset("""
academic-cap adjustments-horizontal archive-box arrow-path at-symbol banknotes
beaker bell bolt book-open bookmark briefcase bug-ant building-office calculator
calendar camera chart-bar chart-pie chat-bubble-left-right chat-bubble-oval-left
check-circle circle-stack clipboard clock cloud code-bracket cog-6-tooth
command-line computer-desktop cpu-chip credit-card cube currency-dollar document
document-text envelope eye film fire flag folder gift globe-alt hashtag heart
home identification inbox key language light-bulb link lock-closed map
megaphone microphone moon musical-note newspaper paper-airplane pencil phone
photo play puzzle-piece rocket-launch rss server-stack share shield-check
shopping-cart signal sparkles square-3-stack-3d star sun tag trophy truck tv
user users video-camera wallet wifi wrench-screwdriver
""".split())

_PASCAL_ICON_RE = re.compile(r"^([A-Z][A-Za-z0-9]*)Icon$")
_PASCAL_SPLIT_RE = re.compile(r"[A-Z][a-z]*|\d+[a-z]*")


@dataclass(frozen=True)
class IconRef:
    """What to draw on a tile: a named symbol, an image URL or a text glyph."""
    kind: str
    value: str

    def to_dict(self) -> Dict[str, str]:
        return {"kind": self.kind, "value": self.value}


SymbolLookupFn = Callable[[str], Optional[IconRef]]


def _kebab_from_component_name(name: str) -> Optional[str]:
    # "AcademicCapIcon" -> "academic-cap", "Cog6ToothIcon" -> "cog-6-tooth"
    m = _PASCAL_ICON_RE.match(name)
    if not m:
        return None
    return "-".join(p.lower() for p in _PASCAL_SPLIT_RE.findall(m.group(1)))


class SymbolLookup:
    """Case-insensitive symbol key -> IconRef over a fixed vocabulary.

    Aliases are consulted first, then the key itself, then the key read as a
    component name such as ``HomeIcon``. The fallback symbol is always part
    of the vocabulary.
    """

    def __init__(self, vocabulary: Iterable[str] = HEROICONS,
                 aliases: Optional[Dict[str, str]] = None):
        self.vocabulary = frozenset(v.lower() for v in vocabulary) | {FALLBACK_SYMBOL}
        self.aliases = {k.lower(): v.lower() for k, v in (ICON_ALIASES if aliases is None else aliases).items()}

    def __call__(self, key: Optional[str]) -> Optional[IconRef]:
        raw = (key or "").strip()
        if not raw:
            return None
        name = raw.lower()
        name = self.aliases.get(name, name)
        if name in self.vocabulary:
            return IconRef(SYMBOL, name)
        kebab = _kebab_from_component_name(raw)
        if kebab and kebab in self.vocabulary:
            return IconRef(SYMBOL, kebab)
        return None


def resolve_icon(bookmark, category, symbol_lookup: SymbolLookupFn) -> IconRef:
    """First match wins: custom image, own symbol, letter glyph,
    category default symbol, generic bookmark symbol."""
    icon_type = bookmark.icon_type

    if icon_type == "custom" and bookmark.icon_url:
        return IconRef(IMAGE, bookmark.icon_url)

    if icon_type == "symbol" and bookmark.symbol_name:
        ref = symbol_lookup(bookmark.symbol_name)
        if ref is not None:
            return ref
        log.debug("symbol %r did not resolve for bookmark %s", bookmark.symbol_name, bookmark.id)

    if icon_type == "generated":
        return IconRef(GLYPH, bookmark.title[:1] if bookmark.title else "?")

    default_symbol = category.default_symbol if category is not None else None
    if default_symbol:
        ref = symbol_lookup(default_symbol)
        if ref is not None:
            return ref

    return symbol_lookup(FALLBACK_SYMBOL) or IconRef(SYMBOL, FALLBACK_SYMBOL)

# colors.py - icon background gradients derived from a single accent color
#
# A bookmark tile is painted with two stops: the accent itself and an
# "analogous" partner. Warm oranges only get darker; shifting their hue drifts
# into brown/green, which looks muddy on a tile.

from __future__ import annotations

import math
import re
from typing import NamedTuple, Tuple

HEX_RE = re.compile(r"^#?([a-f\d]{2})([a-f\d]{2})([a-f\d]{2})$", re.I)

NEUTRAL_HSL = (0.0, 50.0, 50.0)
DEFAULT_SHIFT = 35
WARM_BAND = (15.0, 50.0)
WARM_DARKEN = 0.65


class GradientPair(NamedTuple):
    start: str
    end: str


def _round(x: float) -> int:
    # half-up, browsers round .5 away from zero for positive channels
    return int(math.floor(x + 0.5))


def hex_to_hsl(hex_color: str) -> Tuple[float, float, float]:
    """Return (h, s, l) with h in [0, 360) and s, l in [0, 100].

    Anything that isn't a 6-digit hex color maps to a neutral mid red so the
    caller always has something to paint.
    """
    m = HEX_RE.match((hex_color or "").strip())
    if not m:
        return NEUTRAL_HSL

    r, g, b = (int(part, 16) / 255 for part in m.groups())
    mx, mn = max(r, g, b), min(r, g, b)
    l = (mx + mn) / 2

    if mx == mn:
        h = s = 0.0
    else:
        d = mx - mn
        s = d / (2 - mx - mn) if l > 0.5 else d / (mx + mn)
        if mx == r:
            h = ((g - b) / d + (6 if g < b else 0)) / 6
        elif mx == g:
            h = ((b - r) / d + 2) / 6
        else:
            h = ((r - g) / d + 4) / 6

    return h * 360, s * 100, l * 100


def hsl_to_hex(h: float, s: float, l: float) -> str:
    s /= 100
    l /= 100

    c = (1 - abs(2 * l - 1)) * s
    x = c * (1 - abs((h / 60) % 2 - 1))
    m = l - c / 2

    if 0 <= h < 60:
        r, g, b = c, x, 0.0
    elif 60 <= h < 120:
        r, g, b = x, c, 0.0
    elif 120 <= h < 180:
        r, g, b = 0.0, c, x
    elif 180 <= h < 240:
        r, g, b = 0.0, x, c
    elif 240 <= h < 300:
        r, g, b = x, 0.0, c
    elif 300 <= h < 360:
        r, g, b = c, 0.0, x
    else:
        r = g = b = 0.0

    return "#" + "".join(f"{_round((v + m) * 255):02x}" for v in (r, g, b))


def gradient_end(hex_color: str, shift: float = DEFAULT_SHIFT) -> str:
    h, s, l = hex_to_hsl(hex_color)

    if WARM_BAND[0] <= h <= WARM_BAND[1]:
        return hsl_to_hex(h, s, l * WARM_DARKEN)

    new_hue = (h + shift) % 360
    new_l = l * 0.85 if l > 50 else min(l * 1.1, 60)
    return hsl_to_hex(new_hue, s, new_l)


def gradient(hex_color: str, shift: float = DEFAULT_SHIFT) -> GradientPair:
    """Two-stop gradient for a tile: the color itself, then its partner."""
    return GradientPair(hex_color, gradient_end(hex_color, shift))

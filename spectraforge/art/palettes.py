"""Named colour palettes and output resolutions.

Palettes hold exactly three '#RRGGBB' colours. Layers append a two-digit
hex alpha to these strings ('#13f1fc88') the way a canvas fill style
would, so colour parsing accepts both forms.

Both registries are built once at import time and exposed read-only.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from types import MappingProxyType

from spectraforge.errors import InvalidParameter

_HEX_RE = re.compile(r"^#[0-9a-fA-F]{6}([0-9a-fA-F]{2})?$")


def hex_to_rgb(h: str) -> tuple[int, int, int]:
    """Convert '#RRGGBB' to (r, g, b) ints in [0, 255]."""
    r, g, b, _ = parse_color(h)
    return (r, g, b)


def parse_color(h: str) -> tuple[int, int, int, int]:
    """Convert '#RRGGBB' or '#RRGGBBAA' to (r, g, b, a) ints in [0, 255]."""
    if not _HEX_RE.match(h):
        raise ValueError(f"Not a hex colour: {h!r}")
    h = h.lstrip("#")
    if len(h) == 6:
        h += "ff"
    return tuple(int(h[i : i + 2], 16) for i in (0, 2, 4, 6))


def with_alpha(color: str, alpha: int) -> str:
    """Append an alpha byte to a '#RRGGBB' colour."""
    return f"{color}{alpha:02x}"


# ------------------------------------------------------------------
# Palettes
# ------------------------------------------------------------------

@dataclass(frozen=True)
class Palette:
    name: str
    colors: tuple[str, str, str]

    def __post_init__(self):
        if len(self.colors) != 3:
            raise ValueError(f"Palette {self.name!r} needs 3 colours, got {len(self.colors)}")
        for c in self.colors:
            if not _HEX_RE.match(c) or len(c) != 7:
                raise ValueError(f"Palette {self.name!r} has a bad colour {c!r}")

    def color(self, idx: int) -> str:
        return self.colors[idx % 3]

    def to_dict(self) -> dict:
        return {"name": self.name, "colors": list(self.colors)}


_PALETTE_LIST = (
    Palette("Aurora", ("#13f1fc", "#0470dc", "#1f1a3a")),
    Palette("Solar Burst", ("#ffe29f", "#ffa99f", "#ff719a")),
    Palette("Jade Circuit", ("#00f5a0", "#00d9f5", "#0067f5")),
    Palette("Neon Noir", ("#7f5af0", "#2cb1bc", "#16161a")),
    Palette("Sunset Bloom", ("#ff9a8b", "#ff6a88", "#ff99ac")),
    Palette("Digital Forest", ("#a0ff9d", "#16c79a", "#132a13")),
)

PALETTES = MappingProxyType({p.name: p for p in _PALETTE_LIST})


def get_palette(name: str) -> Palette:
    palette = PALETTES.get(name)
    if palette is None:
        raise InvalidParameter("palette", name, list(PALETTES))
    return palette


# ------------------------------------------------------------------
# Resolutions
# ------------------------------------------------------------------

@dataclass(frozen=True)
class Resolution:
    label: str
    width: int
    height: int

    @property
    def key(self) -> str:
        return f"{self.width}x{self.height}"

    def to_dict(self) -> dict:
        return {"label": self.label, "key": self.key,
                "width": self.width, "height": self.height}


_RESOLUTION_LIST = (
    Resolution("Square 1024x1024", 1024, 1024),
    Resolution("Landscape 1280x720", 1280, 720),
    Resolution("Portrait 720x1280", 720, 1280),
)

RESOLUTIONS = MappingProxyType({r.label: r for r in _RESOLUTION_LIST})
_RESOLUTIONS_BY_KEY = MappingProxyType({r.key: r for r in _RESOLUTION_LIST})


def get_resolution(ref: str | Resolution) -> Resolution:
    """Look up a preset by label ('Square 1024x1024') or key ('1024x1024')."""
    if isinstance(ref, Resolution):
        if ref in _RESOLUTION_LIST:
            return ref
        raise InvalidParameter("resolution", ref.key, list(_RESOLUTIONS_BY_KEY))
    res = RESOLUTIONS.get(ref) or _RESOLUTIONS_BY_KEY.get(ref)
    if res is None:
        raise InvalidParameter("resolution", ref, list(_RESOLUTIONS_BY_KEY))
    return res

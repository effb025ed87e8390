"""Style compositing.

A style is an ordered list of layer calls that runs after the implicit
backdrop. Every style applies the scanline pass exactly once; for
Synthwave Horizon it comes straight after the fluid layer and nothing is
drawn after it, for all other styles it is the final layer anyway.
The position is part of the data, so the sequence is all there is to
check.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from spectraforge.art.palettes import Palette
from spectraforge.errors import InvalidParameter
from spectraforge.render.layers import (
    apply_scanlines,
    draw_fluid,
    draw_particles,
    draw_polygons,
)
from spectraforge.render.rng import SeededRNG
from spectraforge.render.surface import PixelSurface

logger = logging.getLogger(__name__)


class Layer(Enum):
    POLYGON = "polygon"
    FLUID = "fluid"
    PARTICLE = "particle"
    SCANLINE = "scanline"


@dataclass(frozen=True)
class StyleDefinition:
    name: str
    layers: tuple[Layer, ...]

    def __post_init__(self):
        if self.layers.count(Layer.SCANLINE) != 1:
            raise ValueError(f"Style {self.name!r} must apply the scanline pass exactly once")

    @property
    def scanline_index(self) -> int:
        return self.layers.index(Layer.SCANLINE)

    @property
    def scanline_is_terminal(self) -> bool:
        return self.scanline_index == len(self.layers) - 1


_FALLBACK_LAYERS = (Layer.FLUID, Layer.POLYGON, Layer.PARTICLE, Layer.SCANLINE)


class Style(Enum):
    ABSTRACT_FLOW = StyleDefinition("Abstract Flow", _FALLBACK_LAYERS)
    POLYGON_NEBULA = StyleDefinition(
        "Polygon Nebula", (Layer.POLYGON, Layer.PARTICLE, Layer.SCANLINE))
    FRACTAL_BLOOM = StyleDefinition(
        "Fractal Bloom", (Layer.FLUID, Layer.PARTICLE, Layer.SCANLINE))
    CHROMATIC_STORM = StyleDefinition(
        "Chromatic Storm", (Layer.POLYGON, Layer.FLUID, Layer.PARTICLE, Layer.SCANLINE))
    SYNTHWAVE_HORIZON = StyleDefinition(
        "Synthwave Horizon", (Layer.FLUID, Layer.SCANLINE))
    LIQUID_AURORA = StyleDefinition(
        "Liquid Aurora", (Layer.FLUID, Layer.PARTICLE, Layer.SCANLINE))
    # Used for unrecognised names when lookups are lenient.
    FALLBACK = StyleDefinition("Fallback", _FALLBACK_LAYERS)

    @property
    def label(self) -> str:
        return self.value.name

    @property
    def layers(self) -> tuple[Layer, ...]:
        return self.value.layers


STYLES = {s.label: s for s in Style if s is not Style.FALLBACK}
STYLE_NAMES = list(STYLES)


def resolve_style(name: str, strict: bool = True) -> Style:
    style = STYLES.get(name)
    if style is not None:
        return style
    if strict:
        raise InvalidParameter("style", name, STYLE_NAMES)
    logger.debug("Unknown style %r, using fallback sequence", name)
    return Style.FALLBACK


def _scanline(rng: SeededRNG, surface: PixelSurface,
              width: int, height: int, palette: Palette) -> None:
    apply_scanlines(surface, height)


LAYER_RENDERERS = {
    Layer.POLYGON: draw_polygons,
    Layer.FLUID: draw_fluid,
    Layer.PARTICLE: draw_particles,
    Layer.SCANLINE: _scanline,
}


def compose(style: Style, rng: SeededRNG, surface: PixelSurface,
            width: int, height: int, palette: Palette) -> None:
    """Run the style's layers, in order, over an already-backdropped surface."""
    for layer in style.layers:
        logger.debug("%s: %s layer", style.label, layer.value)
        LAYER_RENDERERS[layer](rng, surface, width, height, palette)

"""Layer renderers.

Each drawing layer takes the live RNG, the target surface, its
dimensions and the active palette, and advances the RNG as a side
effect. The order of draws inside each layer is fixed; changing it
changes every image rendered from a given seed.

Scanline is the exception: it consumes no randomness and works on the
raw pixel buffer.
"""

from __future__ import annotations

import logging
import math

import numpy as np

from spectraforge.art.palettes import Palette, parse_color, with_alpha
from spectraforge.render.rng import SeededRNG
from spectraforge.render.surface import PixelSurface

logger = logging.getLogger(__name__)

BACKDROP_BLOBS = 8
BACKDROP_BLOB_ALPHA = 0x88
POLYGON_LAYERS = 12
FLUID_BLOBS = 60
FLUID_BLOB_ALPHA = 0xDD
PARTICLE_COUNT = 800
PARTICLE_COLOR = "#ffffff11"
SCANLINE_FACTOR = 0.95


def draw_backdrop(rng: SeededRNG, surface: PixelSurface,
                  width: int, height: int, palette: Palette) -> None:
    """Corner-to-corner gradient plus soft blobs that may sit off-canvas."""
    c = palette.colors
    surface.fill_linear_gradient(0, 0, width, height, [
        (0.0, parse_color(c[0])),
        (0.6, parse_color(c[1])),
        (1.0, parse_color(c[2])),
    ])

    for i in range(BACKDROP_BLOBS):
        radius = max(width, height) * rng.range(0.1, 0.6)
        x = rng.range(-width * 0.2, width * 1.2)
        y = rng.range(-height * 0.2, height * 1.2)
        surface.fill_radial_gradient(x, y, radius * 0.2, radius, [
            (0.0, parse_color(with_alpha(palette.color(i), BACKDROP_BLOB_ALPHA))),
            (1.0, parse_color(with_alpha(palette.color(i + 1), 0))),
        ])


def draw_polygons(rng: SeededRNG, surface: PixelSurface,
                  width: int, height: int, palette: Palette) -> None:
    """Irregular polygons around the centre, added with 'lighter' compositing."""
    with surface.compositing("lighter"):
        for i in range(POLYGON_LAYERS):
            count = math.floor(rng.range(3, 8))
            points = []
            for j in range(count):
                angle = (math.pi * 2 * j) / count + rng.range(-0.5, 0.5)
                radius = min(width, height) * rng.range(0.2, 0.5)
                x = width / 2 + math.cos(angle) * radius * rng.range(0.6, 1.2)
                y = height / 2 + math.sin(angle) * radius * rng.range(0.6, 1.2)
                points.append((x, y))
            alpha = math.floor(rng.range(40, 90))
            surface.fill_polygon(points, parse_color(with_alpha(palette.color(i), alpha)))


def draw_fluid(rng: SeededRNG, surface: PixelSurface,
               width: int, height: int, palette: Palette) -> None:
    """Dense field of small blobs that fade into the next palette colour."""
    for i in range(FLUID_BLOBS):
        x = rng.range(-0.2, 1.2) * width
        y = rng.range(-0.2, 1.2) * height
        radius = max(width, height) * rng.range(0.05, 0.25)
        surface.fill_radial_gradient(x, y, 0, radius, [
            (0.0, parse_color(with_alpha(palette.color(i), FLUID_BLOB_ALPHA))),
            (1.0, parse_color(with_alpha(palette.color(i + 1), 0))),
        ])


def draw_particles(rng: SeededRNG, surface: PixelSurface,
                   width: int, height: int, palette: Palette) -> None:
    """Fine grain: tiny translucent white squares."""
    color = parse_color(PARTICLE_COLOR)
    for _ in range(PARTICLE_COUNT):
        x = rng.range(0, width)
        y = rng.range(0, height)
        size = rng.range(0.5, 2)
        surface.fill_rect(x, y, size, size, color)


def apply_scanlines(surface: PixelSurface, height: int) -> None:
    """Darken RGB on every even row; alpha and odd rows are untouched."""
    pixels = surface.get_pixels()
    rows = pixels[0:min(height, surface.height):2, :, :3].astype(np.float64)
    pixels[0:min(height, surface.height):2, :, :3] = np.clip(
        np.rint(rows * SCANLINE_FACTOR), 0, 255
    ).astype(np.uint8)
    surface.put_pixels(pixels)

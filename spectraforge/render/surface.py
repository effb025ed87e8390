"""Mutable RGBA pixel surface.

Pixels live in a (H, W, 4) uint8 numpy buffer with straight (not
premultiplied) alpha, laid out like a canvas ImageData. Every fill
computes a source colour and a coverage mask over the clipped bounding
box of the shape, then composites that box back into the buffer:

  - "source-over": standard over operator.
  - "lighter":     additive, premultiplied sum clamped to 1.

Gradient stops are interpolated in premultiplied space, so a stop with
zero alpha contributes no colour. Polygons sample pixel centres with the
nonzero winding rule; rectangles and disc edges use fractional coverage.
"""

from __future__ import annotations

import hashlib
import io
import logging
import math
from contextlib import contextmanager

import numpy as np
from PIL import Image

from spectraforge.errors import SurfaceUnavailable

logger = logging.getLogger(__name__)

COMPOSITE_MODES = ("source-over", "lighter")

Color = tuple[int, int, int, int]
Stops = list[tuple[float, Color]]


def _to_u8(v: np.ndarray) -> np.ndarray:
    return np.clip(np.rint(v * 255.0), 0, 255).astype(np.uint8)


def _centres(x0: int, x1: int, y0: int, y1: int) -> tuple[np.ndarray, np.ndarray]:
    """Pixel-centre coordinate grids for the box [x0, x1) x [y0, y1)."""
    xs = np.arange(x0, x1, dtype=np.float64) + 0.5
    ys = np.arange(y0, y1, dtype=np.float64) + 0.5
    return np.meshgrid(xs, ys)


def _winding_numbers(points: list[tuple[float, float]],
                     xx: np.ndarray, yy: np.ndarray) -> np.ndarray:
    """Winding number of the closed outline ``points`` around each sample."""
    winding = np.zeros(xx.shape, dtype=np.int32)
    n = len(points)
    for i in range(n):
        ax, ay = points[i]
        bx, by = points[(i + 1) % n]
        if ay == by:
            continue
        side = (bx - ax) * (yy - ay) - (xx - ax) * (by - ay)
        winding += ((ay <= yy) & (yy < by) & (side > 0)).astype(np.int32)
        winding -= ((by <= yy) & (yy < ay) & (side < 0)).astype(np.int32)
    return winding


def _prepare_stops(stops: Stops) -> tuple[np.ndarray, np.ndarray]:
    if not stops:
        raise ValueError("gradient needs at least one stop")
    offsets = np.array([o for o, _ in stops], dtype=np.float64)
    if np.any(np.diff(offsets) < 0) or offsets[0] < 0 or offsets[-1] > 1:
        raise ValueError(f"gradient offsets must be sorted within [0, 1]: {offsets}")
    rgba = np.array([c for _, c in stops], dtype=np.float64) / 255.0
    rgba[:, :3] *= rgba[:, 3:4]
    return offsets, rgba


def _sample_stops(t: np.ndarray, offsets: np.ndarray,
                  rgba: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
    """Return (premultiplied rgb, alpha) for gradient positions ``t``."""
    chans = [np.interp(t, offsets, rgba[:, k]) for k in range(4)]
    return np.stack(chans[:3], axis=-1), chans[3]


class PixelSurface:
    """A single-writer RGBA drawing buffer.

    One generation owns the surface for its whole duration; callers
    serialise renders that share a surface.
    """

    def __init__(self, width: int = 0, height: int = 0):
        self._pixels = np.zeros((0, 0, 4), dtype=np.uint8)
        self._mode = "source-over"
        if width or height:
            self.resize(width, height)

    # ------------------------------------------------------------------
    # Sizing
    # ------------------------------------------------------------------

    @property
    def width(self) -> int:
        return self._pixels.shape[1]

    @property
    def height(self) -> int:
        return self._pixels.shape[0]

    @property
    def size(self) -> tuple[int, int]:
        return (self.width, self.height)

    def resize(self, width: int, height: int) -> None:
        """Size the buffer and discard its contents."""
        try:
            valid = int(width) == width and int(height) == height and width > 0 and height > 0
        except (TypeError, ValueError):
            valid = False
        if not valid:
            raise SurfaceUnavailable(f"Cannot size surface to {width!r}x{height!r}")

        self._mode = "source-over"
        if (int(width), int(height)) == self.size:
            self.clear()
            return
        try:
            self._pixels = np.zeros((int(height), int(width), 4), dtype=np.uint8)
        except MemoryError as e:
            raise SurfaceUnavailable(f"Out of memory allocating {width}x{height} surface") from e
        logger.debug("Allocated %dx%d surface", width, height)

    def clear(self) -> None:
        self._pixels.fill(0)

    # ------------------------------------------------------------------
    # Compositing
    # ------------------------------------------------------------------

    @property
    def composite_mode(self) -> str:
        return self._mode

    @composite_mode.setter
    def composite_mode(self, mode: str) -> None:
        if mode not in COMPOSITE_MODES:
            raise ValueError(f"Unknown composite mode: {mode!r}")
        self._mode = mode

    @contextmanager
    def compositing(self, mode: str):
        """Temporarily switch composite mode; the prior mode is always restored."""
        prev = self._mode
        self.composite_mode = mode
        try:
            yield self
        finally:
            self._mode = prev

    def _clip_box(self, left: float, top: float,
                  right: float, bottom: float) -> tuple[int, int, int, int] | None:
        x0 = max(0, math.floor(left))
        y0 = max(0, math.floor(top))
        x1 = min(self.width, math.ceil(right))
        y1 = min(self.height, math.ceil(bottom))
        if x0 >= x1 or y0 >= y1:
            return None
        return (x0, y0, x1, y1)

    def _composite(self, box: tuple[int, int, int, int],
                   src_c: np.ndarray, src_a: np.ndarray) -> None:
        """Blend premultiplied ``src_c``/``src_a`` into ``box``."""
        x0, y0, x1, y1 = box
        region = self._pixels[y0:y1, x0:x1]
        dst = region.astype(np.float64) / 255.0
        dst_a = dst[:, :, 3]
        dst_c = dst[:, :, :3] * dst_a[:, :, np.newaxis]

        if self._mode == "lighter":
            out_c = np.minimum(src_c + dst_c, 1.0)
            out_a = np.minimum(src_a + dst_a, 1.0)
        else:
            inv = 1.0 - src_a
            out_c = src_c + dst_c * inv[:, :, np.newaxis]
            out_a = src_a + dst_a * inv

        opaque = out_a > 0
        safe_a = np.where(opaque, out_a, 1.0)
        rgb = np.where(opaque[:, :, np.newaxis], out_c / safe_a[:, :, np.newaxis], 0.0)

        region[:, :, :3] = _to_u8(rgb)
        region[:, :, 3] = _to_u8(out_a)

    def _fill_solid(self, box: tuple[int, int, int, int],
                    coverage: np.ndarray, color: Color) -> None:
        rgba = np.asarray(color, dtype=np.float64) / 255.0
        src_a = coverage * rgba[3]
        src_c = src_a[:, :, np.newaxis] * rgba[:3]
        self._composite(box, src_c, src_a)

    # ------------------------------------------------------------------
    # Fills
    # ------------------------------------------------------------------

    def fill_linear_gradient(self, x0: float, y0: float, x1: float, y1: float,
                             stops: Stops) -> None:
        """Fill the whole surface with a linear gradient from (x0, y0) to (x1, y1)."""
        dx, dy = x1 - x0, y1 - y0
        denom = dx * dx + dy * dy
        if denom == 0:
            raise ValueError("linear gradient needs distinct end points")
        offsets, rgba = _prepare_stops(stops)

        xx, yy = _centres(0, self.width, 0, self.height)
        t = np.clip(((xx - x0) * dx + (yy - y0) * dy) / denom, 0.0, 1.0)
        src_c, src_a = _sample_stops(t, offsets, rgba)
        self._composite((0, 0, self.width, self.height), src_c, src_a)

    def fill_radial_gradient(self, cx: float, cy: float, r0: float, r1: float,
                             stops: Stops) -> None:
        """Fill the disc of radius ``r1`` around (cx, cy) with a radial gradient.

        Offset 0 sits on the inner circle ``r0`` and offset 1 on ``r1``;
        the area inside ``r0`` takes the first stop.
        """
        if not 0 <= r0 < r1:
            raise ValueError(f"radial gradient needs 0 <= r0 < r1, got {r0}, {r1}")
        offsets, rgba = _prepare_stops(stops)

        box = self._clip_box(cx - r1 - 1, cy - r1 - 1, cx + r1 + 1, cy + r1 + 1)
        if box is None:
            return
        x0, y0, x1, y1 = box
        xx, yy = _centres(x0, x1, y0, y1)
        d = np.hypot(xx - cx, yy - cy)
        t = np.clip((d - r0) / (r1 - r0), 0.0, 1.0)
        src_c, src_a = _sample_stops(t, offsets, rgba)

        coverage = np.clip(r1 - d + 0.5, 0.0, 1.0)
        self._composite(box, src_c * coverage[:, :, np.newaxis], src_a * coverage)

    def fill_polygon(self, points: list[tuple[float, float]], color: Color) -> None:
        """Fill a closed polygon with a solid colour.

        Pixel centres are tested with the nonzero winding rule, so the
        overlapping regions of a self-intersecting outline stay filled.
        """
        if len(points) < 3:
            raise ValueError(f"polygon needs at least 3 points, got {len(points)}")
        xs = [p[0] for p in points]
        ys = [p[1] for p in points]
        box = self._clip_box(min(xs), min(ys), max(xs) + 1, max(ys) + 1)
        if box is None:
            return
        x0, y0, x1, y1 = box

        xx, yy = _centres(x0, x1, y0, y1)
        winding = _winding_numbers(points, xx, yy)
        self._fill_solid(box, (winding != 0).astype(np.float64), color)

    def fill_rect(self, x: float, y: float, w: float, h: float, color: Color) -> None:
        """Fill an axis-aligned rectangle, weighting edge pixels by covered area."""
        if w <= 0 or h <= 0:
            raise ValueError(f"rect needs positive size, got {w}x{h}")
        box = self._clip_box(x, y, x + w, y + h)
        if box is None:
            return
        x0, y0, x1, y1 = box

        cols = np.arange(x0, x1, dtype=np.float64)
        rows = np.arange(y0, y1, dtype=np.float64)
        cov_x = np.clip(np.minimum(cols + 1, x + w) - np.maximum(cols, x), 0.0, 1.0)
        cov_y = np.clip(np.minimum(rows + 1, y + h) - np.maximum(rows, y), 0.0, 1.0)
        self._fill_solid(box, np.outer(cov_y, cov_x), color)

    # ------------------------------------------------------------------
    # Direct pixel access
    # ------------------------------------------------------------------

    def get_pixels(self) -> np.ndarray:
        """Copy of the (H, W, 4) uint8 buffer."""
        return self._pixels.copy()

    def put_pixels(self, pixels: np.ndarray) -> None:
        if pixels.shape != self._pixels.shape or pixels.dtype != np.uint8:
            raise ValueError(
                f"expected uint8 array of shape {self._pixels.shape}, "
                f"got {pixels.dtype} {pixels.shape}"
            )
        self._pixels[...] = pixels

    def get_pixel(self, x: int, y: int) -> Color:
        return tuple(int(v) for v in self._pixels[y, x])

    def set_pixel(self, x: int, y: int, color: Color) -> None:
        self._pixels[y, x] = color

    # ------------------------------------------------------------------
    # Export
    # ------------------------------------------------------------------

    def to_image(self) -> Image.Image:
        if self._pixels.size == 0:
            raise SurfaceUnavailable("Surface has not been sized")
        return Image.fromarray(self._pixels.copy())

    def encode(self, fmt: str = "PNG") -> bytes:
        img = self.to_image()
        if fmt.upper() in ("JPEG", "JPG"):
            img = img.convert("RGB")
        buf = io.BytesIO()
        img.save(buf, format=fmt)
        return buf.getvalue()

    def checksum(self) -> str:
        """SHA-256 of the dimensions and raw pixel bytes."""
        h = hashlib.sha256(f"{self.width}x{self.height}".encode("ascii"))
        h.update(self._pixels.tobytes())
        return h.hexdigest()

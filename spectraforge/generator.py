"""Artwork generation.

Resolves a request against the registries, seeds an RNG from the request,
draws the backdrop and the style's layer sequence onto a surface, and
encodes the result.

Two entry points:
  - ``generate(request)``: reproducible, the request carries its seed time.
  - ``generate_fresh(...)``: stamps the request with the wall clock, so
    the same parameters give a new image every call.
"""

from __future__ import annotations

import base64
import logging
import random
import re
import time
import uuid
from dataclasses import dataclass, field

from spectraforge.art.compositor import STYLE_NAMES, compose, resolve_style
from spectraforge.art.palettes import PALETTES, get_palette, get_resolution
from spectraforge.errors import SurfaceUnavailable
from spectraforge.render.layers import draw_backdrop
from spectraforge.render.rng import SeededRNG
from spectraforge.render.surface import PixelSurface

logger = logging.getLogger(__name__)

DEFAULT_PROMPT = "dreamscape of floating islands with neon rivers"
SURPRISE_PROMPT = "bioluminescent coral reefs under moonlit skies"
DEFAULT_STYLE = "Abstract Flow"
DEFAULT_PALETTE = "Aurora"
DEFAULT_RESOLUTION = "Square 1024x1024"

_MIME_TYPES = {"PNG": "image/png", "JPEG": "image/jpeg", "WEBP": "image/webp"}


def _now_ms() -> int:
    return int(time.time() * 1000)


@dataclass(frozen=True)
class GenerationRequest:
    prompt: str = DEFAULT_PROMPT
    style: str = DEFAULT_STYLE
    palette: str = DEFAULT_PALETTE
    resolution: str = DEFAULT_RESOLUTION
    seed_time: int = 0

    @classmethod
    def now(cls, prompt: str = DEFAULT_PROMPT, style: str = DEFAULT_STYLE,
            palette: str = DEFAULT_PALETTE,
            resolution: str = DEFAULT_RESOLUTION) -> GenerationRequest:
        return cls(prompt, style, palette, resolution, seed_time=_now_ms())

    def to_dict(self) -> dict:
        return {
            "prompt": self.prompt, "style": self.style, "palette": self.palette,
            "resolution": self.resolution, "seed_time": self.seed_time,
        }


def build_seed(request: GenerationRequest) -> str:
    return f"{request.prompt}-{request.style}-{request.palette}-{request.seed_time}"


def surprise_request(rng: random.Random | None = None) -> GenerationRequest:
    """Random style and palette with the stock surprise prompt."""
    rng = rng or random.Random()
    return GenerationRequest(
        prompt=SURPRISE_PROMPT,
        style=rng.choice(STYLE_NAMES),
        palette=rng.choice(list(PALETTES)),
    )


@dataclass
class Artwork:
    request: GenerationRequest
    image: bytes
    width: int
    height: int
    checksum: str
    image_format: str = "PNG"
    id: str = field(default_factory=lambda: uuid.uuid4().hex)
    created_at: int = field(default_factory=_now_ms)

    @property
    def mime_type(self) -> str:
        return _MIME_TYPES.get(self.image_format.upper(), "application/octet-stream")

    @property
    def data_url(self) -> str:
        b64 = base64.b64encode(self.image).decode("ascii")
        return f"data:{self.mime_type};base64,{b64}"

    @property
    def filename(self) -> str:
        stem = re.sub(r"\s+", "-", self.request.style.lower())
        ext = "jpg" if self.image_format.upper() == "JPEG" else self.image_format.lower()
        return f"{stem}-{self.id[:8]}.{ext}"

    def to_dict(self, include_image: bool = False) -> dict:
        d = {
            "id": self.id,
            "created_at": self.created_at,
            "width": self.width,
            "height": self.height,
            "checksum": self.checksum,
            "filename": self.filename,
            **self.request.to_dict(),
        }
        if include_image:
            d["data_url"] = self.data_url
        return d


class ArtworkGenerator:
    def __init__(self, config: dict | None = None):
        cfg = config or {}
        self.strict_styles: bool = cfg.get("strict_styles", True)
        self.image_format: str = cfg.get("image_format", "PNG")

    def render(self, request: GenerationRequest,
               surface: PixelSurface | None = None) -> PixelSurface | None:
        """Draw ``request`` onto a surface and return it, or None if no surface.

        A supplied surface is resized (and cleared) and then owned by this
        call until it returns. Unknown references raise InvalidParameter
        before anything is drawn.
        """
        style = resolve_style(request.style, strict=self.strict_styles)
        palette = get_palette(request.palette)
        resolution = get_resolution(request.resolution)

        seed = build_seed(request)
        rng = SeededRNG(seed)
        width, height = resolution.width, resolution.height

        scratch = surface if surface is not None else PixelSurface()
        try:
            scratch.resize(width, height)
        except SurfaceUnavailable as e:
            logger.warning("Surface unavailable for %s: %s", resolution.key, e)
            return None

        logger.debug("Rendering %s / %s at %s, seed=%r",
                     style.label, palette.name, resolution.key, seed)
        try:
            draw_backdrop(rng, scratch, width, height, palette)
            compose(style, rng, scratch, width, height, palette)
        except Exception:
            scratch.clear()
            raise
        return scratch

    def generate(self, request: GenerationRequest) -> Artwork | None:
        surface = self.render(request)
        if surface is None:
            return None
        artwork = Artwork(
            request=request,
            image=surface.encode(self.image_format),
            width=surface.width,
            height=surface.height,
            checksum=surface.checksum(),
            image_format=self.image_format,
        )
        logger.info("Generated %s (%dx%d)", artwork.filename, artwork.width, artwork.height)
        return artwork

    def generate_fresh(self, prompt: str = DEFAULT_PROMPT, style: str = DEFAULT_STYLE,
                       palette: str = DEFAULT_PALETTE,
                       resolution: str = DEFAULT_RESOLUTION) -> Artwork | None:
        return self.generate(GenerationRequest.now(prompt, style, palette, resolution))

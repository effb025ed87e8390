#!/usr/bin/env python3
"""SpectraForge -- CLI Interface.

Renders artworks to PNG files:
1. Resolves style, palette and resolution
2. Seeds the generator from the prompt, names and seed time
3. Writes the image to the output directory

Usage:
    python -m spectraforge.main [--style "Polygon Nebula"] [--palette Aurora] [--seed-time 0]
    python -m spectraforge.main --all-styles --seed-time 0
    python -m spectraforge.main --list
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path

from spectraforge.art.compositor import STYLE_NAMES, STYLES
from spectraforge.art.palettes import PALETTES, RESOLUTIONS
from spectraforge.errors import InvalidParameter
from spectraforge.generator import (
    DEFAULT_PALETTE,
    DEFAULT_PROMPT,
    DEFAULT_RESOLUTION,
    DEFAULT_STYLE,
    ArtworkGenerator,
    GenerationRequest,
)

OUTPUT_DIR = Path(os.environ.get("SPECTRAFORGE_OUTPUT_DIR", "output"))


def parse_args(argv: list[str] | None = None):
    p = argparse.ArgumentParser(description="SpectraForge: seeded procedural artwork")
    p.add_argument("--prompt", default=DEFAULT_PROMPT, help="Prompt text (seed entropy only)")
    p.add_argument("--style", default=DEFAULT_STYLE, help=f"Visual style (default: {DEFAULT_STYLE})")
    p.add_argument("--palette", default=DEFAULT_PALETTE, help=f"Palette (default: {DEFAULT_PALETTE})")
    p.add_argument(
        "--resolution",
        default=DEFAULT_RESOLUTION,
        help="Preset label or WxH key, e.g. 1280x720 (default: square 1024)",
    )
    p.add_argument(
        "--seed-time",
        type=int,
        default=None,
        help="Fixed seed time for reproducible output (default: current time)",
    )
    p.add_argument("--output", type=Path, default=OUTPUT_DIR, help=f"Output directory (default: {OUTPUT_DIR})")
    p.add_argument("--all-styles", action="store_true", help="Render one image per style")
    p.add_argument("--lenient", action="store_true", help="Use the fallback sequence for unknown styles")
    p.add_argument("--list", action="store_true", help="List styles, palettes and resolutions")
    p.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return p.parse_args(argv)


def _print_options() -> None:
    print("Styles:")
    for name, style in STYLES.items():
        print(f"  {name:<18} {' > '.join(['backdrop'] + [layer.value for layer in style.layers])}")
    print("Palettes:")
    for name, palette in PALETTES.items():
        print(f"  {name:<18} {' '.join(palette.colors)}")
    print("Resolutions:")
    for label, res in RESOLUTIONS.items():
        print(f"  {res.key:<18} {label}")


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.list:
        _print_options()
        return 0

    generator = ArtworkGenerator({"strict_styles": not args.lenient})
    styles = STYLE_NAMES if args.all_styles else [args.style]
    seed_time = args.seed_time
    if seed_time is None and args.all_styles:
        seed_time = GenerationRequest.now().seed_time

    args.output.mkdir(parents=True, exist_ok=True)

    for i, style in enumerate(styles):
        if seed_time is None:
            request = GenerationRequest.now(args.prompt, style, args.palette, args.resolution)
        else:
            request = GenerationRequest(args.prompt, style, args.palette, args.resolution, seed_time)
        try:
            artwork = generator.generate(request)
        except InvalidParameter as e:
            print(f"  Error: {e}", file=sys.stderr)
            return 2
        if artwork is None:
            print("  Error: drawing surface unavailable", file=sys.stderr)
            return 1

        path = args.output / artwork.filename
        path.write_bytes(artwork.image)
        print(f"[{i+1}/{len(styles)}] Saved {path}  "
              f"({artwork.width}x{artwork.height}, palette={request.palette}, "
              f"seed_time={request.seed_time})")

    return 0


if __name__ == "__main__":
    sys.exit(main())

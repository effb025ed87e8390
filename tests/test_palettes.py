"""Palette and resolution registries."""

from __future__ import annotations

import re

import pytest

from spectraforge.art.palettes import (
    PALETTES,
    RESOLUTIONS,
    Palette,
    get_palette,
    get_resolution,
    hex_to_rgb,
    parse_color,
    with_alpha,
)
from spectraforge.errors import InvalidParameter

HEX = re.compile(r"^#[0-9a-f]{6}$")


class TestPalettes:
    def test_expected_names(self):
        assert list(PALETTES) == [
            "Aurora", "Solar Burst", "Jade Circuit",
            "Neon Noir", "Sunset Bloom", "Digital Forest",
        ]

    @pytest.mark.parametrize("name", list(PALETTES))
    def test_three_hex_colors(self, name):
        palette = PALETTES[name]
        assert len(palette.colors) == 3
        for c in palette.colors:
            assert HEX.match(c)

    def test_color_cycles(self, aurora):
        assert aurora.color(0) == "#13f1fc"
        assert aurora.color(3) == "#13f1fc"
        assert aurora.color(5) == "#1f1a3a"

    def test_lookup_miss(self):
        with pytest.raises(InvalidParameter) as exc:
            get_palette("Mauve")
        assert exc.value.kind == "palette"
        assert exc.value.value == "Mauve"

    def test_registry_is_read_only(self):
        with pytest.raises(TypeError):
            PALETTES["Mauve"] = PALETTES["Aurora"]

    @pytest.mark.parametrize("colors", [
        ("#000000", "#ffffff"),
        ("#000000", "#ffffff", "#123456", "#654321"),
        ("#000000", "#ffffff", "red"),
        ("#000000", "#ffffff", "#12345678"),
    ])
    def test_invalid_palette(self, colors):
        with pytest.raises(ValueError):
            Palette("Broken", colors)


class TestColors:
    def test_hex_to_rgb(self):
        assert hex_to_rgb("#13f1fc") == (0x13, 0xF1, 0xFC)

    def test_parse_with_alpha(self):
        assert parse_color("#13f1fc88") == (0x13, 0xF1, 0xFC, 0x88)
        assert parse_color("#13f1fc") == (0x13, 0xF1, 0xFC, 255)

    def test_with_alpha(self):
        assert with_alpha("#ffffff", 0x11) == "#ffffff11"
        assert with_alpha("#0470dc", 0) == "#0470dc00"
        assert with_alpha("#0470dc", 40) == "#0470dc28"

    @pytest.mark.parametrize("bad", ["13f1fc", "#13f1f", "#zzzzzz", "#13f1fc8"])
    def test_parse_rejects(self, bad):
        with pytest.raises(ValueError):
            parse_color(bad)


class TestResolutions:
    def test_presets(self):
        assert [(r.width, r.height) for r in RESOLUTIONS.values()] == [
            (1024, 1024), (1280, 720), (720, 1280),
        ]

    @pytest.mark.parametrize("ref", ["Landscape 1280x720", "1280x720"])
    def test_lookup_by_label_or_key(self, ref):
        res = get_resolution(ref)
        assert (res.width, res.height) == (1280, 720)

    def test_lookup_by_instance(self):
        res = RESOLUTIONS["Portrait 720x1280"]
        assert get_resolution(res) is res

    @pytest.mark.parametrize("ref", ["800x600", "Square", ""])
    def test_lookup_miss(self, ref):
        with pytest.raises(InvalidParameter):
            get_resolution(ref)

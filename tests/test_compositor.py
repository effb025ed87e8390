"""Style registry and layer sequencing."""

from __future__ import annotations

import pytest

from spectraforge.art.compositor import (
    LAYER_RENDERERS,
    STYLE_NAMES,
    STYLES,
    Layer,
    Style,
    StyleDefinition,
    compose,
    resolve_style,
)
from spectraforge.errors import InvalidParameter
from spectraforge.render.rng import SeededRNG

FALLBACK = [Layer.FLUID, Layer.POLYGON, Layer.PARTICLE, Layer.SCANLINE]


class TestRegistry:
    def test_selectable_styles(self):
        assert STYLE_NAMES == [
            "Abstract Flow", "Polygon Nebula", "Fractal Bloom",
            "Chromatic Storm", "Synthwave Horizon", "Liquid Aurora",
        ]

    @pytest.mark.parametrize("name, layers", [
        ("Polygon Nebula", [Layer.POLYGON, Layer.PARTICLE, Layer.SCANLINE]),
        ("Fractal Bloom", [Layer.FLUID, Layer.PARTICLE, Layer.SCANLINE]),
        ("Chromatic Storm", [Layer.POLYGON, Layer.FLUID, Layer.PARTICLE, Layer.SCANLINE]),
        ("Synthwave Horizon", [Layer.FLUID, Layer.SCANLINE]),
        ("Liquid Aurora", [Layer.FLUID, Layer.PARTICLE, Layer.SCANLINE]),
        ("Abstract Flow", FALLBACK),
    ])
    def test_sequences(self, name, layers):
        assert list(STYLES[name].layers) == layers

    @pytest.mark.parametrize("style", list(Style))
    def test_one_terminal_scanline(self, style):
        assert style.layers.count(Layer.SCANLINE) == 1
        assert style.value.scanline_is_terminal

    def test_synthwave_scanline_directly_after_fluid(self):
        layers = Style.SYNTHWAVE_HORIZON.layers
        assert layers[layers.index(Layer.SCANLINE) - 1] is Layer.FLUID

    @pytest.mark.parametrize("layers", [
        (Layer.FLUID,),
        (Layer.SCANLINE, Layer.FLUID, Layer.SCANLINE),
    ])
    def test_definition_requires_single_scanline(self, layers):
        with pytest.raises(ValueError):
            StyleDefinition("Bad", layers)

    def test_every_layer_has_renderer(self):
        assert set(LAYER_RENDERERS) == set(Layer)


class TestResolve:
    def test_known(self):
        assert resolve_style("Liquid Aurora") is Style.LIQUID_AURORA

    def test_strict_miss(self):
        with pytest.raises(InvalidParameter) as exc:
            resolve_style("Cubist Dream")
        assert exc.value.kind == "style"
        assert "Polygon Nebula" in exc.value.choices

    def test_lenient_miss_uses_fallback(self):
        style = resolve_style("Cubist Dream", strict=False)
        assert style is Style.FALLBACK
        assert list(style.layers) == FALLBACK

    def test_fallback_not_selectable_by_name(self):
        with pytest.raises(InvalidParameter):
            resolve_style("Fallback")


class TestCompose:
    def test_runs_layers_in_order(self, monkeypatch, small_surface, aurora):
        calls = []
        for layer in Layer:
            monkeypatch.setitem(
                LAYER_RENDERERS, layer,
                lambda rng, surface, w, h, p, layer=layer: calls.append(layer),
            )
        compose(Style.CHROMATIC_STORM, SeededRNG("x"), small_surface, 64, 48, aurora)
        assert calls == [Layer.POLYGON, Layer.FLUID, Layer.PARTICLE, Layer.SCANLINE]

    def test_scanline_consumes_no_randomness(self, small_surface, aurora):
        rng = SeededRNG("x")
        start = rng.state
        LAYER_RENDERERS[Layer.SCANLINE](rng, small_surface, 64, 48, aurora)
        assert rng.state == start

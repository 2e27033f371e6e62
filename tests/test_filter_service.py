"""Tests for filter expression composition, parsing and pixel application."""

import numpy as np
import pytest
from PIL import Image

from sleek_editor.errors import FilterExpressionError
from sleek_editor.models.filter_model import CustomMode, FilterSettings, PresetMode
from sleek_editor.models.presets import get_preset
from sleek_editor.services.filter_service import (
    FilterOp,
    FilterService,
    active_filter_expression,
    compose_filter_expression,
    parse_filter_expression,
)


@pytest.fixture
def filters():
    return FilterService()


def test_compose_uses_fixed_order():
    assert compose_filter_expression(FilterSettings()) == (
        "brightness(100%) contrast(100%) saturate(100%) blur(0px)"
    )
    settings = FilterSettings(brightness=120, contrast=80, saturation=150, blur=2.5)
    assert compose_filter_expression(settings) == (
        "brightness(120%) contrast(80%) saturate(150%) blur(2.5px)"
    )


def test_preset_expression_ignores_sliders():
    settings = FilterSettings(brightness=150, blur=4)
    mode = PresetMode(get_preset("Sepia"), settings)
    assert active_filter_expression(mode) == "sepia(100%)"
    assert active_filter_expression(CustomMode(settings)) == compose_filter_expression(settings)


def test_parse_keeps_order_and_normalises_amounts():
    ops = parse_filter_expression("sepia(50%) contrast(120%) brightness(90%)")
    assert [op.name for op in ops] == ["sepia", "contrast", "brightness"]
    assert [op.amount for op in ops] == pytest.approx([0.5, 1.2, 0.9])


def test_parse_units():
    assert parse_filter_expression("hue-rotate(-30deg)") == [FilterOp("hue-rotate", -30.0)]
    assert parse_filter_expression("blur(2.5px)") == [FilterOp("blur", 2.5)]
    assert parse_filter_expression("saturate(1.5)") == [FilterOp("saturate", 1.5)]


@pytest.mark.parametrize("expression", ["none", "", "   "])
def test_parse_empty(expression):
    assert parse_filter_expression(expression) == []


@pytest.mark.parametrize(
    "expression",
    [
        "invert(100%)",
        "blur(5%)",
        "hue-rotate(30%)",
        "brightness(-10%)",
        "sepia(50%) garbage",
        "contrast(abc)",
    ],
)
def test_parse_errors(expression):
    with pytest.raises(FilterExpressionError):
        parse_filter_expression(expression)


def test_default_chain_is_identity(filters):
    image = Image.new("RGBA", (6, 4), (10, 120, 230, 200))
    result = filters.apply_filter_expression(image, compose_filter_expression(FilterSettings()))
    assert np.array_equal(np.asarray(result), np.asarray(image))


def test_brightness_scales_channels_and_keeps_alpha(filters):
    image = Image.new("RGBA", (2, 2), (200, 100, 50, 128))
    result = filters.apply_filter_expression(image, "brightness(50%)")
    assert result.getpixel((0, 0)) == (100, 50, 25, 128)


def test_grayscale_equalises_channels(filters):
    image = Image.new("RGBA", (2, 2), (255, 0, 0, 255))
    r, g, b, _a = filters.apply_filter_expression(image, "grayscale(100%)").getpixel((0, 0))
    assert r == g == b
    assert r == pytest.approx(54, abs=1)


def test_chain_order_matters(filters):
    image = Image.new("RGBA", (2, 2), (200, 200, 200, 255))
    first = filters.apply_filter_expression(image, "brightness(50%) contrast(200%)")
    second = filters.apply_filter_expression(image, "contrast(200%) brightness(50%)")
    assert first.getpixel((0, 0)) != second.getpixel((0, 0))


def test_blur_softens_edges(filters):
    image = Image.new("RGBA", (20, 20), (0, 0, 0, 255))
    image.paste((255, 255, 255, 255), (10, 0, 20, 20))
    blurred = filters.apply_filter_expression(image, "blur(2px)")
    edge = blurred.getpixel((10, 10))[0]
    assert 0 < edge < 255


def test_blur_does_not_bleed_transparent_black(filters):
    image = Image.new("RGBA", (40, 40), (0, 0, 0, 0))
    image.paste((255, 0, 0, 255), (0, 0, 20, 40))
    blurred = filters.apply_filter_expression(image, "blur(3px)")
    r, g, b, a = blurred.getpixel((20, 20))
    assert 0 < a < 255
    assert r >= 250
    assert (g, b) == (0, 0)


def test_apply_does_not_mutate_input(filters):
    image = Image.new("RGB", (3, 3), (40, 80, 120))
    before = image.tobytes()
    result = filters.apply_filter_expression(image, "sepia(100%)")
    assert image.tobytes() == before
    assert image.mode == "RGB"
    assert result.mode == "RGBA"

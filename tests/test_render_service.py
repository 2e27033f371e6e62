"""Tests for preview rendering and export encoding."""

import io

import pytest
from PIL import Image

from sleek_editor.models.image_model import ImageDimensions
from sleek_editor.services.render_service import RenderService


@pytest.fixture
def renderer():
    return RenderService()


def test_render_scales_to_target(renderer, make_image):
    source = make_image((800, 600), (30, 60, 90, 255))
    rendered = renderer.render(source, "none", ImageDimensions(400, 300))
    assert rendered.size == (400, 300)
    assert rendered.mode == "RGB"
    assert rendered.getpixel((200, 150)) == (30, 60, 90)


def test_render_does_not_mutate_source(renderer, make_image):
    source = make_image((10, 10))
    before = source.tobytes()
    renderer.render(source, "brightness(50%)", ImageDimensions(5, 5))
    assert source.size == (10, 10)
    assert source.tobytes() == before


def test_transparent_pixels_show_background(renderer, make_image):
    source = make_image((4, 4), (0, 0, 0, 0))
    rendered = renderer.render(source, "none", ImageDimensions(4, 4), "#ff0000")
    assert rendered.getpixel((1, 1)) == (255, 0, 0)


def test_translucent_background_keeps_alpha(renderer, make_image):
    source = make_image((4, 4), (0, 0, 0, 0))
    rendered = renderer.render(source, "none", ImageDimensions(4, 4), "#00ff0080")
    assert rendered.mode == "RGBA"
    assert rendered.getpixel((0, 0)) == (0, 255, 0, 128)


def test_blurred_edge_over_background_has_no_dark_band(renderer):
    source = Image.new("RGBA", (40, 40), (0, 0, 0, 0))
    source.paste((255, 0, 0, 255), (0, 0, 20, 40))
    rendered = renderer.render(source, "blur(3px)", ImageDimensions(40, 40), "#ffffff")
    for x in range(14, 27):
        r, g, b = rendered.getpixel((x, 20))
        assert r >= 250
        assert g == b


def test_render_applies_filter(renderer, make_image):
    source = make_image((4, 4), (255, 0, 0, 255))
    r, g, b = renderer.render(source, "grayscale(100%)", ImageDimensions(4, 4)).getpixel((0, 0))
    assert r == g == b


def test_export_matches_preview(renderer, make_image):
    source = make_image((800, 600), (120, 80, 40, 255))
    source.paste((10, 200, 30, 255), (0, 0, 400, 300))
    target = ImageDimensions(400, 300)
    expression = "brightness(110%) contrast(90%) saturate(120%) blur(1px)"

    preview = renderer.render(source, expression, target)
    data = renderer.export(source, expression, target, fmt="png")

    with Image.open(io.BytesIO(data)) as exported:
        assert exported.format == "PNG"
        assert exported.size == (400, 300)
        assert exported.convert("RGB").tobytes() == preview.tobytes()

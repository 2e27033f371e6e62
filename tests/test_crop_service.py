"""Tests for mapping display-space crop rectangles to source pixels."""

import pytest
from PIL import Image

from sleek_editor.errors import DegenerateCropError
from sleek_editor.models.image_model import CropRegion, ImageDimensions
from sleek_editor.services.crop_service import CropService


@pytest.fixture
def cropper():
    return CropService()


def test_source_box_applies_scale_on_both_axes(cropper):
    box = cropper.source_box((800, 800), ImageDimensions(400, 400), CropRegion(100, 100, 200, 200))
    assert box == pytest.approx((200.0, 200.0, 400.0, 400.0))


def test_source_box_with_independent_axes(cropper):
    box = cropper.source_box((800, 300), ImageDimensions(400, 300), CropRegion(10, 10, 100, 50))
    assert box == pytest.approx((20.0, 10.0, 200.0, 50.0))


def test_extract_crop_produces_display_sized_bitmap(cropper, framed_image):
    cropped = cropper.extract_crop(framed_image, ImageDimensions(400, 400), CropRegion(100, 100, 200, 200))
    assert cropped is not None
    assert cropped.size == (200, 200)
    # sampled from the red square in the middle of the source
    assert cropped.getpixel((100, 100)) == (255, 0, 0, 255)


def test_extract_crop_does_not_touch_source(cropper, framed_image):
    before = framed_image.tobytes()
    cropper.extract_crop(framed_image, ImageDimensions(400, 400), CropRegion(0, 0, 100, 100))
    assert framed_image.size == (800, 800)
    assert framed_image.tobytes() == before


def test_full_display_region_keeps_display_size(cropper):
    source = Image.new("RGBA", (800, 600), (10, 20, 30, 255))
    cropped = cropper.extract_crop(source, ImageDimensions(400, 300), CropRegion(0, 0, 400, 300))
    assert cropped.size == (400, 300)
    assert cropped.getpixel((200, 150)) == (10, 20, 30, 255)


@pytest.mark.parametrize(
    "width, expected",
    [(100.5, 101), (101.5, 102), (100.4, 100)],
)
def test_fractional_region_size_rounds_half_up(cropper, width, expected):
    source = Image.new("RGBA", (400, 400), (10, 20, 30, 255))
    cropped = cropper.extract_crop(source, ImageDimensions(400, 400), CropRegion(0, 0, width, width))
    assert cropped.size == (expected, expected)


@pytest.mark.parametrize(
    "region",
    [
        CropRegion(10, 10, 0, 50),
        CropRegion(10, 10, 50, 0),
        CropRegion(10, 10, -5, 20),
        CropRegion(500, 500, 10, 10),
    ],
)
def test_degenerate_region_is_a_no_op(cropper, framed_image, region):
    assert cropper.extract_crop(framed_image, ImageDimensions(400, 400), region) is None


def test_region_is_clipped_to_displayed_bounds(cropper):
    clipped = cropper.clip_region(CropRegion(-10, -10, 50, 50), ImageDimensions(400, 400))
    assert clipped == CropRegion(0.0, 0.0, 40.0, 40.0)

    clipped = cropper.clip_region(CropRegion(380, 390, 50, 50), ImageDimensions(400, 400))
    assert clipped == CropRegion(380.0, 390.0, 20.0, 10.0)


def test_validate_region_raises(cropper):
    with pytest.raises(DegenerateCropError):
        cropper.validate_region(CropRegion(0, 0, 0, 0))
    cropper.validate_region(CropRegion(0, 0, 1, 1))


def test_crop_region_from_corners_in_any_order():
    assert CropRegion.from_corners(50, 40, 10, 20) == CropRegion(10, 20, 40, 20)
    assert CropRegion.from_corners(5, 5, 5, 30).is_degenerate

import io
from concurrent.futures import ThreadPoolExecutor

import pytest
from PIL import Image

from sleek_editor.errors import DecodeError, EncodeError
from sleek_editor.services.image_service import ImageService, format_for_path


@pytest.fixture
def images():
    return ImageService()


def test_decode_png(images, make_image, png_bytes):
    data = png_bytes(make_image((12, 7), (1, 2, 3), mode="RGB"))
    image_data = images.decode(data)
    assert (image_data.width, image_data.height) == (12, 7)
    assert image_data.mode == "RGBA"
    assert image_data.format == "PNG"
    assert image_data.size_bytes == len(data)
    assert image_data.path is None


def test_decode_garbage_raises(images):
    with pytest.raises(DecodeError):
        images.decode(b"definitely not an image")
    with pytest.raises(ValueError):
        images.decode(b"")


def test_load_image_from_disk(images, tmp_path, make_image):
    path = tmp_path / "photo.png"
    make_image((5, 9)).save(path)
    image_data = images.load_image(path)
    assert image_data.path == path
    assert image_data.natural_size.as_tuple() == (5, 9)


def test_load_missing_file(images, tmp_path):
    with pytest.raises(FileNotFoundError):
        images.load_image(tmp_path / "missing.png")


def test_encode_jpeg_flattens_alpha(images, make_image):
    data = images.encode(make_image((4, 4), (10, 20, 30, 128)), "jpg")
    assert data[:2] == b"\xff\xd8"
    with Image.open(io.BytesIO(data)) as decoded:
        assert decoded.mode == "RGB"


def test_encode_unknown_format(images, make_image):
    with pytest.raises(EncodeError):
        images.encode(make_image(), "nope")


def test_save_picks_format_from_suffix(images, tmp_path, make_image):
    path = images.save(make_image((3, 3)), tmp_path / "out.webp")
    with Image.open(path) as saved:
        assert saved.format == "WEBP"


@pytest.mark.parametrize(
    "path, expected",
    [("a.png", "PNG"), ("b.JPG", "JPEG"), ("c.jpeg", "JPEG"), ("d.tif", "TIFF"), ("e.xyz", "PNG")],
)
def test_format_for_path(path, expected):
    assert format_for_path(path) == expected


def test_begin_decode_without_executor_is_resolved(images, make_image, png_bytes):
    future = images.begin_decode(png_bytes(make_image((2, 3))))
    assert future.done()
    assert future.result().height == 3


def test_begin_decode_failure_is_kept_in_future(images):
    future = images.begin_decode(b"junk")
    assert future.done()
    assert isinstance(future.exception(), DecodeError)


def test_begin_encode_on_executor(make_image):
    with ThreadPoolExecutor(max_workers=1) as executor:
        service = ImageService(executor=executor)
        data = service.begin_encode(make_image((2, 2)), "png").result(timeout=10)
    assert data.startswith(b"\x89PNG")

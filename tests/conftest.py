import io
import sys
from pathlib import Path

import pytest
from PIL import Image

ROOT = Path(__file__).resolve().parents[1]

# Ensure the project sources are importable without installation.
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from sleek_editor.services.editor_session import EditorSession  # noqa: E402


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch):
    """Never touch the real ~/.sleek_editor/settings.ini from tests."""
    settings_file = tmp_path / "settings.ini"
    monkeypatch.setenv("SLEEK_EDITOR_SETTINGS", str(settings_file))
    return settings_file


@pytest.fixture
def make_image():
    def _make(size=(8, 8), color=(200, 100, 50, 255), mode="RGBA"):
        return Image.new(mode, size, color)

    return _make


@pytest.fixture
def png_bytes():
    def _encode(image):
        buffer = io.BytesIO()
        image.save(buffer, format="PNG")
        return buffer.getvalue()

    return _encode


@pytest.fixture
def framed_image():
    """800x800 blue image with a red square covering 200..600 on both axes."""
    image = Image.new("RGBA", (800, 800), (0, 0, 255, 255))
    image.paste((255, 0, 0, 255), (200, 200, 600, 600))
    return image


@pytest.fixture
def session():
    return EditorSession()

"""Декодирование и кодирование изображений.

Принципы:
- SRP: класс отвечает только за байты ↔ `PIL.Image` и базовое извлечение свойств.
- OCP: новые источники (стрим, URL) можно добавить отдельными методами.
- Декодирование и кодирование могут идти асинхронно (`begin_*` возвращают `Future`);
  без исполнителя работа выполняется сразу и возвращается готовый `Future`.
"""
from __future__ import annotations

import io
from concurrent.futures import Executor, Future
from pathlib import Path
from typing import Callable, Optional, TypeVar

from PIL import Image, UnidentifiedImageError

from sleek_editor.errors import DecodeError, EncodeError
from sleek_editor.models.image_model import ImageData
from sleek_editor.utils.logging import get_logger

logger = get_logger()

T = TypeVar("T")

# Pillow-формат по расширению файла экспорта
EXPORT_FORMATS = {
    "png": "PNG",
    "jpg": "JPEG",
    "jpeg": "JPEG",
    "webp": "WEBP",
    "bmp": "BMP",
    "tif": "TIFF",
    "tiff": "TIFF",
}

# Форматы без альфа-канала
_OPAQUE_FORMATS = {"JPEG", "BMP"}


def format_for_path(path: str | Path, default: str = "PNG") -> str:
    """Определяет формат Pillow по расширению *path*."""
    suffix = Path(path).suffix.lower().lstrip(".")
    return EXPORT_FORMATS.get(suffix, default)


class ImageService:
    def __init__(self, executor: Optional[Executor] = None) -> None:
        self._executor = executor

    def decode(self, data: bytes, path: Optional[Path] = None) -> ImageData:
        """Декодирует байты изображения.

        Args:
            data: Содержимое файла.
            path: Путь к исходному файлу, если он известен (для метаданных).

        Returns:
            `ImageData` c `PIL.Image.Image` (в режиме RGBA), размерами, режимом и размером данных.

        Raises:
            DecodeError: если байты не распознаны как изображение или повреждены.
        """
        try:
            with Image.open(io.BytesIO(data)) as raw:
                source_format = raw.format
                # многокадровые форматы: берём только первый кадр
                raw.seek(0)
                pil_image = raw.convert("RGBA")
        except (UnidentifiedImageError, OSError, ValueError, Image.DecompressionBombError) as exc:
            where = f": {path}" if path else ""
            raise DecodeError(f"Файл не является изображением{where}") from exc

        logger.debug("Decoded %s image %sx%s", source_format, *pil_image.size)
        return ImageData.from_pil(pil_image, path=path, size_bytes=len(data), format=source_format)

    def load_image(self, file_path: str | Path) -> ImageData:
        """Загружает изображение с диска и возвращает его вместе с метаданными.

        Raises:
            FileNotFoundError: если путь не существует или не указывает на файл.
            DecodeError: если файл не распознан как изображение.
        """
        path = Path(file_path)
        if not path.exists() or not path.is_file():
            raise FileNotFoundError(f"Файл не найден: {path}")
        return self.decode(path.read_bytes(), path=path)

    def encode(self, image: Image.Image, fmt: str = "PNG") -> bytes:
        """Кодирует изображение в байты формата *fmt*.

        Raises:
            EncodeError: если формат неизвестен или запись не удалась.
        """
        fmt = EXPORT_FORMATS.get(fmt.lower(), fmt.upper())
        out = image
        if fmt in _OPAQUE_FORMATS and out.mode not in ("RGB", "L"):
            out = out.convert("RGB")
        buffer = io.BytesIO()
        try:
            out.save(buffer, format=fmt)
        except (KeyError, ValueError, OSError) as exc:
            raise EncodeError(f"Не удалось сохранить изображение в формате {fmt}") from exc
        return buffer.getvalue()

    def save(self, image: Image.Image, file_path: str | Path, default_format: str = "PNG") -> Path:
        """Кодирует изображение по расширению и записывает файл.

        Файл без известного расширения пишется в формате *default_format*.
        """
        path = Path(file_path)
        data = self.encode(image, format_for_path(path, default_format))
        path.write_bytes(data)
        logger.info("Saved %s (%d bytes)", path, len(data))
        return path

    # ---- Асинхронный контракт ----
    def begin_decode(self, data: bytes, path: Optional[Path] = None) -> "Future[ImageData]":
        return self.submit(lambda: self.decode(data, path=path))

    def begin_encode(self, image: Image.Image, fmt: str = "PNG") -> "Future[bytes]":
        return self.submit(lambda: self.encode(image, fmt))

    def submit(self, work: Callable[[], T]) -> "Future[T]":
        """Выполняет *work* на исполнителе ввода-вывода или сразу, если его нет."""
        if self._executor is not None:
            return self._executor.submit(work)
        future: Future[T] = Future()
        try:
            future.set_result(work())
        except Exception as exc:  # the future carries the error to the caller
            future.set_exception(exc)
        return future

"""Модели данных для изображений, размеров и рамки обрезки.

Принципы:
- SRP: только структуры данных, без логики обработки.
- Чистый код: неизменяемость (`frozen=True`) для предсказуемости.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional

from PIL import Image


class Axis(Enum):
    """Ось, которую пользователь редактирует в полях размера."""
    WIDTH = "width"
    HEIGHT = "height"


@dataclass(frozen=True)
class ImageData:
    """Неизменяемая модель изображения и его метаданные.

    Fields:
        pil_image: Декодированное изображение PIL (рабочий битмап).
        width: Ширина, px.
        height: Высота, px.
        mode: Режим PIL, например "RGBA".
        path: Путь к исходному файлу, если изображение загружено с диска.
        size_bytes: Размер исходных данных, если известен.
        format: Формат исходника ("PNG", "JPEG"...), если известен.
    """
    pil_image: Image.Image
    width: int
    height: int
    mode: str
    path: Optional[Path] = None
    size_bytes: Optional[int] = None
    format: Optional[str] = None

    @classmethod
    def from_pil(cls, image: Image.Image, **extra: object) -> "ImageData":
        """Упаковывает готовый `PIL.Image` (например, результат обрезки)."""
        width, height = image.size
        return cls(pil_image=image, width=width, height=height, mode=image.mode, **extra)  # type: ignore[arg-type]

    @property
    def natural_size(self) -> "ImageDimensions":
        return ImageDimensions(self.width, self.height)


@dataclass(frozen=True)
class ImageDimensions:
    """Размер в пикселях; обе стороны — целые числа не меньше 1."""
    width: int
    height: int

    def __post_init__(self) -> None:
        for name in ("width", "height"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value < 1:
                raise ValueError(f"{name} должен быть целым числом >= 1, получено {value!r}")

    @classmethod
    def from_image(cls, image: Image.Image) -> "ImageDimensions":
        width, height = image.size
        return cls(width, height)

    def as_tuple(self) -> tuple[int, int]:
        return self.width, self.height


@dataclass(frozen=True)
class CropRegion:
    """Рамка обрезки в координатах отображаемого (масштабированного) изображения.

    Создаётся жестом пользователя, потребляется один раз при фиксации обрезки.
    """
    x: float
    y: float
    width: float
    height: float

    @property
    def is_degenerate(self) -> bool:
        """Истина, если у рамки нет площади."""
        return not (self.width > 0 and self.height > 0)

    @classmethod
    def from_corners(cls, x0: float, y0: float, x1: float, y1: float) -> "CropRegion":
        """Строит рамку по двум углам жеста в любом порядке."""
        left, right = sorted((x0, x1))
        top, bottom = sorted((y0, y1))
        return cls(left, top, right - left, bottom - top)

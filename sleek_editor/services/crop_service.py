"""Обрезка: перевод рамки из экранных координат в пиксели исходника.

Принципы:
- SRP: сервис только вычисляет область и создаёт новый битмап; размеры сессии
  пересчитывает вызывающий.
- Исходное изображение не изменяется.
"""
from __future__ import annotations

from typing import Optional, Tuple

from PIL import Image

from sleek_editor.errors import DegenerateCropError
from sleek_editor.models.image_model import CropRegion, ImageDimensions
from sleek_editor.utils.logging import get_logger
from sleek_editor.utils.rounding import round_half_up

logger = get_logger()

Box = Tuple[float, float, float, float]


class CropService:
    def __init__(self, resample: Image.Resampling = Image.Resampling.LANCZOS) -> None:
        self._resample = resample

    def validate_region(self, region: CropRegion) -> None:
        """Raises: DegenerateCropError, если у рамки нет площади."""
        if region.is_degenerate:
            raise DegenerateCropError(f"Рамка без площади: {region}")

    def clip_region(self, region: CropRegion, displayed_size: ImageDimensions) -> CropRegion:
        """Обрезает рамку границами отображаемого изображения."""
        left = max(0.0, float(region.x))
        top = max(0.0, float(region.y))
        right = min(float(displayed_size.width), float(region.x) + float(region.width))
        bottom = min(float(displayed_size.height), float(region.y) + float(region.height))
        return CropRegion(left, top, right - left, bottom - top)

    def source_box(self, source_size: Tuple[int, int], displayed_size: ImageDimensions, region: CropRegion) -> Box:
        """Переводит рамку в пиксельные координаты исходника.

        Returns:
            (x, y, w, h) в пикселях исходного изображения.
        """
        natural_w, natural_h = source_size
        scale_x = natural_w / displayed_size.width
        scale_y = natural_h / displayed_size.height
        return (
            region.x * scale_x,
            region.y * scale_y,
            region.width * scale_x,
            region.height * scale_y,
        )

    def extract_crop(
        self,
        source: Image.Image,
        displayed_size: ImageDimensions,
        region: CropRegion,
    ) -> Optional[Image.Image]:
        """Вырезает область исходника, выбранную на экране.

        Args:
            source: Рабочее изображение в натуральном размере.
            displayed_size: Размер, в котором изображение показано пользователю.
            region: Рамка в координатах показанного изображения.

        Returns:
            Новое изображение размером `region.width × region.height` (экранные px)
            или None, если рамка вырождена (операция не выполняется).
        """
        try:
            self.validate_region(region)
            clipped = self.clip_region(region, displayed_size)
            self.validate_region(clipped)
        except DegenerateCropError as exc:
            logger.debug("Crop skipped: %s", exc)
            return None

        x, y, w, h = self.source_box(source.size, displayed_size, clipped)
        out_size = (max(1, round_half_up(clipped.width)), max(1, round_half_up(clipped.height)))
        box = (x, y, min(source.width, x + w), min(source.height, y + h))
        logger.debug("Crop box %s -> %sx%s", box, *out_size)
        # resize(box=...) копирует область с пересэмплированием в новый битмап
        return source.resize(out_size, self._resample, box=box)

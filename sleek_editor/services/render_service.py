"""Рендеринг превью и экспорт итогового изображения.

Принципы:
- Одна функция `render` обслуживает и превью, и экспорт: масштабирование и
  цепочка фильтров у них совпадают бит в бит, различается только кодирование.
- Входное изображение не изменяется, всегда создаётся новое.
"""
from __future__ import annotations

from typing import Optional

from PIL import Image, ImageColor

from sleek_editor.models.filter_model import DEFAULT_BACKGROUND_COLOR
from sleek_editor.models.image_model import ImageDimensions
from sleek_editor.services.filter_service import FilterService
from sleek_editor.services.image_service import ImageService
from sleek_editor.utils.logging import get_logger

logger = get_logger()


class RenderService:
    def __init__(
        self,
        filter_service: Optional[FilterService] = None,
        image_service: Optional[ImageService] = None,
        resample: Image.Resampling = Image.Resampling.LANCZOS,
    ) -> None:
        self._filters = filter_service or FilterService()
        self._images = image_service or ImageService()
        self._resample = resample

    def render(
        self,
        image: Image.Image,
        filter_expression: str,
        target: ImageDimensions,
        background_color: str = DEFAULT_BACKGROUND_COLOR,
    ) -> Image.Image:
        """Масштабирует изображение, применяет фильтр и кладёт на фон.

        Args:
            image: Рабочее изображение.
            filter_expression: Строка активного фильтра (пресет или ползунки).
            target: Целевой размер холста, px.
            background_color: Цвет фона там, где изображение прозрачно.

        Returns:
            Новое «плоское» изображение размера `target`: RGB при непрозрачном фоне, иначе RGBA.
        """
        size = target.as_tuple()
        source = image if image.mode == "RGBA" else image.convert("RGBA")
        scaled = source if source.size == size else source.resize(size, self._resample)
        # фильтр применяется уже в целевом разрешении (радиус размытия в px холста)
        filtered = self._filters.apply_filter_expression(scaled, filter_expression)

        background = ImageColor.getcolor(background_color, "RGBA")
        canvas = Image.new("RGBA", size, background)
        canvas.alpha_composite(filtered)
        if background[3] == 255:  # type: ignore[index]
            canvas = canvas.convert("RGB")
        logger.debug("Rendered %sx%s with %r", size[0], size[1], filter_expression)
        return canvas

    def export(
        self,
        image: Image.Image,
        filter_expression: str,
        target: ImageDimensions,
        background_color: str = DEFAULT_BACKGROUND_COLOR,
        fmt: str = "PNG",
    ) -> bytes:
        """Рендерит изображение и кодирует его в *fmt*."""
        rendered = self.render(image, filter_expression, target, background_color)
        return self._images.encode(rendered, fmt)

"""Расчёт целевого размера при правке полей ширины/высоты.

Принципы:
- Чистая функция: одинаковый ввод даёт одинаковый результат (правка может повторяться).
- Результат всегда не меньше 1×1; нечисловой ввод оставляет размер без изменений.
"""
from __future__ import annotations

from sleek_editor.errors import InvalidRangeError, ZeroAspectError
from sleek_editor.models.filter_model import coerce_number
from sleek_editor.models.image_model import Axis, ImageDimensions
from sleek_editor.utils.logging import get_logger
from sleek_editor.utils.rounding import round_half_up

logger = get_logger()


def _to_pixels(value: float) -> int:
    return max(1, round_half_up(value))


def aspect_ratio(width: float, height: float) -> float:
    """Отношение ширины к высоте.

    Raises:
        ZeroAspectError: если высота не положительна.
    """
    if height <= 0:
        raise ZeroAspectError(f"Нельзя вычислить пропорцию для высоты {height}")
    return width / height


class DimensionService:
    def resolve_dimension(
        self,
        original: ImageDimensions,
        current: ImageDimensions,
        axis: Axis | str,
        new_value: object,
        lock_aspect: bool,
    ) -> ImageDimensions:
        """Возвращает новый целевой размер после правки одной оси.

        Args:
            original: Размер исходного изображения (источник пропорции).
            current: Текущий целевой размер.
            axis: Изменённая ось.
            new_value: Введённое значение, px.
            lock_aspect: Сохранять ли пропорцию `original`.

        Returns:
            `ImageDimensions`: изменённая ось получает введённое значение,
            вторая либо выводится из пропорции, либо остаётся прежней.
        """
        axis = Axis(axis)
        try:
            value = _to_pixels(coerce_number(new_value))
        except InvalidRangeError:
            logger.debug("Ignoring non-numeric %s value %r", axis.value, new_value)
            return current

        width, height = current.width, current.height
        if axis is Axis.WIDTH:
            width = value
        else:
            height = value

        if lock_aspect:
            try:
                ratio = aspect_ratio(original.width, original.height)
            except ZeroAspectError:
                logger.debug("Aspect lock skipped: original height is zero")
            else:
                if axis is Axis.WIDTH:
                    height = _to_pixels(value / ratio)
                else:
                    width = _to_pixels(value * ratio)

        return ImageDimensions(width, height)

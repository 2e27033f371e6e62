"""Параметры коррекции изображения и режим фильтра.

Принципы:
- SRP: модель хранит значения и их допустимые диапазоны; рендеринг — в сервисах.
- Неизменяемость: каждое изменение возвращает новый `FilterSettings`.
- Режим фильтра — размеченное объединение `CustomMode | PresetMode`, поэтому
  состояние «активны и ползунки, и пресет» невыразимо.
"""
from __future__ import annotations

import math
from dataclasses import dataclass, replace
from enum import Enum
from typing import Dict, Union

from PIL import ImageColor

from sleek_editor.errors import InvalidRangeError
from sleek_editor.models.presets import PresetFilter
from sleek_editor.utils.logging import get_logger
from sleek_editor.utils.rounding import round_half_up

logger = get_logger()

DEFAULT_BACKGROUND_COLOR = "#ffffff"


class FilterField(Enum):
    """Числовые поля, которые меняются ползунками."""
    BRIGHTNESS = "brightness"
    CONTRAST = "contrast"
    SATURATION = "saturation"
    BLUR = "blur"


@dataclass(frozen=True)
class FilterRange:
    minimum: float
    maximum: float
    step: float
    default: float

    def clamp(self, value: float) -> float:
        """Ограничивает *value* диапазоном и округляет до шага."""
        value = max(self.minimum, min(self.maximum, value))
        snapped = round(round_half_up(value / self.step) * self.step, 6)
        return max(self.minimum, min(self.maximum, snapped))


FILTER_RANGES: Dict[FilterField, FilterRange] = {
    FilterField.BRIGHTNESS: FilterRange(0.0, 200.0, 1.0, 100.0),
    FilterField.CONTRAST: FilterRange(0.0, 200.0, 1.0, 100.0),
    FilterField.SATURATION: FilterRange(0.0, 200.0, 1.0, 100.0),
    FilterField.BLUR: FilterRange(0.0, 10.0, 0.1, 0.0),
}


@dataclass(frozen=True)
class FilterSettings:
    """Неизменяемый набор параметров коррекции.

    Fields:
        brightness: Яркость, % (0–200).
        contrast: Контраст, % (0–200).
        saturation: Насыщенность, % (0–200).
        blur: Радиус размытия, px (0–10, шаг 0.1).
        background_color: Цвет фона под изображением ("#rrggbb" или любое имя PIL).
    """
    brightness: float = 100.0
    contrast: float = 100.0
    saturation: float = 100.0
    blur: float = 0.0
    background_color: str = DEFAULT_BACKGROUND_COLOR

    def value_of(self, field: FilterField) -> float:
        return getattr(self, field.value)


@dataclass(frozen=True)
class CustomMode:
    """Рендеринг по ползункам."""
    settings: FilterSettings


@dataclass(frozen=True)
class PresetMode:
    """Рендеринг по пресету; `settings` отложены и вернутся при выходе из пресета."""
    preset: PresetFilter
    settings: FilterSettings


FilterMode = Union[CustomMode, PresetMode]


def coerce_number(value: object) -> float:
    """Приводит ввод пользователя к конечному float.

    Raises:
        InvalidRangeError: для пустой строки, нечисловых и бесконечных значений.
    """
    if isinstance(value, bool):
        raise InvalidRangeError(f"Ожидалось число, получено {value!r}")
    try:
        number = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError) as exc:
        raise InvalidRangeError(f"Ожидалось число, получено {value!r}") from exc
    if not math.isfinite(number):
        raise InvalidRangeError(f"Ожидалось конечное число, получено {value!r}")
    return number


def clamp_to_range(field: FilterField, value: object) -> float:
    """Возвращает *value*, ограниченное диапазоном поля *field*."""
    number = coerce_number(value)
    clamped = FILTER_RANGES[field].clamp(number)
    if clamped != number:
        logger.debug("%s=%s clamped to %s", field.value, number, clamped)
    return clamped


def apply_adjustment(settings: FilterSettings, field: FilterField | str, value: object) -> FilterSettings:
    """Возвращает копию *settings* с новым значением поля.

    Значение вне диапазона молча ограничивается. Снятие активного пресета —
    обязанность вызывающего (см. `EditorSession.adjust_filter`).

    Raises:
        InvalidRangeError: если *value* не число.
    """
    field = FilterField(field)
    return replace(settings, **{field.value: clamp_to_range(field, value)})


def normalize_color(color: str) -> str:
    """Проверяет цвет через `PIL.ImageColor` и приводит к "#rrggbb"/"#rrggbbaa".

    Raises:
        ValueError: если цвет не распознан.
    """
    rgba = ImageColor.getcolor(color.strip(), "RGBA")
    r, g, b, a = rgba  # type: ignore[misc]
    if a == 255:
        return f"#{r:02x}{g:02x}{b:02x}"
    return f"#{r:02x}{g:02x}{b:02x}{a:02x}"


def with_background(settings: FilterSettings, color: str) -> FilterSettings:
    """Возвращает копию *settings* с новым цветом фона."""
    return replace(settings, background_color=normalize_color(color))


def reset_to_defaults() -> FilterSettings:
    """Канонические значения по умолчанию."""
    return FilterSettings()

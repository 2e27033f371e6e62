"""Каталог готовых фильтров (пресетов).

Пресет — именованная фиксированная строка фильтра. Выбор пресета заменяет
параметрические настройки при рендеринге, но не меняет их значения.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple


@dataclass(frozen=True)
class PresetFilter:
    """Именованное неизменяемое выражение фильтра."""
    name: str
    filter: str


NONE_PRESET_NAME = "None"

# Порядок совпадает с порядком кнопок в панели пресетов
PRESETS: Tuple[PresetFilter, ...] = (
    PresetFilter(NONE_PRESET_NAME, "none"),
    PresetFilter("B&W", "grayscale(100%)"),
    PresetFilter("Sepia", "sepia(100%)"),
    PresetFilter("Vintage", "sepia(50%) contrast(120%) brightness(90%)"),
    PresetFilter("Cool", "saturate(150%) hue-rotate(30deg)"),
    PresetFilter("Warm", "saturate(150%) hue-rotate(-30deg)"),
    PresetFilter("High Contrast", "contrast(150%) brightness(90%)"),
    PresetFilter("Dramatic", "contrast(150%) brightness(90%) saturate(150%)"),
)

_BY_NAME = {preset.name: preset for preset in PRESETS}


def preset_names() -> Tuple[str, ...]:
    """Имена пресетов в порядке каталога."""
    return tuple(preset.name for preset in PRESETS)


def get_preset(name: Optional[str]) -> Optional[PresetFilter]:
    """Ищет пресет по имени.

    Returns:
        `PresetFilter` или None, если выбрано «без пресета» (`None` или "None").

    Raises:
        KeyError: если пресета с таким именем нет в каталоге.
    """
    if name is None or name == NONE_PRESET_NAME:
        return None
    return _BY_NAME[name]

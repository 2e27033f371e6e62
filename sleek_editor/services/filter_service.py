"""Строки фильтров: сборка, разбор и применение к изображению.

Принципы:
- Порядок пользовательских коррекций фиксирован: яркость → контраст → насыщенность → размытие.
- Пресет и пользовательская строка взаимоисключающие, никогда не склеиваются.
- Цветовые примитивы считаются в numpy по определениям Filter Effects,
  размытие — гауссовым фильтром Pillow.
"""
from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import Callable, Dict, List

import numpy as np
from PIL import Image, ImageFilter

from sleek_editor.errors import FilterExpressionError
from sleek_editor.models.filter_model import CustomMode, FilterMode, FilterSettings, PresetMode
from sleek_editor.utils.logging import get_logger

logger = get_logger()

NO_FILTER = "none"

_FUNCTION_RE = re.compile(r"\s*([a-z-]+)\(\s*([-+]?(?:\d+\.?\d*|\.\d+))\s*(%|px|deg)?\s*\)\s*")

# Единица по умолчанию для каждой функции и допустимые единицы
_UNITS: Dict[str, tuple[str, ...]] = {
    "brightness": ("%", ""),
    "contrast": ("%", ""),
    "saturate": ("%", ""),
    "grayscale": ("%", ""),
    "sepia": ("%", ""),
    "hue-rotate": ("deg",),
    "blur": ("px",),
}


@dataclass(frozen=True)
class FilterOp:
    """Одна функция цепочки; `amount` уже нормализован (1.0 == 100%)."""
    name: str
    amount: float


def _fmt(value: float) -> str:
    return f"{value:g}"


def compose_filter_expression(settings: FilterSettings) -> str:
    """Собирает строку фильтра из ползунков в фиксированном порядке."""
    return (
        f"brightness({_fmt(settings.brightness)}%) "
        f"contrast({_fmt(settings.contrast)}%) "
        f"saturate({_fmt(settings.saturation)}%) "
        f"blur({_fmt(settings.blur)}px)"
    )


def active_filter_expression(mode: FilterMode) -> str:
    """Строка, которая управляет рендерингом в данном режиме."""
    if isinstance(mode, PresetMode):
        return mode.preset.filter
    if isinstance(mode, CustomMode):
        return compose_filter_expression(mode.settings)
    raise TypeError(f"Неизвестный режим фильтра: {mode!r}")


def parse_filter_expression(expression: str) -> List[FilterOp]:
    """Разбирает строку вида "sepia(50%) contrast(120%)".

    Returns:
        Список операций в порядке записи; пустой для "none" и пустой строки.

    Raises:
        FilterExpressionError: неизвестная функция, единица или мусор в строке.
    """
    text = expression.strip()
    if not text or text == NO_FILTER:
        return []

    ops: List[FilterOp] = []
    pos = 0
    while pos < len(text):
        match = _FUNCTION_RE.match(text, pos)
        if match is None:
            raise FilterExpressionError(f"Не удалось разобрать фильтр у позиции {pos}: {expression!r}")
        name, raw, unit = match.group(1), match.group(2), match.group(3) or ""
        if name not in _UNITS:
            raise FilterExpressionError(f"Неизвестная функция фильтра: {name}")
        if unit not in _UNITS[name]:
            raise FilterExpressionError(f"Недопустимая единица {unit!r} для {name}")
        amount = float(raw)
        if unit == "%":
            amount /= 100.0
        if amount < 0 and name != "hue-rotate":
            raise FilterExpressionError(f"Отрицательное значение для {name}: {raw}")
        ops.append(FilterOp(name, amount))
        pos = match.end()
    return ops


# ---------- Цветовые матрицы ----------
def _saturate_matrix(s: float) -> np.ndarray:
    return np.array(
        [
            [0.213 + 0.787 * s, 0.715 - 0.715 * s, 0.072 - 0.072 * s],
            [0.213 - 0.213 * s, 0.715 + 0.285 * s, 0.072 - 0.072 * s],
            [0.213 - 0.213 * s, 0.715 - 0.715 * s, 0.072 + 0.928 * s],
        ],
        dtype=np.float32,
    )


def _grayscale_matrix(amount: float) -> np.ndarray:
    b = 1.0 - min(1.0, amount)
    return np.array(
        [
            [0.2126 + 0.7874 * b, 0.7152 - 0.7152 * b, 0.0722 - 0.0722 * b],
            [0.2126 - 0.2126 * b, 0.7152 + 0.2848 * b, 0.0722 - 0.0722 * b],
            [0.2126 - 0.2126 * b, 0.7152 - 0.7152 * b, 0.0722 + 0.9278 * b],
        ],
        dtype=np.float32,
    )


def _sepia_matrix(amount: float) -> np.ndarray:
    b = 1.0 - min(1.0, amount)
    return np.array(
        [
            [0.393 + 0.607 * b, 0.769 - 0.769 * b, 0.189 - 0.189 * b],
            [0.349 - 0.349 * b, 0.686 + 0.314 * b, 0.168 - 0.168 * b],
            [0.272 - 0.272 * b, 0.534 - 0.534 * b, 0.131 + 0.869 * b],
        ],
        dtype=np.float32,
    )


def _hue_rotate_matrix(degrees: float) -> np.ndarray:
    rad = math.radians(degrees)
    c, s = math.cos(rad), math.sin(rad)
    return np.array(
        [
            [0.213 + c * 0.787 - s * 0.213, 0.715 - c * 0.715 - s * 0.715, 0.072 - c * 0.072 + s * 0.928],
            [0.213 - c * 0.213 + s * 0.143, 0.715 + c * 0.285 + s * 0.140, 0.072 - c * 0.072 - s * 0.283],
            [0.213 - c * 0.213 - s * 0.787, 0.715 - c * 0.715 + s * 0.715, 0.072 + c * 0.928 + s * 0.072],
        ],
        dtype=np.float32,
    )


_MATRICES: Dict[str, Callable[[float], np.ndarray]] = {
    "saturate": _saturate_matrix,
    "grayscale": _grayscale_matrix,
    "sepia": _sepia_matrix,
    "hue-rotate": _hue_rotate_matrix,
}


class FilterService:
    def apply_op(self, image: Image.Image, op: FilterOp) -> Image.Image:
        """Применяет одну операцию к RGBA-изображению и возвращает новое."""
        if op.name == "blur":
            if op.amount <= 0:
                return image.copy()
            # blur premultiplied colour so transparent pixels do not darken edges
            premultiplied = image.convert("RGBa")
            blurred = premultiplied.filter(ImageFilter.GaussianBlur(radius=op.amount))
            return blurred.convert("RGBA")

        arr = np.asarray(image, dtype=np.float32) / 255.0
        rgb = arr[..., :3]
        if op.name == "brightness":
            rgb = rgb * op.amount
        elif op.name == "contrast":
            rgb = (rgb - 0.5) * op.amount + 0.5
        else:
            matrix = _MATRICES[op.name](op.amount)
            rgb = rgb @ matrix.T
        arr[..., :3] = np.clip(rgb, 0.0, 1.0)
        out = np.clip(np.rint(arr * 255.0), 0, 255).astype(np.uint8)
        return Image.fromarray(out)

    def apply_filter_expression(self, image: Image.Image, expression: str) -> Image.Image:
        """Применяет цепочку *expression* слева направо.

        Returns:
            Новое RGBA-изображение; исходное не изменяется.
        """
        ops = parse_filter_expression(expression)
        result = image if image.mode == "RGBA" else image.convert("RGBA")
        if not ops:
            return result.copy() if result is image else result
        for op in ops:
            result = self.apply_op(result, op)
        logger.debug("Applied filter chain %r", expression)
        return result

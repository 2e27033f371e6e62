"""Ошибки редактора.

Принципы:
- Ошибки ввода-вывода (`DecodeError`, `EncodeError`) доходят до UI и показываются пользователю.
- Числовые ошибки конвейера (диапазоны, пустая рамка, нулевая высота) перехватываются
  на границе операции: значение ограничивается или операция пропускается.
"""
from __future__ import annotations


class EditorError(Exception):
    """Базовая ошибка редактора."""


class DecodeError(EditorError, ValueError):
    """Байты не распознаны как изображение."""


class EncodeError(EditorError, ValueError):
    """Изображение не удалось закодировать в запрошенный формат."""


class InvalidRangeError(EditorError, ValueError):
    """Значение параметра не является конечным числом."""


class DegenerateCropError(EditorError, ValueError):
    """Рамка обрезки имеет нулевую площадь."""


class ZeroAspectError(EditorError, ZeroDivisionError):
    """Исходная высота равна нулю, пропорцию вычислить нельзя."""


class FilterExpressionError(EditorError, ValueError):
    """Строка фильтра не разбирается."""


class SessionStateError(EditorError, RuntimeError):
    """Операция недоступна в текущем состоянии сессии."""

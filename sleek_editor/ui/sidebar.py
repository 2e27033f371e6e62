"""Боковая панель: открытие файла, информация, размер, обрезка, пресеты и коррекция.

Принципы:
- SRP: управляет только UI параметров, не содержит алгоритмов.
- ISP: синхронизируется через компактные методы `set_*`, события отдаёт через `on_*`.
"""
from __future__ import annotations

from tkinter import colorchooser
from typing import Callable, Dict, Optional, Sequence

import customtkinter as ctk

from sleek_editor.models.filter_model import FILTER_RANGES, FilterField, FilterSettings
from sleek_editor.models.image_model import Axis, ImageData, ImageDimensions
from sleek_editor.models.presets import NONE_PRESET_NAME

_SLIDER_LABELS = {
    FilterField.BRIGHTNESS: "Яркость",
    FilterField.CONTRAST: "Контраст",
    FilterField.SATURATION: "Насыщенность",
    FilterField.BLUR: "Размытие",
}


def _format_value(field: FilterField, value: float) -> str:
    if field is FilterField.BLUR:
        return f"{value:.1f} px"
    return f"{int(round(value))}%"


class Sidebar(ctk.CTkScrollableFrame):
    """Панель инструментов с блоками: файл, информация, размер, пресеты, коррекция, экспорт."""
    def __init__(self, master: ctk.CTk, preset_names: Sequence[str], **kwargs) -> None:
        super().__init__(master, width=280, **kwargs)

        self.grid_columnconfigure(0, weight=1)
        self.grid_columnconfigure(1, weight=1)

        # Callbacks
        self.on_open_file: Optional[Callable[[], None]] = None
        self.on_filter_change: Optional[Callable[[FilterField, float], None]] = None
        self.on_preset_change: Optional[Callable[[Optional[str]], None]] = None
        self.on_background_change: Optional[Callable[[str], None]] = None
        self.on_dimension_change: Optional[Callable[[Axis, str], None]] = None
        self.on_lock_aspect_change: Optional[Callable[[bool], None]] = None
        self.on_toggle_crop: Optional[Callable[[], None]] = None
        self.on_reset: Optional[Callable[[], None]] = None
        self.on_export: Optional[Callable[[], None]] = None

        header_font = ctk.CTkFont(size=16, weight="bold")

        # File
        self._open_btn = ctk.CTkButton(self, text="Открыть изображение…", command=self._emit_open_file)
        self._open_btn.grid(row=0, column=0, columnspan=2, padx=8, pady=(8, 12), sticky="ew")

        # Info section
        self._info_title = ctk.CTkLabel(self, text="Информация", font=header_font)
        self._info_title.grid(row=1, column=0, columnspan=2, padx=8, pady=(4, 4), sticky="w")

        self._path_val = ctk.StringVar(value="—")
        self._size_val = ctk.StringVar(value="—")
        self._dims_val = ctk.StringVar(value="—")

        self._info_path = ctk.CTkLabel(self, textvariable=self._path_val, wraplength=250, anchor="w", justify="left")
        self._info_size = ctk.CTkLabel(self, textvariable=self._size_val, anchor="w", justify="left")
        self._info_dims = ctk.CTkLabel(self, textvariable=self._dims_val, anchor="w", justify="left")
        self._info_path.grid(row=2, column=0, columnspan=2, padx=8, pady=(0, 2), sticky="ew")
        self._info_size.grid(row=3, column=0, columnspan=2, padx=8, pady=(0, 2), sticky="ew")
        self._info_dims.grid(row=4, column=0, columnspan=2, padx=8, pady=(0, 10), sticky="ew")

        # Size section
        self._size_title = ctk.CTkLabel(self, text="Размер", font=header_font)
        self._size_title.grid(row=5, column=0, columnspan=2, padx=8, pady=(4, 4), sticky="w")

        self._width_val = ctk.StringVar(value="")
        self._height_val = ctk.StringVar(value="")
        ctk.CTkLabel(self, text="Ширина (px)").grid(row=6, column=0, padx=8, sticky="w")
        ctk.CTkLabel(self, text="Высота (px)").grid(row=6, column=1, padx=8, sticky="w")
        self._width_entry = ctk.CTkEntry(self, textvariable=self._width_val, width=100)
        self._height_entry = ctk.CTkEntry(self, textvariable=self._height_val, width=100)
        self._width_entry.grid(row=7, column=0, padx=8, pady=(0, 6), sticky="ew")
        self._height_entry.grid(row=7, column=1, padx=8, pady=(0, 6), sticky="ew")
        for entry, axis in ((self._width_entry, Axis.WIDTH), (self._height_entry, Axis.HEIGHT)):
            entry.bind("<Return>", lambda _e, a=axis: self._emit_dimension_change(a))
            entry.bind("<FocusOut>", lambda _e, a=axis: self._emit_dimension_change(a))

        self._lock_var = ctk.BooleanVar(value=True)
        self._lock_check = ctk.CTkCheckBox(
            self, text="Сохранять пропорции", variable=self._lock_var, command=self._emit_lock_aspect_change
        )
        self._lock_check.grid(row=8, column=0, columnspan=2, padx=8, pady=(0, 6), sticky="w")

        self._crop_btn = ctk.CTkButton(self, text="Обрезать", command=self._emit_toggle_crop)
        self._crop_btn.grid(row=9, column=0, columnspan=2, padx=8, pady=(0, 12), sticky="ew")

        # Presets
        self._preset_title = ctk.CTkLabel(self, text="Пресеты", font=header_font)
        self._preset_title.grid(row=10, column=0, columnspan=2, padx=8, pady=(4, 4), sticky="w")
        self._preset_menu = ctk.CTkOptionMenu(self, values=list(preset_names), command=self._emit_preset_change)
        self._preset_menu.set(NONE_PRESET_NAME)
        self._preset_menu.grid(row=11, column=0, columnspan=2, padx=8, pady=(0, 12), sticky="ew")

        # Adjustments
        self._adjust_title = ctk.CTkLabel(self, text="Коррекция", font=header_font)
        self._adjust_title.grid(row=12, column=0, columnspan=2, padx=8, pady=(4, 4), sticky="w")

        self._sliders: Dict[FilterField, ctk.CTkSlider] = {}
        self._slider_vals: Dict[FilterField, ctk.StringVar] = {}
        row = 13
        for field, label in _SLIDER_LABELS.items():
            rng = FILTER_RANGES[field]
            value_var = ctk.StringVar(value=_format_value(field, rng.default))
            ctk.CTkLabel(self, text=label).grid(row=row, column=0, padx=8, pady=(0, 2), sticky="w")
            ctk.CTkLabel(self, textvariable=value_var, anchor="e").grid(row=row, column=1, padx=8, pady=(0, 2), sticky="e")
            slider = ctk.CTkSlider(
                self,
                from_=rng.minimum,
                to=rng.maximum,
                number_of_steps=int(round((rng.maximum - rng.minimum) / rng.step)),
                command=lambda value, f=field: self._on_slider_change(f, value),
            )
            slider.set(rng.default)
            slider.grid(row=row + 1, column=0, columnspan=2, padx=8, pady=(0, 8), sticky="ew")
            self._sliders[field] = slider
            self._slider_vals[field] = value_var
            row += 2

        # Background color
        self._bg_btn = ctk.CTkButton(self, text="Цвет фона", command=self._choose_background)
        self._bg_btn.grid(row=row, column=0, padx=8, pady=(4, 8), sticky="ew")
        self._bg_swatch = ctk.CTkLabel(self, text="", width=28, height=28, corner_radius=14, fg_color="#ffffff")
        self._bg_swatch.grid(row=row, column=1, padx=8, pady=(4, 8), sticky="w")

        # Reset / export
        self._reset_btn = ctk.CTkButton(self, text="Сбросить", command=self._emit_reset)
        self._reset_btn.grid(row=row + 1, column=0, columnspan=2, padx=8, pady=(8, 4), sticky="ew")
        self._export_btn = ctk.CTkButton(self, text="Скачать изображение…", command=self._emit_export)
        self._export_btn.grid(row=row + 2, column=0, columnspan=2, padx=8, pady=(4, 8), sticky="ew")

        self._background_color = "#ffffff"
        self.set_image_controls_enabled(False)

    # ---- Public API ----
    def set_image_info(self, image_data: Optional[ImageData]) -> None:
        """Отображает метаданные рабочего изображения."""
        if image_data is None:
            self._path_val.set("—")
            self._size_val.set("—")
            self._dims_val.set("—")
            return
        self._path_val.set(str(image_data.path) if image_data.path else "—")
        self._size_val.set(self._format_size(image_data.size_bytes))
        self._dims_val.set(f"{image_data.width} × {image_data.height} px")

    def set_filters(self, settings: FilterSettings) -> None:
        """Синхронизирует ползунки и цвет фона с моделью."""
        for field, slider in self._sliders.items():
            value = settings.value_of(field)
            slider.set(value)
            self._slider_vals[field].set(_format_value(field, value))
        self._background_color = settings.background_color
        self._bg_swatch.configure(fg_color=settings.background_color[:7])

    def set_active_preset(self, name: Optional[str]) -> None:
        self._preset_menu.set(name or NONE_PRESET_NAME)

    def set_dimensions(self, dimensions: Optional[ImageDimensions]) -> None:
        if dimensions is None:
            self._width_val.set("")
            self._height_val.set("")
            return
        self._width_val.set(str(dimensions.width))
        self._height_val.set(str(dimensions.height))

    def set_lock_aspect(self, locked: bool) -> None:
        self._lock_var.set(locked)

    def set_cropping(self, cropping: bool) -> None:
        self._crop_btn.configure(text="Завершить обрезку" if cropping else "Обрезать")

    def set_image_controls_enabled(self, enabled: bool) -> None:
        """Блокирует элементы, которые требуют загруженного изображения."""
        state = "normal" if enabled else "disabled"
        for widget in (self._width_entry, self._height_entry, self._lock_check, self._crop_btn, self._export_btn):
            widget.configure(state=state)

    # ---- Events ----
    def _emit_open_file(self) -> None:
        if self.on_open_file:
            self.on_open_file()

    def _on_slider_change(self, field: FilterField, value: float) -> None:
        self._slider_vals[field].set(_format_value(field, value))
        if self.on_filter_change:
            self.on_filter_change(field, value)

    def _emit_preset_change(self, value: str) -> None:
        if self.on_preset_change:
            self.on_preset_change(None if value == NONE_PRESET_NAME else value)

    def _emit_dimension_change(self, axis: Axis) -> None:
        text = (self._width_val if axis is Axis.WIDTH else self._height_val).get().strip()
        if self.on_dimension_change:
            self.on_dimension_change(axis, text)

    def _emit_lock_aspect_change(self) -> None:
        if self.on_lock_aspect_change:
            self.on_lock_aspect_change(bool(self._lock_var.get()))

    def _emit_toggle_crop(self) -> None:
        if self.on_toggle_crop:
            self.on_toggle_crop()

    def _emit_reset(self) -> None:
        if self.on_reset:
            self.on_reset()

    def _emit_export(self) -> None:
        if self.on_export:
            self.on_export()

    def _choose_background(self) -> None:
        _rgb, hex_color = colorchooser.askcolor(color=self._background_color[:7], title="Цвет фона")
        if hex_color and self.on_background_change:
            self.on_background_change(hex_color)

    # ---- Helpers ----
    def _format_size(self, size_bytes: Optional[int]) -> str:
        if size_bytes is None:
            return "—"
        thresholds = [("Б", 1024), ("КБ", 1024**2), ("МБ", 1024**3), ("ГБ", 1024**4)]
        for label, limit in thresholds:
            if size_bytes < limit:
                if label == "Б":
                    return f"{size_bytes} {label}"
                value = size_bytes / (limit // 1024)
                return f"{value:.1f} {label}"
        value = size_bytes / (1024**4)
        return f"{value:.1f} ГБ"

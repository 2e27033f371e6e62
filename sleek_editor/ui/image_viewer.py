"""Виджет просмотра: превью с фильтрами и интерактивная рамка обрезки.

Принципы:
- SRP: отвечает только за представление и жесты; рендеринг делает сессия.
- Рамка обрезки передаётся наружу в координатах показанного изображения
  вместе с его показанным размером.
"""
from __future__ import annotations

from typing import Callable, Optional, Tuple

import customtkinter as ctk
import tkinter as tk
from PIL import Image, ImageTk

from sleek_editor.models.image_model import CropRegion, ImageDimensions


def fit_size(image_size: Tuple[int, int], area_size: Tuple[int, int]) -> Tuple[int, int]:
    """Размер, в котором изображение помещается в область (без увеличения)."""
    img_w, img_h = image_size
    area_w, area_h = max(1, area_size[0]), max(1, area_size[1])
    scale = min(1.0, area_w / img_w, area_h / img_h)
    return max(1, int(img_w * scale)), max(1, int(img_h * scale))


class ImageViewer(ctk.CTkFrame):
    """Канва с превью; в режиме обрезки рисует рамку по перетаскиванию мыши."""
    def __init__(self, master: ctk.CTk | tk.Misc, **kwargs) -> None:
        super().__init__(master, **kwargs)
        self.grid_rowconfigure(0, weight=1)
        self.grid_columnconfigure(0, weight=1)

        self._canvas = tk.Canvas(self, highlightthickness=0, bg=self._get_canvas_bg())
        self._canvas.grid(row=0, column=0, sticky="nsew")

        self._image: Optional[Image.Image] = None
        self._target_size: Optional[Tuple[int, int]] = None
        self._tk_image: Optional[ImageTk.PhotoImage] = None
        self._display_size: Optional[Tuple[int, int]] = None
        self._image_top_left: Optional[Tuple[int, int]] = None
        self._background: str = "#ffffff"

        # crop gesture state
        self._cropping: bool = False
        self._drag_start: Optional[Tuple[float, float]] = None
        self._rubber_band: Optional[int] = None

        self.on_crop_complete: Optional[Callable[[CropRegion, ImageDimensions], None]] = None

        self._canvas.bind("<Configure>", self._on_canvas_resize)
        self._canvas.bind("<ButtonPress-1>", self._on_drag_start)
        self._canvas.bind("<B1-Motion>", self._on_drag_move)
        self._canvas.bind("<ButtonRelease-1>", self._on_drag_end)

    # ---- Public API ----
    def set_preview(self, image: Optional[Image.Image], background: str = "#ffffff") -> None:
        """Показывает отрендеренное превью (None — пустая канва с подсказкой)."""
        self._cropping = False
        self._image = image
        self._target_size = image.size if image is not None else None
        self._background = background
        self._render_image()

    def set_crop_source(self, image: Image.Image, target: ImageDimensions) -> None:
        """Включает режим обрезки: показывает рабочее изображение без фильтров."""
        self._cropping = True
        self._image = image
        self._target_size = target.as_tuple()
        self._render_image()

    def get_display_size(self) -> Optional[ImageDimensions]:
        """Размер, в котором изображение сейчас показано."""
        if self._display_size is None:
            return None
        return ImageDimensions(*self._display_size)

    # ---- Internals ----
    def _on_canvas_resize(self, _event: tk.Event) -> None:
        self._render_image()

    def _render_image(self) -> None:
        self._canvas.delete("all")
        self._rubber_band = None
        canvas_w = int(self._canvas.winfo_width())
        canvas_h = int(self._canvas.winfo_height())

        if self._image is None or self._target_size is None:
            self._display_size = None
            self._image_top_left = None
            self._canvas.create_text(
                canvas_w // 2,
                canvas_h // 2,
                text="Откройте изображение…",
                fill="#8a8a8a",
            )
            return

        disp_w, disp_h = fit_size(self._target_size, (canvas_w, canvas_h))
        self._display_size = (disp_w, disp_h)
        x = max(0, (canvas_w - disp_w) // 2)
        y = max(0, (canvas_h - disp_h) // 2)
        self._image_top_left = (x, y)

        if not self._cropping:
            # фон под превью, как у холста экспорта
            self._canvas.create_rectangle(0, 0, canvas_w, canvas_h, fill=self._background[:7], outline="")
        shown = self._image.resize((disp_w, disp_h), Image.Resampling.LANCZOS)
        self._tk_image = ImageTk.PhotoImage(shown)
        self._canvas.create_image(x, y, image=self._tk_image, anchor="nw")

    def _get_canvas_bg(self) -> str:
        # CTk does not expose canvas theme, so pick neutral
        return "#1f1f1f" if ctk.get_appearance_mode().lower() == "dark" else "#f2f2f2"

    def _canvas_to_display(self, cx: float, cy: float) -> Tuple[float, float]:
        """Координаты канвы → координаты показанного изображения (с ограничением)."""
        if self._image_top_left is None or self._display_size is None:
            return 0.0, 0.0
        ox, oy = self._image_top_left
        disp_w, disp_h = self._display_size
        return max(0.0, min(disp_w, cx - ox)), max(0.0, min(disp_h, cy - oy))

    # ---- Crop gesture ----
    def _on_drag_start(self, event: tk.Event) -> None:
        if not self._cropping or self._display_size is None:
            return
        self._drag_start = self._canvas_to_display(event.x, event.y)

    def _on_drag_move(self, event: tk.Event) -> None:
        if self._drag_start is None or self._image_top_left is None:
            return
        ox, oy = self._image_top_left
        x0, y0 = self._drag_start
        x1, y1 = self._canvas_to_display(event.x, event.y)
        if self._rubber_band is not None:
            self._canvas.delete(self._rubber_band)
        self._rubber_band = self._canvas.create_rectangle(
            ox + x0, oy + y0, ox + x1, oy + y1, outline="#3b82f6", width=2, dash=(4, 2)
        )

    def _on_drag_end(self, event: tk.Event) -> None:
        if self._drag_start is None:
            return
        x0, y0 = self._drag_start
        x1, y1 = self._canvas_to_display(event.x, event.y)
        self._drag_start = None
        display = self.get_display_size()
        if display is not None and self.on_crop_complete:
            self.on_crop_complete(CropRegion.from_corners(x0, y0, x1, y1), display)

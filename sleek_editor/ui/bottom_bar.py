from __future__ import annotations

from typing import Optional

import customtkinter as ctk

from sleek_editor.models.image_model import ImageDimensions


class BottomBar(ctk.CTkFrame):
    def __init__(self, master: ctk.CTk, **kwargs) -> None:
        super().__init__(master, height=40, **kwargs)

        # layout
        self.grid_rowconfigure(0, weight=1)
        self.grid_columnconfigure(0, weight=1)  # status stretches

        self._status_value = ctk.StringVar(value="Готово")
        self._status_label = ctk.CTkLabel(self, textvariable=self._status_value, anchor="w")
        self._status_label.grid(row=0, column=0, padx=(10, 6), pady=6, sticky="ew")
        self._default_text_color = self._status_label.cget("text_color")

        self._mode_value = ctk.StringVar(value="")
        self._mode_label = ctk.CTkLabel(self, textvariable=self._mode_value, width=110, anchor="e")
        self._mode_label.grid(row=0, column=1, padx=6, pady=6, sticky="e")

        self._dims_value = ctk.StringVar(value="—")
        self._dims_label = ctk.CTkLabel(self, textvariable=self._dims_value, width=160, anchor="e")
        self._dims_label.grid(row=0, column=2, padx=(6, 10), pady=6, sticky="e")

    # public API (sync from controller)
    def set_status(self, text: str, error: bool = False) -> None:
        self._status_value.set(text)
        self._status_label.configure(text_color="#d9534f" if error else self._default_text_color)

    def set_dimensions(self, original: Optional[ImageDimensions], target: Optional[ImageDimensions]) -> None:
        if original is None or target is None:
            self._dims_value.set("—")
            return
        if original == target:
            self._dims_value.set(f"{target.width} × {target.height} px")
        else:
            self._dims_value.set(f"{original.width} × {original.height} → {target.width} × {target.height} px")

    def set_mode_text(self, text: str) -> None:
        # "Обрезка" | имя пресета | ""
        self._mode_value.set(text)

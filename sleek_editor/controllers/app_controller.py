"""Контроллер приложения: связывает виджеты с сессией редактирования.

SOLID:
- SRP: класс управляет связями между UI и сессией (без логики обработки изображений).
- DIP: зависит от `EditorSession` и `Settings` как от ролей; сервисы скрыты внутри сессии.
Clean Code:
- Обработчики компактны; любое изменение модели приходит обратно через `on_change`.
"""
from __future__ import annotations

from concurrent.futures import Future
from dataclasses import dataclass
from pathlib import Path
from tkinter import filedialog, TclError
from typing import Callable, Optional

import customtkinter as ctk
from PIL import Image

from sleek_editor.errors import DecodeError, EncodeError, SessionStateError
from sleek_editor.models.filter_model import FilterField
from sleek_editor.models.image_model import Axis, CropRegion, ImageData, ImageDimensions
from sleek_editor.services.editor_session import EditorSession
from sleek_editor.services.settings import Settings
from sleek_editor.ui.bottom_bar import BottomBar
from sleek_editor.ui.image_viewer import ImageViewer
from sleek_editor.ui.sidebar import Sidebar
from sleek_editor.utils.logging import get_logger

logger = get_logger()

# how often pending decode/crop futures are checked, ms
_POLL_MS = 30

_OPEN_FILETYPES = (
    ("Images", "*.png *.jpg *.jpeg *.bmp *.gif *.tiff *.webp"),
    ("All files", "*.*"),
)
_SAVE_FILETYPES = (
    ("PNG", "*.png"),
    ("JPEG", "*.jpg *.jpeg"),
    ("WebP", "*.webp"),
    ("All files", "*.*"),
)


@dataclass
class AppController:
    """Связывает элементы UI с прикладной логикой.

    Ответственности:
    - Бинд событий (UI -> сессия) и перерисовка по `session.on_change` (сессия -> UI).
    - Диалоги открытия/сохранения и запоминание каталогов в `Settings`.
    - Показ ошибок загрузки и экспорта в строке состояния.
    """
    viewer: ImageViewer
    sidebar: Sidebar
    bottom: BottomBar
    window: ctk.CTk
    session: EditorSession
    settings: Settings

    def bind_events(self) -> None:
        """Регистрирует обработчики событий между UI-компонентами.

        Сохраняет слабую связность: компоненты UI ничего не знают друг о друге,
        общаются через контроллер.
        """
        self.sidebar.on_open_file = self._handle_open_file
        self.sidebar.on_filter_change = self._handle_filter_change
        self.sidebar.on_preset_change = self._handle_preset_change
        self.sidebar.on_background_change = self._handle_background_change
        self.sidebar.on_dimension_change = self._handle_dimension_change
        self.sidebar.on_lock_aspect_change = self._handle_lock_aspect_change
        self.sidebar.on_toggle_crop = self._handle_toggle_crop
        self.sidebar.on_reset = self._handle_reset
        self.sidebar.on_export = self._handle_export

        self.viewer.on_crop_complete = self._handle_crop_complete

        self.session.on_change = self._refresh
        self.sidebar.set_lock_aspect(self.session.lock_aspect)
        self._refresh(self.session)

    # ---- Handlers ----
    def _handle_open_file(self) -> None:
        try:
            file_path = filedialog.askopenfilename(
                title="Выберите изображение",
                initialdir=self.settings.get_open_dir(),
                filetypes=_OPEN_FILETYPES,
            )
        except TclError:
            logger.warning("Open dialog unavailable")
            return

        if not file_path:
            return

        path = Path(file_path)
        try:
            data = path.read_bytes()
        except OSError as exc:
            logger.warning("Failed to open %s: %s", path, exc)
            self.bottom.set_status(f"Не удалось открыть файл: {exc}", error=True)
            return

        self.bottom.set_status(f"Открываю {path.name}…")
        future = self.session.begin_load(data, path=path)
        self._when_done(future, lambda done: self._finish_load(done, path))

    def _finish_load(self, future: "Future[ImageData]", path: Path) -> None:
        try:
            self.session.complete_load(future)
        except DecodeError as exc:
            self.bottom.set_status(f"Не удалось открыть файл: {exc}", error=True)
            return

        self.settings.set_open_dir(str(path.parent))
        self.bottom.set_status(f"Открыт файл {path.name}")

    def _handle_filter_change(self, field: FilterField, value: float) -> None:
        self.session.adjust_filter(field, value)

    def _handle_preset_change(self, name: Optional[str]) -> None:
        try:
            self.session.select_preset(name)
        except KeyError:
            self.bottom.set_status(f"Неизвестный пресет: {name}", error=True)

    def _handle_background_change(self, color: str) -> None:
        self.session.set_background_color(color)

    def _handle_dimension_change(self, axis: Axis, text: str) -> None:
        current = self.session.dimensions
        # FocusOut fires even without edits
        if current is None or text == str(getattr(current, axis.value)):
            return
        self.session.edit_dimension(axis, text)

    def _handle_lock_aspect_change(self, locked: bool) -> None:
        self.session.lock_aspect = locked
        self.settings.set_lock_aspect(locked)

    def _handle_toggle_crop(self) -> None:
        self.session.toggle_crop_mode()

    def _handle_crop_complete(self, region: CropRegion, displayed_size: ImageDimensions) -> None:
        try:
            future = self.session.begin_crop(region, displayed_size)
        except SessionStateError as exc:
            logger.debug("Crop ignored: %s", exc)
            return
        self._when_done(future, self._finish_crop)

    def _finish_crop(self, future: "Future[Optional[Image.Image]]") -> None:
        try:
            result = self.session.complete_crop(future)
        except SessionStateError as exc:
            logger.debug("Crop result ignored: %s", exc)
            return
        if result is None:
            self.bottom.set_status("Рамка обрезки пуста")
            return
        self.session.toggle_crop_mode()
        self.bottom.set_status(f"Обрезано до {result.width} × {result.height} px")

    def _handle_reset(self) -> None:
        self.session.reset_filters()
        self.bottom.set_status("Фильтры сброшены")

    def _handle_export(self) -> None:
        if self.session.image is None:
            return
        try:
            file_path = filedialog.asksaveasfilename(
                title="Сохранить изображение",
                initialdir=self.settings.get_export_dir(),
                initialfile=self.session.export_filename,
                defaultextension=f".{self.session.export_format}",
                filetypes=_SAVE_FILETYPES,
            )
        except TclError:
            logger.warning("Save dialog unavailable")
            return

        if not file_path:
            return

        try:
            path = self.session.export_to(file_path)
        except (EncodeError, OSError) as exc:
            logger.error("Export failed: %s", exc)
            self.bottom.set_status(f"Не удалось сохранить: {exc}", error=True)
            return

        self.settings.set_export_dir(str(path.parent))
        self.bottom.set_status(f"Сохранено: {path.name}")

    # ---- Helpers ----
    def _when_done(self, future: Future, callback: Callable[[Future], None]) -> None:
        """Вызывает *callback* в потоке Tk, когда *future* завершится."""
        if future.done():
            callback(future)
            return
        self.window.after(_POLL_MS, self._when_done, future, callback)

    def _refresh(self, session: EditorSession) -> None:
        """Синхронизирует все виджеты с состоянием сессии."""
        image = session.image
        self.sidebar.set_image_info(image)
        self.sidebar.set_filters(session.filters)
        preset = session.active_preset
        self.sidebar.set_active_preset(preset.name if preset else None)
        self.sidebar.set_dimensions(session.dimensions)
        self.sidebar.set_cropping(session.is_cropping)
        self.sidebar.set_image_controls_enabled(image is not None)
        self.bottom.set_dimensions(session.original_dimensions, session.dimensions)

        if image is None:
            self.bottom.set_mode_text("")
            self.viewer.set_preview(None)
            return

        if session.is_cropping and session.dimensions is not None:
            self.bottom.set_mode_text("Обрезка")
            self.viewer.set_crop_source(image.pil_image, session.dimensions)
            return

        self.bottom.set_mode_text(preset.name if preset else "")
        self.viewer.set_preview(session.render_preview(), session.filters.background_color)

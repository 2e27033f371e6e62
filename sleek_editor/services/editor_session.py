"""Сессия редактирования: единственный владелец состояния редактора.

Принципы:
- SRP: сессия хранит состояние и делегирует вычисления сервисам.
- Нет скрытого глобального состояния: контроллер владеет экземпляром сессии.
- Каждая правка завершается целиком (модель + уведомление `on_change`) до следующей.
- Изображение заменяется только после успешного завершения `Future` декодирования/обрезки,
  и только в потоке владельца (`complete_load`, `complete_crop`).

Состояния: EMPTY → LOADED (загрузка), LOADED ↔ CROPPING (переключение обрезки),
LOADED → LOADED (правки фильтров и размеров), любое → EMPTY (`discard`).
"""
from __future__ import annotations

from concurrent.futures import Future
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable, Dict, Optional

from PIL import Image

from sleek_editor.errors import DecodeError, InvalidRangeError, SessionStateError
from sleek_editor.models.filter_model import (
    CustomMode,
    FilterField,
    FilterMode,
    FilterSettings,
    PresetMode,
    apply_adjustment,
    reset_to_defaults,
    with_background,
)
from sleek_editor.models.image_model import Axis, CropRegion, ImageData, ImageDimensions
from sleek_editor.models.presets import PresetFilter, get_preset
from sleek_editor.services.crop_service import CropService
from sleek_editor.services.dimension_service import DimensionService
from sleek_editor.services.filter_service import active_filter_expression
from sleek_editor.services.image_service import EXPORT_FORMATS, ImageService, format_for_path
from sleek_editor.services.render_service import RenderService
from sleek_editor.services.settings import Settings
from sleek_editor.utils.logging import get_logger

logger = get_logger()


class EditorState(Enum):
    EMPTY = "empty"
    LOADED = "loaded"
    CROPPING = "cropping"


@dataclass(frozen=True)
class ExportResult:
    """Закодированный результат экспорта."""
    data: bytes
    filename: str
    size: ImageDimensions


class EditorSession:
    """Состояние одного сеанса редактирования и операции над ним.

    Ответственности:
    - Загрузка/замена рабочего изображения и фиксация исходного размера.
    - Режим фильтра (ползунки или пресет) и целевой размер.
    - Режим обрезки и применение рамки.
    - Рендеринг превью и экспорт.
    """

    def __init__(
        self,
        image_service: Optional[ImageService] = None,
        render_service: Optional[RenderService] = None,
        crop_service: Optional[CropService] = None,
        dimension_service: Optional[DimensionService] = None,
        *,
        export_filename: str = "edited-image.png",
        export_format: str = "png",
        lock_aspect: bool = True,
        refresh_on_crop: bool = True,
    ) -> None:
        self._images = image_service or ImageService()
        self._render = render_service or RenderService(image_service=self._images)
        self._crop = crop_service or CropService()
        self._dimensions_service = dimension_service or DimensionService()

        self.export_filename = export_filename
        self.export_format = export_format
        self.lock_aspect = lock_aspect
        self.refresh_on_crop = refresh_on_crop

        self._state = EditorState.EMPTY
        self._image: Optional[ImageData] = None
        self._original_dimensions: Optional[ImageDimensions] = None
        self._dimensions: Optional[ImageDimensions] = None
        self._mode: FilterMode = CustomMode(reset_to_defaults())
        self._crop_sources: Dict["Future[Optional[Image.Image]]", ImageData] = {}

        self.on_change: Optional[Callable[["EditorSession"], None]] = None

    @classmethod
    def from_settings(cls, settings: Settings, **services: object) -> "EditorSession":
        """Создаёт сессию с параметрами из `Settings`."""
        return cls(
            export_filename=settings.get_export_filename(),
            export_format=settings.get_export_format(),
            lock_aspect=settings.get_lock_aspect(),
            refresh_on_crop=settings.get_refresh_on_crop(),
            **services,  # type: ignore[arg-type]
        )

    # ---- Состояние ----
    @property
    def state(self) -> EditorState:
        return self._state

    @property
    def image(self) -> Optional[ImageData]:
        return self._image

    @property
    def original_dimensions(self) -> Optional[ImageDimensions]:
        return self._original_dimensions

    @property
    def dimensions(self) -> Optional[ImageDimensions]:
        return self._dimensions

    @property
    def filter_mode(self) -> FilterMode:
        return self._mode

    @property
    def filters(self) -> FilterSettings:
        """Значения ползунков (сохраняются и под активным пресетом)."""
        return self._mode.settings

    @property
    def active_preset(self) -> Optional[PresetFilter]:
        return self._mode.preset if isinstance(self._mode, PresetMode) else None

    @property
    def filter_expression(self) -> str:
        return active_filter_expression(self._mode)

    @property
    def is_cropping(self) -> bool:
        return self._state is EditorState.CROPPING

    # ---- Загрузка ----
    def load(self, image_data: ImageData) -> None:
        """Делает *image_data* рабочим изображением и фиксирует исходный размер."""
        self._image = image_data
        self._original_dimensions = image_data.natural_size
        self._dimensions = image_data.natural_size
        self._state = EditorState.LOADED
        logger.info("Loaded image %sx%s", image_data.width, image_data.height)
        self._notify()

    def begin_load(self, data: bytes, path: Optional[Path] = None) -> "Future[ImageData]":
        """Запускает декодирование, не трогая состояние сессии.

        Декодирование может идти на исполнителе `ImageService`; результат
        применяет владелец сессии вызовом `complete_load` в своём потоке.
        """
        return self._images.begin_decode(data, path=path)

    def complete_load(self, future: "Future[ImageData]") -> ImageData:
        """Дожидается декодирования и делает результат рабочим изображением.

        Вызывается в потоке владельца сессии; `on_change` срабатывает здесь же.

        Raises:
            DecodeError: если байты не распознаны (состояние не меняется).
        """
        try:
            image_data = future.result()
        except DecodeError as exc:
            logger.warning("Decode failed: %s", exc)
            raise
        self.load(image_data)
        return image_data

    def load_file(self, file_path: str | Path) -> ImageData:
        """Синхронно загружает файл (ошибки ввода-вывода пробрасываются)."""
        image_data = self._images.load_image(file_path)
        self.load(image_data)
        return image_data

    def discard(self) -> None:
        """Закрывает изображение и возвращает сессию в EMPTY."""
        self._image = None
        self._original_dimensions = None
        self._dimensions = None
        self._state = EditorState.EMPTY
        self._crop_sources.clear()
        logger.info("Image discarded")
        self._notify()

    # ---- Фильтры ----
    def adjust_filter(self, field: FilterField | str, value: object) -> FilterSettings:
        """Меняет одно поле ползунков и снимает активный пресет.

        Нечисловой ввод (например, пустое поле во время набора) игнорируется.
        """
        try:
            settings = apply_adjustment(self._mode.settings, field, value)
        except InvalidRangeError as exc:
            logger.debug("Ignoring filter edit: %s", exc)
            return self._mode.settings
        self._mode = CustomMode(settings)
        self._notify()
        return settings

    def set_background_color(self, color: str) -> FilterSettings:
        """Меняет цвет фона; активный пресет сохраняется."""
        try:
            settings = with_background(self._mode.settings, color)
        except ValueError as exc:
            logger.debug("Ignoring background color %r: %s", color, exc)
            return self._mode.settings
        if isinstance(self._mode, PresetMode):
            self._mode = PresetMode(self._mode.preset, settings)
        else:
            self._mode = CustomMode(settings)
        self._notify()
        return settings

    def select_preset(self, name: Optional[str]) -> Optional[PresetFilter]:
        """Выбирает пресет по имени; None/"None" возвращает к ползункам.

        Raises:
            KeyError: если пресет не найден.
        """
        preset = get_preset(name)
        settings = self._mode.settings
        self._mode = PresetMode(preset, settings) if preset is not None else CustomMode(settings)
        self._notify()
        return preset

    def reset_filters(self) -> FilterSettings:
        """Сбрасывает ползунки к значениям по умолчанию и снимает пресет."""
        self._mode = CustomMode(reset_to_defaults())
        self._notify()
        return self._mode.settings

    # ---- Размеры ----
    def edit_dimension(self, axis: Axis | str, value: object, lock_aspect: Optional[bool] = None) -> Optional[ImageDimensions]:
        """Применяет правку поля ширины/высоты к целевому размеру."""
        if self._original_dimensions is None or self._dimensions is None:
            logger.debug("Dimension edit ignored: no image loaded")
            return None
        locked = self.lock_aspect if lock_aspect is None else lock_aspect
        self._dimensions = self._dimensions_service.resolve_dimension(
            self._original_dimensions, self._dimensions, axis, value, locked
        )
        self._notify()
        return self._dimensions

    # ---- Обрезка ----
    def toggle_crop_mode(self) -> EditorState:
        """Переключает LOADED ↔ CROPPING; без изображения ничего не делает."""
        if self._state is EditorState.EMPTY:
            logger.debug("Crop toggle ignored: no image loaded")
            return self._state
        self._state = EditorState.LOADED if self._state is EditorState.CROPPING else EditorState.CROPPING
        logger.info("Crop mode %s", "on" if self.is_cropping else "off")
        self._notify()
        return self._state

    def begin_crop(self, region: CropRegion, displayed_size: ImageDimensions) -> "Future[Optional[Image.Image]]":
        """Запускает вырезание области, не трогая состояние сессии.

        Результат применяет `complete_crop` в потоке владельца сессии.

        Raises:
            SessionStateError: если режим обрезки не включён.
        """
        source = self._require_cropping()
        future = self._images.submit(lambda: self._crop.extract_crop(source.pil_image, displayed_size, region))
        self._crop_sources[future] = source
        return future

    def complete_crop(self, future: "Future[Optional[Image.Image]]") -> Optional[ImageData]:
        """Дожидается вырезания и заменяет рабочее изображение результатом.

        Returns:
            Новое `ImageData` или None, если рамка вырождена либо рабочее
            изображение сменилось, пока шла обрезка (результат отбрасывается).

        Raises:
            SessionStateError: если режим обрезки уже выключен.
        """
        source = self._crop_sources.pop(future, None)
        cropped = future.result()
        self._require_cropping()
        if cropped is None:
            return None
        if source is not self._image:
            logger.warning("Crop result dropped: working image changed meanwhile")
            return None
        return self._replace_with_crop(cropped)

    def commit_crop(self, region: CropRegion, displayed_size: ImageDimensions) -> Optional[ImageData]:
        """Вырезает область и делает её рабочим изображением.

        Returns:
            Новое `ImageData` или None, если рамка вырождена (ничего не меняется).

        Raises:
            SessionStateError: если режим обрезки не включён.
        """
        source = self._require_cropping().pil_image
        cropped = self._crop.extract_crop(source, displayed_size, region)
        if cropped is None:
            return None
        return self._replace_with_crop(cropped)

    def _require_cropping(self) -> ImageData:
        if self._state is not EditorState.CROPPING or self._image is None:
            raise SessionStateError("Обрезка доступна только в режиме обрезки")
        return self._image

    def _replace_with_crop(self, cropped: Image.Image) -> ImageData:
        previous = self._require_cropping()
        self._image = ImageData.from_pil(cropped, path=previous.path, format=previous.format)
        if self.refresh_on_crop:
            self._original_dimensions = self._image.natural_size
            self._dimensions = self._image.natural_size
        logger.info("Crop committed: %sx%s", self._image.width, self._image.height)
        self._notify()
        return self._image

    # ---- Рендеринг и экспорт ----
    def render_preview(self) -> Optional[Image.Image]:
        """Рендерит текущее состояние для показа; None без изображения."""
        if self._image is None or self._dimensions is None:
            return None
        return self._render.render(
            self._image.pil_image,
            self.filter_expression,
            self._dimensions,
            self._mode.settings.background_color,
        )

    def export(self, fmt: Optional[str] = None) -> ExportResult:
        """Рендерит и кодирует текущее состояние; состояние сессии не меняется.

        Raises:
            SessionStateError: если изображение не загружено.
            EncodeError: если кодирование не удалось.
        """
        if self._image is None or self._dimensions is None:
            raise SessionStateError("Нет изображения для экспорта")
        fmt = (fmt or self.export_format).lower()
        data = self._render.export(
            self._image.pil_image,
            self.filter_expression,
            self._dimensions,
            self._mode.settings.background_color,
            fmt=fmt,
        )
        filename = self.export_filename
        if format_for_path(filename, default="") != EXPORT_FORMATS.get(fmt, fmt.upper()):
            filename = str(Path(filename).with_suffix(f".{fmt}"))
        logger.info("Exported %s (%d bytes)", filename, len(data))
        return ExportResult(data=data, filename=filename, size=self._dimensions)

    def export_to(self, file_path: str | Path) -> Path:
        """Экспортирует в файл; формат определяется по расширению.

        Неизвестное расширение записывается в формате `export_format`.

        Raises:
            SessionStateError: если изображение не загружено.
            EncodeError, OSError: если кодирование или запись не удались.
        """
        rendered = self.render_preview()
        if rendered is None:
            raise SessionStateError("Нет изображения для экспорта")
        return self._images.save(rendered, file_path, default_format=self.export_format)

    def _notify(self) -> None:
        if self.on_change:
            self.on_change(self)

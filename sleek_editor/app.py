from concurrent.futures import ThreadPoolExecutor

import customtkinter as ctk

from sleek_editor.controllers.app_controller import AppController
from sleek_editor.models.presets import preset_names
from sleek_editor.services.editor_session import EditorSession
from sleek_editor.services.image_service import ImageService
from sleek_editor.services.settings import Settings
from sleek_editor.ui.image_viewer import ImageViewer
from sleek_editor.ui.sidebar import Sidebar
from sleek_editor.ui.bottom_bar import BottomBar
from sleek_editor.utils.logging import configure_logging


class SleekEditorApp(ctk.CTk):
    def __init__(self, settings: Settings | None = None) -> None:
        super().__init__()
        ctk.set_appearance_mode("system")
        ctk.set_default_color_theme("blue")

        self._settings = settings or Settings()
        configure_logging(self._settings.get_log_level())

        self.title("Sleek Image Editor")
        self.minsize(960, 640)

        # root layout: left viewer, right sidebar
        self.grid_columnconfigure(0, weight=1)
        self.grid_rowconfigure(0, weight=1)
        self.grid_rowconfigure(1, weight=0)

        self._viewer = ImageViewer(self)
        self._viewer.grid(row=0, column=0, sticky="nsew", padx=(12, 6), pady=(12, 6))

        self._sidebar = Sidebar(self, preset_names())
        self._sidebar.grid(row=0, column=1, sticky="ns", padx=(6, 12), pady=(12, 6))

        self._bottom = BottomBar(self)
        self._bottom.grid(row=1, column=0, columnspan=2, sticky="ew", padx=12, pady=(0, 12))

        # decode and crop run off the Tk thread; the controller applies results
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="sleek-io")
        self._session = EditorSession.from_settings(
            self._settings, image_service=ImageService(executor=self._executor)
        )
        self._controller = AppController(
            viewer=self._viewer,
            sidebar=self._sidebar,
            bottom=self._bottom,
            window=self,
            session=self._session,
            settings=self._settings,
        )
        self._controller.bind_events()
        self.protocol("WM_DELETE_WINDOW", self._on_close)

    def _on_close(self) -> None:
        self._executor.shutdown(wait=False, cancel_futures=True)
        self.destroy()

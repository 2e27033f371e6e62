"""Точка входа в приложение."""
from sleek_editor.app import SleekEditorApp


def main() -> None:
    """Создаёт и запускает главное окно приложения."""
    app = SleekEditorApp()
    app.mainloop()


if __name__ == "__main__":
    main()

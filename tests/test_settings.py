from sleek_editor.services.settings import Settings


def test_defaults_when_file_missing(tmp_path):
    settings = Settings(tmp_path / "settings.ini")
    assert settings.get_open_dir() is None
    assert settings.get_export_dir() is None
    assert settings.get_export_format() == "png"
    assert settings.get_export_filename() == "edited-image.png"
    assert settings.get_lock_aspect() is True
    assert settings.get_refresh_on_crop() is True
    assert settings.get_log_level() == "INFO"
    assert not (tmp_path / "settings.ini").exists()


def test_values_persist_between_instances(tmp_path):
    path = tmp_path / "nested" / "settings.ini"
    settings = Settings(path)
    settings.set_open_dir("/photos")
    settings.set_export_dir("/exports")
    settings.set_lock_aspect(False)

    reloaded = Settings(path)
    assert reloaded.get_open_dir() == "/photos"
    assert reloaded.get_export_dir() == "/exports"
    assert reloaded.get_lock_aspect() is False


def test_environment_variable_selects_file(isolated_settings):
    isolated_settings.write_text("[preferences]\nexport_format = JPG\nlog_level = debug\n", encoding="utf-8")
    settings = Settings()
    assert settings.settings_file == isolated_settings
    assert settings.get_export_format() == "jpg"
    assert settings.get_log_level() == "DEBUG"
    # missing keys fall back to defaults
    assert settings.get_export_filename() == "edited-image.png"


def test_invalid_boolean_falls_back_to_default(tmp_path):
    path = tmp_path / "settings.ini"
    path.write_text("[preferences]\nrefresh_on_crop = sometimes\n", encoding="utf-8")
    assert Settings(path).get_refresh_on_crop() is True

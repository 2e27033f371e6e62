import pytest

from sleek_editor.models.presets import NONE_PRESET_NAME, PRESETS, get_preset, preset_names
from sleek_editor.services.filter_service import parse_filter_expression


def test_catalog_order():
    assert preset_names() == (
        "None",
        "B&W",
        "Sepia",
        "Vintage",
        "Cool",
        "Warm",
        "High Contrast",
        "Dramatic",
    )


def test_lookup_by_name():
    preset = get_preset("Vintage")
    assert preset is not None
    assert preset.filter == "sepia(50%) contrast(120%) brightness(90%)"


@pytest.mark.parametrize("name", [None, NONE_PRESET_NAME])
def test_none_means_no_preset(name):
    assert get_preset(name) is None


def test_unknown_preset_raises_key_error():
    with pytest.raises(KeyError):
        get_preset("Polaroid")


@pytest.mark.parametrize("preset", PRESETS, ids=lambda p: p.name)
def test_every_preset_filter_parses(preset):
    ops = parse_filter_expression(preset.filter)
    if preset.name == NONE_PRESET_NAME:
        assert ops == []
    else:
        assert ops

import pytest

from sleek_editor.utils.rounding import round_half_up


@pytest.mark.parametrize(
    "value, expected",
    [(0.5, 1), (1.5, 2), (2.5, 3), (2.4999, 2), (22.499999999999996, 23), (0.0, 0), (7, 7)],
)
def test_round_half_up(value, expected):
    assert round_half_up(value) == expected

import pytest

from tramp.core.numbers import round_half_up


@pytest.mark.parametrize(
    "value,expected",
    [(2.5, 3), (3.5, 4), (0.5, 1), (10.5, 11), (2.49, 2), (2.51, 3), (-2.5, -2), (-2.51, -3), (7.0, 7)],
)
def test_round_half_up(value: float, expected: int) -> None:
    assert round_half_up(value) == expected
    assert isinstance(round_half_up(value), int)

import numpy as np

from insights.formatting import (
    format_currency,
    format_currency_fixed,
    format_number,
    format_percent,
    percent_of,
    plain_number,
    round_half_up,
    truncate_label,
)


def test_format_number_drops_trailing_zeros() -> None:
    assert format_number(1234.5) == "1,234.5"
    assert format_number(1000) == "1,000"
    assert format_number(0) == "0"
    assert format_number(2.12345) == "2.123"


def test_currency_formats() -> None:
    assert format_currency(4520) == "$4,520"
    assert format_currency(1234.5) == "$1,234.5"
    assert format_currency_fixed(36.666) == "$36.67"


def test_round_half_up() -> None:
    assert round_half_up(2.5) == 3
    assert round_half_up(3.5) == 4
    assert round_half_up(2.49) == 2


def test_percent_helpers() -> None:
    assert percent_of(1, 4) == 25.0
    assert percent_of(1, 0) is None
    assert format_percent(55.5555) == "55.6%"
    assert format_percent(2.5, digits=2) == "2.50%"
    assert format_percent(None) == "n/a"


def test_plain_number_converts_numpy_scalars() -> None:
    assert plain_number(np.int64(3)) == 3
    assert isinstance(plain_number(np.float64(3.0)), int)
    assert plain_number(np.float64(2.5)) == 2.5


def test_truncate_label() -> None:
    assert truncate_label("Premium Headphones", 15) == "Premium Headpho..."
    assert truncate_label("Cable", 15) == "Cable"

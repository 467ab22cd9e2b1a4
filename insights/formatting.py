from __future__ import annotations

import math
from typing import Any


def plain_number(value: Any) -> int | float:
    """Convert numpy scalars to built-ins, keeping whole numbers as int."""
    number = float(value)
    if number.is_integer():
        return int(number)
    return number


def round_half_up(value: float) -> int:
    return int(math.floor(float(value) + 0.5))


def format_number(value: Any) -> str:
    # Thousands separators, at most three fraction digits, trailing zeros dropped.
    text = f"{float(value):,.3f}".rstrip("0").rstrip(".")
    return "0" if text in {"-0", ""} else text


def format_currency(value: Any) -> str:
    return f"${format_number(value)}"


def format_currency_fixed(value: Any, digits: int = 2) -> str:
    return f"${float(value):,.{digits}f}"


def percent_of(part: float, whole: float) -> float | None:
    if not whole:
        return None
    return float(part) / float(whole) * 100


def format_percent(value: float | None, digits: int = 1) -> str:
    if value is None:
        return "n/a"
    return f"{value:.{digits}f}%"


def truncate_label(text: str, limit: int) -> str:
    if len(text) > limit:
        return text[:limit] + "..."
    return text

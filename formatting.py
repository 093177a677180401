# formatting.py - display helpers, never raise on bad input
from __future__ import annotations

import math

from services_dates import parse_day

NOT_AVAILABLE = "N/A"
CURRENCY_SYMBOL = "R$"


def format_date(value) -> str:
    day = parse_day(value)
    if day is None:
        return NOT_AVAILABLE
    return day.strftime("%d/%m/%Y")


def _to_float(value) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def format_currency(value) -> str:
    number = _to_float(value)
    if number is None:
        return NOT_AVAILABLE
    sign = "-" if number < 0 else ""
    text = f"{abs(number):,.2f}"
    # 1,234.56 -> 1.234,56
    text = text.replace(",", "_").replace(".", ",").replace("_", ".")
    return f"{sign}{CURRENCY_SYMBOL} {text}"


def format_pct(value, decimals: int = 1, signed: bool = False) -> str:
    number = _to_float(value)
    if number is None:
        return NOT_AVAILABLE
    sign = "+" if signed and number > 0 else ""
    return f"{sign}{number:.{decimals}f} %"


def format_list(values) -> str:
    if not values:
        return ""
    return ", ".join(str(v) for v in values)

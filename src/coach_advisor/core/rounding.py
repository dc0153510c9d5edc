from __future__ import annotations

import math

_CURRENCY_SYMBOLS = {
    "AUD": "$",
    "USD": "US$",
    "NZD": "NZ$",
    "GBP": "£",
    "EUR": "€",
}


def round_half_away_from_zero(value: float, decimals: int = 0) -> float:
    """Scale, round half away from zero, scale back.

    Python's built-in ``round`` is round-half-to-even; forecast figures are
    rounded the ordinary way instead (2.5 -> 3, -2.5 -> -3). The rounding is
    applied to the scaled float, so binary artefacts such as 1.005 * 100 ==
    100.49999999999999 round down.
    """
    factor = 10 ** decimals
    scaled = value * factor
    rounded = math.floor(abs(scaled) + 0.5)
    return math.copysign(rounded, scaled) / factor if rounded else 0.0


def round_whole(value: float) -> int:
    return int(round_half_away_from_zero(value, 0))


def format_amount(value: float) -> str:
    """``58000 -> "$58,000"``; used in suggestion text."""
    if value < 0:
        return f"-${abs(value):,.0f}"
    return f"${value:,.0f}"


def format_currency(value: float, currency: str = "AUD") -> str:
    """Format with two decimals in en-AU style, e.g. ``-$1,234.50``."""
    code = (currency or "AUD").upper()
    amount = f"{abs(round_half_away_from_zero(value, 2)):,.2f}"
    symbol = _CURRENCY_SYMBOLS.get(code)
    body = f"{symbol}{amount}" if symbol else f"{code} {amount}"
    return f"-{body}" if value < 0 and amount != "0.00" else body

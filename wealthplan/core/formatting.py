"""Presentation helpers shared by API responses."""

from __future__ import annotations

from datetime import date
from typing import Optional, Union

from wealthplan.config import settings
from wealthplan.models import Frequency

Number = Union[int, float]

_FREQUENCY_LABELS = {
    Frequency.DAILY: "diária",
    Frequency.WEEKLY: "semanal",
    Frequency.MONTHLY: "mensal",
}


def format_currency(value: Number, currency: str = "USD", decimals: int = 2) -> str:
    """Format as '$1,234.56' (USD) or 'R$ 1.234,56' (BRL)."""
    sign = "-" if value < 0 else ""
    body = f"{abs(float(value)):,.{decimals}f}"
    if currency == "BRL":
        # 1,234.56 -> 1.234,56
        body = body.replace(",", "X").replace(".", ",").replace("X", ".")
        return f"{sign}R$ {body}"
    if currency == "USD":
        return f"{sign}${body}"
    raise ValueError(f"unsupported currency: {currency}")


def to_brl(value: Number, rate: Optional[float] = None) -> float:
    return float(value) * (settings.brl_rate if rate is None else rate)


def format_date_br(value: Optional[date]) -> str:
    if value is None:
        return "-"
    return value.strftime("%d/%m/%Y")


def frequency_label(frequency: Union[str, Frequency, None]) -> str:
    if frequency is None:
        return "-"
    try:
        return _FREQUENCY_LABELS[Frequency(frequency)]
    except ValueError:
        return "-"

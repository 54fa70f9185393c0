"""
Display formatting.

Amounts are always shown in their own currency; nothing is converted.
"""

from datetime import date
from decimal import Decimal
from typing import Union


CURRENCY_SYMBOLS = {
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
    "INR": "₹",
    "JPY": "¥",
    "CNY": "¥",
    "AUD": "A$",
    "CAD": "CA$",
}


def format_currency(amount: Union[Decimal, int, float], currency: str = "USD") -> str:
    """
    Two-decimal amount with thousands separators, e.g. "-$1,250.50".

    Unknown currencies are prefixed with their code ("CHF 12.00").
    """
    currency = currency.upper()
    value = Decimal(str(amount)).quantize(Decimal("0.01"))
    sign = "-" if value < 0 else ""
    number = f"{abs(value):,.2f}"

    symbol = CURRENCY_SYMBOLS.get(currency)
    if symbol:
        return f"{sign}{symbol}{number}"
    return f"{sign}{currency} {number}"


def format_date(value: date, fmt: str = "%b %d, %Y") -> str:
    return value.strftime(fmt)

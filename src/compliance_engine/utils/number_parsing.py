"""Locale-tolerant parsing of numbers found in contract clause values."""

import math
import re
from typing import Any, Optional

# Currency markers that may lead or trail an amount
_CURRENCY_PREFIXES = [
    r"^SFr\.?\s*",
    r"^(CHF|EUR|USD|GBP)\s*",
    r"^[€$£]\s*",
]
_CURRENCY_SUFFIXES = [
    r"\s*(CHF|EUR|USD|GBP)$",
    r"\s*SFr\.?$",
    r"\s*[€$£]$",
]

# Duration and rate units that contract values commonly carry
_UNIT_SUFFIXES = [
    r"\s*(calendar|business|working)?\s*days?$",
    r"\s*(months?|weeks?|years?)$",
    r"\s*(giorni|mesi)$",
    r"\s*%$",
    r"\s*[dD]$",
]


def parse_contract_number(value: Any) -> Optional[float]:
    """Parse a number that may use European separators or carry a unit.

    Handles:
    - Plain numbers: 30 -> 30.0 (booleans, NaN and infinities are rejected)
    - European comma decimal: "12,5" -> 12.5
    - Thousand separators: "1.000,50", "1'000.50", "1,000" -> 1000.5 / 1000.0
    - Currency markers: "EUR 5.000,00", "$1,200" -> 5000.0 / 1200.0
    - Unit suffixes: "30 days", "45 calendar days", "3 months", "10%" -> number

    Args:
        value: The value to parse (string, int, float, or anything else)

    Returns:
        Parsed float, or None when the value is not a finite number
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, (int, float)):
        number = float(value)
        return number if math.isfinite(number) else None

    if not isinstance(value, str):
        return None

    text = value.strip()
    if not text:
        return None

    for pattern in _CURRENCY_PREFIXES:
        text = re.sub(pattern, "", text, flags=re.IGNORECASE)
    for pattern in _CURRENCY_SUFFIXES + _UNIT_SUFFIXES:
        text = re.sub(pattern, "", text, flags=re.IGNORECASE)

    text = text.strip()
    if not text:
        return None

    text = text.replace("'", "")
    has_comma = "," in text
    has_dot = "." in text

    if has_comma and has_dot:
        # Whichever separator comes last is the decimal mark
        if text.rfind(",") > text.rfind("."):
            text = text.replace(".", "").replace(",", ".")
        else:
            text = text.replace(",", "")
    elif has_comma:
        parts = text.split(",")
        if len(parts) > 1 and all(len(p) == 3 and p.isdigit() for p in parts[1:]):
            text = text.replace(",", "")
        else:
            text = text.replace(",", ".")
    elif has_dot:
        parts = text.split(".")
        # "5.000" and "1.000.000" are European thousands
        if len(parts) > 2 and all(len(p) == 3 and p.isdigit() for p in parts[1:]):
            text = text.replace(".", "")

    try:
        number = float(text)
    except ValueError:
        return None
    return number if math.isfinite(number) else None

"""Formatting utilities for user-facing numbers and dates.

Used by Summarizer for prompt context and template text.
"""

import math
from datetime import date, datetime

from txn_agent.types import value_kind


def format_usd(val) -> str:
    """Format dollar amount with cents: 4.5 → '$4.50', -100 → '-$100.00'.

    Non-numeric values (None, text, NaN) → 'N/A'.
    """
    if value_kind(val) != "number" or math.isnan(val):
        return "N/A"
    sign = "-" if val < 0 else ""
    return f"{sign}${abs(val):.2f}"


def format_pct(val: float | None) -> str:
    """Format percentage with one decimal: 12.345 → '12.3%'."""
    if val is None:
        return "N/A"
    return f"{val:.1f}%"


def format_date(val, default: str = "Unknown date") -> str:
    """Format date/datetime (incl. pandas Timestamp) for display.

    Midnight datetimes print as date only. NaT and None → default.
    """
    if val is None:
        return default
    # NaT compares unequal to itself
    if val != val:
        return default
    if isinstance(val, datetime):
        if (val.hour, val.minute, val.second) == (0, 0, 0):
            return val.strftime("%Y-%m-%d")
        return val.strftime("%Y-%m-%d %H:%M:%S")
    if isinstance(val, date):
        return val.isoformat()
    return str(val) or default

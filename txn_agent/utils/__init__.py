"""Utility functions."""

from txn_agent.utils.formatting import (
    format_date,
    format_pct,
    format_usd,
)

__all__ = [
    "format_date",
    "format_pct",
    "format_usd",
]

"""Data management"""

from .loader import load_transactions, to_records

__all__ = [
    "load_transactions",
    "to_records",
]

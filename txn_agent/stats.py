"""Amount statistics over transaction records."""

import math
from dataclasses import dataclass
from typing import Any

from txn_agent.types import value_kind

AMOUNT_FIELD = "amt"


@dataclass(frozen=True)
class AmountStats:
    """Extremes and mean of record amounts.

    lowest_record / highest_record are the first records holding the
    min / max amount.
    """
    lowest: float
    highest: float
    average: float
    lowest_record: dict
    highest_record: dict
    count: int


def _amount(record: dict, field: str) -> float | None:
    val = record.get(field)
    if value_kind(val) != "number" or math.isnan(val):
        return None
    return float(val)


def compute_amount_stats(records: list[dict], field: str = AMOUNT_FIELD) -> AmountStats | None:
    """
    Compute min / max / mean of a numeric field.

    Records without a numeric value are ignored.
    Returns None if no record has one.
    """
    lowest = highest = None
    lowest_record = highest_record = None
    total = 0.0
    count = 0

    for record in records:
        amount = _amount(record, field)
        if amount is None:
            continue
        count += 1
        total += amount
        # Strict comparisons keep the first occurrence on ties
        if lowest is None or amount < lowest:
            lowest, lowest_record = amount, record
        if highest is None or amount > highest:
            highest, highest_record = amount, record

    if count == 0:
        return None

    return AmountStats(
        lowest=lowest,
        highest=highest,
        average=total / count,
        lowest_record=lowest_record,
        highest_record=highest_record,
        count=count,
    )


def match_percentage(match_count: int, total: int) -> float:
    """Share of matched records, rounded to one decimal. 0.0 for empty datasets."""
    if total <= 0:
        return 0.0
    return round(match_count / total * 100, 1)


def dataset_statistics(records: list[dict[str, Any]]) -> dict:
    """
    Overview of a loaded dataset.

    Returns:
        {
            "total_transactions": N,
            "amount_stats": {"min": X, "max": X, "average": X} | None,
            "unique_categories": N,
            "categories": [first 10],
            "unique_merchants": N,
            "merchants": [first 10],
            "fraud_count": N,
        }
    """
    if not records:
        return {"error": "No transactions loaded"}

    amounts = compute_amount_stats(records)
    categories = list(dict.fromkeys(r.get("category") for r in records if r.get("category")))
    merchants = list(dict.fromkeys(r.get("merchant") for r in records if r.get("merchant")))

    return {
        "total_transactions": len(records),
        "amount_stats": {
            "min": amounts.lowest,
            "max": amounts.highest,
            "average": amounts.average,
        } if amounts else None,
        "unique_categories": len(categories),
        "categories": categories[:10],
        "unique_merchants": len(merchants),
        "merchants": merchants[:10],
        "fraud_count": sum(1 for r in records if r.get("isFraud") == 1),
    }

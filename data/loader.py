"""Transaction CSV loading"""

import logging
from pathlib import Path

import pandas as pd

from txn_agent.rules import FIELDS, get_field_names

logger = logging.getLogger(__name__)


def load_transactions(file_path: str | Path) -> pd.DataFrame:
    """
    Load transaction export into a DataFrame.

    Args:
        file_path: Path to CSV file (no header row)

    Returns:
        DataFrame with one column per catalog field, in catalog order

    Expected CSV format (24 columns, field order of the catalog):
        0,2019-01-01 00:00:18,2703186189652095,"fraud_Rippin, Kub and Mann",misc_net,4.97,...

    Coercion:
        number   → float (int if the whole column is integral), unparsable → 0
        datetime → Timestamp, unparsable → NaT
        date     → Timestamp, unparsable → NaT
        string   → trimmed text
    """
    path = Path(file_path)
    if not path.exists():
        raise FileNotFoundError(f"Transactions file not found: {path}")

    names = get_field_names()
    df = pd.read_csv(
        path,
        header=None,
        names=names,
        dtype=str,
        keep_default_na=False,
        skipinitialspace=True,
    )

    for name in names:
        field_type = FIELDS[name]["type"]
        column = df[name]

        if field_type == "number":
            numbers = pd.to_numeric(column, errors="coerce").fillna(0)
            if (numbers % 1 == 0).all():
                numbers = numbers.astype("int64")
            df[name] = numbers
        elif field_type in ("datetime", "date"):
            df[name] = pd.to_datetime(column, errors="coerce")
        else:
            df[name] = column.fillna("").astype(str).str.strip()

    logger.info(f"Loaded {len(df)} transactions from {path}")
    return df


def to_records(df: pd.DataFrame) -> list[dict]:
    """DataFrame rows as plain dicts. NaN / NaT become None."""
    clean = df.astype(object).where(df.notna(), None)
    return clean.to_dict(orient="records")


"""
normalizer.py
--------------
Record normalizer. Converts raw, string-typed CSV rows into ExpenseRecords.

Ingestion is deliberately lenient:
    - Rows missing Amount or Date are blank/malformed lines and are dropped.
    - A bad amount becomes 0. A bad date becomes today's date. A bad year
      becomes the current year. None of these raise.

The date fallback means a corrupt date is indistinguishable from a record
dated today. That behavior is kept as-is and logged at DEBUG level.
"""

import logging
import math
import re
from datetime import date, datetime
from typing import Any, Iterable, List, Mapping

import pandas as pd

from core.models import ExpenseRecord
from config.config_loader import get_ingestion_config

logger = logging.getLogger(__name__)

_NUMBER_RE = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?")
_INTEGER_RE = re.compile(r"^\s*[+-]?\d+")


# -------------------------------------------------------------------------
# FIELD PARSERS
# -------------------------------------------------------------------------

def parse_amount(value: Any) -> float:
    """
    Parses a currency-formatted amount such as "₹1,200.50" into a float.

    Currency symbols and thousands separators from config are stripped and
    the leading decimal number is read. Anything unparseable, non-finite or
    negative returns 0.0.
    """
    if value is None:
        return 0.0

    cfg = get_ingestion_config()
    text = str(value)
    for symbol in cfg["currency_symbols"]:
        text = text.replace(symbol, "")
    text = text.replace(cfg["thousands_separator"], "").strip()

    match = _NUMBER_RE.match(text)
    if not match:
        return 0.0

    amount = float(match.group(0))
    if not math.isfinite(amount) or amount < 0:
        return 0.0
    return amount


def parse_date(value: Any, today: date | None = None) -> date:
    """
    Parses a dd/mm/yyyy date string. Falls back to today's date when the
    value is missing or unparseable.
    """
    fallback = today or date.today()
    if value is None or not str(value).strip():
        return fallback

    try:
        return datetime.strptime(str(value).strip(), get_ingestion_config()["date_format"]).date()
    except ValueError:
        logger.debug(f"Unparseable date {value!r}, defaulting to {fallback.isoformat()}.")
        return fallback


def parse_year(value: Any, today: date | None = None) -> int:
    """Reads the leading integer of a year field. Missing, bad or 0 → current year."""
    fallback = (today or date.today()).year
    if value is None:
        return fallback

    match = _INTEGER_RE.match(str(value))
    if not match:
        return fallback
    year = int(match.group(0))
    return year or fallback


# -------------------------------------------------------------------------
# ROW NORMALIZATION
# -------------------------------------------------------------------------

def normalize(
    rows: pd.DataFrame | Iterable[Mapping[str, Any]],
    today: date | None = None,
) -> List[ExpenseRecord]:
    """
    Normalize raw rows into ExpenseRecords.

    Args:
        rows: DataFrame or iterable of dicts keyed by the CSV header names
            (Amount, Amount Paid To, Label, ToD, Date, Month, Year, Time,
            Mode, Notes). Missing columns are treated as blank.
        today: Date used for the date/year fallbacks. Defaults to the
            system date.

    Returns:
        One ExpenseRecord per row that has both an Amount and a Date.
    """
    cfg = get_ingestion_config()
    df = _prepare(rows, cfg["columns"])

    if df.empty:
        return []

    present = pd.Series(True, index=df.index)
    for col in cfg["required_columns"]:
        present &= df[col].str.strip() != ""
    kept = df[present]

    dropped = len(df) - len(kept)
    if dropped:
        logger.info(f"Dropped {dropped:,} rows missing {' or '.join(cfg['required_columns'])}.")

    default_category = cfg["default_category"]
    default_mode = cfg["default_payment_mode"]

    records = [
        ExpenseRecord(
            amount=parse_amount(row["Amount"]),
            payee=row["Amount Paid To"],
            category=row["Label"] or default_category,
            time_of_day=row["ToD"],
            date=parse_date(row["Date"], today),
            month=row["Month"],
            year=parse_year(row["Year"], today),
            time=row["Time"],
            payment_mode=row["Mode"] or default_mode,
            notes=row["Notes"],
        )
        for row in kept.to_dict("records")
    ]

    logger.info(f"Normalized {len(records):,} expense records.")
    return records


def _prepare(rows, columns: List[str]) -> pd.DataFrame:
    """Builds a string-typed frame with every expected column present."""
    if isinstance(rows, pd.DataFrame):
        df = rows.copy()
    else:
        df = pd.DataFrame(list(rows))

    for col in columns:
        if col not in df.columns:
            df[col] = ""

    df = df[columns].fillna("").astype(str)
    return df.reset_index(drop=True)

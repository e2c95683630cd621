"""
export.py
----------
Currency formatting and CSV export of ExpenseRecords.

The export writes the same column headers the loader reads, with Date as
dd/mm/yyyy and Amount as currency text in Indian digit grouping ("₹1,200",
"₹1,23,457"). Amounts lose their decimals on the way out, so an export is
for people, not for round-trips, although the normalizer can still read it
back.
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Sequence

import pandas as pd

from core.models import ExpenseRecord
from config.config_loader import get_export_config, get_ingestion_config


def _group_indian(digits: str) -> str:
    """Lakh/crore grouping: last three digits, then pairs. "1234567" → "12,34,567"."""
    if len(digits) <= 3:
        return digits
    head, tail = digits[:-3], digits[-3:]
    pairs = []
    while len(head) > 2:
        pairs.insert(0, head[-2:])
        head = head[:-2]
    pairs.insert(0, head)
    return ",".join(pairs) + "," + tail


def format_currency(amount: float) -> str:
    """Whole-unit rupee text in en-IN grouping: 123456.7 → "₹1,23,457", -200 → "-₹200"."""
    symbol = get_export_config()["currency_symbol"]
    rounded = int(Decimal(str(amount)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))
    sign = "-" if rounded < 0 else ""
    return f"{sign}{symbol}{_group_indian(str(abs(rounded)))}"


def records_to_frame(records: Sequence[ExpenseRecord]) -> pd.DataFrame:
    """ExpenseRecords as a display/export frame keyed by the CSV headers."""
    date_format = get_export_config()["date_format"]
    columns = get_ingestion_config()["columns"]

    rows = [
        {
            "Amount": format_currency(r.amount),
            "Amount Paid To": r.payee,
            "Label": r.category,
            "ToD": r.time_of_day,
            "Date": r.date.strftime(date_format),
            "Month": r.month,
            "Year": str(r.year),
            "Time": r.time,
            "Mode": r.payment_mode,
            "Notes": r.notes,
        }
        for r in records
    ]
    return pd.DataFrame(rows, columns=columns)


def export_to_csv(records: Sequence[ExpenseRecord]) -> str:
    """Serializes records to CSV text."""
    return records_to_frame(records).to_csv(index=False)

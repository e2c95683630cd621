"""
loader.py
----------
CSV transport for the expense batch.

Reads the source file with every column as text, checks the required
headers and hands the rows to the normalizer. This is the only layer that
can fail in a user-visible way; everything downstream degrades to empty
results instead of raising.
"""

import logging
import os
from typing import IO, List

import pandas as pd

from core.models import ExpenseRecord
from core.normalizer import normalize
from config.config_loader import get_ingestion_config

logger = logging.getLogger(__name__)


class ExpenseLoadError(Exception):
    """The expense file could not be found, read or parsed."""


def read_expense_csv(source: str | IO) -> pd.DataFrame:
    """
    Reads the raw expense CSV as an all-string DataFrame.

    Args:
        source: File path or file-like object (e.g. a Streamlit upload).

    Raises:
        ExpenseLoadError: Missing file, unreadable CSV or missing required columns.
    """
    if isinstance(source, str) and not os.path.exists(source):
        raise ExpenseLoadError(f"Expense data file not found: {source}")

    try:
        df = pd.read_csv(source, dtype=str, keep_default_na=False, skip_blank_lines=True)
    except (pd.errors.ParserError, pd.errors.EmptyDataError, UnicodeDecodeError, OSError) as exc:
        raise ExpenseLoadError(f"Failed to load expense data: {exc}") from exc

    required = get_ingestion_config()["required_columns"]
    missing = [c for c in required if c not in df.columns]
    if missing:
        raise ExpenseLoadError(f"Missing required columns: {missing}")

    return df


def load_expense_data(source: str | IO) -> List[ExpenseRecord]:
    """Reads and normalizes an expense CSV."""
    df = read_expense_csv(source)
    logger.info(f"Read {len(df):,} raw rows.")
    return normalize(df)

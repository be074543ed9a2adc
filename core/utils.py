from __future__ import annotations

import math
from typing import Any, Iterable, Optional

import pandas as pd


def require_columns(df: pd.DataFrame, cols: Iterable[str]) -> None:
    missing = [c for c in cols if c not in df.columns]
    if missing:
        raise ValueError(f"Missing required columns: {missing}")


def parse_amount(value: Any) -> Optional[float]:
    """Return value as a finite float, or None when it is not a usable number."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        amount = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(amount):
        return None
    return amount


def parse_flag(value: Any) -> bool:
    """Interpret a spreadsheet-style TRUE/FALSE cell."""
    if isinstance(value, bool):
        return value
    if value is None or (isinstance(value, float) and math.isnan(value)):
        return False
    return str(value).strip().upper() == "TRUE"

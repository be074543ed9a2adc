"""
Result projection — final per-project state as a flat table, and its writer.
"""

from __future__ import annotations

from pathlib import Path
from typing import Dict, Union

import pandas as pd

from core.schema import RESULT_COLUMNS, RESULT_HEADERS, ProjectAllocation


def _format_amount(amount: float) -> str:
    return str(int(amount)) if float(amount).is_integer() else repr(float(amount))


def _format_votes(amounts) -> str:
    return ",".join(_format_amount(a) for a in amounts)


def project_results(projects: Dict[str, ProjectAllocation]) -> pd.DataFrame:
    """
    One row per project, in the project mapping's order.

    Scaled Amount is 0 for ineligible and cut projects.
    """
    rows = [
        {
            "project_id": pid,
            "votes_array": _format_votes(p.pledge_amounts),
            "votes_count": p.pledge_count,
            "median_amount": p.median_amount,
            "is_eligible": p.is_eligible,
            "is_cut": p.is_cut,
            "scaled_amount": p.final_amount,
        }
        for pid, p in projects.items()
    ]
    return pd.DataFrame(rows, columns=list(RESULT_HEADERS)).rename(columns=RESULT_HEADERS)


def write_results(results: pd.DataFrame, path: Union[str, Path]) -> Path:
    """Write the results table as CSV, or as Excel when path ends in .xlsx."""
    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    if out.suffix.lower() == ".xlsx":
        results.loc[:, list(RESULT_COLUMNS)].to_excel(out, index=False, engine="openpyxl")
    else:
        results.loc[:, list(RESULT_COLUMNS)].to_csv(out, index=False)
    return out

from __future__ import annotations

from pathlib import Path
from typing import List, Union

import pandas as pd

from core.schema import PAYLOAD_COLUMN, VERIFIED_COLUMN, Ballot
from core.utils import parse_flag, require_columns

_EXCEL_SUFFIXES = {".xlsx", ".xlsm"}


def load_ballots_csv(path: Union[str, Path]) -> pd.DataFrame:
    """
    Load the verified-signature CSV. Every cell is kept as text so that
    payload JSON and TRUE/FALSE flags reach the parser untouched.
    """
    return pd.read_csv(path, dtype=str, keep_default_na=False)


def load_ballot_table(path: Union[str, Path]) -> pd.DataFrame:
    """Load ballots from CSV, or from the first sheet of an Excel workbook."""
    if Path(path).suffix.lower() in _EXCEL_SUFFIXES:
        return pd.read_excel(path, dtype=str, keep_default_na=False, engine="openpyxl")
    return load_ballots_csv(path)


def ballots_from_frame(df: pd.DataFrame) -> List[Ballot]:
    """Convert ballot rows to Ballot records; row_id is the 1-based data row."""
    require_columns(df, [VERIFIED_COLUMN, PAYLOAD_COLUMN])
    ballots: List[Ballot] = []
    for i, (flag, payload) in enumerate(zip(df[VERIFIED_COLUMN], df[PAYLOAD_COLUMN]), start=1):
        ballots.append(
            Ballot(
                verified=parse_flag(flag),
                signed_payload="" if payload is None else str(payload),
                row_id=i,
            )
        )
    return ballots

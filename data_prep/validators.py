"""
Data quality checks for a ballot table before it reaches the engine.

Catches problems early:
- Missing verification / payload columns
- Empty input
- Rows that will be ignored (unverified) or will abort the run (verified, no payload)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

import pandas as pd

from core.schema import BALLOT_COLUMNS, PAYLOAD_COLUMN, VERIFIED_COLUMN
from core.utils import parse_flag


@dataclass
class ValidationResult:
    """Collects all validation warnings/errors for a ballot table."""
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return len(self.errors) == 0

    def summary(self) -> str:
        lines = []
        if self.errors:
            lines.append(f"ERRORS ({len(self.errors)}):")
            for e in self.errors:
                lines.append(f"  ✗ {e}")
        if self.warnings:
            lines.append(f"WARNINGS ({len(self.warnings)}):")
            for w in self.warnings:
                lines.append(f"  ⚠ {w}")
        if not lines:
            lines.append("✓ All checks passed.")
        return "\n".join(lines)


def validate_ballot_table(
    ballots: pd.DataFrame,
    *,
    columns: tuple = BALLOT_COLUMNS,
) -> ValidationResult:
    """
    Run all checks on a ballot table.
    Returns a ValidationResult with errors (blocking) and warnings (informational).
    """
    result = ValidationResult()

    missing = [c for c in columns if c not in ballots.columns]
    if missing:
        result.errors.append(f"Missing required columns: {missing}")
        return result

    n = len(ballots)
    if n == 0:
        result.errors.append("Ballot table is empty (0 rows).")
        return result

    verified = ballots[VERIFIED_COLUMN].map(parse_flag).astype(bool)
    n_unverified = int((~verified).sum())
    if n_unverified == n:
        result.warnings.append("No ballot has a verified signature; nothing will be allocated.")
    elif n_unverified > 0:
        result.warnings.append(f"{n_unverified} of {n} ballots are unverified and will be ignored.")

    payload = ballots[PAYLOAD_COLUMN].fillna("").astype(str).str.strip()
    n_blank = int((verified & (payload == "")).sum())
    if n_blank > 0:
        result.errors.append(f"{n_blank} verified ballots have an empty signed payload.")

    return result

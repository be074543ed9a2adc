"""
Run summary — the numbers an operator checks before publishing an allocation.

  - How much of the pool went out, and to how many projects?
  - How many projects never reached quorum?
  - How many were cut, and over how many rounds?
  - Did the loop settle, and does the total match the pool?
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

import numpy as np
import pandas as pd

from core.config import AllocationConfig
from engine.runner import AllocationResult


@dataclass
class AllocationSummary:
    """Structured run summary."""
    total_amount: float
    min_amount: float
    quorum: int

    n_projects: int
    n_eligible: int
    n_funded: int
    n_cut: int
    iterations: int

    converged: bool
    degenerate: bool
    total_allocated: float
    invariant_ok: Optional[bool]

    smallest_funded: float
    largest_funded: float
    median_funded: float

    flags: List[str] = field(default_factory=list)

    def to_dataframe(self) -> pd.DataFrame:
        """Convert to a display-friendly table."""
        rows = [
            {"Metric": "Total Pool", "Value": f"{self.total_amount:,.2f}"},
            {"Metric": "Payout Floor", "Value": f"{self.min_amount:,.2f}"},
            {"Metric": "Quorum", "Value": str(self.quorum)},
            {"Metric": "Projects", "Value": str(self.n_projects)},
            {"Metric": "Eligible", "Value": str(self.n_eligible)},
            {"Metric": "Funded", "Value": str(self.n_funded)},
            {"Metric": "Cut", "Value": str(self.n_cut)},
            {"Metric": "Iterations", "Value": str(self.iterations)},
            {"Metric": "Converged", "Value": "yes" if self.converged else "no"},
            {"Metric": "Total Allocated", "Value": f"{self.total_allocated:,.2f}"},
            {"Metric": "Smallest Award", "Value": f"{self.smallest_funded:,.2f}"},
            {"Metric": "Median Award", "Value": f"{self.median_funded:,.2f}"},
            {"Metric": "Largest Award", "Value": f"{self.largest_funded:,.2f}"},
        ]
        if self.flags:
            rows.append({"Metric": "FLAGS", "Value": " | ".join(self.flags)})
        return pd.DataFrame(rows)


def summarize_allocation(result: AllocationResult, config: AllocationConfig) -> AllocationSummary:
    projects = list(result.projects.values())
    awards = np.array([p.scaled_amount for p in projects if p.is_funded], dtype=float)
    n_eligible = sum(1 for p in projects if p.is_eligible)
    n_cut = sum(1 for p in projects if p.is_cut)

    flags = []
    if result.degenerate:
        flags.append("NO_ELIGIBLE_PROJECTS: nothing left to fund, all awards are 0")
    if not result.converged and not result.degenerate:
        flags.append(f"NOT_CONVERGED: cut set still changing after {result.iterations} iterations")
    if result.invariant_ok is False:
        flags.append(
            f"TOTAL_MISMATCH: allocated {result.total_allocated:,.2f} of {config.total_amount:,.2f}"
        )
    if n_eligible > 0 and n_cut == n_eligible:
        flags.append("ALL_ELIGIBLE_CUT: every eligible project fell below the floor")

    has_awards = len(awards) > 0
    return AllocationSummary(
        total_amount=config.total_amount,
        min_amount=config.min_amount,
        quorum=config.quorum,
        n_projects=len(projects),
        n_eligible=n_eligible,
        n_funded=len(awards),
        n_cut=n_cut,
        iterations=result.iterations,
        converged=result.converged,
        degenerate=result.degenerate,
        total_allocated=result.total_allocated,
        invariant_ok=result.invariant_ok,
        smallest_funded=float(np.min(awards)) if has_awards else 0.0,
        largest_funded=float(np.max(awards)) if has_awards else 0.0,
        median_funded=float(np.median(awards)) if has_awards else 0.0,
        flags=flags,
    )

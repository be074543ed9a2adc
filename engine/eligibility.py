from __future__ import annotations

from typing import Dict, Sequence

import numpy as np

from core.schema import ProjectAllocation


def compute_median(values: Sequence[float]) -> float:
    """Standard median; 0.0 for an empty list. Even counts average the two middle values."""
    if len(values) == 0:
        return 0.0
    return float(np.median(np.asarray(values, dtype=float)))


def evaluate_eligibility(projects: Dict[str, ProjectAllocation], quorum: int) -> Dict[str, ProjectAllocation]:
    """
    Set median, eligibility and a fresh (uncut, unfunded) state on every project.
    Eligibility is final after this call.
    """
    for project in projects.values():
        project.median_amount = compute_median(project.pledge_amounts)
        project.is_eligible = project.pledge_count >= quorum
        project.is_cut = False
        project.scaled_amount = 0.0
    return projects

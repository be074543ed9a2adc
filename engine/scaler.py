from __future__ import annotations

import math
from typing import Dict, List

from core.errors import DegenerateScalingError
from core.schema import ProjectAllocation


def survivors(projects: Dict[str, ProjectAllocation]) -> List[str]:
    """Ids of projects still in the running: eligible and not cut."""
    return [pid for pid, p in projects.items() if p.is_eligible and not p.is_cut]


def scale_allocations(projects: Dict[str, ProjectAllocation], total_amount: float) -> float:
    """
    Rescale surviving medians so that they sum to total_amount.

    Only survivors are touched. Returns the scale factor applied.
    Raises DegenerateScalingError when there is nothing to scale against
    (no survivors, or their medians sum to zero).
    """
    ids = survivors(projects)
    total_median = sum(projects[pid].median_amount for pid in ids)
    if not ids or total_median == 0:
        raise DegenerateScalingError(
            f"Cannot scale {len(ids)} surviving projects: median total is {total_median}"
        )

    scale_factor = total_amount / total_median
    if not math.isfinite(scale_factor):
        raise DegenerateScalingError(f"Scale factor is not finite (median total {total_median})")

    for pid in ids:
        projects[pid].scaled_amount = projects[pid].median_amount * scale_factor
    return scale_factor

"""
Allocation engine — aggregation, median eligibility, proportional scaling, cutoff loop.
"""

from .aggregation import aggregate_pledges
from .eligibility import compute_median, evaluate_eligibility
from .scaler import scale_allocations, survivors
from .cutoff import CutNotice, CutoffOutcome, RoundRecord, mark_projects_for_cut, run_cutoff_loop
from .runner import AllocationResult, allocate_projects, check_total_allocated, run_allocation

__all__ = [
    "aggregate_pledges",
    "compute_median",
    "evaluate_eligibility",
    "scale_allocations",
    "survivors",
    "CutNotice",
    "CutoffOutcome",
    "RoundRecord",
    "mark_projects_for_cut",
    "run_cutoff_loop",
    "AllocationResult",
    "allocate_projects",
    "check_total_allocated",
    "run_allocation",
]

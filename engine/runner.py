"""
Allocation runner — ballots in, final per-project allocation out.

  1. aggregate_pledges       verified ballots -> per-project pledge lists
  2. evaluate_eligibility    median + quorum flag per project
  3. run_cutoff_loop         scale / cut rounds until the cut set is stable
  4. check_total_allocated   survivors must share exactly the whole pool
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Tuple

from core.config import AllocationConfig
from core.schema import Ballot, ProjectAllocation

from .aggregation import aggregate_pledges
from .cutoff import AcknowledgeFn, RoundRecord, run_cutoff_loop
from .eligibility import evaluate_eligibility

logger = logging.getLogger(__name__)


@dataclass
class AllocationResult:
    projects: Dict[str, ProjectAllocation]
    rounds: List[RoundRecord] = field(default_factory=list)
    converged: bool = False
    degenerate: bool = False
    total_allocated: float = 0.0
    # None when the check was not applicable (degenerate run)
    invariant_ok: Optional[bool] = None

    @property
    def iterations(self) -> int:
        return len(self.rounds)

    @property
    def funded(self) -> Dict[str, float]:
        return {pid: p.scaled_amount for pid, p in self.projects.items() if p.is_funded}

    @property
    def cut(self) -> List[str]:
        return [pid for pid, p in self.projects.items() if p.is_cut]


def check_total_allocated(
    projects: Dict[str, ProjectAllocation],
    total_amount: float,
    tolerance: float = 1e-6,
) -> Tuple[float, bool]:
    """Sum the funded projects' amounts and compare against the pool."""
    total = sum(p.scaled_amount for p in projects.values() if p.is_funded)
    ok = math.isclose(total, total_amount, rel_tol=1e-12, abs_tol=tolerance)
    return total, ok


def allocate_projects(
    projects: Dict[str, ProjectAllocation],
    config: AllocationConfig,
    acknowledge: Optional[AcknowledgeFn] = None,
) -> AllocationResult:
    """Evaluate, converge and check an already-aggregated project mapping in place."""
    evaluate_eligibility(projects, config.quorum)
    n_eligible = sum(1 for p in projects.values() if p.is_eligible)
    logger.info("%d of %d projects reached quorum %d", n_eligible, len(projects), config.quorum)

    outcome = run_cutoff_loop(projects, config, acknowledge)
    result = AllocationResult(
        projects=projects,
        rounds=outcome.rounds,
        converged=outcome.converged,
        degenerate=outcome.degenerate,
    )

    if outcome.degenerate:
        logger.warning("No funds allocated: no eligible project survived to be scaled")
        return result

    total, ok = check_total_allocated(projects, config.total_amount, config.tolerance)
    result.total_allocated = total
    result.invariant_ok = ok
    if ok:
        logger.info(
            "Total allocated amount (%s) equals TOTAL_AMOUNT (%s)", total, config.total_amount
        )
    else:
        logger.warning(
            "Total allocated amount (%s) does not equal TOTAL_AMOUNT (%s)", total, config.total_amount
        )
    return result


def run_allocation(
    ballots: Iterable[Ballot],
    config: AllocationConfig,
    acknowledge: Optional[AcknowledgeFn] = None,
) -> AllocationResult:
    """
    Run the whole allocation for one batch of ballots.

    Raises MalformedPledgePayload (before any state is published) if a
    verified ballot's payload cannot be parsed.
    """
    projects = aggregate_pledges(ballots)
    return allocate_projects(projects, config, acknowledge)

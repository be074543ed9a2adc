"""
Cutoff convergence loop.

Each round rescales the surviving projects to the full pool and cuts every
survivor whose share falls below the payout floor. Cutting shrinks the
denominator for everyone else, so a round that cuts something new is followed
by another round. The loop stops when a round cuts nothing new (fixed point)
or when the iteration cap is reached.

A cut is permanent: cut projects are never rescaled and are never re-affirmed,
so the cut set only grows from round to round.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, FrozenSet, List, Optional, Tuple

from core.config import AllocationConfig
from core.errors import DegenerateScalingError
from core.schema import ProjectAllocation

from .scaler import scale_allocations, survivors

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CutNotice:
    """Handed to the acknowledgment hook after a round that cuts a new project."""
    round_number: int
    cut_ids: Tuple[str, ...]        # every project cut so far
    newly_cut_ids: Tuple[str, ...]  # cut in this round only


@dataclass(frozen=True)
class RoundRecord:
    round_number: int
    survivors: Tuple[str, ...]      # projects scaled this round
    cut_ids: Tuple[str, ...]
    newly_cut_ids: Tuple[str, ...]
    scale_factor: float


@dataclass
class CutoffOutcome:
    rounds: List[RoundRecord] = field(default_factory=list)
    converged: bool = False
    degenerate: bool = False

    @property
    def iterations(self) -> int:
        return len(self.rounds)


# Blocks until the operator (or a test double) lets the loop continue.
AcknowledgeFn = Callable[[CutNotice], None]


def mark_projects_for_cut(projects: Dict[str, ProjectAllocation], min_amount: float) -> FrozenSet[str]:
    """
    Cut eligible survivors scaled below min_amount; re-affirm the rest.

    Already-cut projects stay cut at 0. Ineligible projects are never cut.
    Returns the ids of every cut project.
    """
    for project in projects.values():
        if not project.is_eligible:
            project.is_cut = False
            project.scaled_amount = 0.0
        elif project.is_cut or project.scaled_amount < min_amount:
            project.is_cut = True
            project.scaled_amount = 0.0
        else:
            project.is_cut = False
    return frozenset(pid for pid, p in projects.items() if p.is_cut)


def _ordered(projects: Dict[str, ProjectAllocation], ids: FrozenSet[str]) -> Tuple[str, ...]:
    return tuple(pid for pid in projects if pid in ids)


def run_cutoff_loop(
    projects: Dict[str, ProjectAllocation],
    config: AllocationConfig,
    acknowledge: Optional[AcknowledgeFn] = None,
) -> CutoffOutcome:
    """
    Scale and cut until the cut set is stable or config.max_iterations rounds ran.

    acknowledge is called once per round that cuts a new project, after that
    round's state is final; the loop does not continue until it returns.
    Degenerate scaling (nothing left to fund) ends the loop with every
    scaled amount at 0.
    """
    outcome = CutoffOutcome()
    previous: FrozenSet[str] = frozenset()

    for round_number in range(1, config.max_iterations + 1):
        round_survivors = tuple(survivors(projects))
        try:
            scale_factor = scale_allocations(projects, config.total_amount)
        except DegenerateScalingError as exc:
            logger.warning("Iteration %d: no eligible projects to fund (%s)", round_number, exc)
            for project in projects.values():
                project.scaled_amount = 0.0
            outcome.degenerate = True
            return outcome

        current = mark_projects_for_cut(projects, config.min_amount)
        newly_cut = current - previous
        record = RoundRecord(
            round_number=round_number,
            survivors=round_survivors,
            cut_ids=_ordered(projects, current),
            newly_cut_ids=_ordered(projects, newly_cut),
            scale_factor=scale_factor,
        )
        outcome.rounds.append(record)
        logger.debug(
            "Iteration %d: scaled %d projects with factor %.6g",
            round_number, len(round_survivors), scale_factor,
        )

        if not newly_cut:
            outcome.converged = True
            logger.info("Cut set stable after iteration %d (%d projects cut)", round_number, len(current))
            return outcome

        logger.info("Iteration %d, Projects for cut: %s", round_number, ", ".join(record.cut_ids))
        if acknowledge is not None:
            acknowledge(CutNotice(round_number, record.cut_ids, record.newly_cut_ids))
        previous = current

    logger.warning(
        "Cut set still changing after %d iterations; keeping the last round's allocation",
        config.max_iterations,
    )
    return outcome

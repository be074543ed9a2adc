"""Shared fixtures. Lives at the repo root so the flat packages import without installing."""

from __future__ import annotations

import json
from typing import Dict, Iterable, List, Tuple

import pytest

from core.config import AllocationConfig
from core.schema import Ballot, ProjectAllocation


def _ballot(pledges: Iterable[Tuple[str, object]], *, verified: bool = True, row_id=None) -> Ballot:
    payload = json.dumps([{"projectId": pid, "amount": amount} for pid, amount in pledges])
    return Ballot(verified=verified, signed_payload=payload, row_id=row_id)


@pytest.fixture
def make_ballot():
    """Factory: make_ballot([("p1", "100"), ("p2", 250)], verified=True)."""
    return _ballot


@pytest.fixture
def make_projects():
    """Factory: evaluated projects from {project_id: median}, all eligible unless listed."""

    def _make(medians: Dict[str, float], *, ineligible: Iterable[str] = ()) -> Dict[str, ProjectAllocation]:
        skip = set(ineligible)
        return {
            pid: ProjectAllocation(
                pledge_amounts=[m],
                pledge_count=1,
                median_amount=m,
                is_eligible=pid not in skip,
            )
            for pid, m in medians.items()
        }

    return _make


@pytest.fixture
def small_config() -> AllocationConfig:
    return AllocationConfig(quorum=3, min_amount=500.0, total_amount=10_000.0, max_iterations=10)


@pytest.fixture
def notices() -> List:
    return []

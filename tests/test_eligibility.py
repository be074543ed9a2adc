"""Median and quorum evaluation."""

from __future__ import annotations

import pytest

from core.schema import ProjectAllocation
from engine.eligibility import compute_median, evaluate_eligibility


@pytest.mark.parametrize(
    "values, expected",
    [
        ([1, 2, 3], 2.0),
        ([1, 2, 3, 4], 2.5),
        ([], 0.0),
        ([7], 7.0),
        ([300, 100, 200], 200.0),
        ([10, 10, 10, 1_000_000], 10.0),
    ],
)
def test_compute_median(values, expected) -> None:
    assert compute_median(values) == pytest.approx(expected)


def test_median_does_not_reorder_input() -> None:
    values = [3.0, 1.0, 2.0]
    compute_median(values)
    assert values == [3.0, 1.0, 2.0]


def _with_pledges(n: int) -> ProjectAllocation:
    project = ProjectAllocation()
    for i in range(n):
        project.add_pledge(float(100 + i))
    return project


def test_quorum_boundary() -> None:
    projects = {"exact": _with_pledges(17), "short": _with_pledges(16)}
    evaluate_eligibility(projects, quorum=17)
    assert projects["exact"].is_eligible is True
    assert projects["short"].is_eligible is False


def test_evaluation_resets_round_state() -> None:
    project = _with_pledges(3)
    project.is_cut = True
    project.scaled_amount = 123.0
    evaluate_eligibility({"p": project}, quorum=1)
    assert project.median_amount == 101.0
    assert project.is_cut is False
    assert project.scaled_amount == 0.0


def test_ineligible_projects_start_uncut() -> None:
    projects = {"p": _with_pledges(1)}
    evaluate_eligibility(projects, quorum=5)
    assert projects["p"].is_eligible is False
    assert projects["p"].is_cut is False

"""Ballot aggregation into per-project pledge lists."""

from __future__ import annotations

import pytest

from core.errors import MalformedPledgePayload
from core.schema import Ballot
from engine.aggregation import aggregate_pledges


def test_groups_pledges_by_project(make_ballot) -> None:
    projects = aggregate_pledges([
        make_ballot([("p1", "100"), ("p2", "200")]),
        make_ballot([("p1", "300")]),
    ])
    assert list(projects) == ["p1", "p2"]
    assert projects["p1"].pledge_amounts == [100.0, 300.0]
    assert projects["p1"].pledge_count == 2
    assert projects["p2"].pledge_count == 1


def test_unverified_ballots_are_ignored(make_ballot) -> None:
    projects = aggregate_pledges([
        make_ballot([("p1", "100")]),
        make_ballot([("p1", "999"), ("p9", "5")], verified=False),
    ])
    assert list(projects) == ["p1"]
    assert projects["p1"].pledge_amounts == [100.0]


def test_unverified_malformed_payload_does_not_fail(make_ballot) -> None:
    projects = aggregate_pledges([
        Ballot(verified=False, signed_payload="{{{"),
        make_ballot([("p1", "100")]),
    ])
    assert projects["p1"].pledge_count == 1


def test_non_numeric_pledge_does_not_count(make_ballot) -> None:
    projects = aggregate_pledges([
        make_ballot([("p1", "abc"), ("p1", "50"), ("p2", "10")]),
    ])
    assert projects["p1"].pledge_amounts == [50.0]
    assert projects["p1"].pledge_count == 1
    assert projects["p2"].pledge_count == 1


def test_project_with_only_bad_amounts_is_not_created(make_ballot) -> None:
    projects = aggregate_pledges([make_ballot([("p1", "abc"), ("p2", "10")])])
    assert "p1" not in projects


def test_malformed_verified_payload_aborts(make_ballot) -> None:
    with pytest.raises(MalformedPledgePayload):
        aggregate_pledges([
            make_ballot([("p1", "100")]),
            Ballot(verified=True, signed_payload="not json", row_id=2),
        ])


def test_aggregation_is_order_independent(make_ballot) -> None:
    ballots = [
        make_ballot([("p1", "100"), ("p2", "200")]),
        make_ballot([("p2", "50")]),
        make_ballot([("p1", "7")]),
    ]
    forward = aggregate_pledges(ballots)
    backward = aggregate_pledges(list(reversed(ballots)))
    assert set(forward) == set(backward)
    for pid in forward:
        assert sorted(forward[pid].pledge_amounts) == sorted(backward[pid].pledge_amounts)
        assert forward[pid].pledge_count == backward[pid].pledge_count

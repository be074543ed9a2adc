"""
Ballot aggregation — verified ballots in, per-project pledge lists out.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable

from core.schema import Ballot, ProjectAllocation
from data_prep.payload import parse_signed_payload

logger = logging.getLogger(__name__)


def aggregate_pledges(ballots: Iterable[Ballot]) -> Dict[str, ProjectAllocation]:
    """
    Group every numeric pledge of every verified ballot by project id.

    Unverified ballots are ignored. A malformed payload on a verified ballot
    raises MalformedPledgePayload and nothing is returned. Projects appear in
    the order their first valid pledge is seen.
    """
    projects: Dict[str, ProjectAllocation] = {}
    n_used = n_ignored = n_pledges = n_skipped = 0

    for ballot in ballots:
        if not ballot.verified:
            n_ignored += 1
            continue

        pledges, skipped = parse_signed_payload(ballot.signed_payload, row_id=ballot.row_id)
        n_used += 1
        n_skipped += skipped

        for pledge in pledges:
            project = projects.get(pledge.project_id)
            if project is None:
                project = projects[pledge.project_id] = ProjectAllocation()
            project.add_pledge(pledge.amount)
            n_pledges += 1

    logger.info(
        "Aggregated %d pledges for %d projects from %d verified ballots "
        "(%d unverified ignored, %d non-numeric pledges skipped)",
        n_pledges, len(projects), n_used, n_ignored, n_skipped,
    )
    return projects

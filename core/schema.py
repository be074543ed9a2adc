from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

# Columns the upstream signature-verification step writes for every ballot.
VERIFIED_COLUMN = "verified_signature"
PAYLOAD_COLUMN = "signed_payload"
BALLOT_COLUMNS: Tuple[str, ...] = (VERIFIED_COLUMN, PAYLOAD_COLUMN)

# Output record fields -> column titles of the results file.
RESULT_HEADERS: Dict[str, str] = {
    "project_id": "Project ID",
    "votes_array": "Votes Array",
    "votes_count": "Votes Count",
    "median_amount": "Median Amount",
    "is_eligible": "Is Eligible",
    "is_cut": "Is Cut",
    "scaled_amount": "Scaled Amount",
}
RESULT_COLUMNS: Tuple[str, ...] = tuple(RESULT_HEADERS.values())


@dataclass(frozen=True)
class Ballot:
    """One input row. signed_payload is the serialized pledge array."""
    verified: bool
    signed_payload: str
    row_id: Optional[int] = None


@dataclass(frozen=True)
class Pledge:
    project_id: str
    amount: float


@dataclass
class ProjectAllocation:
    """
    Per-project allocation state.

    pledge_amounts / pledge_count are filled by aggregation.
    median_amount / is_eligible are fixed once evaluated.
    is_cut / scaled_amount are rewritten by every cutoff round.
    """
    pledge_amounts: List[float] = field(default_factory=list)
    pledge_count: int = 0
    median_amount: float = 0.0
    is_eligible: bool = False
    is_cut: bool = False
    scaled_amount: float = 0.0

    def add_pledge(self, amount: float) -> None:
        self.pledge_amounts.append(amount)
        self.pledge_count += 1

    @property
    def is_funded(self) -> bool:
        return self.is_eligible and not self.is_cut

    @property
    def final_amount(self) -> float:
        return self.scaled_amount if self.is_funded else 0.0

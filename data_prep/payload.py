"""
Signed payload parsing.

A payload is a JSON array of pledge objects:
    [{"projectId": "0xabc...", "amount": "2500"}, ...]

Structural problems (bad JSON, not an array, item without projectId) make the
whole payload unusable. A bad amount only drops that one pledge.
"""

from __future__ import annotations

import logging
from typing import Any, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from core.errors import MalformedPledgePayload
from core.schema import Pledge
from core.utils import parse_amount

logger = logging.getLogger(__name__)


class PledgeItem(BaseModel):
    """Raw pledge object as it appears in the signed payload."""
    model_config = ConfigDict(populate_by_name=True, coerce_numbers_to_str=True, extra="ignore")

    project_id: str = Field(alias="projectId", min_length=1)
    amount: Any = None


_PAYLOAD_ADAPTER = TypeAdapter(List[PledgeItem])


def parse_signed_payload(payload: str, *, row_id: Optional[int] = None) -> Tuple[List[Pledge], int]:
    """
    Parse one serialized payload.

    Returns (pledges, n_skipped) where n_skipped counts pledges dropped for a
    non-numeric amount. Raises MalformedPledgePayload for anything structural.
    """
    if not isinstance(payload, (str, bytes)) or not payload.strip():
        raise MalformedPledgePayload("payload is empty", row_id=row_id)

    try:
        items = _PAYLOAD_ADAPTER.validate_json(payload)
    except ValidationError as exc:
        first = exc.errors()[0]
        raise MalformedPledgePayload(first.get("msg", str(exc)), row_id=row_id) from exc

    pledges: List[Pledge] = []
    skipped = 0
    for item in items:
        amount = parse_amount(item.amount)
        if amount is None:
            skipped += 1
            logger.debug(
                "Skipping pledge for %s with non-numeric amount %r (row %s)",
                item.project_id, item.amount, row_id,
            )
            continue
        pledges.append(Pledge(project_id=item.project_id, amount=amount))
    return pledges, skipped

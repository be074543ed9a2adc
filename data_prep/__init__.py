"""
Data preparation — loading ballot files, validating them, parsing signed payloads.
"""

from .loader import load_ballots_csv, load_ballot_table, ballots_from_frame
from .payload import PledgeItem, parse_signed_payload
from .validators import ValidationResult, validate_ballot_table

__all__ = [
    "load_ballots_csv",
    "load_ballot_table",
    "ballots_from_frame",
    "PledgeItem",
    "parse_signed_payload",
    "ValidationResult",
    "validate_ballot_table",
]

"""
Reporting — result projection, output files and the run summary.
"""

from .projection import project_results, write_results
from .summary import AllocationSummary, summarize_allocation

__all__ = [
    "project_results",
    "write_results",
    "AllocationSummary",
    "summarize_allocation",
]

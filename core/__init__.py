"""
Core package — data types, configuration, error taxonomy and shared helpers.
No allocation logic lives here.
"""

from .schema import (
    BALLOT_COLUMNS,
    RESULT_COLUMNS,
    Ballot,
    Pledge,
    ProjectAllocation,
)
from .config import AllocationConfig, load_config
from .errors import (
    AllocationError,
    ConfigError,
    DegenerateScalingError,
    MalformedPledgePayload,
)
from .utils import require_columns, parse_amount, parse_flag

__all__ = [
    "BALLOT_COLUMNS",
    "RESULT_COLUMNS",
    "Ballot",
    "Pledge",
    "ProjectAllocation",
    "AllocationConfig",
    "load_config",
    "AllocationError",
    "ConfigError",
    "DegenerateScalingError",
    "MalformedPledgePayload",
    "require_columns",
    "parse_amount",
    "parse_flag",
]

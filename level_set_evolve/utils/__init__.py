"""
Utility modules for level_set_evolve: exceptions and logging.
"""

from .evolve_logging import configure_logging, get_logger
from .exceptions import (
    AllocationError,
    InvalidParameterError,
    LevelSetEvolutionError,
    RegionMismatchError,
    UpdateStepError,
)

__all__ = [
    "AllocationError",
    "InvalidParameterError",
    "LevelSetEvolutionError",
    "RegionMismatchError",
    "UpdateStepError",
    "configure_logging",
    "get_logger",
]

"""
Run parameter configuration for level set evolution.

Configurations specify HOW an evolution run proceeds (time step, iteration
count, narrow banding), not WHAT is evolved (that is the update step and the
input level set).

Clamping
--------
``time_step_size`` and ``narrow_bandwidth`` are clamped into
``[0, sys.float_info.max]`` whenever they are set, at construction and on every
later assignment (``validate_assignment=True``). Negative values become 0.
"""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

if TYPE_CHECKING:
    from pathlib import Path

#: Largest representable time step or bandwidth
MAX_CLAMP_VALUE = sys.float_info.max


def clamp_non_negative(value: float) -> float:
    """Clamp ``value`` into ``[0, MAX_CLAMP_VALUE]``."""
    if value != value:  # NaN
        return 0.0
    return min(max(value, 0.0), MAX_CLAMP_VALUE)


class LoggingConfig(BaseModel):
    """
    Configuration for harness logging and progress reporting.

    Attributes
    ----------
    level : Literal["DEBUG", "INFO", "WARNING", "ERROR"] | None
        Logging level applied to the evolution loggers at the start of a run
        (default: None, keep the global logging configuration). The level is
        set process-wide through ``set_logging_level`` and stays in effect
        after the run ends.
    show_progress : bool
        Show a progress bar over iterations (default: False)
    """

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] | None = None
    show_progress: bool = False


class EvolutionConfig(BaseModel):
    """
    Run parameters of an evolution.

    Attributes
    ----------
    time_step_size : float
        Evolution time step (default: 0.5). Should be chosen so the update
        step satisfies its CFL condition; only non-negativity is enforced.
    narrow_banding : bool
        Restrict the update step to the narrow band (default: False)
    narrow_bandwidth : float
        Bandwidth used by update steps that rebuild their band (default: 12.0).
        Passed through; the harness does not filter nodes by it.
    number_of_iterations : int
        Number of update steps per run (default: 10). Zero is an identity run.
    logging : LoggingConfig
        Logging configuration

    Examples
    --------
    >>> config = EvolutionConfig(time_step_size=0.25, number_of_iterations=40)
    >>> config.time_step_size = -1.0
    >>> config.time_step_size
    0.0

    >>> # From YAML file
    >>> config = EvolutionConfig.from_yaml("runs/curvature_flow.yaml")
    """

    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    time_step_size: float = 0.5
    narrow_banding: bool = False
    narrow_bandwidth: float = 12.0
    number_of_iterations: int = Field(default=10, ge=0)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @field_validator("time_step_size", "narrow_bandwidth")
    @classmethod
    def clamp_to_valid_range(cls, value: float) -> float:
        """Raise negative values to 0 and cap at the representable maximum."""
        return clamp_non_negative(value)

    def to_yaml(self, path: str | Path) -> None:
        """
        Save configuration to YAML file.

        Parameters
        ----------
        path : str | Path
            Output file path
        """
        from .io import save_evolution_config

        save_evolution_config(self, path)

    @classmethod
    def from_yaml(cls, path: str | Path) -> EvolutionConfig:
        """
        Load configuration from YAML file.

        Parameters
        ----------
        path : str | Path
            Path to YAML configuration file

        Returns
        -------
        EvolutionConfig
            Validated configuration
        """
        from .io import load_evolution_config

        return load_evolution_config(path)

    def summary(self) -> dict[str, float | int | bool]:
        """Run parameters as a flat dictionary (for logging)."""
        return {
            "time_step_size": self.time_step_size,
            "narrow_banding": self.narrow_banding,
            "narrow_bandwidth": self.narrow_bandwidth,
            "number_of_iterations": self.number_of_iterations,
        }

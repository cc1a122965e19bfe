"""
Result record of a completed evolution run.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from level_set_evolve.core.field import LevelSetImage
    from level_set_evolve.core.region import ImageRegion


@dataclass
class EvolutionResult:
    """
    Summary of a completed evolution run.

    Attributes:
        output: Image the final buffer was copied into
        iterations: Number of update steps performed
        time_step_size: Time step used for every iteration
        narrow_banding: Whether the run was restricted to the narrow band
        narrow_band_size: Size of the live band at the end of the run (0 if disabled)
        region: Region the internal buffers covered
        execution_time: Wall-clock duration of the run in seconds
        metadata: Additional update-step specific information
    """

    output: LevelSetImage
    iterations: int
    time_step_size: float
    narrow_banding: bool
    narrow_band_size: int
    region: ImageRegion
    execution_time: float
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def final_time(self) -> float:
        """Evolution time reached: iterations * time_step_size."""
        return self.iterations * self.time_step_size

    def summary(self) -> str:
        band = f", narrow band {self.narrow_band_size} nodes" if self.narrow_banding else ""
        return (
            f"{self.iterations} iterations, dt={self.time_step_size:g}, t={self.final_time:g}"
            f"{band}, region {self.region}, {self.execution_time:.3f}s"
        )

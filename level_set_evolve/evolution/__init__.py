"""
Iterative level set evolution infrastructure.

Core Components:
- EvolveLevelSet: Double-buffered iteration harness with narrow banding
- LevelSetUpdateStep: Protocol for the per-iteration update rule
- BufferPair: Input/output buffers with O(1) swap
- NarrowBandSet: Input and live narrow band
- RegionNegotiator: Two-phase region negotiation with the pipeline

Architecture Pattern:
    Pipeline requests output region
        -> RegionNegotiator picks the buffer region (default: full extent)
        -> BufferPair allocates and copies in
        -> update step runs N times, buffers swapped in between
        -> BufferPair copies out

Concrete evolution algorithms (curvature flow, shape detection, ...) supply the
update step; everything else lives here.
"""

from level_set_evolve.evolution.base import EvolveLevelSet, LevelSetUpdateStep
from level_set_evolve.evolution.buffers import BufferPair
from level_set_evolve.evolution.narrow_band import NarrowBandSet
from level_set_evolve.evolution.region_negotiation import (
    LargestPossibleRegionNegotiator,
    PaddedRegionNegotiator,
    RegionNegotiator,
    negotiate,
)
from level_set_evolve.evolution.result import EvolutionResult

__all__ = [
    "BufferPair",
    "EvolutionResult",
    "EvolveLevelSet",
    "LargestPossibleRegionNegotiator",
    "LevelSetUpdateStep",
    "NarrowBandSet",
    "PaddedRegionNegotiator",
    "RegionNegotiator",
    "negotiate",
]

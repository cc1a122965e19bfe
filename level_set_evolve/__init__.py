from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("level_set_evolve")  # Matches the name in pyproject.toml
except PackageNotFoundError:
    # package is not installed
    __version__ = "0.0.0-dev"

from .config import EvolutionConfig, LoggingConfig, load_evolution_config, save_evolution_config
from .core import ImageRegion, LevelSetImage, LevelSetNode, NodeContainer, extract_narrow_band
from .evolution import (
    BufferPair,
    EvolutionResult,
    EvolveLevelSet,
    LargestPossibleRegionNegotiator,
    LevelSetUpdateStep,
    NarrowBandSet,
    PaddedRegionNegotiator,
    RegionNegotiator,
)
from .utils import (
    AllocationError,
    InvalidParameterError,
    LevelSetEvolutionError,
    RegionMismatchError,
    UpdateStepError,
    configure_logging,
    get_logger,
)

__all__ = [
    "AllocationError",
    "BufferPair",
    "EvolutionConfig",
    "EvolutionResult",
    "EvolveLevelSet",
    "ImageRegion",
    "InvalidParameterError",
    "LargestPossibleRegionNegotiator",
    "LevelSetEvolutionError",
    "LevelSetImage",
    "LevelSetNode",
    "LevelSetUpdateStep",
    "LoggingConfig",
    "NarrowBandSet",
    "NodeContainer",
    "PaddedRegionNegotiator",
    "RegionMismatchError",
    "RegionNegotiator",
    "UpdateStepError",
    "__version__",
    "configure_logging",
    "extract_narrow_band",
    "get_logger",
    "load_evolution_config",
    "save_evolution_config",
]

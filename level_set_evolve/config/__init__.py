"""
Configuration management for level set evolution runs.

Quick Start
-----------
>>> from level_set_evolve.config import EvolutionConfig
>>> config = EvolutionConfig(time_step_size=0.25, narrow_banding=True)

>>> # Or load from YAML
>>> from level_set_evolve.config import load_evolution_config
>>> config = load_evolution_config("runs/baseline.yaml")
"""

from .core import MAX_CLAMP_VALUE, EvolutionConfig, LoggingConfig, clamp_non_negative
from .io import load_evolution_config, save_evolution_config, validate_yaml_config

__all__ = [
    "MAX_CLAMP_VALUE",
    "EvolutionConfig",
    "LoggingConfig",
    "clamp_non_negative",
    "load_evolution_config",
    "save_evolution_config",
    "validate_yaml_config",
]

"""
YAML I/O for evolution configurations.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import yaml
from pydantic import ValidationError

if TYPE_CHECKING:
    from .core import EvolutionConfig


def load_evolution_config(path: str | Path) -> EvolutionConfig:
    """
    Load an evolution configuration from a YAML file.

    Parameters
    ----------
    path : str | Path
        Path to YAML configuration file

    Returns
    -------
    EvolutionConfig
        Validated configuration (negative time step / bandwidth clamped to 0)

    Raises
    ------
    FileNotFoundError
        If configuration file doesn't exist
    ValueError
        If the YAML is malformed or a value is invalid

    YAML Format
    -----------
    time_step_size: 0.125
    narrow_banding: true
    narrow_bandwidth: 4.0
    number_of_iterations: 50
    logging:
      level: DEBUG
    """
    from .core import EvolutionConfig

    path = Path(path)

    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {path}")

    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML syntax in {path}: {e}") from e

    if data is None:
        data = {}

    try:
        return EvolutionConfig.model_validate(data)
    except ValidationError as e:
        raise ValueError(f"Invalid configuration in {path}:\n{e}") from e


def save_evolution_config(config: EvolutionConfig, path: str | Path) -> None:
    """
    Save an evolution configuration to a YAML file.

    Parameters
    ----------
    config : EvolutionConfig
        Configuration to save
    path : str | Path
        Output file path (parent directories are created)
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    config_dict = config.model_dump(exclude_none=True, mode="json")

    with open(path, "w") as f:
        yaml.dump(config_dict, f, default_flow_style=False, sort_keys=False, indent=2)


def validate_yaml_config(path: str | Path) -> tuple[bool, str]:
    """
    Validate a YAML configuration file.

    Returns
    -------
    tuple[bool, str]
        (is_valid, message)
    """
    try:
        load_evolution_config(path)
        return True, "Configuration is valid"
    except (FileNotFoundError, ValueError) as e:
        return False, str(e)

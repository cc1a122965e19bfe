"""
Logging utilities for level_set_evolve.

Usage:
    >>> from level_set_evolve.utils.evolve_logging import get_logger, configure_logging
    >>> logger = get_logger(__name__)
    >>> configure_logging(level="DEBUG")
    >>> logger.info("Starting evolution...")
"""

from __future__ import annotations

from .logger import (
    EvolveFormatter,
    EvolveLogger,
    LoggedOperation,
    configure_logging,
    get_logger,
    log_iteration_progress,
    log_run_completion,
    log_run_start,
    log_validation_error,
    set_logging_level,
)

__all__ = [
    "EvolveFormatter",
    "EvolveLogger",
    "LoggedOperation",
    "configure_logging",
    "get_logger",
    "log_iteration_progress",
    "log_run_completion",
    "log_run_start",
    "log_validation_error",
    "set_logging_level",
]

#!/usr/bin/env python3
"""
Logging Infrastructure for level_set_evolve

Provides structured logging with configurable levels, formatting, and color
support for following long evolution runs.
"""

from __future__ import annotations

import logging
import sys
import threading
import time
from datetime import datetime
from pathlib import Path
from typing import Any, ClassVar

import colorlog


class EvolveFormatter(logging.Formatter):
    """Custom formatter for level_set_evolve logging."""

    def __init__(self, use_colors: bool = False, include_location: bool = False):
        self.use_colors = use_colors
        self.include_location = include_location

        format_str = "%(asctime)s - %(name)-20s - %(levelname)-8s - %(message)s"
        if self.include_location:
            format_str += " [%(filename)s:%(lineno)d]"

        if self.use_colors:
            self.colored_formatter = colorlog.ColoredFormatter(
                "%(log_color)s" + format_str,
                datefmt="%Y-%m-%d %H:%M:%S",
                log_colors={
                    "DEBUG": "cyan",
                    "INFO": "green",
                    "WARNING": "yellow",
                    "ERROR": "red",
                    "CRITICAL": "red,bg_white",
                },
            )

        super().__init__(format_str, datefmt="%Y-%m-%d %H:%M:%S")

    def format(self, record):
        if self.use_colors:
            return self.colored_formatter.format(record)
        else:
            return super().format(record)


class EvolveLogger:
    """
    Central logging manager for level_set_evolve.

    Thread Safety:
        Logger creation uses double-check locking so concurrent calls to
        get_logger() never attach duplicate handlers.

    Singleton Pattern:
        Uses __new__ to ensure only one instance manages global configuration.
    """

    _instance = None
    _lock: ClassVar[threading.Lock] = threading.Lock()
    _loggers: ClassVar[dict[str, logging.Logger]] = {}
    _log_level = logging.INFO
    _log_to_file = False
    _log_file_path: Path | None = None
    _use_colors = True
    _include_location = False

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    @classmethod
    def configure(
        cls,
        level: str | int = "INFO",
        log_to_file: bool = False,
        log_file_path: str | Path | None = None,
        use_colors: bool = True,
        include_location: bool = False,
    ):
        """
        Configure global logging settings.

        Args:
            level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
            log_to_file: Whether to log to file
            log_file_path: Path to log file (optional)
            use_colors: Use colored terminal output
            include_location: Include file location in log messages
        """
        with cls._lock:
            if isinstance(level, str):
                cls._log_level = getattr(logging, level.upper())
            else:
                cls._log_level = level

            cls._log_to_file = log_to_file
            cls._use_colors = use_colors
            cls._include_location = include_location

            if log_to_file:
                if log_file_path is None:
                    log_dir = Path.cwd() / "logs"
                    log_dir.mkdir(exist_ok=True)
                    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
                    cls._log_file_path = log_dir / f"level_set_evolve_{timestamp}.log"
                else:
                    cls._log_file_path = Path(log_file_path)
                    cls._log_file_path.parent.mkdir(parents=True, exist_ok=True)

            # Update existing loggers
            for logger in cls._loggers.values():
                cls._setup_logger(logger)

    @classmethod
    def get_logger(cls, name: str) -> logging.Logger:
        """
        Get or create a logger for the specified module/component.

        Args:
            name: Logger name (typically __name__ from calling module)

        Returns:
            Configured logger instance
        """
        # Fast path: cached logger
        if name in cls._loggers:
            return cls._loggers[name]

        with cls._lock:
            if name not in cls._loggers:
                logger = logging.getLogger(name)

                # Loggers configured externally keep their handlers
                if not logger.handlers:
                    cls._setup_logger(logger)

                cls._loggers[name] = logger

        return cls._loggers[name]

    @classmethod
    def _setup_logger(cls, logger: logging.Logger):
        """Configure individual logger with current settings."""
        for handler in list(logger.handlers):
            handler.close()
        logger.handlers.clear()
        logger.setLevel(cls._log_level)

        formatter = EvolveFormatter(use_colors=cls._use_colors, include_location=cls._include_location)

        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(formatter)
        console_handler.setLevel(cls._log_level)
        logger.addHandler(console_handler)

        if cls._log_to_file and cls._log_file_path:
            file_handler = logging.FileHandler(cls._log_file_path)
            # File logs never carry color codes
            file_handler.setFormatter(EvolveFormatter(use_colors=False, include_location=cls._include_location))
            file_handler.setLevel(cls._log_level)
            logger.addHandler(file_handler)

        # Prevent propagation to root logger
        logger.propagate = False


def get_logger(name: str | None = None) -> logging.Logger:
    """
    Get a logger for the current module.

    Args:
        name: Logger name (if None, uses calling module name)

    Returns:
        Configured logger instance
    """
    if name is None:
        import inspect

        frame = inspect.currentframe()
        if frame and frame.f_back:
            name = frame.f_back.f_globals.get("__name__", "level_set_evolve")
        else:
            name = "level_set_evolve"

    return EvolveLogger.get_logger(name)


def configure_logging(**kwargs):
    """
    Configure global logging settings.

    Keyword Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_to_file: Whether to log to file
        log_file_path: Path to log file
        use_colors: Use colored terminal output
        include_location: Include file location in messages
    """
    EvolveLogger.configure(**kwargs)


def set_logging_level(level: str | int, prefix: str = "level_set_evolve"):
    """
    Change the level of every managed logger whose name starts with ``prefix``.

    Unlike configure_logging(), handlers and output destinations are kept.
    """
    if isinstance(level, str):
        level = getattr(logging, level.upper())
    with EvolveLogger._lock:
        for name, logger in EvolveLogger._loggers.items():
            if name.startswith(prefix):
                logger.setLevel(level)
                for handler in logger.handlers:
                    handler.setLevel(level)


def log_run_start(logger: logging.Logger, component: str, config: dict[str, Any]):
    """Log the parameters an evolution run starts with."""
    logger.info(f"Starting {component}")
    for key, value in config.items():
        logger.debug(f"  {key}: {value}")


def log_iteration_progress(
    logger: logging.Logger,
    iteration: int,
    number_of_iterations: int,
    additional_info: dict[str, Any] | None = None,
):
    """Log progress of a single iteration."""
    progress_pct = (iteration / number_of_iterations) * 100 if number_of_iterations else 100.0
    msg = f"Iteration {iteration}/{number_of_iterations} ({progress_pct:.1f}%)"

    if additional_info:
        info_str = ", ".join(f"{k}: {v}" for k, v in additional_info.items())
        msg += f" - {info_str}"

    logger.debug(msg)


def log_run_completion(
    logger: logging.Logger,
    component: str,
    iterations: int,
    execution_time: float,
    narrow_band_size: int = 0,
):
    """Log completion of an evolution run."""
    msg = f"{component} completed - {iterations} iterations in {execution_time:.3f}s"
    if narrow_band_size:
        msg += f" (narrow band: {narrow_band_size} nodes)"
    logger.info(msg)


def log_validation_error(logger: logging.Logger, component: str, error_msg: str, suggestion: str | None = None):
    """Log validation errors with suggestions."""
    logger.error(f"Validation error in {component}: {error_msg}")
    if suggestion:
        logger.info(f"Suggestion: {suggestion}")


class LoggedOperation:
    """Context manager for logging timed operations."""

    def __init__(self, logger: logging.Logger, operation_name: str, log_level: int = logging.INFO):
        self.logger = logger
        self.operation_name = operation_name
        self.log_level = log_level
        self.start_time: float | None = None
        self.duration: float | None = None

    def __enter__(self):
        self.logger.log(self.log_level, f"Starting {self.operation_name}")
        self.start_time = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.duration = time.perf_counter() - (self.start_time or 0)

        if exc_type is None:
            self.logger.log(self.log_level, f"Completed {self.operation_name} in {self.duration:.3f}s")
        else:
            self.logger.error(f"Failed {self.operation_name} after {self.duration:.3f}s: {exc_val}")

        return False  # Don't suppress exceptions

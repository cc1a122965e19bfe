"""
Iteration harness for level set evolution.

EvolveLevelSet drives an explicit time-stepping loop over a level set image:

    copy input -> buffers
    for i in range(number_of_iterations):
        update_step.perform_one_iteration(input_buffer, output_buffer, dt, working_set)
        swap buffers (except after the last iteration)
    copy output buffer -> output image

The numerical update rule is supplied by a LevelSetUpdateStep; the harness
owns buffering, narrow-band bookkeeping, parameter validation, and region
negotiation with the surrounding pipeline.

Iterations are strictly sequential: iteration i + 1 reads the complete output
of iteration i. Parallelism, if any, belongs inside the update step.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

import numpy as np
from pydantic import ValidationError
from rich.progress import track

from level_set_evolve.config.core import MAX_CLAMP_VALUE, EvolutionConfig
from level_set_evolve.core.field import LevelSetImage
from level_set_evolve.evolution.buffers import BufferPair
from level_set_evolve.evolution.narrow_band import NarrowBandSet
from level_set_evolve.evolution.region_negotiation import LargestPossibleRegionNegotiator, negotiate
from level_set_evolve.evolution.result import EvolutionResult
from level_set_evolve.utils.evolve_logging import (
    LoggedOperation,
    get_logger,
    log_iteration_progress,
    log_run_completion,
    log_run_start,
    log_validation_error,
    set_logging_level,
)
from level_set_evolve.utils.exceptions import (
    InvalidParameterError,
    UpdateStepError,
    validate_parameter_value,
)

if TYPE_CHECKING:
    from collections.abc import Iterable

    from level_set_evolve.core.node import LevelSetNode, NodeContainer
    from level_set_evolve.core.region import ImageRegion
    from level_set_evolve.evolution.region_negotiation import RegionNegotiator

# Module logger
logger = get_logger(__name__)


@runtime_checkable
class LevelSetUpdateStep(Protocol):
    """
    Per-iteration update rule of a concrete evolution algorithm.

    The single extension point of the harness. Implementations must read only
    from ``input_buffer`` and write only to ``output_buffer``, visiting every
    node of ``working_set`` when it is a NodeContainer (narrow banding on), or
    every grid point of the region when it is an ImageRegion (narrow banding
    off). Failure is reported by raising.

    The working set may be mutated in place (node values, or membership via
    clear/extend) to maintain the band between iterations.
    """

    def perform_one_iteration(
        self,
        input_buffer: LevelSetImage,
        output_buffer: LevelSetImage,
        time_step_size: float,
        working_set: NodeContainer | ImageRegion,
    ) -> None: ...


class EvolveLevelSet:
    """
    Double-buffered iteration harness with optional narrow banding.

    Attributes:
        update_step: Per-iteration update rule
        negotiator: Region negotiation strategy (default: largest possible region)
        last_result: EvolutionResult of the most recent successful run

    Example:
        >>> class Shift:
        ...     def perform_one_iteration(self, inp, out, dt, working_set):
        ...         out.array[...] = inp.array + dt
        >>> evolver = EvolveLevelSet(Shift(), EvolutionConfig(number_of_iterations=4))
        >>> evolver.set_input(LevelSetImage.from_array(np.zeros((8, 8))))
        >>> output = evolver.update()
        >>> float(output.array[0, 0])
        2.0
    """

    def __init__(
        self,
        update_step: LevelSetUpdateStep | None = None,
        config: EvolutionConfig | None = None,
        negotiator: RegionNegotiator | None = None,
    ):
        """
        Initialize the harness.

        Args:
            update_step: Update rule. If None, the instance itself must define
                perform_one_iteration (subclass style).
            config: Run parameters (default: EvolutionConfig())
            negotiator: Region negotiation strategy

        Raises:
            TypeError: If no update rule is available
        """
        if update_step is None:
            if not callable(getattr(self, "perform_one_iteration", None)):
                raise TypeError(
                    f"{type(self).__name__} needs an update step: pass one or define perform_one_iteration()"
                )
            update_step = self

        self.update_step = update_step
        self._config = config if config is not None else EvolutionConfig()
        self.negotiator = negotiator if negotiator is not None else LargestPossibleRegionNegotiator()

        self._buffers = BufferPair()
        self._narrow_band = NarrowBandSet()
        self._input: LevelSetImage | None = None
        self._output: LevelSetImage | None = None
        self._running = False
        self.last_result: EvolutionResult | None = None

    # ------------------------------------------------------------------
    # Run parameters
    # ------------------------------------------------------------------

    @property
    def config(self) -> EvolutionConfig:
        """Run parameters. Each run works on a snapshot taken at its start."""
        return self._config

    @config.setter
    def config(self, config: EvolutionConfig):
        self._check_not_running("config", config)
        self._config = config

    def _check_not_running(self, name: str, value: Any):
        if self._running:
            raise InvalidParameterError(
                parameter_name=name,
                provided_value=value,
                component=self.name,
                reason=f"Cannot change '{name}' while an evolution run is in progress",
            )

    def _set_parameter(self, name: str, value: Any):
        self._check_not_running(name, value)
        try:
            setattr(self._config, name, value)
        except ValidationError as e:
            log_validation_error(logger, self.name, f"{name}={value!r} rejected")
            raise InvalidParameterError(
                parameter_name=name,
                provided_value=value,
                component=self.name,
                reason=f"Invalid value for parameter '{name}': {e.errors()[0]['msg']}",
            ) from e

    @property
    def time_step_size(self) -> float:
        return self._config.time_step_size

    @time_step_size.setter
    def time_step_size(self, value: float):
        self._set_parameter("time_step_size", value)

    @property
    def narrow_banding(self) -> bool:
        return self._config.narrow_banding

    @narrow_banding.setter
    def narrow_banding(self, value: bool):
        self._set_parameter("narrow_banding", value)

    def narrow_banding_on(self):
        self.narrow_banding = True

    def narrow_banding_off(self):
        self.narrow_banding = False

    @property
    def narrow_bandwidth(self) -> float:
        return self._config.narrow_bandwidth

    @narrow_bandwidth.setter
    def narrow_bandwidth(self, value: float):
        self._set_parameter("narrow_bandwidth", value)

    @property
    def number_of_iterations(self) -> int:
        return self._config.number_of_iterations

    @number_of_iterations.setter
    def number_of_iterations(self, value: int):
        self._set_parameter("number_of_iterations", value)

    # ------------------------------------------------------------------
    # Narrow band
    # ------------------------------------------------------------------

    def set_input_narrow_band(self, nodes: Iterable[LevelSetNode] | None):
        """Set the ordered input narrow band (None clears it)."""
        self._check_not_running("input_narrow_band", nodes)
        self._narrow_band.set_input_band(nodes)

    @property
    def input_narrow_band(self) -> NodeContainer | None:
        return self._narrow_band.input_band

    @property
    def narrow_band(self) -> NodeContainer:
        """Live working band the update step visits."""
        return self._narrow_band.working_band

    def replace_narrow_band(self, nodes: Iterable[LevelSetNode]):
        """Install a rebuilt working band (for update steps holding the harness)."""
        self._narrow_band.replace_working_band(nodes)

    @property
    def narrow_band_size(self) -> int:
        """Number of nodes in the live band, 0 when narrow banding is off."""
        return self._narrow_band.size(self.narrow_banding)

    # ------------------------------------------------------------------
    # Pipeline interface
    # ------------------------------------------------------------------

    @property
    def name(self) -> str:
        return type(self).__name__

    @property
    def step_name(self) -> str:
        return type(self.update_step).__name__

    def set_input(self, image: LevelSetImage):
        """Set the level set image to evolve."""
        self._check_not_running("input", image)
        self._input = image

    @property
    def input(self) -> LevelSetImage | None:
        return self._input

    @property
    def output(self) -> LevelSetImage | None:
        """Output image of the most recent successful run."""
        return self._output

    @property
    def input_buffer(self) -> LevelSetImage | None:
        """Internal input buffer (inspect after a failed run)."""
        return self._buffers.input_buffer

    @property
    def output_buffer(self) -> LevelSetImage | None:
        """Internal output buffer (inspect after a failed run)."""
        return self._buffers.output_buffer

    @property
    def buffers(self) -> BufferPair:
        return self._buffers

    def _require_input(self) -> LevelSetImage:
        if self._input is None:
            raise InvalidParameterError(
                parameter_name="input",
                provided_value=None,
                component=self.name,
                reason="No input level set has been set; call set_input() first",
            )
        return self._input

    def update(
        self,
        output_requested_region: ImageRegion | None = None,
        output: LevelSetImage | None = None,
    ) -> LevelSetImage:
        """
        Negotiate regions and run the evolution.

        Args:
            output_requested_region: Region the consumer needs (default: full extent).
                The negotiator may enlarge it.
            output: External image receiving the result. A new image is
                created if None. It is only written when the run succeeds.

        Returns:
            The output image
        """
        input_image = self._require_input()

        if output is None:
            output = LevelSetImage()
        if output.largest_possible_region is None:
            output.copy_information(input_image)
        if output_requested_region is not None:
            output.requested_region = output_requested_region
        elif output.requested_region is None:
            output.requested_region = output.largest_possible_region

        region = negotiate(self.negotiator, input_image, output)
        self.generate_data(output, region)
        self._output = output
        return output

    def run(
        self,
        image: LevelSetImage,
        output_requested_region: ImageRegion | None = None,
        output: LevelSetImage | None = None,
    ) -> LevelSetImage:
        """Convenience for set_input(image) followed by update()."""
        self.set_input(image)
        return self.update(output_requested_region, output=output)

    # ------------------------------------------------------------------
    # Evolution loop
    # ------------------------------------------------------------------

    def _validate_parameters(self, params: EvolutionConfig):
        validate_parameter_value(params.time_step_size, "time_step_size", (0.0, MAX_CLAMP_VALUE), component=self.name)
        validate_parameter_value(
            params.narrow_bandwidth, "narrow_bandwidth", (0.0, MAX_CLAMP_VALUE), component=self.name
        )
        validate_parameter_value(
            params.number_of_iterations, "number_of_iterations", (0, float("inf")), component=self.name
        )

    def generate_data(self, output: LevelSetImage, region: ImageRegion | None = None) -> EvolutionResult:
        """
        Run the configured number of iterations and copy the result to ``output``.

        Args:
            output: Image receiving the final buffer
            region: Region to allocate the buffers over (default: the input's
                requested region, else its largest possible region)

        Returns:
            EvolutionResult of the run (also stored as ``last_result``)

        Raises:
            InvalidParameterError: If a run parameter is outside its range
            RegionMismatchError: If the input does not cover ``region``
            AllocationError: If the buffers cannot be allocated
            UpdateStepError: If the update step fails; ``output`` is untouched
        """
        input_image = self._require_input()
        if region is None:
            region = input_image.requested_region or input_image.largest_possible_region

        # Parameters are frozen for the duration of the run
        params = self._config.model_copy(deep=True)
        if params.logging.level is not None:
            set_logging_level(params.logging.level)
        self._validate_parameters(params)

        n_iterations = params.number_of_iterations
        dt = params.time_step_size

        self._running = True
        try:
            log_run_start(logger, f"{self.name} ({self.step_name})", {**params.summary(), "region": str(region)})

            with LoggedOperation(logger, f"{self.name} evolution", log_level=logging.DEBUG) as operation:
                self._buffers.allocate(region, template=input_image)
                self._buffers.copy_input_to_buffer(input_image)
                self._narrow_band.reset()

                if n_iterations == 0:
                    # Identity run
                    np.copyto(self._buffers.output_buffer.array, self._buffers.input_buffer.array)

                iterations = track(
                    range(n_iterations),
                    description=f"{self.name}",
                    disable=not params.logging.show_progress,
                )
                for iteration in iterations:
                    self._perform_iteration(iteration, n_iterations, dt, params.narrow_banding, region)
                    if iteration < n_iterations - 1:
                        self._buffers.swap()

                self._buffers.copy_buffer_to_output(output)
        finally:
            self._running = False

        narrow_band_size = self._narrow_band.size(params.narrow_banding)
        log_run_completion(logger, self.name, n_iterations, operation.duration, narrow_band_size)

        self.last_result = EvolutionResult(
            output=output,
            iterations=n_iterations,
            time_step_size=dt,
            narrow_banding=params.narrow_banding,
            narrow_band_size=narrow_band_size,
            region=region,
            execution_time=operation.duration,
            metadata={"update_step": self.step_name, "narrow_bandwidth": params.narrow_bandwidth},
        )
        return self.last_result

    def _perform_iteration(
        self,
        iteration: int,
        n_iterations: int,
        dt: float,
        narrow_banding: bool,
        region: ImageRegion,
    ):
        working_set = self._narrow_band.working_band if narrow_banding else region
        try:
            self.update_step.perform_one_iteration(
                self._buffers.input_buffer,
                self._buffers.output_buffer,
                dt,
                working_set,
            )
        except Exception as e:
            logger.error(f"{self.step_name} failed on iteration {iteration}/{n_iterations}: {e}")
            raise UpdateStepError(
                iteration=iteration,
                number_of_iterations=n_iterations,
                step_name=self.step_name,
                cause=e,
                component=self.name,
            ) from e

        info = {"narrow_band": self._narrow_band.size(narrow_banding)} if narrow_banding else None
        log_iteration_progress(logger, iteration + 1, n_iterations, info)

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    def print_self(self) -> str:
        """Multi-line description of the harness state."""
        input_band = self._narrow_band.input_band
        lines = [
            f"{self.name}",
            f"  UpdateStep: {self.step_name}",
            f"  TimeStepSize: {self.time_step_size}",
            f"  NarrowBanding: {self.narrow_banding}",
            f"  NarrowBandwidth: {self.narrow_bandwidth}",
            f"  NumberOfIterations: {self.number_of_iterations}",
            f"  InputNarrowBand: {len(input_band) if input_band is not None else None}",
            f"  NarrowBandSize: {self.narrow_band_size}",
            f"  Negotiator: {self.negotiator!r}",
            f"  Buffers: {self._buffers!r}",
        ]
        return "\n".join(lines)

    def __repr__(self) -> str:
        return (
            f"{self.name}(update_step={self.step_name}, time_step_size={self.time_step_size}, "
            f"narrow_banding={self.narrow_banding}, number_of_iterations={self.number_of_iterations})"
        )

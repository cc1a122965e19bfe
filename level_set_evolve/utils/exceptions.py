"""
Exception classes for level set evolution with helpful error messages.

Every error raised by the harness carries the component that raised it, an
optional suggested action, a stable error code, and diagnostic data, so that a
failed run can be diagnosed from the message alone.

Error kinds:
- InvalidParameterError: run parameter outside its valid range
- RegionMismatchError: external field does not cover the negotiated region
- UpdateStepError: the pluggable per-iteration update step failed
- AllocationError: a buffer could not be allocated over the required region
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from level_set_evolve.core.region import ImageRegion


class LevelSetEvolutionError(Exception):
    """
    Base exception for level set evolution errors.

    Provides structured error information:
    - Clear error description
    - Component context
    - Suggested action for resolution
    - Optional diagnostic data
    """

    def __init__(
        self,
        message: str,
        component: str | None = None,
        suggested_action: str | None = None,
        error_code: str | None = None,
        diagnostic_data: dict[str, Any] | None = None,
    ):
        self.component = component or "EvolveLevelSet"
        self.suggested_action = suggested_action
        self.error_code = error_code
        self.diagnostic_data = diagnostic_data or {}

        full_message = f"[{self.component}] {message}"

        if self.suggested_action:
            full_message += f"\nSuggestion: {self.suggested_action}"

        if self.error_code:
            full_message += f"\nError Code: {self.error_code}"

        if self.diagnostic_data:
            full_message += "\nDiagnostic Information:"
            for key, value in self.diagnostic_data.items():
                full_message += f"\n   - {key}: {value}"

        super().__init__(full_message)


class InvalidParameterError(LevelSetEvolutionError):
    """Exception raised when a run parameter is invalid or cannot be changed."""

    def __init__(
        self,
        parameter_name: str,
        provided_value: Any,
        valid_range: tuple | None = None,
        component: str | None = None,
        reason: str | None = None,
    ):
        diagnostic_data = {
            "parameter": parameter_name,
            "provided_value": str(provided_value),
            "provided_type": type(provided_value).__name__,
        }

        if valid_range:
            diagnostic_data["valid_range"] = f"[{valid_range[0]}, {valid_range[1]}]"

        suggested_action = _generate_parameter_suggestions(parameter_name, provided_value, valid_range)

        message = reason or f"Invalid value for parameter '{parameter_name}'"

        super().__init__(
            message=message,
            component=component,
            suggested_action=suggested_action,
            error_code="INVALID_PARAMETER",
            diagnostic_data=diagnostic_data,
        )
        self.parameter_name = parameter_name
        self.provided_value = provided_value


class RegionMismatchError(LevelSetEvolutionError, ValueError):
    """Exception raised when a field does not cover the region an operation needs."""

    def __init__(
        self,
        required_region: ImageRegion,
        available_region: ImageRegion | None,
        field_name: str = "input",
        component: str | None = None,
    ):
        diagnostic_data = {
            "field": field_name,
            "required_region": str(required_region),
            "available_region": str(available_region),
        }

        if available_region is None:
            suggested_action = f"Allocate the {field_name} field before running the evolution"
        else:
            suggested_action = (
                f"Provide a {field_name} field whose buffered region contains {required_region}, "
                "or override the region negotiator to request a smaller region"
            )

        super().__init__(
            message=f"The {field_name} field does not cover the required region",
            component=component,
            suggested_action=suggested_action,
            error_code="REGION_MISMATCH",
            diagnostic_data=diagnostic_data,
        )
        self.required_region = required_region
        self.available_region = available_region


class UpdateStepError(LevelSetEvolutionError):
    """Exception raised when the per-iteration update step fails."""

    def __init__(
        self,
        iteration: int,
        number_of_iterations: int,
        step_name: str,
        cause: BaseException | None = None,
        component: str | None = None,
    ):
        diagnostic_data = {
            "iteration": iteration,
            "number_of_iterations": number_of_iterations,
            "update_step": step_name,
        }
        if cause is not None:
            diagnostic_data["cause"] = f"{type(cause).__name__}: {cause}"

        super().__init__(
            message=f"Update step failed on iteration {iteration} of {number_of_iterations}",
            component=component,
            suggested_action="Inspect the internal buffers for the last computed state and re-run with adjusted parameters",
            error_code="UPDATE_STEP_FAILURE",
            diagnostic_data=diagnostic_data,
        )
        self.iteration = iteration
        self.number_of_iterations = number_of_iterations
        self.step_name = step_name


class AllocationError(LevelSetEvolutionError):
    """Exception raised when a buffer cannot be allocated over the required region."""

    def __init__(
        self,
        region: ImageRegion | None,
        reason: str,
        component: str | None = None,
    ):
        diagnostic_data: dict[str, Any] = {"region": str(region)}
        if region is not None:
            diagnostic_data["number_of_pixels"] = region.number_of_pixels

        super().__init__(
            message=f"Buffer allocation failed: {reason}",
            component=component,
            suggested_action="Reduce the requested region or override the region negotiator",
            error_code="ALLOCATION_FAILURE",
            diagnostic_data=diagnostic_data,
        )
        self.region = region


def _generate_parameter_suggestions(
    parameter_name: str,
    provided_value: Any,
    valid_range: tuple | None,
) -> str:
    """Generate specific suggestions for parameter errors."""

    suggestions = []

    if valid_range and isinstance(provided_value, (int, float)) and not isinstance(provided_value, bool):
        if provided_value < valid_range[0]:
            suggestions.append(f"Increase {parameter_name} to at least {valid_range[0]}")
        elif provided_value > valid_range[1]:
            suggestions.append(f"Decrease {parameter_name} to at most {valid_range[1]}")

    if "time_step" in parameter_name.lower():
        suggestions.append("Choose the time step to satisfy the CFL condition of the update step")

    return " | ".join(suggestions) if suggestions else f"Check {parameter_name} value and try again"


# Convenience functions for common error scenarios


def validate_parameter_value(
    value: Any,
    parameter_name: str,
    valid_range: tuple | None = None,
    component: str | None = None,
):
    """Validate that a numeric parameter lies within its valid range."""
    if valid_range and isinstance(value, (int, float)):
        if not (valid_range[0] <= value <= valid_range[1]):
            raise InvalidParameterError(
                parameter_name=parameter_name,
                provided_value=value,
                valid_range=valid_range,
                component=component,
            )


def validate_region_contains(
    outer: ImageRegion | None,
    inner: ImageRegion,
    field_name: str = "input",
    component: str | None = None,
):
    """Validate that ``outer`` fully contains ``inner``."""
    if outer is None or not inner.is_inside(outer):
        raise RegionMismatchError(
            required_region=inner,
            available_region=outer,
            field_name=field_name,
            component=component,
        )

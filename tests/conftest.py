"""
Pytest configuration and shared fixtures for the level_set_evolve test suite.
"""

from __future__ import annotations

import pytest

import numpy as np

from level_set_evolve import ImageRegion, LevelSetImage, LevelSetNode, NodeContainer

# =============================================================================
# Test Configuration
# =============================================================================


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests (fast, isolated)")
    config.addinivalue_line("markers", "integration: Integration tests (cross-component)")


def pytest_collection_modifyitems(config, items):
    """Add markers based on test paths."""
    for item in items:
        test_path = str(item.fspath)

        if "/unit/" in test_path:
            item.add_marker(pytest.mark.unit)
        elif "/integration/" in test_path:
            item.add_marker(pytest.mark.integration)


# =============================================================================
# Update Steps
# =============================================================================


class ShiftStep:
    """Adds the time step to every visited grid point."""

    def __init__(self):
        self.calls = 0

    def perform_one_iteration(self, input_buffer, output_buffer, time_step_size, working_set):
        self.calls += 1
        if isinstance(working_set, ImageRegion):
            output_buffer.region_view(working_set)[...] = input_buffer.region_view(working_set) + time_step_size
            return
        # Unvisited points carry over unchanged
        output_buffer.array[...] = input_buffer.array
        for node in working_set:
            output_buffer.set_pixel(node.index, input_buffer.get_pixel(node.index) + time_step_size)


class FailingStep(ShiftStep):
    """ShiftStep that raises on a given iteration."""

    def __init__(self, fail_on: int):
        super().__init__()
        self.fail_on = fail_on

    def perform_one_iteration(self, input_buffer, output_buffer, time_step_size, working_set):
        if self.calls == self.fail_on:
            self.calls += 1
            raise RuntimeError(f"step exploded on call {self.fail_on}")
        super().perform_one_iteration(input_buffer, output_buffer, time_step_size, working_set)


@pytest.fixture
def shift_step():
    return ShiftStep()


@pytest.fixture
def shift_step_class():
    return ShiftStep


@pytest.fixture
def failing_step_factory():
    return FailingStep


# =============================================================================
# Field Fixtures
# =============================================================================


@pytest.fixture
def circle_phi():
    """Signed distance to a circle of radius 5 centred on a 24x24 grid."""
    y, x = np.mgrid[0:24, 0:24]
    return np.sqrt((x - 12.0) ** 2 + (y - 12.0) ** 2) - 5.0


@pytest.fixture
def circle_image(circle_phi):
    return LevelSetImage.from_array(circle_phi, spacing=(1.0, 1.0))


@pytest.fixture
def ramp_image():
    """Small 2D image with distinct values at every pixel."""
    return LevelSetImage.from_array(np.arange(30, dtype=np.float64).reshape(5, 6))


@pytest.fixture
def small_band():
    """Three nodes in deliberately non-raster order."""
    return NodeContainer(
        [
            LevelSetNode(index=(2, 3), value=0.5),
            LevelSetNode(index=(0, 0), value=-1.0),
            LevelSetNode(index=(4, 5), value=2.0),
        ]
    )

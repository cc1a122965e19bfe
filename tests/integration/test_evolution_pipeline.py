#!/usr/bin/env python3
"""
End-to-end tests of the evolution pipeline: region negotiation, buffering,
narrow banding and configuration working together.
"""

import pytest

import numpy as np

from level_set_evolve import (
    EvolutionConfig,
    EvolveLevelSet,
    ImageRegion,
    LevelSetImage,
    PaddedRegionNegotiator,
    UpdateStepError,
    extract_narrow_band,
    load_evolution_config,
)


class ConstantSpeedStep:
    """
    Explicit step of phi_t = -F for a constant speed F.

    Pixels outside the working set carry over unchanged.
    """

    def __init__(self, speed=1.0):
        self.speed = speed

    def perform_one_iteration(self, input_buffer, output_buffer, time_step_size, working_set):
        if isinstance(working_set, ImageRegion):
            view = input_buffer.region_view(working_set)
            output_buffer.region_view(working_set)[...] = view - time_step_size * self.speed
            return
        output_buffer.array[...] = input_buffer.array
        if working_set.size() == 0:
            return
        offset = np.array(input_buffer.buffered_region.index)
        indices = tuple(axis - lo for axis, lo in zip(working_set.indices(), offset, strict=True))
        output_buffer.array[indices] = input_buffer.array[indices] - time_step_size * self.speed


@pytest.mark.integration
def test_full_grid_run_shrinks_distance(circle_image, circle_phi):
    evolver = EvolveLevelSet(ConstantSpeedStep(), EvolutionConfig(number_of_iterations=8, time_step_size=0.25))

    output = evolver.run(circle_image)

    # Zero level set moved outward by speed * N * dt
    np.testing.assert_allclose(output.array, circle_phi - 2.0)
    assert evolver.last_result.final_time == 2.0


@pytest.mark.integration
def test_sub_region_request_yields_full_extent(shift_step, circle_image):
    evolver = EvolveLevelSet(shift_step, EvolutionConfig(number_of_iterations=2, time_step_size=1.0))
    evolver.set_input(circle_image)
    sub = ImageRegion(index=(4, 4), size=(3, 3))

    output = evolver.update(output_requested_region=sub)

    full = circle_image.largest_possible_region
    assert evolver.buffers.region == full
    assert evolver.input_buffer.buffered_region == full
    assert output.buffered_region == full
    assert output.requested_region == full
    np.testing.assert_allclose(output.array, circle_image.array + 2.0)


@pytest.mark.integration
def test_padded_negotiator_evolves_sub_region(shift_step, ramp_image):
    evolver = EvolveLevelSet(
        shift_step,
        EvolutionConfig(number_of_iterations=3, time_step_size=1.0),
        negotiator=PaddedRegionNegotiator(1),
    )
    evolver.set_input(ramp_image)
    sub = ImageRegion(index=(1, 1), size=(2, 2))

    output = evolver.update(output_requested_region=sub)

    assert evolver.buffers.region == ImageRegion(index=(0, 0), size=(4, 4))
    assert output.buffered_region == sub
    np.testing.assert_allclose(output.array, ramp_image.array[1:3, 1:3] + 3.0)


@pytest.mark.integration
def test_narrow_band_from_extracted_interface(circle_image, circle_phi):
    band = extract_narrow_band(circle_image, bandwidth=1.5)
    config = EvolutionConfig(number_of_iterations=4, time_step_size=0.25, narrow_banding=True, narrow_bandwidth=1.5)
    evolver = EvolveLevelSet(ConstantSpeedStep(), config)
    evolver.set_input_narrow_band(band)

    output = evolver.run(circle_image)

    in_band = np.abs(circle_phi) <= 1.5
    np.testing.assert_allclose(output.array[in_band], circle_phi[in_band] - 1.0)
    np.testing.assert_array_equal(output.array[~in_band], circle_phi[~in_band])
    assert evolver.narrow_band_size == band.size()
    assert evolver.last_result.narrow_band_size == band.size()
    assert evolver.last_result.metadata["narrow_bandwidth"] == 1.5


@pytest.mark.integration
def test_band_ignored_when_narrow_banding_off(circle_image, circle_phi):
    band = extract_narrow_band(circle_image, bandwidth=1.0)
    evolver = EvolveLevelSet(ConstantSpeedStep(), EvolutionConfig(number_of_iterations=2, time_step_size=0.5))
    evolver.set_input_narrow_band(band)

    output = evolver.run(circle_image)

    assert evolver.narrow_band_size == 0
    np.testing.assert_allclose(output.array, circle_phi - 1.0)


@pytest.mark.integration
def test_repeated_runs_reuse_buffers(shift_step, ramp_image):
    evolver = EvolveLevelSet(shift_step, EvolutionConfig(number_of_iterations=3, time_step_size=1.0))

    evolver.run(ramp_image)
    first = {id(evolver.input_buffer), id(evolver.output_buffer)}
    output = evolver.run(ramp_image)
    second = {id(evolver.input_buffer), id(evolver.output_buffer)}

    assert first == second
    np.testing.assert_allclose(output.array, ramp_image.array + 3.0)


@pytest.mark.integration
def test_integer_input_evolves_in_float(shift_step):
    image = LevelSetImage.from_array(np.arange(12).reshape(3, 4))
    evolver = EvolveLevelSet(shift_step, EvolutionConfig(number_of_iterations=1, time_step_size=0.5))

    output = evolver.run(image)

    assert output.dtype == np.float64
    np.testing.assert_allclose(output.array, np.arange(12).reshape(3, 4) + 0.5)


@pytest.mark.integration
def test_failure_then_recovery(failing_step_factory, ramp_image):
    step = failing_step_factory(fail_on=1)
    evolver = EvolveLevelSet(step, EvolutionConfig(number_of_iterations=4, time_step_size=1.0))

    with pytest.raises(UpdateStepError):
        evolver.run(ramp_image)

    # Failure only fires once; a fresh run starts from the input again
    output = evolver.run(ramp_image)
    np.testing.assert_allclose(output.array, ramp_image.array + 4.0)


@pytest.mark.integration
def test_three_dimensional_run(shift_step):
    phi = np.linspace(-1.0, 1.0, 4 * 5 * 6).reshape(4, 5, 6)
    image = LevelSetImage.from_array(phi, index=(2, 0, -3), spacing=(0.5, 0.5, 1.0))
    evolver = EvolveLevelSet(shift_step, EvolutionConfig(number_of_iterations=2, time_step_size=0.5))

    output = evolver.run(image)

    assert output.buffered_region == image.largest_possible_region
    assert output.spacing == (0.5, 0.5, 1.0)
    np.testing.assert_allclose(output.array, phi + 1.0)


@pytest.mark.integration
def test_run_from_yaml_config(tmp_path, shift_step, ramp_image):
    path = tmp_path / "run.yaml"
    path.write_text("time_step_size: 0.5\nnumber_of_iterations: 6\nnarrow_banding: false\n")

    evolver = EvolveLevelSet(shift_step, load_evolution_config(path))
    output = evolver.run(ramp_image)

    np.testing.assert_allclose(output.array, ramp_image.array + 3.0)

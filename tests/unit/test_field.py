#!/usr/bin/env python3
"""
Unit tests for level_set_evolve/core/field.py
"""

import pytest

import numpy as np

from level_set_evolve.core.field import LevelSetImage
from level_set_evolve.core.region import ImageRegion
from level_set_evolve.utils.exceptions import AllocationError, RegionMismatchError


@pytest.mark.unit
def test_from_array_sets_all_regions():
    image = LevelSetImage.from_array(np.zeros((3, 4)), index=(5, 6))
    expected = ImageRegion(index=(5, 6), size=(3, 4))

    assert image.largest_possible_region == expected
    assert image.requested_region == expected
    assert image.buffered_region == expected
    assert image.spacing == (1.0, 1.0)
    assert image.origin == (0.0, 0.0)
    assert image.dimension == 2
    assert image.is_allocated


@pytest.mark.unit
def test_from_array_does_not_copy():
    data = np.zeros((2, 2))
    image = LevelSetImage.from_array(data)

    image.set_pixel((1, 1), 7.0)

    assert data[1, 1] == 7.0


@pytest.mark.unit
def test_pixel_access_uses_absolute_indices():
    image = LevelSetImage.from_array(np.arange(6.0).reshape(2, 3), index=(10, 20))

    assert image.get_pixel((10, 20)) == 0.0
    assert image.get_pixel((11, 22)) == 5.0

    with pytest.raises(IndexError):
        image.get_pixel((0, 0))


@pytest.mark.unit
def test_allocate_with_fill():
    image = LevelSetImage(ImageRegion(index=(0, 0, 0), size=(2, 3, 4)), dtype=np.float32)
    image.allocate(fill=1.5)

    assert image.array.shape == (2, 3, 4)
    assert image.array.dtype == np.float32
    np.testing.assert_array_equal(image.array, 1.5)


@pytest.mark.unit
def test_array_access_before_allocation_raises():
    image = LevelSetImage(ImageRegion(index=(0,), size=(4,)))

    assert not image.is_allocated
    with pytest.raises(AllocationError):
        _ = image.array


@pytest.mark.unit
def test_allocate_without_region_raises():
    with pytest.raises(AllocationError, match="no buffered region"):
        LevelSetImage().allocate()


@pytest.mark.unit
def test_spacing_length_must_match_dimension():
    with pytest.raises(ValueError, match="Expected 2 values"):
        LevelSetImage(ImageRegion(index=(0, 0), size=(2, 2)), spacing=(1.0,))


@pytest.mark.unit
def test_region_view_is_writable_subview():
    image = LevelSetImage.from_array(np.zeros((4, 4)), index=(1, 1))
    view = image.region_view(ImageRegion(index=(2, 2), size=(2, 2)))
    view[...] = 3.0

    assert image.array[1:3, 1:3].sum() == 12.0
    assert image.array.sum() == 12.0


@pytest.mark.unit
def test_region_view_outside_buffer_raises():
    image = LevelSetImage.from_array(np.zeros((4, 4)))

    with pytest.raises(RegionMismatchError) as exc_info:
        image.region_view(ImageRegion(index=(2, 2), size=(4, 4)))

    assert exc_info.value.error_code == "REGION_MISMATCH"


@pytest.mark.unit
def test_copy_information_leaves_data_untouched():
    source = LevelSetImage.from_array(np.ones((2, 2)), spacing=(0.5, 0.25), origin=(1.0, 2.0))
    target = LevelSetImage()

    target.copy_information(source)

    assert target.largest_possible_region == source.largest_possible_region
    assert target.spacing == (0.5, 0.25)
    assert target.origin == (1.0, 2.0)
    assert target.requested_region is None
    assert not target.is_allocated


@pytest.mark.unit
def test_set_regions_drops_storage():
    image = LevelSetImage.from_array(np.ones((2, 2)))
    image.set_regions(ImageRegion(index=(0, 0), size=(3, 3)))

    assert not image.is_allocated
    assert image.shape == (3, 3)


@pytest.mark.unit
def test_repr_mentions_regions():
    text = repr(LevelSetImage.from_array(np.zeros((2, 2))))

    assert "largest_possible_region" in text
    assert "allocated=True" in text

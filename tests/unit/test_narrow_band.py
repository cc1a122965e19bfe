#!/usr/bin/env python3
"""
Unit tests for level_set_evolve/evolution/narrow_band.py
"""

import pytest

from level_set_evolve.core.node import LevelSetNode, NodeContainer
from level_set_evolve.evolution.narrow_band import NarrowBandSet


@pytest.mark.unit
def test_empty_band_size_is_zero():
    band = NarrowBandSet()

    assert band.size(narrow_banding=True) == 0
    assert band.size(narrow_banding=False) == 0
    assert band.input_band is None
    assert band.working_band.size() == 0


@pytest.mark.unit
def test_size_zero_when_narrow_banding_disabled(small_band):
    band = NarrowBandSet()
    band.set_input_band(small_band)

    assert band.size(narrow_banding=True) == 3
    assert band.size(narrow_banding=False) == 0


@pytest.mark.unit
def test_input_band_kept_by_reference(small_band):
    band = NarrowBandSet()
    band.set_input_band(small_band)

    assert band.input_band is small_band


@pytest.mark.unit
def test_plain_iterable_is_collected_in_order():
    nodes = [LevelSetNode((3,), 1.0), LevelSetNode((1,), 0.0)]
    band = NarrowBandSet()
    band.set_input_band(iter(nodes))

    assert isinstance(band.input_band, NodeContainer)
    assert [node.index for node in band.input_band] == [(3,), (1,)]


@pytest.mark.unit
def test_working_band_preserves_order_and_shares_nodes(small_band):
    band = NarrowBandSet()
    band.set_input_band(small_band)

    working = band.working_band
    assert [node.index for node in working] == [(2, 3), (0, 0), (4, 5)]

    # Node values mutated in place are visible through the input band
    working[0].value = 42.0
    assert small_band[0].value == 42.0


@pytest.mark.unit
def test_membership_change_leaves_input_band_intact(small_band):
    band = NarrowBandSet()
    band.set_input_band(small_band)

    band.working_band.pop()
    band.working_band.pop()

    assert band.size(narrow_banding=True) == 1
    assert len(small_band) == 3


@pytest.mark.unit
def test_replace_and_reset(small_band):
    band = NarrowBandSet()
    band.set_input_band(small_band)

    band.replace_working_band([LevelSetNode((9, 9), 0.0)])
    assert band.size(narrow_banding=True) == 1

    band.reset()
    assert band.size(narrow_banding=True) == 3


@pytest.mark.unit
def test_set_none_clears(small_band):
    band = NarrowBandSet()
    band.set_input_band(small_band)
    band.set_input_band(None)

    assert band.input_band is None
    assert band.size(narrow_banding=True) == 0

"""
Region negotiation between the evolution harness and a pull-based pipeline.

A downstream consumer requests an output region. Before any data is produced,
the pipeline asks two questions:

1. What input region is needed to produce the requested output region?
2. Given the available input, how far should the requested output region be
   enlarged?

Level set evolution is non-local: over several iterations the front can move
out of any locally requested sub-region. The default negotiator therefore
answers "the largest possible region" to both questions. Update steps that are
provably local may use a narrower negotiator.
"""

from __future__ import annotations

import numbers
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from level_set_evolve.utils.evolve_logging import get_logger
from level_set_evolve.utils.exceptions import RegionMismatchError

if TYPE_CHECKING:
    from collections.abc import Sequence

    from level_set_evolve.core.field import LevelSetImage
    from level_set_evolve.core.region import ImageRegion

# Module logger
logger = get_logger(__name__)


@runtime_checkable
class RegionNegotiator(Protocol):
    """
    Two-function region negotiation interface.

    Any object with these methods can be passed to EvolveLevelSet.
    """

    def required_input_region(self, output_requested_region: ImageRegion, input_image: LevelSetImage) -> ImageRegion:
        """Input region required to produce ``output_requested_region``."""
        ...

    def enlarge_output_region(self, output_image: LevelSetImage) -> ImageRegion:
        """Region the output's requested region is enlarged to."""
        ...


class LargestPossibleRegionNegotiator:
    """
    Default negotiator: always request and produce the full available extent.
    """

    def required_input_region(self, output_requested_region: ImageRegion, input_image: LevelSetImage) -> ImageRegion:
        return input_image.largest_possible_region

    def enlarge_output_region(self, output_image: LevelSetImage) -> ImageRegion:
        return output_image.largest_possible_region

    def __repr__(self) -> str:
        return "LargestPossibleRegionNegotiator()"


class PaddedRegionNegotiator:
    """
    Negotiator for update steps whose stencil is local.

    The required input region is the requested output region padded by the
    total distance information can travel during a run, cropped to the
    available input. The requested output region is left unchanged.

    Args:
        radius: Padding per side, in grid points (single value or per axis).
            For a stencil of radius r run for N iterations use r * N.
    """

    def __init__(self, radius: int | Sequence[int]):
        if isinstance(radius, numbers.Integral):
            if radius < 0:
                raise ValueError(f"radius must be non-negative, got {radius}")
        elif any(r < 0 for r in radius):
            raise ValueError(f"radius must be non-negative, got {tuple(radius)}")
        self.radius = radius

    def required_input_region(self, output_requested_region: ImageRegion, input_image: LevelSetImage) -> ImageRegion:
        padded = output_requested_region.pad(self.radius)
        cropped = padded.crop(input_image.largest_possible_region)
        if cropped is None:
            raise RegionMismatchError(
                required_region=output_requested_region,
                available_region=input_image.largest_possible_region,
                field_name="input",
                component="PaddedRegionNegotiator",
            )
        return cropped

    def enlarge_output_region(self, output_image: LevelSetImage) -> ImageRegion:
        return output_image.requested_region

    def __repr__(self) -> str:
        return f"PaddedRegionNegotiator(radius={self.radius})"


def negotiate(
    negotiator: RegionNegotiator,
    input_image: LevelSetImage,
    output_image: LevelSetImage,
) -> ImageRegion:
    """
    Run both negotiation phases and record the results on the images.

    The output's requested region is enlarged first; the input region required
    to produce it is then written to ``input_image.requested_region``.

    Args:
        negotiator: Negotiation strategy
        input_image: Upstream image (its largest possible region must be set)
        output_image: Downstream image carrying the requested region

    Returns:
        Region the internal buffers must be allocated over (the required
        input region)
    """
    if output_image.requested_region is None:
        output_image.requested_region = output_image.largest_possible_region

    enlarged = negotiator.enlarge_output_region(output_image)
    if enlarged != output_image.requested_region:
        logger.debug(f"Enlarged output requested region {output_image.requested_region} -> {enlarged}")
    output_image.requested_region = enlarged

    required = negotiator.required_input_region(enlarged, input_image)
    input_image.requested_region = required
    logger.debug(f"Required input region: {required}")

    return required

"""
Double buffering for iterative level set evolution.

Two images alternate roles across iterations: each iteration reads the input
buffer and writes the output buffer, then the roles are exchanged so the
result becomes the next iteration's input. The exchange swaps references and
never copies pixel data.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

from level_set_evolve.core.field import LevelSetImage
from level_set_evolve.utils.evolve_logging import get_logger
from level_set_evolve.utils.exceptions import AllocationError, RegionMismatchError, validate_region_contains

if TYPE_CHECKING:
    from level_set_evolve.core.region import ImageRegion

# Module logger
logger = get_logger(__name__)


class BufferPair:
    """
    Owner of the two internal buffers of an evolution run.

    Attributes:
        input_buffer: Buffer the next iteration reads from
        output_buffer: Buffer the next iteration writes to
        region: Region both buffers are allocated over

    Example:
        >>> buffers = BufferPair()
        >>> buffers.allocate(input_image.largest_possible_region, template=input_image)
        >>> buffers.copy_input_to_buffer(input_image)
        >>> step(buffers.input_buffer, buffers.output_buffer)
        >>> buffers.swap()
    """

    def __init__(self):
        self._input_buffer: LevelSetImage | None = None
        self._output_buffer: LevelSetImage | None = None
        self._region: ImageRegion | None = None

    @property
    def input_buffer(self) -> LevelSetImage | None:
        return self._input_buffer

    @property
    def output_buffer(self) -> LevelSetImage | None:
        return self._output_buffer

    @property
    def region(self) -> ImageRegion | None:
        return self._region

    @property
    def is_allocated(self) -> bool:
        return self._output_buffer is not None and self._output_buffer.is_allocated

    @staticmethod
    def _buffer_dtype(template: LevelSetImage | None) -> np.dtype:
        # Integer inputs evolve in float64
        if template is None or not np.issubdtype(template.dtype, np.floating):
            return np.dtype(np.float64)
        return template.dtype

    def _matches(self, buffer: LevelSetImage | None, region: ImageRegion, template: LevelSetImage | None) -> bool:
        if buffer is None or not buffer.is_allocated or buffer.buffered_region != region:
            return False
        return buffer.dtype == self._buffer_dtype(template)

    @staticmethod
    def _refresh_geometry(buffer: LevelSetImage, template: LevelSetImage | None):
        # Reused arrays take the current template's geometry; dtype already matches
        if template is None:
            return
        buffer.spacing = template.spacing
        buffer.origin = template.origin
        buffer.largest_possible_region = template.largest_possible_region

    def _new_buffer(self, region: ImageRegion, template: LevelSetImage | None) -> LevelSetImage:
        dtype = self._buffer_dtype(template)
        if template is not None:
            buffer = LevelSetImage(region, spacing=template.spacing, origin=template.origin, dtype=dtype)
            buffer.largest_possible_region = template.largest_possible_region
        else:
            buffer = LevelSetImage(region)
        buffer.requested_region = region
        buffer.buffered_region = region
        buffer.allocate()
        return buffer

    def allocate(
        self,
        region: ImageRegion,
        output_only: bool = False,
        template: LevelSetImage | None = None,
    ):
        """
        Allocate the internal buffers over ``region``.

        Buffers already allocated over ``region`` (with the template's pixel
        type) keep their arrays, so repeated runs over the same region do not
        reallocate. Spacing, origin and largest possible region are always
        taken from ``template``.

        Args:
            region: Region both buffers must cover
            output_only: Allocate only the output buffer
            template: Image providing spacing, origin and pixel type

        Raises:
            AllocationError: If the region is empty or memory is exhausted
        """
        if region.is_empty:
            raise AllocationError(region, "required region is empty", component="BufferPair")

        if self._matches(self._output_buffer, region, template):
            logger.debug(f"Reusing output buffer over {region}")
            self._refresh_geometry(self._output_buffer, template)
        else:
            logger.debug(f"Allocating output buffer over {region}")
            self._output_buffer = self._new_buffer(region, template)

        if not output_only:
            if self._matches(self._input_buffer, region, template):
                logger.debug(f"Reusing input buffer over {region}")
                self._refresh_geometry(self._input_buffer, template)
            else:
                logger.debug(f"Allocating input buffer over {region}")
                self._input_buffer = self._new_buffer(region, template)

        self._region = region

    def copy_input_to_buffer(self, external_input: LevelSetImage):
        """
        Deep-copy the external input into the input buffer over the buffer region.

        Raises:
            AllocationError: If the input buffer has not been allocated
            RegionMismatchError: If the external input does not cover the buffer region
        """
        if self._input_buffer is None or not self._input_buffer.is_allocated:
            raise AllocationError(self._region, "input buffer has not been allocated", component="BufferPair")

        region = self._input_buffer.buffered_region
        available = external_input.buffered_region if external_input.is_allocated else None
        validate_region_contains(available, region, field_name="input", component="BufferPair")

        np.copyto(self._input_buffer.array, external_input.region_view(region), casting="same_kind")

    def copy_buffer_to_output(self, external_output: LevelSetImage):
        """
        Deep-copy the output buffer into the image exposed downstream.

        An external image without storage is allocated over its requested region
        (cropped to the buffer region), or over the buffer region when it has none.
        Otherwise the overlap of both buffered regions is copied.

        Raises:
            AllocationError: If the output buffer has not been allocated
            RegionMismatchError: If the two images do not overlap
        """
        if self._output_buffer is None or not self._output_buffer.is_allocated:
            raise AllocationError(self._region, "output buffer has not been allocated", component="BufferPair")

        source_region = self._output_buffer.buffered_region

        if not external_output.is_allocated:
            if external_output.largest_possible_region is None:
                external_output.copy_information(self._output_buffer)
            requested = external_output.requested_region
            target = requested.crop(source_region) if requested is not None else None
            external_output.buffered_region = target if target is not None else source_region
            external_output.dtype = self._output_buffer.dtype
            external_output.allocate()

        overlap = source_region.crop(external_output.buffered_region)
        if overlap is None:
            raise RegionMismatchError(
                required_region=source_region,
                available_region=external_output.buffered_region,
                field_name="output",
                component="BufferPair",
            )

        np.copyto(external_output.region_view(overlap), self._output_buffer.region_view(overlap), casting="same_kind")

    def swap(self):
        """Exchange the roles of input and output buffer (reference swap, no copy)."""
        self._input_buffer, self._output_buffer = self._output_buffer, self._input_buffer

    def release(self):
        """Drop both buffers."""
        self._input_buffer = None
        self._output_buffer = None
        self._region = None

    def __repr__(self) -> str:
        return f"BufferPair(region={self._region}, allocated={self.is_allocated})"

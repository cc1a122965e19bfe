"""
N-dimensional scalar field used as the level set representation.

A LevelSetImage stores φ on a rectangular grid together with the three regions
a pull-based pipeline negotiates over:

- largest_possible_region: full extent the producer can provide
- requested_region: extent a downstream consumer asked for
- buffered_region: extent actually allocated in memory

Pixel storage is a numpy array whose axes follow the region's axes, so the
array element ``array[i - buffered_region.index]`` holds φ at grid index ``i``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

from level_set_evolve.core.region import ImageRegion
from level_set_evolve.utils.exceptions import AllocationError, RegionMismatchError

if TYPE_CHECKING:
    from collections.abc import Sequence

    from numpy.typing import DTypeLike, NDArray


class LevelSetImage:
    """
    Container for a level set function φ sampled on an N-D grid.

    Attributes:
        largest_possible_region: Full available extent of the field
        requested_region: Extent requested by the consumer
        buffered_region: Extent held in ``array``
        spacing: Physical grid spacing per axis
        origin: Physical coordinate of grid index 0 per axis
        dtype: Pixel type of the buffer

    Example:
        >>> # Circle of radius 10 on a 64x64 grid
        >>> y, x = np.mgrid[0:64, 0:64]
        >>> phi = np.sqrt((x - 32) ** 2 + (y - 32) ** 2) - 10.0
        >>> image = LevelSetImage.from_array(phi)
        >>> image.get_pixel((32, 42))
        0.0
    """

    def __init__(
        self,
        region: ImageRegion | None = None,
        spacing: Sequence[float] | None = None,
        origin: Sequence[float] | None = None,
        dtype: DTypeLike = np.float64,
    ):
        """
        Create an image description without storage.

        Args:
            region: Largest possible region; also used as the initial requested
                and buffered region. May be set later.
            spacing: Grid spacing per axis (default: 1.0)
            origin: Physical origin per axis (default: 0.0)
            dtype: Pixel type (default: float64)
        """
        self.largest_possible_region = region
        self.requested_region = region
        self.buffered_region = region
        dimension = region.dimension if region is not None else None
        self.spacing = self._per_axis(spacing, 1.0, dimension)
        self.origin = self._per_axis(origin, 0.0, dimension)
        self.dtype = np.dtype(dtype)
        self._array: NDArray | None = None

    @staticmethod
    def _per_axis(values: Sequence[float] | None, default: float, dimension: int | None) -> tuple[float, ...]:
        if values is None:
            return (default,) * (dimension or 0)
        values = tuple(float(v) for v in values)
        if dimension is not None and len(values) != dimension:
            raise ValueError(f"Expected {dimension} values per axis, got {len(values)}")
        return values

    @classmethod
    def from_array(
        cls,
        array: NDArray,
        index: Sequence[int] | None = None,
        spacing: Sequence[float] | None = None,
        origin: Sequence[float] | None = None,
    ) -> LevelSetImage:
        """
        Wrap an existing array as an image.

        The array is used as storage without copying; all three regions equal
        its extent.

        Args:
            array: Pixel values, one array axis per grid axis
            index: Grid index of ``array[0, 0, ...]`` (default: origin)
            spacing: Grid spacing per axis
            origin: Physical origin per axis
        """
        array = np.asarray(array)
        region = ImageRegion.from_shape(array.shape, index=index)
        image = cls(region, spacing=spacing, origin=origin, dtype=array.dtype)
        image._array = array
        return image

    @property
    def dimension(self) -> int:
        if self.largest_possible_region is None:
            raise AttributeError("Image has no region")
        return self.largest_possible_region.dimension

    @property
    def is_allocated(self) -> bool:
        return self._array is not None

    @property
    def shape(self) -> tuple[int, ...]:
        """Shape of the buffered region."""
        if self.buffered_region is None:
            return ()
        return self.buffered_region.size

    @property
    def array(self) -> NDArray:
        """Pixel buffer over the buffered region."""
        if self._array is None:
            raise AllocationError(self.buffered_region, "image has not been allocated", component="LevelSetImage")
        return self._array

    def set_regions(self, region: ImageRegion):
        """Set largest possible, requested and buffered regions to ``region`` and drop storage."""
        self.largest_possible_region = region
        self.requested_region = region
        self.buffered_region = region
        self._array = None

    def allocate(self, fill: float | None = None):
        """
        Allocate storage over the buffered region.

        Args:
            fill: Optional initial value for every pixel (default: uninitialized)

        Raises:
            AllocationError: If no buffered region is set or memory is exhausted
        """
        region = self.buffered_region
        if region is None:
            raise AllocationError(None, "no buffered region set", component="LevelSetImage")
        try:
            if fill is None:
                self._array = np.empty(region.size, dtype=self.dtype)
            else:
                self._array = np.full(region.size, fill, dtype=self.dtype)
        except (MemoryError, ValueError) as e:
            raise AllocationError(region, str(e), component="LevelSetImage") from e

    def release(self):
        """Drop pixel storage, keeping the geometry."""
        self._array = None

    def region_view(self, region: ImageRegion) -> NDArray:
        """
        Writable view of the pixels in ``region``.

        Raises:
            RegionMismatchError: If ``region`` is not inside the buffered region
        """
        buffered = self.buffered_region
        if self._array is None or buffered is None or not region.is_inside(buffered):
            raise RegionMismatchError(
                required_region=region,
                available_region=buffered if self._array is not None else None,
                field_name="image",
                component="LevelSetImage",
            )
        return self._array[region.slices(relative_to=buffered)]

    def _offset(self, index: Sequence[int]) -> tuple[int, ...]:
        buffered = self.buffered_region
        if buffered is None or not buffered.contains_index(index):
            raise IndexError(f"Index {tuple(index)} outside buffered region {buffered}")
        return tuple(i - lo for i, lo in zip(index, buffered.index, strict=True))

    def get_pixel(self, index: Sequence[int]) -> float:
        """Value of φ at absolute grid ``index``."""
        return self.array[self._offset(index)].item()

    def set_pixel(self, index: Sequence[int], value: float):
        """Set φ at absolute grid ``index``."""
        self.array[self._offset(index)] = value

    def copy_information(self, other: LevelSetImage):
        """
        Copy geometry (largest possible region, spacing, origin, dtype) from ``other``.

        Pixel data and the requested/buffered regions are left untouched.
        """
        self.largest_possible_region = other.largest_possible_region
        self.spacing = other.spacing
        self.origin = other.origin
        self.dtype = other.dtype

    def __repr__(self) -> str:
        return (
            f"LevelSetImage(\n"
            f"  largest_possible_region={self.largest_possible_region},\n"
            f"  requested_region={self.requested_region},\n"
            f"  buffered_region={self.buffered_region},\n"
            f"  spacing={self.spacing},\n"
            f"  dtype={self.dtype},\n"
            f"  allocated={self.is_allocated}\n"
            f")"
        )

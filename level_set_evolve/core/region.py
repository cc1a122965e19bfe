"""
Rectangular index regions on an N-dimensional grid.

An ImageRegion is an origin index plus a size per axis. Regions describe the
extent of a field that is available (largest possible region), requested by a
downstream consumer (requested region), or actually held in memory (buffered
region).

Indices are absolute grid coordinates; the upper bound is exclusive:
    region covers index[d] <= i[d] < index[d] + size[d] for every axis d
"""

from __future__ import annotations

import numbers
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence


@dataclass(frozen=True)
class ImageRegion:
    """
    Rectangular N-D index range: origin ``index`` and extent ``size``.

    Attributes:
        index: Starting grid index per axis
        size: Number of grid points per axis (non-negative)

    Example:
        >>> region = ImageRegion(index=(0, 0), size=(64, 32))
        >>> region.number_of_pixels
        2048
        >>> inner = ImageRegion(index=(8, 8), size=(16, 16))
        >>> inner.is_inside(region)
        True
    """

    index: tuple[int, ...]
    size: tuple[int, ...]

    def __post_init__(self):
        index = tuple(int(i) for i in self.index)
        size = tuple(int(s) for s in self.size)
        if len(index) != len(size):
            raise ValueError(f"Region index {index} and size {size} have different dimensions")
        if any(s < 0 for s in size):
            raise ValueError(f"Region size must be non-negative, got {size}")
        # Frozen dataclass: normalize through object.__setattr__
        object.__setattr__(self, "index", index)
        object.__setattr__(self, "size", size)

    @classmethod
    def from_shape(cls, shape: Sequence[int], index: Sequence[int] | None = None) -> ImageRegion:
        """Create a region with the given array shape, starting at ``index`` (default: origin)."""
        if index is None:
            index = (0,) * len(shape)
        return cls(index=tuple(index), size=tuple(shape))

    @property
    def dimension(self) -> int:
        """Number of axes."""
        return len(self.size)

    @property
    def upper_index(self) -> tuple[int, ...]:
        """Exclusive upper corner of the region."""
        return tuple(i + s for i, s in zip(self.index, self.size, strict=True))

    @property
    def number_of_pixels(self) -> int:
        """Total number of grid points covered."""
        count = 1
        for s in self.size:
            count *= s
        return count

    @property
    def is_empty(self) -> bool:
        return self.number_of_pixels == 0

    def _check_dimension(self, other_dimension: int):
        if other_dimension != self.dimension:
            raise ValueError(f"Dimension mismatch: region is {self.dimension}D, got {other_dimension}D")

    def contains_index(self, index: Sequence[int]) -> bool:
        """Whether the grid index lies inside this region."""
        self._check_dimension(len(index))
        return all(lo <= i < lo + s for i, lo, s in zip(index, self.index, self.size, strict=True))

    def is_inside(self, other: ImageRegion) -> bool:
        """
        Whether this region is fully contained in ``other``.

        An empty region is inside any region of the same dimension.
        """
        self._check_dimension(other.dimension)
        if self.is_empty:
            return True
        return all(
            o_lo <= lo and lo + s <= o_lo + o_s
            for lo, s, o_lo, o_s in zip(self.index, self.size, other.index, other.size, strict=True)
        )

    def crop(self, other: ImageRegion) -> ImageRegion | None:
        """
        Intersection of this region with ``other``.

        Returns:
            The overlapping region, or None when the regions are disjoint
        """
        self._check_dimension(other.dimension)
        lower = tuple(max(a, b) for a, b in zip(self.index, other.index, strict=True))
        upper = tuple(min(a, b) for a, b in zip(self.upper_index, other.upper_index, strict=True))
        if any(u <= lo for lo, u in zip(lower, upper, strict=True)):
            return None
        return ImageRegion(index=lower, size=tuple(u - lo for lo, u in zip(lower, upper, strict=True)))

    def pad(self, radius: int | Sequence[int]) -> ImageRegion:
        """
        Enlarge the region by ``radius`` grid points on every side.

        Args:
            radius: Single radius for all axes, or one radius per axis
        """
        if isinstance(radius, numbers.Integral):
            radius = (radius,) * self.dimension
        self._check_dimension(len(radius))
        return ImageRegion(
            index=tuple(i - r for i, r in zip(self.index, radius, strict=True)),
            size=tuple(s + 2 * r for s, r in zip(self.size, radius, strict=True)),
        )

    def slices(self, relative_to: ImageRegion | None = None) -> tuple[slice, ...]:
        """
        Array slices addressing this region inside a buffer over ``relative_to``.

        Args:
            relative_to: Region the target array is buffered over
                (default: this region itself, i.e. the full array)

        Raises:
            ValueError: If this region is not inside ``relative_to``
        """
        if relative_to is None:
            relative_to = self
        if not self.is_inside(relative_to):
            raise ValueError(f"{self} is not inside {relative_to}")
        return tuple(
            slice(lo - base, lo - base + s)
            for lo, s, base in zip(self.index, self.size, relative_to.index, strict=True)
        )

    def __str__(self) -> str:
        return f"ImageRegion(index={self.index}, size={self.size})"

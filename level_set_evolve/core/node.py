"""
Level set nodes and ordered node containers.

A LevelSetNode is a grid index paired with a scalar, typically the distance of
that grid point to the zero level set. A NodeContainer is an ordered sequence
of nodes used as a narrow band: the set of grid points an update step visits
when narrow banding is enabled.

Node order is significant to front-propagation algorithms and is preserved.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    from level_set_evolve.core.field import LevelSetImage
    from level_set_evolve.core.region import ImageRegion


@dataclass
class LevelSetNode:
    """
    Grid index with an associated scalar value.

    Nodes compare by ``value`` so they can be sorted or pushed onto a heap
    directly. Equality compares both index and value.

    Attributes:
        index: Absolute N-D grid index
        value: Auxiliary scalar (e.g. signed distance to the front)
    """

    index: tuple[int, ...]
    value: float = 0.0

    def __post_init__(self):
        self.index = tuple(int(i) for i in self.index)

    def __lt__(self, other: LevelSetNode) -> bool:
        if not isinstance(other, LevelSetNode):
            return NotImplemented
        return self.value < other.value

    def __le__(self, other: LevelSetNode) -> bool:
        if not isinstance(other, LevelSetNode):
            return NotImplemented
        return self.value <= other.value

    def __gt__(self, other: LevelSetNode) -> bool:
        if not isinstance(other, LevelSetNode):
            return NotImplemented
        return self.value > other.value

    def __ge__(self, other: LevelSetNode) -> bool:
        if not isinstance(other, LevelSetNode):
            return NotImplemented
        return self.value >= other.value


class NodeContainer(list):
    """
    Ordered, mutable sequence of LevelSetNode.

    A plain list with the element-access vocabulary used by narrow-band code.
    """

    def size(self) -> int:
        return len(self)

    def insert_element(self, position: int, node: LevelSetNode):
        """Place ``node`` at ``position``, growing the container if needed."""
        if position < len(self):
            self[position] = node
        elif position == len(self):
            self.append(node)
        else:
            raise IndexError(f"Cannot insert at {position}: container has {len(self)} nodes")

    def get_element(self, position: int) -> LevelSetNode:
        return self[position]

    def initialize(self):
        """Remove all nodes."""
        self.clear()

    def indices(self) -> tuple[np.ndarray, ...]:
        """
        Node indices as a tuple of per-axis integer arrays (raster order preserved).

        Suitable for numpy fancy indexing once shifted by the buffer origin.
        """
        if not self:
            return ()
        coords = np.array([node.index for node in self], dtype=np.intp)
        return tuple(coords[:, d] for d in range(coords.shape[1]))

    def values(self) -> np.ndarray:
        return np.array([node.value for node in self], dtype=np.float64)


def extract_narrow_band(
    image: LevelSetImage,
    bandwidth: float,
    region: ImageRegion | None = None,
) -> NodeContainer:
    """
    Collect the grid points with |φ| <= bandwidth into a narrow band.

    Update steps that rebuild their band between iterations use this helper;
    the evolution harness itself never filters nodes by bandwidth.

    Args:
        image: Allocated level set image
        bandwidth: Half-width of the band in units of φ
        region: Restrict extraction to this region (default: buffered region)

    Returns:
        NodeContainer in raster (C) order, node value = φ at that index

    Example:
        >>> band = extract_narrow_band(image, bandwidth=3.0)
        >>> evolver.set_input_narrow_band(band)
    """
    if region is None:
        region = image.buffered_region
    phi = image.region_view(region)

    mask = np.abs(phi) <= bandwidth
    local = np.nonzero(mask)
    band = NodeContainer()
    if len(local) == 0 or local[0].size == 0:
        return band

    offsets = np.asarray(region.index, dtype=np.intp)
    for coords, value in zip(np.stack(local, axis=1), phi[mask], strict=True):
        band.append(LevelSetNode(index=tuple((coords + offsets).tolist()), value=float(value)))
    return band

"""
Narrow-band working set of an evolution run.

The caller supplies an input band (an ordered NodeContainer). It becomes the
live working set the update step visits. Update steps that rebuild their band
between iterations install the new sequence with ``replace_working_band``;
the reported size always reflects the live set.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from level_set_evolve.core.node import NodeContainer

if TYPE_CHECKING:
    from collections.abc import Iterable

    from level_set_evolve.core.node import LevelSetNode


class NarrowBandSet:
    """
    Holder for the input narrow band and the live working band.

    The input band is stored by reference. The working band is a shallow copy:
    nodes mutated in place by the update step are visible to the caller, while
    membership changes (rebuilding the band) leave the caller's sequence as
    supplied. Node order is never changed here.

    Example:
        >>> band = NarrowBandSet()
        >>> band.set_input_band(nodes)
        >>> band.size(narrow_banding=True) == len(nodes)
        True
        >>> band.size(narrow_banding=False)
        0
    """

    def __init__(self):
        self._input_band: NodeContainer | None = None
        self._working_band: NodeContainer | None = None

    @staticmethod
    def _as_container(nodes: Iterable[LevelSetNode]) -> NodeContainer:
        if isinstance(nodes, NodeContainer):
            return nodes
        return NodeContainer(nodes)

    def set_input_band(self, nodes: Iterable[LevelSetNode] | None):
        """
        Install the caller-supplied band as the starting working set.

        Args:
            nodes: Ordered nodes; a NodeContainer is kept by reference, any
                other iterable is collected into a new container. None clears.
        """
        if nodes is None:
            self._input_band = None
            self._working_band = None
            return
        self._input_band = self._as_container(nodes)
        self._working_band = NodeContainer(self._input_band)

    @property
    def input_band(self) -> NodeContainer | None:
        """The band supplied by the caller."""
        return self._input_band

    @property
    def working_band(self) -> NodeContainer:
        """Live working set (empty container if no band was supplied)."""
        if self._working_band is None:
            self._working_band = NodeContainer()
        return self._working_band

    def replace_working_band(self, nodes: Iterable[LevelSetNode]):
        """Swap in a rebuilt band; the input band is left as supplied."""
        self._working_band = self._as_container(nodes)

    def reset(self):
        """Restart the working set from the input band (start of a run)."""
        self._working_band = NodeContainer(self._input_band) if self._input_band is not None else None

    def size(self, narrow_banding: bool) -> int:
        """Number of live nodes, or 0 when narrow banding is disabled."""
        if not narrow_banding or self._working_band is None:
            return 0
        return len(self._working_band)

    def __repr__(self) -> str:
        input_size = len(self._input_band) if self._input_band is not None else None
        working_size = len(self._working_band) if self._working_band is not None else None
        return f"NarrowBandSet(input_size={input_size}, working_size={working_size})"

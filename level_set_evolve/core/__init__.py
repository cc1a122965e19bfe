"""
Core data model: index regions, level set images, and narrow-band nodes.
"""

from .field import LevelSetImage
from .node import LevelSetNode, NodeContainer, extract_narrow_band
from .region import ImageRegion

__all__ = [
    "ImageRegion",
    "LevelSetImage",
    "LevelSetNode",
    "NodeContainer",
    "extract_narrow_band",
]

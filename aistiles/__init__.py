"""Measured vessel trajectories: segmentation, stop detection and map-tile rasterisation."""

__version__ = "0.1.0"
__all__ = [
    "errors",
    "geometry",
    "geodesic",
    "multi",
    "wkb",
    "segmenter",
    "planar",
    "stop_cluster",
    "modeling",
    "tiles",
    "tile3d",
]
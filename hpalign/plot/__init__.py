"""
hpalign plotting package.

Submodules:
    - plot.colors: Color constants
    - plot.matrix: DP matrix heatmaps

Example imports:
    from hpalign.plot import plot_forward_matrices
    from hpalign.plot.colors import NT_COLOR
"""

from .colors import (
    NT_COLOR,
    STATE_COLORS,
    BAND_COLOR,
    RUN_COLOR,
    HEATMAP_COLORMAPS,
)

from .matrix import (
    plot_forward_matrices,
    band_mask,
)

__all__ = [
    "NT_COLOR",
    "STATE_COLORS",
    "BAND_COLOR",
    "RUN_COLOR",
    "HEATMAP_COLORMAPS",
    "plot_forward_matrices",
    "band_mask",
]

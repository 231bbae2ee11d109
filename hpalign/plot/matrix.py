"""
DP matrix visualization for hpalign.

Heatmaps of the three state matrices filled by the linear-domain
forward engine (hpalign.dp_core.fill_forward_matrices), shown as log10
probabilities, with the evaluated band outlined and homopolymer runs
marked along the axes.

Functions:
    - band_mask: boolean mask of the cells the band evaluates
    - plot_forward_matrices: lower / middle / upper heatmaps
"""

from typing import Dict, Optional, Sequence, Tuple

import numpy as np
import matplotlib.pyplot as plt
import seaborn as sns

from ..dp_core import ForwardData
from ..runs import run_lengths
from .colors import BAND_COLOR, HEATMAP_COLORMAPS, NT_COLOR, RUN_COLOR, STATE_COLORS

grid_color_map = HEATMAP_COLORMAPS['sequential']


def band_mask(data: ForwardData) -> np.ndarray:
    """
    Boolean (n+1, m+1) mask, True on the banded cells of rows 1..n.
    """
    n_rows, n_cols = data.middle.shape
    mask = np.zeros((n_rows, n_cols), dtype=bool)
    for i, (band_start, band_end) in enumerate(data.bands, start=1):
        mask[i, band_start:band_end + 1] = True
    return mask


def _draw_band_outline(ax, data: ForwardData, color: str, linewidth: float) -> None:
    for i, (band_start, band_end) in enumerate(data.bands, start=1):
        if band_end < band_start:
            continue
        ax.plot([band_start, band_start], [i, i + 1], color=color, linewidth=linewidth)
        ax.plot([band_end + 1, band_end + 1], [i, i + 1], color=color, linewidth=linewidth)


def _draw_runs(ax, seq: Sequence[str], axis: str, color: str) -> None:
    for _, start, length in run_lengths(seq):
        if length < 2:
            continue
        lo, hi = start + 1, start + length + 1
        if axis == "rows":
            ax.axhspan(lo, hi, xmin=0.0, xmax=0.015, color=color, alpha=0.8)
        else:
            ax.axvspan(lo, hi, ymin=0.985, ymax=1.0, color=color, alpha=0.8)


def plot_forward_matrices(
    data: ForwardData,
    v: Sequence[str],
    w: Sequence[str],
    nt_color_map: Optional[Dict[str, str]] = None,
    figsize: Tuple[int, int] = (14, 6),
    colormap: str = grid_color_map,
    show_band: bool = True,
    band_color: str = BAND_COLOR,
    band_linewidth: float = 2.0,
    show_runs: bool = True,
    run_color: str = RUN_COLOR,
    annotate: bool = False,
    tick_fontsize: float = 10.0,
) -> plt.Figure:
    """
    Plot the lower (insertion), middle (match) and upper (deletion)
    forward matrices as log10-probability heatmaps.

    Zero-probability cells (outside the band, or inside a homopolymer
    square) are drawn as missing.

    Parameters
    ----------
    data : ForwardData
        Output of fill_forward_matrices.
    v : sequence of str
        Reference window (rows).
    w : sequence of str
        Read (columns).
    show_band : bool
        Outline the evaluated band on every panel.
    show_runs : bool
        Mark homopolymer runs of length >= 2 along both axes.
    annotate : bool
        Write the log10 value in every cell.

    Returns
    -------
    fig : matplotlib.figure.Figure
        The figure object with three panels.

    Examples
    --------
    >>> data = fill_forward_matrices(v, w, params, min_band_width=4)
    >>> fig = plot_forward_matrices(data, v, w)
    """
    if nt_color_map is None:
        nt_color_map = NT_COLOR

    matrices = [data.lower, data.middle, data.upper]
    states = ["lower", "middle", "upper"]
    titles = ["lower (insertion)", "middle (match)", "upper (deletion)"]

    with np.errstate(divide="ignore"):
        log_matrices = [np.log10(mat) for mat in matrices]

    finite_vals = np.concatenate([mat[np.isfinite(mat)] for mat in log_matrices])
    if finite_vals.size:
        vmin, vmax = finite_vals.min(), finite_vals.max()
    else:
        vmin, vmax = -1.0, 0.0

    cmap = sns.color_palette(colormap, as_cmap=True)
    cmap.set_bad(color="lightgrey")

    xticklabels = [""] + list(w)
    yticklabels = [""] + list(v)

    fig, axes = plt.subplots(
        1, 3, figsize=figsize, sharex=True, sharey=True, constrained_layout=False
    )

    for ax, mat, state, title in zip(axes, log_matrices, states, titles):
        mat_plot = mat.copy()
        mat_plot[~np.isfinite(mat_plot)] = np.nan

        sns.heatmap(
            mat_plot,
            ax=ax,
            cmap=cmap,
            vmin=vmin,
            vmax=vmax,
            square=True,
            cbar=False,
            annot=annotate,
            fmt=".1f",
            xticklabels=xticklabels,
            yticklabels=yticklabels,
        )
        ax.set_title(title, color=STATE_COLORS[state])
        ax.set_xlabel("w (columns)")
        ax.tick_params(top=True, bottom=False, labeltop=True, labelbottom=False)
        ax.xaxis.set_label_position("top")

        for tick, lab in zip(ax.get_xticklabels(), xticklabels):
            tick.set_rotation(0)
            tick.set_color(nt_color_map.get(lab, "black"))
            tick.set_fontweight("bold")
            tick.set_fontsize(tick_fontsize)

        if show_band:
            _draw_band_outline(ax, data, band_color, band_linewidth)
        if show_runs:
            _draw_runs(ax, v, "rows", run_color)
            _draw_runs(ax, w, "cols", run_color)

    axes[0].set_ylabel("v (rows)")
    for tick, lab in zip(axes[0].get_yticklabels(), yticklabels):
        tick.set_rotation(0)
        tick.set_va("center")
        tick.set_color(nt_color_map.get(lab, "black"))
        tick.set_fontweight("bold")
        tick.set_fontsize(tick_fontsize)

    fig.tight_layout()
    return fig

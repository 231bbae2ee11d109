"""
test_plot.py — Smoke tests for the DP matrix heatmaps
"""

import pytest
import numpy as np

matplotlib = pytest.importorskip("matplotlib")
pytest.importorskip("seaborn")
matplotlib.use("Agg")

import matplotlib.pyplot as plt  # noqa: E402

from hpalign.dp_core import fill_forward_matrices  # noqa: E402
from hpalign.plot import band_mask, plot_forward_matrices  # noqa: E402


class TestBandMask:

    def test_mask_matches_bands(self, params):
        data = fill_forward_matrices("ACGTACGTAC", "ACGTCGTAC", params, 2)
        mask = band_mask(data)
        assert mask.shape == data.middle.shape
        assert not mask[0].any()
        assert not mask[:, 0].any()
        for i, (band_start, band_end) in enumerate(data.bands, start=1):
            assert mask[i].sum() == band_end - band_start + 1

    def test_outside_band_is_zero(self, params):
        data = fill_forward_matrices("ACGTACGTAC", "ACGTCGTAC", params, 2)
        mask = band_mask(data)
        mask[0, :] = True
        mask[:, 0] = True
        assert np.all(data.middle[~mask] == 0.0)


class TestPlotForwardMatrices:

    def test_three_panels(self, params):
        v, w = "GAAACT", "GAACT"
        data = fill_forward_matrices(v, w, params, 3)
        fig = plot_forward_matrices(data, v, w)
        try:
            assert len(fig.axes) == 3
            assert [ax.get_title() for ax in fig.axes] == [
                "lower (insertion)", "middle (match)", "upper (deletion)",
            ]
        finally:
            plt.close(fig)

    def test_options(self, params):
        v, w = "ACG", "ACG"
        data = fill_forward_matrices(v, w, params, 2)
        fig = plot_forward_matrices(data, v, w, show_band=False, show_runs=False, annotate=True)
        plt.close(fig)

"""
banding.py — banded DP topology shared by all three engines

For sequences of length n = |v| (rows) and m = |w| (columns) the
effective band width is

    band_width = min_band_width + |n - m|

and row i (1..n) evaluates the columns

    band_middle = floor(m * i / n)
    band_start  = max(band_middle - band_width // 2, 1)
    band_end    = min(band_middle + band_width // 2, m)

Columns outside [band_start, band_end] are never evaluated and have
zero probability.  band_middle is non-decreasing in i, so both band
limits only ever move right.

The log-domain engines keep two rows per state.  BandBuffer holds one
such row and restricts access to the active window [band_start-1,
band_end]: reading to the right of the window yields log-zero (cells
not yet reached by any band), while reading to the left of it, or
writing anywhere outside it, raises BandAccessError.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterator, Sequence, Tuple

import numpy as np

LOG_ZERO = -math.inf


class BandAccessError(IndexError):
    """A DP row was accessed outside its active band."""


# ---------------------------------------------------------------------------
# Band limits
# ---------------------------------------------------------------------------

def check_sequences(v: Sequence[str], w: Sequence[str], min_band_width: int) -> None:
    """
    Reject inputs for which no banded alignment is defined.

    An empty v leaves band_middle undefined (division by |v|); an empty
    w is legal.
    """
    if len(v) == 0:
        raise ValueError("v must be non-empty: the band is undefined for an empty reference")
    if min_band_width < 0:
        raise ValueError(f"min_band_width must be non-negative, got {min_band_width}")


def effective_band_width(n: int, m: int, min_band_width: int) -> int:
    """min_band_width widened by the length difference of the two sequences."""
    return min_band_width + abs(n - m)


def band_limits(i: int, n: int, m: int, band_width: int) -> Tuple[int, int]:
    """
    Column limits (band_start, band_end), inclusive, for DP row i.

    For m = 0 the band is empty and band_start > band_end.
    """
    half = band_width // 2
    band_middle = (m * i) // n
    band_start = band_middle - half if band_middle >= half + 1 else 1
    band_end = band_middle + half if band_middle + half <= m else m
    return band_start, band_end


def iter_bands(n: int, m: int, min_band_width: int) -> Iterator[Tuple[int, int, int]]:
    """Yield (i, band_start, band_end) for rows i = 1..n."""
    band_width = effective_band_width(n, m, min_band_width)
    for i in range(1, n + 1):
        band_start, band_end = band_limits(i, n, m, band_width)
        yield i, band_start, band_end


# ---------------------------------------------------------------------------
# Bounds-checked rolling rows
# ---------------------------------------------------------------------------

class BandBuffer:
    """
    One state's DP row over columns 0..m, with an active window.

    The window is [lo, hi] = [band_start - 1, band_end]; column lo is the
    left boundary of the band and is part of the window so the first
    band cell can read its left neighbour.
    """

    __slots__ = ("values", "lo", "hi")

    def __init__(self, m: int):
        self.values = np.full(m + 1, LOG_ZERO, dtype=float)
        self.lo = 0
        self.hi = m

    def reset(self, band_start: int, band_end: int) -> None:
        """Move the window to [band_start-1, band_end] and clear it to log-zero."""
        self.lo = band_start - 1
        self.hi = max(band_end, self.lo)
        self.values[self.lo:self.hi + 1] = LOG_ZERO

    def __getitem__(self, j: int) -> float:
        if j > self.hi:
            return LOG_ZERO
        if j < self.lo:
            raise BandAccessError(
                f"read of column {j} left of the active band [{self.lo}, {self.hi}]"
            )
        return self.values[j]

    def __setitem__(self, j: int, value: float) -> None:
        if not self.lo <= j <= self.hi:
            raise BandAccessError(
                f"write to column {j} outside the active band [{self.lo}, {self.hi}]"
            )
        self.values[j] = value


@dataclass
class StateRow:
    """The lower (insertion), middle (match) and upper (deletion) rows."""
    lower: BandBuffer
    middle: BandBuffer
    upper: BandBuffer

    @classmethod
    def empty(cls, m: int) -> "StateRow":
        return cls(BandBuffer(m), BandBuffer(m), BandBuffer(m))

    def reset(self, band_start: int, band_end: int) -> None:
        self.lower.reset(band_start, band_end)
        self.middle.reset(band_start, band_end)
        self.upper.reset(band_start, band_end)

"""
dp_core.py — banded pair-HMM dynamic programming engines

Three engines share one three-state model and the banding scheme of
banding.py.  The states are

    lower  : insertion      (consumes a symbol of v, moves down a row)
    middle : match/mismatch (consumes one symbol of each, moves diagonally)
    upper  : deletion       (consumes a symbol of w, moves right a column)

and every engine returns a single natural-log probability read from the
middle state of the final cell (n, m):

  - forward_non_numerically_stable : total probability over all paths,
        full (n+1) x (m+1) matrices in the linear domain, with the
        homopolymer shortcut.
  - forward_numerically_stable     : total probability over all paths,
        two rolling rows per state in the log domain (log-sum-exp).
  - viterbi_max_scoring_alignment  : probability of the best single path,
        two rolling rows per state in the log domain (max).
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Sequence, Tuple

import numpy as np
from numpy.typing import NDArray

from .banding import (
    StateRow,
    check_sequences,
    effective_band_width,
    iter_bands,
)
from .params import (
    AlignmentParameters,
    LnAlignmentParameters,
    ln_prob,
)
from .runs import first_occ_vector, last_occ_vector

logger = logging.getLogger(__name__)


class InvariantViolation(RuntimeError):
    """An engine produced a result that no valid computation can produce."""


# ---------------------------------------------------------------------------
# Linear-domain DP state
# ---------------------------------------------------------------------------

@dataclass
class ForwardData:
    """
    Full DP matrices of the linear-domain forward engine.

    Attributes
    ----------
    lower, middle, upper : (n+1, m+1) arrays of float
        Forward probabilities of ending in the insertion, match and
        deletion state at each cell.  Cells outside the band are 0.

    bands : list of (band_start, band_end)
        Evaluated column range of each row; bands[i-1] is row i.
    """
    lower: NDArray[np.floating]
    middle: NDArray[np.floating]
    upper: NDArray[np.floating]
    bands: List[Tuple[int, int]] = field(default_factory=list)

    @property
    def probability(self) -> float:
        return float(self.middle[-1, -1])

    @property
    def log_probability(self) -> float:
        return ln_prob(self.probability)


def init_forward_matrices(n: int, m: int, params: AlignmentParameters) -> ForwardData:
    """
    Allocate the linear-domain matrices and fill the boundary.

    The first row of upper holds runs of pure deletions and the first
    column of lower runs of pure insertions, each decaying geometrically
    with the continuation probability.
    """
    t = params.transition_probs

    lower = np.zeros((n + 1, m + 1), dtype=float)
    middle = np.zeros((n + 1, m + 1), dtype=float)
    upper = np.zeros((n + 1, m + 1), dtype=float)

    middle[0, 0] = 1.0

    if m >= 1:
        upper[0, 1] = t.deletion_from_match
        for j in range(2, m + 1):
            upper[0, j] = upper[0, j - 1] * t.deletion_from_deletion

    if n >= 1:
        lower[1, 0] = t.insertion_from_match
        for i in range(2, n + 1):
            lower[i, 0] = lower[i - 1, 0] * t.insertion_from_insertion

    return ForwardData(lower=lower, middle=middle, upper=upper)


# ---------------------------------------------------------------------------
# Linear-domain per-cell updates
# ---------------------------------------------------------------------------

def baseline_update(
    v: Sequence[str],
    w: Sequence[str],
    params: AlignmentParameters,
    data: ForwardData,
    i: int,
    j: int,
) -> None:
    """Standard three-state pair-HMM update at cell (i, j)."""
    t = params.transition_probs
    e = params.emission_probs
    lower, middle, upper = data.lower, data.middle, data.upper

    lower_continue = lower[i - 1, j] * t.insertion_from_insertion
    lower_from_middle = middle[i - 1, j] * t.insertion_from_match
    lower[i, j] = e.insertion * (lower_continue + lower_from_middle)

    upper_continue = upper[i, j - 1] * t.deletion_from_deletion
    upper_from_middle = middle[i, j - 1] * t.deletion_from_match
    upper[i, j] = e.deletion * (upper_continue + upper_from_middle)

    middle_from_lower = lower[i - 1, j - 1] * t.match_from_insertion
    middle_continue = middle[i - 1, j - 1] * t.match_from_match
    middle_from_upper = upper[i - 1, j - 1] * t.match_from_deletion

    emission = e.equal if v[i - 1] == w[j - 1] else e.not_equal
    middle[i, j] = emission * (middle_from_lower + middle_continue + middle_from_upper)


def homopolymer_perimeter(
    i: int,
    j: int,
    run_row: int,
    run_col: int,
) -> List[Tuple[int, int]]:
    """
    Cells bounding the homopolymer square that ends at (i, j).

    run_row / run_col are the DP row and column just before the run
    starts on v and w.  The perimeter is the start column walked upward
    from row i-1, the corner (run_row, run_col), then the start row
    walked right up to column j-1.
    """
    cells = [(h_i, run_col) for h_i in range(i - 1, run_row, -1)]
    cells.append((run_row, run_col))
    cells.extend((run_row, h_j) for h_j in range(run_col + 1, j))
    return cells


def homopolymer_update(
    v: Sequence[str],
    params: AlignmentParameters,
    data: ForwardData,
    i: int,
    j: int,
    run_row: int,
    run_col: int,
) -> None:
    """
    Homopolymer shortcut at cell (i, j).

    The whole run is taken as a single transition from each perimeter
    cell, weighted by the probability of observing the run with lengths
    (j - h_j) along w and (i - h_i) along v.  The lower and upper states
    of (i, j) stay at zero.
    """
    base = v[i - 1]
    hp_probs = params.homopolymer_probs
    lower, middle, upper = data.lower, data.middle, data.upper

    total = 0.0
    for h_i, h_j in homopolymer_perimeter(i, j, run_row, run_col):
        prob = hp_probs.get(base, j - h_j, i - h_i)
        if prob == 0.0:
            continue
        total += (lower[h_i, h_j] + middle[h_i, h_j] + upper[h_i, h_j]) * prob
    middle[i, j] += total


def fill_forward_matrices(
    v: Sequence[str],
    w: Sequence[str],
    params: AlignmentParameters,
    min_band_width: int,
    ref_runs: Optional[Tuple[NDArray[np.integer], NDArray[np.integer]]] = None,
) -> ForwardData:
    """
    Fill the linear-domain forward matrices over the band.

    A cell whose symbols match and which lies inside a homopolymer square
    (not the first symbol of its run on at least one sequence) is handled
    by the shortcut when it is on the bottom or right edge of the square
    (last symbol of its run on at least one sequence) and left at zero
    otherwise; interior cells are never read.

    ref_runs, if given, is the precomputed (first_occ, last_occ) pair for v.
    """
    _check_domain(params, AlignmentParameters, "forward_non_numerically_stable")
    check_sequences(v, w, min_band_width)

    n, m = len(v), len(w)
    data = init_forward_matrices(n, m, params)

    if ref_runs is None:
        first_v, last_v = first_occ_vector(v), last_occ_vector(v)
    else:
        first_v, last_v = ref_runs
    first_w, last_w = first_occ_vector(w), last_occ_vector(w)

    for i, band_start, band_end in iter_bands(n, m, min_band_width):
        data.bands.append((band_start, band_end))
        for j in range(band_start, band_end + 1):
            in_run = first_v[i - 1] != i - 1 or first_w[j - 1] != j - 1
            if v[i - 1] == w[j - 1] and in_run:
                if last_v[i - 1] == i - 1 or last_w[j - 1] == j - 1:
                    homopolymer_update(
                        v, params, data, i, j,
                        run_row=int(first_v[i - 1]),
                        run_col=int(first_w[j - 1]),
                    )
            else:
                baseline_update(v, w, params, data, i, j)

    return data


def forward_non_numerically_stable(
    v: Sequence[str],
    w: Sequence[str],
    params: AlignmentParameters,
    min_band_width: int,
    ref_runs: Optional[Tuple[NDArray[np.integer], NDArray[np.integer]]] = None,
) -> float:
    """
    Forward log-likelihood computed in the linear probability domain.

    Keeps the full matrices, so memory grows with |v| * |w|, and long
    sequences underflow to a probability of 0 (log-likelihood -inf).
    Meant for short inputs and for cross-checking the log-domain engine.
    """
    data = fill_forward_matrices(v, w, params, min_band_width, ref_runs=ref_runs)
    result = _checked_result(data.log_probability, "forward_non_numerically_stable")
    logger.debug(
        "forward (linear): n=%d m=%d band_width=%d log_prob=%g",
        len(v), len(w), effective_band_width(len(v), len(w), min_band_width), result,
    )
    return result


# ---------------------------------------------------------------------------
# Log-domain engines
# ---------------------------------------------------------------------------

def _log_sum_exp(*candidates: float) -> float:
    total = candidates[0]
    for c in candidates[1:]:
        total = np.logaddexp(total, c)
    return float(total)


def _max_strict(*candidates: float) -> float:
    best = candidates[0]
    for c in candidates[1:]:
        if c > best:
            best = c
    return best


def _init_log_rows(m: int, params: LnAlignmentParameters) -> Tuple[StateRow, StateRow]:
    """Row 0 in full (start cell plus a run of deletions) and a spare row."""
    t = params.transition_probs
    prev = StateRow.empty(m)
    prev.middle[0] = 0.0
    if m >= 1:
        prev.upper[1] = t.deletion_from_match
        for j in range(2, m + 1):
            prev.upper[j] = prev.upper[j - 1] + t.deletion_from_deletion
    return prev, StateRow.empty(m)


def _run_log_dp(
    v: Sequence[str],
    w: Sequence[str],
    params: LnAlignmentParameters,
    min_band_width: int,
    combine: Callable[..., float],
) -> float:
    """
    Banded log-domain DP with two rows per state.

    combine merges the candidate log-probabilities entering a state:
    log-sum-exp for the forward algorithm, max for Viterbi.  After each
    row the two StateRows swap roles; the new current row is re-banded
    before use, so nothing from two rows back is ever read.
    """
    t = params.transition_probs
    e = params.emission_probs

    n, m = len(v), len(w)
    prev, curr = _init_log_rows(m, params)

    for i, band_start, band_end in iter_bands(n, m, min_band_width):
        curr.reset(band_start, band_end)
        if band_start == 1:
            if i == 1:
                curr.lower[0] = t.insertion_from_match
            else:
                curr.lower[0] = prev.lower[0] + t.insertion_from_insertion

        vi = v[i - 1]
        for j in range(band_start, band_end + 1):
            lower_continue = prev.lower[j] + t.insertion_from_insertion
            lower_from_middle = prev.middle[j] + t.insertion_from_match
            curr.lower[j] = e.insertion + combine(lower_continue, lower_from_middle)

            upper_continue = curr.upper[j - 1] + t.deletion_from_deletion
            upper_from_middle = curr.middle[j - 1] + t.deletion_from_match
            curr.upper[j] = e.deletion + combine(upper_continue, upper_from_middle)

            middle_from_lower = prev.lower[j - 1] + t.match_from_insertion
            middle_continue = prev.middle[j - 1] + t.match_from_match
            middle_from_upper = prev.upper[j - 1] + t.match_from_deletion
            emission = e.equal if vi == w[j - 1] else e.not_equal
            curr.middle[j] = emission + combine(middle_from_lower, middle_continue, middle_from_upper)

        prev, curr = curr, prev

    return float(prev.middle[m])


def forward_numerically_stable(
    v: Sequence[str],
    w: Sequence[str],
    params: LnAlignmentParameters,
    min_band_width: int,
) -> float:
    """
    Forward log-likelihood of w given v, summed over all banded paths.

    Homopolymer runs go through the ordinary match recurrence one symbol
    at a time; the homopolymer table is not consulted.
    """
    _check_domain(params, LnAlignmentParameters, "forward_numerically_stable")
    check_sequences(v, w, min_band_width)

    result = _checked_result(
        _run_log_dp(v, w, params, min_band_width, _log_sum_exp),
        "forward_numerically_stable",
    )
    logger.debug(
        "forward (log): n=%d m=%d band_width=%d log_prob=%g",
        len(v), len(w), effective_band_width(len(v), len(w), min_band_width), result,
    )
    return result


def viterbi_max_scoring_alignment(
    v: Sequence[str],
    w: Sequence[str],
    params: LnAlignmentParameters,
    min_band_width: int,
) -> float:
    """
    Log-probability of the single highest-scoring banded alignment path.

    Identical to forward_numerically_stable with every log-sum-exp
    replaced by a max; a candidate replaces the running maximum only on
    strict improvement.  Never exceeds the forward result.
    """
    _check_domain(params, LnAlignmentParameters, "viterbi_max_scoring_alignment")
    check_sequences(v, w, min_band_width)

    result = _checked_result(
        _run_log_dp(v, w, params, min_band_width, _max_strict),
        "viterbi_max_scoring_alignment",
    )
    logger.debug(
        "viterbi (log): n=%d m=%d band_width=%d log_prob=%g",
        len(v), len(w), effective_band_width(len(v), len(w), min_band_width), result,
    )
    return result


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _check_domain(params, expected: type, engine: str) -> None:
    if not isinstance(params, expected):
        raise TypeError(
            f"{engine} expects {expected.__name__}, got {type(params).__name__}"
        )


def _checked_result(value: float, engine: str) -> float:
    if math.isnan(value):
        raise InvariantViolation(f"{engine} returned NaN")
    return value

"""
validation.py — independent baselines and regression helpers for hpalign

This module provides unbanded full-matrix versions of the two
log-domain engines (forward_unbanded, viterbi_unbanded), a brute-force
path enumerator for tiny inputs (enumerate_alignment_paths), and small
helpers returning the pairs of numbers that tests compare.

The goals are:

  1. Verify that the banded engines match the unbanded recurrence
     once the band covers the whole matrix.

  2. Verify that the recurrence itself sums (forward) or maximizes
     (Viterbi) over exactly the set of alignment paths, by checking
     it against explicit enumeration.

  3. Verify the relations between engines: linear vs log forward on
     sequences without homopolymer runs, Viterbi <= forward, and
     monotonicity of the forward result in the band width.

This module is independent of dp_core: the recurrences are written out
again over full matrices so that bugs in dp_core cannot mask each other.
"""

from typing import List, Sequence, Tuple

import numpy as np

from .dp_core import (
    forward_non_numerically_stable,
    forward_numerically_stable,
    viterbi_max_scoring_alignment,
)
from .params import AlignmentParameters, LnAlignmentParameters
from .runs import first_occ_vector


def full_band_width(n: int, m: int) -> int:
    """A min_band_width large enough for every row to cover columns 1..m."""
    return 2 * (n + m) + 2


def _unbanded(v: Sequence[str], w: Sequence[str], params: LnAlignmentParameters, viterbi: bool) -> float:
    t = params.transition_probs
    e = params.emission_probs
    n, m = len(v), len(w)

    if viterbi:
        combine = np.max
    else:
        combine = np.logaddexp.reduce

    L = np.full((n + 1, m + 1), -np.inf)   # insertion
    M = np.full((n + 1, m + 1), -np.inf)   # match
    U = np.full((n + 1, m + 1), -np.inf)   # deletion

    M[0, 0] = 0.0
    for j in range(1, m + 1):
        U[0, j] = t.deletion_from_match + (j - 1) * t.deletion_from_deletion
    for i in range(1, n + 1):
        L[i, 0] = t.insertion_from_match + (i - 1) * t.insertion_from_insertion

    for i in range(1, n + 1):
        for j in range(1, m + 1):
            L[i, j] = e.insertion + combine([
                L[i - 1, j] + t.insertion_from_insertion,
                M[i - 1, j] + t.insertion_from_match,
            ])
            U[i, j] = e.deletion + combine([
                U[i, j - 1] + t.deletion_from_deletion,
                M[i, j - 1] + t.deletion_from_match,
            ])
            emit = e.equal if v[i - 1] == w[j - 1] else e.not_equal
            M[i, j] = emit + combine([
                L[i - 1, j - 1] + t.match_from_insertion,
                M[i - 1, j - 1] + t.match_from_match,
                U[i - 1, j - 1] + t.match_from_deletion,
            ])
    return float(M[n, m])


def forward_unbanded(v: Sequence[str], w: Sequence[str], params: LnAlignmentParameters) -> float:
    """
    Full-matrix forward log-likelihood without banding.
    """
    return _unbanded(v, w, params, viterbi=False)


def viterbi_unbanded(v: Sequence[str], w: Sequence[str], params: LnAlignmentParameters) -> float:
    """
    Full-matrix best-path log-probability without banding.
    """
    return _unbanded(v, w, params, viterbi=True)


# ---------------------------------------------------------------------------
# Brute-force path enumeration
# ---------------------------------------------------------------------------

# states
LOWER, MIDDLE, UPPER = 0, 1, 2


def enumerate_alignment_paths(
    v: Sequence[str],
    w: Sequence[str],
    params: LnAlignmentParameters,
) -> List[Tuple[Tuple[int, ...], float]]:
    """
    Every alignment path from the start cell (0, 0) to the middle state
    of (n, m), with its log-probability.

    A path is the tuple of states it visits after the start.  Moves:

        lower  : (i, j) -> (i+1, j)     from lower or middle
        upper  : (i, j) -> (i, j+1)     from upper or middle
        middle : (i, j) -> (i+1, j+1)   from any state

    Emissions apply only to cells with i >= 1 and j >= 1; the leading
    runs along row 0 and column 0 carry transitions only.

    The number of paths grows exponentially: keep n, m <= 5.
    """
    t = params.transition_probs
    e = params.emission_probs
    n, m = len(v), len(w)

    into = {
        LOWER: {LOWER: t.insertion_from_insertion, MIDDLE: t.insertion_from_match},
        UPPER: {UPPER: t.deletion_from_deletion, MIDDLE: t.deletion_from_match},
        MIDDLE: {
            LOWER: t.match_from_insertion,
            MIDDLE: t.match_from_match,
            UPPER: t.match_from_deletion,
        },
    }
    step = {LOWER: (1, 0), UPPER: (0, 1), MIDDLE: (1, 1)}

    paths = []

    def emission(state: int, i: int, j: int) -> float:
        if i == 0 or j == 0:
            return 0.0
        if state == LOWER:
            return e.insertion
        if state == UPPER:
            return e.deletion
        return e.equal if v[i - 1] == w[j - 1] else e.not_equal

    def walk(i: int, j: int, state: int, logp: float, visited: Tuple[int, ...]) -> None:
        if i == n and j == m:
            if state == MIDDLE:
                paths.append((visited, logp))
            return
        for nxt, (di, dj) in step.items():
            ni, nj = i + di, j + dj
            if ni > n or nj > m or state not in into[nxt]:
                continue
            walk(ni, nj, nxt, logp + into[nxt][state] + emission(nxt, ni, nj), visited + (nxt,))

    walk(0, 0, MIDDLE, 0.0, ())
    return paths


def enumerated_forward_and_viterbi(
    v: Sequence[str],
    w: Sequence[str],
    params: LnAlignmentParameters,
) -> Tuple[float, float]:
    """(log of the summed path probability, best path log-probability)."""
    logps = [logp for _, logp in enumerate_alignment_paths(v, w, params)]
    if not logps:
        return -np.inf, -np.inf
    return float(np.logaddexp.reduce(logps)), float(max(logps))


# ---------------------------------------------------------------------------
# Engine comparisons
# ---------------------------------------------------------------------------

def has_homopolymer(seq: Sequence[str]) -> bool:
    """True if seq contains a run of two or more identical symbols."""
    first = first_occ_vector(seq)
    return any(first[i] != i for i in range(len(seq)))


def check_stable_vs_naive(
    v: Sequence[str],
    w: Sequence[str],
    params: AlignmentParameters,
    min_band_width: int,
) -> Tuple[float, float]:
    """
    Compare the linear-domain and log-domain forward engines.

    Returns
    -------
    naive : float
        exp of forward_non_numerically_stable.
    stable : float
        exp of forward_numerically_stable.

    The two agree when neither sequence contains a homopolymer run,
    since only then does the linear engine never take its shortcut.
    """
    naive = forward_non_numerically_stable(v, w, params, min_band_width)
    stable = forward_numerically_stable(v, w, params.ln(), min_band_width)
    return float(np.exp(naive)), float(np.exp(stable))


def check_viterbi_bound(
    v: Sequence[str],
    w: Sequence[str],
    params: LnAlignmentParameters,
    min_band_width: int,
) -> Tuple[float, float]:
    """
    Returns (viterbi, forward) log-probabilities; the caller asserts
    viterbi <= forward.
    """
    viterbi = viterbi_max_scoring_alignment(v, w, params, min_band_width)
    forward = forward_numerically_stable(v, w, params, min_band_width)
    return viterbi, forward


def check_band_monotonic(
    v: Sequence[str],
    w: Sequence[str],
    params: LnAlignmentParameters,
    band_widths: Sequence[int],
) -> List[float]:
    """
    Forward log-probabilities for each band width in band_widths.
    For increasing widths the caller asserts the list is non-decreasing.
    """
    return [forward_numerically_stable(v, w, params, bw) for bw in band_widths]


def diagonal_log_probability(length: int, params: LnAlignmentParameters) -> float:
    """
    Log-probability of the all-match diagonal for two identical
    sequences of the given length: one match-from-match transition and
    one equal emission per position, the first transition leaving the
    start cell.
    """
    t = params.transition_probs
    e = params.emission_probs
    return length * (t.match_from_match + e.equal)

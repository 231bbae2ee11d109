"""
runs.py — homopolymer run index vectors

For a sequence seq, the run index vectors give, for every position i,
the first and last index of the maximal run of identical symbols that
contains i:

    seq       = A T C C C C T
    first_occ = 0 1 2 2 2 2 6
    last_occ  = 0 1 5 5 5 5 6

so that first_occ[i] <= i <= last_occ[i], and both vectors change value
only at run boundaries.  The linear-domain forward engine uses them to
locate the corner of each homopolymer square.
"""
from __future__ import annotations

from typing import List, Sequence, Tuple

import numpy as np
from numpy.typing import NDArray


def first_occ_vector(seq: Sequence[str]) -> NDArray[np.int64]:
    """
    Return occ such that occ[i] is the first index of the run of
    identical symbols containing seq[i].  One left-to-right pass.
    """
    occ = np.empty(len(seq), dtype=np.int64)
    prev_char = None
    prev_occ = 0
    for i, c in enumerate(seq):
        if c != prev_char:
            prev_occ = i
            prev_char = c
        occ[i] = prev_occ
    return occ


def last_occ_vector(seq: Sequence[str]) -> NDArray[np.int64]:
    """
    Return occ such that occ[i] is the last index of the run of
    identical symbols containing seq[i].  One right-to-left pass.
    """
    n = len(seq)
    occ = np.empty(n, dtype=np.int64)
    prev_char = None
    prev_occ = n - 1
    for i in range(n - 1, -1, -1):
        c = seq[i]
        if c != prev_char:
            prev_occ = i
            prev_char = c
        occ[i] = prev_occ
    return occ


def run_lengths(seq: Sequence[str]) -> List[Tuple[str, int, int]]:
    """
    Run-length encoding of seq as (symbol, start, length) triples.

    >>> run_lengths("ATCCCCT")
    [('A', 0, 1), ('T', 1, 1), ('C', 2, 4), ('T', 6, 1)]
    """
    first = first_occ_vector(seq)
    last = last_occ_vector(seq)
    runs = []
    for i in range(len(seq)):
        if first[i] == i:
            runs.append((seq[i], i, int(last[i]) - i + 1))
    return runs

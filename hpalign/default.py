"""
default.py — Default parameters for hpalign

Provides the DNA alphabet and a normalized pair-HMM parameter set that
is used throughout examples and tests.  Trained tables come from the
upstream estimator; these defaults only make the engines usable out of
the box.
"""

from typing import Iterable

from .aligners import AlignmentType
from .params import (
    AlignmentParameters,
    EmissionProbs,
    HomopolymerProbs,
    TransitionProbs,
)

# DNA alphabet
BASES = ("A", "C", "G", "T")
UNKNOWN_BASE = "N"

DEFAULT_MIN_BAND_WIDTH = 20

TRANSITION_PROBS = TransitionProbs(
    match_from_match=0.90,
    insertion_from_match=0.05,
    deletion_from_match=0.05,
    insertion_from_insertion=0.30,
    match_from_insertion=0.70,
    deletion_from_deletion=0.30,
    match_from_deletion=0.70,
)

EMISSION_PROBS = EmissionProbs(
    equal=0.97,
    not_equal=0.01,
    insertion=0.25,
    deletion=0.25,
)


def default_homopolymer_probs(
    max_len: int = 10,
    p_correct: float = 0.9,
    bases: Iterable[str] = BASES,
) -> HomopolymerProbs:
    """
    Homopolymer table where a run of length L is read as L with
    probability p_correct and as L-1 or L+1 with the remainder shared
    between whichever of those lie in 1..max_len.  Every other length
    pair is absent, i.e. impossible.
    """
    if not 0.0 <= p_correct <= 1.0:
        raise ValueError(f"p_correct must be in [0, 1], got {p_correct}")
    table = {}
    for base in bases:
        for length in range(1, max_len + 1):
            neighbours = [k for k in (length - 1, length + 1) if 1 <= k <= max_len]
            table[(base, length, length)] = p_correct if neighbours else 1.0
            for k in neighbours:
                table[(base, length, k)] = (1.0 - p_correct) / len(neighbours)
    return HomopolymerProbs(table)


def default_params() -> AlignmentParameters:
    """Default linear-domain parameter bundle."""
    return AlignmentParameters(
        transition_probs=TRANSITION_PROBS,
        emission_probs=EMISSION_PROBS,
        homopolymer_probs=default_homopolymer_probs(),
    )


def align_params(
    alignment_type: AlignmentType = AlignmentType.FORWARD_NUMERICALLY_STABLE,
    min_band_width: int = DEFAULT_MIN_BAND_WIDTH,
) -> dict:
    """
    Bundle default parameters into a dict for easy unpacking, in the
    domain the chosen engine expects.

    Usage:
        logp = align_pair(v, w, **align_params(AlignmentType.VITERBI_MAX_SCORING_ALIGNMENT))
    """
    params = default_params()
    return {
        "params": params if alignment_type.linear_domain else params.ln(),
        "min_band_width": min_band_width,
        "alignment_type": alignment_type,
    }

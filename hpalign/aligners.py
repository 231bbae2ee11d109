"""
aligners.py — User-facing alignment helpers for hpalign

This module selects one of the three engines in dp_core (or their
compiled counterparts in fast) and runs it on a (v, w) pair.  The
engines are a closed set, named by AlignmentType, and each one expects
its parameters in one domain:

    FORWARD_NON_NUMERICALLY_STABLE : AlignmentParameters   (linear)
    FORWARD_NUMERICALLY_STABLE     : LnAlignmentParameters (log)
    VITERBI_MAX_SCORING_ALIGNMENT  : LnAlignmentParameters (log)

PairAligner is the convenience for scoring many reads against one
reference window: it converts the parameters once and keeps them.
"""

from __future__ import annotations

import enum
import logging
from typing import Iterable, List, Sequence, Union

from .dp_core import (
    forward_non_numerically_stable,
    forward_numerically_stable,
    viterbi_max_scoring_alignment,
)
from .fast import (
    forward_numerically_stable_fast,
    viterbi_max_scoring_alignment_fast,
)
from .params import AlignmentParameters, LnAlignmentParameters
from .runs import first_occ_vector, last_occ_vector

logger = logging.getLogger(__name__)

Params = Union[AlignmentParameters, LnAlignmentParameters]


class AlignmentType(enum.Enum):
    """The three alignment engines."""

    FORWARD_NON_NUMERICALLY_STABLE = "forward_non_numerically_stable"
    FORWARD_NUMERICALLY_STABLE = "forward_numerically_stable"
    VITERBI_MAX_SCORING_ALIGNMENT = "viterbi_max_scoring_alignment"

    @property
    def linear_domain(self) -> bool:
        """True if the engine takes linear-domain parameters."""
        return self is AlignmentType.FORWARD_NON_NUMERICALLY_STABLE

    @property
    def params_type(self) -> type:
        return AlignmentParameters if self.linear_domain else LnAlignmentParameters


_LOG_ENGINES = {
    AlignmentType.FORWARD_NUMERICALLY_STABLE: forward_numerically_stable,
    AlignmentType.VITERBI_MAX_SCORING_ALIGNMENT: viterbi_max_scoring_alignment,
}

_FAST_ENGINES = {
    AlignmentType.FORWARD_NUMERICALLY_STABLE: forward_numerically_stable_fast,
    AlignmentType.VITERBI_MAX_SCORING_ALIGNMENT: viterbi_max_scoring_alignment_fast,
}


# ---------------------------------------------------------------------------
# Core helper: run one engine on one pair
# ---------------------------------------------------------------------------

def align_pair(
    v: Sequence[str],
    w: Sequence[str],
    params: Params,
    min_band_width: int,
    alignment_type: AlignmentType = AlignmentType.FORWARD_NUMERICALLY_STABLE,
    fast: bool = False,
    ref_runs=None,
) -> float:
    """
    Log-probability of w given v under the chosen engine.

    Parameters
    ----------
    v, w : sequence of str
        Reference-like and read-like symbol sequences.  v must be
        non-empty; w may be empty.

    params : AlignmentParameters or LnAlignmentParameters
        Parameter bundle in the domain alignment_type expects.

    min_band_width : int
        Minimum band width; widened by |len(v) - len(w)|.

    alignment_type : AlignmentType
        Which engine to run.

    fast : bool, default False
        Use the Cython kernel for the log-domain engines.

    ref_runs : (first_occ, last_occ), optional
        Precomputed run index vectors of v, used by the linear-domain
        engine in place of recomputing them.

    Returns
    -------
    float
        Natural-log probability: the marginal over all banded paths for
        the forward engines, the best single path for Viterbi.
    """
    alignment_type = AlignmentType(alignment_type)
    if not isinstance(params, alignment_type.params_type):
        raise TypeError(
            f"{alignment_type.name} expects {alignment_type.params_type.__name__}, "
            f"got {type(params).__name__}"
        )

    if alignment_type.linear_domain:
        if fast:
            raise ValueError(f"no compiled engine for {alignment_type.name}")
        return forward_non_numerically_stable(v, w, params, min_band_width, ref_runs=ref_runs)

    engines = _FAST_ENGINES if fast else _LOG_ENGINES
    return engines[alignment_type](v, w, params, min_band_width)


# ---------------------------------------------------------------------------
# Many reads against one reference window
# ---------------------------------------------------------------------------

class PairAligner:
    """
    Score reads against a fixed reference window.

    The log-domain parameter conversion and the reference's run index
    vectors are computed once at construction.

    Parameters
    ----------
    ref : sequence of str
        Reference window v (non-empty).

    params : AlignmentParameters
        Linear-domain bundle; the log-domain form is derived from it.

    min_band_width : int
        Minimum band width passed to the engine.

    alignment_type : AlignmentType
        Engine used by align().

    fast : bool, default False
        Use the Cython kernel for the log-domain engines.
    """

    def __init__(
        self,
        ref: Sequence[str],
        params: AlignmentParameters,
        min_band_width: int,
        alignment_type: AlignmentType = AlignmentType.FORWARD_NUMERICALLY_STABLE,
        fast: bool = False,
    ):
        if not isinstance(params, AlignmentParameters):
            raise TypeError(
                f"PairAligner expects linear-domain AlignmentParameters, got {type(params).__name__}"
            )
        if len(ref) == 0:
            raise ValueError("ref must be non-empty")
        self.ref = ref
        self.params = params
        self.ln_params = params.ln()
        self.min_band_width = min_band_width
        self.alignment_type = AlignmentType(alignment_type)
        self.fast = fast
        self.first_occ = first_occ_vector(ref)
        self.last_occ = last_occ_vector(ref)

    def engine_params(self) -> Params:
        """The bundle in the domain of the configured engine."""
        return self.params if self.alignment_type.linear_domain else self.ln_params

    def align(self, read: Sequence[str]) -> float:
        """Log-probability of read given the reference window."""
        return align_pair(
            self.ref,
            read,
            self.engine_params(),
            self.min_band_width,
            alignment_type=self.alignment_type,
            fast=self.fast,
            ref_runs=(self.first_occ, self.last_occ),
        )

    def align_many(self, reads: Iterable[Sequence[str]]) -> List[float]:
        scores = [self.align(read) for read in reads]
        logger.debug("scored %d reads against a %d-long window", len(scores), len(self.ref))
        return scores

    def homopolymer_runs(self) -> List[tuple]:
        """(base, start, length) for each run of length >= 2 in the reference."""
        runs = []
        for i in range(len(self.ref)):
            if self.first_occ[i] == i and self.last_occ[i] > i:
                runs.append((self.ref[i], i, int(self.last_occ[i]) - i + 1))
        return runs

    def __repr__(self) -> str:
        return (
            f"PairAligner(len(ref)={len(self.ref)}, min_band_width={self.min_band_width}, "
            f"alignment_type={self.alignment_type.name}, fast={self.fast})"
        )

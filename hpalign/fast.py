"""
fast.py — Cython-backed log-domain engines

Drop-in replacements for the two log-domain engines of dp_core:

    forward_numerically_stable_fast(v, w, params, min_band_width)
    viterbi_max_scoring_alignment_fast(v, w, params, min_band_width)

They:
  * encode v and w as integer codes (only symbol equality matters),
  * flatten the log-domain transition and emission tables into arrays,
  * call banded_log_dp_core (Cython),
  * return the same log-probability as the pure-Python engine.

The linear-domain engine has no compiled counterpart.
"""
from __future__ import annotations

import logging
from typing import Sequence

import numpy as np

from .banding import check_sequences
from .dp_core import _check_domain, _checked_result
from .params import LnAlignmentParameters

try:
    from ._cython.banded_dp import banded_log_dp_core
    CYTHON_AVAILABLE = True
except ImportError:
    banded_log_dp_core = None  # Placeholder to avoid NameError
    CYTHON_AVAILABLE = False

logger = logging.getLogger(__name__)


def _cython_not_available_error():
    """Raise a helpful error if the Cython extension is not available."""
    raise ImportError(
        "The Cython extension 'hpalign._cython.banded_dp' is not available.\n"
        "This usually means the extension failed to compile during installation.\n\n"
        "To fix this:\n"
        "  1) Ensure a C compiler is installed (gcc, MSVC, etc.).\n"
        "  2) Reinstall hpalign with pip install -e . --force-reinstall\n\n"
        "Alternatively, use the pure-Python engines in hpalign.dp_core"
    )


def _encode_sequence(seq: Sequence[str]) -> np.ndarray:
    """
    Encode a sequence of single-character symbols into int32 codes.
    """
    codes = np.empty(len(seq), dtype=np.int32)
    for i, ch in enumerate(seq):
        codes[i] = ord(ch)
    return codes


def _run_fast(
    v: Sequence[str],
    w: Sequence[str],
    params: LnAlignmentParameters,
    min_band_width: int,
    viterbi: bool,
    engine: str,
) -> float:
    if not CYTHON_AVAILABLE:
        _cython_not_available_error()
    _check_domain(params, LnAlignmentParameters, engine)
    check_sequences(v, w, min_band_width)

    result = banded_log_dp_core(
        _encode_sequence(v),
        _encode_sequence(w),
        params.transition_probs.as_array(),
        params.emission_probs.as_array(),
        int(min_band_width),
        viterbi,
    )
    result = _checked_result(float(result), engine)
    logger.debug("%s: n=%d m=%d log_prob=%g", engine, len(v), len(w), result)
    return result


def forward_numerically_stable_fast(
    v: Sequence[str],
    w: Sequence[str],
    params: LnAlignmentParameters,
    min_band_width: int,
) -> float:
    """Compiled forward_numerically_stable."""
    return _run_fast(v, w, params, min_band_width, False, "forward_numerically_stable_fast")


def viterbi_max_scoring_alignment_fast(
    v: Sequence[str],
    w: Sequence[str],
    params: LnAlignmentParameters,
    min_band_width: int,
) -> float:
    """Compiled viterbi_max_scoring_alignment."""
    return _run_fast(v, w, params, min_band_width, True, "viterbi_max_scoring_alignment_fast")

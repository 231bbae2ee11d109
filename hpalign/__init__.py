"""
hpalign: banded, homopolymer-aware pair-HMM alignment likelihoods.
"""

# =============================================================================
# PARAMETER MODEL
# =============================================================================

from .params import (
    TransitionProbs,
    EmissionProbs,
    HomopolymerProbs,
    AlignmentParameters,
    LnTransitionProbs,
    LnEmissionProbs,
    LnHomopolymerProbs,
    LnAlignmentParameters,
)

from .runs import first_occ_vector, last_occ_vector, run_lengths

from .banding import (
    BandAccessError,
    band_limits,
    effective_band_width,
    iter_bands,
)


# =============================================================================
# ENGINES
# =============================================================================

from .dp_core import (
    ForwardData,
    InvariantViolation,
    fill_forward_matrices,
    forward_non_numerically_stable,
    forward_numerically_stable,
    viterbi_max_scoring_alignment,
)

from .fast import (
    CYTHON_AVAILABLE,
    forward_numerically_stable_fast,
    viterbi_max_scoring_alignment_fast,
)

from .aligners import AlignmentType, PairAligner, align_pair

from .default import align_params, default_params, default_homopolymer_probs


# =============================================================================
# VALIDATION AND TESTING
# =============================================================================

from .validation import (
    forward_unbanded,
    viterbi_unbanded,
    enumerate_alignment_paths,
    check_stable_vs_naive,
    check_viterbi_bound,
    check_band_monotonic,
)


# =============================================================================
# PLOTTING (requires both matplotlib and seaborn -- install with pip install hpalign[plot])
# =============================================================================
def _missing_plot_dep(func_name: str) -> ImportError:
    return ImportError(
        f"{func_name} requires plotting dependencies.\n"
        'Install with: pip install "hpalign[plot]"'
    )

try:
    from .plot import plot_forward_matrices
    PLOT_AVAILABLE = True
except ImportError:
    # Raises ImportError if accessed without matplotlib/seaborn
    def plot_forward_matrices(*args, **kwargs):
        raise _missing_plot_dep("plot_forward_matrices")
    PLOT_AVAILABLE = False


__all__ = [
    # Parameter model
    "TransitionProbs",
    "EmissionProbs",
    "HomopolymerProbs",
    "AlignmentParameters",
    "LnTransitionProbs",
    "LnEmissionProbs",
    "LnHomopolymerProbs",
    "LnAlignmentParameters",
    # Run index vectors
    "first_occ_vector",
    "last_occ_vector",
    "run_lengths",
    # Banding
    "BandAccessError",
    "band_limits",
    "effective_band_width",
    "iter_bands",
    # Engines
    "ForwardData",
    "InvariantViolation",
    "fill_forward_matrices",
    "forward_non_numerically_stable",
    "forward_numerically_stable",
    "viterbi_max_scoring_alignment",
    "CYTHON_AVAILABLE",
    "forward_numerically_stable_fast",
    "viterbi_max_scoring_alignment_fast",
    # Selection
    "AlignmentType",
    "PairAligner",
    "align_pair",
    # Defaults
    "align_params",
    "default_params",
    "default_homopolymer_probs",
    # Validation
    "forward_unbanded",
    "viterbi_unbanded",
    "enumerate_alignment_paths",
    "check_stable_vs_naive",
    "check_viterbi_bound",
    "check_band_monotonic",
    # Plotting
    "PLOT_AVAILABLE",
    "plot_forward_matrices",
]

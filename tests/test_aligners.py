# test_aligners.py

import math

import pytest

from hpalign import default
from hpalign.aligners import AlignmentType, PairAligner, align_pair
from hpalign.dp_core import (
    forward_non_numerically_stable,
    forward_numerically_stable,
    viterbi_max_scoring_alignment,
)
from hpalign.params import AlignmentParameters, LnAlignmentParameters


class TestAlignmentType:
    """ Unit tests for engine selection. """
    def test_from_value(self):
        assert AlignmentType("viterbi_max_scoring_alignment") is AlignmentType.VITERBI_MAX_SCORING_ALIGNMENT
        pytest.raises(ValueError, AlignmentType, "smith_waterman")

    def test_domains(self):
        assert AlignmentType.FORWARD_NON_NUMERICALLY_STABLE.linear_domain
        assert not AlignmentType.FORWARD_NUMERICALLY_STABLE.linear_domain
        assert AlignmentType.FORWARD_NON_NUMERICALLY_STABLE.params_type is AlignmentParameters
        assert AlignmentType.VITERBI_MAX_SCORING_ALIGNMENT.params_type is LnAlignmentParameters


class TestAlignPair:
    """ Integration tests: dispatch to the three engines. """
    def test_dispatch(self, params, ln_params):
        v, w = "ACGTTGCA", "ACGTGCA"
        assert align_pair(
            v, w, params, 4, alignment_type=AlignmentType.FORWARD_NON_NUMERICALLY_STABLE
        ) == forward_non_numerically_stable(v, w, params, 4)
        assert align_pair(v, w, ln_params, 4) == forward_numerically_stable(v, w, ln_params, 4)
        assert align_pair(
            v, w, ln_params, 4, alignment_type=AlignmentType.VITERBI_MAX_SCORING_ALIGNMENT
        ) == viterbi_max_scoring_alignment(v, w, ln_params, 4)

    def test_dispatch_by_value(self, ln_params):
        assert align_pair("ACGT", "AGT", ln_params, 2, alignment_type="viterbi_max_scoring_alignment") == \
            viterbi_max_scoring_alignment("ACGT", "AGT", ln_params, 2)

    def test_wrong_domain(self, params, ln_params):
        pytest.raises(TypeError, align_pair, "ACGT", "ACGT", params, 4)
        pytest.raises(
            TypeError, align_pair, "ACGT", "ACGT", ln_params, 4,
            alignment_type=AlignmentType.FORWARD_NON_NUMERICALLY_STABLE,
        )

    def test_no_fast_linear_engine(self, params):
        with pytest.raises(ValueError):
            align_pair(
                "ACGT", "ACGT", params, 4,
                alignment_type=AlignmentType.FORWARD_NON_NUMERICALLY_STABLE, fast=True,
            )

    def test_empty_read(self, ln_params):
        assert align_pair("ACGT", "", ln_params, 4) == -math.inf

    def test_empty_reference(self, ln_params):
        pytest.raises(ValueError, align_pair, "", "ACGT", ln_params, 4)


class TestAlignParams:
    """ Default parameter bundles unpack straight into align_pair. """
    @pytest.mark.parametrize("alignment_type", list(AlignmentType))
    def test_domain_follows_engine(self, alignment_type):
        kwargs = default.align_params(alignment_type)
        assert isinstance(kwargs["params"], alignment_type.params_type)
        assert kwargs["min_band_width"] == default.DEFAULT_MIN_BAND_WIDTH
        assert kwargs["alignment_type"] is alignment_type

    @pytest.mark.parametrize("alignment_type", list(AlignmentType))
    def test_perfect_match_is_likely(self, alignment_type):
        X = "ACGTACGT"
        logp_same = align_pair(X, X, **default.align_params(alignment_type))
        logp_diff = align_pair(X, "TGCATGCA", **default.align_params(alignment_type))
        assert logp_same > logp_diff

    def test_defaults_are_normalized(self):
        default.default_params().check_normalized()


class TestPairAligner:
    """ Many reads against one reference window. """
    def test_matches_align_pair(self, params, ln_params):
        ref = "ACGTTGCAAC"
        aligner = PairAligner(ref, params, 4)
        for read in ["ACGTTGCAAC", "ACGTGCAAC", "ACGTTTGCAAC", ""]:
            assert aligner.align(read) == align_pair(ref, read, ln_params, 4)

    def test_linear_engine_uses_cached_runs(self, params):
        ref = "GTTTACCA"
        aligner = PairAligner(
            ref, params, 6, alignment_type=AlignmentType.FORWARD_NON_NUMERICALLY_STABLE
        )
        assert aligner.engine_params() is params
        assert aligner.align("GTTACCCA") == forward_non_numerically_stable(ref, "GTTACCCA", params, 6)

    def test_align_many(self, params):
        aligner = PairAligner("ACGTACGT", params, 3,
                              alignment_type=AlignmentType.VITERBI_MAX_SCORING_ALIGNMENT)
        reads = ["ACGTACGT", "ACGACGT", "ACGTTACGT"]
        assert aligner.align_many(reads) == [aligner.align(r) for r in reads]
        assert aligner.align_many([]) == []

    def test_homopolymer_runs(self, params):
        aligner = PairAligner("GAAACTTG", params, 3)
        assert aligner.homopolymer_runs() == [("A", 1, 3), ("T", 5, 2)]
        assert PairAligner("ACGT", params, 3).homopolymer_runs() == []

    def test_rejects_log_params(self, ln_params):
        pytest.raises(TypeError, PairAligner, "ACGT", ln_params, 3)

    def test_rejects_empty_reference(self, params):
        pytest.raises(ValueError, PairAligner, "", params, 3)

    def test_repr(self, params):
        text = repr(PairAligner("ACGT", params, 3))
        assert "len(ref)=4" in text
        assert "FORWARD_NUMERICALLY_STABLE" in text

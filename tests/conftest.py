"""
conftest.py — Shared pytest fixtures for the hpalign test suite

Provides parameter bundles in both domains, seeded random number
generators, and random DNA factories used across all test modules.
"""

import pytest
import numpy as np

from hpalign.params import (
    AlignmentParameters,
    EmissionProbs,
    HomopolymerProbs,
    TransitionProbs,
)


# ---------------------------------------------------------------------------
# Parameter fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def default_bases():
    """Default DNA alphabet."""
    return np.array(["A", "C", "G", "T"])


@pytest.fixture
def transition_probs() -> TransitionProbs:
    return TransitionProbs(
        match_from_match=0.90,
        insertion_from_match=0.05,
        deletion_from_match=0.05,
        insertion_from_insertion=0.30,
        match_from_insertion=0.70,
        deletion_from_deletion=0.30,
        match_from_deletion=0.70,
    )


@pytest.fixture
def emission_probs() -> EmissionProbs:
    return EmissionProbs(equal=0.97, not_equal=0.01, insertion=0.25, deletion=0.25)


@pytest.fixture
def params(transition_probs, emission_probs) -> AlignmentParameters:
    """Linear-domain bundle with an empty homopolymer table."""
    return AlignmentParameters(
        transition_probs=transition_probs,
        emission_probs=emission_probs,
        homopolymer_probs=HomopolymerProbs({}),
    )


@pytest.fixture
def ln_params(params):
    """Log-domain bundle derived from params."""
    return params.ln()


# ---------------------------------------------------------------------------
# Random number generator fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def rng():
    """Seeded random generator for reproducible tests."""
    return np.random.default_rng(888)


@pytest.fixture
def rng_alt():
    """Alternative seed for diversity in randomized tests."""
    return np.random.default_rng(123)


# ---------------------------------------------------------------------------
# Sequence generation helpers
# ---------------------------------------------------------------------------

@pytest.fixture
def random_dna_factory(default_bases):
    """Factory fixture returning a function to generate random DNA strings."""
    def _random_dna(length: int, rng: np.random.Generator) -> str:
        return "".join(rng.choice(default_bases, size=length))
    return _random_dna


@pytest.fixture
def random_run_free_dna_factory(default_bases):
    """
    Factory for random DNA strings with no two adjacent equal bases,
    so that no homopolymer run of length >= 2 occurs.
    """
    def _random_dna(length: int, rng: np.random.Generator) -> str:
        out = []
        for _ in range(length):
            choices = [b for b in default_bases if not out or b != out[-1]]
            out.append(str(rng.choice(choices)))
        return "".join(out)
    return _random_dna


@pytest.fixture
def mutate_factory(default_bases):
    """
    Factory returning a function that applies random substitutions,
    insertions and deletions to a sequence.
    """
    def _mutate(seq: str, rng: np.random.Generator, rate: float = 0.1) -> str:
        out = []
        for base in seq:
            r = rng.random()
            if r < rate / 3:
                continue                                    # deletion
            if r < 2 * rate / 3:
                out.append(str(rng.choice(default_bases)))  # substitution
                continue
            out.append(base)
            if r < rate:
                out.append(str(rng.choice(default_bases)))  # insertion
        return "".join(out)
    return _mutate

"""
test_runs.py — Tests for homopolymer run index vectors

Tests the functions in hpalign.runs:
- first_occ_vector: first index of the run containing each position
- last_occ_vector: last index of the run containing each position
- run_lengths: run-length encoding built from the two vectors
"""

import pytest
import numpy as np

from hpalign.runs import first_occ_vector, last_occ_vector, run_lengths


class TestOccurrenceVectors:
    """Worked examples for first_occ / last_occ."""

    # Cases: (seq, first_occ, last_occ)
    CASES = [
        ("ATCCCCT", [0, 1, 2, 2, 2, 2, 6], [0, 1, 5, 5, 5, 5, 6]),
        ("AAACCC", [0, 0, 0, 3, 3, 3], [2, 2, 2, 5, 5, 5]),
        ("A", [0], [0]),
        ("ACGT", [0, 1, 2, 3], [0, 1, 2, 3]),
        ("GGGG", [0, 0, 0, 0], [3, 3, 3, 3]),
        ("NNA", [0, 0, 2], [1, 1, 2]),
    ]

    @pytest.mark.parametrize("seq,first,last", CASES)
    def test_first_occ(self, seq, first, last):
        assert first_occ_vector(seq).tolist() == first

    @pytest.mark.parametrize("seq,first,last", CASES)
    def test_last_occ(self, seq, first, last):
        assert last_occ_vector(seq).tolist() == last

    def test_list_input(self):
        """Sequences of characters work the same as strings."""
        seq = list("ATCCCCT")
        assert first_occ_vector(seq).tolist() == [0, 1, 2, 2, 2, 2, 6]
        assert last_occ_vector(seq).tolist() == [0, 1, 5, 5, 5, 5, 6]

    def test_empty(self):
        assert first_occ_vector("").size == 0
        assert last_occ_vector("").size == 0

    def test_random_invariants(self, rng, random_dna_factory):
        """first <= i <= last, and the run [first, last] is one symbol."""
        for _ in range(20):
            seq = random_dna_factory(int(rng.integers(1, 40)), rng)
            first = first_occ_vector(seq)
            last = last_occ_vector(seq)
            for i in range(len(seq)):
                assert first[i] <= i <= last[i]
                assert set(seq[first[i]:last[i] + 1]) == {seq[i]}
                if first[i] > 0:
                    assert seq[first[i] - 1] != seq[i]
                if last[i] < len(seq) - 1:
                    assert seq[last[i] + 1] != seq[i]

    def test_values_change_only_at_boundaries(self, rng, random_dna_factory):
        seq = random_dna_factory(50, rng)
        first = first_occ_vector(seq)
        last = last_occ_vector(seq)
        for i in range(1, len(seq)):
            same_run = seq[i] == seq[i - 1]
            assert (first[i] == first[i - 1]) == same_run
            assert (last[i] == last[i - 1]) == same_run


class TestRunLengths:

    def test_worked_example(self):
        assert run_lengths("ATCCCCT") == [("A", 0, 1), ("T", 1, 1), ("C", 2, 4), ("T", 6, 1)]

    def test_lengths_cover_sequence(self, rng, random_dna_factory):
        seq = random_dna_factory(60, rng)
        runs = run_lengths(seq)
        assert sum(length for _, _, length in runs) == len(seq)
        assert "".join(base * length for base, _, length in runs) == seq

    def test_empty(self):
        assert run_lengths("") == []

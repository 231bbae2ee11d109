"""
params.py — probability model for the homopolymer-aware pair-HMM

Three tables describe the model:

  - TransitionProbs   : state transitions between the insertion (lower),
                        match/mismatch (middle) and deletion (upper) states.
  - EmissionProbs     : emission probabilities for equal / not-equal
                        symbol pairs and for gapped positions.
  - HomopolymerProbs  : probability that a homopolymer run of a given
                        length on one sequence is observed with a given
                        length on the other.

Each table exists twice: a linear-domain form, supplied by the parameter
estimator, and a log-domain form derived from it with .ln().  The two
forms are distinct types so that a linear bundle cannot be handed to a
log-domain engine by accident.  No renormalization is ever performed.
"""
from __future__ import annotations

import math
from dataclasses import dataclass, field, fields
from typing import Dict, Mapping, Tuple

import numpy as np
from numpy.typing import NDArray


HomopolymerKey = Tuple[str, int, int]

LOG_ZERO = -math.inf
LOG_ONE = 0.0


def ln_prob(p: float) -> float:
    """Natural log of a probability, with ln(0) = -inf."""
    if p == 0.0:
        return LOG_ZERO
    return math.log(p)


# ---------------------------------------------------------------------------
# Transition probabilities
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class TransitionProbs:
    """
    State transition probabilities (linear domain).

    The outgoing groups are:

        from match     : match_from_match + insertion_from_match + deletion_from_match
        from insertion : insertion_from_insertion + match_from_insertion
        from deletion  : deletion_from_deletion + match_from_deletion

    and each group is expected to sum to 1.
    """
    match_from_match: float
    insertion_from_match: float
    deletion_from_match: float
    insertion_from_insertion: float
    match_from_insertion: float
    deletion_from_deletion: float
    match_from_deletion: float

    def groups(self) -> Dict[str, float]:
        """Sum of each outgoing transition group."""
        return {
            "match": self.match_from_match + self.insertion_from_match + self.deletion_from_match,
            "insertion": self.insertion_from_insertion + self.match_from_insertion,
            "deletion": self.deletion_from_deletion + self.match_from_deletion,
        }

    def check_normalized(self, atol: float = 1e-9) -> None:
        """
        Raise ValueError if any value lies outside [0, 1] or an outgoing
        group does not sum to 1 within atol.
        """
        _check_unit_interval(self)
        for name, total in self.groups().items():
            if abs(total - 1.0) > atol:
                raise ValueError(
                    f"transitions from {name} sum to {total!r}, expected 1.0"
                )

    def ln(self) -> "LnTransitionProbs":
        return LnTransitionProbs(**{f.name: ln_prob(getattr(self, f.name)) for f in fields(self)})


@dataclass(frozen=True)
class LnTransitionProbs:
    """Natural-log mirror of TransitionProbs."""
    match_from_match: float
    insertion_from_match: float
    deletion_from_match: float
    insertion_from_insertion: float
    match_from_insertion: float
    deletion_from_deletion: float
    match_from_deletion: float

    def as_array(self) -> NDArray[np.float64]:
        """
        Values in declaration order, as consumed by the compiled kernel:

            [mm, im, dm, ii, mi, dd, md]
        """
        return np.array([getattr(self, f.name) for f in fields(self)], dtype=np.float64)


# ---------------------------------------------------------------------------
# Emission probabilities
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class EmissionProbs:
    """
    Emission probabilities (linear domain).

    equal / not_equal apply to the match state depending on whether the
    two symbols agree; insertion / deletion apply to the gap states.
    """
    equal: float
    not_equal: float
    insertion: float
    deletion: float

    def check_normalized(self, atol: float = 1e-9) -> None:
        """Raise ValueError if any value lies outside [0, 1]."""
        _check_unit_interval(self)

    def ln(self) -> "LnEmissionProbs":
        return LnEmissionProbs(**{f.name: ln_prob(getattr(self, f.name)) for f in fields(self)})


@dataclass(frozen=True)
class LnEmissionProbs:
    """Natural-log mirror of EmissionProbs."""
    equal: float
    not_equal: float
    insertion: float
    deletion: float

    def as_array(self) -> NDArray[np.float64]:
        """Values in declaration order: [equal, not_equal, insertion, deletion]."""
        return np.array([getattr(self, f.name) for f in fields(self)], dtype=np.float64)


# ---------------------------------------------------------------------------
# Homopolymer length probabilities
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class HomopolymerProbs:
    """
    Homopolymer run-length probabilities (linear domain).

    Keys are (base, length on ref, length on read); the value is the
    probability of observing the read length given the base and the
    reference length.  Lookup is partial: a missing key means the
    observation is impossible and reads as 0.0.
    """
    table: Mapping[HomopolymerKey, float] = field(default_factory=dict)

    def get(self, base: str, len_on_ref: int, len_on_read: int) -> float:
        return self.table.get((base, len_on_ref, len_on_read), 0.0)

    def __len__(self) -> int:
        return len(self.table)

    def __contains__(self, key) -> bool:
        return key in self.table

    def ln(self) -> "LnHomopolymerProbs":
        return LnHomopolymerProbs({key: ln_prob(p) for key, p in self.table.items()})


@dataclass(frozen=True)
class LnHomopolymerProbs:
    """Natural-log mirror of HomopolymerProbs; missing keys read as -inf."""
    table: Mapping[HomopolymerKey, float] = field(default_factory=dict)

    def get(self, base: str, len_on_ref: int, len_on_read: int) -> float:
        return self.table.get((base, len_on_ref, len_on_read), LOG_ZERO)

    def __len__(self) -> int:
        return len(self.table)

    def __contains__(self, key) -> bool:
        return key in self.table


# ---------------------------------------------------------------------------
# Bundles
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class AlignmentParameters:
    """Linear-domain parameter bundle, read-only for the duration of a call."""
    transition_probs: TransitionProbs
    emission_probs: EmissionProbs
    homopolymer_probs: HomopolymerProbs = field(default_factory=HomopolymerProbs)

    def check_normalized(self, atol: float = 1e-9) -> None:
        self.transition_probs.check_normalized(atol)
        self.emission_probs.check_normalized(atol)
        for key, p in self.homopolymer_probs.table.items():
            if not 0.0 <= p <= 1.0:
                raise ValueError(f"homopolymer probability for {key} is {p!r}, outside [0, 1]")

    def ln(self) -> "LnAlignmentParameters":
        return LnAlignmentParameters(
            transition_probs=self.transition_probs.ln(),
            emission_probs=self.emission_probs.ln(),
            homopolymer_probs=self.homopolymer_probs.ln(),
        )


@dataclass(frozen=True)
class LnAlignmentParameters:
    """Log-domain parameter bundle, obtained from AlignmentParameters.ln()."""
    transition_probs: LnTransitionProbs
    emission_probs: LnEmissionProbs
    homopolymer_probs: LnHomopolymerProbs = field(default_factory=LnHomopolymerProbs)


def _check_unit_interval(probs) -> None:
    for f in fields(probs):
        p = getattr(probs, f.name)
        if not 0.0 <= p <= 1.0:
            raise ValueError(f"{type(probs).__name__}.{f.name} = {p!r} is outside [0, 1]")

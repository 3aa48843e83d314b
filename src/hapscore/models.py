from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

PAIRING_MODES = ("self", "average")


@dataclass(frozen=True)
class AlignmentResult:
    """Outcome of aligning one sequence against another.

    Attributes
    ----------
    likelihood:
        log10 probability of observing the query given the reference under the
        alignment model.
    prior:
        log10 prior probability of the proposed sequence (its implied variants).
    has_variants:
        True if the alignment implies at least one difference from the reference.
    """

    likelihood: float
    prior: float
    has_variants: bool


@dataclass(frozen=True)
class ReadEvidence:
    """A sequenced read reduced to what the scorer needs.

    Attributes
    ----------
    name:
        Read name (query name), informational only.
    sequence:
        Base calls.
    qualities:
        Optional phred base qualities, one per base call.
    """

    name: str
    sequence: str
    qualities: Optional[Sequence[int]] = None


@dataclass(frozen=True)
class ScoringOptions:
    """Knobs shared by haplotype and pair scoring.

    Attributes
    ----------
    missing_read_score:
        Score given to a read whose alignment failed. The legacy value 0.0 is a
        log10 probability of 1 (certainty), not absence of evidence; pass a
        large negative number to make failed reads count as near-impossible.
    pairing:
        ``"self"`` reproduces the legacy pair score, which pairs haplotype1's
        per-read likelihoods with themselves. ``"average"`` averages
        haplotype1 and haplotype2 per read in probability space.
    threads:
        Worker threads for per-read scoring.
    progress:
        Show a tqdm progress bar while scoring reads.
    """

    missing_read_score: float = 0.0
    pairing: str = "self"
    threads: int = 1
    progress: bool = False

    def __post_init__(self) -> None:
        if self.pairing not in PAIRING_MODES:
            raise ValueError(
                f"pairing must be one of {PAIRING_MODES}, got {self.pairing!r}"
            )
        if self.threads < 1:
            raise ValueError("threads must be >= 1")

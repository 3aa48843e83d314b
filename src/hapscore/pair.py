from __future__ import annotations

import logging
from functools import cached_property
from itertools import combinations_with_replacement
from typing import FrozenSet, List, Optional, Sequence

from .align import AlignmentPort, UngappedAligner, check_result
from .haplotype import Haplotype
from .models import AlignmentResult, ScoringOptions
from .utils import log_mean_exp10
from .validation import check_same_length

logger = logging.getLogger(__name__)


class HaplotypePair:
    """Two haplotypes considered jointly as a diploid hypothesis.

    The pair holds references to the two haplotypes; it never copies or
    rescores them.

    Parameters
    ----------
    haplotype1, haplotype2:
        Member haplotypes. Order matters for the score (see
        ``score_pair_likelihood``).
    aligner:
        Engine used to align haplotype1 against haplotype2 for the prior;
        defaults to haplotype1's aligner.
    options:
        Selects the pairing mode; defaults to haplotype1's options.
    """

    def __init__(
        self,
        haplotype1: Haplotype,
        haplotype2: Haplotype,
        aligner: Optional[AlignmentPort] = None,
        *,
        options: Optional[ScoringOptions] = None,
    ) -> None:
        self.haplotype1 = haplotype1
        self.haplotype2 = haplotype2
        self.aligner: AlignmentPort = aligner if aligner is not None else haplotype1.aligner
        self.options = options if options is not None else haplotype1.options
        self.sequences: FrozenSet[str] = frozenset((haplotype1.sequence, haplotype2.sequence))

    @property
    def has_variants(self) -> bool:
        return self.haplotype1.has_variants or self.haplotype2.has_variants

    def same_sequences(self, other: "HaplotypePair") -> bool:
        return self.sequences == other.sequences

    @cached_property
    def prior_alignment(self) -> AlignmentResult:
        return check_result(
            self.aligner.align(self.haplotype2.sequence, self.haplotype1.sequence, None)
        )

    def reads_probability(self) -> float:
        """Per-read evidence for the pair, summed over reads (log10).

        In ``"self"`` mode haplotype1's per-read likelihoods are paired with
        themselves, so the result is exactly ``haplotype1.reads_likelihood``.
        In ``"average"`` mode each read contributes
        ``log10((10**h1[i] + 10**h2[i]) / 2)``.
        """
        first = self.haplotype1.per_read_likelihoods
        if self.options.pairing == "average":
            second = self.haplotype2.per_read_likelihoods
            check_same_length(first, second, "per-read likelihoods of paired haplotypes")
        else:
            second = first
        return sum((log_mean_exp10(a, b) for a, b in zip(first, second)), 0.0)

    def score_pair_likelihood(self) -> float:
        """log10 likelihood of the pair: read evidence plus the alignment prior.

        Not symmetric: swapping the members changes both terms.
        """
        return self.reads_probability() + self.prior_alignment.prior

    @cached_property
    def pair_likelihood(self) -> float:
        return self.score_pair_likelihood()

    def __str__(self) -> str:
        return f"{self.haplotype1.sequence}, {self.haplotype2.sequence}, {self.pair_likelihood:1.3f}"

    def __repr__(self) -> str:
        return (
            f"HaplotypePair(haplotype1={self.haplotype1.sequence!r}, "
            f"haplotype2={self.haplotype2.sequence!r})"
        )


def enumerate_pairs(
    haplotypes: Sequence[Haplotype],
    aligner: Optional[AlignmentPort] = None,
    options: Optional[ScoringOptions] = None,
) -> List[HaplotypePair]:
    """Every unordered pair of haplotypes, including each haplotype with itself."""
    if aligner is None:
        aligner = haplotypes[0].aligner if haplotypes else UngappedAligner()
    pairs = [
        HaplotypePair(h1, h2, aligner, options=options)
        for h1, h2 in combinations_with_replacement(haplotypes, 2)
    ]
    logger.info("Built %d haplotype pairs from %d haplotypes", len(pairs), len(haplotypes))
    return pairs

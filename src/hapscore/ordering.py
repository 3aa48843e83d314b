"""Rankings over haplotypes and haplotype pairs.

Both orders are ascending by likelihood, so the best-supported candidate sorts
last; ``best`` and ``top`` return the highest-likelihood items directly.
"""

from __future__ import annotations

import heapq
import logging
from functools import cmp_to_key
from typing import Callable, Generic, Iterable, List, Optional, Sequence, TypeVar

from .align import AlignmentPort
from .haplotype import Haplotype
from .models import ScoringOptions
from .pair import HaplotypePair, enumerate_pairs

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _cmp(a: float, b: float) -> int:
    return (a > b) - (a < b)


def compare_haplotypes(h1: Haplotype, h2: Haplotype) -> int:
    """Compare by reads likelihood; -1, 0 or 1.

    0 is only returned when both the sequences and the likelihoods are equal.
    Haplotypes with different sequences and equal likelihoods compare as 1 in
    either argument order.
    """
    if h1.sequence == h2.sequence:
        return _cmp(h1.reads_likelihood, h2.reads_likelihood)
    if h1.reads_likelihood < h2.reads_likelihood:
        return -1
    return 1


def compare_haplotype_pairs(
    pair1: HaplotypePair,
    pair2: HaplotypePair,
    *,
    require_same_sequences: bool = False,
) -> int:
    """Compare by pair likelihood; 0 on exactly equal likelihoods.

    With ``require_same_sequences`` a numeric tie between pairs of different
    haplotypes is broken on their sorted member sequences instead.
    """
    c = _cmp(pair1.pair_likelihood, pair2.pair_likelihood)
    if c != 0 or not require_same_sequences or pair1.same_sequences(pair2):
        return c
    s1 = sorted(pair1.sequences)
    s2 = sorted(pair2.sequences)
    return (s1 > s2) - (s1 < s2)


class _Ordering(Generic[T]):
    def __init__(self, compare: Callable[[T, T], int]) -> None:
        self.compare = compare
        self.key = cmp_to_key(compare)

    def sort(self, items: Iterable[T], *, descending: bool = False) -> List[T]:
        return sorted(items, key=self.key, reverse=descending)

    def best(self, items: Iterable[T]) -> T:
        items = list(items)
        if not items:
            raise ValueError("Cannot pick the best of an empty collection")
        return max(items, key=self.key)

    def top(self, items: Iterable[T], k: int) -> List[T]:
        """The k highest-ranked items, best first."""
        return heapq.nlargest(k, items, key=self.key)


HaplotypeOrdering: _Ordering[Haplotype] = _Ordering(compare_haplotypes)
HaplotypePairOrdering: _Ordering[HaplotypePair] = _Ordering(compare_haplotype_pairs)
StrictHaplotypePairOrdering: _Ordering[HaplotypePair] = _Ordering(
    lambda p1, p2: compare_haplotype_pairs(p1, p2, require_same_sequences=True)
)


def rank_pairs(
    haplotypes: Sequence[Haplotype],
    aligner: Optional[AlignmentPort] = None,
    options: Optional[ScoringOptions] = None,
) -> List[HaplotypePair]:
    """All diploid pairs of ``haplotypes``, best first."""
    pairs = enumerate_pairs(haplotypes, aligner, options)
    return HaplotypePairOrdering.sort(pairs, descending=True)


def best_pair(
    haplotypes: Sequence[Haplotype],
    aligner: Optional[AlignmentPort] = None,
    options: Optional[ScoringOptions] = None,
) -> HaplotypePair:
    pair = HaplotypePairOrdering.best(enumerate_pairs(haplotypes, aligner, options))
    logger.info("Best pair: %s", pair)
    return pair

"""hapscore: haplotype and haplotype-pair likelihood scoring for genotype calling.

Most callers build ``Haplotype`` objects for the candidates of one region and
rank diploid pairs of them:

    haplotypes = [Haplotype(seq, reads, reference) for seq in candidates]
    best = best_pair(haplotypes)

"""

from __future__ import annotations

__all__ = [
    "__version__",
    "AlignmentPort",
    "AlignmentResult",
    "Haplotype",
    "HaplotypeOrdering",
    "HaplotypePair",
    "HaplotypePairOrdering",
    "ReadEvidence",
    "ScoringOptions",
    "UngappedAligner",
    "best_pair",
    "enumerate_pairs",
    "rank_pairs",
]

__version__ = "0.1.0"

from .align import AlignmentPort, UngappedAligner
from .haplotype import Haplotype
from .models import AlignmentResult, ReadEvidence, ScoringOptions
from .ordering import HaplotypeOrdering, HaplotypePairOrdering, best_pair, rank_pairs
from .pair import HaplotypePair, enumerate_pairs

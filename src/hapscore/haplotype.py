from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from functools import cached_property
from typing import Iterable, Optional, Sequence, Tuple

from tqdm import tqdm

from .align import AlignerUnavailableError, AlignmentPort, UngappedAligner, check_result
from .models import AlignmentResult, ReadEvidence, ScoringOptions
from .validation import check_sequence

logger = logging.getLogger(__name__)


class Haplotype:
    """A candidate sequence scored against the reads of one region.

    Derived values are computed on first access and cached for the lifetime of
    the object; nothing mutates them afterwards.

    Parameters
    ----------
    sequence:
        Candidate haplotype sequence.
    reads:
        Read evidence overlapping the region. Anything exposing ``sequence``
        (and optionally ``qualities``) works.
    reference:
        Reference sequence of the region; may be empty.
    aligner:
        Alignment engine; defaults to ``UngappedAligner()``.
    options:
        Scoring options (fail-soft score, threads, progress).
    """

    def __init__(
        self,
        sequence: str,
        reads: Iterable[ReadEvidence] = (),
        reference: str = "",
        *,
        aligner: Optional[AlignmentPort] = None,
        options: Optional[ScoringOptions] = None,
    ) -> None:
        self.sequence = check_sequence(sequence, "haplotype sequence")
        self.reference = check_sequence(reference, "reference", allow_empty=True)
        self.reads: Tuple[ReadEvidence, ...] = tuple(reads)
        self.aligner: AlignmentPort = aligner if aligner is not None else UngappedAligner()
        self.options = options if options is not None else ScoringOptions()

    @cached_property
    def reference_alignment(self) -> AlignmentResult:
        """Alignment of the reference against this haplotype. Failures propagate."""
        return check_result(self.aligner.align(self.reference, self.sequence, None))

    @property
    def has_variants(self) -> bool:
        return self.reference_alignment.has_variants

    def _score_read(self, read: ReadEvidence) -> Optional[float]:
        """likelihood + prior for one read, or None if its alignment failed."""
        try:
            result = self.aligner.align(self.sequence, read.sequence, getattr(read, "qualities", None))
        except AlignerUnavailableError:
            raise
        except Exception as e:
            logger.debug(
                "Alignment of read %s against %s failed: %s",
                getattr(read, "name", "?"),
                self.sequence,
                e,
            )
            return None
        checked = check_result(result)
        return checked.likelihood + checked.prior

    @cached_property
    def _raw_scores(self) -> Tuple[Optional[float], ...]:
        """Per-read scores in read order; None where the alignment failed."""
        if self.options.threads > 1 and len(self.reads) > 1:
            with ThreadPoolExecutor(max_workers=self.options.threads) as pool:
                results: Iterable[Optional[float]] = pool.map(self._score_read, self.reads)
                if self.options.progress:
                    results = tqdm(results, total=len(self.reads), unit="read", desc="Scoring reads")
                raw = tuple(results)
        else:
            reads: Iterable[ReadEvidence] = self.reads
            if self.options.progress:
                reads = tqdm(reads, total=len(self.reads), unit="read", desc="Scoring reads")
            raw = tuple(self._score_read(r) for r in reads)

        failed = sum(1 for s in raw if s is None)
        if failed:
            logger.warning(
                "%d of %d reads could not be aligned to haplotype %s; each was scored %.3f",
                failed,
                len(self.reads),
                self.sequence,
                self.options.missing_read_score,
            )
        return raw

    @cached_property
    def failed_reads(self) -> int:
        """Number of reads whose alignment failed and got the fail-soft score."""
        return sum(1 for s in self._raw_scores if s is None)

    @cached_property
    def per_read_likelihoods(self) -> Tuple[float, ...]:
        """log10 likelihood + prior of each read, in read order."""
        # TODO: 0.0 is log10(1), i.e. certainty; switch the default once callers
        # have been audited for the change in pair rankings.
        missing = self.options.missing_read_score
        return tuple(missing if s is None else s for s in self._raw_scores)

    @cached_property
    def reads_likelihood(self) -> float:
        # Plain sum of log10 values: reads are treated as independent.
        return sum(self.per_read_likelihoods, 0.0)

    def __str__(self) -> str:
        return f"{self.sequence}, {self.reads_likelihood}"

    def __repr__(self) -> str:
        return f"Haplotype(sequence={self.sequence!r}, reads={len(self.reads)})"


def score_haplotypes(
    sequences: Sequence[str],
    reads: Sequence[ReadEvidence],
    reference: str = "",
    *,
    aligner: Optional[AlignmentPort] = None,
    options: Optional[ScoringOptions] = None,
) -> list[Haplotype]:
    """Build one Haplotype per candidate sequence, sharing reads and aligner."""
    aligner = aligner if aligner is not None else UngappedAligner()
    haplotypes = []
    for seq in sequences:
        h = Haplotype(seq, reads, reference, aligner=aligner, options=options)
        logger.debug("Haplotype %s: reads_likelihood=%.4f", seq, h.reads_likelihood)
        haplotypes.append(h)
    return haplotypes

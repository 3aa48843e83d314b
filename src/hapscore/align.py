"""Pair-alignment port and a small default engine.

The scoring core only ever asks an aligner for three numbers: a log10
likelihood, a log10 prior and whether the alignment implies variants. Any
object with a matching ``align`` method can be injected; ``UngappedAligner``
is a convenience engine good enough for demos, tests and short haplotypes.
"""

from __future__ import annotations

import logging
import math
from typing import Optional, Protocol, Sequence

import numpy as np

from .models import AlignmentResult
from .utils import encode_bases
from .validation import check_qualities, check_sequence

logger = logging.getLogger(__name__)

_N = ord("N")


class AlignmentError(RuntimeError):
    """Raised when a single alignment cannot be computed (e.g. a malformed read)."""


class AlignerUnavailableError(AlignmentError):
    """Raised when the alignment engine itself cannot be used.

    Unlike a plain ``AlignmentError`` this is never absorbed per read.
    """


class AlignmentContractError(RuntimeError):
    """Raised when an aligner returns something that is not an alignment result."""

    def __init__(self, message: str, *, result: object = None) -> None:
        super().__init__(message)
        self.result = result


class AlignmentPort(Protocol):
    def align(
        self,
        reference: str,
        query: str,
        qualities: Optional[Sequence[int]] = None,
    ) -> AlignmentResult:
        """Align ``query`` against ``reference`` and score it."""


def check_result(result: object) -> AlignmentResult:
    """Coerce an aligner's return value to ``AlignmentResult`` or raise AlignmentContractError."""
    try:
        likelihood = float(result.likelihood)  # type: ignore[attr-defined]
        prior = float(result.prior)  # type: ignore[attr-defined]
        has_variants = bool(result.has_variants)  # type: ignore[attr-defined]
    except (AttributeError, TypeError, ValueError) as e:
        raise AlignmentContractError(
            f"Aligner returned {result!r}; expected likelihood, prior and has_variants",
            result=result,
        ) from e
    if math.isnan(likelihood) or math.isnan(prior):
        raise AlignmentContractError(
            f"Aligner returned NaN (likelihood={likelihood}, prior={prior})",
            result=result,
        )
    return AlignmentResult(likelihood=likelihood, prior=prior, has_variants=has_variants)


class UngappedAligner:
    """Best ungapped placement of the shorter sequence along the longer one.

    Each compared base contributes ``log10(1 - e)`` on a match and
    ``log10(e / 3)`` on a mismatch, where ``e`` is the phred error probability
    of the query base (``default_baseq`` when no qualities are given), clamped
    to ``[min_error, max_error]``. ``N`` on either side is uninformative.

    The prior charges ``log10(snp_prior)`` per mismatch at the best offset and
    ``log10(indel_prior)`` once if the two lengths differ.
    """

    def __init__(
        self,
        *,
        default_baseq: int = 30,
        snp_prior: float = 1e-3,
        indel_prior: float = 1e-4,
        min_error: float = 1e-6,
        max_error: float = 0.25,
    ) -> None:
        if not (0.0 < snp_prior <= 1.0 and 0.0 < indel_prior <= 1.0):
            raise ValueError("snp_prior and indel_prior must be in (0, 1]")
        if not (0.0 < min_error <= max_error < 1.0):
            raise ValueError("error bounds must satisfy 0 < min_error <= max_error < 1")
        self.default_baseq = int(default_baseq)
        self.log_snp_prior = math.log10(snp_prior)
        self.log_indel_prior = math.log10(indel_prior)
        self.min_error = float(min_error)
        self.max_error = float(max_error)

    def _base_log_probs(
        self, qualities: Optional[Sequence[int]], n: int
    ) -> tuple[np.ndarray, np.ndarray]:
        if qualities is None:
            q = np.full(n, float(self.default_baseq))
        else:
            q = np.asarray(qualities, dtype=float)
        # phred <= 0 means "no information": error probability 1 before clamping
        e = np.where(q > 0, 10.0 ** (-q / 10.0), 1.0)
        e = np.clip(e, self.min_error, self.max_error)
        return np.log10(1.0 - e), np.log10(e / 3.0)

    def align(
        self,
        reference: str,
        query: str,
        qualities: Optional[Sequence[int]] = None,
    ) -> AlignmentResult:
        try:
            check_sequence(reference, "reference", allow_empty=True)
            check_sequence(query, "query")
            check_qualities(qualities, query)
        except ValueError as e:
            raise AlignmentError(str(e)) from e

        if not reference:
            return AlignmentResult(likelihood=0.0, prior=0.0, has_variants=False)

        ref = encode_bases(reference)
        qry = encode_bases(query)
        log_match, log_mismatch = self._base_log_probs(qualities, len(qry))

        n_ref, n_qry = len(ref), len(qry)
        best_score = -math.inf
        best_mismatches = 0
        for off in range(abs(n_ref - n_qry) + 1):
            if n_qry <= n_ref:
                r = ref[off : off + n_qry]
                q = qry
                lm, lx = log_match, log_mismatch
            else:
                r = ref
                q = qry[off : off + n_ref]
                lm, lx = log_match[off : off + n_ref], log_mismatch[off : off + n_ref]

            informative = (r != _N) & (q != _N)
            match = r == q
            score = float(np.sum(np.where(informative, np.where(match, lm, lx), 0.0)))
            if score > best_score:
                best_score = score
                best_mismatches = int(np.count_nonzero(informative & ~match))

        length_differs = n_ref != n_qry
        prior = best_mismatches * self.log_snp_prior if best_mismatches else 0.0
        if length_differs:
            prior += self.log_indel_prior

        logger.debug(
            "Aligned %d bp query to %d bp reference: likelihood=%.4f mismatches=%d",
            n_qry,
            n_ref,
            best_score,
            best_mismatches,
        )
        return AlignmentResult(
            likelihood=best_score,
            prior=prior,
            has_variants=best_mismatches > 0 or length_differs,
        )

from __future__ import annotations

from typing import Dict, List, Optional, Sequence, Tuple

from hapscore.models import AlignmentResult, ReadEvidence


class ScriptedAligner:
    """AlignmentPort double returning canned results keyed by (reference, query)."""

    def __init__(
        self,
        results: Optional[Dict[Tuple[str, str], object]] = None,
        *,
        default: Optional[AlignmentResult] = None,
    ) -> None:
        self.results = dict(results or {})
        self.default = default or AlignmentResult(likelihood=0.0, prior=0.0, has_variants=False)
        self.calls: List[Tuple[str, str]] = []

    def align(
        self,
        reference: str,
        query: str,
        qualities: Optional[Sequence[int]] = None,
    ) -> AlignmentResult:
        self.calls.append((reference, query))
        res = self.results.get((reference, query), self.default)
        if isinstance(res, BaseException):
            raise res
        return res  # type: ignore[return-value]


def make_reads(*seqs: str) -> List[ReadEvidence]:
    return [ReadEvidence(name=f"r{i}", sequence=s) for i, s in enumerate(seqs)]

from __future__ import annotations

import logging
from typing import Optional, Sequence

logger = logging.getLogger(__name__)


BASES = frozenset("ACGTN")


def check_sequence(
    seq: object,
    name: str = "sequence",
    *,
    allow_empty: bool = False,
    alphabet: Optional[frozenset] = BASES,
) -> str:
    """Ensure ``seq`` is a base string; raise ValueError naming the offending input.

    ``alphabet=None`` skips the character check.
    """
    if not isinstance(seq, str):
        raise ValueError(f"{name} must be a string, got {type(seq).__name__}")
    if not seq and not allow_empty:
        raise ValueError(f"{name} is empty")
    if alphabet is None:
        return seq
    bad = set(seq.upper()) - alphabet
    if bad:
        raise ValueError(
            f"{name} contains characters outside A/C/G/T/N: {''.join(sorted(bad))}"
        )
    return seq


def check_qualities(qualities: Optional[Sequence[int]], seq: str, name: str = "qualities") -> None:
    """Ensure a quality vector (if any) has one value per base."""
    if qualities is None:
        return
    if len(qualities) != len(seq):
        raise ValueError(
            f"{name} has {len(qualities)} values for a sequence of length {len(seq)}"
        )


def check_same_length(a: Sequence[float], b: Sequence[float], what: str) -> None:
    if len(a) != len(b):
        raise ValueError(f"{what}: length mismatch ({len(a)} vs {len(b)})")

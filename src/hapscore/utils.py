from __future__ import annotations

import gzip
import json
import logging
import math
from pathlib import Path
from typing import Any, TextIO

import numpy as np

logger = logging.getLogger(__name__)

LOG10_2 = math.log10(2.0)


def exact_log_sum_exp10(x1: float, x2: float) -> float:
    """Return ``log10(10**x1 + 10**x2)``.

    Sums two probabilities given as log10 likelihoods. The larger exponent is
    factored out so large-magnitude inputs neither overflow nor underflow.

    See also
    --------
    approx_log_sum_exp10
    """
    hi = max(x1, x2)
    lo = min(x1, x2)
    if hi == -math.inf:
        return -math.inf
    return hi + math.log10(1.0 + 10.0 ** (lo - hi))


def approx_log_sum_exp10(x1: float, x2: float) -> float:
    """Approximate entry point for ``log10(10**x1 + 10**x2)``.

    Currently computed exactly; callers that can tolerate an approximation
    should use this name so a faster rendition can be swapped in later.

    See also
    --------
    exact_log_sum_exp10
    """
    return exact_log_sum_exp10(x1, x2)


def log_mean_exp10(x1: float, x2: float) -> float:
    """Return ``log10((10**x1 + 10**x2) / 2)``.

    Equal to ``exact_log_sum_exp10(x1, x2) - log10(2)``, but evaluated as
    ``hi + log10((1 + 10**(lo - hi)) / 2)`` so that ``log_mean_exp10(a, a)``
    is exactly ``a``.
    """
    hi = max(x1, x2)
    lo = min(x1, x2)
    if hi == -math.inf:
        return -math.inf
    return hi + math.log10((1.0 + 10.0 ** (lo - hi)) / 2.0)


def encode_bases(seq: str) -> np.ndarray:
    """Uppercase ASCII codes of a base string as a uint8 array."""
    return np.frombuffer(seq.upper().encode("ascii"), dtype=np.uint8)


def ensure_outdir(path: str | Path) -> Path:
    p = Path(path)
    p.mkdir(parents=True, exist_ok=True)
    return p


def open_textmaybe_gzip(path: str | Path, mode: str = "rt") -> TextIO:
    p = str(path)
    if p.endswith(".gz"):
        return gzip.open(p, mode)  # type: ignore[return-value]
    return open(p, mode)


def write_json(path: str | Path, obj: Any) -> None:
    with open(path, "wt", encoding="utf-8") as f:
        json.dump(obj, f, indent=2, sort_keys=True)

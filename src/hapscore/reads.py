from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Union

import pysam

from .models import ReadEvidence

logger = logging.getLogger(__name__)


def read_from_segment(read: pysam.AlignedSegment) -> ReadEvidence:
    """Reduce an aligned segment to its base calls and base qualities."""
    seq = read.query_sequence
    if seq is None:
        raise ValueError(f"Read {read.query_name} has no stored sequence")
    quals = read.query_qualities  # can be None
    return ReadEvidence(
        name=str(read.query_name),
        sequence=seq,
        qualities=[int(q) for q in quals] if quals is not None else None,
    )


def read_from_fastx(record: Union[pysam.FastxRecord, pysam.FastqProxy]) -> ReadEvidence:
    quals = record.get_quality_array() if record.quality else None
    return ReadEvidence(
        name=str(record.name),
        sequence=record.sequence,
        qualities=[int(q) for q in quals] if quals is not None else None,
    )


def load_reads(path: str | Path) -> List[ReadEvidence]:
    """Load reads from a FASTA/FASTQ file (gzip allowed), keeping file order."""
    reads: List[ReadEvidence] = []
    with pysam.FastxFile(str(path)) as fh:
        for record in fh:
            reads.append(read_from_fastx(record))
    logger.info("Loaded %d reads from %s", len(reads), path)
    return reads

from pathlib import Path

import pysam
import pytest

from hapscore.haplotype import Haplotype
from hapscore.reads import load_reads, read_from_fastx, read_from_segment


def make_read(seq: str, start: int = 100) -> pysam.AlignedSegment:
    a = pysam.AlignedSegment()
    a.query_name = "r1"
    a.query_sequence = seq
    a.flag = 0
    a.reference_start = start
    a.mapping_quality = 60
    a.cigartuples = [(0, len(seq))]  # M
    a.query_qualities = pysam.qualitystring_to_array("I" * len(seq))
    return a


def test_read_from_segment() -> None:
    ev = read_from_segment(make_read("ACGTAC"))
    assert ev.name == "r1"
    assert ev.sequence == "ACGTAC"
    assert list(ev.qualities) == [40] * 6


def test_segment_without_sequence_rejected() -> None:
    a = pysam.AlignedSegment()
    a.query_name = "empty"
    with pytest.raises(ValueError):
        read_from_segment(a)


def test_load_reads_fastq_and_score(tmp_path: Path) -> None:
    fq = tmp_path / "reads.fq"
    fq.write_text("@a\nACGTAC\n+\nIIIIII\n@b\nACGTAA\n+\nIII#II\n", encoding="utf-8")
    reads = load_reads(fq)
    assert [r.name for r in reads] == ["a", "b"]
    assert list(reads[1].qualities) == [40, 40, 40, 2, 40, 40]

    h = Haplotype("ACGTAC", reads, "ACGTAC")
    assert len(h.per_read_likelihoods) == 2
    assert h.per_read_likelihoods[0] > h.per_read_likelihoods[1]


def test_load_reads_fasta_has_no_qualities(tmp_path: Path) -> None:
    fa = tmp_path / "reads.fa"
    fa.write_text(">a\nACGT\n>b\nTTGA\n", encoding="utf-8")
    reads = load_reads(fa)
    assert [r.sequence for r in reads] == ["ACGT", "TTGA"]
    assert reads[0].qualities is None


def test_read_from_fastx_accepts_file_records(tmp_path: Path) -> None:
    fq = tmp_path / "one.fq"
    fq.write_text("@x\nACGT\n+\nIIII\n", encoding="utf-8")
    with pysam.FastxFile(str(fq)) as fh:
        ev = read_from_fastx(next(iter(fh)))
    assert ev.name == "x"
    assert list(ev.qualities) == [40, 40, 40, 40]

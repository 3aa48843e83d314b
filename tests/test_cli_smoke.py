import json
import subprocess
import sys
from pathlib import Path


def _run_cli(args: list[str]) -> subprocess.CompletedProcess:
    return subprocess.run(
        [sys.executable, "-m", "hapscore"] + args,
        check=False,
        capture_output=True,
        text=True,
    )


def test_cli_help() -> None:
    cp = subprocess.run(
        [sys.executable, "-m", "hapscore", "--help"],
        check=True,
        capture_output=True,
        text=True,
    )
    assert "hapscore" in cp.stdout.lower()


def test_rank_prints_best_pair_first() -> None:
    cp = _run_cli(
        [
            "rank",
            "--reference", "ACGTACGT",
            "--candidate", "ACGTACGT",
            "--candidate", "ACGAACGT",
            "--read", "ACGTACGT",
            "--read", "ACGTACGT",
        ]
    )
    assert cp.returncode == 0, cp.stderr
    lines = cp.stdout.strip().splitlines()
    assert lines[0].startswith("rank\t")
    assert len(lines) == 4
    assert lines[1].split("\t")[1:3] == ["ACGTACGT", "ACGTACGT"]


def test_rank_writes_outputs(tmp_path: Path) -> None:
    outdir = tmp_path / "out"
    cp = _run_cli(
        [
            "rank",
            "--reference", "ACGT",
            "--candidate", "ACGT",
            "--candidate", "ACGA",
            "--read", "ACGT",
            "--pairing", "average",
            "--outdir", str(outdir),
        ]
    )
    assert cp.returncode == 0, cp.stderr
    assert (outdir / "report.html").exists()
    assert (outdir / "pairs.tsv.gz").exists()
    summary = json.loads((outdir / "summary.json").read_text(encoding="utf-8"))
    assert summary["pairing"] == "average"
    assert summary["n_pairs"] == 3
    assert summary["haplotypes"][0]["sequence"] == "ACGT"
    assert summary["haplotypes"][1]["has_variants"] is True


def test_rank_without_candidates_fails() -> None:
    cp = _run_cli(["rank", "--read", "ACGT"])
    assert cp.returncode == 2
    assert "No candidate haplotypes" in cp.stderr

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

import pysam

from . import __version__
from .align import AlignmentContractError, AlignmentError, UngappedAligner
from .haplotype import score_haplotypes
from .models import PAIRING_MODES, ReadEvidence, ScoringOptions
from .ordering import HaplotypeOrdering, HaplotypePairOrdering
from .pair import enumerate_pairs
from .reads import load_reads
from .report import render_report, summarize
from .utils import ensure_outdir, open_textmaybe_gzip, write_json


def _setup_logging(verbosity: int, *, logfile: Optional[Path] = None) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG

    log_fmt = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
    logging.basicConfig(level=level, format=log_fmt, stream=sys.stderr)

    if logfile is not None:
        logfile.parent.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(logfile)
        fh.setLevel(level)
        fh.setFormatter(logging.Formatter(log_fmt))
        logging.getLogger().addHandler(fh)


def _path_exists(p: str) -> str:
    if not Path(p).exists():
        raise argparse.ArgumentTypeError(f"Path does not exist: {p}")
    return p


def _handle_error(err: Exception, *, log_path: Optional[Path] = None) -> int:
    if isinstance(err, (AlignmentError, AlignmentContractError)):
        msg = f"Alignment failed: {err}"
    else:
        msg = f"{err.__class__.__name__}: {err}"

    sys.stderr.write(msg + "\n")
    if log_path is not None:
        sys.stderr.write(f"See log: {log_path}\n")
    return 2


def _load_candidates(args: argparse.Namespace) -> List[str]:
    candidates = list(args.candidate or [])
    if args.candidates:
        with pysam.FastxFile(args.candidates) as fh:
            candidates.extend(rec.sequence for rec in fh)
    if not candidates:
        raise ValueError("No candidate haplotypes given. Use --candidate and/or --candidates.")
    return candidates


def _load_read_evidence(args: argparse.Namespace) -> List[ReadEvidence]:
    reads = [ReadEvidence(name=f"arg{i}", sequence=s) for i, s in enumerate(args.read or [])]
    if args.reads:
        reads.extend(load_reads(args.reads))
    return reads


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="hapscore",
        description=(
            "hapscore: score candidate haplotypes and diploid haplotype pairs "
            "against the reads of one region, and rank them by log10 likelihood."
        ),
    )
    p.add_argument("--version", action="version", version=f"hapscore {__version__}")

    sub = p.add_subparsers(dest="cmd", required=True)

    # -----------------
    # rank
    # -----------------
    r = sub.add_parser(
        "rank",
        help="Score candidate haplotypes against reads and rank haplotype pairs.",
    )
    r.add_argument("--reference", default="", help="Reference sequence of the region.")
    r.add_argument(
        "--candidate",
        action="append",
        help="Candidate haplotype sequence (repeatable).",
    )
    r.add_argument(
        "--candidates",
        type=_path_exists,
        default=None,
        help="FASTA file of candidate haplotypes.",
    )
    r.add_argument("--read", action="append", help="Read base calls (repeatable).")
    r.add_argument(
        "--reads",
        type=_path_exists,
        default=None,
        help="FASTA/FASTQ(.gz) file of reads overlapping the region.",
    )

    # Model
    r.add_argument(
        "--pairing",
        choices=list(PAIRING_MODES),
        default="self",
        help="Pair read-evidence mode: self (legacy, haplotype1 only) or average (both members).",
    )
    r.add_argument(
        "--missing-read-score",
        type=float,
        default=0.0,
        help="log10 score for reads that fail to align (default 0.0, legacy behaviour).",
    )
    r.add_argument("--default-baseq", type=int, default=30, help="Base quality when reads carry none.")
    r.add_argument("--snp-prior", type=float, default=1e-3, help="Prior probability per mismatch.")
    r.add_argument("--indel-prior", type=float, default=1e-4, help="Prior probability of a length change.")

    # Execution / outputs
    r.add_argument("--threads", type=int, default=1, help="Threads for per-read scoring.")
    r.add_argument("--top", type=int, default=10, help="Number of pairs to print/report.")
    r.add_argument(
        "--outdir",
        default=None,
        help="Optional output directory for summary.json, pairs.tsv.gz and report.html.",
    )
    r.add_argument("--progress", action="store_true", help="Show a progress bar while scoring reads.")
    r.add_argument("-v", "--verbose", action="count", default=0, help="Increase verbosity (-v/-vv).")

    return p


def cmd_rank(args: argparse.Namespace) -> int:
    outdir = Path(args.outdir).expanduser().resolve() if args.outdir else None
    log_path = outdir / "logs" / "rank.log" if outdir is not None else None
    _setup_logging(args.verbose, logfile=log_path)

    logger = logging.getLogger("hapscore")
    logger.info("hapscore %s", __version__)

    try:
        options = ScoringOptions(
            missing_read_score=float(args.missing_read_score),
            pairing=args.pairing,
            threads=int(args.threads),
            progress=bool(args.progress),
        )
        aligner = UngappedAligner(
            default_baseq=int(args.default_baseq),
            snp_prior=float(args.snp_prior),
            indel_prior=float(args.indel_prior),
        )

        candidates = _load_candidates(args)
        reads = _load_read_evidence(args)
        logger.info("Scoring %d candidates against %d reads", len(candidates), len(reads))

        haplotypes = score_haplotypes(
            candidates, reads, args.reference, aligner=aligner, options=options
        )
        pairs = enumerate_pairs(haplotypes, aligner, options)
        top_pairs = HaplotypePairOrdering.top(pairs, int(args.top))

        print("rank\thaplotype1\thaplotype2\thas_variants\tpair_likelihood")
        for i, pair in enumerate(top_pairs, start=1):
            print(
                f"{i}\t{pair.haplotype1.sequence}\t{pair.haplotype2.sequence}\t"
                f"{int(pair.has_variants)}\t{pair.pair_likelihood:.6f}"
            )

        if outdir is not None:
            outdir = ensure_outdir(outdir)
            summary = summarize(
                reference=args.reference,
                n_reads=len(reads),
                haplotypes=HaplotypeOrdering.sort(haplotypes, descending=True),
                pairs=top_pairs,
                n_pairs=len(pairs),
                pairing=options.pairing,
                missing_read_score=options.missing_read_score,
            )
            write_json(outdir / "summary.json", summary)

            with open_textmaybe_gzip(outdir / "pairs.tsv.gz", "wt") as fh:
                fh.write("haplotype1\thaplotype2\thas_variants\tpair_likelihood\n")
                for pair in HaplotypePairOrdering.sort(pairs, descending=True):
                    fh.write(
                        f"{pair.haplotype1.sequence}\t{pair.haplotype2.sequence}\t"
                        f"{int(pair.has_variants)}\t{pair.pair_likelihood:.6f}\n"
                    )

            render_report(outdir=outdir, version=__version__, summary=summary)
        return 0
    except Exception as e:
        return _handle_error(e, log_path=log_path)


def main(argv: Optional[list[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.cmd == "rank":
        return cmd_rank(args)

    parser.error(f"Unknown command: {args.cmd}")
    return 2


if __name__ == "__main__":
    raise SystemExit(main())

from __future__ import annotations

import datetime as _dt
import logging
from pathlib import Path
from typing import Any, Dict, Sequence

from jinja2 import Template

from .haplotype import Haplotype
from .pair import HaplotypePair

logger = logging.getLogger(__name__)


_REPORT_TEMPLATE = Template(
    """<!doctype html>
<html lang="en">
<head>
  <meta charset="utf-8">
  <title>hapscore Report</title>
  <style>
    body { font-family: Arial, Helvetica, sans-serif; margin: 24px; }
    code, pre { background: #f6f8fa; padding: 2px 4px; border-radius: 4px; }
    h1, h2, h3 { margin-top: 1.2em; }
    table { border-collapse: collapse; margin-top: 0.6em; }
    th, td { border: 1px solid #ddd; padding: 8px; }
    th { background: #f2f2f2; text-align: left; }
    td.num { text-align: right; font-family: monospace; }
    .small { color: #666; font-size: 0.9em; }
  </style>
</head>
<body>

<h1>hapscore Report</h1>
<p class="small">Generated: {{ generated_at }}</p>

<h2>Run summary</h2>
<table>
  <tr><th>Reference</th><td><code>{{ reference or "(none)" }}</code></td></tr>
  <tr><th>Reads</th><td>{{ n_reads }}</td></tr>
  <tr><th>Candidate haplotypes</th><td>{{ haplotypes|length }}</td></tr>
  <tr><th>Pairs scored</th><td>{{ n_pairs }}</td></tr>
  <tr><th>Pairing mode</th><td>{{ pairing }}</td></tr>
  <tr><th>Failed-read score</th><td>{{ missing_read_score }}</td></tr>
</table>

<h2>Haplotypes</h2>
<table>
  <tr><th>#</th><th>Sequence</th><th>Variants</th><th>Reads log10 likelihood</th><th>Failed reads</th></tr>
  {% for h in haplotypes %}
  <tr>
    <td>{{ loop.index }}</td>
    <td><code>{{ h.sequence }}</code></td>
    <td>{{ "yes" if h.has_variants else "no" }}</td>
    <td class="num">{{ "%.4f"|format(h.reads_likelihood) }}</td>
    <td class="num">{{ h.failed_reads }}</td>
  </tr>
  {% endfor %}
</table>

<h2>Top pairs</h2>
<table>
  <tr><th>#</th><th>Haplotype 1</th><th>Haplotype 2</th><th>Variants</th><th>Pair log10 likelihood</th></tr>
  {% for p in pairs %}
  <tr>
    <td>{{ loop.index }}</td>
    <td><code>{{ p.haplotype1 }}</code></td>
    <td><code>{{ p.haplotype2 }}</code></td>
    <td>{{ "yes" if p.has_variants else "no" }}</td>
    <td class="num">{{ "%.4f"|format(p.pair_likelihood) }}</td>
  </tr>
  {% endfor %}
</table>

<h2>Interpretation notes</h2>
<ul>
  <li>Likelihoods are log10 scale; higher is better supported.</li>
  {% if pairing == "self" %}
  <li>Pairing mode "self" scores read evidence from the first haplotype only; pass
      <code>--pairing average</code> to use both members.</li>
  {% endif %}
  {% if missing_read_score == 0.0 %}
  <li>Reads that failed to align were scored 0.0 (log10 of certainty), which favours
      haplotypes with many failed reads.</li>
  {% endif %}
</ul>

<hr>
<p class="small">hapscore {{ version }}</p>
</body>
</html>"""
)


def summarize(
    *,
    reference: str,
    n_reads: int,
    haplotypes: Sequence[Haplotype],
    pairs: Sequence[HaplotypePair],
    n_pairs: int,
    pairing: str,
    missing_read_score: float,
) -> Dict[str, Any]:
    """JSON-able run summary; ``haplotypes`` and ``pairs`` are expected best first."""
    return {
        "reference": reference,
        "n_reads": int(n_reads),
        "n_pairs": int(n_pairs),
        "pairing": pairing,
        "missing_read_score": float(missing_read_score),
        "haplotypes": [
            {
                "sequence": h.sequence,
                "has_variants": bool(h.has_variants),
                "reads_likelihood": float(h.reads_likelihood),
                "per_read_likelihoods": [float(x) for x in h.per_read_likelihoods],
                "failed_reads": int(h.failed_reads),
            }
            for h in haplotypes
        ],
        "pairs": [
            {
                "haplotype1": p.haplotype1.sequence,
                "haplotype2": p.haplotype2.sequence,
                "has_variants": bool(p.has_variants),
                "pair_likelihood": float(p.pair_likelihood),
            }
            for p in pairs
        ],
    }


def render_report(
    *,
    outdir: str | Path,
    version: str,
    summary: Dict[str, Any],
) -> Path:
    outdir = Path(outdir)
    outdir.mkdir(parents=True, exist_ok=True)

    html = _REPORT_TEMPLATE.render(
        generated_at=_dt.datetime.now().isoformat(timespec="seconds"),
        version=version,
        reference=summary.get("reference"),
        n_reads=summary.get("n_reads", 0),
        n_pairs=summary.get("n_pairs", 0),
        pairing=summary.get("pairing"),
        missing_read_score=summary.get("missing_read_score"),
        haplotypes=summary.get("haplotypes", []),
        pairs=summary.get("pairs", []),
    )

    out_path = outdir / "report.html"
    out_path.write_text(html, encoding="utf-8")
    logger.info("Report written: %s", out_path)
    return out_path

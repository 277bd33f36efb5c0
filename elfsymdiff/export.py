from __future__ import annotations

import logging
import os
from typing import Dict, List, Sequence

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import pandas as pd

from .model import SectionReport

logger = logging.getLogger(__name__)


def section_file_stem(section: str) -> str:
    stem = section.lstrip('.').replace('/', '_')
    return stem or "unnamed"


def section_dataframe(report: SectionReport, labels: Sequence[str]) -> pd.DataFrame:
    """One row per reported symbol plus the Total row; sizes as nullable ints."""
    records: List[Dict] = []
    for row in report.rows + [report.total]:
        rec = {"name": row.name}
        for label, size in zip(labels, row.sizes):
            rec[label] = size
        for label, delta in zip(labels[1:], row.deltas):
            rec[f"delta_{label}"] = delta.signed
        records.append(rec)
    columns = ["name"] + list(labels) + [f"delta_{label}" for label in labels[1:]]
    df = pd.DataFrame(records, columns=columns)
    for label in labels:
        df[label] = df[label].astype("Int64")
    return df


def write_section_csvs(reports: Sequence[SectionReport], labels: Sequence[str], output_dir) -> List[str]:
    os.makedirs(output_dir, exist_ok=True)
    written = []
    for report in reports:
        if report.skipped:
            continue
        out_path = os.path.join(output_dir, f"{section_file_stem(report.section)}.csv")
        section_dataframe(report, labels).to_csv(out_path, index=False)
        logger.info(f"CSV written to: {out_path}")
        written.append(out_path)
    return written


def section_totals_frame(reports: Sequence[SectionReport], labels: Sequence[str]) -> pd.DataFrame:
    rows = {}
    for report in reports:
        if report.skipped:
            continue
        rows[report.section] = [s or 0 for s in report.total.sizes]
    return pd.DataFrame.from_dict(rows, orient="index", columns=list(labels))


def chart_section_totals(reports: Sequence[SectionReport], labels: Sequence[str], outpath) -> str:
    """Grouped bar chart: one group per section, one bar per binary."""
    df = section_totals_frame(reports, labels)

    fig, ax = plt.subplots(figsize=(max(6, 1.5 * len(df.index) + 2), 6))
    if df.empty:
        ax.text(0.5, 0.5, "No differing sections", ha='center', va='center')
        ax.set_axis_off()
    else:
        df.plot.bar(ax=ax, rot=0)
        ax.set_xlabel('Section')
        ax.set_ylabel('Bytes')
        ax.legend(loc='upper left', bbox_to_anchor=(1.02, 1))
    ax.set_title('Section Size Comparison')

    plt.savefig(outpath, dpi=200, bbox_inches='tight')
    plt.close(fig)
    logger.info(f"Section chart saved to: {outpath}")
    return str(outpath)

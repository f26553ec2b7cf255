"""Genomic interval collections for genes and peaks

Collections are DataFrames in bioframe column convention (chrom, start,
end, strand, then attribute columns). Coordinates are 1-based and closed,
as in GTF files and 10x peak identifiers.
"""
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional, Union

import pandas as pd

from ..config.schema import IntervalConfig
from ..data.base import FEATURE_COLUMN, FeatureTotals
from ..exceptions import DataLoadError
from ..utils.log import get_logger
from .annotation import load_gene_annotation

logger = get_logger(__name__, step="intervals")

# chr1:100-200 (Cell Ranger ARC) or chr1-100-200 (Signac style)
PEAK_ID = re.compile(r"^(?P<chrom>.+?)[:-](?P<start>\d+)-(?P<end>\d+)$")

INTERVAL_COLUMNS = ["chrom", "start", "end", "strand"]


@dataclass
class IntervalCollections:
    """Gene and peak interval collections with summarized totals attached"""

    genes: pd.DataFrame
    peaks: pd.DataFrame


def empty_intervals(*extra_columns: str) -> pd.DataFrame:
    """Zero-row interval table with the standard columns"""
    columns = {
        "chrom": pd.Series([], dtype=object),
        "start": pd.Series([], dtype="int64"),
        "end": pd.Series([], dtype="int64"),
        "strand": pd.Series([], dtype=object),
    }
    for name in extra_columns:
        columns[name] = pd.Series([], dtype=object)
    return pd.DataFrame(columns)


def parse_peak_ids(peak_ids: Iterable[str]) -> pd.DataFrame:
    """
    Parse coordinate-encoded peak identifiers into intervals

    Args:
        peak_ids: Identifiers such as "chr1:100-200" or "chr1-100-200"

    Returns:
        DataFrame with chrom, start, end, strand ("*") and the original
        identifier in the 'feature' column

    Raises:
        DataLoadError: If an identifier does not encode coordinates or has
            start > end
    """
    records = []
    for peak_id in peak_ids:
        match = PEAK_ID.match(str(peak_id))
        if match is None:
            raise DataLoadError(
                f"Peak identifier does not encode coordinates: {peak_id!r}",
                step="intervals",
            )
        start, end = int(match.group("start")), int(match.group("end"))
        if start > end:
            raise DataLoadError(
                f"Peak identifier has start > end: {peak_id!r}", step="intervals"
            )
        records.append((match.group("chrom"), start, end, "*", str(peak_id)))

    if not records:
        return empty_intervals(FEATURE_COLUMN)

    peaks = pd.DataFrame.from_records(records, columns=INTERVAL_COLUMNS + [FEATURE_COLUMN])
    peaks["start"] = peaks["start"].astype("int64")
    peaks["end"] = peaks["end"].astype("int64")
    return peaks


def build_peak_intervals(peak_totals: pd.Series) -> pd.DataFrame:
    """Peak intervals in input order with a 'total_accessibility' column"""
    peaks = parse_peak_ids(peak_totals.index)
    peaks["total_accessibility"] = peak_totals.to_numpy()
    return peaks


def build_gene_intervals(gene_totals: pd.Series, annotation: pd.DataFrame) -> pd.DataFrame:
    """
    Annotated genes present in the expression data, with 'total_expression'

    Genes without an annotation record are dropped; annotation order is kept.
    """
    genes = annotation[annotation["gene_id"].isin(gene_totals.index)].copy()
    genes["total_expression"] = genes["gene_id"].map(gene_totals)

    n_missing = len(set(gene_totals.index) - set(genes["gene_id"]))
    if n_missing:
        logger.info("genes_without_annotation", n_dropped=n_missing)
    return genes.reset_index(drop=True)


def build_interval_collections(
    totals: FeatureTotals,
    gtf_path: Union[str, Path],
    config: Optional[IntervalConfig] = None,
) -> IntervalCollections:
    """
    Attach genomic coordinates to genes and peaks

    Peaks take their coordinates from their identifiers. Genes take theirs
    from the annotation's gene records, matched on gene_id.

    Args:
        totals: Output of summarize_features
        gtf_path: Gene annotation (GTF, optionally gzip-compressed)
        config: Interval settings

    Returns:
        IntervalCollections with 'genes' and 'peaks'

    Raises:
        AnnotationParseError: If the annotation cannot be parsed
        DataLoadError: If a peak identifier does not encode coordinates
    """
    if config is None:
        config = IntervalConfig()

    annotation = load_gene_annotation(gtf_path, config)

    peaks = build_peak_intervals(totals.peak_totals)
    genes = build_gene_intervals(totals.gene_totals, annotation)

    logger.info("intervals_built", n_genes=len(genes), n_peaks=len(peaks))
    return IntervalCollections(genes=genes, peaks=peaks)

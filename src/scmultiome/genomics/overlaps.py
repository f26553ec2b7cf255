"""Map accessibility peaks onto protein-coding genes"""
import warnings
from dataclasses import dataclass
from typing import Optional

import bioframe as bf
import numpy as np
import pandas as pd

from ..config.schema import IntervalConfig
from ..exceptions import NoOverlapWarning
from ..utils.log import get_logger
from .chromosomes import ChromStyle, detect_style, normalize_chrom_style
from .intervals import IntervalCollections

logger = get_logger(__name__, step="overlaps")

OVERLAP_COLUMNS = ["peak_index", "gene_index"]


@dataclass
class PeakGeneMapping:
    """Peak-to-gene overlap pairs and the collections they index into

    ``overlaps`` holds positional indices: row ``peak_index`` of ``peaks``
    overlaps row ``gene_index`` of ``protein_coding``.
    """

    overlaps: pd.DataFrame
    protein_coding: pd.DataFrame
    peaks: pd.DataFrame

    @property
    def n_overlaps(self) -> int:
        return len(self.overlaps)


def empty_overlaps() -> pd.DataFrame:
    return pd.DataFrame({c: pd.Series([], dtype="int64") for c in OVERLAP_COLUMNS})


def find_overlaps(query: pd.DataFrame, subject: pd.DataFrame) -> pd.DataFrame:
    """
    All pairs of overlapping closed intervals

    Two intervals overlap when they are on the same chromosome and
    ``query.start <= subject.end`` and ``subject.start <= query.end``, so
    intervals sharing a single base overlap and adjacent ones do not.

    Args:
        query: Interval table (chrom, start, end)
        subject: Interval table (chrom, start, end)

    Returns:
        DataFrame with integer columns peak_index (row position in query)
        and gene_index (row position in subject), sorted by both
    """
    if query.empty or subject.empty:
        return empty_overlaps()

    # bioframe works on half-open intervals: [start, end] == [start, end + 1)
    q = pd.DataFrame({
        "chrom": query["chrom"].astype(str).to_numpy(),
        "start": query["start"].astype("int64").to_numpy(),
        "end": query["end"].astype("int64").to_numpy() + 1,
        "peak_index": np.arange(len(query), dtype="int64"),
    })
    s = pd.DataFrame({
        "chrom": subject["chrom"].astype(str).to_numpy(),
        "start": subject["start"].astype("int64").to_numpy(),
        "end": subject["end"].astype("int64").to_numpy() + 1,
        "gene_index": np.arange(len(subject), dtype="int64"),
    })

    hits = bf.overlap(q, s, how="inner", suffixes=("_q", "_s"))
    if hits.empty:
        return empty_overlaps()

    pairs = pd.DataFrame({
        "peak_index": hits["peak_index_q"].astype("int64").to_numpy(),
        "gene_index": hits["gene_index_s"].astype("int64").to_numpy(),
    })
    return pairs.sort_values(OVERLAP_COLUMNS).reset_index(drop=True)


def resolve_chrom_style(config: IntervalConfig, peaks: pd.DataFrame) -> ChromStyle:
    """Naming convention to compare in; 'auto' follows the peaks"""
    if config.chrom_style != "auto":
        return ChromStyle(config.chrom_style)
    detected = detect_style(peaks["chrom"]) if not peaks.empty else None
    return detected or ChromStyle.PREFIXED


def select_protein_coding(genes: pd.DataFrame, biotype: str = "protein_coding") -> pd.DataFrame:
    """Genes whose biotype equals the given value"""
    if "gene_biotype" not in genes.columns:
        return genes.iloc[0:0].copy()
    return genes[genes["gene_biotype"].isin([biotype])].reset_index(drop=True)


def map_peaks_to_genes(
    collections: IntervalCollections, config: Optional[IntervalConfig] = None
) -> PeakGeneMapping:
    """
    Find which peaks overlap which protein-coding genes

    Gene and peak chromosome names are translated to one convention first,
    so Ensembl ("1") and UCSC ("chr1") names compare equal.

    Args:
        collections: Output of build_interval_collections
        config: Interval settings (biotype and chromosome naming)

    Returns:
        PeakGeneMapping; its overlaps are empty, with a NoOverlapWarning,
        when no peak touches a protein-coding gene
    """
    if config is None:
        config = IntervalConfig()

    style = resolve_chrom_style(config, collections.peaks)
    protein_coding = select_protein_coding(collections.genes, config.protein_coding_biotype)
    protein_coding = normalize_chrom_style(protein_coding, style)
    peaks = normalize_chrom_style(collections.peaks, style)

    logger.info(
        "protein_coding_selected",
        n_genes=len(collections.genes),
        n_protein_coding=len(protein_coding),
        chrom_style=style.value,
    )

    overlaps = find_overlaps(peaks, protein_coding)

    if overlaps.empty:
        message = "No overlaps were found between ATAC peaks and protein-coding genes"
        warnings.warn(message, NoOverlapWarning, stacklevel=2)
        logger.warning("no_overlaps", n_peaks=len(peaks), n_protein_coding=len(protein_coding))
    else:
        logger.info(
            "overlaps_found",
            n_overlaps=len(overlaps),
            n_mapped_peaks=int(overlaps["peak_index"].nunique()),
            n_mapped_genes=int(overlaps["gene_index"].nunique()),
        )

    return PeakGeneMapping(overlaps=overlaps, protein_coding=protein_coding, peaks=peaks)

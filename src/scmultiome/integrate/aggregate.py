"""Gene-level integration of expression and accessibility"""
from dataclasses import dataclass
from enum import Enum
from typing import Optional

import numpy as np
import pandas as pd

from ..config.schema import NormalizeConfig, VizConfig
from ..data.base import FEATURE_COLUMN, ModalitySplit
from ..utils.log import get_logger
from .diagnostics import (
    DiagnosticSummaries,
    plot_genes_without_atac,
    plot_unmapped_peaks,
    summarize_genes_without_atac,
    summarize_unmapped_peaks,
)
from .normalize import mean_normalized

logger = get_logger(__name__, step="integrate")

MERGED_COLUMNS = ["gene_id", "expression_cpm", "atac_cpm"]


class AggregationPolicy(str, Enum):
    """How the peaks overlapping one gene are combined"""

    SUM = "sum"
    MEAN = "mean"


@dataclass
class IntegrationResult:
    """Merged gene table, the genes it refers to and diagnostics"""

    merged: pd.DataFrame
    protein_coding: pd.DataFrame
    diagnostics: DiagnosticSummaries

    @property
    def n_genes_with_atac(self) -> int:
        return int(self.merged["atac_cpm"].notna().sum())


def aggregate_peaks_to_genes(
    peak_means: pd.Series,
    peaks: pd.DataFrame,
    genes_pc: pd.DataFrame,
    overlaps: pd.DataFrame,
    policy: AggregationPolicy = AggregationPolicy.SUM,
) -> pd.Series:
    """
    Combine the normalized signal of overlapping peaks per gene

    Each overlap pair contributes the mean signal of its peak to its gene,
    so a peak spanning two genes counts towards both.

    Args:
        peak_means: Mean normalized signal indexed by peak identifier
        peaks: Peak collection the overlap peak_index refers to
        genes_pc: Protein-coding gene collection the gene_index refers to
        overlaps: peak_index/gene_index pairs
        policy: SUM adds contributions, MEAN averages them

    Returns:
        Series named 'atac_cpm' indexed by gene_id; genes without any
        overlapping peak are absent
    """
    policy = AggregationPolicy(policy)
    if overlaps.empty:
        return pd.Series([], dtype=float, name="atac_cpm", index=pd.Index([], name="gene_id"))

    peak_ids = peaks[FEATURE_COLUMN].to_numpy()[overlaps["peak_index"].to_numpy()]
    contributions = pd.DataFrame({
        "gene_id": genes_pc["gene_id"].to_numpy()[overlaps["gene_index"].to_numpy()],
        "signal": peak_means.reindex(peak_ids).to_numpy(dtype=float),
    })

    grouped = contributions.groupby("gene_id", sort=True)["signal"]
    aggregated = grouped.sum() if policy is AggregationPolicy.SUM else grouped.mean()
    return aggregated.rename("atac_cpm")


def merge_modalities(expr_means: pd.Series, gene_accessibility: pd.Series) -> pd.DataFrame:
    """
    Left join of gene expression with gene accessibility

    Every expressed gene is kept; genes without accessibility get NaN,
    never 0. Rows are sorted by gene_id.
    """
    merged = pd.DataFrame({
        "gene_id": expr_means.index.astype(str),
        "expression_cpm": expr_means.to_numpy(dtype=float),
    })
    accessibility = gene_accessibility.rename("atac_cpm").rename_axis("gene_id").reset_index()
    merged = merged.merge(accessibility, on="gene_id", how="left")
    merged["atac_cpm"] = merged["atac_cpm"].astype(float)
    return merged[MERGED_COLUMNS].sort_values("gene_id", kind="mergesort").reset_index(drop=True)


def normalize_and_integrate(
    split: ModalitySplit,
    genes_pc: pd.DataFrame,
    peaks: pd.DataFrame,
    overlaps: pd.DataFrame,
    config: Optional[NormalizeConfig] = None,
    viz_config: Optional[VizConfig] = None,
) -> IntegrationResult:
    """
    Normalize both modalities, aggregate accessibility per gene and merge

    Expression is restricted to protein-coding genes before normalization;
    accessibility is normalized over all peaks.

    Args:
        split: Raw expression and peak count tables
        genes_pc: Finalized protein-coding gene collection
        peaks: Peak collection matching the overlap indices
        overlaps: peak_index/gene_index pairs
        config: Scale factor and aggregation policy
        viz_config: Figure settings for the diagnostic plots

    Returns:
        IntegrationResult
    """
    if config is None:
        config = NormalizeConfig()

    pc_ids = set(genes_pc["gene_id"].astype(str))
    expression = split.expression
    expression_pc = expression[expression[FEATURE_COLUMN].astype(str).isin(pc_ids)]

    expr_means = mean_normalized(expression_pc, config.scale_factor)
    peak_means = mean_normalized(split.peaks, config.scale_factor)
    logger.info(
        "modalities_normalized",
        n_genes=len(expr_means),
        n_peaks=len(peak_means),
        scale_factor=config.scale_factor,
    )

    gene_accessibility = aggregate_peaks_to_genes(
        peak_means, peaks, genes_pc, overlaps, AggregationPolicy(config.aggregation)
    )
    merged = merge_modalities(expr_means, gene_accessibility)
    logger.info(
        "modalities_merged",
        n_genes=len(merged),
        n_genes_with_atac=int(merged["atac_cpm"].notna().sum()),
        aggregation=config.aggregation,
    )

    mapped = np.unique(overlaps["peak_index"].to_numpy(dtype="int64"))
    is_unmapped = np.ones(len(peaks), dtype=bool)
    is_unmapped[mapped] = False
    unmapped_peaks = peaks[is_unmapped]

    genes_no_atac = merged[merged["atac_cpm"].isna()]
    genes_no_atac = genes_no_atac.merge(genes_pc[["gene_id", "chrom"]], on="gene_id", how="inner")

    diagnostics = DiagnosticSummaries(
        summary_unmapped_peaks=summarize_unmapped_peaks(len(peaks), len(mapped)),
        summary_genes_no_atac=summarize_genes_without_atac(merged),
        plot_unmapped_peaks=plot_unmapped_peaks(unmapped_peaks, viz_config),
        plot_genes_no_atac=plot_genes_without_atac(genes_no_atac, viz_config),
    )
    return IntegrationResult(merged=merged, protein_coding=genes_pc, diagnostics=diagnostics)

"""Summaries and plots of features that could not be integrated"""
import warnings
from dataclasses import dataclass
from typing import Any, Dict, Optional

import numpy as np
import pandas as pd
from matplotlib.figure import Figure

from ..config.schema import VizConfig
from ..exceptions import EmptyPlotDataWarning
from ..utils.log import get_logger
from ..viz.plots import boxplot_by_chromosome, placeholder_figure

logger = get_logger(__name__, step="integrate")

NO_UNMAPPED_PEAKS = "No unmapped peaks to plot"
NO_GENES_WITHOUT_ATAC = "No genes without ATAC signal to plot"


@dataclass
class DiagnosticSummaries:
    """One-row count tables and the two diagnostic figures"""

    summary_unmapped_peaks: pd.DataFrame
    summary_genes_no_atac: pd.DataFrame
    plot_unmapped_peaks: Figure
    plot_genes_no_atac: Figure

    def to_dict(self) -> Dict[str, Any]:
        return {
            **self.summary_unmapped_peaks.iloc[0].to_dict(),
            **self.summary_genes_no_atac.iloc[0].to_dict(),
        }


def summarize_unmapped_peaks(total_peaks: int, mapped_peaks: int) -> pd.DataFrame:
    """Counts of peaks with and without an overlapping protein-coding gene"""
    summary = pd.DataFrame({
        "Total_Peaks": [int(total_peaks)],
        "Mapped_Peaks": [int(mapped_peaks)],
        "Unmapped_Peaks": [int(total_peaks) - int(mapped_peaks)],
    })
    logger.info("unmapped_peaks_summarized", **summary.iloc[0].to_dict())
    return summary


def summarize_genes_without_atac(merged: pd.DataFrame) -> pd.DataFrame:
    """Counts of merged genes with and without accessibility signal"""
    n_without = int(merged["atac_cpm"].isna().sum())
    summary = pd.DataFrame({
        "Total_PC_Genes_in_Expr": [len(merged)],
        "Genes_with_ATAC_signal": [len(merged) - n_without],
        "Genes_without_ATAC_signal": [n_without],
    })
    logger.info("genes_without_atac_summarized", **summary.iloc[0].to_dict())
    return summary


def _empty_plot(title: str, config: Optional[VizConfig]) -> Figure:
    warnings.warn(title, EmptyPlotDataWarning, stacklevel=3)
    logger.warning("empty_plot_data", title=title)
    return placeholder_figure(title, config=config)


def plot_unmapped_peaks(unmapped_peaks: pd.DataFrame, config: Optional[VizConfig] = None) -> Figure:
    """Boxplot of log10(total accessibility + 1) of unmapped peaks per chromosome"""
    if unmapped_peaks.empty:
        return _empty_plot(NO_UNMAPPED_PEAKS, config)

    data = pd.DataFrame({
        "chrom": unmapped_peaks["chrom"].astype(str).to_numpy(),
        "log_accessibility": np.log10(
            unmapped_peaks["total_accessibility"].to_numpy(dtype=float) + 1.0
        ),
    })
    return boxplot_by_chromosome(
        data,
        "log_accessibility",
        title="Intensity of Unmapped ATAC Peaks by Chromosome",
        ylabel="Log10(Total Accessibility + 1)",
        config=config,
    )


def plot_genes_without_atac(genes_no_atac: pd.DataFrame, config: Optional[VizConfig] = None) -> Figure:
    """Boxplot of expression of genes lacking accessibility signal per chromosome"""
    if genes_no_atac.empty:
        return _empty_plot(NO_GENES_WITHOUT_ATAC, config)

    return boxplot_by_chromosome(
        genes_no_atac,
        "expression_cpm",
        title="Expression of Genes without ATAC Signal by Chromosome",
        ylabel="Expression (log2(CPM+1))",
        config=config,
    )

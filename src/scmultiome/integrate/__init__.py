"""Normalization, peak-to-gene aggregation and integration diagnostics"""

from .aggregate import (
    AggregationPolicy,
    IntegrationResult,
    aggregate_peaks_to_genes,
    merge_modalities,
    normalize_and_integrate,
)
from .diagnostics import (
    DiagnosticSummaries,
    plot_genes_without_atac,
    plot_unmapped_peaks,
    summarize_genes_without_atac,
    summarize_unmapped_peaks,
)
from .normalize import cpm_log2, mean_normalized

__all__ = [
    "AggregationPolicy",
    "IntegrationResult",
    "aggregate_peaks_to_genes",
    "merge_modalities",
    "normalize_and_integrate",
    "DiagnosticSummaries",
    "plot_genes_without_atac",
    "plot_unmapped_peaks",
    "summarize_genes_without_atac",
    "summarize_unmapped_peaks",
    "cpm_log2",
    "mean_normalized",
]

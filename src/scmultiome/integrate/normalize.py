"""Counts-per-million normalization"""
import numpy as np
import pandas as pd

from ..data.base import FEATURE_COLUMN, count_columns


def cpm_log2(counts: pd.DataFrame, scale_factor: float = 1e6) -> pd.DataFrame:
    """
    log2(CPM + 1) of a feature-by-cell count matrix

    Each cell (column) is divided by its total and scaled to ``scale_factor``.
    Columns summing to zero are divided by 1 instead, so an empty cell stays
    at log2(0 + 1) = 0.

    Args:
        counts: Numeric DataFrame, features as rows, cells as columns
        scale_factor: Target library size (1e6 for CPM)

    Returns:
        DataFrame of the same shape, index and columns
    """
    values = counts.to_numpy(dtype=float)
    col_sums = values.sum(axis=0)
    col_sums[col_sums == 0] = 1.0
    normalized = np.log2(values / col_sums * scale_factor + 1.0)
    return pd.DataFrame(normalized, index=counts.index, columns=counts.columns)


def mean_normalized(table: pd.DataFrame, scale_factor: float = 1e6) -> pd.Series:
    """
    Mean log2(CPM + 1) across cells for each feature of a count table

    Args:
        table: Feature count table with a 'feature' column
        scale_factor: Target library size

    Returns:
        Series indexed by feature identifier
    """
    counts = table[count_columns(table)].set_axis(
        pd.Index(table[FEATURE_COLUMN].astype(str), name=FEATURE_COLUMN), axis=0
    )
    normalized = cpm_log2(counts, scale_factor)
    if normalized.shape[1] == 0:
        return pd.Series(np.nan, index=normalized.index, dtype=float)
    return normalized.mean(axis=1)

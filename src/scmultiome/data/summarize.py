"""Per-feature total counts"""
from typing import Dict

import pandas as pd

from ..utils.log import get_logger
from .base import FEATURE_COLUMN, FeatureTotals, ModalitySplit, count_columns

logger = get_logger(__name__, step="summarize")


def feature_totals(table: pd.DataFrame) -> pd.Series:
    """Row sums over all cell columns, indexed by feature identifier"""
    counts = table[count_columns(table)]
    totals = counts.sum(axis=1)
    totals.index = pd.Index(table[FEATURE_COLUMN].astype(str), name=FEATURE_COLUMN)
    return totals


def _describe(totals: pd.Series) -> Dict[str, float]:
    if totals.empty:
        return {"n": 0}
    return {
        "n": int(len(totals)),
        "min": float(totals.min()),
        "median": float(totals.median()),
        "mean": round(float(totals.mean()), 3),
        "max": float(totals.max()),
    }


def summarize_features(split: ModalitySplit) -> FeatureTotals:
    """
    Compute total counts per gene and per peak

    Args:
        split: Output of split_modalities

    Returns:
        FeatureTotals with one entry per input row of each subset
    """
    gene_totals = feature_totals(split.expression).rename("total_expression")
    peak_totals = feature_totals(split.peaks).rename("total_accessibility")

    logger.info("expression_totals", **_describe(gene_totals))
    logger.info("accessibility_totals", **_describe(peak_totals))

    return FeatureTotals(gene_totals=gene_totals, peak_totals=peak_totals)

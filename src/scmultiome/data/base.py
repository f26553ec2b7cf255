"""Containers passed between the count-table steps"""
from dataclasses import dataclass, field
from typing import Any, Dict, List

import pandas as pd

FEATURE_COLUMN = "feature"


def count_columns(table: pd.DataFrame) -> List[str]:
    """Cell columns of a feature count table (everything except 'feature')"""
    return [c for c in table.columns if c != FEATURE_COLUMN]


@dataclass
class ModalitySplit:
    """Expression and accessibility subsets of one count table

    Rows whose identifier matched neither pattern are listed in
    ``unmatched`` and are not part of either subset.
    """

    expression: pd.DataFrame
    peaks: pd.DataFrame
    unmatched: List[str] = field(default_factory=list)

    @property
    def n_unmatched(self) -> int:
        return len(self.unmatched)

    def to_dict(self) -> Dict[str, Any]:
        """Row counts per subset"""
        return {
            "n_expression": len(self.expression),
            "n_peaks": len(self.peaks),
            "n_unmatched": self.n_unmatched,
        }


@dataclass
class FeatureTotals:
    """Total counts per feature across all cells, one Series per modality"""

    gene_totals: pd.Series
    peak_totals: pd.Series

    def to_dict(self) -> Dict[str, Any]:
        return {
            "n_genes": len(self.gene_totals),
            "n_peaks": len(self.peak_totals),
        }

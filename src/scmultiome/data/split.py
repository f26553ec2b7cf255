"""Split a mixed count table into expression and accessibility subsets"""
import re
import warnings
from typing import Optional

import numpy as np
import pandas as pd

from ..config.schema import SplitConfig
from ..exceptions import DataLoadError, UnmatchedFeatureWarning
from ..utils.log import get_logger
from .base import FEATURE_COLUMN, ModalitySplit

logger = get_logger(__name__, step="split")


def _matches(ids: pd.Series, pattern: str) -> np.ndarray:
    """Boolean mask of identifiers matching a regex (searched, not anchored)"""
    regex = re.compile(pattern)
    return np.array([regex.search(i) is not None for i in ids], dtype=bool)


def split_modalities(
    table: pd.DataFrame, config: Optional[SplitConfig] = None
) -> ModalitySplit:
    """
    Partition feature rows by identifier pattern

    Identifiers matching ``config.gene_pattern`` go to the expression subset;
    the remaining ones matching ``config.peak_pattern`` go to the peak subset.
    An identifier matching both patterns is therefore only ever in the
    expression subset. Rows matching neither are handled according to
    ``config.unmatched``.

    Args:
        table: Feature count table with a 'feature' column
        config: Split settings (defaults: ENSG genes, chr-coordinate peaks, drop)

    Returns:
        ModalitySplit with both subsets and the unmatched identifiers

    Raises:
        DataLoadError: If the table has no 'feature' column, or unmatched
            rows exist and the policy is 'raise'
    """
    if config is None:
        config = SplitConfig()

    if FEATURE_COLUMN not in table.columns:
        raise DataLoadError(
            f"Count table has no '{FEATURE_COLUMN}' column", step="split"
        )

    ids = table[FEATURE_COLUMN].astype(str)
    is_gene = _matches(ids, config.gene_pattern)
    is_peak = _matches(ids, config.peak_pattern) & ~is_gene
    is_unmatched = ~(is_gene | is_peak)

    unmatched = ids[is_unmatched].tolist()
    if unmatched:
        message = (
            f"{len(unmatched)} feature(s) matched neither the gene pattern "
            f"{config.gene_pattern!r} nor the peak pattern {config.peak_pattern!r}"
        )
        if config.unmatched == "raise":
            raise DataLoadError(message, step="split")
        if config.unmatched == "warn":
            warnings.warn(message, UnmatchedFeatureWarning, stacklevel=2)
        logger.warning(
            "unmatched_features_dropped",
            n_unmatched=len(unmatched),
            examples=unmatched[:5],
            policy=config.unmatched,
        )

    result = ModalitySplit(
        expression=table[is_gene].reset_index(drop=True),
        peaks=table[is_peak].reset_index(drop=True),
        unmatched=unmatched,
    )
    logger.info("modalities_split", **result.to_dict())
    return result

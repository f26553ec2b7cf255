"""Final touches on the protein-coding gene collection"""
import pandas as pd

from ..utils.log import get_logger

logger = get_logger(__name__, step="finalize")


def finalize_gene_intervals(protein_coding: pd.DataFrame) -> pd.DataFrame:
    """Return a copy with 'gene_name' renamed to 'gene_symbol' when present"""
    if "gene_name" not in protein_coding.columns:
        return protein_coding.copy()

    logger.info("column_renamed", old="gene_name", new="gene_symbol")
    return protein_coding.rename(columns={"gene_name": "gene_symbol"})

"""10x Genomics feature-barcode matrix loader"""
import gzip
import zlib
from pathlib import Path
from typing import Optional, Union

import numpy as np
import pandas as pd
from scipy import io as scipy_io
from scipy import sparse

from ..exceptions import DataLoadError
from ..utils.log import get_logger
from .base import FEATURE_COLUMN

logger = get_logger(__name__, step="load")

MATRIX_NAMES = ("matrix.mtx.gz", "matrix.mtx")
FEATURE_NAMES = ("features.tsv.gz", "features.tsv", "genes.tsv.gz", "genes.tsv")
BARCODE_NAMES = ("barcodes.tsv.gz", "barcodes.tsv")


def _find_file(folder: Path, candidates) -> Optional[Path]:
    for name in candidates:
        path = folder / name
        if path.is_file():
            return path
    return None


def _read_matrix(path: Path) -> sparse.csr_matrix:
    opener = gzip.open if path.suffix == ".gz" else open
    with opener(path, "rb") as handle:
        matrix = scipy_io.mmread(handle)
    return sparse.csr_matrix(matrix)


def _read_first_column(path: Path) -> pd.Series:
    table = pd.read_csv(path, sep="\t", header=None, dtype=str)
    return table.iloc[:, 0]


def load_feature_matrix(data_folder: Union[str, Path]) -> pd.DataFrame:
    """
    Load a 10x feature-barcode matrix as a dense feature-by-cell table

    Reads ``matrix.mtx``, ``features.tsv`` (or the older ``genes.tsv``) and
    ``barcodes.tsv`` from the directory, each optionally gzip-compressed.

    Args:
        data_folder: Path to the ``filtered_feature_bc_matrix`` directory

    Returns:
        DataFrame whose first column 'feature' holds the feature identifiers,
        followed by one count column per cell barcode

    Raises:
        DataLoadError: If the directory or a required file is missing, a file
            cannot be parsed, dimensions disagree, identifiers are duplicated
            or counts are negative
    """
    folder = Path(data_folder)
    logger.info("loading_matrix", path=str(folder))

    if not folder.is_dir():
        raise DataLoadError(f"Matrix directory not found: {folder}", step="load")

    matrix_path = _find_file(folder, MATRIX_NAMES)
    features_path = _find_file(folder, FEATURE_NAMES)
    barcodes_path = _find_file(folder, BARCODE_NAMES)

    missing = [
        names[-1]
        for path, names in (
            (matrix_path, MATRIX_NAMES),
            (features_path, FEATURE_NAMES),
            (barcodes_path, BARCODE_NAMES),
        )
        if path is None
    ]
    if missing:
        raise DataLoadError(
            f"Missing required file(s) in {folder}: {', '.join(missing)}", step="load"
        )

    try:
        matrix = _read_matrix(matrix_path)
        feature_ids = _read_first_column(features_path)
        barcodes = _read_first_column(barcodes_path)
    except (
        OSError,
        EOFError,
        zlib.error,
        ValueError,
        IndexError,
        RuntimeError,
        pd.errors.ParserError,
    ) as e:
        raise DataLoadError(f"Cannot parse 10x files in {folder}: {e}", step="load") from e

    n_features, n_cells = matrix.shape
    if n_features != len(feature_ids) or n_cells != len(barcodes):
        raise DataLoadError(
            f"Matrix shape {matrix.shape} does not match "
            f"{len(feature_ids)} features x {len(barcodes)} barcodes",
            step="load",
        )

    if feature_ids.duplicated().any():
        dupes = feature_ids[feature_ids.duplicated()].unique().tolist()
        raise DataLoadError(f"Duplicate feature identifiers: {dupes[:5]}", step="load")
    if barcodes.duplicated().any():
        raise DataLoadError("Duplicate cell barcodes", step="load")
    if matrix.nnz and matrix.data.min() < 0:
        raise DataLoadError("Count matrix contains negative values", step="load")

    dense = matrix.toarray()
    if np.issubdtype(dense.dtype, np.floating) and np.all(np.mod(dense, 1) == 0):
        dense = dense.astype(np.int64)

    table = pd.DataFrame(dense, columns=barcodes.tolist())
    table.insert(0, FEATURE_COLUMN, feature_ids.tolist())

    density = matrix.nnz / (n_features * n_cells) if n_features and n_cells else 0.0
    logger.info(
        "matrix_loaded",
        n_features=n_features,
        n_cells=n_cells,
        density=round(density, 4),
    )
    return table

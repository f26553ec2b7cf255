"""Pytest configuration and fixtures for scmultiome tests

Provides synthetic 10x matrix directories, tiny GTF annotations and
configs pointing at them.
"""
import gzip
from pathlib import Path
from typing import Dict, List, Optional, Sequence

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd
import pytest

from scmultiome.config import AppConfig, default_config


# ============================================================================
# Writers
# ============================================================================

def _open_text(path: Path, gzipped: bool):
    if gzipped:
        return gzip.open(str(path) + ".gz", "wt")
    return open(path, "w")


def write_10x_dir(
    folder: Path,
    features: Sequence[str],
    barcodes: Sequence[str],
    counts,
    gzipped: bool = True,
) -> Path:
    """Write matrix.mtx, features.tsv and barcodes.tsv in 10x layout

    Args:
        folder: Directory to create
        features: Feature identifiers (rows)
        barcodes: Cell barcodes (columns)
        counts: Dense features x cells array
        gzipped: Write .gz files as Cell Ranger does
    """
    folder.mkdir(parents=True, exist_ok=True)
    counts = np.asarray(counts, dtype=np.int64).reshape(len(features), len(barcodes))
    rows, cols = np.nonzero(counts)

    with _open_text(folder / "matrix.mtx", gzipped) as f:
        f.write("%%MatrixMarket matrix coordinate integer general\n")
        f.write("%metadata_json: {}\n")
        f.write(f"{len(features)} {len(barcodes)} {len(rows)}\n")
        for i, j in zip(rows, cols):
            f.write(f"{i + 1} {j + 1} {counts[i, j]}\n")

    with _open_text(folder / "features.tsv", gzipped) as f:
        for feature in features:
            kind = "Gene Expression" if feature.startswith("ENSG") else "Peaks"
            f.write(f"{feature}\t{feature}\t{kind}\n")

    with _open_text(folder / "barcodes.tsv", gzipped) as f:
        for barcode in barcodes:
            f.write(f"{barcode}\n")

    return folder


def gtf_line(
    chrom: str,
    start: int,
    end: int,
    gene_id: str,
    biotype: str = "protein_coding",
    gene_name: Optional[str] = None,
    feature: str = "gene",
    strand: str = "+",
    biotype_key: str = "gene_biotype",
) -> str:
    attributes = f'gene_id "{gene_id}"; '
    if gene_name is not None:
        attributes += f'gene_name "{gene_name}"; '
    attributes += f'{biotype_key} "{biotype}";'
    return "\t".join([chrom, "test", feature, str(start), str(end), ".", strand, ".", attributes])


def write_gtf(path: Path, lines: List[str], gzipped: bool = True) -> Path:
    """Write GTF records (with a header comment); returns the file written"""
    text = "#!genome-build test\n" + "\n".join(lines) + "\n"
    if gzipped:
        path = Path(str(path) + ".gz") if path.suffix != ".gz" else path
        with gzip.open(path, "wt") as f:
            f.write(text)
    else:
        path.write_text(text)
    return path


def count_table(rows: Dict[str, List[int]], cells: Optional[List[str]] = None) -> pd.DataFrame:
    """Feature count table from {feature: counts}"""
    n_cells = len(next(iter(rows.values()))) if rows else 0
    cells = cells or [f"CELL{i}" for i in range(n_cells)]
    table = pd.DataFrame.from_dict(rows, orient="index", columns=cells)
    table.insert(0, "feature", list(rows))
    return table.reset_index(drop=True)


# ============================================================================
# Scenario Fixtures
# ============================================================================

FOUR_FEATURES = ["ENSG1", "ENSG2", "chr1:100-200", "chr1:300-400"]
FOUR_FEATURE_COUNTS = [
    [5, 0],
    [5, 10],
    [3, 1],
    [1, 3],
]


@pytest.fixture
def matrix_dir(tmp_path) -> Path:
    """4-feature, 2-cell 10x directory: two genes and two peaks"""
    return write_10x_dir(
        tmp_path / "filtered_feature_bc_matrix",
        FOUR_FEATURES,
        ["AAAC-1", "AAAG-1"],
        FOUR_FEATURE_COUNTS,
    )


@pytest.fixture
def gtf_path(tmp_path) -> Path:
    """Ensembl-style annotation: ENSG1 is protein-coding on '1' over the first peak

    ENSG2 has no record. A transcript line and a lncRNA gene on another
    chromosome are included as noise.
    """
    return write_gtf(
        tmp_path / "genes.gtf",
        [
            gtf_line("1", 150, 250, "ENSG1", gene_name="GENE1"),
            gtf_line("1", 150, 250, "ENSG1", gene_name="GENE1", feature="transcript"),
            gtf_line("2", 1000, 2000, "ENSG9", biotype="lncRNA", gene_name="LNC9"),
        ],
    )


@pytest.fixture
def app_config(matrix_dir, gtf_path, tmp_path) -> AppConfig:
    """Default config for the 4-feature scenario writing to tmp_path/outputs"""
    return default_config(matrix_dir, gtf_path, tmp_path / "outputs")


@pytest.fixture
def peakless_matrix_dir(tmp_path) -> Path:
    """10x directory with gene rows only"""
    return write_10x_dir(
        tmp_path / "peakless_matrix",
        ["ENSG1", "ENSG2"],
        ["AAAC-1", "AAAG-1"],
        [[5, 0], [5, 10]],
    )


@pytest.fixture(autouse=True)
def close_figures():
    """Close any figure a test leaves open"""
    yield
    plt.close("all")


@pytest.fixture
def make_10x_dir():
    """The write_10x_dir helper, for tests building their own matrices"""
    return write_10x_dir


@pytest.fixture
def make_gtf():
    """The (gtf_line, write_gtf) helpers"""
    return gtf_line, write_gtf


@pytest.fixture
def make_count_table():
    return count_table

"""GTF gene annotation parsing"""
import zlib
from pathlib import Path
from typing import Dict, List, Optional, Union

import bioframe as bf
import pandas as pd

from ..config.schema import IntervalConfig
from ..exceptions import AnnotationParseError
from ..utils.log import get_logger

logger = get_logger(__name__, step="intervals")

GTF_COLUMNS = [
    "chrom", "source", "feature", "start", "end",
    "score", "strand", "frame", "attributes",
]

# Biotype attribute names used by Ensembl and GENCODE respectively
BIOTYPE_FALLBACKS = ("gene_biotype", "gene_type")


def parse_gtf_attributes(attributes: pd.Series) -> pd.DataFrame:
    """
    Parse the GTF attribute column into one column per key

    Example attribute string: gene_id "ENSG1"; gene_name "A1BG";
    The first occurrence of a repeated key wins.
    """
    rows: List[Dict[str, str]] = []
    for raw in attributes.fillna("").astype(str):
        row: Dict[str, str] = {}
        for field in raw.strip().split(";"):
            field = field.strip()
            if not field:
                continue
            parts = field.split(None, 1)
            if len(parts) != 2:
                continue
            key, value = parts[0], parts[1].strip().strip('"')
            row.setdefault(key, value)
        rows.append(row)
    return pd.DataFrame(rows, index=attributes.index)


def read_gtf(
    gtf_path: Union[str, Path], feature_type: Optional[str] = None
) -> pd.DataFrame:
    """
    Read a GTF file into a table with attributes expanded to columns

    Args:
        gtf_path: Path to .gtf or .gtf.gz
        feature_type: If given, keep only records of this type (e.g. "gene")

    Returns:
        DataFrame with chrom, source, feature, start, end, score, strand,
        frame and one column per attribute key

    Raises:
        AnnotationParseError: If the file is missing or cannot be parsed
    """
    gtf_path = Path(gtf_path)
    if not gtf_path.is_file():
        raise AnnotationParseError(f"Annotation file not found: {gtf_path}", step="intervals")

    try:
        df = bf.read_table(
            str(gtf_path),
            names=GTF_COLUMNS,
            sep="\t",
            dtype={"chrom": str, "feature": str, "attributes": str},
        )
    except (
        OSError,
        ValueError,
        EOFError,
        zlib.error,
        pd.errors.ParserError,
        pd.errors.EmptyDataError,
    ) as e:
        raise AnnotationParseError(f"Cannot read {gtf_path}: {e}", step="intervals") from e

    # Header lines only; "#" inside attribute values is data
    df = df[~df["chrom"].str.startswith("#", na=False)].copy()

    if df.empty:
        raise AnnotationParseError(f"Annotation file has no records: {gtf_path}", step="intervals")

    required = df[["chrom", "feature", "start", "end", "attributes"]]
    if required.isnull().any().any():
        raise AnnotationParseError(
            f"Malformed GTF records in {gtf_path}: expected 9 tab-separated columns",
            step="intervals",
        )

    try:
        df["start"] = pd.to_numeric(df["start"]).astype("int64")
        df["end"] = pd.to_numeric(df["end"]).astype("int64")
    except (ValueError, TypeError) as e:
        raise AnnotationParseError(
            f"Non-integer coordinates in {gtf_path}: {e}", step="intervals"
        ) from e

    if feature_type is not None:
        df = df[df["feature"] == feature_type]

    attrs = parse_gtf_attributes(df["attributes"])
    records = df.drop(columns=["attributes"]).join(attrs)
    return records.reset_index(drop=True)


def load_gene_annotation(
    gtf_path: Union[str, Path], config: Optional[IntervalConfig] = None
) -> pd.DataFrame:
    """
    Gene records of a GTF, one per gene_id, with a 'gene_biotype' column

    Args:
        gtf_path: Path to the annotation
        config: Interval settings (feature type and biotype attribute)

    Returns:
        DataFrame with chrom, start, end, strand, gene_id, gene_name (when the
        annotation has it) and gene_biotype, in annotation order
    """
    if config is None:
        config = IntervalConfig()

    genes = read_gtf(gtf_path, feature_type=config.gene_feature_type)

    if "gene_id" not in genes.columns:
        if genes.empty:
            genes["gene_id"] = pd.Series(dtype=object)
        else:
            raise AnnotationParseError(
                f"Gene records in {gtf_path} have no gene_id attribute", step="intervals"
            )

    for attribute in (config.biotype_attribute,) + BIOTYPE_FALLBACKS:
        if attribute in genes.columns:
            genes["gene_biotype"] = genes[attribute]
            break
    else:
        genes["gene_biotype"] = pd.NA

    genes = genes.drop_duplicates(subset="gene_id", keep="first")
    keep = ["chrom", "start", "end", "strand", "gene_id", "gene_biotype"]
    if "gene_name" in genes.columns:
        keep.insert(5, "gene_name")

    logger.info("annotation_loaded", path=str(gtf_path), n_genes=len(genes))
    return genes[keep].reset_index(drop=True)

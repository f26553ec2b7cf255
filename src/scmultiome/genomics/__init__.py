"""Gene annotation, genomic intervals and peak-to-gene overlaps"""

from .annotation import load_gene_annotation, read_gtf
from .chromosomes import ChromStyle, convert_chrom_name, detect_style, normalize_chrom_style
from .finalize import finalize_gene_intervals
from .intervals import IntervalCollections, build_interval_collections, parse_peak_ids
from .overlaps import PeakGeneMapping, find_overlaps, map_peaks_to_genes

__all__ = [
    "load_gene_annotation",
    "read_gtf",
    "ChromStyle",
    "convert_chrom_name",
    "detect_style",
    "normalize_chrom_style",
    "finalize_gene_intervals",
    "IntervalCollections",
    "build_interval_collections",
    "parse_peak_ids",
    "PeakGeneMapping",
    "find_overlaps",
    "map_peaks_to_genes",
]

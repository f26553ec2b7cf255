"""
Pydantic configuration schemas for type safety and validation
"""
import re
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator


class DataConfig(BaseModel):
    """Input locations"""
    model_config = ConfigDict(extra="forbid")

    matrix_dir: Path = Field(
        ...,
        description="10x filtered_feature_bc_matrix directory (matrix.mtx, features.tsv, barcodes.tsv)"
    )
    gtf_path: Path = Field(
        ...,
        description="Gene annotation in GTF format, optionally gzip-compressed"
    )


class SplitConfig(BaseModel):
    """Modality split by feature identifier"""
    model_config = ConfigDict(extra="forbid")

    gene_pattern: str = Field(
        default=r"^ENSG",
        description="Regex matching gene expression identifiers"
    )
    peak_pattern: str = Field(
        default=r"^chr[^:\s]+[:-]\d+-\d+$",
        description="Regex matching accessibility peak identifiers"
    )
    unmatched: Literal["drop", "warn", "raise"] = Field(
        default="drop",
        description="What to do with identifiers matching neither pattern"
    )

    @field_validator("gene_pattern", "peak_pattern")
    @classmethod
    def validate_pattern(cls, v: str) -> str:
        """Reject patterns that do not compile"""
        try:
            re.compile(v)
        except re.error as e:
            raise ValueError(f"Invalid regular expression {v!r}: {e}")
        return v


class IntervalConfig(BaseModel):
    """Annotation and overlap settings"""
    model_config = ConfigDict(extra="forbid")

    chrom_style: Literal["prefixed", "bare", "auto"] = Field(
        default="prefixed",
        description="Chromosome naming used for overlaps: 'chr1' (prefixed), '1' (bare), or detected from peaks (auto)"
    )
    gene_feature_type: str = Field(
        default="gene",
        description="GTF feature type holding gene records"
    )
    biotype_attribute: str = Field(
        default="gene_biotype",
        description="GTF attribute holding the gene biotype"
    )
    protein_coding_biotype: str = Field(
        default="protein_coding",
        description="Biotype value marking protein-coding genes"
    )


class NormalizeConfig(BaseModel):
    """Normalization and peak-to-gene aggregation"""
    model_config = ConfigDict(extra="forbid")

    scale_factor: float = Field(
        default=1e6,
        gt=0,
        description="Library size after scaling (1e6 for counts per million)"
    )
    aggregation: Literal["sum", "mean"] = Field(
        default="sum",
        description="How normalized signal of several peaks on one gene is combined"
    )


class VizConfig(BaseModel):
    """Figure configuration"""
    model_config = ConfigDict(extra="forbid")

    width: float = Field(default=12.0, gt=0, description="Figure width in inches")
    height: float = Field(default=8.0, gt=0, description="Figure height in inches")
    dpi: int = Field(default=150, ge=72, le=600, description="DPI for PNG output")
    facet_ncol: int = Field(default=6, ge=1, description="Facet columns in the scatter plot")
    point_alpha: float = Field(default=0.5, gt=0, le=1.0, description="Scatter point opacity")
    point_size: float = Field(default=4.0, gt=0, description="Scatter point area")
    save_diagnostic_plots: bool = Field(
        default=True,
        description="Also write the two diagnostic boxplots as PNG files"
    )


class OutputConfig(BaseModel):
    """Output tables"""
    model_config = ConfigDict(extra="forbid")

    write_merged_table: bool = Field(
        default=True,
        description="Write the merged expression/accessibility table as CSV"
    )


class LoggingConfig(BaseModel):
    """Logging configuration"""
    model_config = ConfigDict(extra="forbid")

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(default="INFO")
    format: Literal["console", "json"] = Field(default="console")


class AppConfig(BaseModel):
    """Root configuration schema"""
    model_config = ConfigDict(extra="forbid")

    data: DataConfig
    split: SplitConfig = Field(default_factory=SplitConfig)
    intervals: IntervalConfig = Field(default_factory=IntervalConfig)
    normalize: NormalizeConfig = Field(default_factory=NormalizeConfig)
    viz: VizConfig = Field(default_factory=VizConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    output_dir: Path = Field(
        default=Path("outputs"),
        description="Output directory"
    )

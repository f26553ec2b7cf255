"""Pipeline facade for convenient API access

Chains the eight analysis steps: load, split, summarize, intervals,
overlaps, finalize, integrate and visualize. Each step is a plain function
in its own module; this class wires their outputs together and times them.
"""
from pathlib import Path
from typing import Any, Dict, Optional, Union

import pandas as pd

from .config import AppConfig, load_config
from .data import FeatureTotals, ModalitySplit, load_feature_matrix, split_modalities, summarize_features
from .genomics import (
    IntervalCollections,
    PeakGeneMapping,
    build_interval_collections,
    finalize_gene_intervals,
    map_peaks_to_genes,
)
from .integrate import IntegrationResult, normalize_and_integrate
from .utils.log import get_logger, setup_logging
from .utils.timers import step_timer
from .viz import visualize_and_save

logger = get_logger(__name__, step="pipeline")

STEPS = [
    "load",
    "split",
    "summarize",
    "intervals",
    "overlaps",
    "finalize",
    "integrate",
    "visualize",
]


class Pipeline:
    """Single-cell multiome integration pipeline

    Example:
        >>> from scmultiome import Pipeline
        >>> pipeline = Pipeline(config_path="config.yaml")
        >>> results = pipeline.run()
        >>> results["plot_path"]

    Args:
        config_path: Path to YAML config file
        config: Already-loaded configuration (used instead of config_path)
        output_dir: Optional output directory (overrides config)
    """

    def __init__(
        self,
        config_path: Optional[Union[str, Path]] = None,
        config: Optional[AppConfig] = None,
        output_dir: Optional[Union[str, Path]] = None,
    ):
        if config is None:
            if config_path is None:
                raise ValueError("Either config_path or config must be given")
            config = load_config(config_path, quiet=True)

        if output_dir is not None:
            config = config.model_copy(update={"output_dir": Path(output_dir)})

        self.config = config
        self.results: Dict[str, Any] = {}

    def load(self) -> pd.DataFrame:
        """Read the 10x matrix directory into a feature count table"""
        with step_timer("load"):
            return load_feature_matrix(self.config.data.matrix_dir)

    def split(self, table: pd.DataFrame) -> ModalitySplit:
        """Partition the count table into expression and peaks"""
        with step_timer("split"):
            return split_modalities(table, self.config.split)

    def summarize(self, split: ModalitySplit) -> FeatureTotals:
        """Per-feature totals for both modalities"""
        with step_timer("summarize"):
            return summarize_features(split)

    def intervals(self, totals: FeatureTotals) -> IntervalCollections:
        """Genomic coordinates for genes and peaks"""
        with step_timer("intervals"):
            return build_interval_collections(
                totals, self.config.data.gtf_path, self.config.intervals
            )

    def overlaps(self, collections: IntervalCollections) -> PeakGeneMapping:
        """Peak-to-protein-coding-gene overlaps"""
        with step_timer("overlaps"):
            return map_peaks_to_genes(collections, self.config.intervals)

    def finalize(self, mapping: PeakGeneMapping) -> pd.DataFrame:
        with step_timer("finalize"):
            return finalize_gene_intervals(mapping.protein_coding)

    def integrate(
        self, split: ModalitySplit, genes_pc: pd.DataFrame, mapping: PeakGeneMapping
    ) -> IntegrationResult:
        """Normalize, aggregate accessibility per gene and merge"""
        with step_timer("integrate"):
            return normalize_and_integrate(
                split,
                genes_pc,
                mapping.peaks,
                mapping.overlaps,
                self.config.normalize,
                self.config.viz,
            )

    def visualize(self, result: IntegrationResult) -> Path:
        """Write figures and tables to the output directory"""
        with step_timer("visualize"):
            return visualize_and_save(
                result, self.config.output_dir, self.config.viz, self.config.output
            )

    def run(self) -> Dict[str, Any]:
        """Run all steps in order

        Returns:
            Dictionary with the intermediate results of each step and
            'plot_path', the main figure written to disk

        Raises:
            PipelineError: If any step fails; the error names the step
        """
        logger.info(
            "pipeline_started",
            matrix_dir=str(self.config.data.matrix_dir),
            gtf_path=str(self.config.data.gtf_path),
            output_dir=str(self.config.output_dir),
        )

        table = self.load()
        split = self.split(table)
        totals = self.summarize(split)
        collections = self.intervals(totals)
        mapping = self.overlaps(collections)
        genes_pc = self.finalize(mapping)
        integration = self.integrate(split, genes_pc, mapping)
        plot_path = self.visualize(integration)

        self.results = {
            "split": split,
            "totals": totals,
            "intervals": collections,
            "mapping": mapping,
            "protein_coding": genes_pc,
            "integration": integration,
            "plot_path": plot_path,
        }
        logger.info(
            "pipeline_completed",
            plot_path=str(plot_path),
            n_genes=len(integration.merged),
            n_genes_with_atac=integration.n_genes_with_atac,
        )
        return self.results


def run_pipeline(
    config_path: Union[str, Path],
    output_dir: Optional[Union[str, Path]] = None,
    log_format: Optional[str] = None,
) -> Dict[str, Any]:
    """Load a config, set up logging and run the whole pipeline

    Args:
        config_path: Path to YAML config file
        output_dir: Optional output directory (overrides config)
        log_format: 'console' or 'json' (overrides config)

    Returns:
        Results of Pipeline.run
    """
    config = load_config(config_path, quiet=True)
    setup_logging(config.logging.level, log_format or config.logging.format)
    return Pipeline(config=config, output_dir=output_dir).run()

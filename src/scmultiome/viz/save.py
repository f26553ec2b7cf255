"""Write the integration figures and tables to an output directory"""
import warnings
from pathlib import Path
from typing import TYPE_CHECKING, Optional, Union

import matplotlib.pyplot as plt
import pandas as pd
from matplotlib.figure import Figure

from ..config.schema import OutputConfig, VizConfig
from ..exceptions import EmptyPlotDataWarning, OutputWriteError
from ..utils.io import ensure_output_dir, save_data
from ..utils.log import get_logger
from .plots import expression_vs_accessibility_plot, placeholder_figure

if TYPE_CHECKING:
    from ..integrate.aggregate import IntegrationResult

logger = get_logger(__name__, step="visualize")

MAIN_PLOT = "expression_vs_atac_plot.png"
SUMMARY_UNMAPPED_PEAKS = "summary_unmapped_peaks.csv"
SUMMARY_GENES_NO_ATAC = "summary_genes_no_atac.csv"
MERGED_TABLE = "merged_expression_atac.csv"
UNMAPPED_PEAKS_PLOT = "unmapped_peaks_by_chromosome.png"
GENES_NO_ATAC_PLOT = "genes_without_atac_by_chromosome.png"

NO_INTEGRATED_DATA = "No integrated data to display"
NO_INTEGRATED_DATA_DETAIL = "The merged dataset was empty or contained no ATAC signal."
NO_MATCHED_GENES = "No genes with matched ATAC signal found"


def save_figure(fig: Figure, path: Union[str, Path], dpi: int = 150) -> Path:
    """Save a figure as PNG and close it"""
    path = Path(path)
    try:
        fig.savefig(path, dpi=dpi, bbox_inches="tight")
    except OSError as e:
        raise OutputWriteError(f"Cannot write {path}: {e}", step="visualize") from e
    finally:
        plt.close(fig)
    return path


def integration_plot_data(merged: pd.DataFrame, protein_coding: pd.DataFrame) -> pd.DataFrame:
    """Merged genes with accessibility signal, annotated with their chromosome"""
    coords = protein_coding[["gene_id", "chrom"]].drop_duplicates("gene_id")
    plot_data = merged.merge(coords, on="gene_id", how="inner")
    return plot_data.dropna(subset=["atac_cpm"]).reset_index(drop=True)


def build_main_figure(
    merged: pd.DataFrame, protein_coding: pd.DataFrame, config: Optional[VizConfig] = None
) -> Figure:
    """
    Expression vs. accessibility figure, or a titled placeholder

    A placeholder is returned, with an EmptyPlotDataWarning, when the merged
    table is empty, has no accessibility signal at all, or none of its
    genes with signal can be placed on a chromosome.
    """
    if merged.empty or merged["atac_cpm"].isna().all():
        warnings.warn(NO_INTEGRATED_DATA, EmptyPlotDataWarning, stacklevel=2)
        logger.warning("empty_plot_data", title=NO_INTEGRATED_DATA, n_genes=len(merged))
        return placeholder_figure(NO_INTEGRATED_DATA, NO_INTEGRATED_DATA_DETAIL, config)

    plot_data = integration_plot_data(merged, protein_coding)
    if plot_data.empty:
        warnings.warn(NO_MATCHED_GENES, EmptyPlotDataWarning, stacklevel=2)
        logger.warning("empty_plot_data", title=NO_MATCHED_GENES)
        return placeholder_figure(NO_MATCHED_GENES, config=config)

    logger.info(
        "plot_data_prepared",
        n_genes=len(plot_data),
        n_chromosomes=int(plot_data["chrom"].nunique()),
    )
    return expression_vs_accessibility_plot(plot_data, config)


def visualize_and_save(
    result: "IntegrationResult",
    output_dir: Union[str, Path],
    config: Optional[VizConfig] = None,
    output_config: Optional[OutputConfig] = None,
) -> Path:
    """
    Write the main plot, the diagnostic summaries and optional extras

    Always written: expression_vs_atac_plot.png, summary_unmapped_peaks.csv
    and summary_genes_no_atac.csv. The merged table and the two diagnostic
    boxplots are written when enabled in the configuration. All figures of
    ``result`` are closed afterwards, whether saved or not.

    Args:
        result: Output of normalize_and_integrate
        output_dir: Directory to write into; created if needed
        config: Figure settings
        output_config: Optional outputs

    Returns:
        Path of the main plot

    Raises:
        OutputWriteError: If the directory or any file cannot be written
    """
    if config is None:
        config = VizConfig()
    if output_config is None:
        output_config = OutputConfig()

    diagnostics = result.diagnostics
    try:
        output_dir = ensure_output_dir(output_dir, step="visualize")

        fig = build_main_figure(result.merged, result.protein_coding, config)
        plot_path = save_figure(fig, output_dir / MAIN_PLOT, dpi=config.dpi)
        logger.info("plot_saved", path=str(plot_path))

        save_data(diagnostics.summary_unmapped_peaks, output_dir / SUMMARY_UNMAPPED_PEAKS)
        save_data(diagnostics.summary_genes_no_atac, output_dir / SUMMARY_GENES_NO_ATAC)
        logger.info("summaries_saved", output_dir=str(output_dir))

        if output_config.write_merged_table:
            save_data(result.merged, output_dir / MERGED_TABLE)
            logger.info("merged_table_saved", n_genes=len(result.merged))

        if config.save_diagnostic_plots:
            save_figure(diagnostics.plot_unmapped_peaks, output_dir / UNMAPPED_PEAKS_PLOT, dpi=config.dpi)
            save_figure(diagnostics.plot_genes_no_atac, output_dir / GENES_NO_ATAC_PLOT, dpi=config.dpi)
            logger.info("diagnostic_plots_saved")
    finally:
        plt.close(diagnostics.plot_unmapped_peaks)
        plt.close(diagnostics.plot_genes_no_atac)

    return plot_path

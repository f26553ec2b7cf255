"""Static figures: chromosome boxplots, faceted scatter, placeholders

All functions return matplotlib Figures; callers save and close them.
"""
from typing import Optional

import matplotlib.pyplot as plt
import pandas as pd
import seaborn as sns
from matplotlib.figure import Figure

from ..config.schema import VizConfig
from ..genomics.chromosomes import sorted_chroms


def placeholder_figure(
    title: str,
    subtitle: Optional[str] = None,
    config: Optional[VizConfig] = None,
) -> Figure:
    """Blank figure carrying only a title, used when there is nothing to plot"""
    if config is None:
        config = VizConfig()

    fig, ax = plt.subplots(figsize=(config.width, config.height))
    ax.set_axis_off()
    ax.set_title(title, fontsize=16)
    if subtitle:
        ax.text(0.5, 0.5, subtitle, ha="center", va="center", transform=ax.transAxes)
    return fig


def boxplot_by_chromosome(
    data: pd.DataFrame,
    value_col: str,
    title: str,
    ylabel: str,
    config: Optional[VizConfig] = None,
) -> Figure:
    """
    Boxplot of one value column grouped by the 'chrom' column

    Chromosomes are ordered naturally (chr1, chr2, ..., chr10, chrX).
    """
    if config is None:
        config = VizConfig()

    fig, ax = plt.subplots(figsize=(config.width, config.height))
    sns.boxplot(
        data=data,
        x="chrom",
        y=value_col,
        order=sorted_chroms(data["chrom"]),
        color="white",
        linecolor="black",
        ax=ax,
    )
    ax.set_title(title)
    ax.set_xlabel("Chromosome")
    ax.set_ylabel(ylabel)
    ax.tick_params(axis="x", labelrotation=90)
    ax.grid(True, alpha=0.3)
    fig.tight_layout()
    return fig


def expression_vs_accessibility_plot(
    plot_data: pd.DataFrame, config: Optional[VizConfig] = None
) -> Figure:
    """
    Scatter of gene expression against aggregated accessibility, one panel
    per chromosome

    Args:
        plot_data: Columns gene_id, expression_cpm, atac_cpm and chrom; must
            not be empty
        config: Figure settings

    Returns:
        Figure with one axes per chromosome
    """
    if config is None:
        config = VizConfig()

    chroms = sorted_chroms(plot_data["chrom"])
    ncol = min(config.facet_ncol, len(chroms))

    grid = sns.relplot(
        data=plot_data,
        x="expression_cpm",
        y="atac_cpm",
        col="chrom",
        col_order=chroms,
        col_wrap=ncol,
        kind="scatter",
        alpha=config.point_alpha,
        s=config.point_size,
        edgecolor=None,
        facet_kws={"sharex": True, "sharey": True},
    )
    grid.set_titles(col_template="{col_name}")
    grid.set_axis_labels(
        "Gene Expression (log2(CPM+1))", "Aggregated ATAC Signal (log2(CPM+1))"
    )
    for ax in grid.axes.flat:
        ax.grid(True, alpha=0.3)

    fig = grid.figure
    fig.set_size_inches(config.width, config.height)
    fig.suptitle(
        "Gene Expression vs. Chromatin Accessibility\n"
        "Each point represents a protein-coding gene"
    )
    fig.tight_layout()
    return fig

"""Tests for figures and output persistence"""
import numpy as np
import pandas as pd
import pytest

from scmultiome.config import OutputConfig, VizConfig
from scmultiome.exceptions import EmptyPlotDataWarning, OutputWriteError
from scmultiome.integrate import DiagnosticSummaries, IntegrationResult
from scmultiome.integrate.diagnostics import summarize_genes_without_atac, summarize_unmapped_peaks
from scmultiome.viz import (
    build_main_figure,
    expression_vs_accessibility_plot,
    placeholder_figure,
    visualize_and_save,
)


@pytest.fixture
def protein_coding():
    return pd.DataFrame({
        "chrom": ["chr1", "chr2", "chr10", "chrX"],
        "start": [1, 1, 1, 1],
        "end": [10, 10, 10, 10],
        "gene_id": ["ENSG1", "ENSG2", "ENSG3", "ENSG4"],
    })


@pytest.fixture
def merged():
    return pd.DataFrame({
        "gene_id": ["ENSG1", "ENSG2", "ENSG3", "ENSG4"],
        "expression_cpm": [1.0, 2.0, 3.0, 4.0],
        "atac_cpm": [0.5, np.nan, 1.5, 2.5],
    })


def make_result(merged, protein_coding):
    diagnostics = DiagnosticSummaries(
        summary_unmapped_peaks=summarize_unmapped_peaks(5, 3),
        summary_genes_no_atac=summarize_genes_without_atac(merged),
        plot_unmapped_peaks=placeholder_figure("unmapped"),
        plot_genes_no_atac=placeholder_figure("no atac"),
    )
    return IntegrationResult(merged=merged, protein_coding=protein_coding, diagnostics=diagnostics)


class TestFigures:
    """Test figure construction"""

    def test_placeholder(self):
        fig = placeholder_figure("Nothing here", "because")
        ax = fig.axes[0]

        assert ax.get_title() == "Nothing here"
        assert not ax.axison
        assert [t.get_text() for t in ax.texts] == ["because"]

    def test_placeholder_size(self):
        fig = placeholder_figure("x", config=VizConfig(width=6, height=4))
        assert tuple(fig.get_size_inches()) == (6.0, 4.0)

    def test_faceted_scatter_one_panel_per_chromosome(self, merged, protein_coding):
        plot_data = merged.dropna().merge(protein_coding[["gene_id", "chrom"]], on="gene_id")
        fig = expression_vs_accessibility_plot(plot_data)

        titles = [ax.get_title() for ax in fig.axes if ax.get_title()]
        assert titles == ["chr1", "chr10", "chrX"]

    def test_main_figure_empty_merged(self, protein_coding):
        empty = pd.DataFrame(columns=["gene_id", "expression_cpm", "atac_cpm"])

        with pytest.warns(EmptyPlotDataWarning):
            fig = build_main_figure(empty, protein_coding)

        ax = fig.axes[0]
        assert ax.get_title() == "No integrated data to display"
        assert ax.texts[0].get_text() == "The merged dataset was empty or contained no ATAC signal."

    def test_main_figure_all_missing(self, merged, protein_coding):
        merged["atac_cpm"] = np.nan

        with pytest.warns(EmptyPlotDataWarning):
            fig = build_main_figure(merged, protein_coding)

        assert fig.axes[0].get_title() == "No integrated data to display"

    def test_main_figure_no_chromosome_match(self, merged, protein_coding):
        protein_coding["gene_id"] = ["OTHER1", "OTHER2", "OTHER3", "OTHER4"]

        with pytest.warns(EmptyPlotDataWarning):
            fig = build_main_figure(merged, protein_coding)

        assert fig.axes[0].get_title() == "No genes with matched ATAC signal found"


class TestVisualizeAndSave:
    """Test visualize_and_save"""

    def test_writes_all_outputs(self, tmp_path, merged, protein_coding):
        out = tmp_path / "results"
        plot_path = visualize_and_save(make_result(merged, protein_coding), out)

        assert plot_path == out / "expression_vs_atac_plot.png"
        assert sorted(p.name for p in out.iterdir()) == [
            "expression_vs_atac_plot.png",
            "genes_without_atac_by_chromosome.png",
            "merged_expression_atac.csv",
            "summary_genes_no_atac.csv",
            "summary_unmapped_peaks.csv",
            "unmapped_peaks_by_chromosome.png",
        ]

    def test_summary_csv_format(self, tmp_path, merged, protein_coding):
        visualize_and_save(make_result(merged, protein_coding), tmp_path)

        text = (tmp_path / "summary_unmapped_peaks.csv").read_text()
        assert text.splitlines() == ["Total_Peaks,Mapped_Peaks,Unmapped_Peaks", "5,3,2"]

        no_atac = pd.read_csv(tmp_path / "summary_genes_no_atac.csv")
        assert no_atac.columns.tolist() == [
            "Total_PC_Genes_in_Expr", "Genes_with_ATAC_signal", "Genes_without_ATAC_signal"
        ]
        assert no_atac.iloc[0].tolist() == [4, 3, 1]

    def test_merged_table_keeps_missing_values(self, tmp_path, merged, protein_coding):
        visualize_and_save(make_result(merged, protein_coding), tmp_path)

        written = pd.read_csv(tmp_path / "merged_expression_atac.csv")
        assert written["gene_id"].tolist() == ["ENSG1", "ENSG2", "ENSG3", "ENSG4"]
        assert np.isnan(written.loc[1, "atac_cpm"])

    def test_optional_outputs_disabled(self, tmp_path, merged, protein_coding):
        visualize_and_save(
            make_result(merged, protein_coding),
            tmp_path,
            VizConfig(save_diagnostic_plots=False),
            OutputConfig(write_merged_table=False),
        )

        assert sorted(p.name for p in tmp_path.iterdir()) == [
            "expression_vs_atac_plot.png",
            "summary_genes_no_atac.csv",
            "summary_unmapped_peaks.csv",
        ]

    def test_output_path_is_a_file(self, tmp_path, merged, protein_coding):
        target = tmp_path / "occupied"
        target.write_text("not a directory")

        with pytest.raises(OutputWriteError) as exc_info:
            visualize_and_save(make_result(merged, protein_coding), target)

        assert exc_info.value.step == "visualize"

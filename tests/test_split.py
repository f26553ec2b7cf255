"""Tests for the modality splitter"""
import warnings

import pytest

from scmultiome.config import SplitConfig
from scmultiome.data import split_modalities
from scmultiome.exceptions import DataLoadError, UnmatchedFeatureWarning


@pytest.fixture
def mixed_table(make_count_table):
    """Two genes, two peaks and one spike-in"""
    return make_count_table({
        "ENSG1": [1, 2],
        "chr1:100-200": [3, 4],
        "ERCC-00002": [9, 9],
        "ENSG2": [5, 6],
        "chrX-10-20": [7, 8],
    })


class TestSplitModalities:
    """Test split_modalities"""

    def test_partition(self, mixed_table):
        split = split_modalities(mixed_table)

        assert split.expression["feature"].tolist() == ["ENSG1", "ENSG2"]
        assert split.peaks["feature"].tolist() == ["chr1:100-200", "chrX-10-20"]

    def test_unmatched_rows_dropped_and_counted(self, mixed_table):
        """Test rows matching neither pattern are dropped, with an explicit count"""
        split = split_modalities(mixed_table)

        assert split.unmatched == ["ERCC-00002"]
        assert split.n_unmatched == 1
        assert len(split.expression) + len(split.peaks) + split.n_unmatched == len(mixed_table)

    def test_counts_follow_their_rows(self, mixed_table):
        split = split_modalities(mixed_table)

        assert split.peaks.loc[1, "CELL0"] == 7
        assert split.expression.loc[1, "CELL1"] == 6

    def test_index_is_reset(self, mixed_table):
        split = split_modalities(mixed_table)

        assert list(split.expression.index) == [0, 1]
        assert list(split.peaks.index) == [0, 1]

    def test_input_not_modified(self, mixed_table):
        before = mixed_table.copy()
        split_modalities(mixed_table)
        assert mixed_table.equals(before)

    def test_identifier_matching_both_goes_to_expression(self, make_count_table):
        config = SplitConfig(gene_pattern=r"^chr1", peak_pattern=r"^chr")
        table = make_count_table({"chr1:1-5": [1], "chr2:1-5": [2]})

        split = split_modalities(table, config)

        assert split.expression["feature"].tolist() == ["chr1:1-5"]
        assert split.peaks["feature"].tolist() == ["chr2:1-5"]

    def test_warn_policy(self, mixed_table):
        with pytest.warns(UnmatchedFeatureWarning, match="1 feature"):
            split = split_modalities(mixed_table, SplitConfig(unmatched="warn"))

        assert split.unmatched == ["ERCC-00002"]

    def test_drop_policy_does_not_warn(self, mixed_table):
        with warnings.catch_warnings():
            warnings.simplefilter("error", UnmatchedFeatureWarning)
            split_modalities(mixed_table)

    def test_raise_policy(self, mixed_table):
        with pytest.raises(DataLoadError) as exc_info:
            split_modalities(mixed_table, SplitConfig(unmatched="raise"))

        assert exc_info.value.step == "split"

    def test_empty_input(self, make_count_table):
        table = make_count_table({"ENSG1": [1, 2]}).iloc[0:0]

        split = split_modalities(table)

        assert split.expression.empty
        assert split.peaks.empty
        assert split.unmatched == []
        assert list(split.peaks.columns) == ["feature", "CELL0", "CELL1"]

    def test_missing_feature_column(self, mixed_table):
        with pytest.raises(DataLoadError, match="feature"):
            split_modalities(mixed_table.drop(columns=["feature"]))

    def test_invalid_pattern_rejected_by_config(self):
        from pydantic import ValidationError

        with pytest.raises(ValidationError):
            SplitConfig(gene_pattern="(unclosed")

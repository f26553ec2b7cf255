"""Count matrix loading, modality split and per-feature summaries"""

from .base import FeatureTotals, ModalitySplit
from .loaders import load_feature_matrix
from .split import split_modalities
from .summarize import summarize_features

__all__ = [
    "FeatureTotals",
    "ModalitySplit",
    "load_feature_matrix",
    "split_modalities",
    "summarize_features",
]

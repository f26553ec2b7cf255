"""Static plots and result persistence"""

from .plots import boxplot_by_chromosome, expression_vs_accessibility_plot, placeholder_figure
from .save import build_main_figure, save_figure, visualize_and_save

__all__ = [
    "boxplot_by_chromosome",
    "expression_vs_accessibility_plot",
    "placeholder_figure",
    "build_main_figure",
    "save_figure",
    "visualize_and_save",
]

"""
scmultiome
Integration of 10x single-cell gene expression and chromatin accessibility
"""

__version__ = "0.1.0"

# Main API - Pipeline class and convenience function
from .pipeline import Pipeline, run_pipeline

__all__ = [
    "__version__",
    "Pipeline",
    "run_pipeline",
]

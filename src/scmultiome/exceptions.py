"""Error and warning taxonomy for the pipeline

Fatal errors derive from PipelineError and carry the name of the step
that failed. Non-fatal conditions are issued as PipelineWarning subclasses
through the warnings module and never stop a run.
"""
from typing import Optional


class PipelineError(Exception):
    """Base class for fatal pipeline errors"""

    def __init__(self, message: str, step: Optional[str] = None):
        self.step = step
        self.message = message
        super().__init__(f"[{step}] {message}" if step else message)


class DataLoadError(PipelineError):
    """Input matrix directory is missing or malformed"""


class AnnotationParseError(PipelineError):
    """Gene annotation file cannot be read or parsed"""


class OutputWriteError(PipelineError):
    """Output directory or file cannot be written"""


class PipelineWarning(UserWarning):
    """Base class for non-fatal pipeline conditions"""


class NoOverlapWarning(PipelineWarning):
    """No peak overlapped any protein-coding gene"""


class EmptyPlotDataWarning(PipelineWarning):
    """A chart had no data and was replaced by a placeholder"""


class UnmatchedFeatureWarning(PipelineWarning):
    """Features matched neither the gene nor the peak pattern"""

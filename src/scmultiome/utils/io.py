"""Table I/O utilities"""
from pathlib import Path
from typing import Any, Union

import pandas as pd

from ..exceptions import OutputWriteError

SUPPORTED_TABLE_FORMATS = [".csv", ".tsv"]


def ensure_output_dir(path: Union[str, Path], step: str = "visualize") -> Path:
    """
    Create an output directory if needed and check that it is writable

    Raises:
        OutputWriteError: If the directory cannot be created or written to
    """
    path = Path(path)
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise OutputWriteError(
            f"Cannot create output directory {path}: {e}", step=step
        ) from e

    if not path.is_dir():
        raise OutputWriteError(f"Output path is not a directory: {path}", step=step)

    return path


def save_data(
    data: pd.DataFrame,
    path: Union[str, Path],
    step: str = "visualize",
    **kwargs: Any,
) -> Path:
    """
    Save a DataFrame to CSV or TSV

    The index is not written unless ``index=True`` is passed.

    Args:
        data: Table to save
        path: Output path; the suffix selects the format
        step: Pipeline step name reported on failure
        **kwargs: Additional arguments for the pandas writer

    Returns:
        Path written

    Raises:
        OutputWriteError: If the file cannot be written
    """
    if not isinstance(data, pd.DataFrame):
        raise TypeError(f"Unsupported data type: {type(data)}")

    path = Path(path)
    suffix = path.suffix.lower()
    kwargs.setdefault("index", False)

    if suffix not in SUPPORTED_TABLE_FORMATS:
        raise ValueError(
            f"Unsupported format for DataFrame: '{suffix}'. "
            f"Supported formats: {', '.join(SUPPORTED_TABLE_FORMATS)}"
        )

    ensure_output_dir(path.parent, step=step)

    try:
        if suffix == ".csv":
            data.to_csv(path, **kwargs)
        else:
            data.to_csv(path, sep="\t", **kwargs)
    except OSError as e:
        raise OutputWriteError(f"Cannot write {path}: {e}", step=step) from e

    return path

"""Chromosome naming conventions

Two conventions are common: UCSC-style prefixed names ("chr1", "chrX",
"chrM") and Ensembl/NCBI-style bare names ("1", "X", "MT"). Only primary
chromosome names are translated; other contigs (scaffolds, patches) are
returned unchanged.
"""
import re
from enum import Enum
from typing import Iterable, List, Optional, Tuple, Union

import pandas as pd

_PRIMARY = re.compile(r"^(chr)?(\d+|X|Y|M|MT)$", re.IGNORECASE)


class ChromStyle(Enum):
    """Chromosome naming convention"""

    PREFIXED = "prefixed"
    BARE = "bare"


def _as_style(style: Union[ChromStyle, str]) -> ChromStyle:
    return style if isinstance(style, ChromStyle) else ChromStyle(style)


def convert_chrom_name(name: str, style: Union[ChromStyle, str]) -> str:
    """
    Translate one chromosome name to the given convention

    Example:
        >>> convert_chrom_name("1", "prefixed")
        'chr1'
        >>> convert_chrom_name("chrM", "bare")
        'MT'
    """
    style = _as_style(style)
    match = _PRIMARY.match(str(name))
    if match is None:
        return name

    core = match.group(2).upper()
    if core in ("M", "MT"):
        return "chrM" if style is ChromStyle.PREFIXED else "MT"
    return f"chr{core}" if style is ChromStyle.PREFIXED else core


def detect_style(names: Iterable[str]) -> Optional[ChromStyle]:
    """
    Guess the convention from primary chromosome names

    Returns None when no primary chromosome name is present.
    """
    prefixed = bare = 0
    for name in names:
        match = _PRIMARY.match(str(name))
        if match is None:
            continue
        if match.group(1):
            prefixed += 1
        else:
            bare += 1

    if prefixed == 0 and bare == 0:
        return None
    return ChromStyle.PREFIXED if prefixed >= bare else ChromStyle.BARE


def normalize_chrom_style(
    df: pd.DataFrame, style: Union[ChromStyle, str], col: str = "chrom"
) -> pd.DataFrame:
    """Return a copy of an interval table with chromosome names translated"""
    style = _as_style(style)
    out = df.copy()
    if not out.empty:
        out[col] = [convert_chrom_name(c, style) for c in out[col]]
    return out


def chrom_sort_key(name: str) -> Tuple[int, int, str]:
    """Natural chromosome ordering: 1..22, X, Y, M, then anything else"""
    match = _PRIMARY.match(str(name))
    if match is None:
        return (3, 0, str(name))
    core = match.group(2).upper()
    if core.isdigit():
        return (0, int(core), "")
    order = {"X": 0, "Y": 1, "M": 2, "MT": 2}
    return (1, order[core], "")


def sorted_chroms(names: Iterable[str]) -> List[str]:
    """Unique chromosome names in natural order"""
    return sorted(set(names), key=chrom_sort_key)

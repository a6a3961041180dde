from __future__ import annotations
from pathlib import Path
import csv
import pandas as pd


def _quote(value) -> str:
    return f'"{value}"'


def write_table(df: pd.DataFrame, path: str | Path) -> Path:
    """
    Write a space-delimited table with a header line and 1-based row names.

    The header carries no entry for the row-name column, column names and
    strings are double-quoted and missing values are a bare NA, so the file
    reads back with `read_table` (or R's read.table).
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    out = df.copy()
    out.index = pd.RangeIndex(1, len(out) + 1)
    for c in out.columns:
        if not pd.api.types.is_numeric_dtype(out[c]):
            out[c] = out[c].map(lambda v: "NA" if pd.isna(v) else _quote(v)).astype(object)
    # text is quoted above; the csv writer must leave every field as is
    out.to_csv(path, sep=" ", index=True, index_label=False, header=[_quote(c) for c in out.columns],
               na_rep="NA", quoting=csv.QUOTE_NONE, quotechar="\x1f", escapechar="\\")
    return path


def read_table(path: str | Path) -> pd.DataFrame:
    # header is one field shorter than the rows, so the first field becomes the index
    return pd.read_csv(path, sep=" ")

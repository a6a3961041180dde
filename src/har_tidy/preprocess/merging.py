from __future__ import annotations
from pathlib import Path
from typing import Iterable, List, Optional
import pandas as pd
import re

from har_tidy.errors import SchemaMismatchError
from har_tidy.io.uci_har import PARTITIONS, load_partition, read_feature_catalog
from har_tidy.schema import MERGED

_MEAN_RE = re.compile(r"[^A-Za-z0-9]+mean[^A-Za-z0-9]+")
_STD_RE = re.compile(r"[^A-Za-z0-9]+std[^A-Za-z0-9]+")


def tidy_column_name(name: str) -> str:
    """'tBodyAcc-mean()-X' -> 'tBodyAccMeanX', 'fBodyAccMag-std()' -> 'fBodyAccMagStd'."""
    return _STD_RE.sub("Std", _MEAN_RE.sub("Mean", name))


def tidy_column_names(columns: Iterable[str]) -> List[str]:
    return [tidy_column_name(str(c)) for c in columns]


def merge_partitions(root: str | Path, catalog: Optional[pd.DataFrame] = None) -> pd.DataFrame:
    """
    Stack the test rows, then the train rows, and clean up the column names.

    The feature catalog is read once and shared by both partition loads.
    """
    if catalog is None:
        catalog = read_feature_catalog(root)

    frames = []
    for part in PARTITIONS:
        df = load_partition(part, root, catalog=catalog)
        print(f"[INFO] {part}: {len(df)} rows x {df.shape[1]} columns")
        frames.append(df)

    first = list(frames[0].columns)
    for part, df in zip(PARTITIONS[1:], frames[1:]):
        if list(df.columns) != first:
            diff = sorted(set(first) ^ set(df.columns))
            raise SchemaMismatchError(
                f"Partition {part!r} columns differ from {PARTITIONS[0]!r}: {diff[:5] or 'order differs'}"
            )

    data = pd.concat(frames, axis=0, ignore_index=True)
    data.columns = tidy_column_names(data.columns)
    if data.columns.duplicated().any():
        dups = sorted(set(data.columns[data.columns.duplicated()]))
        raise SchemaMismatchError(f"Column names collide after renaming: {dups[:5]}")
    return MERGED.validate(data)

from __future__ import annotations
from dataclasses import dataclass
from typing import Tuple
import pandas as pd

from har_tidy.errors import MalformedDataError, SchemaMismatchError


@dataclass(frozen=True)
class TableSchema:
    """
    Column contract of one pipeline table.

    int_columns / str_columns must be present with integer / string dtype.
    When float_rest is True every remaining column is a measurement and must
    be floating point.
    """
    name: str
    int_columns: Tuple[str, ...] = ()
    str_columns: Tuple[str, ...] = ()
    float_rest: bool = True

    def measure_columns(self, df: pd.DataFrame) -> list[str]:
        fixed = set(self.int_columns) | set(self.str_columns)
        return [c for c in df.columns if c not in fixed]

    def validate(self, df: pd.DataFrame) -> pd.DataFrame:
        missing = [c for c in (*self.int_columns, *self.str_columns) if c not in df.columns]
        if missing:
            raise SchemaMismatchError(f"{self.name}: missing columns {missing}")
        if df.columns.duplicated().any():
            dups = sorted(set(df.columns[df.columns.duplicated()]))
            raise SchemaMismatchError(f"{self.name}: duplicated columns {dups}")

        for c in self.int_columns:
            if not pd.api.types.is_integer_dtype(df[c]):
                raise MalformedDataError(f"{self.name}: column {c!r} must be integer, got {df[c].dtype}")
        for c in self.str_columns:
            if not (pd.api.types.is_string_dtype(df[c]) or pd.api.types.is_object_dtype(df[c])):
                raise MalformedDataError(f"{self.name}: column {c!r} must hold strings, got {df[c].dtype}")
        if self.float_rest:
            bad = [c for c in self.measure_columns(df) if not pd.api.types.is_float_dtype(df[c])]
            if bad:
                raise MalformedDataError(f"{self.name}: non-float measurement columns {bad[:5]}")
        return df


RAW_PARTITION = TableSchema("raw partition", int_columns=("ActivityID", "SubjectID"))
MERGED = TableSchema("merged", int_columns=("ActivityID", "SubjectID"))
LABELED = TableSchema("labeled", int_columns=("ActivityID", "SubjectID"), str_columns=("ActivityName",))
MELTED = TableSchema("melted", int_columns=("ActivityID", "SubjectID"),
                     str_columns=("ActivityName", "variable"))
TIDY = TableSchema("tidy", int_columns=("SubjectID",), str_columns=("ActivityName",))

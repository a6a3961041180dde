from __future__ import annotations
from pathlib import Path
import pandas as pd

from har_tidy.io.uci_har import read_activity_labels
from har_tidy.schema import LABELED, MERGED


def apply_activity_labels(merged: pd.DataFrame, labels: pd.DataFrame) -> pd.DataFrame:
    """
    Inner-join activity names onto the merged table by ActivityID.

    Rows whose ActivityID is not in the lookup are dropped, not kept with an
    empty name. Row order of `merged` is preserved.
    """
    MERGED.validate(merged)
    lookup = labels.set_index("ActivityID")["ActivityName"]
    known = merged["ActivityID"].isin(lookup.index)
    if not known.all():
        unknown = sorted(merged.loc[~known, "ActivityID"].unique().tolist())
        print(f"[WARN] dropping {int((~known).sum())} rows with unlabelled ActivityID {unknown}")

    out = merged.loc[known].reset_index(drop=True)
    out.insert(0, "ActivityName", out["ActivityID"].map(lookup).astype(str))
    measures = [c for c in merged.columns if c not in ("ActivityID", "SubjectID")]
    out = out[["ActivityID", "ActivityName", "SubjectID", *measures]]
    return LABELED.validate(out)


def label_merged_data(root: str | Path, merged: pd.DataFrame) -> pd.DataFrame:
    return apply_activity_labels(merged, read_activity_labels(root))

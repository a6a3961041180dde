from __future__ import annotations
from typing import Iterable, Mapping, Optional, Sequence, Tuple
import pandas as pd

from har_tidy.errors import EmptyGroupError
from har_tidy.schema import LABELED, MELTED, TIDY

ID_VARS = ("ActivityID", "ActivityName", "SubjectID")
GROUP_VARS = ["ActivityName", "SubjectID"]


def melt_measurements(labeled: pd.DataFrame) -> pd.DataFrame:
    """
    Wide -> long: one (variable, value) row per measurement per observation.
    Rows come variable by variable, in the column order of `labeled`.
    """
    LABELED.validate(labeled)
    measure_vars = measure_variables(labeled)
    melted = labeled.melt(id_vars=list(ID_VARS), value_vars=measure_vars,
                          var_name="variable", value_name="value")
    return MELTED.validate(melted)


def _normalise_groups(required_groups: Iterable) -> list[Tuple[str, int]]:
    out = []
    for g in required_groups or ():
        if isinstance(g, Mapping):
            out.append((str(g["activity"]), int(g["subject"])))
        else:
            activity, subject = g
            out.append((str(activity), int(subject)))
    return out


def recast_mean(melted: pd.DataFrame, required_groups: Iterable = (),
                variables: Optional[Sequence[str]] = None) -> pd.DataFrame:
    """
    Long -> wide tidy table holding the mean of every variable per
    (ActivityName, SubjectID).

    Missing values are skipped; a group with no values left gives NaN.
    Rows are sorted by ActivityName, then SubjectID. Columns follow
    `variables` when given (so an empty input still yields one column per
    measurement), else the order in which variables first appear in `melted`.

    `required_groups` lists (activity, subject) pairs, as tuples or
    {"activity": ..., "subject": ...} mappings, that must be present.
    """
    MELTED.validate(melted)
    if variables is None:
        variables = pd.unique(melted["variable"]).tolist()
    variables = list(variables)

    if melted.empty:
        tidy = pd.DataFrame({
            "ActivityName": pd.Series(dtype=object),
            "SubjectID": pd.Series(dtype="int64"),
            **{v: pd.Series(dtype="float64") for v in variables},
        })
    else:
        means = melted.groupby([*GROUP_VARS, "variable"], sort=True)["value"].mean()
        tidy = means.unstack("variable").reindex(columns=variables)
        tidy.columns.name = None
        tidy = tidy.reset_index()

    observed = set(zip(tidy["ActivityName"], tidy["SubjectID"]))
    absent = [g for g in _normalise_groups(required_groups) if g not in observed]
    if absent:
        raise EmptyGroupError(f"No observations for required (ActivityName, SubjectID) groups: {absent}")

    tidy["SubjectID"] = tidy["SubjectID"].astype("int64")
    if variables:
        tidy[variables] = tidy[variables].astype("float64")
    return TIDY.validate(tidy)


def measure_variables(labeled: pd.DataFrame) -> list[str]:
    return [c for c in labeled.columns if c not in ID_VARS]


def coverage_counts(labeled: pd.DataFrame) -> pd.DataFrame:
    """Number of observations behind each (ActivityName, SubjectID) cell of the tidy table."""
    LABELED.validate(labeled)
    return (labeled.groupby(GROUP_VARS, sort=True).size()
            .reset_index(name="n_obs"))

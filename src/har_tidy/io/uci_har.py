from __future__ import annotations
from pathlib import Path
from typing import Dict, List, Optional
import numpy as np
import pandas as pd
import yaml
import re

from har_tidy.errors import MalformedDataError, MissingFileError
from har_tidy.schema import RAW_PARTITION

PARTITIONS = ("test", "train")
FEATURES_FILE = "features.txt"
ACTIVITY_LABELS_FILE = "activity_labels.txt"

# literal "mean()" / "std()"; meanFreq() and angle(...Mean...) stay out
MEASURE_PATTERN = re.compile(r"mean\(\)|std\(\)")

DEFAULT_CONFIG = {
    "root": "UCI HAR Dataset",
    "outdir": ".",
    "tidy_name": "tidy.txt",
    "required_groups": [],
}


def _read_yaml(path: str | Path) -> dict:
    with open(path, "r") as f:
        return yaml.safe_load(f) or {}


def load_har_config(cfg_path: Optional[str | Path] = "configs/datasets.yaml") -> dict:
    """Return the `har` section of the datasets config, with defaults filled in."""
    cfg = dict(DEFAULT_CONFIG)
    if cfg_path is not None and Path(cfg_path).exists():
        cfg.update(_read_yaml(cfg_path).get("har", {}) or {})
    return cfg


def partition_paths(root: str | Path, partition: str) -> Dict[str, Path]:
    if not partition:
        raise ValueError("partition tag must be a non-empty string")
    base = Path(root) / partition
    return {
        "X": base / f"X_{partition}.txt",
        "y": base / f"y_{partition}.txt",
        "subject": base / f"subject_{partition}.txt",
    }


def required_files(root: str | Path) -> List[Path]:
    root = Path(root)
    files = [root / FEATURES_FILE, root / ACTIVITY_LABELS_FILE]
    for part in PARTITIONS:
        files.extend(partition_paths(root, part).values())
    return files


def check_layout(root: str | Path) -> None:
    """Fail before anything is written if any input of the dataset tree is absent."""
    missing = [str(p) for p in required_files(root) if not p.is_file()]
    if missing:
        raise MissingFileError(f"{len(missing)} required file(s) missing under {root}: " + ", ".join(missing))


def _require(path: Path) -> Path:
    if not path.is_file():
        raise MissingFileError(f"Required file not found: {path}")
    return path


def _read_whitespace_table(path: Path, **kwargs) -> pd.DataFrame:
    _require(path)
    try:
        return pd.read_csv(path, sep=r"\s+", header=None, **kwargs)
    except pd.errors.EmptyDataError as exc:
        raise MalformedDataError(f"{path} is empty") from exc
    except pd.errors.ParserError as exc:
        raise MalformedDataError(f"Could not parse {path}: {exc}") from exc


def _check_field_counts(path: Path, expected: int) -> None:
    """Raise on the first non-blank line whose field count differs from `expected`."""
    with open(path, "r") as f:
        for lineno, line in enumerate(f, 1):
            n = len(line.split())
            if n and n != expected:
                raise MalformedDataError(f"{path}:{lineno}: expected {expected} fields, found {n}")


def read_id_vector(path: str | Path, name: str) -> pd.Series:
    """One integer per line, no header."""
    path = Path(path)
    df = _read_whitespace_table(path)
    if df.shape[1] != 1:
        raise MalformedDataError(f"{path}: expected 1 column, found {df.shape[1]}")
    col = df.iloc[:, 0]
    if not pd.api.types.is_integer_dtype(col):
        raise MalformedDataError(f"{path}: {name} values must be integers (parsed as {col.dtype})")
    return col.astype("int64").rename(name)


def read_feature_catalog(root: str | Path) -> pd.DataFrame:
    """Ordered (MeasureID, MeasureName) pairs naming the columns of every X matrix."""
    path = Path(root) / FEATURES_FILE
    catalog = _read_whitespace_table(path, names=["MeasureID", "MeasureName"], dtype={"MeasureName": str})
    if catalog["MeasureName"].isna().any():
        raise MalformedDataError(f"{path}: every line needs an ID and a name")
    if not pd.api.types.is_integer_dtype(catalog["MeasureID"]):
        raise MalformedDataError(f"{path}: feature IDs must be integers")
    return catalog


def read_activity_labels(root: str | Path) -> pd.DataFrame:
    """ActivityID -> ActivityName lookup, one entry per ID."""
    path = Path(root) / ACTIVITY_LABELS_FILE
    labels = _read_whitespace_table(path, names=["ActivityID", "ActivityName"], dtype={"ActivityName": str})
    if labels["ActivityName"].isna().any() or not pd.api.types.is_integer_dtype(labels["ActivityID"]):
        raise MalformedDataError(f"{path}: expected lines of '<int id> <name>'")
    dups = labels["ActivityID"][labels["ActivityID"].duplicated()].unique().tolist()
    if dups:
        raise MalformedDataError(f"{path}: duplicated activity IDs {dups}")
    labels["ActivityID"] = labels["ActivityID"].astype("int64")
    return labels


def select_measure_columns(catalog: pd.DataFrame) -> np.ndarray:
    """Positional indices (catalog order) of the mean()/std() measurements."""
    mask = catalog["MeasureName"].map(lambda s: bool(MEASURE_PATTERN.search(s))).to_numpy(dtype=bool)
    return np.flatnonzero(mask)


def load_partition(partition: str, root: str | Path, catalog: Optional[pd.DataFrame] = None) -> pd.DataFrame:
    """
    Load one partition ("test" / "train") of the dataset.

    Returns the mean()/std() measurement columns in catalog order, followed by
    ActivityID and SubjectID. The X, y and subject files are aligned by row
    position only, so their row counts must agree.
    """
    paths = partition_paths(root, partition)
    for p in paths.values():
        _require(p)

    activity = read_id_vector(paths["y"], "ActivityID")
    subject = read_id_vector(paths["subject"], "SubjectID")
    if catalog is None:
        catalog = read_feature_catalog(root)

    X = _read_whitespace_table(paths["X"])
    if X.shape[1] != len(catalog):
        raise MalformedDataError(
            f"{paths['X']}: expected {len(catalog)} columns (one per feature), found {X.shape[1]}"
        )
    if X.isna().to_numpy().any():
        # short lines come back padded with NaN
        _check_field_counts(paths["X"], len(catalog))
    counts = {"X": len(X), "y": len(activity), "subject": len(subject)}
    if len(set(counts.values())) != 1:
        raise MalformedDataError(f"{partition}: row counts differ across files {counts}")

    keep = select_measure_columns(catalog)
    data = X.iloc[:, keep]
    non_numeric = [catalog["MeasureName"].iat[i] for i, c in zip(keep, data.columns)
                   if not pd.api.types.is_numeric_dtype(data[c])]
    if non_numeric:
        raise MalformedDataError(f"{paths['X']}: unparsable values in {non_numeric[:5]}")

    data = data.astype("float64")
    data.columns = catalog["MeasureName"].iloc[keep].tolist()
    data = data.reset_index(drop=True)
    data["ActivityID"] = activity.to_numpy()
    data["SubjectID"] = subject.to_numpy()
    return RAW_PARTITION.validate(data)


def load_test_partition(root: str | Path, catalog: Optional[pd.DataFrame] = None) -> pd.DataFrame:
    return load_partition("test", root, catalog)


def load_train_partition(root: str | Path, catalog: Optional[pd.DataFrame] = None) -> pd.DataFrame:
    return load_partition("train", root, catalog)

from pathlib import Path
import pytest

FEATURES = [
    "tBodyAcc-mean()-X",
    "tBodyAcc-mean()-Y",
    "tBodyAcc-std()-X",
    "tBodyAcc-meanFreq()-X",
    "fBodyAcc-bandsEnergy()-1,8",
    "fBodyAcc-bandsEnergy()-1,8",
    "angle(tBodyAccMean,gravity)",
    "fBodyAccMag-std()",
]
# positions of the mean()/std() features above
SELECTED = [0, 1, 2, 7]
TIDY_NAMES = ["tBodyAccMeanX", "tBodyAccMeanY", "tBodyAccStdX", "fBodyAccMagStd"]

LABELS = {1: "WALKING", 2: "SITTING"}


def _row(values):
    return "  " + " ".join(f"{v:.7e}" if isinstance(v, float) else str(v) for v in values)


def _matrix_row(i: int, n_features: int = len(FEATURES)):
    # measurement j of observation i is i + j / 10
    return [float(i) + j / 10 for j in range(n_features)]


def write_har_tree(root: Path, partitions: dict, features=FEATURES, labels=LABELS) -> Path:
    """
    partitions: {"test": {"X": [[...], ...], "y": [...], "subject": [...]}, ...}
    Any of features / labels set to None is left out.
    """
    root.mkdir(parents=True, exist_ok=True)
    if features is not None:
        (root / "features.txt").write_text("".join(f"{i} {n}\n" for i, n in enumerate(features, 1)))
    if labels is not None:
        (root / "activity_labels.txt").write_text("".join(f"{k} {v}\n" for k, v in labels.items()))
    for part, pack in partitions.items():
        d = root / part
        d.mkdir(exist_ok=True)
        if pack.get("X") is not None:
            (d / f"X_{part}.txt").write_text("".join(_row(r) + "\n" for r in pack["X"]))
        if pack.get("y") is not None:
            (d / f"y_{part}.txt").write_text("".join(f"{v}\n" for v in pack["y"]))
        if pack.get("subject") is not None:
            (d / f"subject_{part}.txt").write_text("".join(f"{v}\n" for v in pack["subject"]))
    return root


def default_partitions():
    return {
        "test": {"X": [_matrix_row(i) for i in range(2)], "y": [1, 2], "subject": [2, 2]},
        "train": {"X": [_matrix_row(i) for i in range(2, 5)], "y": [1, 1, 2], "subject": [1, 2, 1]},
    }


@pytest.fixture
def har_root(tmp_path):
    return write_har_tree(tmp_path / "UCI HAR Dataset", default_partitions())


@pytest.fixture
def outdir(tmp_path):
    d = tmp_path / "out"
    d.mkdir()
    return d

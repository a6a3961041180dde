from pathlib import Path
import runpy

import pytest

from har_tidy.errors import MalformedDataError, MissingFileError
from har_tidy.io.tables import read_table
from har_tidy.pipeline import run_pipeline
from conftest import TIDY_NAMES, default_partitions, write_har_tree

SCRIPTS = Path(__file__).resolve().parents[1] / "scripts"
OUTPUTS = ("merged_data.txt", "melted_data.txt", "tidy.txt")


def test_single_group_round_trip(tmp_path, outdir):
    # test rows carry an ActivityID without a label, so only the train rows survive the join
    root = write_har_tree(
        tmp_path / "har",
        {
            "train": {"X": [[2.0], [4.0]], "y": [1, 1], "subject": [5, 5]},
            "test": {"X": [[9.0]], "y": [3], "subject": [5]},
        },
        features=["tBodyAcc-mean()-X"],
        labels={1: "WALKING"},
    )
    result = run_pipeline(root, outdir=outdir)
    tidy = read_table(outdir / "tidy.txt")
    assert list(tidy.columns) == ["ActivityName", "SubjectID", "tBodyAccMeanX"]
    assert tidy.to_dict("list") == {"ActivityName": ["WALKING"], "SubjectID": [5], "tBodyAccMeanX": [3.0]}
    assert len(result.merged) == 3
    assert len(result.labeled) == 2


def test_outputs_on_disk(har_root, outdir):
    result = run_pipeline(har_root, outdir=outdir, tidy_name="summary.txt")
    merged = read_table(outdir / "merged_data.txt")
    assert list(merged.columns) == TIDY_NAMES + ["ActivityID", "SubjectID"]
    assert merged.index.tolist() == [1, 2, 3, 4, 5]

    melted = read_table(outdir / "melted_data.txt")
    assert list(melted.columns) == ["ActivityID", "ActivityName", "SubjectID", "variable", "value"]
    assert len(melted) == 5 * len(TIDY_NAMES)

    tidy = read_table(outdir / "summary.txt")
    assert list(zip(tidy["ActivityName"], tidy["SubjectID"])) == [
        ("SITTING", 1), ("SITTING", 2), ("WALKING", 1), ("WALKING", 2),
    ]
    assert tidy["tBodyAccMeanX"].tolist() == pytest.approx([4.0, 1.0, 2.0, 1.5])
    assert tidy["fBodyAccMagStd"].tolist() == pytest.approx([4.7, 1.7, 2.7, 2.2])
    assert set(result.paths) == {"merged", "melted", "tidy"}


def test_row_mismatch_writes_nothing(tmp_path, outdir):
    parts = default_partitions()
    parts["test"]["subject"] = [2]
    root = write_har_tree(tmp_path / "har", parts)
    with pytest.raises(MalformedDataError):
        run_pipeline(root, outdir=outdir)
    assert not any((outdir / name).exists() for name in OUTPUTS)


def test_missing_activity_labels_writes_nothing(tmp_path, outdir):
    root = write_har_tree(tmp_path / "har", default_partitions(), labels=None)
    with pytest.raises(MissingFileError, match="activity_labels.txt"):
        run_pipeline(root, outdir=outdir)
    assert list(outdir.iterdir()) == []


def test_run_analysis_script(har_root, outdir, tmp_path, capsys):
    main = runpy.run_path(str(SCRIPTS / "run_analysis.py"))["main"]
    cfg = tmp_path / "absent.yaml"
    rc = main(["--cfg", str(cfg), "--root", str(har_root), "--outdir", str(outdir)])
    assert rc == 0
    assert all((outdir / name).exists() for name in OUTPUTS)
    assert "[OK]" in capsys.readouterr().out


def test_run_analysis_script_reports_errors(tmp_path, outdir, capsys):
    main = runpy.run_path(str(SCRIPTS / "run_analysis.py"))["main"]
    rc = main(["--cfg", str(tmp_path / "absent.yaml"), "--root", str(tmp_path / "nowhere"),
               "--outdir", str(outdir)])
    assert rc == 1
    assert "[ERR] MissingFileError" in capsys.readouterr().err


def test_summarise_tidy_script(har_root, outdir, tmp_path):
    run_pipeline(har_root, outdir=outdir)
    main = runpy.run_path(str(SCRIPTS / "summarise_tidy.py"))["main"]
    out = tmp_path / "coverage.txt"
    rc = main(["--cfg", str(tmp_path / "absent.yaml"), "--root", str(har_root),
               "--merged", str(outdir / "merged_data.txt"), "--out", str(out)])
    assert rc == 0
    counts = read_table(out)
    assert counts["n_obs"].sum() == 5


def test_all_rows_unlabelled_still_writes_full_header(tmp_path, outdir):
    root = write_har_tree(tmp_path / "har", default_partitions(), labels={6: "LAYING"})
    result = run_pipeline(root, outdir=outdir)
    assert len(result.tidy) == 0
    assert list(result.tidy.columns) == ["ActivityName", "SubjectID"] + TIDY_NAMES
    header = (outdir / "tidy.txt").read_text().splitlines()[0]
    assert header.split() == [f'"{c}"' for c in ["ActivityName", "SubjectID"] + TIDY_NAMES]


def test_summarise_tidy_script_needs_merged_table(tmp_path, capsys):
    main = runpy.run_path(str(SCRIPTS / "summarise_tidy.py"))["main"]
    rc = main(["--cfg", str(tmp_path / "absent.yaml"), "--merged", str(tmp_path / "merged_data.txt")])
    assert rc == 1
    assert "[ERR]" in capsys.readouterr().err

import argparse
import sys
from pathlib import Path

from har_tidy.errors import HarTidyError
from har_tidy.io.uci_har import load_har_config
from har_tidy.pipeline import run_pipeline

ARCHIVE_URL = "https://d396qusza40orc.cloudfront.net/getdata%2Fprojectfiles%2FUCI%20HAR%20Dataset.zip"
DESCRIPTION_URL = "http://archive.ics.uci.edu/ml/datasets/Human+Activity+Recognition+Using+Smartphones"


def main(argv=None) -> int:
    ap = argparse.ArgumentParser(description="Build the tidy per-activity, per-subject means of the UCI HAR dataset.")
    ap.add_argument("--cfg", type=str, default="configs/datasets.yaml")
    ap.add_argument("--root", type=str, default=None, help="Dataset directory (defaults to configs/datasets.yaml)")
    ap.add_argument("--outdir", type=str, default=None)
    ap.add_argument("--tidy-name", type=str, default=None, help="File name of the tidy table, e.g. tidy.txt")
    args = ap.parse_args(argv)

    cfg = load_har_config(args.cfg)
    root = Path(args.root or cfg["root"])
    outdir = Path(args.outdir or cfg["outdir"])
    tidy_name = args.tidy_name or cfg["tidy_name"]

    print(f"[INFO] Reading the \"UCI HAR Dataset\" layout from {root}")
    print(f"[INFO]   archive: {ARCHIVE_URL}")
    print(f"[INFO]   description: {DESCRIPTION_URL}")
    try:
        result = run_pipeline(root, outdir=outdir, tidy_name=tidy_name,
                              required_groups=cfg.get("required_groups") or [])
    except HarTidyError as e:
        print(f"[ERR] {type(e).__name__}: {e}", file=sys.stderr)
        return 1

    print(f"[OK] Done: {len(result.tidy)} (activity, subject) groups -> {result.paths['tidy']}")
    return 0


if __name__ == "__main__":
    sys.exit(main())

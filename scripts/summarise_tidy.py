import argparse
import sys
from pathlib import Path

from har_tidy.features.reshape import coverage_counts
from har_tidy.io.tables import read_table, write_table
from har_tidy.io.uci_har import load_har_config
from har_tidy.preprocess.labeling import label_merged_data
from har_tidy.pipeline import MERGED_NAME


def main(argv=None) -> int:
    ap = argparse.ArgumentParser(description="Count the observations behind each cell of the tidy table.")
    ap.add_argument("--cfg", type=str, default="configs/datasets.yaml")
    ap.add_argument("--root", type=str, default=None)
    ap.add_argument("--merged", type=str, default=None, help="merged_data.txt written by run_analysis.py")
    ap.add_argument("--out", type=str, default="reports/coverage.txt")
    args = ap.parse_args(argv)

    cfg = load_har_config(args.cfg)
    root = Path(args.root or cfg["root"])
    merged_path = Path(args.merged or Path(cfg["outdir"]) / MERGED_NAME)
    if not merged_path.exists():
        print(f"[ERR] {merged_path} not found. Run scripts/run_analysis.py first.", file=sys.stderr)
        return 1

    merged = read_table(merged_path).reset_index(drop=True)
    counts = coverage_counts(label_merged_data(root, merged))
    out_path = write_table(counts, args.out)
    print(f"[OK] wrote {out_path} with {len(counts)} rows")
    print(counts.groupby("ActivityName")["n_obs"].sum().sort_values(ascending=False))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

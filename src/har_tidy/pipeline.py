from __future__ import annotations
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable
import pandas as pd

from har_tidy.io.tables import write_table
from har_tidy.io.uci_har import check_layout, read_feature_catalog
from har_tidy.preprocess.merging import merge_partitions
from har_tidy.preprocess.labeling import label_merged_data
from har_tidy.features.reshape import measure_variables, melt_measurements, recast_mean

MERGED_NAME = "merged_data.txt"
MELTED_NAME = "melted_data.txt"


@dataclass
class PipelineResult:
    merged: pd.DataFrame
    labeled: pd.DataFrame
    melted: pd.DataFrame
    tidy: pd.DataFrame
    paths: Dict[str, Path] = field(default_factory=dict)


def run_pipeline(root: str | Path,
                 outdir: str | Path = ".",
                 tidy_name: str = "tidy.txt",
                 required_groups: Iterable = ()) -> PipelineResult:
    """
    read -> subset -> merge -> label -> melt/recast, writing
    merged_data.txt, melted_data.txt and the tidy table into `outdir`.

    Any error aborts the run; files written by earlier stages are left as they are.
    """
    root = Path(root)
    outdir = Path(outdir)
    check_layout(root)

    catalog = read_feature_catalog(root)
    merged = merge_partitions(root, catalog=catalog)
    paths = {"merged": write_table(merged, outdir / MERGED_NAME)}
    print(f"[OK] merged {len(merged)} rows -> {paths['merged']}")

    labeled = label_merged_data(root, merged)

    melted = melt_measurements(labeled)
    paths["melted"] = write_table(melted, outdir / MELTED_NAME)
    print(f"[OK] melted {len(melted)} rows -> {paths['melted']}")

    tidy = recast_mean(melted, required_groups=required_groups, variables=measure_variables(labeled))
    paths["tidy"] = write_table(tidy, outdir / tidy_name)
    print(f"[OK] tidy {tidy.shape[0]} rows x {tidy.shape[1]} columns -> {paths['tidy']}")

    return PipelineResult(merged=merged, labeled=labeled, melted=melted, tidy=tidy, paths=paths)

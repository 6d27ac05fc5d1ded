# squash_BenchmarkReporter/core/reports.py
from __future__ import annotations
from pathlib import Path
from typing import Literal
import numpy as np
import pandas as pd
from scipy.io import savemat

from .model import Dataset, Table

ReportFormat = Literal["csv", "mat", "both"]

REPORT_COLUMNS = [
    "plugin", "codec", "ratio", "compress_speed", "decompress_speed",
    "size", "compress_cpu", "decompress_cpu", "compress_wall", "decompress_wall",
]
_STRING_COLUMNS = ("plugin", "codec")

def build_dataframe(dataset: Dataset, table: Table) -> pd.DataFrame:
    """Projected rows next to the raw measurements they were computed from."""
    raw = pd.DataFrame({
        "size":            [r.size for r in dataset.records],
        "compress_cpu":    [r.compress_cpu for r in dataset.records],
        "decompress_cpu":  [r.decompress_cpu for r in dataset.records],
        "compress_wall":   [np.nan if r.compress_wall is None else r.compress_wall for r in dataset.records],
        "decompress_wall": [np.nan if r.decompress_wall is None else r.decompress_wall for r in dataset.records],
    }, dtype=float)
    df_out = pd.concat([table.frame.reset_index(drop=True), raw], axis=1)
    return df_out[REPORT_COLUMNS]

def _write_csv(df_out: pd.DataFrame, out_csv: Path, title: str) -> None:
    out_csv.parent.mkdir(parents=True, exist_ok=True)
    df_out.to_csv(out_csv, index=False, encoding="utf-8")
    print(f"[OK] wrote report: {title} → {out_csv}")

def _to_mat_cellstr(seq: list[str]) -> np.ndarray:
    """Make a MATLAB column cell array from a list of strings."""
    seq2 = [("" if s is None else str(s)) for s in seq]
    arr = np.empty((len(seq2), 1), dtype=object)
    arr[:, 0] = seq2
    return arr

def _write_mat(df_out: pd.DataFrame, out_mat: Path, varname: str, title: str) -> None:
    """
    Save a MATLAB struct with fields matching the CSV columns.
    Strings become cell arrays (Nx1), numerics become double (Nx1); inf/NaN are kept.
    """
    out_mat.parent.mkdir(parents=True, exist_ok=True)
    mat_struct = {}
    for name in df_out.columns:
        if name in _STRING_COLUMNS:
            mat_struct[name] = _to_mat_cellstr(df_out[name].tolist())
        else:
            mat_struct[name] = df_out[name].to_numpy(dtype=float).reshape(-1, 1)
    savemat(out_mat, {varname: mat_struct})
    print(f"[OK] wrote report: {title} → {out_mat}")

def write_report(dataset: Dataset,
                 table: Table,
                 out_base: Path,
                 fmt: ReportFormat = "csv",
                 mat_variable: str = "report") -> list[Path]:
    """
    Write report(s) in the requested format.
    - out_base is a *base path without extension* (e.g., .../report)
    - fmt: "csv" | "mat" | "both"
    - mat_variable: MATLAB variable name of the struct
    """
    if fmt not in ("csv", "mat", "both"):
        raise ValueError(f"unknown report format {fmt!r}")
    df_out = build_dataframe(dataset, table)
    written: list[Path] = []
    if fmt in ("csv", "both"):
        _write_csv(df_out, out_base.with_suffix(".csv"), dataset.name)
        written.append(out_base.with_suffix(".csv"))
    if fmt in ("mat", "both"):
        _write_mat(df_out, out_base.with_suffix(".mat"), mat_variable, dataset.name)
        written.append(out_base.with_suffix(".mat"))
    return written

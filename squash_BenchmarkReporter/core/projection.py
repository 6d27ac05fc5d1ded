# squash_BenchmarkReporter/core/projection.py
from __future__ import annotations
import logging
import math
from decimal import Decimal, ROUND_HALF_UP
import numpy as np
import pandas as pd

from .errors import ProjectionWarning
from .model import Dataset, Table, TABLE_COLUMNS

_LOG = logging.getLogger(__name__)

_CENTS = Decimal("0.01")
KIB = 1024.0

def round2(x: float) -> float:
    """Round half away from zero to two decimals.

    Works on the shortest decimal form of ``x`` so 1.005 becomes 1.01 rather
    than falling victim to its binary representation. Non-finite values pass
    through unchanged.
    """
    x = float(x)
    if not math.isfinite(x):
        return x
    return float(Decimal(repr(x)).quantize(_CENTS, rounding=ROUND_HALF_UP))

def _ratio(numerator: float, denominator: np.ndarray) -> np.ndarray:
    with np.errstate(divide="ignore", invalid="ignore"):
        return np.float64(numerator) / denominator

def project(dataset: Dataset) -> Table:
    """One row per record: plugin, codec, ratio, compress KB/s, decompress KB/s."""
    recs = dataset.records
    size = np.array([r.size for r in recs], dtype=float)
    c_cpu = np.array([r.compress_cpu for r in recs], dtype=float)
    d_cpu = np.array([r.decompress_cpu for r in recs], dtype=float)
    total = float(dataset.uncompressed_size)

    numeric = {
        "ratio":            _ratio(total, size),
        "compress_speed":   _ratio(total, c_cpu) / KIB,
        "decompress_speed": _ratio(total, d_cpu) / KIB,
    }

    cols = {
        "plugin": pd.Series([r.plugin for r in recs], dtype=object),
        "codec":  pd.Series([r.codec for r in recs], dtype=object),
    }
    warnings: list[ProjectionWarning] = []
    for name, values in numeric.items():
        rounded = [round2(v) for v in values]
        for idx, v in enumerate(rounded):
            if not math.isfinite(v):
                warnings.append(ProjectionWarning(dataset.name, idx, name, v))
        cols[name] = pd.Series(rounded, dtype=float)

    frame = pd.DataFrame(cols, columns=[c.name for c in TABLE_COLUMNS])
    for w in warnings:
        _LOG.warning("non-finite cell: %s", w)
    return Table(dataset=dataset.name, columns=TABLE_COLUMNS, frame=frame, warnings=tuple(warnings))

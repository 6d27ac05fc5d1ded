# squash_BenchmarkReporter/core/model.py
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Iterator, Literal
import pandas as pd

from .errors import ProjectionWarning

ColumnType = Literal["string", "number"]
ColumnRole = Literal["data", "tooltip"]

@dataclass(frozen=True)
class MeasurementRecord:
    plugin: str                           # e.g. "zlib"
    codec: str                            # e.g. "deflate"
    size: float                           # compressed size in bytes
    compress_cpu: float                   # seconds of CPU time
    decompress_cpu: float
    compress_wall: float | None = None    # wall-clock seconds, when the benchmark recorded them
    decompress_wall: float | None = None

@dataclass(frozen=True)
class Dataset:
    name: str                             # input file name used by the benchmark run
    uncompressed_size: float
    records: tuple[MeasurementRecord, ...]

@dataclass(frozen=True)
class ColumnSpec:
    name: str
    label: str
    dtype: ColumnType

TABLE_COLUMNS: tuple[ColumnSpec, ...] = (
    ColumnSpec("plugin", "Plugin", "string"),
    ColumnSpec("codec", "Codec", "string"),
    ColumnSpec("ratio", "Compression Ratio", "number"),
    ColumnSpec("compress_speed", "Compression Speed (KB/s)", "number"),
    ColumnSpec("decompress_speed", "Decompress Speed (KB/s)", "number"),
)

@dataclass(frozen=True, eq=False)
class Table:
    """Projected rows of one dataset; columns follow ``TABLE_COLUMNS``."""
    dataset: str
    columns: tuple[ColumnSpec, ...]
    frame: pd.DataFrame
    warnings: tuple[ProjectionWarning, ...] = ()

    def __len__(self) -> int:
        return int(self.frame.shape[0])

    def column_names(self) -> list[str]:
        return [c.name for c in self.columns]

    def rows(self) -> Iterator[tuple]:
        for rec in self.frame.itertuples(index=False, name=None):
            yield rec

@dataclass(frozen=True)
class ColumnRef:
    column: int                           # index into Table.columns
    role: ColumnRole = "data"

@dataclass(frozen=True, eq=False)
class View:
    view_id: str
    kind: Literal["table", "bar", "scatter"]
    title: str
    table: Table
    columns: tuple[ColumnRef, ...]
    options: dict = field(default_factory=dict)

    def column_specs(self) -> list[ColumnSpec]:
        return [self.table.columns[ref.column] for ref in self.columns]

    def roles(self) -> list[ColumnRole]:
        return [ref.role for ref in self.columns]

    def data_columns(self) -> list[ColumnSpec]:
        return [self.table.columns[ref.column] for ref in self.columns if ref.role == "data"]

    def tooltip_columns(self) -> list[ColumnSpec]:
        return [self.table.columns[ref.column] for ref in self.columns if ref.role == "tooltip"]

    def frame(self) -> pd.DataFrame:
        """Projected copy; tooltip columns are suffixed so a source column may appear twice."""
        out = {}
        for ref in self.columns:
            spec = self.table.columns[ref.column]
            key = spec.name if ref.role == "data" else f"{spec.name}__tooltip"
            out[key] = self.table.frame[spec.name].to_numpy()
        return pd.DataFrame(out)

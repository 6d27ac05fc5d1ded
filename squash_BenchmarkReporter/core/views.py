# squash_BenchmarkReporter/core/views.py
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Literal

from .model import ColumnRef, Table, View

# source columns: 0 plugin, 1 codec, 2 ratio, 3 compress_speed, 4 decompress_speed
PLUGIN, CODEC, RATIO, COMPRESS_SPEED, DECOMPRESS_SPEED = range(5)

@dataclass(frozen=True)
class ViewDefinition:
    view_id: str
    kind: Literal["table", "bar", "scatter"]
    title: str
    columns: tuple[ColumnRef, ...]
    options: dict = field(default_factory=dict)

def _data(*idx: int) -> tuple[ColumnRef, ...]:
    return tuple(ColumnRef(i) for i in idx)

_TOOLTIP_CODEC = ColumnRef(CODEC, "tooltip")

VIEW_DEFINITIONS: tuple[ViewDefinition, ...] = (
    ViewDefinition("table", "table", "Results",
                   _data(PLUGIN, CODEC, RATIO, COMPRESS_SPEED, DECOMPRESS_SPEED)),
    ViewDefinition("ratio", "bar", "Compression Ratio",
                   _data(CODEC, RATIO),
                   {"legend": False, "v_axis": {"title": "Codecs"}}),
    ViewDefinition("speed", "bar", "Speed",
                   _data(CODEC, COMPRESS_SPEED, DECOMPRESS_SPEED),
                   {"legend": True,
                    "v_axis": {"title": "Codecs"},
                    "h_axis": {"title": "Speed (KB/s)"}}),
    ViewDefinition("ratio_vs_compress_speed", "scatter", "Compression Ratio vs. Compression Speed",
                   _data(COMPRESS_SPEED, RATIO) + (_TOOLTIP_CODEC,),
                   {"legend": False,
                    "v_axis": {"title": "Ratio", "min_value": 0},
                    "h_axis": {"title": "Speed (KB/s)", "min_value": 0}}),
    ViewDefinition("ratio_vs_decompress_speed", "scatter", "Compression Ratio vs. Decompression Speed",
                   _data(DECOMPRESS_SPEED, RATIO) + (_TOOLTIP_CODEC,),
                   {"legend": False,
                    "v_axis": {"title": "Ratio", "min_value": 0},
                    "h_axis": {"title": "Decompression Speed (KB/s)", "min_value": 0}}),
    ViewDefinition("speed_compare", "scatter", "Compression Speed vs. Decompression Speed",
                   _data(COMPRESS_SPEED, DECOMPRESS_SPEED) + (_TOOLTIP_CODEC,),
                   {"legend": False,
                    "h_axis": {"title": "Compression Speed (KB/s)", "min_value": 0},
                    "v_axis": {"title": "Decompression Speed (KB/s)", "min_value": 0}}),
)

def select_views(table: Table) -> list[View]:
    """All views of one dataset, in declaration order, sharing ``table``."""
    return [
        View(view_id=d.view_id, kind=d.kind, title=d.title, table=table,
             columns=d.columns, options=dict(d.options))
        for d in VIEW_DEFINITIONS
    ]

# squash_BenchmarkReporter/core/context.py
from __future__ import annotations
from dataclasses import dataclass, field
import re

from .model import Dataset, Table
from .projection import project

def _slug(name: str) -> str:
    return re.sub(r"[^A-Za-z0-9_-]+", "-", name).strip("-") or "dataset"

@dataclass
class BenchmarkContext:
    """Loaded datasets and their projected tables for one report run."""
    source: str
    datasets: dict[str, Dataset] = field(default_factory=dict)
    tables: dict[str, Table] = field(default_factory=dict)
    ids: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_datasets(cls, source: str, datasets: dict[str, Dataset]) -> "BenchmarkContext":
        ctx = cls(source=source, datasets=dict(datasets))
        ctx.tables = {name: project(ds) for name, ds in ctx.datasets.items()}
        # position prefix keeps ids distinct when names slug to the same text
        ctx.ids = {name: f"ds{i}-{_slug(name)}" for i, name in enumerate(ctx.datasets)}
        return ctx

    def dataset_names(self) -> list[str]:
        return list(self.datasets)

    def table(self, name: str) -> Table:
        return self.tables[name]

    def dataset_id(self, name: str) -> str:
        """Page element id and output folder name of one dataset."""
        return self.ids[name]

    def initial_dataset(self) -> str | None:
        """Single-dataset documents are shown without a navigation click."""
        names = self.dataset_names()
        return names[0] if len(names) == 1 else None

    def teardown(self) -> None:
        self.datasets.clear()
        self.tables.clear()
        self.ids.clear()

# squash_BenchmarkReporter/core/plotting.py
from __future__ import annotations
from html import escape
import math
from pathlib import Path
import re
import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import plotly.graph_objects as go

from .broadcast import Selection, SelectionList, SelectListener
from .model import View

def _finite_or_none(values) -> list:
    out = []
    for v in values:
        try:
            f = float(v)
        except (TypeError, ValueError):
            raise ValueError(f"non-numeric cell {v!r}") from None
        out.append(f if math.isfinite(f) else None)
    return out

def _fmt_cell(value, dtype: str) -> str:
    if dtype == "number":
        f = float(value)
        return f"{f:.2f}" if math.isfinite(f) else str(f)
    return escape(str(value))

def _sanitize(name: str) -> str:
    s = re.sub(r"[^A-Za-z0-9._-]+", "_", name).strip("_")
    return s[:120] if len(s) > 120 else s


class Visualization:
    """A rendering bound to one view; emits ``select`` events."""

    kind = "base"

    def __init__(self, container_id: str):
        self.container_id = container_id
        self.view: View | None = None
        self.options: dict = {}
        self._selection: list[Selection] = []
        self._listeners: dict[str, list[SelectListener]] = {}

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.container_id}>"

    # ---------- events ----------
    def add_listener(self, event: str, callback: SelectListener) -> None:
        self._listeners.setdefault(event, []).append(callback)

    def remove_listeners(self, event: str | None = None) -> None:
        if event is None:
            self._listeners.clear()
        else:
            self._listeners.pop(event, None)

    def _fire(self, event: str, *args) -> None:
        for cb in list(self._listeners.get(event, [])):
            cb(*args)

    # ---------- selection ----------
    def get_selection(self) -> list[Selection]:
        return list(self._selection)

    def set_selection(self, selection: SelectionList) -> None:
        """Programmatic update; never fires ``select``."""
        self._selection = list(selection)

    def select(self, selection: SelectionList) -> None:
        """User-style selection: update, then notify listeners."""
        self.set_selection(selection)
        self._fire("select", self.get_selection())

    def selected_rows(self) -> list[int]:
        n = len(self.view.table) if self.view is not None else 0
        rows = {s.row for s in self._selection if s.row is not None and 0 <= s.row < n}
        return sorted(rows)

    # ---------- rendering ----------
    def draw(self, view: View, options: dict | None = None) -> str:
        self.view = view
        self.options = dict(options or {})
        return self.to_html()

    def to_html(self) -> str:
        raise NotImplementedError


class TableVisualization(Visualization):
    kind = "table"

    def to_html(self) -> str:
        view = self.view
        specs = view.column_specs()
        selected = set(self.selected_rows())
        head = "".join(f"<th>{escape(s.label)}</th>" for s in specs)
        body = []
        for idx, row in enumerate(view.frame().itertuples(index=False, name=None)):
            cells = "".join(f"<td>{_fmt_cell(v, s.dtype)}</td>" for v, s in zip(row, specs))
            cls = ' class="selected"' if idx in selected else ""
            body.append(f'<tr data-row="{idx}"{cls}>{cells}</tr>')
        return (
            f'<table id="{self.container_id}" class="results-table">'
            f"<thead><tr>{head}</tr></thead><tbody>{''.join(body)}</tbody></table>"
        )


class _ChartVisualization(Visualization):
    def figure(self) -> go.Figure:
        raise NotImplementedError

    def _layout(self, fig: go.Figure) -> None:
        opts = self.options
        h_axis = opts.get("h_axis", {})
        v_axis = opts.get("v_axis", {})
        fig.update_layout(
            title=self.view.title,
            showlegend=bool(opts.get("legend", True)),
            template="plotly_white",
            margin=dict(l=90, r=30, t=50, b=50),
            clickmode="event+select",
        )
        if opts.get("height"):
            fig.update_layout(height=int(opts["height"]))
        if h_axis.get("title"):
            fig.update_xaxes(title_text=h_axis["title"])
        if v_axis.get("title"):
            fig.update_yaxes(title_text=v_axis["title"])
        if h_axis.get("min_value") == 0:
            fig.update_xaxes(rangemode="tozero")
        if v_axis.get("min_value") == 0:
            fig.update_yaxes(rangemode="tozero")

    def _selectedpoints(self):
        rows = self.selected_rows()
        return rows if rows else None

    def to_html(self) -> str:
        fig = self.figure()
        return fig.to_html(
            full_html=False,
            include_plotlyjs=False,
            div_id=self.container_id,
            config={"displayModeBar": False, "responsive": False},
        )

    def save_png(self, out_path: Path, dpi: int = 160) -> Path:
        raise NotImplementedError


class BarChartVisualization(_ChartVisualization):
    """Horizontal bars, one category per row, one series per value column."""

    kind = "bar"

    def _categories(self) -> tuple[list[int], list[str]]:
        frame = self.view.frame()
        labels = [str(v) for v in frame.iloc[:, 0].tolist()]
        return list(range(len(labels))), labels

    def figure(self) -> go.Figure:
        positions, labels = self._categories()
        frame = self.view.frame()
        fig = go.Figure()
        for spec in self.view.data_columns()[1:]:
            fig.add_trace(go.Bar(
                x=_finite_or_none(frame[spec.name]),
                y=positions,
                orientation="h",
                name=spec.label,
                selectedpoints=self._selectedpoints(),
            ))
        self._layout(fig)
        fig.update_yaxes(tickmode="array", tickvals=positions, ticktext=labels, autorange="reversed")
        fig.update_layout(barmode="group")
        return fig

    def save_png(self, out_path: Path, dpi: int = 160) -> Path:
        positions, labels = self._categories()
        frame = self.view.frame()
        value_specs = self.view.data_columns()[1:]
        height_in = max(4.0, 0.25 * len(labels) * max(1, len(value_specs)))
        plt.figure(figsize=(11, height_in))
        width = 0.8 / max(1, len(value_specs))
        for k, spec in enumerate(value_specs):
            vals = [v if v is not None else 0.0 for v in _finite_or_none(frame[spec.name])]
            plt.barh([p + k * width for p in positions], vals, height=width, label=spec.label)
        plt.yticks([p + width * (len(value_specs) - 1) / 2 for p in positions], labels, fontsize=7)
        plt.gca().invert_yaxis()
        plt.xlabel(self.options.get("h_axis", {}).get("title", ""))
        plt.ylabel(self.options.get("v_axis", {}).get("title", ""))
        plt.title(self.view.title)
        plt.grid(True, axis="x", alpha=0.3)
        if self.options.get("legend", True):
            plt.legend(fontsize=8)
        plt.tight_layout()
        out_path.parent.mkdir(parents=True, exist_ok=True)
        plt.savefig(out_path, dpi=dpi)
        plt.close()
        return out_path


class ScatterChartVisualization(_ChartVisualization):
    """x = first value column, y = second; tooltip columns become hover text."""

    kind = "scatter"

    def _xy_text(self):
        frame = self.view.frame()
        x_spec, y_spec = self.view.data_columns()[:2]
        tooltips = [c for c in frame.columns if c.endswith("__tooltip")]
        text = [str(v) for v in frame[tooltips[0]]] if tooltips else None
        return (_finite_or_none(frame[x_spec.name]),
                _finite_or_none(frame[y_spec.name]),
                text, x_spec, y_spec)

    def figure(self) -> go.Figure:
        x, y, text, x_spec, y_spec = self._xy_text()
        fig = go.Figure(go.Scatter(
            x=x,
            y=y,
            text=text,
            mode="markers",
            name=y_spec.label,
            hovertemplate=(
                ("%{text}<br>" if text is not None else "")
                + f"{x_spec.label}: %{{x}}<br>{y_spec.label}: %{{y}}<extra></extra>"
            ),
            selectedpoints=self._selectedpoints(),
        ))
        self._layout(fig)
        return fig

    def save_png(self, out_path: Path, dpi: int = 160) -> Path:
        x, y, text, x_spec, y_spec = self._xy_text()
        pts = [(a, b, t) for a, b, t in zip(x, y, text or [""] * len(x))
               if a is not None and b is not None]
        plt.figure(figsize=(8, 5))
        plt.scatter([p[0] for p in pts], [p[1] for p in pts])
        for a, b, name in pts:
            plt.annotate(name, (a, b), fontsize=6, xytext=(4, 2), textcoords="offset points")
        plt.xlabel(self.options.get("h_axis", {}).get("title", x_spec.label))
        plt.ylabel(self.options.get("v_axis", {}).get("title", y_spec.label))
        if self.options.get("h_axis", {}).get("min_value") == 0:
            plt.xlim(left=0)
        if self.options.get("v_axis", {}).get("min_value") == 0:
            plt.ylim(bottom=0)
        plt.title(self.view.title)
        plt.grid(True, alpha=0.3)
        plt.tight_layout()
        out_path.parent.mkdir(parents=True, exist_ok=True)
        plt.savefig(out_path, dpi=dpi)
        plt.close()
        return out_path


VISUALIZATION_TYPES: dict[str, type[Visualization]] = {
    "table":   TableVisualization,
    "bar":     BarChartVisualization,
    "scatter": ScatterChartVisualization,
}

def save_view_plots(visualizations: list[Visualization], out_dir: Path, dataset: str, dpi: int = 160) -> list[Path]:
    """Static PNG per chart visualization; tables are skipped."""
    written: list[Path] = []
    base = _sanitize(dataset) or "dataset"
    for vis in visualizations:
        if not isinstance(vis, _ChartVisualization) or vis.view is None:
            continue
        out_path = out_dir / f"{base}_{vis.view.view_id}.png"
        written.append(vis.save_png(out_path, dpi=dpi))
        print(f"[OK] {dataset} [{vis.view.view_id}] → {out_path}")
    return written

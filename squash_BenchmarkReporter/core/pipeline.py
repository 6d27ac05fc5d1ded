# squash_BenchmarkReporter/core/pipeline.py
from __future__ import annotations
from pathlib import Path

from .context import BenchmarkContext
from .errors import ConfigError
from .page import build_page, write_page
from .plotting import Visualization, save_view_plots
from .reports import write_report

def _sections(cfg: dict) -> tuple[dict, dict, dict]:
    return (cfg.get("output") or {}, cfg.get("reports") or {}, cfg.get("plots") or {})

def run_pipeline(context: BenchmarkContext, cfg: dict, out_root: Path) -> Path:
    """Page, per-dataset reports and optional static plots for one loaded document."""
    out_cfg, rep_cfg, plot_cfg = _sections(cfg)
    verbose = bool((cfg.get("logging") or {}).get("verbose", True))

    fmt = str(rep_cfg.get("format", "csv")).lower()
    if fmt not in ("csv", "mat", "both", "none"):
        raise ConfigError(f"reports.format must be csv, mat, both or none (got {fmt!r})")
    mat_var = str(rep_cfg.get("mat_variable", "report"))
    static_png = bool(plot_cfg.get("static_png", False))
    dpi = int(plot_cfg.get("dpi", 160))

    out_root.mkdir(parents=True, exist_ok=True)

    def on_panel(name: str, visualizations: list[Visualization]) -> None:
        # runs while the dataset's panel is the live one in the registry
        ds_dir = out_root / context.dataset_id(name)
        if fmt != "none":
            write_report(context.datasets[name], context.table(name), ds_dir / "report",
                         fmt=fmt, mat_variable=mat_var)
        if static_png:
            save_view_plots(visualizations, ds_dir / "plots", name, dpi=dpi)
        if verbose:
            table = context.table(name)
            print(f"[summary] {name}: {len(table)} row(s), {len(table.warnings)} non-finite cell(s)")

    html = build_page(context, cfg, on_panel=on_panel)
    page_path = out_root / str(out_cfg.get("page_name", "index.html"))
    return write_page(html, page_path)

# squash_BenchmarkReporter/core/page.py
from __future__ import annotations
from html import escape
from pathlib import Path
from typing import Callable

from .broadcast import Selection
from .context import BenchmarkContext
from .plotting import Visualization
from .registry import DEFAULT_PANEL_WIDTH, VisualizationRegistry
from ..utils.query import email_prefill

PLOTLY_CDN = "https://cdn.plot.ly/plotly-2.35.2.min.js"

_STYLE = """
body { font-family: -apple-system, BlinkMacSystemFont, "Segoe UI", Roboto, Helvetica, Arial, sans-serif; margin: 0 auto; max-width: 1000px; padding: 20px; color: #222; }
#datasets-list { list-style: none; padding: 0; display: flex; flex-wrap: wrap; gap: 6px 14px; }
.results-table { border-collapse: collapse; font-size: 0.85em; width: 100%; }
.results-table th, .results-table td { border-bottom: 1px solid #ddd; padding: 3px 8px; text-align: left; }
.results-table tr.selected td { background: #fff3b0; }
.results-table tbody tr { cursor: pointer; }
.viz { margin: 18px 0; }
.render-error, .load-error { color: #b00020; }
.projection-warnings { color: #8a6d00; font-size: 0.85em; }
"""

# Browser side of the selection relay: a click in one visualization of the
# displayed panel is copied, by row index, onto every other one in that panel.
_SCRIPT = """
(function () {
  var broadcasting = false;

  function charts(panel) { return Array.prototype.slice.call(panel.querySelectorAll('.plotly-graph-div')); }
  function tables(panel) { return Array.prototype.slice.call(panel.querySelectorAll('table.results-table')); }

  function applyRows(target, rows) {
    if (target.tagName === 'TABLE') {
      target.querySelectorAll('tbody tr').forEach(function (tr) {
        tr.classList.toggle('selected', rows.indexOf(+tr.dataset.row) >= 0);
      });
    } else {
      var sel = rows.length ? rows : null;
      var traces = (target.data || []).map(function () { return sel; });
      Plotly.restyle(target, {selectedpoints: traces});
    }
  }

  function broadcast(panel, source, rows) {
    if (broadcasting) { return; }
    broadcasting = true;
    try {
      charts(panel).concat(tables(panel)).forEach(function (v) {
        if (v !== source) { applyRows(v, rows); }
      });
    } finally {
      broadcasting = false;
    }
  }

  function wire(panel) {
    charts(panel).forEach(function (div) {
      div.on('plotly_click', function (ev) {
        var rows = ev.points.map(function (p) { return p.pointIndex; });
        broadcast(panel, div, rows);
      });
      div.on('plotly_deselect', function () { broadcast(panel, div, []); });
    });
    tables(panel).forEach(function (tbl) {
      tbl.querySelectorAll('tbody tr').forEach(function (tr) {
        tr.addEventListener('click', function () {
          applyRows(tbl, [+tr.dataset.row]);
          broadcast(panel, tbl, [+tr.dataset.row]);
        });
      });
    });
  }

  function show(id) {
    document.querySelectorAll('.dataset-panel').forEach(function (panel) {
      var visible = panel.id === id;
      panel.style.display = visible ? '' : 'none';
      if (visible) { charts(panel).forEach(function (div) { Plotly.Plots.resize(div); }); }
    });
  }

  document.addEventListener('DOMContentLoaded', function () {
    document.querySelectorAll('.dataset-panel').forEach(wire);
    if (window.location.hash) { show(decodeURIComponent(window.location.hash.substring(1))); }
    window.addEventListener('hashchange', function () {
      show(decodeURIComponent(window.location.hash.substring(1)));
    });

    var params = new URLSearchParams(window.location.search);
    if (params.has('email')) {
      document.getElementById('announce-email').value = params.get('email');
    }
  });
})();
"""

def _plotly_js_tag(mode: str) -> str:
    if mode == "inline":
        from plotly.offline import get_plotlyjs
        return f"<script>{get_plotlyjs()}</script>"
    return f'<script src="{PLOTLY_CDN}"></script>'

def _page_cfg(cfg: dict | None) -> dict:
    return (cfg or {}).get("page") or {}

def _form_html(prefill: str | None) -> str:
    value = f' value="{escape(prefill, quote=True)}"' if prefill else ""
    return (
        '<form id="announce" onsubmit="return false;">'
        '<label for="announce-email">Get notified when new results are published:</label> '
        f'<input type="email" id="announce-email" name="email"{value}>'
        "</form>"
    )

def _document(title: str, body: str, plotly_js: str) -> str:
    return (
        "<!DOCTYPE html>\n<html>\n<head>\n"
        '<meta charset="utf-8">\n'
        f"<title>{escape(title)}</title>\n"
        f"{_plotly_js_tag(plotly_js)}\n"
        f"<style>{_STYLE}</style>\n"
        "</head>\n<body>\n"
        f"{body}\n"
        f"<script>{_SCRIPT}</script>\n"
        "</body>\n</html>\n"
    )

def _highlight_rows(context: BenchmarkContext, name: str, wanted: list[str]) -> list[Selection]:
    """Rows whose 'plugin:codec' (or bare codec) is listed in page.highlight."""
    if not wanted:
        return []
    keys = {str(w).lower() for w in wanted}
    out = []
    for idx, (plugin, codec, *_rest) in enumerate(context.table(name).rows()):
        if f"{plugin}:{codec}".lower() in keys or str(codec).lower() in keys:
            out.append(Selection(row=idx))
    return out

def render_panels(context: BenchmarkContext, cfg: dict | None = None,
                  registry: VisualizationRegistry | None = None,
                  on_panel: Callable[[str, list[Visualization]], None] | None = None) -> dict[str, str]:
    """Dataset name -> panel HTML; each panel is rendered from a cleared registry."""
    pcfg = _page_cfg(cfg)
    if registry is None:
        registry = VisualizationRegistry(context, panel_width=float(pcfg.get("panel_width", DEFAULT_PANEL_WIDTH)))
    initial = context.initial_dataset()
    highlight = list(pcfg.get("highlight", []) or [])
    panels: dict[str, str] = {}
    for name in context.dataset_names():
        visualizations = registry.render_dataset(name)
        selection = _highlight_rows(context, name, highlight)
        if selection and visualizations:
            visualizations[0].select(selection)
            registry.redraw()
        if on_panel is not None:
            on_panel(name, visualizations)
        panels[name] = registry.panel_html(hidden=(name != initial))
        for err in registry.current.errors:
            print(f"[WARN] {name}: {err.log_message()}")
    registry.clear()
    return panels

def build_page(context: BenchmarkContext, cfg: dict | None = None,
               on_panel: Callable[[str, list[Visualization]], None] | None = None) -> str:
    pcfg = _page_cfg(cfg)
    title = str(pcfg.get("title", "Squash Compression Benchmark"))
    prefill = email_prefill(str(pcfg.get("query", "") or ""))
    names = context.dataset_names()

    parts = [f"<h1>{escape(title)}</h1>", _form_html(prefill)]
    if len(names) > 1:
        items = "".join(
            f'<li><a href="#{context.dataset_id(n)}">{escape(n)}</a></li>' for n in names
        )
        parts.append(f'<ul id="datasets-list">{items}</ul>')

    panels = render_panels(context, cfg, on_panel=on_panel)
    if not names:
        results = '<p class="load-error">The benchmark document contains no datasets.</p>'
    else:
        results = "".join(panels[n] for n in names)
    parts.append(f'<div id="results">{results}</div>')
    return _document(title, "\n".join(parts), str(pcfg.get("plotly_js", "cdn")))

def build_error_page(message: str, cfg: dict | None = None) -> str:
    """Empty results panel with the load failure shown inline."""
    pcfg = _page_cfg(cfg)
    title = str(pcfg.get("title", "Squash Compression Benchmark"))
    prefill = email_prefill(str(pcfg.get("query", "") or ""))
    body = "\n".join([
        f"<h1>{escape(title)}</h1>",
        _form_html(prefill),
        f'<div id="results"><p class="load-error">Unable to load benchmark results: {escape(message)}</p></div>',
    ])
    return _document(title, body, str(pcfg.get("plotly_js", "cdn")))

def write_page(html: str, out_path: Path) -> Path:
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_text(html, encoding="utf-8")
    print(f"[OK] wrote page → {out_path}")
    return out_path

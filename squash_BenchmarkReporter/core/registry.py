# squash_BenchmarkReporter/core/registry.py
from __future__ import annotations
import logging
from dataclasses import dataclass, field
from html import escape

from .broadcast import BroadcastGroup
from .context import BenchmarkContext
from .errors import RenderError
from .plotting import VISUALIZATION_TYPES, Visualization
from .views import select_views

_LOG = logging.getLogger(__name__)

DEFAULT_PANEL_WIDTH = 960
ASPECT = 9 / 16

@dataclass
class PanelSlot:
    container_id: str
    view_id: str
    visualization: Visualization | None = None
    html: str = ""
    error: RenderError | None = None

@dataclass
class RenderedPanel:
    dataset: str
    height: float
    slots: list[PanelSlot] = field(default_factory=list)

    @property
    def errors(self) -> list[RenderError]:
        return [s.error for s in self.slots if s.error is not None]


class VisualizationRegistry:
    """
    Renders one dataset panel at a time and owns its broadcast group.

    Every ``render_dataset`` starts from a cleared panel; nothing from the
    previously displayed dataset is reused.
    """

    def __init__(self, context: BenchmarkContext, panel_width: float = DEFAULT_PANEL_WIDTH,
                 aspect: float = ASPECT):
        self.context = context
        self.panel_width = float(panel_width)
        self.aspect = float(aspect)
        self.group = BroadcastGroup()
        self.current: RenderedPanel | None = None

    @property
    def current_dataset(self) -> str | None:
        return self.current.dataset if self.current is not None else None

    def visualizations(self) -> list[Visualization]:
        if self.current is None:
            return []
        return [s.visualization for s in self.current.slots
                if s.visualization is not None and s.error is None]

    def clear(self) -> None:
        self.group.unregister_all()
        self.current = None

    def render_dataset(self, name: str) -> list[Visualization]:
        table = self.context.table(name)   # KeyError for unknown datasets
        self.clear()

        height = self.panel_width * self.aspect
        panel = RenderedPanel(dataset=name, height=height)
        prefix = self.context.dataset_id(name)
        for view in select_views(table):
            slot = PanelSlot(container_id=f"{prefix}-{view.view_id}", view_id=view.view_id)
            panel.slots.append(slot)
            vis = VISUALIZATION_TYPES[view.kind](slot.container_id)
            slot.visualization = vis
            options = dict(view.options)
            if view.kind != "table":
                options["height"] = height
            try:
                slot.html = vis.draw(view, options)
            except Exception as e:
                slot.error = RenderError(
                    f"failed to draw {view.view_id}: {e}",
                    user_message=f"{view.title} could not be drawn.",
                    context={"dataset": name, "view": view.view_id},
                )
                _LOG.error("%s", slot.error.log_message())
                continue
            self.group.register(vis)

        self.current = panel
        return self.visualizations()

    def redraw(self) -> None:
        """Refresh fragments after a selection change."""
        if self.current is None:
            return
        for slot in self.current.slots:
            if slot.error is None and slot.visualization is not None:
                slot.html = slot.visualization.to_html()

    def panel_html(self, hidden: bool = False) -> str:
        if self.current is None:
            return ""
        panel = self.current
        table = self.context.table(panel.dataset)
        parts = [f"<h2>{escape(panel.dataset)} Results</h2>"]
        if table.warnings:
            items = "".join(f"<li>{escape(str(w))}</li>" for w in table.warnings)
            parts.append(f'<ul class="projection-warnings">{items}</ul>')
        for slot in panel.slots:
            if slot.error is not None:
                body = f'<p class="render-error">{escape(slot.error.user_message)}</p>'
            else:
                body = slot.html
            parts.append(f'<div class="viz" data-view="{slot.view_id}">{body}</div>')
        style = ' style="display:none"' if hidden else ""
        return (
            f'<div class="dataset-panel" id="{self.context.dataset_id(panel.dataset)}" '
            f'data-dataset="{escape(panel.dataset)}"{style}>{"".join(parts)}</div>'
        )

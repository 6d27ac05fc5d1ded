# squash_BenchmarkReporter/core/broadcast.py
from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Callable, Protocol, Sequence

_LOG = logging.getLogger(__name__)

@dataclass(frozen=True)
class Selection:
    """Positional reference inside one visualization's own view."""
    row: int | None = None
    column: int | None = None

SelectionList = Sequence[Selection]
SelectListener = Callable[[SelectionList], None]

class Selectable(Protocol):
    def add_listener(self, event: str, callback: SelectListener) -> None: ...
    def remove_listeners(self, event: str | None = None) -> None: ...
    def set_selection(self, selection: SelectionList) -> None: ...

class BroadcastGroup:
    """
    Keeps the visualizations of one panel on the same selection.

    A ``select`` from one member is relayed to every other member through
    ``set_selection``; the source is skipped. Relaying is index based, no
    reconciliation between differing column layouts is attempted.
    """

    def __init__(self) -> None:
        self._members: list[Selectable] = []
        self._broadcasting = False

    def __len__(self) -> int:
        return len(self._members)

    @property
    def members(self) -> tuple[Selectable, ...]:
        return tuple(self._members)

    def register(self, vis: Selectable) -> None:
        if any(m is vis for m in self._members):
            return
        self._members.append(vis)
        vis.add_listener("select", lambda selection, _src=vis: self.broadcast_selection(_src, selection))

    def unregister_all(self) -> None:
        for m in self._members:
            m.remove_listeners("select")
        self._members.clear()

    def broadcast_selection(self, source: Selectable, selection: SelectionList) -> int:
        """Returns the number of members updated; 0 when the call was re-entrant."""
        if self._broadcasting:
            _LOG.debug("dropping re-entrant select from %r", source)
            return 0
        self._broadcasting = True
        updated = 0
        try:
            for m in self._members:
                if m is source:
                    continue
                m.set_selection(list(selection))
                updated += 1
        finally:
            self._broadcasting = False
        return updated

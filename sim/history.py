"""Stat trajectories for reporting.

:class:`StatHistory` keeps one ``(survival, tech, faith)`` row per recorded
snapshot.  Attached to a civilization it records a row after every applied
modifier, which makes the per-step clamping of a card visible: a card with
``[-60, +10]`` on survival shows the dip to zero that the final stats hide.
"""

from __future__ import annotations

from typing import Dict, List, Optional, Tuple

import numpy as np

from cards import StatType
from sim import events
from sim.events import CivEvent

# Column order of the history array
STAT_COLUMNS: Tuple[StatType, ...] = (StatType.SURVIVAL, StatType.TECH, StatType.FAITH)


class StatHistory:
    def __init__(self) -> None:
        self._rows: List[Tuple[int, int, int]] = []
        self._alive: List[bool] = []
        self._attached: Dict[int, object] = {}

    def __len__(self) -> int:
        return len(self._rows)

    def record(self, civ) -> None:
        """Append the current stats and liveness of ``civ``."""
        self._rows.append(tuple(civ.get_stat(s) for s in STAT_COLUMNS))
        self._alive.append(bool(civ.alive))

    def attach(self, civ) -> None:
        """Record ``civ`` now and after every modifier applied to it."""
        if id(civ) in self._attached:
            return

        def on_event(event: CivEvent) -> None:
            # Listeners run after the step is complete, alive flag included
            if event.type == events.STAT_CHANGED:
                self.record(civ)

        self._attached[id(civ)] = on_event
        self.record(civ)
        civ.subscribe(on_event)

    def detach(self, civ) -> None:
        listener = self._attached.pop(id(civ), None)
        if listener is not None:
            civ.unsubscribe(listener)

    def as_array(self) -> np.ndarray:
        """Return the history as an ``(n, 3)`` integer array."""
        if not self._rows:
            return np.zeros((0, len(STAT_COLUMNS)), dtype=np.int64)
        return np.asarray(self._rows, dtype=np.int64)

    def alive_flags(self) -> np.ndarray:
        return np.asarray(self._alive, dtype=bool)

    def series(self, stat: StatType) -> np.ndarray:
        return self.as_array()[:, STAT_COLUMNS.index(stat)]

    def extinction_index(self) -> Optional[int]:
        """Index of the first row recorded after extinction, or ``None``."""
        dead = np.flatnonzero(~self.alive_flags())
        if dead.size == 0:
            return None
        return int(dead[0])

    def summary(self) -> Dict[str, Dict[str, float]]:
        """Min/max/mean per stat, keyed by stat name."""
        arr = self.as_array()
        out: Dict[str, Dict[str, float]] = {}
        if arr.shape[0] == 0:
            return out
        for i, stat in enumerate(STAT_COLUMNS):
            col = arr[:, i]
            out[stat.value] = {
                "min": float(col.min()),
                "max": float(col.max()),
                "mean": float(col.mean()),
            }
        return out


__all__ = ["StatHistory", "STAT_COLUMNS"]

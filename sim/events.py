"""
Civilization events for listeners and logging.
Events describe what happened while a modifier was applied.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict

# Event types
STAT_CHANGED = "stat_changed"
CIV_EXTINCT = "civ_extinct"


@dataclass(frozen=True)
class CivEvent:
    """All events have a type and a payload."""
    type: str
    payload: Dict[str, Any]

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type, "payload": dict(self.payload)}


def stat_changed(civ_id: str, stat: str, old_value: int, new_value: int, delta: int) -> CivEvent:
    # ``delta`` is what was asked for, ``change`` is what survived clamping
    return CivEvent(STAT_CHANGED, {
        "civ_id": civ_id,
        "stat": stat,
        "old_value": old_value,
        "new_value": new_value,
        "change": new_value - old_value,
        "delta": delta,
    })


def civ_extinct(civ_id: str, name: str) -> CivEvent:
    return CivEvent(CIV_EXTINCT, {
        "civ_id": civ_id,
        "name": name,
    })


__all__ = ["CivEvent", "STAT_CHANGED", "CIV_EXTINCT", "stat_changed", "civ_extinct"]

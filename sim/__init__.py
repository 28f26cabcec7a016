"""
Civilization runtime package.
Re-exports the engine types lazily so ``balance`` and ``cards`` can import
``sim.safe_parse`` without pulling in the engine.
"""
from typing import Any

__all__ = ["Civilization", "StatHistory", "CivEvent"]


def __getattr__(name: str) -> Any:
    # Lazy import to avoid circular dependency during package import.
    if name in __all__:
        from sim.civilization import Civilization  # local import
        from sim.history import StatHistory
        from sim.events import CivEvent
        globals().update({
            "Civilization": Civilization,
            "StatHistory": StatHistory,
            "CivEvent": CivEvent,
        })
        return globals()[name]
    raise AttributeError(f"module 'sim' has no attribute {name!r}")

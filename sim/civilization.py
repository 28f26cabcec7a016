"""Civilization runtime state and the stat engine.

A civilization tracks three stats (survival, tech, faith), each held in
``[STAT_MIN, STAT_MAX]``.  Stats only change through
:meth:`Civilization.apply_modifier`, which clamps after every step.  When a
survival modifier lands on zero the civilization goes extinct.  Extinction
is terminal: later positive modifiers raise survival again but ``alive``
stays ``False``.

The engine is synchronous and does no locking.  Callers applying cards to
the same civilization from several threads must serialize access.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, List, Optional
import logging

from balance import BALANCE, CivBalance, clamp_stat
from cards import Card, StatModifier, StatType, modifiers_of
from sim import events
from sim.events import CivEvent

logger = logging.getLogger(__name__)

Listener = Callable[[CivEvent], None]


class Civilization:
    """Mutable per-civilization stat state.

    ``hand`` holds the cards currently available to the civilization.  It
    belongs to whoever drives the turns; the stat engine never reads or
    changes it.
    """

    def __init__(
        self,
        id: str,
        name: str,
        personality: str = "",
        survival: Optional[int] = None,
        tech: Optional[int] = None,
        faith: Optional[int] = None,
        balance: CivBalance = BALANCE,
    ):
        self.id = id
        self.name = name
        # Free text for whoever plays this civ; the engine never reads it
        self.personality = personality
        self.balance = balance
        self.hand: List[Card] = []
        self.alive = True
        self._listeners: List[Listener] = []

        if survival is None:
            survival = balance.initial_survival
        if faith is None:
            faith = balance.initial_faith
        self.survival = clamp_stat(survival)
        self.faith = clamp_stat(faith)
        # Known quirk: every civilization starts at the configured tech
        # level, whatever ``tech`` was passed.
        self.tech = clamp_stat(balance.initial_tech)

    def __repr__(self) -> str:
        return (
            f"Civilization(id={self.id!r}, name={self.name!r}, survival={self.survival}, "
            f"tech={self.tech}, faith={self.faith}, alive={self.alive})"
        )

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    def get_stat(self, stat: StatType) -> int:
        return getattr(self, stat.value)

    @property
    def stats(self) -> Dict[StatType, int]:
        """Snapshot of all three stats."""
        return {stat: self.get_stat(stat) for stat in StatType}

    @property
    def is_extinct(self) -> bool:
        return not self.alive

    # ------------------------------------------------------------------
    # Listeners
    # ------------------------------------------------------------------

    def subscribe(self, listener: Listener) -> None:
        """Call ``listener`` with every event this civilization raises."""
        self._listeners.append(listener)

    def unsubscribe(self, listener: Listener) -> None:
        try:
            self._listeners.remove(listener)
        except ValueError:
            pass

    def _emit(self, event: CivEvent) -> None:
        # Copy so a listener may unsubscribe itself.  A failing listener
        # must not keep the others from seeing the event.
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                logger.exception(
                    "%s: listener %r failed on %s", self.name, listener, event.type
                )

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def apply_modifier(self, modifier: StatModifier) -> List[CivEvent]:
        """Add ``modifier.delta`` to the target stat, clamped to the bounds.

        Never fails: any integer delta is absorbed by clamping.  Applying to
        an extinct civilization is allowed.  Returns the events raised, in
        the order listeners received them.
        """
        stat = modifier.target
        old = self.get_stat(stat)
        new = clamp_stat(old + modifier.delta)
        setattr(self, stat.value, new)
        logger.debug(
            "%s: %s %+d -> %d (was %d)", self.name, stat.value, modifier.delta, new, old
        )

        raised = [events.stat_changed(self.id, stat.value, old, new, modifier.delta)]
        if stat is StatType.SURVIVAL and new == 0 and self.alive:
            self.alive = False
            logger.info("%s has gone extinct!", self.name)
            raised.append(events.civ_extinct(self.id, self.name))

        for event in raised:
            self._emit(event)
        return raised

    def apply_card(self, card: Card) -> List[CivEvent]:
        """Apply every modifier of ``card`` in listed order.

        Deltas are not summed first; each step is clamped on its own, so
        ``[-60, +10]`` on survival 50 ends at 10 and extinct.
        """
        raised: List[CivEvent] = []
        for modifier in modifiers_of(card):
            raised.extend(self.apply_modifier(modifier))
        return raised

    # ------------------------------------------------------------------
    # Reporting
    # ------------------------------------------------------------------

    def summary(self) -> str:
        state = "alive" if self.alive else "extinct"
        return (
            f"{self.name} [{state}] survival={self.survival} "
            f"tech={self.tech} faith={self.faith} hand={len(self.hand)}"
        )

    def to_dict(self) -> Dict[str, Any]:
        """Reporting snapshot of the civilization."""
        return {
            "id": self.id,
            "name": self.name,
            "personality": self.personality,
            "survival": self.survival,
            "tech": self.tech,
            "faith": self.faith,
            "alive": self.alive,
            "hand": [card.id for card in self.hand],
        }


__all__ = ["Civilization", "Listener"]

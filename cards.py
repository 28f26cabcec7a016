"""Card definitions and the card catalog.

Cards are immutable bundles of stat modifiers plus descriptive text.  They
are authored as content (``balance/cards.json``) and shared read-only by
every civilization; nothing at runtime creates or edits them.

When ``balance/cards.json`` is missing the built-in :data:`DEFAULT_CARDS`
are used.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, Iterator, List, Optional, Tuple
import json
import logging
import os

from sim.safe_parse import parse_enum, parse_int

logger = logging.getLogger(__name__)


class StatType(Enum):
    """The three resources a civilization tracks.

    Each value names the :class:`~sim.civilization.Civilization` attribute
    holding that stat.
    """

    SURVIVAL = "survival"
    TECH = "tech"
    FAITH = "faith"


class CardType(Enum):
    """Card categories.  Only used by drivers for filtering."""

    PLAYER_POWER = "PlayerPower"
    FACTION_ACTION = "FactionAction"


# Category names used by older card assets
CARD_TYPE_ALIASES: Dict[str, CardType] = {
    "GodPower": CardType.PLAYER_POWER,
    "CivAction": CardType.FACTION_ACTION,
}


@dataclass(frozen=True)
class StatModifier:
    """Add ``delta`` to the ``target`` stat.  ``delta`` may be negative."""

    target: StatType
    delta: int


@dataclass(frozen=True)
class Card:
    id: str
    name: str
    description: str = ""
    type: CardType = CardType.PLAYER_POWER
    # Applied in order; clamping happens after every step
    modifiers: Tuple[StatModifier, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        # Accept any iterable but always store a tuple
        if not isinstance(self.modifiers, tuple):
            object.__setattr__(self, "modifiers", tuple(self.modifiers))


def modifiers_of(card: Card) -> Tuple[StatModifier, ...]:
    """Return the ordered modifiers of ``card``."""
    return card.modifiers


class CardCatalog:
    """Read-only registry of card definitions keyed by id."""

    def __init__(self, cards: Iterable[Card] = ()):
        self._cards: Dict[str, Card] = {}
        for card in cards:
            if card.id in self._cards:
                raise ValueError(f"duplicate card id {card.id!r}")
            self._cards[card.id] = card

    def __len__(self) -> int:
        return len(self._cards)

    def __iter__(self) -> Iterator[Card]:
        return iter(self._cards.values())

    def __contains__(self, card_id: object) -> bool:
        return card_id in self._cards

    def get(self, card_id: str) -> Card:
        """Return the card with ``card_id``; raises ``KeyError`` if unknown."""
        try:
            return self._cards[card_id]
        except KeyError:
            raise KeyError(f"unknown card id {card_id!r}") from None

    def by_type(self, card_type: CardType) -> List[Card]:
        return [c for c in self._cards.values() if c.type is card_type]

    def ids(self) -> List[str]:
        return list(self._cards)


# ---------------------------------------------------------------------------
# Default content
# ---------------------------------------------------------------------------


DEFAULT_CARDS: Tuple[Card, ...] = (
    Card(
        id="bountiful_harvest",
        name="Bountiful Harvest",
        description="The gods bless the fields.",
        type=CardType.PLAYER_POWER,
        modifiers=(StatModifier(StatType.SURVIVAL, 15),),
    ),
    Card(
        id="plague",
        name="Plague",
        description="A sickness sweeps the land and shakes belief.",
        type=CardType.PLAYER_POWER,
        modifiers=(
            StatModifier(StatType.SURVIVAL, -25),
            StatModifier(StatType.FAITH, -10),
        ),
    ),
    Card(
        id="divine_revelation",
        name="Divine Revelation",
        description="A prophet speaks and the people listen.",
        type=CardType.PLAYER_POWER,
        modifiers=(StatModifier(StatType.FAITH, 20),),
    ),
    Card(
        id="meteor_strike",
        name="Meteor Strike",
        description="Fire falls from the sky.",
        type=CardType.PLAYER_POWER,
        modifiers=(
            StatModifier(StatType.SURVIVAL, -60),
            StatModifier(StatType.TECH, -5),
        ),
    ),
    Card(
        id="research",
        name="Research",
        description="Scholars study the world at the cost of tradition.",
        type=CardType.FACTION_ACTION,
        modifiers=(
            StatModifier(StatType.TECH, 10),
            StatModifier(StatType.FAITH, -5),
        ),
    ),
    Card(
        id="build_temple",
        name="Build Temple",
        description="Labour is spent raising a house for the gods.",
        type=CardType.FACTION_ACTION,
        modifiers=(
            StatModifier(StatType.FAITH, 15),
            StatModifier(StatType.SURVIVAL, -5),
        ),
    ),
    Card(
        id="forage",
        name="Forage",
        description="Gather what the land provides.",
        type=CardType.FACTION_ACTION,
        modifiers=(StatModifier(StatType.SURVIVAL, 10),),
    ),
    Card(
        id="meditate",
        name="Meditate",
        description="Nothing happens, calmly.",
        type=CardType.FACTION_ACTION,
        modifiers=(),
    ),
)


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------


def _catalog_path(default_path: Optional[str] = None) -> str:
    """Return path to the card content file."""

    if default_path is not None:
        return default_path
    return os.path.join(os.path.dirname(__file__), "balance", "cards.json")


def _parse_modifier(raw: object) -> Optional[StatModifier]:
    if not isinstance(raw, dict):
        return None
    stat = parse_enum(StatType, raw.get("stat"))
    delta = parse_int(raw.get("delta"))
    if stat is None or delta is None:
        return None
    return StatModifier(stat, delta)


def card_from_dict(data: dict) -> Optional[Card]:
    """Build a :class:`Card` from a JSON entry or return ``None`` if malformed.

    Expected shape::

        {"id": "plague", "name": "Plague", "description": "...",
         "type": "PlayerPower",
         "modifiers": [{"stat": "survival", "delta": -25}]}
    """

    card_id = data.get("id")
    if not isinstance(card_id, str) or not card_id:
        return None
    card_type = parse_enum(CardType, data.get("type", "PlayerPower"), CARD_TYPE_ALIASES)
    if card_type is None:
        return None
    raw_mods = data.get("modifiers", [])
    if not isinstance(raw_mods, list):
        return None
    mods = []
    for raw in raw_mods:
        mod = _parse_modifier(raw)
        if mod is None:
            return None
        mods.append(mod)
    return Card(
        id=card_id,
        name=str(data.get("name", card_id)),
        description=str(data.get("description", "")),
        type=card_type,
        modifiers=tuple(mods),
    )


def load_catalog(path: Optional[str] = None) -> CardCatalog:
    """Load card definitions from ``balance/cards.json`` if available.

    The file holds a JSON list of card entries (see :func:`card_from_dict`).
    Malformed entries and repeated ids are skipped with a warning.  A
    missing file yields :data:`DEFAULT_CARDS`.
    """

    fn = _catalog_path(path)
    try:
        with open(fn, "r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError:
        return CardCatalog(DEFAULT_CARDS)
    if not isinstance(data, list):
        logger.warning("load_catalog: %s does not hold a list of cards; using defaults", fn)
        return CardCatalog(DEFAULT_CARDS)

    cards: List[Card] = []
    seen = set()
    for i, entry in enumerate(data):
        card = card_from_dict(entry) if isinstance(entry, dict) else None
        if card is None:
            logger.warning("load_catalog: skipping malformed card #%d in %s", i, fn)
            continue
        if card.id in seen:
            logger.warning("load_catalog: skipping duplicate card id %r in %s", card.id, fn)
            continue
        seen.add(card.id)
        cards.append(card)
    return CardCatalog(cards)


__all__ = [
    "StatType",
    "CardType",
    "StatModifier",
    "Card",
    "CardCatalog",
    "modifiers_of",
    "DEFAULT_CARDS",
    "card_from_dict",
    "load_catalog",
]

"""Civilization balance values.

Central store for the numbers the stat engine reads when it creates a
civilization.  The stat bounds are fixed; the starting stats are tweakable.

The module loads overrides from ``balance/civilization.json`` if the file
exists.  When the file is missing the hard coded defaults are used.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Optional
import json
import logging
import os

from sim.safe_parse import parse_int

logger = logging.getLogger(__name__)

# Every stat lives in the closed interval [STAT_MIN, STAT_MAX]
STAT_MIN = 0
STAT_MAX = 100


def clamp_stat(value: int) -> int:
    return max(STAT_MIN, min(STAT_MAX, value))


@dataclass(frozen=True)
class CivBalance:
    """Starting stats handed to every new :class:`~sim.civilization.Civilization`.

    ``initial_tech`` always wins over a tech value passed to the
    constructor; survival and faith are taken from the constructor.  The
    ``initial_survival`` and ``initial_faith`` entries only provide the
    constructor defaults.
    """

    initial_survival: int = 50
    initial_tech: int = 10
    initial_faith: int = 50


DEFAULT_BALANCE = CivBalance()


def _balance_path(default_path: Optional[str] = None) -> str:
    """Return path to the civilization balance file."""

    if default_path is not None:
        return default_path
    return os.path.join(os.path.dirname(__file__), "balance", "civilization.json")


def load_balance(path: Optional[str] = None) -> CivBalance:
    """Load balance values from ``balance/civilization.json`` if available.

    Unknown keys and values that are not integers are ignored with a
    warning.  Values outside the stat bounds are clamped.
    """

    fn = _balance_path(path)
    try:
        with open(fn, "r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError:
        return DEFAULT_BALANCE
    if not isinstance(data, dict):
        logger.warning("load_balance: %s does not hold an object; using defaults", fn)
        return DEFAULT_BALANCE

    known = {f.name for f in fields(CivBalance)}
    values = {}
    for key, raw in data.items():
        if key not in known:
            logger.warning("load_balance: ignoring unknown key %r in %s", key, fn)
            continue
        value = parse_int(raw)
        if value is None:
            logger.warning("load_balance: ignoring non-integer %s=%r", key, raw)
            continue
        values[key] = clamp_stat(value)
    return CivBalance(**values)


# Load balance at import time so callers get configured defaults.
BALANCE = load_balance()


__all__ = [
    "STAT_MIN",
    "STAT_MAX",
    "clamp_stat",
    "CivBalance",
    "DEFAULT_BALANCE",
    "BALANCE",
    "load_balance",
]

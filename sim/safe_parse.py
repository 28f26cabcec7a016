from __future__ import annotations
"""Helpers for reading hand-written content files.

Card and balance files are edited by hand, so values arrive as whatever
JSON produced: ints, floats, numeric strings or garbage.  These helpers
coerce what can be coerced and return ``None`` otherwise, leaving the
caller to decide whether to skip the entry.
"""

from enum import Enum
from typing import Any, Dict, Optional, Type, TypeVar
import math
import logging

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=Enum)


def parse_int(value: Any) -> Optional[int]:
    """Coerce ``value`` to ``int`` or return ``None``.

    Booleans are rejected even though they are ints.  Floats are accepted
    only when finite and integral, so ``5.0`` parses but ``5.5`` does not.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if math.isfinite(value) and value.is_integer():
            return int(value)
        return None
    if isinstance(value, str):
        s = value.strip()
        if s and (s.isdigit() or (s[0] in {"+", "-"} and s[1:].isdigit())):
            return int(s)
    return None


def parse_enum(
    enum_cls: Type[E],
    value: Any,
    aliases: Optional[Dict[str, E]] = None,
) -> Optional[E]:
    """Look up an enum member by name, value or alias.

    Name matching ignores case, so ``"survival"`` and ``"SURVIVAL"`` both
    resolve.  Returns ``None`` when nothing matches.
    """
    if isinstance(value, enum_cls):
        return value
    if not isinstance(value, str):
        return None
    s = value.strip()
    if aliases and s in aliases:
        return aliases[s]
    try:
        return enum_cls[s.upper()]
    except KeyError:
        pass
    for member in enum_cls:
        if member.value == s:
            return member
    logger.debug("parse_enum: %r is not a %s", value, enum_cls.__name__)
    return None

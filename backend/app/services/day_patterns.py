"""Weekly day-pattern parsing.

Schedules store their meeting days as short tokens such as ``M-W-F`` or
``T-TH``. New schedules always use one of ``CANONICAL_PATTERNS``; rows saved
before the hyphenated format still carry compact tokens (``MWF``, ``TTH``)
and must keep working for conflict checks.
"""
from __future__ import annotations

import logging
import re
from enum import IntEnum

logger = logging.getLogger(__name__)


class Weekday(IntEnum):
    MON = 0
    TUE = 1
    WED = 2
    THU = 3
    FRI = 4
    SAT = 5
    SUN = 6

    @property
    def full_name(self) -> str:
        return _FULL_NAMES[self]


_FULL_NAMES = {
    Weekday.MON: "Monday",
    Weekday.TUE: "Tuesday",
    Weekday.WED: "Wednesday",
    Weekday.THU: "Thursday",
    Weekday.FRI: "Friday",
    Weekday.SAT: "Saturday",
    Weekday.SUN: "Sunday",
}

CANONICAL_PATTERNS: dict[str, tuple[Weekday, ...]] = {
    "M-W-F": (Weekday.MON, Weekday.WED, Weekday.FRI),
    "T-TH": (Weekday.TUE, Weekday.THU),
    "M-T-TH-F": (Weekday.MON, Weekday.TUE, Weekday.THU, Weekday.FRI),
    "M-T": (Weekday.MON, Weekday.TUE),
    "TH-F": (Weekday.THU, Weekday.FRI),
    "SAT": (Weekday.SAT,),
    "SUN": (Weekday.SUN,),
}

# Compact patterns found in rows created before hyphenated patterns existed.
LEGACY_PATTERNS: dict[str, tuple[Weekday, ...]] = {
    "MWF": (Weekday.MON, Weekday.WED, Weekday.FRI),
    "TTH": (Weekday.TUE, Weekday.THU),
    "MTWTHF": (Weekday.MON, Weekday.TUE, Weekday.WED, Weekday.THU, Weekday.FRI),
    "MTTHF": (Weekday.MON, Weekday.TUE, Weekday.THU, Weekday.FRI),
    "MW": (Weekday.MON, Weekday.WED),
    "WF": (Weekday.WED, Weekday.FRI),
    "MTH": (Weekday.MON, Weekday.THU),
    "TF": (Weekday.TUE, Weekday.FRI),
    "MON-SAT": (Weekday.MON, Weekday.TUE, Weekday.WED, Weekday.THU, Weekday.FRI, Weekday.SAT),
}

DAY_TOKENS: dict[str, Weekday] = {
    "M": Weekday.MON,
    "MON": Weekday.MON,
    "MONDAY": Weekday.MON,
    "T": Weekday.TUE,
    "TU": Weekday.TUE,
    "TUE": Weekday.TUE,
    "TUES": Weekday.TUE,
    "TUESDAY": Weekday.TUE,
    "W": Weekday.WED,
    "WED": Weekday.WED,
    "WEDNESDAY": Weekday.WED,
    "TH": Weekday.THU,
    "THU": Weekday.THU,
    "THUR": Weekday.THU,
    "THURS": Weekday.THU,
    "THURSDAY": Weekday.THU,
    "F": Weekday.FRI,
    "FRI": Weekday.FRI,
    "FRIDAY": Weekday.FRI,
    "SA": Weekday.SAT,
    "SAT": Weekday.SAT,
    "SATURDAY": Weekday.SAT,
    "SU": Weekday.SUN,
    "SUN": Weekday.SUN,
    "SUNDAY": Weekday.SUN,
}

_SEPARATOR = re.compile(r"[^A-Z]+")


def _lookup_token(token: str) -> frozenset[Weekday]:
    if token in DAY_TOKENS:
        return frozenset((DAY_TOKENS[token],))
    if token in LEGACY_PATTERNS:
        return frozenset(LEGACY_PATTERNS[token])
    return frozenset()


def parse_pattern(raw: str | None) -> frozenset[Weekday]:
    """Return the weekdays a pattern meets on.

    Unknown tokens contribute no days; a wholly unrecognised pattern parses
    to the empty set and therefore never overlaps anything.
    """
    if not raw:
        return frozenset()
    pattern = raw.strip().upper()
    if pattern in CANONICAL_PATTERNS:
        return frozenset(CANONICAL_PATTERNS[pattern])
    if pattern in LEGACY_PATTERNS:
        return frozenset(LEGACY_PATTERNS[pattern])

    days: set[Weekday] = set()
    for token in _SEPARATOR.split(pattern):
        if not token:
            continue
        matched = _lookup_token(token)
        if not matched:
            logger.debug("Ignoring unrecognised day token %r in pattern %r", token, raw)
        days |= matched
    return frozenset(days)


def days_overlap(a: str | None, b: str | None) -> bool:
    return bool(parse_pattern(a) & parse_pattern(b))


def is_canonical(pattern: str | None) -> bool:
    return pattern is not None and pattern.strip().upper() in CANONICAL_PATTERNS


def pattern_label(pattern: str | None) -> str:
    if not pattern:
        return ""
    key = pattern.strip().upper()
    if key not in CANONICAL_PATTERNS:
        return pattern
    return "-".join(day.full_name for day in CANONICAL_PATTERNS[key])

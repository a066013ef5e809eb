from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import time

TIME_PATTERN = re.compile(r"^([01]?\d|2[0-3]):([0-5]\d)(?::([0-5]\d))?$")

TimeValue = time | str


def to_minutes(value: TimeValue) -> int:
    """Minutes since midnight for a wall-clock time; seconds are dropped."""
    if isinstance(value, time):
        return value.hour * 60 + value.minute
    match = TIME_PATTERN.match(value.strip())
    if match is None:
        raise ValueError(f"Time must be in HH:MM 24-hour format, got {value!r}")
    return int(match.group(1)) * 60 + int(match.group(2))


def format_time(value: TimeValue) -> str:
    """12-hour clock rendering used in conflict messages, e.g. ``7:00 AM``."""
    minutes = to_minutes(value)
    hours, minute = divmod(minutes, 60)
    suffix = "AM" if hours < 12 else "PM"
    display_hour = hours % 12 or 12
    return f"{display_hour}:{minute:02d} {suffix}"


@dataclass(frozen=True)
class TimeInterval:
    """Half-open ``[start, end)`` span of wall-clock minutes."""

    start: int
    end: int

    @classmethod
    def from_times(cls, start: TimeValue, end: TimeValue) -> "TimeInterval":
        return cls(to_minutes(start), to_minutes(end))

    @property
    def duration(self) -> int:
        return self.end - self.start

    def overlaps(self, other: "TimeInterval") -> bool:
        return self.start < other.end and other.start < self.end


def times_overlap(start_a: TimeValue, end_a: TimeValue, start_b: TimeValue, end_b: TimeValue) -> bool:
    return TimeInterval.from_times(start_a, end_a).overlaps(TimeInterval.from_times(start_b, end_b))

# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Service: Time interval primitive — pure computation, no side effects.

Half-open [start, end) spans over absolute instants. The single overlap rule
used by every availability check lives here.
"""

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone, tzinfo
from typing import Optional


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Naive datetimes are taken as UTC; aware ones are converted to UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


@dataclass(frozen=True)
class TimeInterval:
    start: datetime
    end: datetime

    def __post_init__(self) -> None:
        # naive instants are UTC
        object.__setattr__(self, "start", as_utc(self.start))
        object.__setattr__(self, "end", as_utc(self.end))
        if self.end < self.start:
            raise ValueError(
                f"Interval end {self.end.isoformat()} is before start {self.start.isoformat()}"
            )

    @classmethod
    def on(
        cls,
        day: date,
        start: time,
        end: time,
        tz: Optional[tzinfo] = None,
    ) -> "TimeInterval":
        """Combine a calendar day and two times-of-day into one interval."""
        zone = tz or start.tzinfo or timezone.utc
        return cls(
            datetime.combine(day, start.replace(tzinfo=None), tzinfo=zone),
            datetime.combine(day, end.replace(tzinfo=None), tzinfo=zone),
        )

    @property
    def duration(self) -> timedelta:
        return self.end - self.start

    def overlaps(self, other: "TimeInterval") -> bool:
        # strict on both sides: [09:00, 11:00) and [11:00, 12:00) do not overlap
        return self.start < other.end and other.start < self.end

    def contains(self, instant: datetime) -> bool:
        return self.start <= instant < self.end


def overlaps(a: TimeInterval, b: TimeInterval) -> bool:
    return a.overlaps(b)

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Union


class EventType(str, Enum):
    BIRTHDAY = "B"
    ANNIVERSARY = "A"
    RECURRING = "R"


@dataclass(frozen=True)
class Weekly:
    """Every occurrence of a weekday (0=Sunday..6=Saturday) in the month."""
    day_of_week: int


@dataclass(frozen=True)
class NthWeekday:
    """The nth (1..5) occurrence of a weekday in the month, if it exists."""
    n: int
    day_of_week: int


RecurrenceRule = Union[Weekly, NthWeekday]


@dataclass(frozen=True)
class Event:
    name: str
    type: EventType
    month: int = 0
    day: int = 0
    groups: tuple[str, ...] = ()
    recurrence: Optional[RecurrenceRule] = None
    id: str = field(default_factory=lambda: uuid.uuid4().hex, compare=False)

    @property
    def is_recurring(self) -> bool:
        return self.type is EventType.RECURRING


@dataclass(frozen=True)
class Holiday:
    name: str
    month: int
    day: int


NEW_MOON = "New Moon"
FIRST_QUARTER = "First Qtr"
FULL_MOON = "Full Moon"
LAST_QUARTER = "Last Qtr"


@dataclass(frozen=True)
class MoonPhase:
    type: str
    month: int
    day: int


@dataclass(frozen=True)
class ExpandedRecurrence:
    name: str
    day: int


@dataclass
class DaySlot:
    day: int
    events: list[Event] = field(default_factory=list)
    holidays: list[Holiday] = field(default_factory=list)
    moon_phases: list[MoonPhase] = field(default_factory=list)
    recurring_events: list[str] = field(default_factory=list)


Week = list[Optional[DaySlot]]


@dataclass
class CalendarGrid:
    year: int
    month: int
    weeks: list[Week]
    overflow_events: list[Event] = field(default_factory=list)


@dataclass(frozen=True)
class TitleRegion:
    """
    Inclusive block of grid positions reserved for the title.

    `area` is the number of cells covered; 0 means no free cell was found and
    the coordinates are only a placeholder at (0, 0).
    """
    start_row: int
    start_col: int
    end_row: int
    end_col: int
    area: int

    @property
    def is_empty(self) -> bool:
        return self.area <= 0

    @property
    def rows(self) -> int:
        return self.end_row - self.start_row + 1

    @property
    def cols(self) -> int:
        return self.end_col - self.start_col + 1

    def contains(self, row: int, col: int) -> bool:
        if self.is_empty:
            return False
        return (self.start_row <= row <= self.end_row
                and self.start_col <= col <= self.end_col)

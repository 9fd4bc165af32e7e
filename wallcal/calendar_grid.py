"""Month grid construction: day slots laid out Sunday-first, one row per week."""

import calendar

from loguru import logger

import wallcal.settings as settings
from wallcal.logger import LAYOUT
from wallcal.models import (
    CalendarGrid,
    DaySlot,
    Event,
    ExpandedRecurrence,
    Holiday,
    MoonPhase,
    Week,
)
from wallcal.recurrence import expand_recurring_events

COLS = 7


def build_weeks(year: int, month: int) -> list[Week]:
    """
    Week-major matrix of fresh day slots with as many rows as the month needs
    (4, 5 or 6). Positions outside the month are None.
    """
    cal = calendar.Calendar(firstweekday=6)  # Sunday
    return [
        [DaySlot(day) if day else None for day in week]
        for week in cal.monthdayscalendar(year, month)
    ]


def index_slots(weeks: list[Week]) -> dict[int, DaySlot]:
    return {slot.day: slot for week in weeks for slot in week if slot is not None}


def find_slot(weeks: list[Week], day: int) -> DaySlot | None:
    for week in weeks:
        for slot in week:
            if slot is not None and slot.day == day:
                return slot
    return None


def build_calendar_grid(
    year: int,
    month: int,
    events: list[Event],
    holidays: list[Holiday],
    moon_phases: list[MoonPhase],
    recurring: list[ExpandedRecurrence] | None = None,
) -> CalendarGrid:
    """
    Place events, holidays, moon phases and recurring entries into a month grid.

    Dated events for the month whose day does not exist (e.g. Feb 29 in a
    common year) go to `overflow_events` in input order. Holidays and moon
    phases on a missing day are dropped. When `recurring` is None the
    recurring events in `events` are expanded here.
    """
    weeks = build_weeks(year, month)
    slots = index_slots(weeks)
    last_day = len(slots)
    overflow_events = []

    for event in events:
        if event.is_recurring or event.month != month:
            continue
        if not 1 <= event.day <= last_day:
            logger.log(LAYOUT, "Overflow: '{}' on {}/{} does not exist in {}", event.name, month, event.day, year)
            overflow_events.append(event)
            continue
        slots[event.day].events.append(event)

    for holiday in holidays:
        if holiday.month != month:
            continue
        slot = slots.get(holiday.day)
        if slot is None:
            logger.debug("Dropping holiday '{}' on missing day {}/{}", holiday.name, month, holiday.day)
            continue
        slot.holidays.append(holiday)

    for phase in moon_phases:
        if phase.month != month:
            continue
        slot = slots.get(phase.day)
        if slot is not None:
            slot.moon_phases.append(phase)

    if recurring is None:
        recurring = expand_recurring_events(events, year, month)
    for entry in recurring:
        slot = slots.get(entry.day)
        if slot is not None:
            slot.recurring_events.append(entry.name)

    logger.debug(
        "Built {}-{:02d} grid: {} rows, {} days, {} overflow",
        year, month, len(weeks), last_day, len(overflow_events),
    )
    return CalendarGrid(year, month, weeks, overflow_events)


def pad_rows(weeks: list[Week], min_rows: int = settings.MIN_ROWS) -> list[Week]:
    """
    Copy of `weeks` with empty rows appended up to `min_rows`.
    Longer grids are never truncated and the input is never mutated.
    """
    padded = [list(week) for week in weeks]
    while len(padded) < min_rows:
        padded.append([None] * COLS)
    return padded

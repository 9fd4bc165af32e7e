import pytest

from wallcal.calendar_grid import build_calendar_grid, build_weeks, find_slot, pad_rows
from wallcal.models import Event, EventType, ExpandedRecurrence, Holiday, MoonPhase, Weekly


def birthday(name, month, day):
    return Event(name, EventType.BIRTHDAY, month, day)


def flatten(weeks):
    return [slot for week in weeks for slot in week]


def test_february_2026_fills_exactly_four_weeks():
    grid = build_calendar_grid(2026, 2, [], [], [])

    assert (grid.year, grid.month) == (2026, 2)
    assert len(grid.weeks) == 4
    assert grid.weeks[0][0].day == 1
    assert grid.weeks[0][6].day == 7
    assert grid.weeks[3][6].day == 28
    assert all(slot is not None for slot in flatten(grid.weeks))
    assert grid.overflow_events == []


def test_november_2025_needs_six_weeks():
    grid = build_calendar_grid(2025, 11, [], [], [])

    assert len(grid.weeks) == 6
    assert grid.weeks[0][:6] == [None] * 6
    assert grid.weeks[0][6].day == 1
    assert grid.weeks[5][0].day == 30
    assert grid.weeks[5][1:] == [None] * 6


@pytest.mark.parametrize("year,month,days", [
    (2025, 1, 31), (2026, 2, 28), (2028, 2, 29), (2025, 11, 30),
    (2024, 9, 30), (2023, 12, 31), (2027, 8, 31),
])
def test_every_day_appears_once_in_order(year, month, days):
    weeks = build_weeks(year, month)
    cells = flatten(weeks)
    placed = [slot.day for slot in cells if slot is not None]

    assert placed == list(range(1, days + 1))
    # no gaps between consecutive days
    first = next(i for i, slot in enumerate(cells) if slot is not None)
    assert all(slot is not None for slot in cells[first:first + days])
    assert all(len(week) == 7 for week in weeks)


def test_leap_day_overflows_in_common_year():
    leap_baby = birthday("Leap Baby", 2, 29)

    grid = build_calendar_grid(2026, 2, [leap_baby], [], [])

    assert grid.overflow_events == [leap_baby]
    assert all(leap_baby not in slot.events for slot in flatten(grid.weeks))


def test_leap_day_placed_in_leap_year():
    leap_baby = birthday("Leap Baby", 2, 29)

    grid = build_calendar_grid(2028, 2, [leap_baby], [], [])

    assert grid.overflow_events == []
    assert find_slot(grid.weeks, 29).events == [leap_baby]


def test_overflow_keeps_input_order():
    late = [birthday("A", 4, 31), birthday("B", 4, 31), birthday("C", 4, 40)]

    grid = build_calendar_grid(2025, 4, late, [], [])

    assert [e.name for e in grid.overflow_events] == ["A", "B", "C"]


def test_events_for_other_months_are_ignored():
    grid = build_calendar_grid(2026, 2, [birthday("March", 3, 31)], [], [])

    assert grid.overflow_events == []
    assert all(slot.events == [] for slot in flatten(grid.weeks))


def test_same_day_events_keep_insertion_order():
    first, second = birthday("First", 2, 4), Event("Second", EventType.ANNIVERSARY, 2, 4)

    grid = build_calendar_grid(2026, 2, [first, second], [], [])

    assert find_slot(grid.weeks, 4).events == [first, second]


def test_holidays_and_moon_phases_are_placed_or_dropped():
    holidays = [Holiday("GROUND HOG DAY", 2, 2), Holiday("NOPE", 2, 30), Holiday("ELSEWHERE", 3, 1)]
    phases = [MoonPhase("Full Moon", 2, 1), MoonPhase("New Moon", 2, 31)]

    grid = build_calendar_grid(2026, 2, [], holidays, phases)

    assert find_slot(grid.weeks, 2).holidays == [holidays[0]]
    assert find_slot(grid.weeks, 1).moon_phases == [phases[0]]
    assert sum(len(s.holidays) for s in flatten(grid.weeks)) == 1
    assert sum(len(s.moon_phases) for s in flatten(grid.weeks)) == 1
    assert grid.overflow_events == []


def test_weekly_recurrence_lands_on_sundays_of_january_2025():
    church = Event("CHURCH", EventType.RECURRING, recurrence=Weekly(0))

    grid = build_calendar_grid(2025, 1, [church], [], [])

    assert len(grid.weeks) == 5
    assert grid.weeks[1][0].day == 5
    assert grid.weeks[1][0].recurring_events == ["CHURCH"]
    assert grid.weeks[4][0].day == 26
    assert grid.weeks[4][0].recurring_events == ["CHURCH"]
    with_church = [s.day for s in flatten(grid.weeks) if s and s.recurring_events]
    assert with_church == [5, 12, 19, 26]
    # recurring events never count as dated ones
    assert all(s.events == [] for s in flatten(grid.weeks) if s)


def test_pre_expanded_recurrence_is_used_as_given():
    recurring = [ExpandedRecurrence("Choir", 3), ExpandedRecurrence("Bingo", 3)]

    grid = build_calendar_grid(2026, 2, [], [], [], recurring)

    assert find_slot(grid.weeks, 3).recurring_events == ["Choir", "Bingo"]


def test_invalid_month_fails_loudly():
    with pytest.raises(ValueError):
        build_calendar_grid(2026, 13, [], [], [])


def test_per_day_assignment_round_trips():
    events = [birthday("A", 1, 3), birthday("B", 1, 31), birthday("C", 1, 3),
              Event("D", EventType.ANNIVERSARY, 1, 17)]

    grid = build_calendar_grid(2025, 1, events, [], [])

    recovered = {s.day: s.events for s in flatten(grid.weeks) if s and s.events}
    expected = {}
    for e in events:
        expected.setdefault(e.day, []).append(e)
    assert recovered == expected


def test_pad_rows_appends_empty_rows():
    weeks = build_weeks(2026, 2)

    padded = pad_rows(weeks, min_rows=5)

    assert len(padded) == 5
    assert padded[4] == [None] * 7
    assert padded[:4] == weeks
    assert padded[0][0] is weeks[0][0]


def test_pad_rows_leaves_long_grids_alone():
    weeks = build_weeks(2025, 11)

    padded = pad_rows(weeks, min_rows=5)

    assert len(padded) == 6
    assert padded == weeks


def test_pad_rows_does_not_mutate_input():
    weeks = build_weeks(2026, 2)

    padded = pad_rows(weeks, min_rows=6)
    padded[0][0] = None

    assert len(weeks) == 4
    assert weeks[0][0].day == 1

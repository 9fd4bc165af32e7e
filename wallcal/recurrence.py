from datetime import datetime

from dateutil.rrule import rrule, WEEKLY, MONTHLY, SU, MO, TU, WE, TH, FR, SA
from loguru import logger

from wallcal.logger import LAYOUT
from wallcal.models import Event, ExpandedRecurrence, NthWeekday, RecurrenceRule, Weekly
from wallcal.utils import days_in_month

# Indexed by 0=Sunday..6=Saturday
RRULE_WEEKDAYS = (SU, MO, TU, WE, TH, FR, SA)
WEEKDAY_NAMES = ("Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday")
_WEEKDAY_LOOKUP = {name.lower(): i for i, name in enumerate(WEEKDAY_NAMES)}
_ORDINAL_SUFFIXES = ("th", "st", "nd", "rd", "th", "th")


def parse_recurrence_rule(raw: str | None) -> RecurrenceRule | None:
    """
    Parse "weekly:<Day>" or "nth:<n>:<Day>" (case-insensitive).
    Malformed input yields None rather than raising.
    """
    if not raw:
        return None

    parts = raw.strip().lower().split(":")
    prefix = parts[0]

    if prefix == "weekly":
        if len(parts) != 2:
            return None
        dow = _WEEKDAY_LOOKUP.get(parts[1].strip())
        if dow is None:
            return None
        return Weekly(dow)

    if prefix == "nth":
        if len(parts) != 3:
            return None
        try:
            n = int(parts[1])
        except ValueError:
            return None
        if not 1 <= n <= 5:
            return None
        dow = _WEEKDAY_LOOKUP.get(parts[2].strip())
        if dow is None:
            return None
        return NthWeekday(n, dow)

    return None


def serialize_recurrence_rule(rule: RecurrenceRule) -> str:
    day_name = WEEKDAY_NAMES[rule.day_of_week]
    if isinstance(rule, Weekly):
        return f"weekly:{day_name}"
    return f"nth:{rule.n}:{day_name}"


def describe_recurrence_rule(rule: RecurrenceRule) -> str:
    day_name = WEEKDAY_NAMES[rule.day_of_week]
    if isinstance(rule, Weekly):
        return f"Every {day_name}"
    return f"{rule.n}{_ORDINAL_SUFFIXES[rule.n]} {day_name} of month"


def occurrences_in_month(rule: RecurrenceRule, year: int, month: int) -> list[int]:
    """Day numbers produced by `rule` in (year, month), ascending."""
    start = datetime(year, month, 1)
    until = datetime(year, month, days_in_month(year, month))
    weekday = RRULE_WEEKDAYS[rule.day_of_week]

    if isinstance(rule, Weekly):
        dates = rrule(WEEKLY, byweekday=weekday, dtstart=start, until=until)
    else:
        # empty when the month has fewer than n of that weekday
        dates = rrule(MONTHLY, byweekday=weekday(rule.n), dtstart=start, until=until)
    return [d.day for d in dates]


def expand_recurring_events(
    events: list[Event],
    year: int,
    month: int,
) -> list[ExpandedRecurrence]:
    """
    Expand every recurring event into concrete days of (year, month).

    Results keep input event order, each event's days ascending.
    Non-recurring events and recurring events without a rule are skipped.
    """
    # Validates the month before any rule is evaluated
    days_in_month(year, month)

    results = []
    for event in events:
        if not event.is_recurring:
            continue
        if event.recurrence is None:
            logger.debug("Skipping recurring event '{}' with no rule.", event.name)
            continue
        for day in occurrences_in_month(event.recurrence, year, month):
            results.append(ExpandedRecurrence(event.name, day))
    logger.log(LAYOUT, "Expanded {} recurring occurrences for {}-{:02d}", len(results), year, month)
    return results

"""
Built-in holiday definitions.

Each definition maps a year to a (month, day) or None. Dates that follow no
simple rule (season starts, Passover, Hanukkah) come from year tables; a year
outside a table has no occurrence, and extending coverage means adding rows.
"""

from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from datetime import date, timedelta
from types import MappingProxyType

from dateutil.easter import easter
from dateutil.relativedelta import relativedelta, SU, MO, TU, WE, TH, FR, SA
from loguru import logger

from wallcal.models import Holiday

MonthDay = tuple[int, int]

# Indexed by 0=Sunday..6=Saturday
_WEEKDAYS = (SU, MO, TU, WE, TH, FR, SA)


@dataclass(frozen=True)
class HolidayDefinition:
    name: str
    compute: Callable[[int], MonthDay | None]


@dataclass(frozen=True)
class YearTable:
    """Finite year → (month, day) mapping; uncovered years yield None."""
    dates: Mapping[int, MonthDay]

    def __call__(self, year: int) -> MonthDay | None:
        return self.dates.get(year)


def year_table(rows: dict[int, MonthDay]) -> YearTable:
    return YearTable(MappingProxyType(dict(rows)))


def nth_weekday_of_month(year: int, month: int, weekday: int, n: int) -> int:
    """Day of the nth (1-based) `weekday` (0=Sunday) in the month."""
    return (date(year, month, 1) + relativedelta(weekday=_WEEKDAYS[weekday](n))).day


def last_weekday_of_month(year: int, month: int, weekday: int) -> int:
    d = date(year, month, 1) + relativedelta(day=31, weekday=_WEEKDAYS[weekday](-1))
    return d.day


def fixed(month: int, day: int) -> Callable[[int], MonthDay]:
    return lambda year: (month, day)


def nth(month: int, weekday: int, n: int) -> Callable[[int], MonthDay]:
    return lambda year: (month, nth_weekday_of_month(year, month, weekday, n))


def last(month: int, weekday: int) -> Callable[[int], MonthDay]:
    return lambda year: (month, last_weekday_of_month(year, month, weekday))


def easter_offset(days: int) -> Callable[[int], MonthDay]:
    def compute(year):
        d = easter(year) + timedelta(days=days)
        return d.month, d.day
    return compute


def _election_day(year):
    # Tuesday after the first Monday in November
    return 11, nth_weekday_of_month(year, 11, 1, 1) + 1


def _grandparents_day(year):
    # Sunday after Labor Day
    return 9, nth_weekday_of_month(year, 9, 1, 1) + 6


def _professionals_day(year):
    # Wednesday of the last full Sunday–Saturday week of April
    return 4, last_weekday_of_month(year, 4, 6) - 3


SPRING_BEGINS = year_table({
    2024: (3, 19), 2025: (3, 20), 2026: (3, 20), 2027: (3, 20),
    2028: (3, 19), 2029: (3, 20), 2030: (3, 20),
})
SUMMER_BEGINS = year_table({
    2024: (6, 20), 2025: (6, 20), 2026: (6, 21), 2027: (6, 21),
    2028: (6, 20), 2029: (6, 20), 2030: (6, 21),
})
AUTUMN_BEGINS = year_table({
    2024: (9, 22), 2025: (9, 22), 2026: (9, 22), 2027: (9, 23),
    2028: (9, 22), 2029: (9, 22), 2030: (9, 22),
})
WINTER_BEGINS = year_table({
    2024: (12, 21), 2025: (12, 21), 2026: (12, 21), 2027: (12, 21),
    2028: (12, 21), 2029: (12, 21), 2030: (12, 21),
})
PASSOVER_BEGINS = year_table({
    2024: (4, 23), 2025: (4, 13), 2026: (4, 2), 2027: (4, 22),
    2028: (4, 11), 2029: (3, 31), 2030: (4, 18),
})
HANUKKAH_BEGINS = year_table({
    2024: (12, 26), 2025: (12, 15), 2026: (12, 5), 2027: (12, 25),
    2028: (12, 13), 2029: (12, 2), 2030: (12, 21),
})

HOLIDAY_DEFINITIONS = (
    HolidayDefinition("NEW YEARS DAY", fixed(1, 1)),
    HolidayDefinition("MARTIN LUTHER KING DAY", nth(1, 1, 3)),
    HolidayDefinition("GROUND HOG DAY", fixed(2, 2)),
    HolidayDefinition("LINCOLN'S BIRTHDAY", fixed(2, 12)),
    HolidayDefinition("PRESIDENTS' DAY", nth(2, 1, 3)),
    HolidayDefinition("WASHINGTON'S BIRTHDAY", fixed(2, 22)),
    HolidayDefinition("ASH WEDNESDAY", easter_offset(-46)),
    HolidayDefinition("ST PATRICK'S DAY", fixed(3, 17)),
    HolidayDefinition("SPRING BEGINS", SPRING_BEGINS),
    HolidayDefinition("ALL FOOLS' DAY", fixed(4, 1)),
    HolidayDefinition("PALM SUNDAY", easter_offset(-7)),
    HolidayDefinition("PASSOVER BEGINS", PASSOVER_BEGINS),
    HolidayDefinition("GOOD FRIDAY", easter_offset(-2)),
    HolidayDefinition("EASTER SUNDAY", easter_offset(0)),
    HolidayDefinition("EARTH DAY", fixed(4, 22)),
    HolidayDefinition("PROFESSIONALS DAY", _professionals_day),
    HolidayDefinition("NATIONAL DAY OF PRAYER", nth(5, 4, 1)),
    HolidayDefinition("ASCENSION DAY", easter_offset(39)),
    HolidayDefinition("MOTHER'S DAY", nth(5, 0, 2)),
    HolidayDefinition("ARMED FORCES DAY", nth(5, 6, 3)),
    HolidayDefinition("MEMORIAL DAY", last(5, 1)),
    HolidayDefinition("FLAG DAY", fixed(6, 14)),
    HolidayDefinition("FATHER'S DAY", nth(6, 0, 3)),
    HolidayDefinition("SUMMER BEGINS", SUMMER_BEGINS),
    HolidayDefinition("INDEPENDENCE DAY", fixed(7, 4)),
    HolidayDefinition("LABOR DAY", nth(9, 1, 1)),
    HolidayDefinition("GRANDPARENTS DAY", _grandparents_day),
    HolidayDefinition("PATRIOT DAY", fixed(9, 11)),
    HolidayDefinition("AUTUMN BEGINS", AUTUMN_BEGINS),
    HolidayDefinition("COLUMBUS DAY", nth(10, 1, 2)),
    HolidayDefinition("NATIONAL BOSS DAY", fixed(10, 16)),
    HolidayDefinition("HALLOWEEN", fixed(10, 31)),
    HolidayDefinition("ALL SAINTS' DAY", fixed(11, 1)),
    HolidayDefinition("ELECTION DAY", _election_day),
    HolidayDefinition("VETERANS DAY", fixed(11, 11)),
    HolidayDefinition("THANKSGIVING DAY", nth(11, 4, 4)),
    HolidayDefinition("PEARL HARBOR DAY", fixed(12, 7)),
    HolidayDefinition("HANUKKAH BEGINS", HANUKKAH_BEGINS),
    HolidayDefinition("WINTER BEGINS", WINTER_BEGINS),
    HolidayDefinition("CHRISTMAS DAY", fixed(12, 25)),
)

HOLIDAY_NAMES = tuple(d.name for d in HOLIDAY_DEFINITIONS)


def get_holidays_for_month(
    year: int,
    month: int,
    enabled: Iterable[str] | None = None,
    custom: Iterable[Holiday] = (),
) -> list[Holiday]:
    """
    Holidays in (year, month): built-ins in definition order (only `enabled`
    names when given), followed by matching custom holidays.
    """
    enabled = None if enabled is None else set(enabled)
    found = []
    for definition in HOLIDAY_DEFINITIONS:
        if enabled is not None and definition.name not in enabled:
            continue
        result = definition.compute(year)
        if result is None:
            logger.debug("No {} date known for {}", definition.name, year)
            continue
        if result[0] == month:
            found.append(Holiday(definition.name, result[0], result[1]))
    found.extend(h for h in custom if h.month == month)
    return found

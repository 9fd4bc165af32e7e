from collections.abc import Callable
from datetime import datetime, timezone
from functools import lru_cache

from dateutil.relativedelta import relativedelta
from loguru import logger
from skyfield import almanac
from skyfield.api import Loader

import wallcal.settings as settings
from wallcal.models import FIRST_QUARTER, FULL_MOON, LAST_QUARTER, NEW_MOON, MoonPhase

# Index order of skyfield's almanac.moon_phases
PHASE_NAMES = (NEW_MOON, FIRST_QUARTER, FULL_MOON, LAST_QUARTER)

PhaseFinder = Callable[[datetime, datetime], list[tuple[datetime, int]]]


@lru_cache(maxsize=1)
def _load_ephemeris():
    load = Loader(str(settings.EPHEMERIS_DIR))
    logger.debug("Loading ephemeris {} from {}", settings.EPHEMERIS_FILE, settings.EPHEMERIS_DIR)
    return load.timescale(), load(settings.EPHEMERIS_FILE)


def skyfield_phase_finder(start: datetime, end: datetime) -> list[tuple[datetime, int]]:
    """Moments in [start, end) where the moon enters each quarter phase."""
    ts, eph = _load_ephemeris()
    times, phases = almanac.find_discrete(
        ts.from_datetime(start), ts.from_datetime(end), almanac.moon_phases(eph)
    )
    return [(t.utc_datetime(), int(p)) for t, p in zip(times, phases)]


def get_moon_phases(year: int, month: int, finder: PhaseFinder | None = None) -> list[MoonPhase]:
    """
    New, first-quarter, full and last-quarter moons falling in the month by
    UTC calendar date, one per (phase, day), sorted by day.
    """
    finder = finder or skyfield_phase_finder
    start = datetime(year, month, 1, tzinfo=timezone.utc)
    end = start + relativedelta(months=1)

    phases = []
    seen = set()
    for moment, index in finder(start, end):
        moment = moment.astimezone(timezone.utc)
        if (moment.year, moment.month) != (year, month):
            continue
        key = (index, moment.day)
        if key in seen:
            continue
        seen.add(key)
        phases.append(MoonPhase(PHASE_NAMES[index], month, moment.day))

    phases.sort(key=lambda p: p.day)
    logger.debug("Moon phases for {}-{:02d}: {}", year, month,
                 ", ".join(f"{p.type} {p.day}" for p in phases) or "none")
    return phases

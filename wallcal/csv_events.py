"""Event list import/export in the Name,Type,Month,Day,Groups[,Recurrence] CSV layout."""

import csv
import io
from dataclasses import dataclass, replace
from pathlib import Path

from loguru import logger

from wallcal.models import Event, EventType
from wallcal.recurrence import parse_recurrence_rule, serialize_recurrence_rule
from wallcal.utils import is_valid_day

FIELDNAMES = ["Name", "Type", "Month", "Day", "Groups", "Recurrence"]


@dataclass(frozen=True)
class RowError:
    line: int
    message: str


@dataclass
class CsvParseResult:
    events: list[Event]
    errors: list[RowError]


def _split_groups(raw: str) -> tuple[str, ...]:
    return tuple(g.strip() for g in raw.split(",") if g.strip())


def _parse_int(raw: str) -> int | None:
    try:
        return int(raw)
    except ValueError:
        return None


def _parse_row(row: dict) -> tuple[Event | None, str | None]:
    def field(name):
        return (row.get(name) or "").strip()

    name = field("Name")
    if not name:
        return None, "missing name"

    type_raw = field("Type").upper()
    try:
        event_type = EventType(type_raw)
    except ValueError:
        return None, f"unknown type {type_raw!r}"

    groups = _split_groups(field("Groups"))

    if event_type is EventType.RECURRING:
        raw_rule = field("Recurrence")
        rule = parse_recurrence_rule(raw_rule)
        if rule is None:
            logger.warning("Recurring event '{}' has no usable rule ({!r}); it will not be placed.",
                           name, raw_rule)
        return Event(name, event_type, groups=groups, recurrence=rule), None

    month, day = _parse_int(field("Month")), _parse_int(field("Day"))
    if month is None or day is None:
        return None, "month and day must be whole numbers"
    if not 1 <= month <= 12:
        return None, f"month {month} out of range"
    if not is_valid_day(month, day):
        return None, f"day {day} invalid for month {month}"
    return Event(name, event_type, month, day, groups), None


def parse_events_from_csv(text: str) -> CsvParseResult:
    """
    Parse CSV text into events. Invalid rows are skipped and reported in
    `errors`; rows repeating (name, type, month, day, rule) merge their groups
    into the first occurrence.
    """
    events: list[Event] = []
    errors: list[RowError] = []
    index: dict[tuple, int] = {}

    reader = csv.DictReader(io.StringIO(text), skipinitialspace=True)
    if reader.fieldnames:
        reader.fieldnames = [f.strip() for f in reader.fieldnames]

    for row in reader:
        if not any((v or "").strip() for v in row.values() if isinstance(v, str)):
            continue
        event, problem = _parse_row(row)
        if event is None:
            errors.append(RowError(reader.line_num, problem))
            logger.debug("Skipping CSV line {}: {}", reader.line_num, problem)
            continue

        key = (event.name, event.type, event.month, event.day, event.recurrence)
        if key in index:
            existing = events[index[key]]
            merged = existing.groups + tuple(g for g in event.groups if g not in existing.groups)
            events[index[key]] = replace(existing, groups=merged)
            continue
        index[key] = len(events)
        events.append(event)

    logger.info("Parsed {} events ({} rows rejected).", len(events), len(errors))
    return CsvParseResult(events, errors)


def load_events_csv(path) -> CsvParseResult:
    path = Path(path)
    logger.debug("Loading events from {}", path)
    return parse_events_from_csv(path.read_text(encoding="utf-8-sig"))


def export_events_to_csv(events: list[Event]) -> str:
    buf = io.StringIO()
    writer = csv.DictWriter(buf, fieldnames=FIELDNAMES, lineterminator="\n")
    writer.writeheader()
    for event in events:
        recurring = event.is_recurring
        writer.writerow({
            "Name": event.name,
            "Type": event.type.value,
            "Month": "" if recurring else event.month,
            "Day": "" if recurring else event.day,
            "Groups": ",".join(event.groups),
            "Recurrence": serialize_recurrence_rule(event.recurrence) if event.recurrence else "",
        })
    return buf.getvalue()

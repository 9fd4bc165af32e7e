from pathlib import Path

import yaml
from loguru import logger

import wallcal.settings as settings
from wallcal.holidays import HOLIDAY_NAMES
from wallcal.models import Holiday
from wallcal.utils import is_valid_day


def load_config(path=None) -> dict:
    """Load the run configuration and normalize holidays and groups."""
    path = path or settings.CONFIG_PATH
    with open(path, 'r', encoding='utf-8') as f:
        logger.debug("Loading configuration from {}", path)
        config = yaml.safe_load(f) or {}
    config = normalize_config(config)
    if config["events"]:
        # event file paths are relative to the config file
        config["events"] = str(Path(path).parent / config["events"])
    return config


def normalize_config(config: dict) -> dict:
    holidays = config.get("holidays") or {}
    disabled = {str(name).upper() for name in holidays.get("disabled", [])}
    unknown = disabled - set(HOLIDAY_NAMES)
    if unknown:
        logger.warning("Unknown holidays in 'disabled': {}", sorted(unknown))

    custom = []
    for entry in holidays.get("custom", []):
        name = str(entry.get("name", "")).strip()
        month, day = int(entry.get("month", 0)), int(entry.get("day", 0))
        if not name or not is_valid_day(month, day):
            logger.error("Ignoring invalid custom holiday {!r}", entry)
            continue
        if name.upper() in HOLIDAY_NAMES or any(h.name.upper() == name.upper() for h in custom):
            logger.warning("Custom holiday '{}' already exists, skipping.", name)
            continue
        custom.append(Holiday(name, month, day))

    groups = config.get("groups")
    return {
        "events": config.get("events"),
        "groups": None if groups is None else [str(g) for g in groups],
        "title": (config.get("title") or "").strip(),
        "moon_phases": bool(config.get("moon_phases", settings.DRAW_MOON_PHASES)),
        "enabled_holidays": [n for n in HOLIDAY_NAMES if n not in disabled],
        "custom_holidays": custom,
    }

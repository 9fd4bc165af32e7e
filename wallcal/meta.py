import hashlib
from pathlib import Path

import yaml
from loguru import logger

import wallcal.settings as settings
from wallcal.models import CalendarGrid

META_KEYS = ("_last_anchor", "render_hash")


def load_meta(path=None) -> dict:
    """
    Load metadata from the meta file. Return {} if missing or invalid.
    """
    meta_file = Path(path or settings.META_FILE)
    if meta_file.exists() and meta_file.is_file():
        try:
            data = yaml.safe_load(meta_file.read_text())
            if isinstance(data, dict):
                return {k: v for k, v in data.items() if k in META_KEYS}
        except yaml.YAMLError as e:
            logger.warning("Failed to parse meta file: {}, using empty metadata.", e)
    return {}


def save_meta(meta: dict, path=None) -> None:
    """
    Save metadata, only writing expected keys.
    """
    meta_file = Path(path or settings.META_FILE)
    to_write = {k: meta[k] for k in META_KEYS if k in meta}
    try:
        meta_file.parent.mkdir(parents=True, exist_ok=True)
        meta_file.write_text(yaml.safe_dump(to_write))
    except OSError as e:
        logger.warning("Failed to write meta file: {}", e)


def compute_render_hash(grid: CalendarGrid, title: str) -> str:
    """Digest of everything that ends up on the page."""
    weeks = [
        [
            None if slot is None else {
                "day": slot.day,
                "events": [[e.type.value, e.name] for e in slot.events],
                "holidays": [h.name for h in slot.holidays],
                "moon": [p.type for p in slot.moon_phases],
                "recurring": list(slot.recurring_events),
            }
            for slot in week
        ]
        for week in grid.weeks
    ]
    payload = {
        "title": title,
        "year": grid.year,
        "month": grid.month,
        "weeks": weeks,
        "overflow": [[e.type.value, e.name, e.month, e.day] for e in grid.overflow_events],
    }
    return hashlib.sha256(yaml.safe_dump(payload, sort_keys=True).encode()).hexdigest()

import sys
import os

from loguru import logger

import wallcal.settings as settings
from wallcal.fonts import init_fonts
from wallcal.config import load_config
from wallcal.meta import load_meta, save_meta, compute_render_hash
from wallcal.csv_events import load_events_csv
from wallcal.calendar_grid import build_calendar_grid
from wallcal.recurrence import expand_recurring_events
from wallcal.holidays import get_holidays_for_month
from wallcal.moon import get_moon_phases
from wallcal.renderers import generate_calendar_pdf, download_calendar_pdf, export_pdf_to_png
from wallcal.utils import default_title, parse_month_spec
from wallcal.logger import configure_logging


def filter_events_by_groups(events, enabled_groups):
    """Keep ungrouped events and events in at least one enabled group."""
    if enabled_groups is None:
        return list(events)
    enabled = set(enabled_groups)
    return [e for e in events if not e.groups or any(g in enabled for g in e.groups)]


def prepare_month(year, month, events, config, moon_finder=None):
    """Collect the month's content and build its grid. Returns (grid, title)."""
    events = filter_events_by_groups(events, config["groups"])
    holidays = get_holidays_for_month(
        year, month, config["enabled_holidays"], config["custom_holidays"],
    )
    moon_phases = get_moon_phases(year, month, moon_finder) if config["moon_phases"] else []
    recurring = expand_recurring_events(events, year, month)

    dated = [e for e in events if not e.is_recurring and e.month == month]
    logger.debug("{} dated events, {} recurring occurrences, {} holidays, {} moon phases",
                 len(dated), len(recurring), len(holidays), len(moon_phases))

    grid = build_calendar_grid(year, month, dated, holidays, moon_phases, recurring)
    title = config["title"] or default_title(year, month)
    return grid, title


def main():
    # 0) Set up logs
    configure_logging()
    # 1) Register fonts once
    init_fonts()

    # 2) Resolve target month
    year, month = parse_month_spec(settings.TARGET_MONTH)
    logger.info("Rendering {}-{:02d}", year, month)

    # 3) Load config, metadata, and events
    config = load_config()
    meta = load_meta()
    events = []
    if config["events"]:
        parsed = load_events_csv(config["events"])
        for err in parsed.errors:
            logger.warning("events line {}: {}", err.line, err.message)
        events = parsed.events

    # 4) Build the grid
    grid, title = prepare_month(year, month, events, config)

    # 5) Change detection
    anchor = f"{year}-{month:02d}"
    new_hash = compute_render_hash(grid, title)
    if not settings.FORCE_REFRESH and meta.get("_last_anchor") == anchor and meta.get("render_hash") == new_hash:
        logger.info("No changes for {}, skipping generation.", anchor)
        sys.exit(0)

    if settings.FORCE_REFRESH:
        logger.info("FORCE_REFRESH set, refreshing...")
    elif meta.get("_last_anchor") != anchor:
        logger.info("Month changed: {} → {}, refreshing...", meta.get("_last_anchor"), anchor)
    else:
        logger.info("Calendar content changed, refreshing...")

    # 6) Render and save
    document = generate_calendar_pdf(grid, title)
    out_path = download_calendar_pdf(document, os.path.join(settings.OUTPUT_DIR, f"{title}.pdf"))

    if settings.FORMAT in ('png', 'both'):
        png_path = export_pdf_to_png(out_path, settings.OUTPUT_PNG, dpi=settings.PDF_DPI)
        logger.info("Exported PNG to {}", png_path)

        # If the user only wants PNGs, remove the PDF:
        if settings.FORMAT == 'png':
            os.remove(out_path)
            logger.info("Removed PDF at {}", out_path)

    # 7) Persist metadata
    save_meta({"_last_anchor": anchor, "render_hash": new_hash})
    logger.info("✅ Completed generation for {}", anchor)


if __name__ == '__main__':
    main()

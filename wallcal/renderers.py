from dataclasses import dataclass
from enum import Enum
from io import BytesIO
from pathlib import Path
import subprocess

from loguru import logger
from reportlab.pdfgen import canvas
from reportlab.lib.colors import HexColor
from reportlab.lib.units import mm
from reportlab.lib.utils import simpleSplit
from reportlab.pdfbase import pdfmetrics

import wallcal.settings as settings
from wallcal.calendar_grid import pad_rows
from wallcal.layout import (
    COLS,
    cell_rect,
    get_layout_config,
    get_page_size,
    grid_line_segments,
    region_rect,
)
from wallcal.logger import VISUAL
from wallcal.models import CalendarGrid, DaySlot, Event, MoonPhase, TitleRegion, Week
from wallcal.placement import Position, find_overflow_positions, find_title_region
from wallcal.utils import DAY_NAMES, css_color_to_hex, month_abbreviation


class CellSection(Enum):
    RECURRING = "recurring"
    DATED = "dated"
    HOLIDAY = "holiday"


# Draw order inside a day cell, below the day number line. Holidays are
# bottom-anchored; the others flow downward in this order.
CELL_RENDER_ORDER = (CellSection.RECURRING, CellSection.DATED, CellSection.HOLIDAY)
BOTTOM_ANCHORED = {CellSection.HOLIDAY}


@dataclass(frozen=True)
class TextRun:
    text: str
    x: float
    y: float          # baseline
    font: str
    size: float
    centered: bool = False
    color: str | None = None


@dataclass
class PagePlan:
    weeks: list[Week]
    overflow_positions: list[Position]
    title_region: TitleRegion


@dataclass
class CalendarDocument:
    canvas: canvas.Canvas
    width: float
    height: float
    title: str
    _data: bytes | None = None

    def pdf_bytes(self) -> bytes:
        if self._data is None:
            self._data = self.canvas.getpdfdata()
        return self._data


# Text helpers

def format_moon_phase(phase: MoonPhase) -> str:
    return phase.type.upper()


def format_event(event: Event) -> str:
    return f"{event.type.value}: {event.name.upper()}"


def format_overflow_event(event: Event) -> str:
    return f"{format_event(event)} {month_abbreviation(event.month)} {event.day}"


def section_texts(slot: DaySlot, section: CellSection) -> list[str]:
    if section is CellSection.RECURRING:
        return [name.upper() for name in slot.recurring_events]
    if section is CellSection.DATED:
        return [format_event(e) for e in slot.events]
    return [h.name for h in slot.holidays]


def line_height(size: float) -> float:
    return size * settings.LINE_SPACING


def ascent(font: str, size: float) -> float:
    return pdfmetrics.getFont(font).face.ascent / 1000 * size


def descent(font: str, size: float) -> float:
    return pdfmetrics.getFont(font).face.descent / 1000 * size


def wrap_text(text: str, font: str, size: float, max_width: float) -> list[str]:
    if not text:
        return []
    return simpleSplit(text, font, size, max_width)


def fit_font_size(text, font, start, floor, max_width):
    """Shrink from `start` in steps of 1 until `text` fits, never below `floor`."""
    size = start
    while size > floor and pdfmetrics.stringWidth(text, font, size) > max_width:
        size -= 1
    return max(size, floor)


# Pure layout

def plan_page(
    grid: CalendarGrid,
    min_rows: int = settings.MIN_ROWS,
    overflow_policy: str = settings.OVERFLOW_POLICY,
) -> PagePlan:
    """Pad the grid, reserve overflow cells, then find the title block."""
    weeks = pad_rows(grid.weeks, min_rows)
    positions = find_overflow_positions(weeks, len(grid.overflow_events), overflow_policy)
    region = find_title_region(weeks, positions)
    return PagePlan(weeks, positions, region)


def layout_cell_text(slot: DaySlot, x, y, w, h, layout) -> list[TextRun]:
    """
    Text runs for one day cell: day number top-left, first moon phase beside
    it, then recurring names and dated events flowing down, with holidays
    anchored to the bottom. Flowing lines that would reach into the holiday
    block are dropped.
    """
    pad = layout["cell_padding"]
    max_w = w - 2 * pad
    left = x + pad
    bold, regular = settings.FONT_BOLD, settings.FONT_REGULAR
    day_size, size = settings.DAY_FONT_SIZE, settings.CONTENT_FONT_SIZE
    lh = line_height(size)
    runs = []

    cursor = y + h - pad
    day_str = str(slot.day)
    runs.append(TextRun(day_str, left, cursor - ascent(bold, day_size), bold, day_size))
    if slot.moon_phases:
        moon_x = left + pdfmetrics.stringWidth(day_str, bold, day_size) + layout["moon_gap"]
        moon_y = cursor - mm - ascent(regular, size)
        runs.append(TextRun(format_moon_phase(slot.moon_phases[0]), moon_x, moon_y, regular, size))
    cursor -= line_height(day_size)

    anchored = [
        line
        for section in CELL_RENDER_ORDER if section in BOTTOM_ANCHORED
        for text in section_texts(slot, section)
        for line in wrap_text(text, regular, size, max_w)
    ]
    # the anchored block never climbs past the day number line
    room = max(int((cursor - (y + pad)) / lh + 1e-6), 0)
    if len(anchored) > room:
        logger.log(VISUAL, "    Day {}: {} holiday line(s) do not fit.", slot.day, len(anchored) - room)
        anchored = anchored[:room]
    bottom_limit = y + pad + len(anchored) * lh

    truncated = False
    for section in CELL_RENDER_ORDER:
        if section in BOTTOM_ANCHORED:
            continue
        for text in section_texts(slot, section):
            for line in wrap_text(text, regular, size, max_w):
                if cursor - lh < bottom_limit - 1e-6:
                    truncated = True
                    break
                runs.append(TextRun(line, left, cursor - ascent(regular, size), regular, size))
                cursor -= lh
            if truncated:
                break
        if truncated:
            break
    if truncated:
        logger.log(VISUAL, "    Day {}: content truncated above holidays.", slot.day)

    block_top = bottom_limit
    for line in anchored:
        runs.append(TextRun(line, left, block_top - ascent(regular, size), regular, size,
                            color=settings.HOLIDAY_COLOR))
        block_top -= lh
    return runs


def layout_overflow_text(event: Event, x, y, w, h, layout) -> list[TextRun]:
    pad = layout["cell_padding"]
    regular, size = settings.FONT_REGULAR, settings.CONTENT_FONT_SIZE
    lh = line_height(size)
    cursor = y + h - pad
    runs = []
    for line in wrap_text(format_overflow_event(event), regular, size, w - 2 * pad):
        if cursor - lh < y + pad - 1e-6:
            break
        runs.append(TextRun(line, x + pad, cursor - ascent(regular, size), regular, size))
        cursor -= lh
    return runs


def layout_title(title: str, region: TitleRegion, layout,
                 fallback: str = settings.TITLE_FALLBACK) -> TextRun | None:
    """
    Title centered in the free region, shrunk to fit its width. A zero-area
    region either skips the title or puts it at the floor size in cell (0, 0).
    """
    bold = settings.FONT_BOLD
    if region.is_empty:
        if fallback != "draw":
            logger.warning("No free cells for the title '{}'; skipping it.", title)
            return None
        logger.warning("No free cells for the title '{}'; drawing it in the first cell.", title)
        x, y, w, h = cell_rect(layout, 0, 0)
        size = settings.MIN_FONT_SIZE
    else:
        x, y, w, h = region_rect(layout, region)
        size = fit_font_size(title, bold, settings.TITLE_FONT_SIZE, settings.MIN_FONT_SIZE,
                             w - 2 * layout["cell_padding"])

    cx, cy = x + w / 2, y + h / 2
    baseline = cy - (ascent(bold, size) + descent(bold, size)) / 2
    logger.log(VISUAL, "Title '{}' at {:.1f}pt in {:.2f}×{:.2f}", title, size, w, h)
    return TextRun(title, cx, baseline, bold, size, centered=True)


# Drawing

def draw_runs(c, runs, color=settings.TEXT_COLOR):
    for run in runs:
        c.setFillColor(HexColor(css_color_to_hex(run.color or color)))
        c.setFont(run.font, run.size)
        if run.centered:
            c.drawCentredString(run.x, run.y, run.text)
        else:
            c.drawString(run.x, run.y, run.text)


def draw_grid(c, layout, region: TitleRegion):
    c.setStrokeColor(HexColor(css_color_to_hex(settings.GRIDLINE_COLOR)))
    c.setLineWidth(settings.GRIDLINE_WIDTH)

    left, bottom = layout["grid_left"], layout["grid_bottom"]
    c.rect(left, bottom, layout["grid_right"] - left, layout["grid_top"] - bottom, stroke=1, fill=0)

    segments = grid_line_segments(layout, region)
    for x1, y1, x2, y2 in segments:
        c.line(x1, y1, x2, y2)
    logger.log(VISUAL, "Drew border and {} grid segments.", len(segments))


def draw_header_row(c, layout):
    font, size = settings.FONT_BOLD, settings.HEADER_FONT_SIZE
    c.setFillColor(HexColor(css_color_to_hex(settings.TEXT_COLOR)))
    c.setFont(font, size)
    cy = layout["body_top"] + layout["header_h"] / 2
    baseline = cy - (ascent(font, size) + descent(font, size)) / 2
    for col in range(COLS):
        cx = layout["grid_left"] + col * layout["col_width"] + layout["col_width"] / 2
        c.drawCentredString(cx, baseline, DAY_NAMES[col])


def draw_day_cells(c, layout, weeks: list[Week]):
    for row, week in enumerate(weeks):
        for col, slot in enumerate(week):
            if slot is None:
                continue
            x, y, w, h = cell_rect(layout, row, col)
            draw_runs(c, layout_cell_text(slot, x, y, w, h, layout))


def draw_overflow_events(c, layout, events: list[Event], positions: list[Position]):
    for event, (row, col) in zip(events, positions):
        x, y, w, h = cell_rect(layout, row, col)
        logger.log(VISUAL, "Overflow '{}' → row {}, col {}", event.name, row, col)
        draw_runs(c, layout_overflow_text(event, x, y, w, h, layout))


def generate_calendar_pdf(
    grid: CalendarGrid,
    title: str,
    *,
    min_rows: int = settings.MIN_ROWS,
    overflow_policy: str = settings.OVERFLOW_POLICY,
    title_fallback: str = settings.TITLE_FALLBACK,
    page_size: tuple[float, float] | None = None,
) -> CalendarDocument:
    """
    Draw a month onto a single landscape page:
      • weekday header band
      • grid lines, merged across the title block
      • day cells (day number, moon phase, recurring, events, holidays)
      • overflow events in reserved empty cells
      • the title, centered in the largest free block
    """
    plan = plan_page(grid, min_rows, overflow_policy)
    width, height = page_size or get_page_size()
    layout = get_layout_config(width, height, len(plan.weeks))

    logger.log(VISUAL, "Page size: {w:.2f}×{h:.2f}", w=width, h=height)
    logger.log(VISUAL, "Body rows: {}, row height: {h:.2f}, col width: {w:.2f}",
               layout["rows"], h=layout["row_height"], w=layout["col_width"])

    c = canvas.Canvas(BytesIO(), pagesize=(width, height))
    c.setTitle(title)

    draw_grid(c, layout, plan.title_region)
    draw_header_row(c, layout)
    draw_day_cells(c, layout, plan.weeks)
    draw_overflow_events(c, layout, grid.overflow_events, plan.overflow_positions)

    title_run = layout_title(title, plan.title_region, layout, title_fallback)
    if title_run is not None:
        draw_runs(c, [title_run])

    c.showPage()
    return CalendarDocument(c, width, height, title)


def download_calendar_pdf(document: CalendarDocument, filename) -> Path:
    """Write the finished document to `filename`, creating parent folders."""
    path = Path(filename)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(document.pdf_bytes())
    logger.info("Wrote PDF to {}", path)
    return path


def export_pdf_to_png(pdf_path, output_dir: str | None = None, dpi: float = 150) -> Path:
    """
    Calls Poppler's pdftocairo to rasterize the calendar page to
    "<pdf name>.png" in `output_dir`.
    """
    pdf_path = Path(pdf_path)
    out_dir = Path(output_dir or pdf_path.parent)
    out_dir.mkdir(parents=True, exist_ok=True)
    logger.info("Rendering PNG...")

    # -singlefile makes pdftocairo write "<prefix>.png" with no page suffix
    prefix = out_dir / pdf_path.stem
    subprocess.run([
        "pdftocairo",
        "-png",
        "-singlefile",
        "-r", str(dpi),
        str(pdf_path),
        str(prefix),
    ], check=True)
    return prefix.with_name(prefix.name + ".png")

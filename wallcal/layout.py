from loguru import logger
from reportlab.lib.pagesizes import letter, A4, legal, landscape
from reportlab.lib.units import mm

import wallcal.settings as settings
from wallcal.models import TitleRegion

COLS = 7

NAMED_PAGE_SIZES = {
    "letter": letter,
    "a4": A4,
    "legal": legal,
}


def get_page_size(spec: str = settings.PDF_PAGE_SIZE) -> tuple[float, float]:
    """
    Landscape page size in points from a named size or "WxH" in millimetres.
    Falls back to landscape letter (279.4mm × 215.9mm) when unparseable.
    """
    key = spec.strip().lower()
    if key in NAMED_PAGE_SIZES:
        return landscape(NAMED_PAGE_SIZES[key])
    try:
        w_mm, h_mm = map(float, key.split("x"))
        return landscape((w_mm * mm, h_mm * mm))
    except ValueError as e:
        logger.warning("Invalid DOC_PAGE_SIZE {!r}: {}. Using landscape letter.", spec, e)
        return landscape(letter)


def get_layout_config(width, height, rows):
    """
    Grid geometry for a page: a header band of weekday names followed by
    `rows` equal body rows, all split into 7 equal columns.
    """
    margin       = settings.PDF_MARGIN * mm
    header_h     = settings.HEADER_ROW_HEIGHT * mm
    cell_padding = settings.CELL_PADDING * mm

    grid_left   = margin
    grid_right  = width - margin
    grid_top    = height - margin
    grid_bottom = margin
    body_top    = grid_top - header_h

    col_width  = (grid_right - grid_left) / COLS
    row_height = (body_top - grid_bottom) / rows

    return {
        "page_width":   width,
        "page_height":  height,
        "grid_left":    grid_left,
        "grid_right":   grid_right,
        "grid_top":     grid_top,
        "grid_bottom":  grid_bottom,
        "header_h":     header_h,
        "body_top":     body_top,
        "rows":         rows,
        "col_width":    col_width,
        "row_height":   row_height,
        "cell_padding": cell_padding,
        "moon_gap":     settings.MOON_GAP * mm,
    }


def cell_rect(layout, row, col):
    """(x, y, w, h) of a body cell, y being its bottom edge."""
    x = layout["grid_left"] + col * layout["col_width"]
    top = layout["body_top"] - row * layout["row_height"]
    return x, top - layout["row_height"], layout["col_width"], layout["row_height"]


def region_rect(layout, region: TitleRegion):
    x, _, _, _ = cell_rect(layout, region.start_row, region.start_col)
    _, y, _, _ = cell_rect(layout, region.end_row, region.end_col)
    w = region.cols * layout["col_width"]
    h = region.rows * layout["row_height"]
    return x, y, w, h


def _runs(flags):
    """Yield (start, end) index pairs of consecutive True values, end exclusive."""
    start = None
    for i, flag in enumerate(flags):
        if flag and start is None:
            start = i
        elif not flag and start is not None:
            yield start, i
            start = None
    if start is not None:
        yield start, len(flags)


def grid_line_segments(layout, region: TitleRegion | None = None):
    """
    Interior line segments (x1, y1, x2, y2) of the grid: the header rule, the
    row separators and the column separators. Pieces that would cross the
    interior of `region` are left out so it reads as one merged cell.
    The outer border is not included.
    """
    rows = layout["rows"]
    left, right = layout["grid_left"], layout["grid_right"]
    col_w, row_h = layout["col_width"], layout["row_height"]
    body_top = layout["body_top"]

    def inside(r, c):
        return region is not None and region.contains(r, c)

    segments = [(left, body_top, right, body_top)]

    for r in range(1, rows):
        y = body_top - r * row_h
        keep = [not (inside(r - 1, c) and inside(r, c)) for c in range(COLS)]
        for a, b in _runs(keep):
            segments.append((left + a * col_w, y, left + b * col_w, y))

    for c in range(1, COLS):
        x = left + c * col_w
        # index 0 is the header band, which is never merged
        keep = [True] + [not (inside(r, c - 1) and inside(r, c)) for r in range(rows)]
        for a, b in _runs(keep):
            y_top = layout["grid_top"] if a == 0 else body_top - (a - 1) * row_h
            y_bottom = body_top - (b - 1) * row_h
            segments.append((x, y_top, x, y_bottom))

    return segments

import os
from pathlib import Path


def _flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() not in ("0", "false", "no")


# Project root
BASE_DIR = Path(__file__).resolve().parent.parent

# File paths
CONFIG_PATH  = Path(os.getenv("APP_CONFIG_PATH", str(BASE_DIR / "config.yaml")))
META_FILE    = Path(os.getenv("APP_META_FILE_PATH", str(BASE_DIR / "render_meta.yaml")))
OUTPUT_DIR   = os.getenv("APP_OUTPUT_DIR", "output")
OUTPUT_PNG   = os.getenv("APP_OUTPUT_PNG_DIR", "output/png")
FONTS_DIR    = BASE_DIR / "fonts"

# Moon phase ephemeris (downloaded by skyfield on first use)
EPHEMERIS_FILE = os.getenv("APP_EPHEMERIS_FILE", "de421.bsp")
EPHEMERIS_DIR  = Path(os.getenv("APP_EPHEMERIS_DIR", str(BASE_DIR / "data")))

TARGET_MONTH = os.getenv("TIME_TARGET_MONTH", "this month")

FORMAT        = os.getenv("APP_OUTPUT_FORMAT", "pdf").lower()
FORCE_REFRESH = os.getenv("APP_FORCE_REFRESH", "false").lower() in ("1", "true", "yes")
DRAW_MOON_PHASES = _flag("DOC_MOON_PHASES", "true")

# Page layout (millimetres, converted to points in layout.py)
PDF_PAGE_SIZE    = os.getenv("DOC_PAGE_SIZE", "letter")
PDF_MARGIN       = float(os.getenv("DOC_MARGIN", 5))
HEADER_ROW_HEIGHT = float(os.getenv("DOC_HEADER_ROW_HEIGHT", 8))
CELL_PADDING     = float(os.getenv("DOC_CELL_PADDING", 1.5))
MOON_GAP         = float(os.getenv("DOC_MOON_PHASE_GAP", 2))
MIN_ROWS         = int(os.getenv("DOC_MIN_ROWS", 5))
PDF_DPI          = float(os.getenv("DOC_PAGE_DPI", "150"))

# Fonts (points)
FONT_REGULAR      = os.getenv("DOC_FONT_REGULAR", "Helvetica")
FONT_BOLD         = os.getenv("DOC_FONT_BOLD", "Helvetica-Bold")
HEADER_FONT_SIZE  = float(os.getenv("DOC_HEADER_FONT_SIZE", 9))
DAY_FONT_SIZE     = float(os.getenv("DOC_DAY_FONT_SIZE", 14))
CONTENT_FONT_SIZE = float(os.getenv("DOC_CONTENT_FONT_SIZE", 7))
TITLE_FONT_SIZE   = float(os.getenv("DOC_TITLE_FONT_SIZE", 26))
MIN_FONT_SIZE     = float(os.getenv("DOC_MIN_FONT_SIZE", 5))
LINE_SPACING      = float(os.getenv("DOC_LINE_SPACING", 1.15))

# Color defaults
GRIDLINE_COLOR = os.getenv("DOC_GRID_LINE_COLOR", "black")
GRIDLINE_WIDTH = float(os.getenv("DOC_GRID_LINE_WIDTH", 0.85))
TEXT_COLOR     = os.getenv("DOC_TEXT_COLOR", "black")
HOLIDAY_COLOR  = os.getenv("DOC_HOLIDAY_COLOR", "black")

# Capacity policies
OVERFLOW_POLICY = os.getenv("DOC_OVERFLOW_POLICY", "drop").lower()     # drop | error
TITLE_FALLBACK  = os.getenv("DOC_TITLE_FALLBACK", "skip").lower()      # skip | draw

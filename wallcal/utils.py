from datetime import datetime, date
import calendar, re
from loguru import logger
import webcolors
from dateutil.relativedelta import relativedelta

MONTH_NAMES = (
    "JANUARY", "FEBRUARY", "MARCH", "APRIL", "MAY", "JUNE",
    "JULY", "AUGUST", "SEPTEMBER", "OCTOBER", "NOVEMBER", "DECEMBER",
)
MONTH_ABBREVIATIONS = tuple(name[:3] for name in MONTH_NAMES)
DAY_NAMES = ("SUNDAY", "MONDAY", "TUESDAY", "WEDNESDAY", "THURSDAY", "FRIDAY", "SATURDAY")

# Leap day is a valid yearless date
_MAX_DAYS = (31, 29, 31, 30, 31, 30, 31, 31, 30, 31, 30, 31)


def css_color_to_hex(name_or_hex: str) -> str:
    """
    Convert a CSS color name, functional gray(%), or hex code to a 6-digit hex code.

    - Leaves valid hex codes unchanged.
    - Parses CSS4 gray(%) syntax.
    - Custom mapping for grayscale class names gray0–gray15, with aliases for black and white.
    - Falls back to standard CSS color names via webcolors.
    """

    if name_or_hex.startswith("#"):
        return name_or_hex

    lower = name_or_hex.lower().strip()

    m_pct = re.fullmatch(r'gray\(\s*([0-9]+(?:\.[0-9]+)?)%\s*\)', lower)
    if m_pct:
        pct = float(m_pct.group(1))
        level = round(255 * pct / 100)
        return f"#{level:02X}{level:02X}{level:02X}"

    if lower in ('black', 'gray0'):
        return '#000000'
    if lower in ('white', 'gray15'):
        return '#FFFFFF'

    m = re.fullmatch(r'gray([0-9]|1[0-5])', lower)
    if m:
        level = int(m.group(1)) * 17
        return f"#{level:02X}{level:02X}{level:02X}"

    try:
        return webcolors.name_to_hex(name_or_hex)
    except ValueError:
        logger.error("Unknown CSS color '{}', passing through.", name_or_hex)
        return name_or_hex


def days_in_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def max_day_for_month(month: int) -> int:
    """Largest day a yearless month/day pair may carry (February allows 29)."""
    return _MAX_DAYS[month - 1]


def is_valid_day(month: int, day: int) -> bool:
    if not (1 <= month <= 12):
        return False
    return 1 <= day <= max_day_for_month(month)


def month_abbreviation(month: int) -> str:
    return MONTH_ABBREVIATIONS[month - 1]


def default_title(year: int, month: int) -> str:
    return f"{MONTH_NAMES[month - 1]} {year}"


def parse_month_spec(s: str, today: date | None = None) -> tuple[int, int]:
    """
    Resolve a human month selector into (year, month).

    Accepts "this month"/"month", "next month", "last month"/"previous month",
    "+N months"/"-N months", and explicit "YYYY-MM" or "YYYY/MM".
    """
    s = s.strip().strip('"').strip("'").lower()
    today = today or datetime.now().date()
    anchor = today.replace(day=1)

    if s in ("month", "this month", "today"):
        return anchor.year, anchor.month
    if s == "next month":
        s = "+1 months"
    elif s in ("last month", "previous month"):
        s = "-1 months"

    if (m := re.fullmatch(r'(?P<sign>[+-])\s*(?P<num>\d+)\s*months?', s)):
        offset = int(m.group("num")) * (1 if m.group("sign") == "+" else -1)
        target = anchor + relativedelta(months=offset)
        return target.year, target.month

    if (m := re.fullmatch(r'(?P<year>\d{4})[-/](?P<month>\d{1,2})', s)):
        year, month = int(m.group("year")), int(m.group("month"))
        if not (1 <= month <= 12):
            logger.error("Month out of range [1–12] in {!r}", s)
            raise ValueError(f"Month out of range: '{s}'")
        return year, month

    logger.error("Cannot parse month selector {!r}", s)
    raise ValueError(f"Invalid month selector: '{s}'")

"""
Free-space decisions on a padded month grid.

Overflow events claim empty cells first (bottom row upward, left to right);
the title then takes the largest empty rectangle that avoids those cells.
"""

from collections.abc import Collection

from loguru import logger

import wallcal.settings as settings
from wallcal.logger import LAYOUT
from wallcal.models import TitleRegion, Week

Position = tuple[int, int]


class PlacementError(ValueError):
    """Raised when the overflow policy forbids dropping events."""


def find_overflow_positions(
    weeks: list[Week],
    count: int,
    policy: str = settings.OVERFLOW_POLICY,
) -> list[Position]:
    """
    Pick up to `count` empty (row, col) positions, scanning rows from the
    last to the first and each row left to right.

    With policy "drop" a shortfall returns fewer positions than requested;
    with "error" it raises PlacementError.
    """
    positions: list[Position] = []
    if count <= 0:
        return positions

    for row in range(len(weeks) - 1, -1, -1):
        for col, slot in enumerate(weeks[row]):
            if slot is None:
                positions.append((row, col))
                if len(positions) == count:
                    logger.log(LAYOUT, "Overflow cells: {}", positions)
                    return positions

    missing = count - len(positions)
    if policy == "error":
        raise PlacementError(f"{missing} overflow event(s) have no empty cell")
    logger.warning("Only {} empty cells for {} overflow events; {} will not be drawn.",
                   len(positions), count, missing)
    return positions


def find_title_region(
    weeks: list[Week],
    reserved: Collection[Position] = (),
) -> TitleRegion:
    """
    Largest axis-aligned rectangle of positions that hold no day and are not
    reserved. Ties keep the first rectangle found scanning top-left corners in
    row-major order and extending downward. No free cell at all yields a
    zero-area region at (0, 0).
    """
    reserved = set(reserved)
    rows = len(weeks)
    cols = len(weeks[0]) if rows else 0

    def free(r, c):
        return weeks[r][c] is None and (r, c) not in reserved

    best = TitleRegion(0, 0, 0, 0, 0)
    for top in range(rows):
        for left in range(cols):
            if not free(top, left):
                continue
            right = cols - 1
            for bottom in range(top, rows):
                if not free(bottom, left):
                    break
                # shrink right edge to what this row still allows
                c = left
                while c + 1 <= right and free(bottom, c + 1):
                    c += 1
                right = c
                area = (bottom - top + 1) * (right - left + 1)
                if area > best.area:
                    best = TitleRegion(top, left, bottom, right, area)

    logger.log(LAYOUT, "Title region: rows {}-{}, cols {}-{} ({} cells)",
               best.start_row, best.end_row, best.start_col, best.end_col, best.area)
    return best

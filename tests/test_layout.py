import pytest

from wallcal.layout import cell_rect, get_layout_config, get_page_size, grid_line_segments, region_rect
from wallcal.models import TitleRegion


@pytest.fixture
def layout():
    return get_layout_config(792, 612, 5)


def test_page_sizes_are_landscape():
    assert get_page_size("letter") == pytest.approx((792, 612))
    assert get_page_size("A4") == pytest.approx((841.89, 595.28), abs=0.01)
    assert get_page_size("279.4x215.9") == pytest.approx((792, 612), abs=0.01)
    assert get_page_size("100x200") == pytest.approx((200 * 72 / 25.4, 100 * 72 / 25.4))


def test_bad_page_size_falls_back_to_letter():
    assert get_page_size("postcard") == pytest.approx((792, 612))


def test_rows_split_body_evenly(layout):
    six = get_layout_config(792, 612, 6)

    assert layout["row_height"] * 5 == pytest.approx(layout["body_top"] - layout["grid_bottom"])
    assert six["row_height"] < layout["row_height"]
    assert layout["col_width"] * 7 == pytest.approx(layout["grid_right"] - layout["grid_left"])


def test_cell_rect_corners(layout):
    x, y, w, h = cell_rect(layout, 0, 0)
    assert x == pytest.approx(layout["grid_left"])
    assert y + h == pytest.approx(layout["body_top"])

    x, y, w, h = cell_rect(layout, 4, 6)
    assert x + w == pytest.approx(layout["grid_right"])
    assert y == pytest.approx(layout["grid_bottom"])


def test_region_rect_spans_cells(layout):
    x, y, w, h = region_rect(layout, TitleRegion(3, 2, 4, 5, 8))

    assert x == pytest.approx(cell_rect(layout, 3, 2)[0])
    assert y == pytest.approx(layout["grid_bottom"])
    assert w == pytest.approx(4 * layout["col_width"])
    assert h == pytest.approx(2 * layout["row_height"])


def test_full_grid_segments(layout):
    segments = grid_line_segments(layout)

    # header rule, four row separators, six column separators
    assert len(segments) == 11
    verticals = [s for s in segments if s[0] == s[2]]
    assert len(verticals) == 6
    for x1, y1, x2, y2 in verticals:
        assert y1 == pytest.approx(layout["grid_top"])
        assert y2 == pytest.approx(layout["grid_bottom"])


def test_column_lines_stop_above_bottom_row_region(layout):
    region = TitleRegion(4, 0, 4, 6, 7)

    segments = grid_line_segments(layout, region)

    verticals = [s for s in segments if s[0] == s[2]]
    assert len(verticals) == 6
    last_row_top = layout["body_top"] - 4 * layout["row_height"]
    for x1, y1, x2, y2 in verticals:
        assert y1 == pytest.approx(layout["grid_top"])
        assert y2 == pytest.approx(last_row_top)
    # the separator above the region is kept
    horizontals = [s for s in segments if s[1] == s[3]]
    assert any(y == pytest.approx(last_row_top) for _, y, _, _ in horizontals)


def test_interior_of_region_is_open(layout):
    region = TitleRegion(0, 0, 1, 2, 6)
    col_w, row_h = layout["col_width"], layout["row_height"]
    left, body_top = layout["grid_left"], layout["body_top"]

    segments = grid_line_segments(layout, region)

    # the row line between rows 0 and 1 only runs from column 3 onward
    y = body_top - row_h
    row_line = [s for s in segments if s[1] == s[3] and s[1] == pytest.approx(y)]
    assert row_line == [pytest.approx((left + 3 * col_w, y, layout["grid_right"], y))]

    # column lines 1 and 2 keep the header band, skip rows 0-1, resume at row 2
    for c in (1, 2):
        x = left + c * col_w
        pieces = sorted((s for s in segments if s[0] == s[2] and s[0] == pytest.approx(x)),
                        key=lambda s: -s[1])
        assert pieces == [
            pytest.approx((x, layout["grid_top"], x, body_top)),
            pytest.approx((x, body_top - 2 * row_h, x, layout["grid_bottom"])),
        ]

    # the column line on the region's right edge is unbroken
    x = left + 3 * col_w
    assert sum(1 for s in segments if s[0] == s[2] and s[0] == pytest.approx(x)) == 1


def test_empty_region_keeps_every_line(layout):
    assert grid_line_segments(layout, TitleRegion(0, 0, 0, 0, 0)) == grid_line_segments(layout)


def test_header_rule_always_drawn(layout):
    segments = grid_line_segments(layout, TitleRegion(0, 0, 4, 6, 35))

    assert segments[0] == (layout["grid_left"], layout["body_top"],
                           layout["grid_right"], layout["body_top"])
    # only the header band pieces of the column lines remain
    assert len(segments) == 7

import pytest

from yumenes.palette import COLORS, color_for


def test_palette_has_64_entries():
    assert len(COLORS) == 64
    assert color_for(len(COLORS) - 1) == COLORS[-1]
    with pytest.raises(IndexError):
        color_for(len(COLORS))


def test_first_entry_is_grey():
    assert color_for(0x00) == (0x7C, 0x7C, 0x7C)


def test_every_entry_is_a_valid_rgb_triple():
    for index in range(len(COLORS)):
        color = color_for(index)
        assert len(color) == 3
        assert all(0 <= channel <= 0xFF for channel in color)


def test_color_for_matches_table():
    assert [color_for(i) for i in range(64)] == list(COLORS)


@pytest.mark.parametrize("index", [-1, 64, 0xFF])
def test_out_of_range_index_raises(index):
    with pytest.raises(IndexError):
        color_for(index)
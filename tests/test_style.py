import pytest

from coord import Coord
from foot import Foot
from style import Style, styles_for_sm_string


def test_every_style_is_consistent() -> None:
    for style in Style:
        assert style.num_cols >= style.num_panels
        assert 0 <= style.init_col(Foot.LEFT) < style.num_cols
        assert 0 <= style.init_col(Foot.RIGHT) < style.num_cols
        assert style.coord(style.init_col(Foot.LEFT)).x <= style.coord(style.init_col(Foot.RIGHT)).x
        for col in range(style.num_panels):
            assert style.panels(col) == (col,)
        for col in range(style.num_panels, style.num_cols):
            assert len(style.panels(col)) == 2


def test_itg_geometry() -> None:
    assert Style.ITG_SINGLES.num_cols == 4
    assert Style.ITG_SINGLES.coord(0) == Coord(0.0, 1.0)
    assert Style.ITG_SINGLES.coord(3) == Coord(2.0, 1.0)
    assert Style.ITG_DOUBLES.coord(4) == Coord(3.0, 1.0)
    assert Style.ITG_DOUBLES.max_x_coord() == 5.0
    assert Style.ITG_DOUBLES.center_x() == 2.5
    assert Style.ITG_DOUBLES.bar_coord() == Coord(2.5, -1.0)
    assert Style.ITG_SINGLES.init_pos() == Coord(1.0, 1.0)


def test_pump_halfdoubles_is_the_inner_columns() -> None:
    assert Style.PUMP_HALFDOUBLES.num_cols == 6
    assert Style.PUMP_HALFDOUBLES.coord(0) == Coord(0.0, 1.0)
    assert Style.PUMP_HALFDOUBLES.coord(5) == Coord(3.0, 1.0)
    assert Style.PUMP_HALFDOUBLES.center_x() == 1.5


def test_bracket_columns_light_two_panels_at_their_midpoint() -> None:
    style = Style.ITG_SINGLES_BRACKETS
    assert style.num_panels == 4
    assert style.num_cols == 8
    assert style.panels(4) == (0, 1)
    assert style.coord(4) == Coord(0.5, 0.5)
    assert Style.PUMP_DOUBLES_BRACKETS.panels(14) == (4, 5)


def test_out_of_range_column_raises() -> None:
    with pytest.raises(IndexError):
        Style.ITG_SINGLES.coord(4)
    with pytest.raises(IndexError):
        Style.ITG_SINGLES.panels(-1)


def test_from_name() -> None:
    assert Style.from_name("pump-doubles") is Style.PUMP_DOUBLES
    assert Style.from_name(" ITG_Singles ") is Style.ITG_SINGLES
    with pytest.raises(ValueError):
        Style.from_name("dance-single")


def test_styles_for_sm_string() -> None:
    assert styles_for_sm_string("dance-single") == [Style.ITG_SINGLES, Style.ITG_SINGLES_BRACKETS]

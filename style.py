# -*- coding: utf-8 -*-
########################
# style.py
########################
# Purpose:
# - The closed set of known pad layouts and their geometry queries.
# - Maps logical output columns to the physical panels they light.
#
# Design notes:
# - Every style is one StyleLayout record in _LAYOUT_LIST. No per-style branching.
# - Plain styles map column i to panel (i,). Bracket styles append extra logical
#   columns after the physical ones, each lighting two panels and placed at the
#   midpoint of those panels.
# - Coordinates: x grows to the player's right, y grows toward the screen.
#   The "bar" sits behind the pad, below the bottom row.
# - Out-of-range columns are programmer errors and raise IndexError.
#
########################
# Interfaces:
# Public dataclasses:
# - StyleLayout(name, sm_string, panel_coords, init_cols, brackets)
#
# Public enums:
# - class Style(enum.Enum)
#   - from_name(name: str) -> Style
#   - layout -> StyleLayout
#   - num_cols -> int
#   - num_panels -> int
#   - sm_string -> str
#   - coord(col: int) -> Coord
#   - panels(col: int) -> tuple[int, ...]
#   - init_col(foot: Foot) -> int
#   - init_pos() -> Coord
#   - max_x_coord() -> float
#   - center_x() -> float
#   - bar_coord() -> Coord
#   - has_brackets -> bool
#
# Public functions:
# - styles_for_sm_string(sm_string: str) -> list[Style]
#
########################

from __future__ import annotations

import enum
from dataclasses import dataclass
from functools import lru_cache
from typing import Dict, List, Sequence, Tuple

from coord import Coord
from foot import Foot


_PAD_WIDTH = 3.0
_BAR_DEPTH = 1.0

# Per-pad panel positions, in the column order of each game's notation.
_ITG_PAD = ((0.0, 1.0), (1.0, 0.0), (1.0, 2.0), (2.0, 1.0))
_SOLO_PAD = ((0.0, 1.0), (0.0, 2.0), (1.0, 0.0), (1.0, 2.0), (2.0, 2.0), (2.0, 1.0))
_PUMP_PAD = ((0.0, 0.0), (0.0, 2.0), (1.0, 1.0), (2.0, 2.0), (2.0, 0.0))
_HORIZON_PAD = (
    (0.0, 0.0),
    (0.0, 1.0),
    (0.0, 2.0),
    (1.0, 0.0),
    (1.0, 1.0),
    (1.0, 2.0),
    (2.0, 2.0),
    (2.0, 1.0),
    (2.0, 0.0),
)

# Two-panel brackets one foot can cover, as panel indices within one pad.
_ITG_PAD_BRACKETS = ((0, 1), (0, 2), (1, 3), (2, 3))
_PUMP_PAD_BRACKETS = ((0, 2), (1, 2), (2, 3), (2, 4))


def _tile(pad: Sequence[Tuple[float, float]], pad_count: int) -> Tuple[Coord, ...]:
    coords: List[Coord] = []
    for pad_index in range(pad_count):
        offset = pad_index * _PAD_WIDTH
        for x, y in pad:
            coords.append(Coord(x + offset, y))
    return tuple(coords)


def _shift(coords: Sequence[Coord], dx: float) -> Tuple[Coord, ...]:
    return tuple(Coord(coord.x + dx, coord.y) for coord in coords)


def _tile_brackets(
    pad_brackets: Sequence[Tuple[int, int]],
    *,
    pad_size: int,
    pad_count: int,
    seams: Sequence[Tuple[int, int]] = (),
) -> Tuple[Tuple[int, int], ...]:
    """Bracket pairs for every pad, with cross-pad seam brackets between pads.

    Seam pairs are given as (panel on the left pad, panel on the right pad).
    """
    brackets: List[Tuple[int, int]] = []
    for pad_index in range(pad_count):
        base = pad_index * pad_size
        for first, second in pad_brackets:
            brackets.append((base + first, base + second))
        if pad_index + 1 < pad_count:
            for left_panel, right_panel in seams:
                brackets.append((base + left_panel, base + pad_size + right_panel))
    return tuple(brackets)


@dataclass(frozen=True)
class StyleLayout:
    name: str
    sm_string: str
    panel_coords: Tuple[Coord, ...]
    init_cols: Tuple[int, int]
    brackets: Tuple[Tuple[int, ...], ...] = ()

    @property
    def num_panels(self) -> int:
        return len(self.panel_coords)

    @property
    def column_panels(self) -> Tuple[Tuple[int, ...], ...]:
        singles = tuple((panel,) for panel in range(self.num_panels))
        return singles + tuple(self.brackets)

    @property
    def column_coords(self) -> Tuple[Coord, ...]:
        coords: List[Coord] = []
        for panels in self.column_panels:
            total = Coord(0.0, 0.0)
            for panel in panels:
                total = total + self.panel_coords[panel]
            coords.append(total * (1.0 / len(panels)))
        return tuple(coords)


_LAYOUT_LIST: Tuple[StyleLayout, ...] = (
    StyleLayout("itg-singles", "dance-single", _tile(_ITG_PAD, 1), (0, 3)),
    StyleLayout("itg-doubles", "dance-double", _tile(_ITG_PAD, 2), (3, 4)),
    StyleLayout("itg-triples", "dance-triple", _tile(_ITG_PAD, 3), (4, 7)),
    StyleLayout("itg-quads", "dance-quad", _tile(_ITG_PAD, 4), (7, 8)),
    StyleLayout("itg-solo", "dance-solo", _tile(_SOLO_PAD, 1), (0, 5)),
    StyleLayout("pump-singles", "pump-single", _tile(_PUMP_PAD, 1), (0, 4)),
    StyleLayout(
        "pump-halfdoubles",
        "pump-halfdouble",
        _shift(_tile(_PUMP_PAD, 2)[2:8], -1.0),
        (2, 3),
    ),
    StyleLayout("pump-doubles", "pump-double", _tile(_PUMP_PAD, 2), (4, 5)),
    StyleLayout("horizon-singles", "horizon-single", _tile(_HORIZON_PAD, 1), (1, 7)),
    StyleLayout("horizon-doubles", "horizon-double", _tile(_HORIZON_PAD, 2), (7, 10)),
    StyleLayout(
        "itg-singles-brackets",
        "dance-single",
        _tile(_ITG_PAD, 1),
        (0, 3),
        _tile_brackets(_ITG_PAD_BRACKETS, pad_size=4, pad_count=1),
    ),
    StyleLayout(
        "itg-doubles-brackets",
        "dance-double",
        _tile(_ITG_PAD, 2),
        (3, 4),
        _tile_brackets(_ITG_PAD_BRACKETS, pad_size=4, pad_count=2, seams=((3, 0),)),
    ),
    StyleLayout(
        "pump-doubles-brackets",
        "pump-double",
        _tile(_PUMP_PAD, 2),
        (4, 5),
        _tile_brackets(_PUMP_PAD_BRACKETS, pad_size=5, pad_count=2, seams=((4, 0), (3, 1))),
    ),
)


class Style(enum.Enum):
    ITG_SINGLES = "itg-singles"
    ITG_DOUBLES = "itg-doubles"
    ITG_TRIPLES = "itg-triples"
    ITG_QUADS = "itg-quads"
    ITG_SOLO = "itg-solo"
    PUMP_SINGLES = "pump-singles"
    PUMP_HALFDOUBLES = "pump-halfdoubles"
    PUMP_DOUBLES = "pump-doubles"
    HORIZON_SINGLES = "horizon-singles"
    HORIZON_DOUBLES = "horizon-doubles"
    ITG_SINGLES_BRACKETS = "itg-singles-brackets"
    ITG_DOUBLES_BRACKETS = "itg-doubles-brackets"
    PUMP_DOUBLES_BRACKETS = "pump-doubles-brackets"

    @classmethod
    def from_name(cls, name: str) -> Style:
        normalized = str(name or "").strip().lower().replace("_", "-")
        for style in cls:
            if style.value == normalized:
                return style
        known = ", ".join(style.value for style in cls)
        raise ValueError(f"Unknown style: {name!r}. Known styles: {known}")

    @property
    def layout(self) -> StyleLayout:
        return _layouts_by_name()[self.value]

    @property
    def num_cols(self) -> int:
        return len(_column_coords(self))

    @property
    def num_panels(self) -> int:
        return self.layout.num_panels

    @property
    def sm_string(self) -> str:
        return self.layout.sm_string

    @property
    def has_brackets(self) -> bool:
        return bool(self.layout.brackets)

    def coord(self, col: int) -> Coord:
        coords = _column_coords(self)
        _check_col(self, col, len(coords))
        return coords[col]

    def panels(self, col: int) -> Tuple[int, ...]:
        column_panels = self.layout.column_panels
        _check_col(self, col, len(column_panels))
        return column_panels[col]

    def init_col(self, foot: Foot) -> int:
        return self.layout.init_cols[foot.index]

    def init_pos(self) -> Coord:
        left = self.coord(self.init_col(Foot.LEFT))
        right = self.coord(self.init_col(Foot.RIGHT))
        return (left + right) * 0.5

    def max_x_coord(self) -> float:
        return max(coord.x for coord in _column_coords(self))

    def center_x(self) -> float:
        return self.max_x_coord() / 2.0

    def bar_coord(self) -> Coord:
        return Coord(self.center_x(), -_BAR_DEPTH)


@lru_cache(maxsize=1)
def _layouts_by_name() -> Dict[str, StyleLayout]:
    return {layout.name: layout for layout in _LAYOUT_LIST}


@lru_cache(maxsize=None)
def _column_coords(style: Style) -> Tuple[Coord, ...]:
    return style.layout.column_coords


def _check_col(style: Style, col: int, count: int) -> None:
    if not 0 <= int(col) < count:
        raise IndexError(f"Column {col} out of range for {style.value} (0..{count - 1})")


def styles_for_sm_string(sm_string: str) -> List[Style]:
    normalized = str(sm_string or "").strip().lower()
    return [style for style in Style if style.sm_string == normalized]


def _run_unit_tests() -> None:
    assert {style.value for style in Style} == {layout.name for layout in _LAYOUT_LIST}

    assert Style.ITG_SINGLES.num_cols == 4
    assert Style.ITG_DOUBLES.num_cols == 8
    assert Style.PUMP_DOUBLES.num_cols == 10
    assert Style.HORIZON_DOUBLES.num_cols == 18
    assert Style.ITG_DOUBLES.coord(4) == Coord(3.0, 1.0)
    assert Style.PUMP_DOUBLES.coord(9) == Coord(5.0, 0.0)
    assert Style.ITG_SINGLES.init_pos() == Coord(1.0, 1.0)
    assert Style.ITG_DOUBLES.max_x_coord() == 5.0

    assert Style.ITG_SINGLES_BRACKETS.num_cols == 8
    assert Style.ITG_SINGLES_BRACKETS.num_panels == 4
    assert Style.ITG_SINGLES_BRACKETS.panels(4) == (0, 1)
    assert Style.ITG_SINGLES_BRACKETS.coord(4) == Coord(0.5, 0.5)
    assert Style.PUMP_DOUBLES_BRACKETS.panels(8) == (8,)
    assert Style.PUMP_DOUBLES_BRACKETS.panels(14) == (4, 5)
    assert Style.PUMP_HALFDOUBLES.center_x() == 1.5

    try:
        Style.ITG_SINGLES.coord(4)
    except IndexError:
        pass
    else:
        raise AssertionError("Expected IndexError for out-of-range column")


if __name__ == "__main__":
    _run_unit_tests()
    print("style.py: ok")

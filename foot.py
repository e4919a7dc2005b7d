# -*- coding: utf-8 -*-
########################
# foot.py
########################
# Purpose:
# - Left/Right foot tag shared by the generator and its rules.
# - FootStatus: per-foot step history (last two columns, run length, last input column).
#
########################

from __future__ import annotations

import enum
from dataclasses import dataclass, replace
from typing import Optional


class Foot(enum.Enum):
    LEFT = "left"
    RIGHT = "right"

    def other(self) -> Foot:
        return Foot.RIGHT if self is Foot.LEFT else Foot.LEFT

    @property
    def index(self) -> int:
        return 0 if self is Foot.LEFT else 1


@dataclass
class FootStatus:
    """Step history of one foot, owned and mutated by the Generator only."""

    last_col: Optional[int] = None
    last_last_col: Optional[int] = None
    run_length: int = 0
    last_input_col: Optional[int] = None

    def record(self, col: int, input_col: Optional[int]) -> None:
        if self.last_col == col:
            self.run_length += 1
        else:
            self.run_length = 1
        self.last_last_col = self.last_col
        self.last_col = col
        self.last_input_col = input_col

    def snapshot(self) -> FootStatus:
        return replace(self)

# -*- coding: utf-8 -*-
########################
# generator.py
########################
# Purpose:
# - Step-selection engine: picks the output column for each input step of a chart
#   being converted to a target pad Style.
#
# Key Logic:
# - One Generator per (source chart, target style) conversion. Not shared.
# - advance(input_column) decides in this order:
#   - replay guard (preserve_input_repetitions only):
#     - acting foot saw this input last time: replay its column, switch feet
#     - other foot saw this input last time: replay its column, same foot again
#   - first step of a foot: forced to the style's initial column
#   - otherwise: filter by hard constraints, weight by soft penalties, sample
# - Every commit updates the acting foot's FootStatus, the committed angle
#   (once both feet have stepped) and the drift Zone, then flips the foot.
#
# Design notes:
# - Deterministic for a given seed: the only randomness is self._rng.
# - No relaxation. If no column survives the hard constraints, NoValidColumnError
#   aborts this conversion.
# - Candidate weights must be strictly positive; a violation is an AssertionError.
#
########################
# Interfaces:
# Public exceptions:
# - class GeneratorError(Exception)
# - class NoValidColumnError(GeneratorError)
#
# Public dataclasses:
# - Zone(start_x: float, end_x: float, total_steps: int, steps_taken: int = 0)
#   - current_x() -> float
#   - step() -> None
#   - is_done() -> bool
#
# Public classes:
# - class Generator
#   - __init__(style: Style, params: GeneratorParameters)
#   - advance(input_column: int, is_jump: bool = False) -> int
#   - valid_columns() -> list[int]
#   - weight(col: int, input_column: Optional[int] = None) -> float
#   - commit(col: int, input_column: Optional[int] = None) -> None
#   - next_foot, prev_angle, zone, style, params
#   - foot_status(foot: Foot) -> FootStatus  (copy)
#
########################

from __future__ import annotations

import math
import random
from dataclasses import dataclass
from typing import List, Optional, Sequence

from coord import Coord
from foot import Foot, FootStatus
from generator_params import GeneratorParameters
from step_rules import EPSILON, StepContext, build_hard_constraints, build_soft_penalties
from style import Style


class GeneratorError(Exception):
    """Base error for step generation."""


class NoValidColumnError(GeneratorError):
    """Raised when the active hard constraints leave no column for the acting foot."""

    def __init__(self, *, style: Style, foot: Foot, own: FootStatus, other: FootStatus) -> None:
        self.style = style
        self.foot = foot
        self.own = own
        self.other = other
        super().__init__(
            f"No valid column for {foot.value} foot on {style.value}: "
            f"{foot.value}={_describe_history(own)}, {foot.other().value}={_describe_history(other)}"
        )


def _describe_history(status: FootStatus) -> str:
    return (
        f"(last={status.last_col}, last_last={status.last_last_col}, "
        f"run={status.run_length}, last_input={status.last_input_col})"
    )


def _assert(condition: bool, message: str) -> None:
    if not condition:
        raise AssertionError(message)


@dataclass
class Zone:
    """Horizontal drift target moving linearly from start_x to end_x."""

    start_x: float
    end_x: float
    total_steps: int
    steps_taken: int = 0

    def current_x(self) -> float:
        ratio = float(self.steps_taken) / float(max(1, self.total_steps))
        return self.start_x + (self.end_x - self.start_x) * ratio

    def step(self) -> None:
        self.steps_taken += 1

    def is_done(self) -> bool:
        return self.steps_taken >= self.total_steps


def choose_weighted(columns: Sequence[int], weights: Sequence[float], remaining: float) -> int:
    """Walk the candidates subtracting weights until the remainder is used up."""
    _assert(len(columns) > 0, "choose_weighted needs at least one candidate")
    for col, weight in zip(columns, weights):
        remaining -= weight
        if remaining <= 0.0:
            return col
    return columns[-1]


class Generator:
    def __init__(self, style: Style, params: GeneratorParameters) -> None:
        self._style = style
        self._params = params
        self._rng = random.Random(params.seed)
        self._hard_constraints = build_hard_constraints(params)
        self._soft_penalties = build_soft_penalties(params)
        self._feet = [FootStatus(), FootStatus()]
        self._prev_angle = 0.0

        if params.first_foot is not None:
            self._next_foot = params.first_foot
        else:
            self._next_foot = Foot.LEFT if self._rng.random() < 0.5 else Foot.RIGHT

        self._zone: Optional[Zone] = None
        if params.doubles_movement is not None:
            self._zone = self._new_zone(style.init_pos().x)

    @property
    def style(self) -> Style:
        return self._style

    @property
    def params(self) -> GeneratorParameters:
        return self._params

    @property
    def next_foot(self) -> Foot:
        return self._next_foot

    @property
    def prev_angle(self) -> float:
        return self._prev_angle

    @property
    def zone(self) -> Optional[Zone]:
        return self._zone

    def foot_status(self, foot: Foot) -> FootStatus:
        return self._feet[foot.index].snapshot()

    def advance(self, input_column: int, is_jump: bool = False) -> int:
        """Choose and commit the output column for one input column.

        is_jump is part of the event contract only. Whether a jump row is fed
        as one or two calls is decided by the caller.
        """
        replayed = self._replay_repetition(input_column)
        if replayed is not None:
            return replayed

        if self._status(self._next_foot).last_col is None:
            col = self._style.init_col(self._next_foot)
        else:
            col = self._choose(input_column)
        self._commit(col, input_column, switch_feet=True)
        return col

    def valid_columns(self) -> List[int]:
        context = self._context()
        columns = [
            col
            for col in range(self._style.num_cols)
            if all(rule.allows(context, col) for rule in self._hard_constraints)
        ]
        if not columns:
            raise NoValidColumnError(
                style=self._style,
                foot=self._next_foot,
                own=self._status(self._next_foot).snapshot(),
                other=self._status(self._next_foot.other()).snapshot(),
            )
        return columns

    def weight(self, col: int, input_column: Optional[int] = None) -> float:
        return self._weight(self._context(), col, input_column)

    def commit(self, col: int, input_column: Optional[int] = None) -> None:
        """Place the acting foot on col without sampling, then switch feet."""
        self._style.coord(col)
        self._commit(col, input_column, switch_feet=True)

    def _status(self, foot: Foot) -> FootStatus:
        return self._feet[foot.index]

    def _context(self) -> StepContext:
        return StepContext(
            style=self._style,
            foot=self._next_foot,
            own=self._status(self._next_foot),
            other=self._status(self._next_foot.other()),
            prev_angle=self._prev_angle,
            zone_x=self._zone.current_x() if self._zone is not None else None,
        )

    def _weight(self, context: StepContext, col: int, input_column: Optional[int]) -> float:
        weight = 1.0
        for penalty in self._soft_penalties:
            weight *= penalty.weight(context, col, input_column)
        return weight

    def _replay_repetition(self, input_column: int) -> Optional[int]:
        if self._params.preserve_input_repetitions is None:
            return None

        acting = self._status(self._next_foot)
        if acting.last_input_col == input_column and acting.last_col is not None:
            col = acting.last_col
            self._commit(col, input_column, switch_feet=True)
            return col

        other = self._status(self._next_foot.other())
        if other.last_input_col == input_column and other.last_col is not None:
            col = other.last_col
            self._commit(col, input_column, switch_feet=False)
            return col

        return None

    def _choose(self, input_column: int) -> int:
        columns = self.valid_columns()
        context = self._context()
        weights = [self._weight(context, col, input_column) for col in columns]
        for col, weight in zip(columns, weights):
            _assert(weight > 0.0, f"Candidate weight must be positive, got {weight!r} for column {col}")
        total = sum(weights)
        _assert(total > 0.0, f"Total candidate weight must be positive, got {total!r}")
        return choose_weighted(columns, weights, self._rng.random() * total)

    def _commit(self, col: int, input_column: Optional[int], *, switch_feet: bool) -> None:
        foot = self._next_foot if switch_feet else self._next_foot.other()
        self._status(foot).record(col, input_column)

        angle = self._current_angle()
        if angle is not None:
            self._prev_angle = angle

        if self._zone is not None:
            self._zone.step()
            if self._zone.is_done():
                self._zone = self._new_zone(self._zone.end_x)

        if switch_feet:
            self._next_foot = self._next_foot.other()

    def _current_angle(self) -> Optional[float]:
        left_col = self._status(Foot.LEFT).last_col
        right_col = self._status(Foot.RIGHT).last_col
        if left_col is None or right_col is None:
            return None
        left = self._style.coord(left_col)
        right = self._style.coord(right_col)
        return left.angle(right, self._prev_angle)

    def _new_zone(self, start_x: float) -> Zone:
        end_x = self._pick_zone_end(start_x)
        distance = Coord(start_x, 0.0).dist(Coord(end_x, 0.0))
        return Zone(start_x=start_x, end_x=end_x, total_steps=self._pick_zone_steps(distance))

    def _pick_zone_end(self, from_x: float) -> float:
        center = self._style.center_x()
        low = 0.5
        high = self._style.max_x_coord() - 0.5
        if high - low <= EPSILON:
            return center

        if abs(from_x - center) <= EPSILON:
            go_right = self._rng.random() < 0.5
        else:
            go_right = from_x < center

        dist_from_side = self._params.doubles_dist_from_side
        if dist_from_side is not None:
            offset = min(float(dist_from_side), center)
            return self._style.max_x_coord() - offset if go_right else offset

        if go_right:
            return self._rng.uniform((center + high) / 2.0, high)
        return self._rng.uniform(low, (low + center) / 2.0)

    def _pick_zone_steps(self, distance: float) -> int:
        steps_per_dist = self._params.doubles_steps_per_dist
        if steps_per_dist is not None:
            return max(1, int(math.ceil(float(steps_per_dist) * distance)))
        if distance <= 1.0:
            return self._rng.randint(4, 7)
        return self._rng.randint(8, 31)


def _run_unit_tests() -> None:
    assert choose_weighted([5], [0.1], 0.05) == 5
    assert choose_weighted([5, 6], [0.1, 0.1], 0.05) == 5
    assert choose_weighted([5, 6], [0.1, 0.1], 0.15) == 6
    assert choose_weighted([5, 6], [0.1, 0.1], 0.25) == 6

    generator = Generator(Style.ITG_SINGLES, GeneratorParameters(first_foot=Foot.LEFT))
    assert generator.advance(0) == 0
    assert generator.advance(1) == 3
    for input_column in range(100):
        generator.advance(input_column % 4)

    first = Generator(Style.PUMP_DOUBLES, GeneratorParameters(seed=11, max_dist_between_feet=2.9))
    second = Generator(Style.PUMP_DOUBLES, GeneratorParameters(seed=11, max_dist_between_feet=2.9))
    inputs = [index % 4 for index in range(64)]
    assert [first.advance(col) for col in inputs] == [second.advance(col) for col in inputs]


if __name__ == "__main__":
    _run_unit_tests()
    print("generator.py: ok")

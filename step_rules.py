# -*- coding: utf-8 -*-
########################
# step_rules.py
########################
# Purpose:
# - Hard constraints (eliminate candidate columns) and soft penalties (scale
#   candidate weights) used by the Generator.
# - Registry that turns a GeneratorParameters snapshot into the active rule lists.
#
# Design notes:
# - Every rule is a small frozen dataclass with one method:
#   - HardConstraint.allows(ctx, col) -> bool
#   - SoftPenalty.weight(ctx, col, input_col) -> float  (always > 0)
# - A rule whose inputs are not known yet (no history for a foot, no zone)
#   allows the candidate and contributes a factor of 1.0.
# - All distance and angle limits are compared with EPSILON slack.
# - Adding a rule means one class plus one registry line. The Generator never
#   reads parameter fields directly.
#
########################
# Interfaces:
# Public constants:
# - EPSILON, CROSSOVER_ANGLE
#
# Public dataclasses:
# - StepContext(style, foot, own, other, prev_angle, zone_x)
#   - coord(col) -> Coord
#   - test_angle(col) -> Optional[float]
#   - is_crossover(col) -> bool
#   - bar_twist(col) -> Optional[float]
#
# Public functions:
# - build_hard_constraints(params: GeneratorParameters) -> list[HardConstraint]
# - build_soft_penalties(params: GeneratorParameters) -> list[SoftPenalty]
#
########################

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Callable, List, Optional, Protocol, Tuple

from coord import Coord
from foot import Foot, FootStatus
from generator_params import Decay, GeneratorParameters
from style import Style


EPSILON = 0.00001
CROSSOVER_ANGLE = math.pi / 2.0

# Offset of each foot's drift target from the shared zone target.
_INDIVIDUAL_FOOT_ZONE_OFFSET = 0.5


@dataclass(frozen=True)
class StepContext:
    """Read-only view of generator state for the foot about to step."""

    style: Style
    foot: Foot
    own: FootStatus
    other: FootStatus
    prev_angle: float
    zone_x: Optional[float] = None

    def coord(self, col: int) -> Coord:
        return self.style.coord(col)

    def _feet_coords(self, col: int) -> Optional[Tuple[Coord, Coord]]:
        if self.other.last_col is None:
            return None
        candidate = self.coord(col)
        other = self.coord(self.other.last_col)
        if self.foot is Foot.LEFT:
            return candidate, other
        return other, candidate

    def test_angle(self, col: int) -> Optional[float]:
        """Bearing from the left foot to the right foot if the candidate is taken."""
        feet = self._feet_coords(col)
        if feet is None:
            return None
        left, right = feet
        return left.angle(right, self.prev_angle)

    def is_crossover(self, col: int) -> bool:
        angle = self.test_angle(col)
        if angle is None:
            return False
        return abs(angle) > CROSSOVER_ANGLE + EPSILON

    def bar_twist(self, col: int) -> Optional[float]:
        """Positive when the feet cross as seen from the bar behind the pad."""
        feet = self._feet_coords(col)
        if feet is None:
            return None
        left, right = feet
        bar = self.style.bar_coord()
        facing = math.pi / 2.0
        return bar.angle(right, facing) - bar.angle(left, facing)


class HardConstraint(Protocol):
    def allows(self, ctx: StepContext, col: int) -> bool:
        ...


class SoftPenalty(Protocol):
    def weight(self, ctx: StepContext, col: int, input_col: Optional[int]) -> float:
        ...


def _within(measured: float, limit: float) -> bool:
    return measured <= float(limit) + EPSILON


def _limit_applies(rule: Any, ctx: StepContext, col: int) -> bool:
    """Crossover-exempt limits skip crossovers; crossover-only limits skip everything else."""
    if not (rule.crossover_exempt or rule.crossover_only):
        return True
    crossover = ctx.is_crossover(col)
    if rule.crossover_exempt and crossover:
        return False
    if rule.crossover_only and not crossover:
        return False
    return True


########################
# Hard constraints
########################


@dataclass(frozen=True)
class NoFootswitch:
    def allows(self, ctx: StepContext, col: int) -> bool:
        return ctx.other.last_col != col


@dataclass(frozen=True)
class MaxRepeated:
    limit: int

    def allows(self, ctx: StepContext, col: int) -> bool:
        return not (ctx.own.last_col == col and ctx.own.run_length >= self.limit)


@dataclass(frozen=True)
class MaxDistBetweenFeet:
    limit: float
    crossover_exempt: bool = False
    crossover_only: bool = False

    def allows(self, ctx: StepContext, col: int) -> bool:
        if ctx.other.last_col is None:
            return True
        if not _limit_applies(self, ctx, col):
            return True
        return _within(ctx.coord(ctx.other.last_col).dist(ctx.coord(col)), self.limit)


@dataclass(frozen=True)
class MaxDistBetweenSteps:
    limit: float

    def allows(self, ctx: StepContext, col: int) -> bool:
        if ctx.own.last_col is None:
            return True
        return _within(ctx.coord(ctx.own.last_col).dist(ctx.coord(col)), self.limit)


@dataclass(frozen=True)
class MaxHorizontalDistBetweenSteps:
    limit: float
    crossover_exempt: bool = False
    crossover_only: bool = False

    def allows(self, ctx: StepContext, col: int) -> bool:
        if ctx.own.last_col is None:
            return True
        if not _limit_applies(self, ctx, col):
            return True
        return _within(abs(ctx.coord(ctx.own.last_col).x - ctx.coord(col).x), self.limit)


@dataclass(frozen=True)
class MaxVerticalDistBetweenSteps:
    limit: float

    def allows(self, ctx: StepContext, col: int) -> bool:
        if ctx.own.last_col is None:
            return True
        return _within(abs(ctx.coord(ctx.own.last_col).y - ctx.coord(col).y), self.limit)


@dataclass(frozen=True)
class MaxHorizontalDistBetween4Steps:
    """Same foot, second-previous step vs candidate: spans four steps of both feet."""

    limit: float

    def allows(self, ctx: StepContext, col: int) -> bool:
        if ctx.own.last_last_col is None:
            return True
        return _within(abs(ctx.coord(ctx.own.last_last_col).x - ctx.coord(col).x), self.limit)


@dataclass(frozen=True)
class MaxAngle:
    limit: float

    def allows(self, ctx: StepContext, col: int) -> bool:
        angle = ctx.test_angle(col)
        if angle is None:
            return True
        return _within(abs(angle), self.limit)


@dataclass(frozen=True)
class MaxTurn:
    limit: float

    def allows(self, ctx: StepContext, col: int) -> bool:
        angle = ctx.test_angle(col)
        if angle is None:
            return True
        return _within(abs(angle - ctx.prev_angle), self.limit)


@dataclass(frozen=True)
class MaxBarAngle:
    limit: float

    def allows(self, ctx: StepContext, col: int) -> bool:
        twist = ctx.bar_twist(col)
        if twist is None:
            return True
        return _within(twist, self.limit)


@dataclass(frozen=True)
class FootOnOwnHalf:
    def allows(self, ctx: StepContext, col: int) -> bool:
        x = ctx.coord(col).x
        center = ctx.style.center_x()
        if ctx.foot is Foot.LEFT:
            return x <= center + EPSILON
        return x >= center - EPSILON


########################
# Soft penalties
########################


@dataclass(frozen=True)
class RepeatedDecay:
    """Flat penalty once the acting foot's run on its column exceeds the threshold."""

    decay: Decay

    def weight(self, ctx: StepContext, col: int, input_col: Optional[int]) -> float:
        if ctx.own.last_col == col and ctx.own.run_length - self.decay.threshold > 0:
            return float(self.decay.base)
        return 1.0


@dataclass(frozen=True)
class OtherFootRepeatDecay:
    base: float

    def weight(self, ctx: StepContext, col: int, input_col: Optional[int]) -> float:
        if ctx.other.run_length >= 2 and ctx.own.last_col == col:
            return float(self.base)
        return 1.0


@dataclass(frozen=True)
class DistBetweenFeetDecay:
    decay: Decay

    def weight(self, ctx: StepContext, col: int, input_col: Optional[int]) -> float:
        if ctx.other.last_col is None:
            return 1.0
        return self.decay.factor(ctx.coord(ctx.other.last_col).dist(ctx.coord(col)))


@dataclass(frozen=True)
class DistBetweenStepsDecay:
    decay: Decay

    def weight(self, ctx: StepContext, col: int, input_col: Optional[int]) -> float:
        if ctx.own.last_col is None:
            return 1.0
        return self.decay.factor(ctx.coord(ctx.own.last_col).dist(ctx.coord(col)))


@dataclass(frozen=True)
class HorizontalDistBetweenStepsDecay:
    decay: Decay

    def weight(self, ctx: StepContext, col: int, input_col: Optional[int]) -> float:
        if ctx.own.last_col is None:
            return 1.0
        return self.decay.factor(abs(ctx.coord(ctx.own.last_col).x - ctx.coord(col).x))


@dataclass(frozen=True)
class VerticalDistBetweenStepsDecay:
    decay: Decay

    def weight(self, ctx: StepContext, col: int, input_col: Optional[int]) -> float:
        if ctx.own.last_col is None:
            return 1.0
        return self.decay.factor(abs(ctx.coord(ctx.own.last_col).y - ctx.coord(col).y))


@dataclass(frozen=True)
class HorizontalDistBetween3StepsDecay:
    decay: Decay

    def weight(self, ctx: StepContext, col: int, input_col: Optional[int]) -> float:
        if ctx.own.last_last_col is None:
            return 1.0
        return self.decay.factor(abs(ctx.coord(ctx.own.last_last_col).x - ctx.coord(col).x))


@dataclass(frozen=True)
class HorizontalSpread3StepsSameFootDecay:
    """Width of the x range covered by the foot's last two steps and the candidate."""

    decay: Decay

    def weight(self, ctx: StepContext, col: int, input_col: Optional[int]) -> float:
        if ctx.own.last_col is None or ctx.own.last_last_col is None:
            return 1.0
        xs = [
            ctx.coord(ctx.own.last_last_col).x,
            ctx.coord(ctx.own.last_col).x,
            ctx.coord(col).x,
        ]
        return self.decay.factor(max(xs) - min(xs))


@dataclass(frozen=True)
class AngleDecay:
    decay: Decay

    def weight(self, ctx: StepContext, col: int, input_col: Optional[int]) -> float:
        angle = ctx.test_angle(col)
        if angle is None:
            return 1.0
        return self.decay.factor(abs(angle))


@dataclass(frozen=True)
class TurnDecay:
    decay: Decay

    def weight(self, ctx: StepContext, col: int, input_col: Optional[int]) -> float:
        angle = ctx.test_angle(col)
        if angle is None:
            return 1.0
        return self.decay.factor(abs(angle - ctx.prev_angle))


@dataclass(frozen=True)
class CrossoverMultiplier:
    multiplier: float

    def weight(self, ctx: StepContext, col: int, input_col: Optional[int]) -> float:
        return float(self.multiplier) if ctx.is_crossover(col) else 1.0


@dataclass(frozen=True)
class BarAngleDecay:
    decay: Decay

    def weight(self, ctx: StepContext, col: int, input_col: Optional[int]) -> float:
        twist = ctx.bar_twist(col)
        if twist is None:
            return 1.0
        return self.decay.factor(twist)


@dataclass(frozen=True)
class DifferentInputDecay:
    """Penalize repeating the output column when the input column changed."""

    base: float

    def weight(self, ctx: StepContext, col: int, input_col: Optional[int]) -> float:
        last_input_col = ctx.own.last_input_col
        if last_input_col is None:
            return 1.0
        if input_col != last_input_col and ctx.own.last_col == col:
            return float(self.base)
        return 1.0


@dataclass(frozen=True)
class ZoneDistanceDecay:
    decay: Decay
    track_individual_feet: bool = False

    def weight(self, ctx: StepContext, col: int, input_col: Optional[int]) -> float:
        if ctx.zone_x is None:
            return 1.0
        target_x = float(ctx.zone_x)
        if self.track_individual_feet:
            if ctx.foot is Foot.LEFT:
                target_x -= _INDIVIDUAL_FOOT_ZONE_OFFSET
            else:
                target_x += _INDIVIDUAL_FOOT_ZONE_OFFSET
        return self.decay.factor(abs(ctx.coord(col).x - target_x))


########################
# Registry
########################

_HARD_RULES: Tuple[Tuple[str, Callable[[Any, GeneratorParameters], HardConstraint]], ...] = (
    ("disallow_footswitch", lambda value, params: NoFootswitch()),
    ("max_repeated", lambda value, params: MaxRepeated(int(value))),
    ("max_dist_between_feet", lambda value, params: MaxDistBetweenFeet(float(value))),
    (
        "max_dist_between_feet_crossover_exempt",
        lambda value, params: MaxDistBetweenFeet(float(value), crossover_exempt=True),
    ),
    (
        "max_dist_between_feet_if_crossover",
        lambda value, params: MaxDistBetweenFeet(float(value), crossover_only=True),
    ),
    ("max_dist_between_steps", lambda value, params: MaxDistBetweenSteps(float(value))),
    ("max_horizontal_dist_between_steps", lambda value, params: MaxHorizontalDistBetweenSteps(float(value))),
    (
        "max_horizontal_dist_between_steps_crossover_exempt",
        lambda value, params: MaxHorizontalDistBetweenSteps(float(value), crossover_exempt=True),
    ),
    (
        "max_horizontal_dist_between_steps_if_crossover",
        lambda value, params: MaxHorizontalDistBetweenSteps(float(value), crossover_only=True),
    ),
    ("max_vertical_dist_between_steps", lambda value, params: MaxVerticalDistBetweenSteps(float(value))),
    (
        "max_horizontal_dist_between_4_steps_both_feet",
        lambda value, params: MaxHorizontalDistBetween4Steps(float(value)),
    ),
    ("max_angle", lambda value, params: MaxAngle(float(value))),
    ("max_turn", lambda value, params: MaxTurn(float(value))),
    ("max_bar_angle", lambda value, params: MaxBarAngle(float(value))),
    ("disallow_foot_opposite_side", lambda value, params: FootOnOwnHalf()),
)

_SOFT_RULES: Tuple[Tuple[str, Callable[[Any, GeneratorParameters], SoftPenalty]], ...] = (
    ("repeated_decay", lambda value, params: RepeatedDecay(value)),
    ("other_foot_repeat_decay", lambda value, params: OtherFootRepeatDecay(float(value))),
    ("dist_between_feet_decay", lambda value, params: DistBetweenFeetDecay(value)),
    ("dist_between_steps_decay", lambda value, params: DistBetweenStepsDecay(value)),
    ("horizontal_dist_between_steps_decay", lambda value, params: HorizontalDistBetweenStepsDecay(value)),
    ("vertical_dist_between_steps_decay", lambda value, params: VerticalDistBetweenStepsDecay(value)),
    ("horizontal_dist_between_3_steps_decay", lambda value, params: HorizontalDistBetween3StepsDecay(value)),
    (
        "horizontal_dist_between_3_steps_same_foot_decay",
        lambda value, params: HorizontalSpread3StepsSameFootDecay(value),
    ),
    ("angle_decay", lambda value, params: AngleDecay(value)),
    ("turn_decay", lambda value, params: TurnDecay(value)),
    ("crossover_multiplier", lambda value, params: CrossoverMultiplier(float(value))),
    ("bar_angle_decay", lambda value, params: BarAngleDecay(value)),
    ("preserve_input_repetitions", lambda value, params: DifferentInputDecay(float(value))),
    (
        "doubles_movement",
        lambda value, params: ZoneDistanceDecay(value, track_individual_feet=params.doubles_track_individual_feet),
    ),
)


def _is_active(value: Any) -> bool:
    return value is not None and value is not False


def build_hard_constraints(params: GeneratorParameters) -> List[HardConstraint]:
    rules: List[HardConstraint] = []
    for field_name, factory in _HARD_RULES:
        value = getattr(params, field_name)
        if _is_active(value):
            rules.append(factory(value, params))
    return rules


def build_soft_penalties(params: GeneratorParameters) -> List[SoftPenalty]:
    rules: List[SoftPenalty] = []
    for field_name, factory in _SOFT_RULES:
        value = getattr(params, field_name)
        if _is_active(value):
            rules.append(factory(value, params))
    return rules

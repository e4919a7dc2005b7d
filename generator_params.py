# -*- coding: utf-8 -*-
########################
# generator_params.py
########################
# Purpose:
# - Validated, immutable parameter snapshot for the step Generator.
#
# Design notes:
# - Three kinds of fields:
#   - hard limits (Optional[float] / Optional[int]) that eliminate candidate columns
#   - Decay(threshold, base) pairs that multiply candidate weights
#   - flags that change control flow, plus values only the simfile layer reads
#     (remove_jumps, min_difficulty, max_difficulty)
# - Every multiplier must be > 0 so candidate weights never collapse to zero.
# - Which field feeds which rule is declared in step_rules.py, not here.
#
########################
# Interfaces:
# Public models:
# - Decay(threshold: float, base: float)
#   - factor(measured: float) -> float
# - GeneratorParameters(...)
#   - with_seed(seed: Optional[int]) -> GeneratorParameters
#
########################

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from foot import Foot


class Decay(BaseModel):
    """Soft penalty: weight *= base ** (measured - threshold) past the threshold."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    threshold: float = Field(description="Amount that is free of penalty.")
    base: float = Field(gt=0.0, description="Multiplier per unit over the threshold.")

    def factor(self, measured: float) -> float:
        over = float(measured) - float(self.threshold)
        if over > 0.0:
            return float(self.base) ** over
        return 1.0


def _coerce_decay(value: Any) -> Any:
    if isinstance(value, (tuple, list)):
        if len(value) != 2:
            raise ValueError("decay must be a (threshold, base) pair")
        return {"threshold": value[0], "base": value[1]}
    return value


class GeneratorParameters(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    seed: Optional[int] = Field(default=None, ge=0, description="Explicit RNG seed.")
    first_foot: Optional[Foot] = Field(default=None, description="Foot that places the first step.")

    disallow_footswitch: bool = False
    max_repeated: Optional[int] = Field(default=None, ge=1)
    repeated_decay: Optional[Decay] = None
    other_foot_repeat_decay: Optional[float] = Field(default=None, gt=0.0)

    max_dist_between_feet: Optional[float] = Field(default=None, ge=0.0)
    max_dist_between_feet_crossover_exempt: Optional[float] = Field(default=None, ge=0.0)
    max_dist_between_feet_if_crossover: Optional[float] = Field(default=None, ge=0.0)
    dist_between_feet_decay: Optional[Decay] = None

    max_dist_between_steps: Optional[float] = Field(default=None, ge=0.0)
    dist_between_steps_decay: Optional[Decay] = None
    max_horizontal_dist_between_steps: Optional[float] = Field(default=None, ge=0.0)
    max_horizontal_dist_between_steps_crossover_exempt: Optional[float] = Field(default=None, ge=0.0)
    max_horizontal_dist_between_steps_if_crossover: Optional[float] = Field(default=None, ge=0.0)
    horizontal_dist_between_steps_decay: Optional[Decay] = None
    max_vertical_dist_between_steps: Optional[float] = Field(default=None, ge=0.0)
    vertical_dist_between_steps_decay: Optional[Decay] = None

    max_horizontal_dist_between_4_steps_both_feet: Optional[float] = Field(default=None, ge=0.0)
    horizontal_dist_between_3_steps_decay: Optional[Decay] = None
    horizontal_dist_between_3_steps_same_foot_decay: Optional[Decay] = None

    max_angle: Optional[float] = Field(default=None, ge=0.0)
    angle_decay: Optional[Decay] = None
    max_turn: Optional[float] = Field(default=None, ge=0.0)
    turn_decay: Optional[Decay] = None
    crossover_multiplier: Optional[float] = Field(default=None, gt=0.0)
    max_bar_angle: Optional[float] = None
    bar_angle_decay: Optional[Decay] = None

    preserve_input_repetitions: Optional[float] = Field(
        default=None,
        gt=0.0,
        description="Replay repeated input columns; the value penalizes spurious output repeats.",
    )

    doubles_movement: Optional[Decay] = None
    doubles_dist_from_side: Optional[float] = Field(default=None, ge=0.0)
    doubles_steps_per_dist: Optional[float] = Field(default=None, gt=0.0)
    doubles_track_individual_feet: bool = False

    disallow_foot_opposite_side: bool = False
    remove_jumps: bool = False
    min_difficulty: Optional[int] = None
    max_difficulty: Optional[int] = None

    @field_validator(
        "repeated_decay",
        "dist_between_feet_decay",
        "dist_between_steps_decay",
        "horizontal_dist_between_steps_decay",
        "vertical_dist_between_steps_decay",
        "horizontal_dist_between_3_steps_decay",
        "horizontal_dist_between_3_steps_same_foot_decay",
        "angle_decay",
        "turn_decay",
        "bar_angle_decay",
        "doubles_movement",
        mode="before",
    )
    @classmethod
    def accept_decay_pairs(cls, value: Any) -> Any:
        return _coerce_decay(value)

    @model_validator(mode="after")
    def check_difficulty_bounds(self) -> GeneratorParameters:
        if self.min_difficulty is not None and self.max_difficulty is not None:
            if self.min_difficulty > self.max_difficulty:
                raise ValueError("min_difficulty must not exceed max_difficulty")
        return self

    def with_seed(self, seed: Optional[int]) -> GeneratorParameters:
        return self.model_copy(update={"seed": seed})


def _run_unit_tests() -> None:
    params = GeneratorParameters(repeated_decay=(2, 0.5))
    assert params.repeated_decay == Decay(threshold=2.0, base=0.5)
    assert params.repeated_decay.factor(3) == 0.5
    assert params.repeated_decay.factor(2) == 1.0
    assert params.with_seed(7).seed == 7

    try:
        GeneratorParameters(turn_decay=(1.0, 0.0))
    except ValueError:
        pass
    else:
        raise AssertionError("Expected ValueError for a zero decay base")

    try:
        GeneratorParameters(min_difficulty=9, max_difficulty=3)
    except ValueError:
        pass
    else:
        raise AssertionError("Expected ValueError for inverted difficulty bounds")


if __name__ == "__main__":
    _run_unit_tests()
    print("generator_params.py: ok")

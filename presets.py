# -*- coding: utf-8 -*-
########################
# presets.py
########################
# Purpose:
# - Map the CLI's coarse knobs (crossover level, vroom, footswitches, ...) to a
#   full GeneratorParameters set.
#
# Design notes:
# - Preset values are tuned so that every combination can always find a column
#   on every style. tests/test_presets.py converts a long random chart with each
#   combination to keep that true.
# - Crossovers get their own tighter limits (feet distance always, horizontal
#   step distance with more_easy_crossovers).
# - The own-half rule is enabled only on single-pad styles without crossovers.
#   This departs from the older preset table, which enabled it on every style
#   without crossovers; wider styles rely on the drift zone instead.
#
########################
# Interfaces:
# Public functions:
# - create_params(*, to_style: Style, crossovers: int = 0, more_easy_crossovers: bool = False,
#                 vroom: bool = False, preserve_input_repetitions: bool = False,
#                 disallow_footswitch: bool = True, seed: Optional[int] = None,
#                 min_difficulty: Optional[int] = None, max_difficulty: Optional[int] = None)
#   -> GeneratorParameters
#
########################

from __future__ import annotations

import math
from typing import Optional

from generator_params import GeneratorParameters
from style import Style


_SINGLE_PAD_MAX_X = 2.0


def _is_single_pad(style: Style) -> bool:
    return style.max_x_coord() <= _SINGLE_PAD_MAX_X + 1e-9


def create_params(
    *,
    to_style: Style,
    crossovers: int = 0,
    more_easy_crossovers: bool = False,
    vroom: bool = False,
    preserve_input_repetitions: bool = False,
    disallow_footswitch: bool = True,
    seed: Optional[int] = None,
    min_difficulty: Optional[int] = None,
    max_difficulty: Optional[int] = None,
) -> GeneratorParameters:
    if crossovers < 0:
        raise ValueError(f"crossovers must be >= 0, got {crossovers}")

    has_crossovers = crossovers != 0
    moves_more = has_crossovers or vroom

    return GeneratorParameters(
        seed=seed,
        disallow_footswitch=bool(disallow_footswitch),
        repeated_decay=None if preserve_input_repetitions else (1, 0.1),
        other_foot_repeat_decay=0.3,
        max_dist_between_feet=3.9 if to_style is Style.PUMP_DOUBLES_BRACKETS else 2.9,
        max_dist_between_feet_if_crossover=2.5,
        max_dist_between_steps=2.9 if moves_more else 2.1,
        dist_between_steps_decay=(1.5, 0.3),
        max_horizontal_dist_between_steps=None if moves_more else 1.0,
        max_horizontal_dist_between_steps_if_crossover=1.9 if more_easy_crossovers else None,
        max_horizontal_dist_between_4_steps_both_feet=(
            None if (moves_more or preserve_input_repetitions) else 2.5
        ),
        horizontal_dist_between_3_steps_decay=(1.0, 0.4 if moves_more else 0.3),
        max_angle=math.pi * (0.5 + 0.3 * float(crossovers)),
        max_turn=math.pi if crossovers > 1 else math.pi * 3.0 / 4.0,
        crossover_multiplier=2.0 if more_easy_crossovers else None,
        bar_angle_decay=(0.0, 0.4 if moves_more else 0.2),
        preserve_input_repetitions=(
            (0.001 if has_crossovers else 0.0001) if preserve_input_repetitions else None
        ),
        doubles_movement=(0.5, 0.02),
        doubles_dist_from_side=0.0 if vroom else None,
        doubles_steps_per_dist=2.5 if vroom else None,
        doubles_track_individual_feet=not vroom and not has_crossovers,
        disallow_foot_opposite_side=not has_crossovers and _is_single_pad(to_style),
        remove_jumps=has_crossovers,
        min_difficulty=min_difficulty,
        max_difficulty=max_difficulty,
    )

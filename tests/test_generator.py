import math

import pytest

from foot import Foot
from generator import Generator, NoValidColumnError, Zone, choose_weighted
from generator_params import GeneratorParameters
from style import Style


def _generator(style: Style, first_foot: Foot = Foot.LEFT, **fields) -> Generator:
    return Generator(style, GeneratorParameters(first_foot=first_foot, **fields))


def _commit_all(generator: Generator, *cols: int) -> None:
    for col in cols:
        generator.commit(col)


def test_choose_weighted() -> None:
    assert choose_weighted([5], [0.1], 0.05) == 5
    assert choose_weighted([5, 6], [0.1, 0.1], 0.05) == 5
    assert choose_weighted([5, 6], [0.1, 0.1], 0.15) == 6
    assert choose_weighted([5, 6], [0.1, 0.1], 0.25) == 6


def test_zone_moves_linearly() -> None:
    zone = Zone(start_x=1.0, end_x=3.0, total_steps=4)
    assert zone.current_x() == 1.0
    zone.step()
    zone.step()
    assert zone.current_x() == 2.0
    assert not zone.is_done()
    zone.step()
    zone.step()
    assert zone.is_done()
    assert zone.current_x() == 3.0


@pytest.mark.parametrize("seed", [0, 1, 2, 99, 123456])
def test_first_steps_use_initial_columns(seed: int) -> None:
    generator = _generator(Style.ITG_SINGLES, seed=seed)
    assert generator.advance(2) == 0
    assert generator.advance(1) == 3

    generator = _generator(Style.PUMP_DOUBLES, first_foot=Foot.RIGHT, seed=seed)
    assert generator.advance(0) == 5
    assert generator.advance(0) == 4


def test_feet_alternate() -> None:
    generator = Generator(Style.ITG_DOUBLES, GeneratorParameters(seed=4, disallow_footswitch=True))
    foot = generator.next_foot
    for index in range(40):
        generator.advance(index % 4)
        foot = foot.other()
        assert generator.next_foot is foot


def test_footswitch() -> None:
    generator = _generator(Style.ITG_SINGLES, disallow_footswitch=True)
    _commit_all(generator, 0, 3)
    assert generator.valid_columns() == [0, 1, 2]


def test_max_repeated() -> None:
    generator = _generator(Style.ITG_SINGLES, max_repeated=2)
    _commit_all(generator, 0, 3)
    assert generator.valid_columns() == [0, 1, 2, 3]
    generator.commit(0)
    assert generator.valid_columns() == [0, 1, 2, 3]
    generator.commit(3)
    assert generator.valid_columns() == [1, 2, 3]
    generator.commit(0)
    assert generator.valid_columns() == [0, 1, 2]


def test_max_dist_between_feet() -> None:
    generator = _generator(Style.ITG_DOUBLES, first_foot=Foot.RIGHT, max_dist_between_feet=2.0)
    _commit_all(generator, 3, 0)
    assert generator.valid_columns() == [0, 1, 2, 3]
    generator.commit(7)
    assert generator.valid_columns() == [4, 5, 6, 7]


def test_max_dist_between_steps() -> None:
    generator = _generator(Style.ITG_DOUBLES, max_dist_between_steps=2.0)
    _commit_all(generator, 0, 7)
    assert generator.valid_columns() == [0, 1, 2, 3]
    generator.commit(0)
    assert generator.valid_columns() == [4, 5, 6, 7]


def test_max_horizontal_dist_between_4_steps() -> None:
    generator = _generator(Style.HORIZON_SINGLES, max_horizontal_dist_between_4_steps_both_feet=1.5)
    _commit_all(generator, 2, 8)
    assert generator.valid_columns() == list(range(9))
    _commit_all(generator, 5, 8)
    assert generator.valid_columns() == [0, 1, 2, 3, 4, 5]
    _commit_all(generator, 6, 8)
    assert generator.valid_columns() == list(range(9))
    _commit_all(generator, 5, 8)
    assert generator.valid_columns() == [3, 4, 5, 6, 7, 8]


def test_max_horizontal_dist_between_steps() -> None:
    generator = _generator(Style.HORIZON_SINGLES, max_horizontal_dist_between_steps=1.0)
    _commit_all(generator, 2, 8)
    assert generator.valid_columns() == [0, 1, 2, 3, 4, 5]


def test_max_vertical_dist_between_steps() -> None:
    generator = _generator(Style.HORIZON_SINGLES, max_vertical_dist_between_steps=1.0)
    _commit_all(generator, 0, 8)
    assert generator.valid_columns() == [0, 1, 3, 4, 7, 8]

def test_max_angle() -> None:
    generator = _generator(Style.HORIZON_SINGLES, max_angle=math.pi * 3.0 / 4.0)
    _commit_all(generator, 1, 1)
    assert generator.valid_columns() == [0, 1, 2, 3, 5]

    generator = _generator(Style.HORIZON_SINGLES, first_foot=Foot.RIGHT, max_angle=math.pi * 3.0 / 4.0)
    _commit_all(generator, 7, 7)
    assert generator.valid_columns() == [3, 5, 6, 7, 8]


def test_max_turn() -> None:
    generator = _generator(Style.HORIZON_SINGLES, max_turn=math.pi / 2.0)
    _commit_all(generator, 3, 4)
    assert generator.valid_columns() == [0, 1, 3, 4, 7, 8]
    _commit_all(generator, 5, 4)
    assert generator.valid_columns() == [1, 2, 4, 5, 6, 7]


def test_max_bar_angle() -> None:
    generator = _generator(Style.ITG_SINGLES, max_bar_angle=0.0)
    _commit_all(generator, 0, 1)
    assert generator.valid_columns() == [0, 1, 2]

def test_no_valid_column_is_fatal() -> None:
    generator = _generator(Style.ITG_SINGLES, disallow_footswitch=True, max_dist_between_feet=0.5)
    _commit_all(generator, 0, 3)
    with pytest.raises(NoValidColumnError) as raised:
        generator.advance(1)
    assert raised.value.foot is Foot.LEFT
    assert raised.value.style is Style.ITG_SINGLES
    assert raised.value.other.last_col == 3
    assert "left" in str(raised.value)


def test_repeated_decay() -> None:
    generator = _generator(Style.ITG_SINGLES, repeated_decay=(2, 0.5))
    _commit_all(generator, 0, 3, 0, 3)
    assert generator.weight(0) == 1.0
    generator.commit(0)
    assert generator.weight(3) == 1.0
    generator.commit(3)
    assert generator.weight(0) == 0.5
    assert generator.weight(1) == 1.0
    generator.commit(0)
    assert generator.weight(3) == 0.5


def test_dist_between_feet_decay() -> None:
    generator = _generator(Style.ITG_DOUBLES, first_foot=Foot.RIGHT, dist_between_feet_decay=(1.0, 0.5))
    _commit_all(generator, 4, 3)
    assert generator.weight(0) == pytest.approx(0.5)
    assert generator.weight(3) == 1.0
    assert generator.weight(4) == 1.0
    assert generator.weight(7) == pytest.approx(0.25)


def test_dist_between_steps_decay() -> None:
    generator = _generator(Style.ITG_DOUBLES, dist_between_steps_decay=(1.0, 0.5))
    _commit_all(generator, 3, 5)
    assert generator.weight(0) == pytest.approx(0.5)
    assert generator.weight(3) == 1.0
    assert generator.weight(4) == 1.0
    assert generator.weight(7) == pytest.approx(0.25)


def test_horizontal_dist_between_3_steps_decay() -> None:
    generator = _generator(Style.HORIZON_SINGLES, horizontal_dist_between_3_steps_decay=(1.0, 0.5))
    _commit_all(generator, 2, 8)
    assert [generator.weight(col) for col in range(9)] == [1.0] * 9
    _commit_all(generator, 5, 8)
    assert [generator.weight(col) for col in range(9)] == pytest.approx([1.0] * 6 + [0.5] * 3)
    _commit_all(generator, 6, 8)
    assert [generator.weight(col) for col in range(9)] == [1.0] * 9
    _commit_all(generator, 5, 8)
    assert [generator.weight(col) for col in range(9)] == pytest.approx([0.5] * 3 + [1.0] * 6)

def test_angle_decay() -> None:
    generator = _generator(Style.HORIZON_SINGLES, first_foot=Foot.RIGHT, angle_decay=(math.pi / 2.0, 0.5))
    _commit_all(generator, 7, 7)
    assert generator.weight(6) == 1.0
    assert generator.weight(7) == 1.0
    assert generator.weight(8) == 1.0
    assert generator.weight(3) == pytest.approx(0.5 ** (math.pi / 4.0))
    assert generator.weight(5) == pytest.approx(0.5 ** (math.pi / 4.0))
    assert generator.weight(1) == pytest.approx(0.5 ** (math.pi / 2.0))


def test_turn_decay() -> None:
    generator = _generator(Style.HORIZON_SINGLES, turn_decay=(math.pi / 2.0, 0.5))
    _commit_all(generator, 1, 1)
    assert generator.weight(0) == 1.0
    assert generator.weight(1) == 1.0
    assert generator.weight(2) == 1.0
    assert generator.weight(3) == pytest.approx(0.5 ** (math.pi / 4.0))
    assert generator.weight(5) == pytest.approx(0.5 ** (math.pi / 4.0))
    assert generator.weight(7) == pytest.approx(0.5 ** (math.pi / 2.0))


def test_different_input_decay() -> None:
    generator = _generator(Style.ITG_SINGLES, preserve_input_repetitions=0.5)
    generator.commit(0, 4)
    generator.commit(3, 8)
    assert generator.weight(0, 4) == 1.0
    assert generator.weight(0, 5) == 0.5
    assert generator.weight(1, 4) == 1.0
    assert generator.weight(1, 5) == 1.0


def test_prev_angle_is_continuous() -> None:
    generator = _generator(Style.ITG_SINGLES)
    generator.commit(0)
    expected = [0.0, -0.25, -0.5, -0.25, 0.25, 0.75, 1.0]
    for col, turns in zip([3, 2, 1, 0, 2, 3, 0], expected):
        generator.commit(col)
        assert generator.prev_angle == pytest.approx(turns * math.pi)


def test_repeated_inputs_replay_columns() -> None:
    generator = _generator(Style.HORIZON_DOUBLES, preserve_input_repetitions=0.5)
    assert generator.advance(7) == 7
    assert generator.next_foot is Foot.RIGHT
    assert generator.advance(7) == 7
    assert generator.next_foot is Foot.RIGHT
    assert generator.advance(6) == 10
    assert generator.next_foot is Foot.LEFT
    assert generator.advance(7) == 7
    assert generator.advance(6) == 10

    left = generator.foot_status(Foot.LEFT)
    right = generator.foot_status(Foot.RIGHT)
    assert (left.last_col, left.run_length, left.last_input_col) == (7, 3, 7)
    assert (right.last_col, right.run_length, right.last_input_col) == (10, 2, 6)


def test_foot_status_is_a_copy() -> None:
    generator = _generator(Style.ITG_SINGLES)
    generator.advance(0)
    status = generator.foot_status(Foot.LEFT)
    status.last_col = 2
    assert generator.foot_status(Foot.LEFT).last_col == 0


def test_commit_rejects_unknown_column() -> None:
    generator = _generator(Style.ITG_SINGLES)
    with pytest.raises(IndexError):
        generator.commit(4)


def test_same_seed_same_chart() -> None:
    params = GeneratorParameters(
        seed=2024,
        disallow_footswitch=True,
        max_dist_between_feet=2.9,
        dist_between_steps_decay=(1.5, 0.3),
        doubles_movement=(0.5, 0.02),
    )
    inputs = [(index * 7) % 4 for index in range(300)]
    first = Generator(Style.PUMP_DOUBLES, params)
    second = Generator(Style.PUMP_DOUBLES, params)
    assert [first.advance(col) for col in inputs] == [second.advance(col) for col in inputs]

    third = Generator(Style.PUMP_DOUBLES, params)
    other = Generator(Style.PUMP_DOUBLES, params.with_seed(2025))
    assert [other.advance(col) for col in inputs] != [third.advance(col) for col in inputs]


def test_chosen_columns_satisfy_hard_constraints() -> None:
    params = GeneratorParameters(
        seed=5,
        disallow_footswitch=True,
        max_dist_between_feet=2.9,
        max_dist_between_steps=2.1,
        max_horizontal_dist_between_steps=1.5,
        max_vertical_dist_between_steps=1.0,
        max_angle=math.pi * 0.8,
        max_turn=math.pi * 0.75,
        max_bar_angle=math.pi * 0.1,
        turn_decay=(0.5, 0.5),
        doubles_movement=(0.5, 0.02),
        doubles_track_individual_feet=True,
    )
    generator = Generator(Style.ITG_DOUBLES, params)
    for index in range(400):
        foot = generator.next_foot
        if generator.foot_status(foot).last_col is None:
            generator.advance(index % 4)
            continue
        valid = generator.valid_columns()
        assert 0 < len(valid) < Style.ITG_DOUBLES.num_cols
        assert all(generator.weight(col, index % 4) > 0.0 for col in valid)
        assert generator.advance(index % 4) in valid


def test_zone_alternates_sides() -> None:
    params = GeneratorParameters(
        seed=3,
        doubles_movement=(0.5, 0.02),
        doubles_dist_from_side=0.0,
        doubles_steps_per_dist=2.5,
    )
    generator = Generator(Style.ITG_DOUBLES, params)
    first = generator.zone
    assert first.start_x == 2.5
    assert first.end_x in (0.0, 5.0)
    assert first.total_steps == 7

    for index in range(first.total_steps):
        generator.advance(index % 4)

    second = generator.zone
    assert second is not first
    assert second.start_x == first.end_x
    assert second.end_x == 5.0 - first.end_x
    assert second.total_steps == 13


def test_no_zone_without_doubles_movement() -> None:
    assert _generator(Style.ITG_DOUBLES).zone is None

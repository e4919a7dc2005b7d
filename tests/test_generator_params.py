import pytest
from pydantic import ValidationError

from foot import Foot
from generator_params import Decay, GeneratorParameters


def test_defaults_disable_every_rule() -> None:
    params = GeneratorParameters()
    assert params.seed is None
    assert params.disallow_footswitch is False
    assert params.max_turn is None
    assert params.doubles_movement is None


def test_decay_pairs_are_coerced() -> None:
    params = GeneratorParameters(repeated_decay=(2, 0.5), doubles_movement=[0.5, 0.02])
    assert params.repeated_decay == Decay(threshold=2.0, base=0.5)
    assert params.doubles_movement == Decay(threshold=0.5, base=0.02)


def test_decay_factor() -> None:
    decay = Decay(threshold=1.0, base=0.5)
    assert decay.factor(0.5) == 1.0
    assert decay.factor(1.0) == 1.0
    assert decay.factor(3.0) == pytest.approx(0.25)


@pytest.mark.parametrize(
    "fields",
    [
        {"turn_decay": (1.0, 0.0)},
        {"other_foot_repeat_decay": 0.0},
        {"preserve_input_repetitions": 0.0},
        {"crossover_multiplier": -1.0},
        {"max_repeated": 0},
        {"seed": -1},
        {"min_difficulty": 9, "max_difficulty": 3},
        {"unknown_field": 1},
        {"repeated_decay": (1, 2, 3)},
    ],
)
def test_invalid_parameters_are_rejected(fields) -> None:
    with pytest.raises(ValidationError):
        GeneratorParameters(**fields)


def test_parameters_are_immutable() -> None:
    params = GeneratorParameters(first_foot="left")
    assert params.first_foot is Foot.LEFT
    with pytest.raises(ValidationError):
        params.seed = 3
    assert params.with_seed(3).seed == 3
    assert params.seed is None

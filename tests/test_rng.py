import pytest

from tramp.core.rng import RNG


def test_rng_determinism_same_seed() -> None:
    rng_a = RNG(12345)
    rng_b = RNG(12345)

    ints_a = [rng_a.randint(1, 100) for _ in range(5)]
    ints_b = [rng_b.randint(1, 100) for _ in range(5)]
    floats_a = [rng_a.random() for _ in range(5)]
    floats_b = [rng_b.random() for _ in range(5)]
    choices_a = [rng_a.choice(["a", "b", "c"]) for _ in range(5)]
    choices_b = [rng_b.choice(["a", "b", "c"]) for _ in range(5)]

    assert ints_a == ints_b
    assert floats_a == floats_b
    assert choices_a == choices_b


def test_rng_different_seed() -> None:
    rng_a = RNG(11111)
    rng_b = RNG(22222)

    draws_a = [rng_a.randint(1, 100) for _ in range(5)]
    draws_b = [rng_b.randint(1, 100) for _ in range(5)]

    assert draws_a != draws_b


def test_rng_string_seed_is_stable() -> None:
    first = RNG("event:festival:0:12")
    second = RNG("event:festival:0:12")
    other = RNG("event:festival:1:12")

    draws = [first.random() for _ in range(3)]
    assert draws == [second.random() for _ in range(3)]
    assert draws != [other.random() for _ in range(3)]


def test_rng_sample_returns_unique_items() -> None:
    picked = RNG(3).sample(["a", "b", "c", "d"], 3)
    assert len(set(picked)) == 3
    with pytest.raises(ValueError):
        RNG(3).sample(["a"], 2)


def test_rng_choice_rejects_empty_sequence() -> None:
    with pytest.raises(ValueError):
        RNG(1).choice([])

"""Deterministic RNG wrapper built on top of random.Random."""
from __future__ import annotations

from random import Random
from typing import MutableSequence, Sequence, TypeVar

T_co = TypeVar("T_co")

Seed = int | str


class RNG:
    """Wrapper around random.Random that provides deterministic helpers.

    String seeds are accepted so callers can key a stream on a readable
    identifier such as ``"event:festival:0:12"``; the same key always yields
    the same sequence.
    """

    def __init__(self, seed: Seed) -> None:
        self._random = Random(seed)

    def randint(self, a: int, b: int) -> int:
        """Return a random integer N such that a <= N <= b."""
        return self._random.randint(a, b)

    def random(self) -> float:
        """Return the next random floating point number in the range [0.0, 1.0)."""
        return self._random.random()

    def uniform(self, a: float, b: float) -> float:
        """Return a random float between a and b."""
        return self._random.uniform(a, b)

    def choice(self, seq: Sequence[T_co]) -> T_co:
        """Return a random element from the non-empty sequence."""
        if not seq:
            raise ValueError("Cannot choose from an empty sequence.")
        return self._random.choice(seq)

    def sample(self, seq: Sequence[T_co], k: int) -> list[T_co]:
        """Return k unique elements drawn from the sequence."""
        if k > len(seq):
            raise ValueError("Sample larger than population.")
        return self._random.sample(list(seq), k)

    def shuffle(self, seq: MutableSequence[T_co]) -> None:
        """Shuffle the sequence in-place."""
        self._random.shuffle(seq)

"""
Seeded random source for item generation. One ItemRandom per generation call, threaded
through every variation and drawing step so a seed fully reproduces an item.
"""
import math
import random
import secrets
from typing import Sequence, TypeVar

T = TypeVar("T")


def new_seed() -> int:
    """Fresh seed for requests that do not carry one. Uses secrets so unseeded runs do not repeat."""
    return secrets.randbits(31)


class ItemRandom:
    """Uniform int / float / choice draws from one seeded stream."""

    def __init__(self, seed: int | None = None) -> None:
        self.seed = new_seed() if seed is None else int(seed)
        self._rng = random.Random(self.seed)

    def randint(self, low: float, high: float) -> int:
        """Inclusive integer in [ceil(low), floor(high)]. An empty range returns ceil(low)."""
        lo = math.ceil(low)
        hi = math.floor(high)
        if hi <= lo:
            return lo
        return self._rng.randint(lo, hi)

    def uniform(self, low: float, high: float) -> float:
        """Float in [low, high)."""
        return low + self._rng.random() * (high - low)

    def random(self) -> float:
        return self._rng.random()

    def chance(self, probability: float) -> bool:
        return self._rng.random() < probability

    def choice(self, sequence: Sequence[T]) -> T | None:
        if not sequence:
            return None
        return sequence[self._rng.randrange(len(sequence))]

    def sign(self) -> int:
        """-1 or 1."""
        return -1 if self._rng.random() < 0.5 else 1

    def weighted_choice(self, items: Sequence[T], weights: Sequence[float]) -> T | None:
        """Pick one item with probability proportional to its weight."""
        if not items:
            return None
        total = sum(max(0.0, w) for w in weights)
        if total <= 0:
            return self.choice(items)
        r = self._rng.random() * total
        for item, w in zip(items, weights):
            r -= max(0.0, w)
            if r <= 0:
                return item
        return items[-1]

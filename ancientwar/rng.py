from __future__ import annotations

"""Seeded pseudo-random generator.

The engine never touches the ``random`` module: every chance roll goes through
a :class:`RandomGenerator` so that a game can be replayed exactly from its
seed and the list of actions taken.
"""

MODULUS = 2147483647
MULTIPLIER = 16807


class RandomGenerator:
    """Park-Miller minimal standard linear congruential generator."""

    def __init__(self, seed: float) -> None:
        # Remainder takes the sign of the seed.
        whole = int(seed)
        value = abs(whole) % MODULUS
        if whole < 0:
            value = -value
        if value <= 0:
            value += MODULUS - 1
        self.seed = value

    def next(self) -> float:
        """Advance the generator and return a float in ``[0, 1)``."""
        self.seed = (self.seed * MULTIPLIER) % MODULUS
        return (self.seed - 1) / (MODULUS - 1)

    def next_in_range(self, minimum: float, maximum: float) -> float:
        return minimum + (maximum - minimum) * self.next()

    def clone(self) -> "RandomGenerator":
        return RandomGenerator(self.seed)

    def get_state(self) -> int:
        return self.seed

    def __repr__(self) -> str:
        return f"RandomGenerator(seed={self.seed})"


def hash_string(text: str) -> int:
    """32-bit signed string hash (``h = h*31 + c``)."""
    value = 0
    for char in text:
        value = (value * 31 + ord(char)) & 0xFFFFFFFF
    if value >= 0x80000000:
        value -= 0x100000000
    return value


def rng_from_string(text: str) -> RandomGenerator:
    """Create a generator seeded from an arbitrary string such as a save name."""
    return RandomGenerator(abs(hash_string(text)) + 1)


__all__ = ["RandomGenerator", "hash_string", "rng_from_string"]

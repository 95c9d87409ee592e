"""
Deterministic randomness for the pattern generators.

Everything here is a pure function of its string seed so the same parameters
paint the same pixels on every platform. Python's built-in hash() is salted
per process and must not be used for seeding.
"""

import math


def fold_string(text):
    """Fold a string into a signed 32-bit integer (h = h*31 + code)."""
    h = 0
    for ch in text:
        h = (h * 31 + ord(ch)) & 0xFFFFFFFF
    if h >= 0x80000000:
        h -= 0x100000000
    return h


class SeededRandom:
    """Linear congruential sequence of floats in [0, 1) from a string seed."""

    MULTIPLIER = 9301
    INCREMENT = 49297
    MODULUS = 233280

    def __init__(self, seed):
        self.state = abs(fold_string(seed))

    def next(self):
        self.state = (self.state * self.MULTIPLIER + self.INCREMENT) % self.MODULUS
        return self.state / self.MODULUS

    def randint(self, n):
        """Integer in [0, n) drawn from one step of the sequence."""
        return int(self.next() * n)

    def choice(self, items):
        return items[self.randint(len(items))]


def noise(x, seed_offset=0.0):
    """Cheap periodic pseudo-noise in [0, 1)."""
    n = math.sin(x + seed_offset) * 43758.5453
    return n - math.floor(n)

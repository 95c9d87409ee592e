"""
Slow drift of parameters over wall-clock time for idle and animated modes.

The evolution never renders; it only hands back the record to render this tick.
"""

import logging
import math
import time

from . import config
from .parameters import MAX_COMPLEXITY, MIN_COMPLEXITY, clamp

logger = logging.getLogger(__name__)

# Real milliseconds between seed jumps
SEED_CYCLE_MS = 30000


def _now_ms():
    return time.time() * 1000.0


class TemporalEvolution:
    """Complexity breathes on a sine; the seed steps every ~30 seconds."""

    def __init__(self, base_parameters, speed=None, clock=None):
        self.clock = clock or _now_ms
        self.base_parameters = base_parameters
        self.speed = config.EVOLUTION_SPEED if speed is None else max(0.0, speed)
        self.start_time = self.clock()
        self.closed = False

    def _elapsed(self):
        return (self.clock() - self.start_time) * self.speed

    def evolved_parameters(self):
        base = self.base_parameters
        if self.closed:
            return base

        elapsed = self._elapsed()
        complexity = clamp(base.complexity + math.sin(elapsed * 0.5) * 0.1,
                           MIN_COMPLEXITY, MAX_COMPLEXITY)

        # A stopped clock never leaves the first cycle
        cycle = math.floor((self.clock() - self.start_time) / SEED_CYCLE_MS) if self.speed > 0 else 0

        return base.with_overrides(complexity=complexity, seed=f"{base.seed}{cycle}")

    def evolution_phase(self):
        """Position within the current 2*pi cycle, 0-1."""
        return (self._elapsed() % (math.pi * 2)) / (math.pi * 2)

    def reset(self, new_base_parameters=None):
        self.start_time = self.clock()
        self.closed = False
        if new_base_parameters is not None:
            self.base_parameters = new_base_parameters

    def update_base(self, new_parameters):
        """Swap the base record without restarting the clock."""
        self.base_parameters = new_parameters

    def set_speed(self, speed):
        self.speed = max(0.0, speed)

    def close(self):
        if not self.closed:
            logger.debug("Temporal evolution stopped")
        self.closed = True


def smooth_step(edge0, edge1, x):
    t = clamp((x - edge0) / (edge1 - edge0), 0.0, 1.0)
    return t * t * (3 - 2 * t)


def time_noise(t, frequency=1.0):
    """Three detuned sines, roughly in [-1, 1]."""
    return (math.sin(t * frequency)
            + math.sin(t * frequency * 1.618) * 0.5
            + math.sin(t * frequency * 2.618) * 0.25) / 1.75


def breathing_scale(phase, intensity=0.02):
    return 1 + math.sin(phase * math.pi * 2) * intensity

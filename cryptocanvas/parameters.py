"""
Generation parameters shared by every renderer, code generator and codec.
"""

import dataclasses
import logging
import math
import random
from dataclasses import dataclass
from typing import Optional

from . import config

logger = logging.getLogger(__name__)

# Valid values; the first entry of each list is the fallback
PATTERN_TYPES = ['linear', 'texture', 'geometric', 'matrix', 'ascii']
COLOR_SCHEMES = ['monochrome', 'grayscale', 'accent']
ENCRYPTION_TYPES = ['binary', 'hash', 'cipher', 'signature']
CODE_POSITIONS = [
    'bottomLeft', 'topLeft', 'topRight', 'bottomRight',
    'leftEdge', 'rightEdge', 'bottomEdge', 'none',
]

MIN_COMPLEXITY = 0.1
MAX_COMPLEXITY = 1.0
DEFAULT_COMPLEXITY = 0.5


def clamp(value, low, high):
    return max(low, min(high, value))


def clamp_complexity(value):
    """Coerce to float and clamp into [0.1, 1.0]; garbage becomes the default."""
    try:
        value = float(value)
    except (TypeError, ValueError):
        return DEFAULT_COMPLEXITY
    if math.isnan(value):
        return DEFAULT_COMPLEXITY
    return clamp(value, MIN_COMPLEXITY, MAX_COMPLEXITY)


def random_seed(rng=random):
    """Short base-36 seed for callers that need fresh entropy."""
    return ''.join(rng.choice('0123456789abcdefghijklmnopqrstuvwxyz') for _ in range(6))


def _pick(name, value, valid):
    if value in valid:
        return value
    logger.warning("Unknown %s %r, using %r", name, value, valid[0])
    return valid[0]


@dataclass(frozen=True)
class GenerationParameters:
    """Caller-owned record that fully determines one rendering.

    Values are normalized on construction: complexity is clamped,
    unknown enum values fall back to the first valid entry, and the canvas
    is at least one pixel wide.
    """

    seed: str
    pattern_type: str = 'linear'
    complexity: float = DEFAULT_COMPLEXITY
    color_scheme: str = 'monochrome'
    canvas_size: int = config.DEFAULT_CANVAS_SIZE
    text_input: Optional[str] = None
    encryption_type: str = 'binary'
    code_position: str = 'bottomLeft'
    movement: bool = False

    def __post_init__(self):
        if not self.seed:
            raise ValueError("seed must be a non-empty string")

        try:
            size = int(self.canvas_size)
        except (TypeError, ValueError, OverflowError):
            size = config.DEFAULT_CANVAS_SIZE

        normalized = {
            'seed': str(self.seed),
            'pattern_type': _pick('pattern type', self.pattern_type, PATTERN_TYPES),
            'complexity': clamp_complexity(self.complexity),
            'color_scheme': _pick('color scheme', self.color_scheme, COLOR_SCHEMES),
            'canvas_size': max(1, size),
            'encryption_type': _pick('encryption type', self.encryption_type, ENCRYPTION_TYPES),
            'code_position': _pick('code position', self.code_position, CODE_POSITIONS),
            'movement': bool(self.movement),
        }
        for key, value in normalized.items():
            object.__setattr__(self, key, value)

    def with_overrides(self, **overrides):
        """New normalized record with the given fields replaced."""
        return dataclasses.replace(self, **overrides)

    def to_dict(self):
        return dataclasses.asdict(self)

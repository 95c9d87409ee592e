"""
Batch export of parameter variations.

Each item renders on its own canvas, so a batch can run alongside an
interactive preview without sharing any drawing state.
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from .art_engine import ArtEngine
from .crypto import generate_hash
from .export import encode_image, export_filename
from .parameters import (
    CODE_POSITIONS,
    COLOR_SCHEMES,
    ENCRYPTION_TYPES,
    MAX_COMPLEXITY,
    MIN_COMPLEXITY,
    PATTERN_TYPES,
    clamp,
)
from .random_source import SeededRandom

logger = logging.getLogger(__name__)


@dataclass
class BatchOptions:
    count: int
    format: str = 'png'
    size: int = 512
    vary_parameters: bool = False
    name_prefix: str = 'cryptocanvas'


@dataclass
class ExportedArtwork:
    filename: str
    data: bytes
    parameters: object
    artwork_hash: str


@dataclass
class BatchResult:
    success: bool
    exported: int
    errors: List[str] = field(default_factory=list)
    artworks: List[ExportedArtwork] = field(default_factory=list)


def vary_value(low, high, progress, rng):
    """Linear sweep across the batch plus bounded jitter."""
    linear = low + (high - low) * progress
    jitter = (rng.next() - 0.5) * 0.3 * (high - low)
    return clamp(linear + jitter, low, high)


def pick_variant(options, current, rng):
    """Keep current 70% of the time, otherwise any other option."""
    if rng.next() < 0.7:
        return current
    others = [opt for opt in options if opt != current]
    if not others:
        return current
    return others[rng.randint(len(others))]


def vary_parameters(base, index, total):
    progress = index / (total - 1) if total > 1 else 0.0
    rng = SeededRandom(f"{base.seed}{index}")

    return base.with_overrides(
        complexity=vary_value(MIN_COMPLEXITY, MAX_COMPLEXITY, progress, rng),
        pattern_type=pick_variant(PATTERN_TYPES, base.pattern_type, rng),
        color_scheme=pick_variant(COLOR_SCHEMES, base.color_scheme, rng),
        encryption_type=pick_variant(ENCRYPTION_TYPES, base.encryption_type, rng),
        code_position=pick_variant(CODE_POSITIONS, base.code_position, rng),
        seed=f"{base.seed}-{index}-{math.floor(rng.next() * 1000)}",
    )


class BatchExporter:
    """Renders and encodes batches of variations.

    Uses its own ArtEngine unless one is passed in. A shared engine is not
    reentrant, so do not pass the engine an interactive preview renders with.
    """

    def __init__(self, engine=None):
        self.engine = engine or ArtEngine()

    def variant(self, base, index, options):
        if options.vary_parameters:
            params = vary_parameters(base, index, options.count)
        else:
            params = base.with_overrides(seed=f"{base.seed}-{index}")
        return params.with_overrides(canvas_size=options.size)

    def export_batch(self, base, options, sink: Optional[Callable[[str, bytes], None]] = None):
        """
        Render options.count variations of base.

        Args:
            base: GenerationParameters to vary
            options: BatchOptions
            sink: Called with (filename, data) for each artwork; this is where
                callers persist. Errors raised here count as item failures.

        Returns:
            BatchResult with per-item errors; one failure never stops the batch.
        """
        result = BatchResult(success=False, exported=0)

        for i in range(options.count):
            try:
                params = self.variant(base, i, options)
                image = self.engine.create_image(params)
                artwork_hash = generate_hash(params)
                filename = export_filename(options.name_prefix, i + 1, artwork_hash, options.format)
                data = encode_image(image, options.format)

                if sink is not None:
                    sink(filename, data)

                result.artworks.append(ExportedArtwork(filename, data, params, artwork_hash))
                result.exported += 1
            except Exception as e:
                logger.warning("Batch item %d failed: %s", i + 1, e)
                result.errors.append(f"Export {i + 1}: {e}")

        result.success = result.exported > 0
        logger.info("Batch export finished: %d/%d exported", result.exported, options.count)
        return result


def estimate_batch_time(count, size):
    """Rough human-readable duration for a batch."""
    total_ms = count * 500 * (size / 512) ** 2
    if total_ms < 60000:
        return f"~{math.ceil(total_ms / 1000)}s"
    return f"~{math.ceil(total_ms / 60000)}m"

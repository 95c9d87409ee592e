"""
Audio feature feed.

Turns blocks of samples from a caller-supplied source into normalized
bass/mid/treble/volume energies and a beat edge trigger, once per tick.

Lifecycle is explicit and owned by the caller:

    analyzer = AudioAnalyzer()
    handle = analyzer.acquire(source)      # None if the source is unusable
    features = analyzer.poll(handle)       # None when nothing can be read
    analyzer.release(handle)               # idempotent

A source is any object with ``read(frames)`` returning a sequence of float
samples in [-1, 1], and optionally ``close()``.
"""

import logging
import time
from dataclasses import dataclass, field
from typing import List, Optional

import numpy as np

logger = logging.getLogger(__name__)

# Bin ranges of the 128-bin byte spectrum
BASS_BINS = (0, 4)
MID_BINS = (4, 16)
TREBLE_BINS = (16, 32)


def _now_ms():
    return time.monotonic() * 1000.0


@dataclass
class AudioFrequencyData:
    """Features for a single tick; consumed by one render and then dropped."""

    raw: List[int]
    bass: float
    mid: float
    treble: float
    volume: float
    beat: bool = False
    timestamp: float = 0.0


class BeatDetector:
    """Threshold edge detector on bass energy with a refractory period."""

    def __init__(self, threshold=0.3, refractory_ms=200.0, clock=None):
        self.threshold = threshold
        self.refractory_ms = refractory_ms
        self.clock = clock or _now_ms
        self.last_beat_time = None

    def detect(self, bass, now_ms=None):
        now = self.clock() if now_ms is None else now_ms
        if bass <= self.threshold:
            return False
        if self.last_beat_time is not None and now - self.last_beat_time <= self.refractory_ms:
            return False
        self.last_beat_time = now
        return True

    def reset(self):
        self.last_beat_time = None


def band_energy(bins, start, end):
    """Mean of bins[start:end] normalized to 0-1 by the full band width."""
    total = float(np.sum(np.asarray(bins[start:end], dtype=np.float64)))
    return total / (end - start) / 255.0


def features_from_bins(bins, beat_detector, now_ms):
    """Compute tick features from a byte spectrum (values 0-255)."""
    bins = [int(b) for b in bins]
    bass = band_energy(bins, *BASS_BINS)
    volume = (sum(bins) / len(bins) / 255.0) if bins else 0.0

    return AudioFrequencyData(
        raw=bins,
        bass=bass,
        mid=band_energy(bins, *MID_BINS),
        treble=band_energy(bins, *TREBLE_BINS),
        volume=volume,
        beat=beat_detector.detect(bass, now_ms),
        timestamp=now_ms,
    )


@dataclass
class AudioHandle:
    source: object
    beat_detector: BeatDetector
    smoothed: Optional[np.ndarray] = None
    released: bool = False


class AudioAnalyzer:
    """Spectrum analysis of an audio source, polled once per animation tick."""

    def __init__(self, fft_size=256, smoothing=0.8, min_db=-100.0, max_db=-30.0,
                 beat_threshold=0.3, refractory_ms=200.0, clock=None):
        if fft_size < 64 or fft_size & (fft_size - 1):
            raise ValueError(f"fft_size must be a power of two >= 64, got {fft_size}")
        self.fft_size = fft_size
        self.smoothing = smoothing
        self.min_db = min_db
        self.max_db = max_db
        self.beat_threshold = beat_threshold
        self.refractory_ms = refractory_ms
        self.clock = clock or _now_ms
        self._window = np.blackman(fft_size)

    @property
    def bin_count(self):
        return self.fft_size // 2

    def acquire(self, source):
        """Start analysis on source. Returns None if it cannot be read from."""
        if source is None or not callable(getattr(source, 'read', None)):
            logger.warning("Audio source %r has no read(); audio reactivity disabled", source)
            return None

        detector = BeatDetector(self.beat_threshold, self.refractory_ms, self.clock)
        logger.info("Audio analysis initialized (%d bins)", self.bin_count)
        return AudioHandle(source=source, beat_detector=detector)

    def poll(self, handle):
        """Read one block and return its features, or None."""
        if handle is None or handle.released:
            return None

        try:
            samples = np.asarray(handle.source.read(self.fft_size), dtype=np.float64)
        except Exception as e:
            # Decode errors and lost devices only disable reactivity
            logger.warning("Audio read failed: %s", e)
            return None

        if samples.size == 0:
            return None

        bins = self._byte_spectrum(handle, samples)
        return features_from_bins(bins, handle.beat_detector, self.clock())

    def release(self, handle):
        if handle is None or handle.released:
            return
        handle.released = True
        handle.smoothed = None

        close = getattr(handle.source, 'close', None)
        if callable(close):
            try:
                close()
            except Exception as e:
                logger.warning("Error closing audio source: %s", e)
        logger.debug("Audio analysis released")

    def _byte_spectrum(self, handle, samples):
        """Windowed FFT magnitudes mapped onto 0-255 like an analyser node."""
        block = np.zeros(self.fft_size, dtype=np.float64)
        block[:min(samples.size, self.fft_size)] = samples[:self.fft_size]

        spectrum = np.abs(np.fft.rfft(block * self._window))[:self.bin_count] / self.fft_size
        if handle.smoothed is not None:
            spectrum = self.smoothing * handle.smoothed + (1.0 - self.smoothing) * spectrum
        handle.smoothed = spectrum

        with np.errstate(divide='ignore'):
            db = 20.0 * np.log10(spectrum)
        scaled = (db - self.min_db) / (self.max_db - self.min_db) * 255.0
        scaled = np.nan_to_num(scaled, nan=0.0, neginf=0.0, posinf=255.0)
        return np.clip(scaled, 0, 255).astype(np.uint8).tolist()

"""
Tests for the audio feature feed.

Covers:
- Band energies from a byte spectrum
- Beat refractory period
- Analyzer lifecycle: acquire / poll / release, failure handling
"""

import numpy as np
import pytest

from cryptocanvas.audio import AudioAnalyzer, AudioFrequencyData, BeatDetector, band_energy, features_from_bins


class SineSource:
    """Endless sine wave at an exact FFT bin."""

    def __init__(self, bin_index, fft_size=256, amplitude=0.8):
        self.bin_index = bin_index
        self.fft_size = fft_size
        self.amplitude = amplitude
        self.closed = 0

    def read(self, frames):
        t = np.arange(frames)
        return self.amplitude * np.sin(2 * np.pi * self.bin_index * t / self.fft_size)

    def close(self):
        self.closed += 1


class BrokenSource:
    def read(self, frames):
        raise OSError("device unplugged")


class EmptySource:
    def read(self, frames):
        return []


def test_band_energy_normalizes_by_width():
    bins = [255] * 4 + [0] * 124
    assert band_energy(bins, 0, 4) == pytest.approx(1.0)
    assert band_energy(bins, 4, 16) == 0.0


def test_features_from_bins(clock):
    bins = [255] * 4 + [0] * 124
    features = features_from_bins(bins, BeatDetector(clock=clock), now_ms=0.0)

    assert isinstance(features, AudioFrequencyData)
    assert features.bass == pytest.approx(1.0)
    assert features.mid == 0.0
    assert features.treble == 0.0
    assert features.volume == pytest.approx(4 / 128)
    assert features.beat is True
    assert len(features.raw) == 128


def test_beat_refractory_period(clock):
    detector = BeatDetector(clock=clock)
    beat_times = []

    for _ in range(300):
        if detector.detect(0.5):
            beat_times.append(clock.now)
        clock.advance(10)

    assert beat_times[0] == 0
    assert len(beat_times) > 1
    assert all(b - a > 200 for a, b in zip(beat_times, beat_times[1:]))


def test_quiet_bass_never_beats(clock):
    detector = BeatDetector(clock=clock)
    assert not any(detector.detect(0.3, now_ms=t * 10) for t in range(100))


def test_analyzer_rejects_bad_fft_size():
    with pytest.raises(ValueError):
        AudioAnalyzer(fft_size=100)


def test_poll_low_tone_is_bass_heavy(clock):
    analyzer = AudioAnalyzer(clock=clock)
    handle = analyzer.acquire(SineSource(bin_index=2))

    features = analyzer.poll(handle)
    assert len(features.raw) == analyzer.bin_count == 128
    assert all(0 <= b <= 255 for b in features.raw)
    assert features.bass > features.treble
    assert 0.0 <= features.volume <= 1.0


def test_poll_high_tone_is_treble_heavy(clock):
    analyzer = AudioAnalyzer(clock=clock)
    handle = analyzer.acquire(SineSource(bin_index=24))

    features = analyzer.poll(handle)
    assert features.treble > features.bass
    assert features.beat is False


def test_unusable_source_disables_audio():
    analyzer = AudioAnalyzer()
    assert analyzer.acquire(None) is None
    assert analyzer.acquire(object()) is None
    assert analyzer.poll(None) is None


def test_read_failures_return_none():
    analyzer = AudioAnalyzer()
    assert analyzer.poll(analyzer.acquire(BrokenSource())) is None
    assert analyzer.poll(analyzer.acquire(EmptySource())) is None


def test_release_is_idempotent():
    analyzer = AudioAnalyzer()
    source = SineSource(bin_index=4)
    handle = analyzer.acquire(source)

    analyzer.release(handle)
    analyzer.release(handle)
    analyzer.release(None)

    assert source.closed == 1
    assert analyzer.poll(handle) is None

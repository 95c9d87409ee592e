"""Tests for parameter normalization."""

import dataclasses

import pytest

from cryptocanvas import config
from cryptocanvas.parameters import GenerationParameters, clamp_complexity, random_seed


@pytest.mark.parametrize('raw, expected', [
    (-5, 0.1),
    (50, 1.0),
    (0.0, 0.1),
    (0.73, 0.73),
    ('abc', 0.5),
    (None, 0.5),
    (float('nan'), 0.5),
])
def test_complexity_is_clamped(raw, expected):
    assert clamp_complexity(raw) == pytest.approx(expected)
    assert GenerationParameters(seed='s', complexity=raw).complexity == pytest.approx(expected)


def test_unknown_enums_fall_back():
    params = GenerationParameters(
        seed='s',
        pattern_type='spiral',
        color_scheme='rainbow',
        encryption_type='rsa',
        code_position='middle',
    )
    assert params.pattern_type == 'linear'
    assert params.color_scheme == 'monochrome'
    assert params.encryption_type == 'binary'
    assert params.code_position == 'bottomLeft'


def test_empty_seed_rejected():
    with pytest.raises(ValueError):
        GenerationParameters(seed='')


def test_canvas_size_at_least_one():
    assert GenerationParameters(seed='s', canvas_size=0).canvas_size == 1
    assert GenerationParameters(seed='s', canvas_size='256').canvas_size == 256


@pytest.mark.parametrize('size', [float('inf'), float('-inf'), float('nan'), 'huge', None])
def test_unusable_canvas_size_gets_default(size):
    assert GenerationParameters(seed='s', canvas_size=size).canvas_size == config.DEFAULT_CANVAS_SIZE


def test_overrides_are_normalized():
    params = GenerationParameters(seed='s', complexity=0.9)
    assert params.with_overrides(complexity=0.9 * 1.3).complexity == 1.0
    assert params.complexity == 0.9


def test_record_is_immutable():
    params = GenerationParameters(seed='s')
    with pytest.raises(dataclasses.FrozenInstanceError):
        params.seed = 'other'


def test_to_dict_field_order():
    keys = list(GenerationParameters(seed='s').to_dict())
    assert keys[0] == 'seed'
    assert 'text_input' in keys


def test_random_seed_shape():
    seed = random_seed()
    assert len(seed) == 6
    assert seed.isalnum()

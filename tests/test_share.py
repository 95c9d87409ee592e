"""Tests for the compact share codec."""

import base64
import json

import pytest

from cryptocanvas import config
from cryptocanvas.parameters import GenerationParameters
from cryptocanvas.share import (
    decode_parameters,
    encode_parameters,
    generate_shareable_url,
    parameters_from_url,
)


@pytest.fixture
def shared():
    return GenerationParameters(
        pattern_type='texture',
        complexity=0.73,
        movement=True,
        color_scheme='grayscale',
        canvas_size=512,
        text_input='hi',
        seed='abc123',
    )


def _encode_text(text):
    return base64.urlsafe_b64encode(text.encode()).decode().rstrip('=')


def _encode_raw(obj):
    return _encode_text(json.dumps(obj))


def test_round_trip(shared):
    decoded = decode_parameters(encode_parameters(shared))

    assert decoded['pattern_type'] == 'texture'
    assert decoded['color_scheme'] == 'grayscale'
    assert decoded['complexity'] == pytest.approx(0.73, abs=0.01)
    assert decoded['movement'] is True
    assert decoded['canvas_size'] == 512
    assert decoded['text_input'] == 'hi'
    assert decoded['seed'] == 'abc123'
    assert GenerationParameters(**decoded) == shared


@pytest.mark.parametrize('pattern', ['linear', 'texture', 'geometric', 'matrix', 'ascii'])
def test_every_pattern_survives(shared, pattern):
    params = shared.with_overrides(pattern_type=pattern)
    assert decode_parameters(encode_parameters(params))['pattern_type'] == pattern


def test_encoding_is_url_safe(shared):
    encoded = encode_parameters(shared.with_overrides(text_input='??>>~~' * 5))
    assert not set(encoded) & {'+', '/', '='}


def test_non_ascii_text_round_trips(shared):
    params = shared.with_overrides(text_input='héllo ✓')
    assert decode_parameters(encode_parameters(params))['text_input'] == 'héllo ✓'


@pytest.mark.parametrize('garbage', ['!!!!', 'bm90IGpzb24', 'a', '', 'WzEsMiwzXQ'])
def test_corrupt_strings_recover_nothing(garbage):
    assert decode_parameters(garbage) is None


def test_missing_fields_get_defaults():
    decoded = decode_parameters(_encode_raw({'p': 'x', 'c': 'lots', 'z': -4}))

    assert decoded['pattern_type'] == 'linear'
    assert decoded['complexity'] == 0.5
    assert decoded['movement'] is False
    assert decoded['color_scheme'] == 'monochrome'
    assert decoded['canvas_size'] == config.DEFAULT_CANVAS_SIZE
    assert decoded['text_input'] == ''
    assert decoded['seed']


def test_shareable_url(shared):
    url = generate_shareable_url(shared, base_url='https://example.test/canvas')
    assert url.startswith('https://example.test/canvas?share=')
    assert parameters_from_url(url)['seed'] == 'abc123'


def test_url_without_share():
    assert parameters_from_url('https://example.test/canvas?x=1') is None


def test_deeply_nested_payload_recovers_nothing():
    assert decode_parameters(_encode_text('[' * 100000 + ']' * 100000)) is None


@pytest.mark.parametrize('payload', [
    '{"z":Infinity,"c":NaN}',
    '{"z":1e400,"c":-Infinity}',
    '{"z":-Infinity,"c":1e400}',
])
def test_non_finite_numbers_get_defaults(payload):
    decoded = decode_parameters(_encode_text(payload))
    assert decoded['canvas_size'] == config.DEFAULT_CANVAS_SIZE
    assert decoded['complexity'] == 0.5


def test_default_size_follows_config(monkeypatch):
    monkeypatch.setattr(config, 'DEFAULT_CANVAS_SIZE', 256)
    assert decode_parameters(_encode_raw({'r': 'abc'}))['canvas_size'] == 256

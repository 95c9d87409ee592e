"""
Compact parameter codec for shareable links.

Parameters are squeezed into single-letter JSON fields and base64url encoded
without padding, e.g. ``?share=eyJwIjoidCIsImMiOjczLC4uLn0``.
"""

import base64
import binascii
import json
import logging
import math
import random
from urllib.parse import parse_qs, urlsplit

from . import config
from .parameters import COLOR_SCHEMES, PATTERN_TYPES, random_seed

logger = logging.getLogger(__name__)

PATTERN_CODES = {name[0]: name for name in PATTERN_TYPES}
COLOR_CODES = {name[0]: name for name in COLOR_SCHEMES}

DEFAULT_COMPLEXITY_PERCENT = 50


def encode_parameters(params):
    compressed = {
        'p': params.pattern_type[0],
        'c': round((params.complexity or 0.5) * 100),
        'm': 1 if params.movement else 0,
        's': params.color_scheme[0],
        'z': params.canvas_size,
        't': params.text_input or '',
        'r': params.seed,
    }
    raw = json.dumps(compressed, separators=(',', ':')).encode('utf-8')
    return base64.urlsafe_b64encode(raw).decode('ascii').rstrip('=')


def _number(value, default):
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return default
    if not value or not math.isfinite(value):
        return default
    return value


def decode_parameters(encoded, rng=random):
    """
    Recover parameter fields from a share string.

    Missing or invalid fields get defaults. Returns None when the string
    cannot be decoded at all.
    """
    try:
        padded = encoded + '=' * (-len(encoded) % 4)
        compressed = json.loads(base64.urlsafe_b64decode(padded.encode('ascii')))
    except (binascii.Error, ValueError, UnicodeError, AttributeError, TypeError, RecursionError) as e:
        logger.warning("Failed to decode parameters: %s", e)
        return None

    if not isinstance(compressed, dict):
        logger.warning("Failed to decode parameters: not an object")
        return None

    size = _number(compressed.get('z'), config.DEFAULT_CANVAS_SIZE)
    text = compressed.get('t')
    seed = compressed.get('r')

    return {
        'pattern_type': PATTERN_CODES.get(compressed.get('p'), 'linear'),
        'complexity': _number(compressed.get('c'), DEFAULT_COMPLEXITY_PERCENT) / 100,
        'movement': bool(compressed.get('m')),
        'color_scheme': COLOR_CODES.get(compressed.get('s'), 'monochrome'),
        'canvas_size': int(size) if size > 0 else config.DEFAULT_CANVAS_SIZE,
        'text_input': text if isinstance(text, str) else '',
        'seed': seed if isinstance(seed, str) and seed else random_seed(rng),
    }


def generate_shareable_url(params, base_url=''):
    return f"{base_url}?share={encode_parameters(params)}"


def parameters_from_url(url, rng=random):
    """Decode the share query argument of a URL, or None if absent."""
    share = parse_qs(urlsplit(url).query).get('share')
    if not share:
        return None
    return decode_parameters(share[0], rng)

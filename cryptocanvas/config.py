"""
Runtime configuration read from the environment.
"""

import os


def _env_int(name, default):
    try:
        return int(os.environ.get(name, default))
    except ValueError:
        return default


def _env_float(name, default):
    try:
        return float(os.environ.get(name, default))
    except ValueError:
        return default


# Default square raster size when the caller leaves it out
DEFAULT_CANVAS_SIZE = max(1, _env_int('CRYPTOCANVAS_CANVAS_SIZE', 512))

# Optional monospace TrueType font for glyph patterns and stamps
FONT_PATH = os.environ.get('CRYPTOCANVAS_FONT') or None

LOG_LEVEL = os.environ.get('CRYPTOCANVAS_LOG_LEVEL', 'INFO').upper()

# Evolution clock units per millisecond
EVOLUTION_SPEED = max(0.0, _env_float('CRYPTOCANVAS_EVOLUTION_SPEED', 0.0001))

# Export frame in pixels around the artwork
FRAME_WIDTH = max(0, _env_int('CRYPTOCANVAS_FRAME_WIDTH', 32))

BACKGROUND = '#FFFFFF'

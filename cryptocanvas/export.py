"""
Framing, stamping and encoding rendered artwork for export.

Nothing here touches the filesystem; callers decide where the bytes go.
"""

import io
import logging

from PIL import Image, ImageDraw

from . import config
from .art_engine import load_font

logger = logging.getLogger(__name__)

BORDER_COLOR = '#E5E5E5'
STAMP_COLOR = '#0A0A0A'
FORMATS = {'png': 'PNG', 'jpg': 'JPEG', 'jpeg': 'JPEG'}


def frame_artwork(image, artwork_hash, frame_width=None, font_path=None):
    """Artwork centred in a white frame with the hash stamped bottom-left."""
    frame = config.FRAME_WIDTH if frame_width is None else frame_width
    width, height = image.size
    framed = Image.new('RGB', (width + frame * 2, height + frame * 2), config.BACKGROUND)

    draw = ImageDraw.Draw(framed)
    if frame > 0:
        draw.rectangle([frame - 1, frame - 1, frame + width, frame + height], outline=BORDER_COLOR, width=1)
    framed.paste(image.convert('RGB'), (frame, frame))

    font = load_font(10, font_path or config.FONT_PATH)
    stamp = artwork_hash[:12]
    bottom = font.getbbox(stamp)[3]
    draw.text((frame + 8, framed.height - 8 - bottom), stamp, font=font, fill=STAMP_COLOR)
    return framed


def export_filename(prefix, index, artwork_hash, fmt='png'):
    return f"{prefix}-{index:03d}-{artwork_hash[:8]}.{fmt}"


def encode_image(image, fmt='png'):
    """Encoded image bytes; raises ValueError for unknown formats."""
    pil_format = FORMATS.get(fmt.lower())
    if pil_format is None:
        raise ValueError(f"Unsupported export format: {fmt}")

    buffer = io.BytesIO()
    if pil_format == 'JPEG':
        image.convert('RGB').save(buffer, format='JPEG', quality=90)
    else:
        image.save(buffer, format='PNG')
    return buffer.getvalue()


def overlay_origin(position, canvas_size, text_size, margin=8):
    """Top-left corner for a text block of text_size at an anchor position."""
    tw, th = text_size
    far_x = canvas_size - margin - tw
    far_y = canvas_size - margin - th
    mid_x = (canvas_size - tw) / 2
    mid_y = (canvas_size - th) / 2

    return {
        'topLeft': (margin, margin),
        'topRight': (far_x, margin),
        'bottomLeft': (margin, far_y),
        'bottomRight': (far_x, far_y),
        'leftEdge': (margin, mid_y),
        'rightEdge': (far_x, mid_y),
        'bottomEdge': (mid_x, far_y),
    }.get(position, (margin, far_y))


def draw_code_overlay(image, code, position, font_path=None, size=8):
    """Stamp the display code at an anchor; edge anchors read sideways."""
    if position == 'none' or not code:
        return image

    font = load_font(size, font_path or config.FONT_PATH)
    left, top, right, bottom = font.getbbox(code)
    label = Image.new('RGBA', (right - left + 2, bottom - top + 2), (0, 0, 0, 0))
    ImageDraw.Draw(label).text((1 - left, 1 - top), code, font=font, fill=(0, 0, 0, 153))

    if position == 'leftEdge':
        label = label.rotate(90, expand=True)
    elif position == 'rightEdge':
        label = label.rotate(-90, expand=True)

    x, y = overlay_origin(position, image.width, label.size)
    image.paste(label, (int(x), int(y)), label)
    return image

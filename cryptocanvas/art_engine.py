"""
Cryptocanvas Art Engine - Procedural Pattern Generation
=======================================================
Paints seeded, text-biased and audio-reactive patterns onto a square raster.
"""

from PIL import Image, ImageDraw, ImageFont
from functools import lru_cache
import base64
import io
import logging
import math
import string

from . import config
from .parameters import clamp, clamp_complexity
from .random_source import SeededRandom, noise
from .text_bits import generate_text_seed, get_binary_data

logger = logging.getLogger(__name__)

INK = (10, 10, 10)
ACCENT = (255, 0, 0)


@lru_cache(maxsize=32)
def load_font(size, font_path=None):
    """Monospace font at size, falling back to Pillow's bundled font."""
    if font_path:
        try:
            return ImageFont.truetype(font_path, size)
        except OSError:
            logger.warning("Could not load font %s, using default", font_path)
    return ImageFont.load_default(size=size)


class ArtEngine:
    """Renders parameter records onto Pillow surfaces.

    Per-render state (rng, draw handle, bitstream, stats) lives on the
    instance, so one engine must not render from two threads at once.
    Give each concurrent caller its own ArtEngine.
    """

    # Accent flash thresholds are tuned per pattern
    ACCENT_THRESHOLDS = {
        'linear': 0.7,
        'texture': 0.8,
        'geometric': 0.6,
        'matrix': 0.7,
        'ascii': 0.7,
    }

    TEXTURE_GLYPHS = ['0', '1', '~', '.', '+', '-', '|', '/', '\\', '*']
    RAIN_GLYPHS = list('01~' + string.ascii_uppercase + string.ascii_lowercase)
    BIT_GLYPHS = ['0', '1', '~', ' ']

    def __init__(self, font_path=None):
        self.font_path = font_path or config.FONT_PATH
        self.stats = {}

    def generate(self, params, audio=None):
        """
        Render artwork and return it as a base64 encoded PNG.

        Args:
            params: GenerationParameters for the artwork
            audio: Optional AudioFrequencyData for this tick

        Returns:
            Base64 encoded PNG string
        """
        img = self.create_image(params, audio)

        buffer = io.BytesIO()
        img.save(buffer, format='PNG')
        return base64.b64encode(buffer.getvalue()).decode('utf-8')

    def create_image(self, params, audio=None):
        """White canvas_size square with the artwork painted on it."""
        img = Image.new('RGB', (params.canvas_size, params.canvas_size), config.BACKGROUND)
        self.render(img, params, audio=audio)
        return img

    def render(self, surface, params, bits=None, audio=None):
        """
        Paint the selected pattern onto surface in place.

        Args:
            surface: RGB PIL image of canvas_size x canvas_size
            params: GenerationParameters
            bits: Bitstream to bias with; derived from params.text_input when None.
                An empty bitstream means no text bias at all.
            audio: AudioFrequencyData or None
        """
        if bits is None:
            bits = get_binary_data(params).bits

        self.size = params.canvas_size
        self.complexity = clamp_complexity(params.complexity)
        self.color_scheme = params.color_scheme
        self.accent_threshold = self.ACCENT_THRESHOLDS.get(params.pattern_type, 0.7)
        self.bits = list(bits)
        self.has_text = len(self.bits) > 0
        self.audio = audio
        self.rng = SeededRandom(generate_text_seed(params.text_input or '', params.seed))
        self.draw = ImageDraw.Draw(surface, 'RGBA')
        self.stats = {'dots': 0, 'glyphs': 0, 'shapes': 0, 'lines': 0, 'nodes': 0}

        # Route to pattern generator
        pattern_map = {
            'linear': self._linear,
            'texture': self._texture,
            'geometric': self._geometric,
            'matrix': self._matrix,
            'ascii': self._ascii,
        }

        generator = pattern_map.get(params.pattern_type, self._linear)
        generator()

        logger.debug("Rendered %s seed=%r stats=%s", params.pattern_type, params.seed, self.stats)

    def render_layer(self, params, layered, private=False, audio=None):
        """Render the public or private layer of a signature split."""
        img = self.create_image(layered.apply(params, private), audio)
        if private:
            self._draw_private_indicator(img)
        return img

    # Colors

    def _color(self, gray_low=0, gray_span=256):
        """Opaque RGBA for one draw call under the active color scheme."""
        if self.color_scheme == 'grayscale':
            gray = min(255, gray_low + int(self.rng.next() * gray_span))
            return (gray, gray, gray, 255)
        if self.color_scheme == 'accent':
            rgb = ACCENT if self.rng.next() > self.accent_threshold else INK
            return rgb + (255,)
        return INK + (255,)

    def _rain_color(self, intensity):
        """Glyph color driven by intensity instead of the random sequence."""
        alpha = int(round(intensity * 255))
        if self.color_scheme == 'grayscale':
            gray = min(255, int(intensity * 256))
            return (gray, gray, gray, alpha)
        if self.color_scheme == 'accent' and intensity > self.accent_threshold:
            return ACCENT + (alpha,)
        return INK + (alpha,)

    @staticmethod
    def _with_alpha(color, alpha):
        return color[:3] + (int(round(alpha * 255)),)

    def _bit_at(self, fraction):
        index = int(fraction * len(self.bits))
        return self.bits[index] if 0 <= index < len(self.bits) else 0

    def _font(self, size):
        return load_font(size, self.font_path)

    # Patterns

    def _linear(self):
        """Vertical columns of dots with noise-driven density"""
        c = self.complexity
        size = self.size
        audio = self.audio
        spacing = max(2, int(20 * (1 - c)))
        max_dots = int(50 * c)

        for x in range(0, size, spacing):
            density = noise(x * 0.01, self.rng.next()) * c * max_dots

            # 0s sparsify, 1s densify
            if self.has_text:
                density *= 0.5 + self._bit_at(x / size) * 0.8

            if audio:
                density *= 0.3 + audio.bass * 1.2
                if audio.beat:
                    density *= 1.5

            fill = self._color()
            dots = math.ceil(density)

            for i in range(dots):
                y = self.rng.next() * size

                # 0s pull towards the top, 1s allow the full height
                if self.has_text:
                    y *= 0.3 + self._bit_at(i / density) * 0.7

                # Treble lifts, bass sinks
                if audio:
                    y += (audio.treble - audio.bass) * 0.3 * size
                    y = clamp(y, 0, size)

                r = max(0.5, self.rng.next() * 3 * c)
                if audio:
                    r *= 0.5 + audio.volume * 0.8

                self.draw.ellipse([x - r, y - r, x + r, y + r], fill=fill)

            self.stats['dots'] += dots

        # Vertical rhythm lines
        line_color = self._color()
        for _ in range(int(5 * c)):
            x = self.rng.next() * size
            alpha = 0.3 + self.rng.next() * 0.4
            self.draw.line([(x, 0), (x, size)], fill=self._with_alpha(line_color, alpha), width=1)
            self.stats['lines'] += 1

    def _texture(self):
        """Monospaced character field with translucent organic blobs"""
        c = self.complexity
        size = self.size
        line_height = int(8 + 8 * c)
        font_size = int(6 + 6 * c)
        char_width = font_size * 0.6
        chars_per_line = int(size / char_width)
        font = self._font(font_size)
        n_bits = len(self.bits)

        for y in range(0, size, line_height):
            line_complexity = noise(y * 0.02, self.rng.next()) * c
            if self.has_text:
                line_complexity *= 0.3 + self._bit_at(y / size) * 0.9

            row = []
            for col in range(chars_per_line):
                place = self.rng.next() < line_complexity

                # Write the actual bit where the stream reaches this cell
                if self.has_text:
                    index = int((col / chars_per_line + y / size) * n_bits)
                    if index < n_bits:
                        row.append(str(self.bits[index]) if place else ' ')
                        continue

                row.append(self.rng.choice(self.TEXTURE_GLYPHS) if place else ' ')

            self._draw_row(row, y, char_width, font, self._color(gray_low=50, gray_span=200))

        for _ in range(int(3 + 7 * c)):
            cx = self.rng.next() * size
            cy = self.rng.next() * size
            base = 10 + self.rng.next() * 30 * c
            points = 6 + self.rng.randint(8)
            color = self._color()
            alpha = 0.1 + self.rng.next() * 0.3

            vertices = []
            for j in range(points + 1):
                angle = (j / points) * math.pi * 2
                radius = base * (0.7 + self.rng.next() * 0.6)
                vertices.append((cx + math.cos(angle) * radius, cy + math.sin(angle) * radius))

            self.draw.polygon(vertices, fill=self._with_alpha(color, alpha))
            self.stats['shapes'] += 1

    def _geometric(self):
        """Small polygons on a spiral, joined by faint mandala lines"""
        c = self.complexity
        size = self.size
        audio = self.audio
        center = size / 2
        count = 10 + int(50 * c)
        turns = 2 + 3 * c
        centers = []

        for i in range(count):
            progress = i / count
            angle = progress * math.pi * 2 * turns
            radius = size * (0.1 + self.rng.next() * 0.35)
            sides = 3 + self.rng.randint(5)
            shape_size = (4 + self.rng.next() * 12) * (0.5 + c)
            rotation = self.rng.next() * math.pi * 2

            if self.has_text:
                bit = self.bits[i % len(self.bits)]
                angle += (bit - 0.5) * 0.2
                radius *= 0.85 + bit * 0.3
                sides = clamp(sides + (1 if bit else -1), 3, 7)
                shape_size *= 0.7 + bit * 0.6

            if audio:
                radius *= 1 + audio.bass * 0.3
                shape_size *= 0.6 + audio.volume * 0.8

            x = center + math.cos(angle) * radius
            y = center + math.sin(angle) * radius
            centers.append((x, y))

            points = []
            for j in range(sides):
                a = rotation + (j / sides) * math.pi * 2
                points.append((x + math.cos(a) * shape_size, y + math.sin(a) * shape_size))

            color = self._color()
            self.draw.polygon(points, fill=self._with_alpha(color, 0.5 + self.rng.next() * 0.4))
            self.stats['shapes'] += 1

        if c > 0.3 and len(centers) > 1:
            line_color = self._color()
            for _ in range(int(count * 0.3)):
                a = centers[self.rng.randint(len(centers))]
                b = centers[self.rng.randint(len(centers))]
                alpha = 0.1 + self.rng.next() * 0.15
                self.draw.line([a, b], fill=self._with_alpha(line_color, alpha), width=1)
                self.stats['lines'] += 1

    def _matrix(self):
        """Grid network of nodes with short connections"""
        c = self.complexity
        size = self.size
        grid = int(20 + 30 * c)
        node_chance = 0.3 + c * 0.4
        connection_chance = 0.2 + c * 0.3
        cols = rows = size // grid
        n_bits = len(self.bits)

        nodes = []
        for row in range(rows):
            for col in range(cols):
                x = col * grid + grid / 2
                y = row * grid + grid / 2
                active = self.rng.next() < node_chance

                # 1 always lights a node, 0 only sometimes
                if self.has_text:
                    bit = self.bits[(row * cols + col) % n_bits]
                    active = bit == 1 or self.rng.next() < 0.3

                nodes.append((x, y, active))

        line_color = self._with_alpha(self._color(), 0.4)
        reach = grid * 2.5

        for index, (x, y, active) in enumerate(nodes):
            if not active:
                continue
            row, col = divmod(index, cols)
            for other in self._neighbours_after(row, col, rows, cols):
                ox, oy, other_active = nodes[other]
                if not other_active:
                    continue
                if math.hypot(ox - x, oy - y) < reach and self.rng.next() < connection_chance:
                    self.draw.line([(x, y), (ox, oy)], fill=line_color, width=1)
                    self.stats['lines'] += 1

        for x, y, active in nodes:
            if not active:
                continue
            fill = self._with_alpha(self._color(), 0.8)
            r = 2 + self.rng.next() * 3
            self.draw.ellipse([x - r, y - r, x + r, y + r], fill=fill)
            self.stats['nodes'] += 1

    @staticmethod
    def _neighbours_after(row, col, rows, cols, span=2):
        """Flattened indices after (row, col) within span cells, in scan order.

        Anything further away is beyond 2.5 cells, so this visits the same
        pairs in the same order as a full pairwise scan.
        """
        for r in range(row, min(rows, row + span + 1)):
            start = col + 1 if r == row else max(0, col - span)
            for cc in range(start, min(cols, col + span + 1)):
                yield r * cols + cc

    def _ascii(self):
        """Character rain with a sparse noise overlay"""
        c = self.complexity
        size = self.size
        audio = self.audio
        font_size = int(8 + c * 12)
        char_width = font_size * 0.6
        char_height = font_size * 1.2
        cols = int(size / char_width)
        rows = int(size / char_height)
        font = self._font(font_size)
        n_bits = len(self.bits)
        glyphs = self.BIT_GLYPHS if self.has_text else self.RAIN_GLYPHS

        boost = (audio.bass + audio.mid) / 2 if audio else 0.0
        density = (c + boost * 0.5) * 0.8

        for row in range(rows):
            for col in range(cols):
                if self.rng.next() >= density:
                    continue

                if self.has_text:
                    glyph = str(self.bits[(row * cols + col) % n_bits])
                else:
                    glyph = self.rng.choice(self.RAIN_GLYPHS)

                intensity = 0.15 + self.rng.next() * 0.6
                self._draw_glyph((col * char_width, row * char_height), glyph, font,
                                 self._rain_color(intensity))

        if c > 0.4:
            noise_intensity = (c - 0.4) * 0.3
            for _ in range(math.ceil(size * noise_intensity)):
                x = self.rng.next() * size
                y = self.rng.next() * size
                glyph = self.rng.choice(glyphs)
                self._draw_glyph((x, y), glyph, font, self._rain_color(0.05 + self.rng.next() * 0.2))

    # Text helpers

    def _draw_row(self, row, y, char_width, font, fill):
        for col, glyph in enumerate(row):
            self._draw_glyph((col * char_width, y), glyph, font, fill)

    def _draw_glyph(self, xy, glyph, font, fill):
        if glyph == ' ':
            return
        self.draw.text(xy, glyph, font=font, fill=fill)
        self.stats['glyphs'] += 1

    def _draw_private_indicator(self, img):
        draw = ImageDraw.Draw(img, 'RGBA')
        draw.rectangle([0, 0, img.width, img.height], fill=ACCENT + (26,))
        draw.text((8, 8), 'PRIVATE', font=self._font(10), fill=ACCENT + (200,))


# Render every pattern once
if __name__ == '__main__':
    from .crypto import CryptoCodeGenerator
    from .logging_config import configure_logging
    from .parameters import PATTERN_TYPES, GenerationParameters

    configure_logging()
    engine = ArtEngine()
    codes = CryptoCodeGenerator()

    for pattern in PATTERN_TYPES:
        params = GenerationParameters(seed='canvas42', pattern_type=pattern, text_input='hello')
        data = engine.generate(params)
        print(f'{pattern}: {len(data)} bytes of base64 data, code {codes.display_code(params)}')

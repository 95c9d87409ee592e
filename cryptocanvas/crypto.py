"""
Display codes and the public/private layer split.

None of this is cryptography. The transforms are deterministic obfuscation
that produce a short code to print over the artwork. Only the signature key
pair is random, and it comes from an injectable random.Random.
"""

import json
import math
import random
import time
from dataclasses import dataclass, field
from typing import Dict

from .parameters import GenerationParameters
from .random_source import fold_string

SALT_CHARS = '!@#$%^&*()_+-=[]{}|;:,.<>?'
CIPHER_ALPHABET = 'ABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789'
_BASE36 = '0123456789abcdefghijklmnopqrstuvwxyz'

CODE_PREFIXES = {
    'binary': 'BIN',
    'hash': 'SHA',
    'cipher': 'CIP',
    'signature': 'SIG',
}

PUBLIC = 'public'
PRIVATE = 'private'


def seed_to_number(seed):
    return abs(fold_string(seed))


def simple_hash(text):
    """Eight hex digits of the folded string."""
    return format(abs(fold_string(text)), '08x')


def generate_hash(params, now=None):
    """16 hex character artwork hash, stable within one wall-clock second."""
    now = time.time() if now is None else now
    record = dict(params.to_dict(), timestamp=math.floor(now))
    h = fold_string(json.dumps(record, separators=(',', ':')))

    return (format(abs(h), '08x') + format(abs(h * 7), '08x'))[:16]


@dataclass(frozen=True)
class Layer:
    """One side of the signature split: which side, and the fields it overrides."""

    kind: str
    overrides: Dict[str, object] = field(default_factory=dict)


@dataclass(frozen=True)
class LayeredData:
    public_layer: Layer
    private_layer: Layer
    signature: str

    def active_layer(self, private=False):
        return self.private_layer if private else self.public_layer

    def apply(self, base, private=False):
        """Merge the active layer over base; complexity is re-clamped."""
        return base.with_overrides(**self.active_layer(private).overrides)


class CryptoCodeGenerator:
    """Produces the display code for a parameter record."""

    def __init__(self, rng=None):
        self.rng = rng or random.Random()

    def generate_key_pair(self):
        def key():
            return ''.join(self.rng.choice(_BASE36) for _ in range(16))
        return key().upper(), key().lower()

    def binary_encrypt(self, text, seed):
        """XOR each character with a seed-derived byte, as 32 binary digits."""
        seed_num = seed_to_number(seed)
        out = ''.join(
            format(ord(ch) ^ ((seed_num + i) % 256), '08b')
            for i, ch in enumerate(text)
        )
        return out[:32]

    def hash_encrypt(self, text, seed, now=None):
        salted = text + self.generate_salt(seed) + seed
        record = GenerationParameters(
            seed=seed,
            text_input=salted,
            encryption_type='hash',
            code_position='topRight',
            canvas_size=512,
        )
        return generate_hash(record, now)[:16].upper()

    def cipher_encrypt(self, text, seed):
        """Seed-keyed substitution over A-Z0-9; other characters pass through."""
        seed_num = seed_to_number(seed)
        order = sorted(
            range(len(CIPHER_ALPHABET)),
            key=lambda i: (seed_num + i * 7) % len(CIPHER_ALPHABET),
        )
        table = {CIPHER_ALPHABET[i]: CIPHER_ALPHABET[j] for i, j in enumerate(order)}

        return ''.join(table.get(ch, ch) for ch in text.upper())[:12]

    def signature_encrypt(self, text, seed):
        """HASH-KEYFRAG from an ephemeral key pair; differs on every call."""
        public_key, _private_key = self.generate_key_pair()
        signature = simple_hash(text + seed + public_key)[:8].upper()
        return f"{signature}-{public_key[:4]}"

    def generate_salt(self, seed):
        seed_num = seed_to_number(seed)
        return ''.join(
            SALT_CHARS[(seed_num + i * 3) % len(SALT_CHARS)] for i in range(8)
        )

    def encrypt_by_type(self, text, seed, encryption_type):
        if encryption_type == 'binary':
            return self.binary_encrypt(text, seed)
        if encryption_type == 'cipher':
            return self.cipher_encrypt(text, seed)
        if encryption_type == 'signature':
            return self.signature_encrypt(text, seed)
        return self.hash_encrypt(text, seed)

    def display_code(self, params):
        """PREFIX:payload string for the overlay."""
        text = params.text_input or params.seed
        payload = self.encrypt_by_type(text, params.seed, params.encryption_type)
        prefix = CODE_PREFIXES.get(params.encryption_type, 'HSH')
        return f"{prefix}:{payload}"

    def generate_layered_data(self, params):
        base_text = params.text_input or ''
        complexity = params.complexity or 0.5

        public = Layer(PUBLIC, {
            'seed': params.seed + '_public',
            'complexity': complexity * 0.7,
            'movement': False,
            'text_input': 'public_' + base_text,
        })
        # Above 1.0 until merged; the merge clamps it
        private = Layer(PRIVATE, {
            'seed': params.seed + '_private',
            'complexity': complexity * 1.3,
            'movement': params.movement,
            'text_input': 'private_' + base_text,
        })
        signature = self.signature_encrypt(params.text_input or 'canvas', params.seed)

        return LayeredData(public_layer=public, private_layer=private, signature=signature)

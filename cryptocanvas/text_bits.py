"""
Text to bitstream conversion.

Free text typed by the user becomes a sequence of 0/1 values that biases the
generators, and is folded into the seed so any edit to the text changes the
artwork.
"""

from dataclasses import dataclass, field
from typing import List

_BASE36 = '0123456789abcdefghijklmnopqrstuvwxyz'


def to_base36(n: int) -> str:
    """Lowercase base-36 representation of a non-negative integer."""
    if n == 0:
        return '0'
    digits = []
    while n:
        n, rem = divmod(n, 36)
        digits.append(_BASE36[rem])
    return ''.join(reversed(digits))


def text_to_binary(text: str) -> str:
    """Each character as its code point in (at least) 8 binary digits."""
    return ''.join(format(ord(ch), '08b') for ch in text)


def binary_to_array(binary: str) -> List[int]:
    return [int(bit) for bit in binary]


def generate_text_seed(text: str, base_seed: str) -> str:
    """Append a position-weighted digest of the text's bits to base_seed."""
    if not text:
        return base_seed

    weighted = sum(int(bit) * (i + 1) for i, bit in enumerate(text_to_binary(text)))
    return base_seed + to_base36(weighted)


@dataclass
class BinaryData:
    binary: str = ''
    bits: List[int] = field(default_factory=list)
    has_text: bool = False


def get_binary_data(params) -> BinaryData:
    """Bitstream for a parameter record; empty when there is no text."""
    text = params.text_input or ''
    if not text:
        return BinaryData()

    binary = text_to_binary(text)
    return BinaryData(binary=binary, bits=binary_to_array(binary), has_text=True)

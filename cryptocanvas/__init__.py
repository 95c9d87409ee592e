"""
Cryptocanvas - deterministic generative art with display codes.
"""

from .art_engine import ArtEngine
from .audio import AudioAnalyzer, AudioFrequencyData, BeatDetector
from .batch import BatchExporter, BatchOptions, BatchResult
from .crypto import CryptoCodeGenerator, Layer, LayeredData, generate_hash
from .parameters import GenerationParameters
from .random_source import SeededRandom, noise
from .share import decode_parameters, encode_parameters
from .temporal import TemporalEvolution
from .text_bits import generate_text_seed, text_to_binary

__version__ = '0.1.0'

__all__ = [
    'ArtEngine',
    'AudioAnalyzer',
    'AudioFrequencyData',
    'BatchExporter',
    'BatchOptions',
    'BatchResult',
    'BeatDetector',
    'CryptoCodeGenerator',
    'GenerationParameters',
    'Layer',
    'LayeredData',
    'SeededRandom',
    'TemporalEvolution',
    'decode_parameters',
    'encode_parameters',
    'generate_hash',
    'generate_text_seed',
    'noise',
    'text_to_binary',
]

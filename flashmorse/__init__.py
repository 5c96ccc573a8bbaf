"""
Модули декодера световой азбуки Морзе
"""
from .config import DetectionConfig, DetectionPolicy, ClassificationGrammar
from .edge_detector import BrightnessSample, Duration, FlashState, EdgeDetector
from .morse_classifier import Symbol, classify_duration, make_classifier
from .morse_decoder import MorseDecoder, decode_durations, encode_text
from .capture_session import CaptureSession, DecodeResult, decode_samples
from .auto_tune import auto_tune_parameters

__all__ = [
    'DetectionConfig',
    'DetectionPolicy',
    'ClassificationGrammar',
    'BrightnessSample',
    'Duration',
    'FlashState',
    'EdgeDetector',
    'Symbol',
    'classify_duration',
    'make_classifier',
    'MorseDecoder',
    'decode_durations',
    'encode_text',
    'CaptureSession',
    'DecodeResult',
    'decode_samples',
    'auto_tune_parameters'
]

"""
Генерация синтетических сигналов Морзе
Длительности и записи яркости с известным текстом - для тестов и CLI
"""

from dataclasses import dataclass

import numpy as np

from .edge_detector import BrightnessSample, Duration
from .morse_decoder import TEXT_TO_MORSE


@dataclass
class MorseTiming:
    """Тайминг передачи (мс), согласованный с порогами по умолчанию"""
    dot_ms: int = 120
    dash_ms: int = 360
    element_gap_ms: int = 120   # внутри буквы
    letter_gap_ms: int = 1000   # между буквами
    word_gap_ms: int = 1800     # между словами

    # Для грамматики "длительность как пауза"
    letter_marker_ms: int = 650
    word_marker_ms: int = 1100


def _words(text):
    return [
        [TEXT_TO_MORSE[char] for char in word if char in TEXT_TO_MORSE]
        for word in text.upper().split()
    ]


def text_to_durations(text, timing=None, start_ms=0):
    """
    Текст -> длительности с временем начала (грамматика с паузами)
    """
    timing = timing or MorseTiming()
    durations = []
    clock = start_ms
    pending_gap = 0

    for word in _words(text):
        if not word:
            continue
        if durations:
            pending_gap = timing.word_gap_ms
        for letter_index, pattern in enumerate(word):
            if letter_index > 0:
                pending_gap = timing.letter_gap_ms
            for element_index, element in enumerate(pattern):
                if element_index > 0:
                    pending_gap = timing.element_gap_ms
                clock += pending_gap
                length = timing.dot_ms if element == '.' else timing.dash_ms
                durations.append(Duration(length_ms=length, onset_ms=clock))
                clock += length
                pending_gap = 0

    return durations


def text_to_band_durations(text, timing=None):
    """
    Текст -> длительности для грамматики "длительность как пауза"

    Паузы кодируются псевдо-длительностями letter_marker_ms / word_marker_ms.
    """
    timing = timing or MorseTiming()
    lengths = []

    for word_index, word in enumerate(w for w in _words(text) if w):
        if word_index > 0:
            lengths.append(timing.word_marker_ms)
        for letter_index, pattern in enumerate(word):
            if letter_index > 0:
                lengths.append(timing.letter_marker_ms)
            lengths.extend(timing.dot_ms if e == '.' else timing.dash_ms for e in pattern)

    return lengths


def synthesize_trace(text, fps=30, timing=None, on_level=200.0, off_level=10.0,
                     noise=0.0, lead_ms=500, tail_ms=500, seed=None):
    """
    Синтез записи яркости, как её выдал бы анализ кадров

    Args:
        text: передаваемый текст
        fps: частота кадров
        timing: MorseTiming
        on_level / off_level: яркость включённого/выключенного источника
        noise: СКО гауссова шума яркости
        lead_ms / tail_ms: тишина до и после передачи
        seed: зерно генератора шума

    Returns:
        список BrightnessSample
    """
    durations = text_to_durations(text, timing, start_ms=lead_ms)
    end_ms = (durations[-1].end_ms if durations else lead_ms) + tail_ms

    frame_ms = 1000.0 / fps
    timestamps = np.arange(0, end_ms, frame_ms).astype(int)

    levels = np.full(len(timestamps), off_level, dtype=float)
    for duration in durations:
        mask = (timestamps >= duration.onset_ms) & (timestamps < duration.end_ms)
        levels[mask] = on_level

    if noise > 0:
        rng = np.random.default_rng(seed)
        levels = levels + rng.normal(0.0, noise, len(levels))
    levels = np.clip(levels, 0.0, 255.0)

    return [BrightnessSample(int(t), float(v)) for t, v in zip(timestamps, levels)]

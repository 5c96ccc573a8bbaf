"""
Классификация длительностей вспышек в символы Морзе
Две грамматики: с учётом пауз между вспышками и "длительность как пауза"
"""

from abc import ABC, abstractmethod
from enum import Enum

from .config import DetectionConfig, ClassificationGrammar


class Symbol(Enum):
    """Символ Морзе; значение - его запись в строке морзе"""
    DOT = "."
    DASH = "-"
    LETTER_GAP = "/"
    WORD_GAP = "//"
    NONE = ""

    @property
    def glyph(self):
        return self.value


def _length_of(duration):
    # Принимаем как Duration, так и просто число миллисекунд
    return getattr(duration, 'length_ms', duration)


def _onset_of(duration):
    return getattr(duration, 'onset_ms', None)


def classify_duration(length_ms, config=None):
    """
    Классификация одной длительности по возрастающим полосам

    <= точка -> DOT, <= тире -> DASH, <= пауза буквы -> LETTER_GAP,
    <= пауза слова -> WORD_GAP, иначе NONE. Границы включительно.
    """
    config = config or DetectionConfig()
    if length_ms < 0:
        return Symbol.NONE
    if length_ms <= config.dot_threshold_ms:
        return Symbol.DOT
    if length_ms <= config.dash_threshold_ms:
        return Symbol.DASH
    if length_ms <= config.letter_pause_ms:
        return Symbol.LETTER_GAP
    if length_ms <= config.word_pause_ms:
        return Symbol.WORD_GAP
    return Symbol.NONE


class MorseClassifier(ABC):
    """Общий интерфейс классификаторов"""

    def __init__(self, config=None):
        self.config = config or DetectionConfig()

    @abstractmethod
    def classify(self, durations):
        """Последовательность длительностей -> последовательность символов"""


class GapAwareClassifier(MorseClassifier):
    """
    Вспышки дают только точки и тире, разделители берутся из пауз

    Пауза между соседними вспышками = начало следующей - конец предыдущей.
    Слишком длинная вспышка (длиннее тире) молча отбрасывается.
    Если время начала неизвестно (передан просто список чисел),
    пауза считается неизвестной и разделитель не добавляется.
    """

    def symbol_for(self, length_ms):
        if 0 <= length_ms <= self.config.dot_threshold_ms:
            return Symbol.DOT
        if self.config.dot_threshold_ms < length_ms <= self.config.dash_threshold_ms:
            return Symbol.DASH
        return Symbol.NONE

    def gap_symbol(self, gap_ms):
        if gap_ms is None:
            return Symbol.NONE
        if gap_ms >= self.config.word_pause_ms:
            return Symbol.WORD_GAP
        if gap_ms >= self.config.letter_pause_ms:
            return Symbol.LETTER_GAP
        return Symbol.NONE

    def classify(self, durations):
        durations = list(durations)
        symbols = []

        for i, duration in enumerate(durations):
            symbol = self.symbol_for(_length_of(duration))
            if symbol is not Symbol.NONE:
                symbols.append(symbol)

            if i < len(durations) - 1:
                separator = self.gap_symbol(gap_between(duration, durations[i + 1]))
                if separator is not Symbol.NONE:
                    symbols.append(separator)

        return symbols


class DurationBandClassifier(MorseClassifier):
    """Каждая длительность сама по себе становится символом или разделителем"""

    def classify(self, durations):
        symbols = []
        for duration in durations:
            symbol = classify_duration(_length_of(duration), self.config)
            if symbol is not Symbol.NONE:
                symbols.append(symbol)
        return symbols


def gap_between(previous, following):
    """Пауза между двумя вспышками (мс) или None, если время начала неизвестно"""
    prev_onset = _onset_of(previous)
    next_onset = _onset_of(following)
    if prev_onset is None or next_onset is None:
        return None
    return next_onset - (prev_onset + _length_of(previous))


CLASSIFIERS = {
    ClassificationGrammar.GAP_AWARE: GapAwareClassifier,
    ClassificationGrammar.DURATION_BANDS: DurationBandClassifier,
}


def make_classifier(config=None):
    """Классификатор для грамматики из конфигурации"""
    config = config or DetectionConfig()
    return CLASSIFIERS[config.grammar](config)

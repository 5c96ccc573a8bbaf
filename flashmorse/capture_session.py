"""
Сессия захвата: детектор вспышек -> классификатор -> декодер
Декодирование запускается явным сигналом завершения сессии
"""

from dataclasses import dataclass, field
from typing import Callable, Optional, Tuple

from .config import DetectionConfig
from .edge_detector import EdgeDetector
from .morse_classifier import make_classifier
from .morse_decoder import MorseDecoder
from .signal_analyzer import TimingAnalyzer


@dataclass(frozen=True)
class DecodeResult:
    """Результат декодирования сессии"""
    morse: str
    text: str
    durations: Tuple[int, ...]
    stats: dict = field(default_factory=dict, compare=False)


class CaptureSession:
    """
    Один конвейер детекции на одну активную сессию

    Для параллельных сессий нужны отдельные экземпляры: состояние
    детектора не разделяется.
    """

    def __init__(self, config=None, sink: Optional[Callable[[DecodeResult], None]] = None,
                 verbose=False):
        """
        Args:
            config: DetectionConfig (по умолчанию - значения по умолчанию)
            sink: вызывается с DecodeResult после каждого декодирования
            verbose: печатать события детекции и результат
        """
        self.config = config or DetectionConfig()
        self.sink = sink
        self.verbose = verbose
        self.detector = EdgeDetector(self.config, verbose=verbose)
        self.classifier = make_classifier(self.config)
        self.decoder = MorseDecoder()
        self.analyzer = TimingAnalyzer()
        self._durations = []

    @property
    def durations(self):
        """Длительности, накопленные с последнего декодирования (мс)"""
        return tuple(d.length_ms for d in self._durations)

    def feed(self, sample, capture_active=True):
        duration = self.detector.feed(sample, capture_active)
        if duration is not None:
            self._durations.append(duration)
        return duration

    def feed_all(self, samples, capture_active=True):
        for sample in samples:
            self.feed(sample, capture_active)

    def complete(self):
        """
        Сессия завершена: декодировать накопленное

        Незакрытая вспышка отбрасывается. Если длительностей нет,
        возвращается None и sink не вызывается.
        """
        self.detector.reset()
        if not self._durations:
            return None

        symbols = self.classifier.classify(self._durations)
        morse, text = self.decoder.decode(symbols)
        result = DecodeResult(
            morse=morse,
            text=text,
            durations=self.durations,
            stats=self.analyzer.analyze_timing(self._durations)
        )
        self._durations = []

        if self.verbose:
            print(f"📝 Длительности: {list(result.durations)}")
            print(f"📝 Морзе-код: {result.morse}")
            print(f"✓ Текст: {result.text}")

        if self.sink is not None:
            self.sink(result)
        return result

    def stop(self):
        """Отмена захвата: незакрытая вспышка и накопленные длительности отбрасываются"""
        self.detector.reset()
        self._durations = []


def decode_samples(samples, config=None, verbose=False):
    """Декодирование готовой записи отсчётов целиком"""
    session = CaptureSession(config, verbose=verbose)
    session.feed_all(samples)
    return session.complete()

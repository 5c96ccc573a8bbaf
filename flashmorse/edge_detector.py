"""
Детектор фронтов вспышки
Превращает поток отсчётов яркости (по одному на кадр) в последовательность
длительностей "включённых" фаз с антидребезгом
"""

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from .config import DetectionConfig, DetectionPolicy


@dataclass(frozen=True)
class BrightnessSample:
    """Один отсчёт яркости: время кадра (мс) и средняя яркость 0-255"""
    timestamp: int
    value: float


@dataclass(frozen=True)
class Duration:
    """Завершённая "включённая" фаза"""
    length_ms: int
    onset_ms: Optional[int] = None

    @property
    def end_ms(self):
        if self.onset_ms is None:
            return None
        return self.onset_ms + self.length_ms


@dataclass
class FlashState:
    """Переходное состояние детектора, принадлежит одному EdgeDetector"""
    is_on: bool = False
    onset_time: Optional[int] = None
    off_candidate_time: Optional[int] = None

    def reset(self):
        self.is_on = False
        self.onset_time = None
        self.off_candidate_time = None


def sanitize_brightness(value):
    """
    Приведение яркости к числу

    Всё, что не является конечным числом (None, NaN, inf, мусор),
    превращается в -inf, то есть гарантированно "выключено".
    """
    try:
        value = float(value)
    except (TypeError, ValueError, OverflowError):
        return -math.inf
    if not math.isfinite(value):
        return -math.inf
    return value


class EdgePolicy(ABC):
    """Общий интерфейс стратегий детектирования"""

    def __init__(self, config: DetectionConfig):
        self.config = config

    @abstractmethod
    def step(self, state: FlashState, now: int, value: float) -> Optional[Duration]:
        """
        Обработка одного отсчёта

        Args:
            state: состояние детектора (изменяется на месте)
            now: время отсчёта, мс
            value: яркость (уже очищенная)

        Returns:
            Duration, если только что закрылась фаза, иначе None
        """


class HysteresisPolicy(EdgePolicy):
    """
    Два порога (on > off) и окно антидребезга

    Фаза закрывается, когда яркость ниже off_threshold через debounce_ms
    после первого провала. Длительность считается до момента-кандидата
    на выключение, импульсы не длиннее min_duration_ms отбрасываются как шум.
    Если flicker_cancels_off включён, возврат яркости во время включённой
    фазы сбрасывает кандидата.
    """

    def step(self, state, now, value):
        config = self.config

        if value > config.on_threshold:
            if not state.is_on:
                state.is_on = True
                state.onset_time = now
                state.off_candidate_time = None
            elif config.flicker_cancels_off:
                state.off_candidate_time = None
            return None

        if value < config.off_threshold and state.is_on:
            if state.off_candidate_time is None:
                state.off_candidate_time = now
                return None

            if now - state.off_candidate_time > config.debounce_ms:
                onset = state.onset_time
                length = state.off_candidate_time - onset
                state.reset()
                if length > config.min_duration_ms:
                    return Duration(length_ms=int(length), onset_ms=onset)

        return None


class SingleThresholdPolicy(EdgePolicy):
    """
    Один порог без нижней границы длительности

    Фаза закрывается в момент подтверждения антидребезга,
    а не в момент-кандидат.
    """

    def step(self, state, now, value):
        config = self.config

        if value > config.threshold:
            if not state.is_on:
                state.is_on = True
                state.onset_time = now
            state.off_candidate_time = None
            return None

        if not state.is_on:
            return None

        if state.off_candidate_time is None:
            state.off_candidate_time = now
            return None

        if now - state.off_candidate_time > config.debounce_ms:
            onset = state.onset_time
            state.reset()
            return Duration(length_ms=int(now - onset), onset_ms=onset)

        return None


POLICIES = {
    DetectionPolicy.HYSTERESIS: HysteresisPolicy,
    DetectionPolicy.SINGLE_THRESHOLD: SingleThresholdPolicy,
}


class EdgeDetector:
    """
    Детектор вспышек для одной сессии захвата

    Пока capture_active == False, отсчёты игнорируются целиком: новая фаза
    не начинается, начатая не закрывается и не сбрасывается. Незакрытая
    фаза в конце потока Duration не порождает; для отмены вызывайте reset().
    """

    def __init__(self, config=None, verbose=False):
        self.config = config or DetectionConfig()
        self.verbose = verbose
        self.state = FlashState()
        self._policy = POLICIES[self.config.policy](self.config)
        self._last_timestamp = None

    @property
    def is_on(self):
        return self.state.is_on

    def feed(self, sample: BrightnessSample, capture_active: bool = True) -> Optional[Duration]:
        """Обработка очередного отсчёта"""
        if not capture_active:
            return None

        # Поток должен быть упорядочен по времени, запоздавшие кадры пропускаем
        if self._last_timestamp is not None and sample.timestamp < self._last_timestamp:
            return None
        self._last_timestamp = sample.timestamp

        value = sanitize_brightness(sample.value)
        was_on = self.state.is_on
        duration = self._policy.step(self.state, sample.timestamp, value)

        if self.verbose:
            if not was_on and self.state.is_on:
                print(f"⚡ Вспышка ON в {sample.timestamp} мс, яркость: {value:.1f}")
            elif duration is not None:
                print(f"✓ Вспышка OFF, длительность: {duration.length_ms} мс")

        return duration

    def feed_all(self, samples, capture_active=True):
        """Обработка последовательности отсчётов, возвращает все закрытые фазы"""
        durations = []
        for sample in samples:
            duration = self.feed(sample, capture_active)
            if duration is not None:
                durations.append(duration)
        return durations

    def reset(self):
        """Сброс состояния: незакрытая фаза отбрасывается"""
        self.state.reset()
        self._last_timestamp = None

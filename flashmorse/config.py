"""
Конфигурация детектора вспышек и классификатора Морзе
Все пороги вынесены в одну неизменяемую структуру, чтобы детекцию
можно было подстраивать под устройство и освещение
"""

import json
from dataclasses import dataclass, asdict, fields, replace as dataclass_replace
from enum import Enum
from pathlib import Path


class DetectionPolicy(Enum):
    """Стратегия детектирования фронтов вспышки"""
    HYSTERESIS = "hysteresis"              # два порога + минимальная длительность
    SINGLE_THRESHOLD = "single_threshold"  # один порог, без нижней границы


class ClassificationGrammar(Enum):
    """Грамматика классификации длительностей"""
    GAP_AWARE = "gap_aware"            # паузы вычисляются между вспышками
    DURATION_BANDS = "duration_bands"  # паузы закодированы самой длительностью


@dataclass(frozen=True)
class DetectionConfig:
    """
    Параметры детекции и классификации

    Яркость в единицах 0-255 (среднее по области интереса),
    все времена в миллисекундах.
    """
    policy: DetectionPolicy = DetectionPolicy.HYSTERESIS
    grammar: ClassificationGrammar = ClassificationGrammar.GAP_AWARE

    # Пороги яркости
    on_threshold: float = 50.0
    off_threshold: float = 30.0
    threshold: float = 40.0  # только для SINGLE_THRESHOLD

    # Антидребезг
    debounce_ms: int = 50
    min_duration_ms: int = 50  # только для HYSTERESIS
    # Возврат яркости выше on_threshold отменяет кандидата на выключение
    # (только для HYSTERESIS; по умолчанию фаза меряется до первого провала)
    flicker_cancels_off: bool = False

    # Временные границы символов (верхние границы включительно)
    dot_threshold_ms: int = 200
    dash_threshold_ms: int = 500
    letter_pause_ms: int = 800
    word_pause_ms: int = 1400

    def __post_init__(self):
        # Строковые значения из JSON превращаем в перечисления
        if not isinstance(self.policy, DetectionPolicy):
            object.__setattr__(self, 'policy', DetectionPolicy(self.policy))
        if not isinstance(self.grammar, ClassificationGrammar):
            object.__setattr__(self, 'grammar', ClassificationGrammar(self.grammar))

        if self.on_threshold <= self.off_threshold:
            raise ValueError(
                f"on_threshold ({self.on_threshold}) должен быть больше "
                f"off_threshold ({self.off_threshold})")
        if not (0 <= self.dot_threshold_ms < self.dash_threshold_ms
                < self.letter_pause_ms < self.word_pause_ms):
            raise ValueError(
                "Временные границы должны возрастать: "
                f"0 <= точка ({self.dot_threshold_ms}) < тире ({self.dash_threshold_ms}) "
                f"< буква ({self.letter_pause_ms}) < слово ({self.word_pause_ms})")
        if self.debounce_ms < 0:
            raise ValueError(f"debounce_ms не может быть отрицательным: {self.debounce_ms}")
        if self.min_duration_ms < 0:
            raise ValueError(f"min_duration_ms не может быть отрицательным: {self.min_duration_ms}")

    @classmethod
    def from_dict(cls, params):
        """
        Создание конфигурации из словаря

        Неизвестные ключи игнорируются, отсутствующие берутся по умолчанию.
        """
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in params.items() if k in known})

    @classmethod
    def from_json_file(cls, config_path):
        """
        Загрузка из .config.json

        Параметры могут лежать как в корне файла, так и под ключом 'parameters'.
        """
        with open(Path(config_path), 'r', encoding='utf-8') as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError(f"Ожидался JSON-объект в {config_path}")
        return cls.from_dict(data.get('parameters', data))

    def replace(self, **changes):
        """Копия конфигурации с изменёнными полями"""
        return dataclass_replace(self, **changes)

    def to_dict(self):
        params = asdict(self)
        params['policy'] = self.policy.value
        params['grammar'] = self.grammar.value
        return params

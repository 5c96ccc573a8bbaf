"""
Работа с записями яркости
Загрузка CSV, сглаживание и оценка порогов по распределению яркости
"""

from pathlib import Path

import numpy as np
from scipy import signal

from .edge_detector import BrightnessSample


def load_trace(filepath):
    """
    Загрузка записи яркости из CSV

    Формат: две колонки "timestamp,brightness" (мс, 0-255). Заголовок и
    строки-комментарии '#' допускаются. Нечисловая яркость становится NaN,
    то есть читается детектором как "выключено".

    Raises:
        FileNotFoundError: файла нет
        ValueError: в файле нет ни одного отсчёта
    """
    filepath = Path(filepath)
    if not filepath.exists():
        raise FileNotFoundError(f"Файл не найден: {filepath}")

    data = np.genfromtxt(filepath, delimiter=',', comments='#',
                         usecols=(0, 1), invalid_raise=False, ndmin=2)

    # Строки без времени (заголовок, мусор) отбрасываем
    if data.size:
        data = data[np.isfinite(data[:, 0])]
    if not data.size:
        raise ValueError(f"В файле нет отсчётов яркости: {filepath}")

    return [BrightnessSample(int(t), float(v)) for t, v in data]


def save_trace(samples, filepath):
    """Сохранение записи яркости в CSV (формат load_trace)"""
    data = np.array([[s.timestamp, s.value] for s in samples], dtype=float).reshape(-1, 2)
    np.savetxt(filepath, data, delimiter=',', fmt=['%d', '%.3f'],
               header='timestamp,brightness')


def trace_values(samples):
    """Яркости записи как массив numpy"""
    return np.array([s.value for s in samples], dtype=float)


def smooth_trace(samples, window=3):
    """
    Медианное сглаживание яркости

    Убирает одиночные выбросы (блики, пропущенные кадры) до детекции.
    Окно приводится к нечётному.
    """
    if window <= 1 or not samples:
        return list(samples)
    if window % 2 == 0:
        window += 1

    values = trace_values(samples)
    # NaN в медианном фильтре даёт мусор, считаем их тёмными кадрами
    values = np.nan_to_num(values, nan=0.0, posinf=0.0, neginf=0.0)
    smoothed = signal.medfilt(values, window)

    return [BrightnessSample(s.timestamp, float(v)) for s, v in zip(samples, smoothed)]


def estimate_thresholds(samples, background_percentile=10, flash_percentile=90,
                        on_fraction=0.6, off_fraction=0.4):
    """
    Оценка порогов гистерезиса по записи

    Фон и уровень вспышки берутся по перцентилям, пороги ставятся
    на заданных долях между ними.

    Returns:
        (on_threshold, off_threshold) или None, если контраста нет
    """
    values = trace_values(samples)
    values = values[np.isfinite(values)]
    if len(values) == 0:
        return None

    background, flash = np.percentile(values, [background_percentile, flash_percentile])
    span = flash - background
    if span <= 0:
        return None

    on_threshold = background + span * on_fraction
    off_threshold = background + span * off_fraction
    return float(on_threshold), float(off_threshold)

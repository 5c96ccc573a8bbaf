"""
Аналитика тайминга вспышек
Стабильность, ритм, соотношение точка/тире и оценка скорости
"""

import numpy as np

from .morse_classifier import gap_between


def gaps_between(durations):
    """Паузы между соседними вспышками (только там, где известно время начала)"""
    durations = list(durations)
    gaps = []
    for previous, following in zip(durations, durations[1:]):
        gap = gap_between(previous, following)
        if gap is not None:
            gaps.append(gap)
    return gaps


class TimingAnalyzer:
    """
    Анализатор тайминга последовательности вспышек
    """

    def __init__(self, min_wpm=5, max_wpm=60):
        self.min_wpm = min_wpm
        self.max_wpm = max_wpm

    def analyze_timing(self, durations, gaps=None):
        """
        Статистика по длительностям

        Args:
            durations: Duration или числа (мс)
            gaps: паузы (мс); по умолчанию вычисляются из времени начала

        Returns:
            dict: {
                'pulses': int,
                'mean_ms': float,
                'median_ms': float,
                'dot_dash_ratio': float,  # идеал = 3.0
                'timing_stability': float,  # 0-100
                'rhythm_consistency': float,  # 0-100
                'wpm': float,
                'skill_level': str  # 'BEGINNER' | 'INTERMEDIATE' | 'ADVANCED' | 'EXPERT'
            }
        """
        durations = list(durations)
        if gaps is None:
            gaps = gaps_between(durations)

        lengths = np.array([getattr(d, 'length_ms', d) for d in durations], dtype=float)

        if len(lengths) == 0:
            return {
                'pulses': 0,
                'mean_ms': 0.0,
                'median_ms': 0.0,
                'dot_dash_ratio': 0.0,
                'timing_stability': 0.0,
                'rhythm_consistency': 0.0,
                'wpm': 0.0,
                'skill_level': 'UNKNOWN'
            }

        timing_stability = self._calculate_timing_stability(lengths)
        rhythm_consistency = self._calculate_rhythm_consistency(gaps)
        dot_dash_ratio = self._calculate_dot_dash_ratio(lengths)

        skill_score = (timing_stability + rhythm_consistency) / 2
        if skill_score >= 80:
            skill_level = 'EXPERT'
        elif skill_score >= 60:
            skill_level = 'ADVANCED'
        elif skill_score >= 40:
            skill_level = 'INTERMEDIATE'
        else:
            skill_level = 'BEGINNER'

        return {
            'pulses': int(len(lengths)),
            'mean_ms': float(np.mean(lengths)),
            'median_ms': float(np.median(lengths)),
            'dot_dash_ratio': float(dot_dash_ratio),
            'timing_stability': float(timing_stability),
            'rhythm_consistency': float(rhythm_consistency),
            'wpm': float(self.estimate_wpm(lengths)),
            'skill_level': skill_level
        }

    def estimate_wpm(self, lengths):
        """Оценка скорости в словах в минуту (WPM)"""
        lengths = np.asarray(lengths, dtype=float)
        if len(lengths) == 0:
            return 0

        # Точка - нижний кластер длительностей
        threshold = np.median(lengths)
        dots = lengths[lengths <= threshold]
        unit_time = np.median(dots) if len(dots) else threshold

        # По стандарту PARIS: WPM = 1200 / длительность точки в мс
        wpm = 1200.0 / unit_time if unit_time > 0 else 0
        wpm = max(self.min_wpm, min(self.max_wpm, wpm))

        return round(wpm, 1)

    # === Вспомогательные методы ===

    def _calculate_timing_stability(self, lengths):
        """Стабильность тайминга внутри кластеров точек и тире (0-100)"""
        if len(lengths) < 2:
            return 100.0

        threshold = np.median(lengths)
        stabilities = []
        for cluster in (lengths[lengths <= threshold], lengths[lengths > threshold]):
            if len(cluster) == 0 or np.mean(cluster) == 0:
                continue
            cv = np.std(cluster) / np.mean(cluster)
            stabilities.append(max(0.0, 100 - (cv * 200)))

        return float(np.mean(stabilities)) if stabilities else 0.0

    def _calculate_rhythm_consistency(self, gaps):
        """Консистентность ритма по паузам (0-100)"""
        if not gaps or len(gaps) < 5:
            return 50.0  # недостаточно данных

        gap_durations = np.array(gaps, dtype=float)
        mean_gap = np.mean(gap_durations)
        if mean_gap <= 0:
            return 0.0

        # Паузы бывают трёх видов, поэтому смотрим на самый частый кластер
        threshold = np.median(gap_durations)
        short_gaps = gap_durations[gap_durations <= threshold]
        gap_cv = np.std(short_gaps) / np.mean(short_gaps) if np.mean(short_gaps) > 0 else 1

        return max(0.0, 100 - (gap_cv * 150))

    def _calculate_dot_dash_ratio(self, lengths):
        """Соотношение длительностей точка/тире (идеал = 3.0)"""
        threshold = np.median(lengths)
        dots = lengths[lengths < threshold]
        dashes = lengths[lengths >= threshold]

        if len(dots) == 0 or len(dashes) == 0:
            return 0.0

        avg_dot = np.mean(dots)
        if avg_dot == 0:
            return 0.0

        return np.mean(dashes) / avg_dot

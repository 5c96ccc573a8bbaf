"""
Тестирование классификатора длительностей
Проверяет обе грамматики и политику границ (верхние границы включительно)
"""
import unittest
from flashmorse.config import DetectionConfig, ClassificationGrammar
from flashmorse.edge_detector import Duration
from flashmorse.morse_classifier import (
    Symbol,
    GapAwareClassifier,
    DurationBandClassifier,
    classify_duration,
    gap_between,
    make_classifier,
)


class TestGapAwareClassifier(unittest.TestCase):
    """Тесты грамматики с паузами"""

    def setUp(self):
        self.classifier = GapAwareClassifier(DetectionConfig())

    def test_single_dot(self):
        """Тест одиночной точки"""
        self.assertEqual(self.classifier.classify([Duration(100, 0)]), [Symbol.DOT])

    def test_pulse_boundaries(self):
        """Тест границ точки и тире"""
        test_cases = [
            (0, [Symbol.DOT]),
            (200, [Symbol.DOT]),
            (201, [Symbol.DASH]),
            (500, [Symbol.DASH]),
            (501, []),   # слишком длинная вспышка отбрасывается
            (1000, []),
        ]

        for length, expected in test_cases:
            result = self.classifier.classify([Duration(length, 0)])
            self.assertEqual(result, expected,
                             f"Вспышка {length} мс должна дать {expected}, получено {result}")

    def test_letter_gap(self):
        """Тест паузы между буквами"""
        result = self.classifier.classify([Duration(100, 0), Duration(100, 1000)])
        self.assertEqual(result, [Symbol.DOT, Symbol.LETTER_GAP, Symbol.DOT])

    def test_word_gap(self):
        """Тест паузы между словами"""
        result = self.classifier.classify([Duration(100, 0), Duration(100, 1600)])
        self.assertEqual(result, [Symbol.DOT, Symbol.WORD_GAP, Symbol.DOT])

    def test_gap_boundaries(self):
        """Тест что границы пауз включительные снизу"""
        test_cases = [
            (300, [Symbol.DOT, Symbol.DOT]),
            (799, [Symbol.DOT, Symbol.DOT]),
            (800, [Symbol.DOT, Symbol.LETTER_GAP, Symbol.DOT]),
            (1399, [Symbol.DOT, Symbol.LETTER_GAP, Symbol.DOT]),
            (1400, [Symbol.DOT, Symbol.WORD_GAP, Symbol.DOT]),
        ]

        for gap, expected in test_cases:
            durations = [Duration(100, 0), Duration(100, 100 + gap)]
            result = self.classifier.classify(durations)
            self.assertEqual(result, expected, f"Пауза {gap} мс: получено {result}")

    def test_long_pulse_keeps_gap(self):
        """Тест что отброшенная вспышка не теряет разделитель"""
        result = self.classifier.classify([Duration(600, 0), Duration(100, 1500)])
        self.assertEqual(result, [Symbol.LETTER_GAP, Symbol.DOT])

    def test_plain_numbers_have_no_gaps(self):
        """Тест списка чисел без времени начала"""
        self.assertEqual(self.classifier.classify([100, 300, 100]),
                         [Symbol.DOT, Symbol.DASH, Symbol.DOT])

    def test_empty_input(self):
        """Тест пустого ввода"""
        self.assertEqual(self.classifier.classify([]), [])

    def test_gap_between(self):
        """Тест вычисления паузы"""
        self.assertEqual(gap_between(Duration(100, 0), Duration(100, 1000)), 900)
        self.assertIsNone(gap_between(100, 100))


class TestDurationBandClassifier(unittest.TestCase):
    """Тесты грамматики "длительность как пауза" """

    def setUp(self):
        self.classifier = DurationBandClassifier(DetectionConfig())

    def test_band_boundaries(self):
        """Тест возрастающих полос с включительными верхними границами"""
        test_cases = [
            (100, Symbol.DOT),
            (200, Symbol.DOT),
            (201, Symbol.DASH),
            (500, Symbol.DASH),
            (600, Symbol.LETTER_GAP),  # между тире и паузой буквы - это пауза, не тире
            (800, Symbol.LETTER_GAP),
            (801, Symbol.WORD_GAP),
            (1400, Symbol.WORD_GAP),
            (1401, Symbol.NONE),
        ]

        for length, expected in test_cases:
            self.assertEqual(classify_duration(length), expected,
                             f"Длительность {length} мс должна давать {expected}")

    def test_sequence(self):
        """Тест последовательности с паузами внутри"""
        result = self.classifier.classify([100, 600, 100, 1000, 300])
        self.assertEqual(result, [Symbol.DOT, Symbol.LETTER_GAP, Symbol.DOT,
                                  Symbol.WORD_GAP, Symbol.DASH])

    def test_too_long_dropped(self):
        """Тест что слишком длинная длительность ничего не даёт"""
        self.assertEqual(self.classifier.classify([2000]), [])

    def test_accepts_durations(self):
        """Тест что принимаются и объекты Duration"""
        self.assertEqual(self.classifier.classify([Duration(600, 0)]), [Symbol.LETTER_GAP])

    def test_custom_thresholds(self):
        """Тест настраиваемых границ"""
        config = DetectionConfig(dot_threshold_ms=100, dash_threshold_ms=300,
                                 letter_pause_ms=600, word_pause_ms=900)
        self.assertEqual(classify_duration(150, config), Symbol.DASH)
        self.assertEqual(classify_duration(700, config), Symbol.WORD_GAP)


class TestMakeClassifier(unittest.TestCase):
    """Тесты выбора классификатора"""

    def test_grammar_selection(self):
        self.assertIsInstance(make_classifier(), GapAwareClassifier)
        config = DetectionConfig(grammar=ClassificationGrammar.DURATION_BANDS)
        self.assertIsInstance(make_classifier(config), DurationBandClassifier)

    def test_symbol_glyphs(self):
        self.assertEqual([s.glyph for s in Symbol], ['.', '-', '/', '//', ''])


def run_tests():
    """Запуск всех тестов"""
    loader = unittest.TestLoader()
    suite = unittest.TestSuite()
    for case in (TestGapAwareClassifier, TestDurationBandClassifier, TestMakeClassifier):
        suite.addTests(loader.loadTestsFromTestCase(case))
    runner = unittest.TextTestRunner(verbosity=2)
    return runner.run(suite)


if __name__ == '__main__':
    print("=" * 80)
    print("ТЕСТИРОВАНИЕ КЛАССИФИКАТОРА")
    print("=" * 80)
    print()

    result = run_tests()

    print("\n" + "=" * 80)
    print(f"Запущено тестов: {result.testsRun}")
    print(f"Успешно: {result.testsRun - len(result.failures) - len(result.errors)}")
    print(f"Провалено: {len(result.failures)}")
    print(f"Ошибки: {len(result.errors)}")
    print("=" * 80)

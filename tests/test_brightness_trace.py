"""
Тестирование работы с записями яркости и синтеза сигналов
Проверяет загрузку/сохранение CSV, сглаживание, оценку порогов и генерацию записей
"""
import os
import shutil
import tempfile
import unittest
from flashmorse.brightness_trace import load_trace, save_trace, smooth_trace, estimate_thresholds
from flashmorse.edge_detector import BrightnessSample, Duration
from flashmorse.synthesis import text_to_durations, text_to_band_durations, synthesize_trace


def samples_of(values, step=100):
    return [BrightnessSample(i * step, v) for i, v in enumerate(values)]


class TestTraceFiles(unittest.TestCase):
    """Тесты загрузки и сохранения CSV"""

    def setUp(self):
        self.temp_dir = tempfile.mkdtemp()

    def tearDown(self):
        shutil.rmtree(self.temp_dir)

    def write_text(self, name, text):
        path = os.path.join(self.temp_dir, name)
        with open(path, 'w', encoding='utf-8') as f:
            f.write(text)
        return path

    def test_save_and_load(self):
        """Тест сохранения и загрузки записи"""
        samples = samples_of([10.0, 12.5, 200.0, 199.25, 11.0])
        path = os.path.join(self.temp_dir, "trace.csv")

        save_trace(samples, path)
        loaded = load_trace(path)

        self.assertEqual(loaded, samples)

    def test_header_and_invalid_values(self):
        """Тест заголовка без '#' и нечисловой яркости"""
        path = self.write_text("trace.csv",
                               "timestamp,brightness\n"
                               "0,10\n"
                               "33,abc\n"
                               "66,180.5\n")
        loaded = load_trace(path)

        self.assertEqual([s.timestamp for s in loaded], [0, 33, 66])
        self.assertEqual(loaded[2].value, 180.5)
        self.assertNotEqual(loaded[1].value, loaded[1].value, "Мусор должен стать NaN")

    def test_missing_file(self):
        with self.assertRaises(FileNotFoundError):
            load_trace(os.path.join(self.temp_dir, "missing.csv"))

    def test_no_samples(self):
        """Тест файла без отсчётов"""
        path = self.write_text("empty.csv", "timestamp,brightness\n")
        with self.assertRaises(ValueError):
            load_trace(path)


class TestTraceProcessing(unittest.TestCase):
    """Тесты сглаживания и оценки порогов"""

    def test_smooth_removes_spike(self):
        """Тест что медианный фильтр убирает одиночный выброс"""
        smoothed = smooth_trace(samples_of([10, 10, 200, 10, 10]), window=3)
        self.assertEqual([s.value for s in smoothed], [10.0] * 5)
        self.assertEqual([s.timestamp for s in smoothed], [0, 100, 200, 300, 400])

    def test_smooth_keeps_flash(self):
        """Тест что вспышка длиннее окна сохраняется"""
        smoothed = smooth_trace(samples_of([10, 200, 200, 200, 10]), window=3)
        self.assertEqual([s.value for s in smoothed], [10.0, 200.0, 200.0, 200.0, 10.0])

    def test_smooth_window_one(self):
        samples = samples_of([10, 200, 10])
        self.assertEqual(smooth_trace(samples, window=1), samples)

    def test_estimate_thresholds(self):
        """Тест оценки порогов по перцентилям"""
        samples = samples_of([10] * 80 + [200] * 20)
        on_threshold, off_threshold = estimate_thresholds(samples)
        self.assertAlmostEqual(on_threshold, 124.0)
        self.assertAlmostEqual(off_threshold, 86.0)

    def test_no_contrast(self):
        """Тест записи без контраста"""
        self.assertIsNone(estimate_thresholds(samples_of([50] * 10)))
        self.assertIsNone(estimate_thresholds([]))


class TestSynthesis(unittest.TestCase):
    """Тесты генерации синтетических сигналов"""

    def test_text_to_durations(self):
        self.assertEqual(text_to_durations("E"), [Duration(120, 0)])
        self.assertEqual(text_to_durations("EE"), [Duration(120, 0), Duration(120, 1120)])
        self.assertEqual(text_to_durations("E E"), [Duration(120, 0), Duration(120, 1920)])
        self.assertEqual(text_to_durations(""), [])

    def test_text_to_band_durations(self):
        self.assertEqual(text_to_band_durations("ET"), [120, 650, 360])
        self.assertEqual(text_to_band_durations("E T"), [120, 1100, 360])

    def test_synthesize_trace(self):
        """Тест записи без шума"""
        samples = synthesize_trace("E", fps=10)
        self.assertEqual(len(samples), 12)
        on = [s.timestamp for s in samples if s.value > 100]
        self.assertEqual(on, [500, 600])

    def test_noise_reproducible(self):
        """Тест воспроизводимости шума с зерном"""
        first = synthesize_trace("SOS", noise=5.0, seed=11)
        second = synthesize_trace("SOS", noise=5.0, seed=11)
        self.assertEqual(first, second)
        self.assertTrue(all(0.0 <= s.value <= 255.0 for s in first))


def run_tests():
    """Запуск всех тестов"""
    loader = unittest.TestLoader()
    suite = unittest.TestSuite()
    for case in (TestTraceFiles, TestTraceProcessing, TestSynthesis):
        suite.addTests(loader.loadTestsFromTestCase(case))
    runner = unittest.TextTestRunner(verbosity=2)
    return runner.run(suite)


if __name__ == '__main__':
    print("=" * 80)
    print("ТЕСТИРОВАНИЕ ЗАПИСЕЙ ЯРКОСТИ")
    print("=" * 80)
    print()

    result = run_tests()

    print("\n" + "=" * 80)
    print(f"Запущено тестов: {result.testsRun}")
    print(f"Успешно: {result.testsRun - len(result.failures) - len(result.errors)}")
    print(f"Провалено: {len(result.failures)}")
    print(f"Ошибки: {len(result.errors)}")
    print("=" * 80)

#!/usr/bin/env python3
"""
Flash Morse CLI - интерфейс командной строки
Декодирование световой азбуки Морзе из записей яркости кадров

Лицензия: MIT

Использование:
  python blink_cli.py decode <запись.csv> [--config CONFIG] [--policy P] [--grammar G] [--analyze]
  python blink_cli.py batch <папка> [--workers N]
  python blink_cli.py tune <запись.csv> [--mode MODE]
  python blink_cli.py simulate <текст> [--fps N] [--noise N] [--output запись.csv]

Формат записи: CSV "timestamp,brightness" (мс, средняя яркость 0-255 по области интереса).
"""

import argparse
import json
import sys
import os
import time
from pathlib import Path
from concurrent.futures import ThreadPoolExecutor, as_completed

from tqdm import tqdm

from flashmorse.auto_tune import auto_tune_parameters
from flashmorse.brightness_trace import load_trace, save_trace, smooth_trace, estimate_thresholds
from flashmorse.capture_session import CaptureSession
from flashmorse.config import DetectionConfig, DetectionPolicy, ClassificationGrammar
from flashmorse.synthesis import synthesize_trace


def default_config_path(trace_path):
    """Конфиг по умолчанию лежит рядом с записью: <имя>.config.json"""
    return Path(trace_path).with_suffix('.config.json')


def build_config(args, trace_path=None, samples=None):
    """
    Конфигурация из --config (или соседнего .config.json) и флагов командной строки
    """
    config_path = getattr(args, 'config', None)
    if not config_path and trace_path is not None:
        candidate = default_config_path(trace_path)
        if candidate.exists():
            config_path = candidate

    config = DetectionConfig.from_json_file(config_path) if config_path else DetectionConfig()

    overrides = {}
    if getattr(args, 'policy', None):
        overrides['policy'] = DetectionPolicy(args.policy)
    if getattr(args, 'grammar', None):
        overrides['grammar'] = ClassificationGrammar(args.grammar)
    if getattr(args, 'debounce', None) is not None:
        overrides['debounce_ms'] = args.debounce

    if getattr(args, 'auto_thresholds', False) and samples:
        thresholds = estimate_thresholds(samples)
        if thresholds:
            overrides['on_threshold'], overrides['off_threshold'] = thresholds
            # Для одного порога берём середину
            overrides['threshold'] = sum(thresholds) / 2

    return config.replace(**overrides) if overrides else config


def decode_trace_file(trace_path, args, verbose=False):
    """Загрузка, подготовка и декодирование одной записи"""
    samples = load_trace(trace_path)
    if getattr(args, 'smooth', 0):
        samples = smooth_trace(samples, args.smooth)

    config = build_config(args, trace_path, samples)
    session = CaptureSession(config, verbose=verbose)
    session.feed_all(samples)
    return session.complete(), config, len(samples)


def print_result(result, analyze=False):
    if result is None:
        print("✗ Вспышки не обнаружены")
        return

    print(f"\n📝 Морзе-код: {result.morse}")
    print(f"✓ Текст: {result.text}")
    print(f"   Вспышек: {len(result.durations)}")

    if analyze:
        stats = result.stats
        print(f"\n📊 АНАЛИТИКА ТАЙМИНГА")
        print(f"{'='*60}")
        print(f"   Скорость:         ~{stats['wpm']} WPM")
        print(f"   Средняя вспышка:  {stats['mean_ms']:.1f} мс")
        print(f"   Стабильность:     {stats['timing_stability']:.1f}/100")
        print(f"   Консистентность:  {stats['rhythm_consistency']:.1f}/100")
        print(f"   Точка/Тире:       {stats['dot_dash_ratio']:.2f} (идеал: 3.0)")
        print(f"   Уровень:          {stats['skill_level']}")


def result_to_dict(result, config):
    if result is None:
        return {'morse': '', 'text': '', 'durations': [], 'config': config.to_dict()}
    return {
        'morse': result.morse,
        'text': result.text,
        'durations': list(result.durations),
        'stats': result.stats,
        'config': config.to_dict()
    }


def cmd_decode(args):
    """Декодирование одной записи"""
    if not os.path.exists(args.file):
        print(f"❌ Файл не найден: {args.file}")
        return 1

    if not args.json:
        print(f"\n{'='*60}")
        print(f"Обработка: {Path(args.file).name}")
        print(f"{'='*60}")

    result, config, sample_count = decode_trace_file(args.file, args, verbose=args.verbose)

    if args.json:
        print(json.dumps(result_to_dict(result, config), ensure_ascii=False, indent=2))
        return 0

    print(f"✓ Загружено отсчётов: {sample_count}")
    print(f"⚙️  Стратегия: {config.policy.value}, грамматика: {config.grammar.value}")
    print_result(result, analyze=args.analyze)
    return 0


def cmd_batch(args):
    """Пакетная обработка всех CSV-записей в папке"""
    if not os.path.exists(args.folder):
        print(f"❌ Папка не найдена: {args.folder}")
        return 1

    trace_files = sorted(Path(args.folder).glob("*.csv"))
    if not trace_files:
        print(f"❌ CSV-файлы не найдены в: {args.folder}")
        return 1

    workers = args.workers or os.cpu_count() or 1
    workers = min(workers, len(trace_files))

    print(f"📂 Найдено файлов: {len(trace_files)}")
    if workers > 1:
        print(f"🔄 Параллельных потоков: {workers}")
    print("=" * 80)

    def process_file(trace_file):
        """Обработка одного файла (для параллелизации)"""
        try:
            result, _, _ = decode_trace_file(trace_file, args)
            return trace_file, result, None
        except (OSError, ValueError) as e:
            return trace_file, None, str(e)

    results = []
    total_start = time.time()
    with ThreadPoolExecutor(max_workers=workers) as executor:
        futures = [executor.submit(process_file, f) for f in trace_files]
        for future in tqdm(as_completed(futures), total=len(futures),
                           desc="Декодирование", unit="файл"):
            results.append(future.result())

    print()
    for trace_file, result, error in sorted(results, key=lambda r: r[0].name):
        if error:
            print(f"❌ {trace_file.name}: {error}")
        elif result is None:
            print(f"✗ {trace_file.name}: вспышки не обнаружены")
        else:
            print(f"✓ {trace_file.name}: {result.text}  [{result.morse}]")

    print(f"\n⏱️  Общее время: {time.time() - total_start:.1f} сек")
    return 0


def cmd_tune(args):
    """Подбор параметров детекции для записи"""
    if not os.path.exists(args.file):
        print(f"❌ Файл не найден: {args.file}")
        return 1

    samples = load_trace(args.file)
    best = auto_tune_parameters(samples, mode=args.mode, base_config=build_config(args))
    if best is None:
        return 1

    print("\n⚙️  Конфигурация (сохраните в .config.json рядом с записью):")
    print(json.dumps({'parameters': best['config'].to_dict()}, ensure_ascii=False, indent=2))
    return 0


def cmd_simulate(args):
    """Синтез записи по тексту и её декодирование"""
    samples = synthesize_trace(args.text, fps=args.fps, noise=args.noise, seed=args.seed)
    print(f"🎬 Синтезировано отсчётов: {len(samples)} ({args.fps} кадр/с, шум {args.noise})")

    if args.output:
        save_trace(samples, args.output)
        print(f"✓ Запись сохранена: {args.output}")

    session = CaptureSession(build_config(args), verbose=args.verbose)
    session.feed_all(samples)
    print_result(session.complete())
    return 0


def main():
    """Главная функция CLI"""
    parser = argparse.ArgumentParser(
        description='Flash Morse - декодирование световой азбуки Морзе',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Примеры использования:

  Декодирование записи:
    python blink_cli.py decode flash.csv
    python blink_cli.py decode flash.csv --policy single_threshold --analyze
    python blink_cli.py decode flash.csv --auto-thresholds --smooth 3 --json

  Пакетная обработка папки:
    python blink_cli.py batch recordings --workers 4

  Подбор параметров:
    python blink_cli.py tune flash.csv --mode thorough

  Синтетический сигнал:
    python blink_cli.py simulate "SOS" --noise 5 --output sos.csv
        """
    )

    subparsers = parser.add_subparsers(dest='command', help='Доступные команды')

    def add_detection_args(sub):
        sub.add_argument('--config', '-c', help='Путь к .config.json (по умолчанию: рядом с файлом)')
        sub.add_argument('--policy', '-p', choices=[p.value for p in DetectionPolicy],
                         help='Стратегия детекции вспышек')
        sub.add_argument('--grammar', '-g', choices=[g.value for g in ClassificationGrammar],
                         help='Грамматика классификации')
        sub.add_argument('--debounce', type=int, help='Окно антидребезга, мс')

    # Команда: decode
    parser_decode = subparsers.add_parser('decode', help='Декодирование записи яркости')
    parser_decode.add_argument('file', help='Путь к CSV-записи')
    add_detection_args(parser_decode)
    parser_decode.add_argument('--smooth', '-s', type=int, default=0,
                               help='Окно медианного сглаживания (кадров)')
    parser_decode.add_argument('--auto-thresholds', action='store_true',
                               help='Оценить пороги яркости по записи')
    parser_decode.add_argument('--analyze', '-a', action='store_true',
                               help='Показать аналитику тайминга')
    parser_decode.add_argument('--json', action='store_true', help='Вывод в JSON')
    parser_decode.add_argument('--verbose', '-v', action='store_true',
                               help='Печатать каждую вспышку')
    parser_decode.set_defaults(func=cmd_decode)

    # Команда: batch
    parser_batch = subparsers.add_parser('batch', help='Пакетная обработка папки')
    parser_batch.add_argument('folder', help='Путь к папке с CSV-записями')
    add_detection_args(parser_batch)
    parser_batch.add_argument('--smooth', '-s', type=int, default=0,
                              help='Окно медианного сглаживания (кадров)')
    parser_batch.add_argument('--auto-thresholds', action='store_true',
                              help='Оценить пороги яркости по каждой записи')
    parser_batch.add_argument('--workers', '-w', type=int, default=0,
                              help='Количество параллельных потоков (0=авто, 1=последовательно)')
    parser_batch.set_defaults(func=cmd_batch)

    # Команда: tune
    parser_tune = subparsers.add_parser('tune', help='Подбор параметров детекции')
    parser_tune.add_argument('file', help='Путь к CSV-записи')
    add_detection_args(parser_tune)
    parser_tune.add_argument('--mode', '-m', default='fast',
                             choices=['fast', 'thorough', 'extreme'],
                             help='Режим обработки (по умолчанию: fast)')
    parser_tune.set_defaults(func=cmd_tune)

    # Команда: simulate
    parser_sim = subparsers.add_parser('simulate', help='Синтез и декодирование сигнала')
    parser_sim.add_argument('text', help='Передаваемый текст')
    add_detection_args(parser_sim)
    parser_sim.add_argument('--fps', type=int, default=30, help='Кадров в секунду (по умолчанию: 30)')
    parser_sim.add_argument('--noise', type=float, default=0.0, help='СКО шума яркости')
    parser_sim.add_argument('--seed', type=int, default=None, help='Зерно генератора шума')
    parser_sim.add_argument('--output', '-o', help='Сохранить запись в CSV')
    parser_sim.add_argument('--verbose', '-v', action='store_true',
                            help='Печатать каждую вспышку')
    parser_sim.set_defaults(func=cmd_simulate)

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        return 0

    try:
        return args.func(args)
    except KeyboardInterrupt:
        print("\n\n⚠️  Прервано пользователем")
        return 130
    except (OSError, ValueError) as e:
        print(f"\n❌ Ошибка: {e}")
        return 1


if __name__ == '__main__':
    sys.exit(main())

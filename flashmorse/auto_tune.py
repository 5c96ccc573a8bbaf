"""
Автоматический подбор параметров детекции для записи яркости
"""
import itertools
from multiprocessing import Pool, cpu_count

from tqdm import tqdm

from .brightness_trace import estimate_thresholds
from .capture_session import CaptureSession
from .config import DetectionConfig
from .morse_decoder import MorseDecoder

# Диапазоны перебора: доли между фоном и вспышкой для порогов + антидребезг (мс)
TUNE_RANGES = {
    'fast': {
        'on_fraction': [0.5, 0.6, 0.7],
        'off_fraction': [0.3, 0.4],
        'debounce_ms': [50],
    },
    'thorough': {
        'on_fraction': [0.4, 0.5, 0.6, 0.7, 0.8],
        'off_fraction': [0.2, 0.3, 0.4],
        'debounce_ms': [30, 50, 80],
    },
    'extreme': {
        'on_fraction': [0.35, 0.45, 0.55, 0.65, 0.75, 0.85],
        'off_fraction': [0.15, 0.25, 0.35, 0.45],
        'debounce_ms': [20, 35, 50, 65, 80, 100],
    },
}


def unknown_ratio(morse):
    """Доля кодов, которых нет в словаре"""
    letters = [l for l in morse.replace('//', '/').split('/') if l]
    if not letters:
        return 1.0
    return len(MorseDecoder().unknown_patterns(morse)) / len(letters)


def calculate_quality_score(text, morse, durations, config):
    """
    Оценка качества декодирования (чем выше, тем лучше)
    """
    if not text:
        return 0

    # Вспышки длиннее тире отбрасываются классификатором - это потеря данных
    too_long = sum(1 for d in durations if d > config.dash_threshold_ms)

    score = 0
    score += min(len(text.replace(' ', '')), 100)  # содержательный текст
    score -= unknown_ratio(morse) * 200  # нераспознанные коды
    score -= too_long * 5

    return score


def try_parameter_combination(samples, base_config, thresholds, on_fraction,
                               off_fraction, debounce_ms):
    """
    Декодирование записи с одной комбинацией параметров
    """
    background, flash = thresholds
    span = flash - background
    try:
        config = base_config.replace(
            on_threshold=background + span * on_fraction,
            off_threshold=background + span * off_fraction,
            debounce_ms=debounce_ms,
        )
    except ValueError:
        # Комбинация с on <= off бессмысленна
        return None

    session = CaptureSession(config)
    session.feed_all(samples)
    durations = session.durations
    result = session.complete()
    if result is None:
        return None

    score = calculate_quality_score(result.text, result.morse, durations, config)

    return {
        'params': {
            'on_fraction': on_fraction,
            'off_fraction': off_fraction,
            'debounce_ms': debounce_ms,
        },
        'config': config,
        'text': result.text,
        'morse': result.morse,
        'score': score,
        'unknown_ratio': unknown_ratio(result.morse),
    }


def _try_params_wrapper(args):
    """Wrapper для multiprocessing - распаковывает аргументы"""
    return try_parameter_combination(*args)


def auto_tune_parameters(samples, mode='fast', base_config=None, verbose=True):
    """
    Подбор порогов яркости и антидребезга

    Args:
        samples: список BrightnessSample
        mode: 'fast' | 'thorough' | 'extreme'
        base_config: конфигурация, от которой отталкиваемся
        verbose: печатать прогресс и итог

    Returns:
        dict лучшего результата или None
    """
    if mode not in TUNE_RANGES:
        raise ValueError(f"Неизвестный режим: {mode}")

    samples = list(samples)
    base_config = base_config or DetectionConfig()

    # Опорные уровни: фон и вспышка (доли 0 и 1)
    levels = estimate_thresholds(samples, on_fraction=1.0, off_fraction=0.0)
    if levels is None:
        if verbose:
            print("❌ В записи нет контраста яркости")
        return None
    flash, background = levels

    ranges = TUNE_RANGES[mode]
    combinations = [
        (on_f, off_f, deb)
        for on_f, off_f, deb in itertools.product(
            ranges['on_fraction'], ranges['off_fraction'], ranges['debounce_ms'])
        if on_f > off_f
    ]
    total = len(combinations)
    args_list = [(samples, base_config, (background, flash), on_f, off_f, deb)
                 for on_f, off_f, deb in combinations]

    if verbose:
        print("=" * 80)
        print("🎛️  АВТОМАТИЧЕСКИЙ ПОДБОР ПАРАМЕТРОВ")
        print("=" * 80)
        print(f"Режим: {mode.upper()}")
        print(f"Фон: {background:.1f}, вспышка: {flash:.1f}")
        print(f"🔬 Тестирование {total} комбинаций параметров...")

    use_parallel = mode in ['thorough', 'extreme'] and total > 50
    if use_parallel:
        workers = cpu_count()
        if verbose:
            print(f"⚡ Параллельная обработка на {workers} ядрах")
        with Pool(workers) as pool:
            results = list(tqdm(pool.imap(_try_params_wrapper, args_list),
                                total=total, desc="Подбор параметров",
                                unit="комб", disable=not verbose))
    else:
        results = [_try_params_wrapper(args)
                   for args in tqdm(args_list, desc="Подбор параметров",
                                    unit="комб", disable=not verbose)]

    best_result = None
    for result in results:
        if result and (best_result is None or result['score'] > best_result['score']):
            best_result = result

    if verbose:
        print()
        if best_result:
            config = best_result['config']
            print("✅ ОПТИМАЛЬНЫЕ ПАРАМЕТРЫ НАЙДЕНЫ")
            print(f"   Порог ON:       {config.on_threshold:.1f}")
            print(f"   Порог OFF:      {config.off_threshold:.1f}")
            print(f"   Антидребезг:    {config.debounce_ms} мс")
            print(f"   Оценка:         {best_result['score']:.1f}")
            print(f"\n📝 Морзе-код: {best_result['morse']}")
            print(f"📝 Текст: {best_result['text']}")
        else:
            print("❌ Не удалось найти подходящие параметры")

    return best_result

"""
Декодер азбуки Морзе
Собирает символы в строку морзе и переводит её в текст
"""

from types import MappingProxyType

from .morse_classifier import Symbol, make_classifier

# Разделители в строке морзе
LETTER_SEPARATOR = Symbol.LETTER_GAP.glyph
WORD_SEPARATOR = Symbol.WORD_GAP.glyph

# Словарь Морзе: латиница и цифры (коды длиной 1-5)
MORSE_CODE_DICT = MappingProxyType({
    '.-': 'A', '-...': 'B', '-.-.': 'C', '-..': 'D', '.': 'E',
    '..-.': 'F', '--.': 'G', '....': 'H', '..': 'I', '.---': 'J',
    '-.-': 'K', '.-..': 'L', '--': 'M', '-.': 'N', '---': 'O',
    '.--.': 'P', '--.-': 'Q', '.-.': 'R', '...': 'S', '-': 'T',
    '..-': 'U', '...-': 'V', '.--': 'W', '-..-': 'X', '-.--': 'Y',
    '--..': 'Z', '-----': '0', '.----': '1', '..---': '2', '...--': '3',
    '....-': '4', '.....': '5', '-....': '6', '--...': '7', '---..': '8',
    '----.': '9',
})

# Обратный словарь для кодирования
TEXT_TO_MORSE = MappingProxyType({char: code for code, char in MORSE_CODE_DICT.items()})


def _glyph_of(symbol):
    # Symbol или уже готовая строка ('.', '-', '/', '//')
    return getattr(symbol, 'glyph', symbol)


class MorseDecoder:
    """
    Перевод символов Морзе в текст

    Неизвестные коды молча пропускаются: декодирование всегда
    завершается успешно. Если нужна строгая проверка, анализируйте
    возвращаемую строку морзе самостоятельно.
    """

    def __init__(self, alphabet=None):
        self.alphabet = MORSE_CODE_DICT if alphabet is None else MappingProxyType(dict(alphabet))

    def symbols_to_morse(self, symbols):
        """Склейка символов в строку морзе"""
        return ''.join(_glyph_of(s) for s in symbols)

    def decode_letter(self, pattern):
        """Один код -> символ ('' если код неизвестен)"""
        return self.alphabet.get(pattern, '')

    def decode_morse(self, morse_code):
        """
        Строка морзе -> текст

        '//' разделяет слова, '/' разделяет буквы внутри слова.
        Буквы склеиваются без пробелов, слова - через один пробел.
        """
        words = morse_code.split(WORD_SEPARATOR)
        text = ' '.join(
            ''.join(self.decode_letter(letter) for letter in word.split(LETTER_SEPARATOR))
            for word in words
        )
        return text.strip()

    def decode(self, symbols):
        """
        Декодирование последовательности символов

        Returns:
            (строка морзе, текст)
        """
        morse_code = self.symbols_to_morse(symbols)
        return morse_code, self.decode_morse(morse_code)

    def unknown_patterns(self, morse_code):
        """Коды из строки морзе, которых нет в словаре"""
        unknown = []
        for word in morse_code.split(WORD_SEPARATOR):
            for letter in word.split(LETTER_SEPARATOR):
                if letter and letter not in self.alphabet:
                    unknown.append(letter)
        return unknown


def encode_text(text):
    """
    Текст -> строка морзе в той же записи, что выдаёт декодер

    Символы вне словаря пропускаются, пробелы схлопываются.
    """
    words = []
    for word in text.upper().split():
        letters = [TEXT_TO_MORSE[char] for char in word if char in TEXT_TO_MORSE]
        if letters:
            words.append(LETTER_SEPARATOR.join(letters))
    return WORD_SEPARATOR.join(words)


def decode_durations(durations, config=None):
    """Полный путь длительности -> (строка морзе, текст)"""
    symbols = make_classifier(config).classify(durations)
    return MorseDecoder().decode(symbols)

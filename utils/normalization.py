import math
import re
from typing import Optional, Sequence

from utils.classification import guess_category
from utils.html import decode_html_entities

# Единицы измерения (только английский язык), в виде фрагментов regex.
# Порядок важен: более длинные формы идут раньше коротких
KNOWN_UNITS: tuple[str, ...] = (
    r'tablespoons?', r'tbsp\.?', r'tbs\.?',
    r'teaspoons?', r'tsp\.?',
    r'ounces?', r'oz\.?',
    r'pounds?', r'lbs?\.?', r'lb\.?',
    r'cups?',
    r'grams?',
    r'kilograms?', r'kg\.?',
    r'milliliters?', r'ml\.?',
    r'liters?',
    r'quarts?', r'qt\.?',
    r'pints?', r'pt\.?',
    r'gallons?', r'gal\.?',
    r'pinch(?:es)?',
    r'dash(?:es)?',
    r'cloves?',
    r'cans?',
    r'packages?', r'pkg\.?',
    r'bunche?s?',
    r'stalks?',
    r'slices?',
    r'pieces?',
    r'heads?',
    r'sprigs?',
    r'leaves?',
    r'whole',
    r'large',
    r'medium',
    r'small',
)

UNICODE_FRACTIONS = {
    '½': '1/2', '⅓': '1/3', '⅔': '2/3', '¼': '1/4', '¾': '3/4',
    '⅛': '1/8', '⅜': '3/8', '⅝': '5/8', '⅞': '7/8',
    '⅕': '1/5', '⅖': '2/5', '⅗': '3/5', '⅘': '4/5',
    '⅙': '1/6', '⅚': '5/6',
}

MIXED_FRACTION_PATTERN = re.compile(r'^(\d+)\s+(\d+)/(\d+)$')
SIMPLE_FRACTION_PATTERN = re.compile(r'^(\d+)/(\d+)$')
# Аналог parseFloat: берется только числовой префикс строки
FLOAT_PREFIX_PATTERN = re.compile(r'^\s*[-+]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][-+]?\d+)?')

QUANTITY_ONLY_PATTERN = re.compile(r'^([\d\s/\-.]+)\s+(.+)$')
TRAILING_PARENS_PATTERN = re.compile(r'^(.+?)\s*\(([^)]+)\)\s*$')


def build_unit_pattern(known_units: Sequence[str] = KNOWN_UNITS) -> re.Pattern:
    """Собирает regex "количество + единица + остаток" из списка единиц"""
    alternation = '|'.join(known_units)
    return re.compile(rf'^([\d\s/\-.]+)\s+({alternation})\s+(.+)$', re.IGNORECASE)


DEFAULT_UNIT_PATTERN = build_unit_pattern()


def parse_float(value: str) -> Optional[float]:
    """Преобразует числовой префикс строки в float, None если числа нет"""
    match = FLOAT_PREFIX_PATTERN.match(value)
    if not match:
        return None
    number = float(match.group(0))
    return number if math.isfinite(number) else None


def parse_quantity(quantity: str) -> Optional[float]:
    """
    Преобразует количество в float.

    Порядок разбора (первое совпадение побеждает):
        "2-3"   -> 2.5 (диапазон, берётся среднее)
        "1 1/2" -> 1.5 (смешанная дробь)
        "3/4"   -> 0.75 (простая дробь)
        "2"     -> 2.0
        "abc"   -> None
    """
    if quantity is None:
        return None
    text = str(quantity).strip()

    if '-' in text:
        parts = text.split('-')
        if len(parts) == 2:
            low, high = parse_float(parts[0]), parse_float(parts[1])
            if low is not None and high is not None:
                average = (low + high) / 2
                if math.isfinite(average):
                    return average

    # слишком длинные числа (OverflowError, ValueError у int) считаются неразобранными
    match = MIXED_FRACTION_PATTERN.match(text)
    if match:
        try:
            whole, numerator, denominator = (int(g) for g in match.groups())
            if denominator:
                return whole + numerator / denominator
        except (OverflowError, ValueError):
            return None

    match = SIMPLE_FRACTION_PATTERN.match(text)
    if match:
        try:
            numerator, denominator = (int(g) for g in match.groups())
            if denominator:
                return numerator / denominator
        except (OverflowError, ValueError):
            return None

    return parse_float(text)


def normalize_unicode_fractions(text: str) -> str:
    """Заменяет символы дробей на ASCII: 1½ -> 1 1/2, ¾ -> 3/4"""
    for fraction, ascii_fraction in UNICODE_FRACTIONS.items():
        text = re.sub(rf'(\d){fraction}', rf'\1 {ascii_fraction}', text)
        text = text.replace(fraction, ascii_fraction)
    return text


def split_name_and_preparation(rest: str) -> tuple[str, Optional[str]]:
    """
    Делит остаток строки ингредиента на название и способ подготовки

    "cabbage (shredded)" -> ("cabbage", "shredded")
    "onion, diced"       -> ("onion", "diced")
    "flour"              -> ("flour", None)
    """
    match = TRAILING_PARENS_PATTERN.match(rest)
    if match:
        return match.group(1).strip(), match.group(2).strip() or None

    name, comma, preparation = rest.partition(',')
    if comma:
        return name.strip(), preparation.strip() or None

    return rest.strip(), None


def parse_ingredient(line: Optional[str], unit_pattern: re.Pattern = DEFAULT_UNIT_PATTERN) -> Optional[dict]:
    """
    Разбирает строку ингредиента на количество, единицу, название и подготовку.

    Examples:
        "2 cups flour"     -> {"name": "flour", "quantity": 2.0, "unit": "cups", ...}
        "1 onion, diced"   -> {"name": "onion", "quantity": 1.0, "unit": "", "preparation": "diced", ...}
        "Salt to taste"    -> {"name": "Salt to taste", "quantity": None, "unit": "", ...}

    Args:
        line: строка из recipeIngredient
        unit_pattern: regex, собранный build_unit_pattern()

    Returns:
        Словарь ингредиента или None для пустой строки
    """
    if not line or not str(line).strip():
        return None

    text = decode_html_entities(str(line).strip()).strip()
    text = normalize_unicode_fractions(text)

    quantity: Optional[float] = None
    unit = ''
    rest = text

    match = unit_pattern.match(text)
    if match:
        quantity = parse_quantity(match.group(1).strip())
        unit = match.group(2).lower().rstrip('.')
        rest = match.group(3)
    else:
        match = QUANTITY_ONLY_PATTERN.match(text)
        if match:
            quantity = parse_quantity(match.group(1).strip())
            rest = match.group(2)

    name, preparation = split_name_and_preparation(rest)

    return {
        'name': name,
        'quantity': quantity,
        'unit': unit,
        'preparation': preparation,
        'category': guess_category(name),
        'optional': False,
    }


def parse_ingredients_list(lines, unit_pattern: re.Pattern = DEFAULT_UNIT_PATTERN) -> list[dict]:
    """
    Разбирает список строк ингредиентов, пустые строки отбрасываются
    """
    if not lines or not isinstance(lines, list):
        return []
    return [parsed for line in lines if isinstance(line, str) and (parsed := parse_ingredient(line, unit_pattern))]

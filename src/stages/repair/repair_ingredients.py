"""
Исправление данных ингредиентов в уже сохраненной библиотеке рецептов.

Что исправляется:
    1. quantity = null -> 0 ("по вкусу" / количество не указано)
    2. quantity с более чем 2 знаками после запятой -> округление до 2 знаков
    3. поврежденные названия после старых версий парсера
    4. мусорная пунктуация в preparation
    5. количество и единица, оставшиеся в названии при пустом quantity

Повторный запуск на исправленных данных ничего не меняет.
"""

import logging
import math
import re
from dataclasses import dataclass, field
from typing import Any, Callable, Optional

from src.models.recipe import Ingredient, Recipe
from utils.normalization import DEFAULT_UNIT_PATTERN, parse_ingredient

logger = logging.getLogger(__name__)

UNKNOWN_INGREDIENT = 'Unknown ingredient'
AS_NEEDED_UNIT = 'as needed'
# предел итераций до неподвижной точки
MAX_REPAIR_PASSES = 10

NULL_QUANTITY = 'null-quantity'
LONG_DECIMAL = 'long-decimal'
MALFORMED_NAME = 'malformed-name'
PREPARATION = 'preparation'
EMBEDDED_QUANTITY = 'embedded-quantity'


# Признаки поврежденного названия
MALFORMED_PATTERNS: tuple[re.Pattern, ...] = (
    re.compile(r'^to \d+\s+', re.I),          # "to 12  crispy taco shells"
    re.compile(r'^g\s*/\s*\d+', re.I),        # "g / 1 lb   beef"
    re.compile(r'^/\s*\d+'),                  # "/ 65ml  water"
    re.compile(r'^EACH\s+', re.I),            # "EACH garlic powder"
    re.compile(r'^\d+oz\.?\s+can', re.I),     # "15oz. cans black beans"
    re.compile(r'^\d+/\d+\s+cup', re.I),      # "1/2 cup Quinoa"
    re.compile(r'\(\s*$'),                    # заканчивается на "("
    re.compile(r'\)\s*$'),                    # заканчивается на ")" без пары
    re.compile(r'^\s*,'),                     # начинается с запятой
    re.compile(r'\(\('),                      # двойная открывающая скобка
)


@dataclass(frozen=True)
class NameFix:
    """Одно целевое исправление: применяется, если pattern находит совпадение"""
    name: str
    pattern: re.Pattern
    apply: Callable[[re.Match, str], str]

    def __call__(self, text: str) -> str:
        match = self.pattern.search(text)
        if not match:
            return text
        return self.apply(match, text)


def _strip_leading_paren(text: str) -> str:
    return re.sub(r'^\s*\(?\s*', '', text).strip()


def _drop_unbalanced_close(match: re.Match, text: str) -> str:
    # скобка убирается только если закрывающих больше, чем открывающих
    if text.count(')') > text.count('('):
        return re.sub(r'\)\s*$', '', text).strip()
    return text


NAME_FIXES: tuple[NameFix, ...] = (
    NameFix('leading-to-count', re.compile(r'^to (\d+)\s+(.+)', re.I),
            lambda m, text: m.group(2).strip()),
    # "g / 1 lb beef" -> "beef"
    NameFix('leading-grams-slash', re.compile(r'^g\s*/\s*[\d.]+\s*(?:lb|oz)?\s+(.+)', re.I),
            lambda m, text: _strip_leading_paren(m.group(1))),
    # "500g / 1 lb chicken" -> "chicken"
    NameFix('leading-metric-slash', re.compile(r'^(\d+)\s*g\s*/\s*[\d.]+\s*(?:lb|oz)?\s+(.+)', re.I),
            lambda m, text: _strip_leading_paren(m.group(2))),
    NameFix('leading-slash-ml', re.compile(r'^/\s*\d+\s*ml\s+(.+)', re.I),
            lambda m, text: m.group(1).strip()),
    NameFix('leading-each', re.compile(r'^EACH\s+(.+)', re.I),
            lambda m, text: m.group(1).strip()),
    NameFix('double-open-paren', re.compile(r'\(\('),
            lambda m, text: text.replace('((', '(')),
    NameFix('trailing-open-paren', re.compile(r'\(\s*$'),
            lambda m, text: re.sub(r'\(\s*$', '', text).strip()),
    NameFix('unbalanced-close-paren', re.compile(r'\)\s*$'), _drop_unbalanced_close),
    NameFix('leading-comma', re.compile(r'^\s*,\s*'),
            lambda m, text: re.sub(r'^\s*,\s*', '', text).strip()),
)


def is_malformed_name(name: Optional[str]) -> bool:
    if not name:
        return True
    return any(pattern.search(name) for pattern in MALFORMED_PATTERNS)


def cleanup_name(name: str) -> str:
    """Общая очистка: пунктуация по краям и повторяющиеся пробелы"""
    name = re.sub(r'^\s*[,\-:]\s*', '', name)
    name = re.sub(r'\s*[,\-:(]\s*$', '', name)
    return re.sub(r'\s+', ' ', name).strip()


def apply_name_fixes(name: str, fixes: tuple[NameFix, ...] = NAME_FIXES) -> str:
    """Исправления применяются последовательно, каждое к результату предыдущего"""
    fixed = name
    for fix in fixes:
        fixed = fix(fixed)
    # если после очистки ничего не осталось, название не трогаем
    return cleanup_name(fixed) or name


def repair_ingredient_name(name: Optional[str]) -> str:
    """
    Исправление названия ингредиента до неподвижной точки

    "to 12  crispy taco shells" -> "crispy taco shells"
    "EACH garlic powder"        -> "garlic powder"
    """
    if not name or not name.strip():
        return UNKNOWN_INGREDIENT

    fixed = name
    for _ in range(MAX_REPAIR_PASSES):
        if not is_malformed_name(fixed):
            break
        candidate = apply_name_fixes(fixed)
        if candidate == fixed:
            break
        fixed = candidate
    return fixed


def cleanup_preparation(preparation: str) -> str:
    """Убирает пунктуацию и скобки по краям preparation"""
    cleaned = preparation
    for _ in range(MAX_REPAIR_PASSES):
        candidate = re.sub(r'^\s*[,\-:]\s*', '', cleaned)
        candidate = re.sub(r'\s*\)\s*$', '', candidate)
        candidate = re.sub(r'^\s*\(\s*', '', candidate).strip()
        if candidate == cleaned:
            break
        cleaned = candidate
    return cleaned


def round_quantity(quantity: float) -> float:
    """Округление до 2 знаков, половина округляется вверх"""
    return math.floor(quantity * 100 + 0.5) / 100


@dataclass
class IngredientFix:
    index: int
    kind: str
    field: str
    before: Any
    after: Any


@dataclass
class RecipeRepair:
    """Результат анализа одного рецепта"""
    recipe: Recipe
    fixes: list[IngredientFix] = field(default_factory=list)

    @property
    def has_changes(self) -> bool:
        return bool(self.fixes)


class IngredientRepairer:
    """Анализ и исправление ингредиентов рецептов"""

    def __init__(self, unit_pattern: re.Pattern = DEFAULT_UNIT_PATTERN):
        self.unit_pattern = unit_pattern

    def _extract_embedded_quantity(self, ingredient: Ingredient) -> Optional[dict]:
        """
        Количество внутри названия при пустом quantity или единице "as needed":
        {"name": "1/2 teaspoon black pepper", "quantity": null} -> 0.5 teaspoon "black pepper"
        """
        as_needed = (ingredient.unit or '').strip().lower() == AS_NEEDED_UNIT
        if ((ingredient.quantity or 0) > 0 and not as_needed) or not ingredient.name:
            return None
        parsed = parse_ingredient(ingredient.name, self.unit_pattern)
        if not parsed or parsed['quantity'] is None or not parsed['name']:
            return None
        if parsed['name'] == ingredient.name:
            return None
        return parsed

    def repair_ingredient(self, index: int, ingredient: Ingredient) -> tuple[Ingredient, list[IngredientFix]]:
        fixes: list[IngredientFix] = []
        updates: dict[str, Any] = {}

        embedded = self._extract_embedded_quantity(ingredient)
        if embedded:
            for key in ('name', 'quantity', 'unit'):
                if embedded[key] != getattr(ingredient, key):
                    fixes.append(IngredientFix(index, EMBEDDED_QUANTITY, key, getattr(ingredient, key), embedded[key]))
                    updates[key] = embedded[key]
            if embedded['preparation'] and not ingredient.preparation:
                fixes.append(IngredientFix(index, EMBEDDED_QUANTITY, 'preparation',
                                           ingredient.preparation, embedded['preparation']))
                updates['preparation'] = embedded['preparation']

        quantity = updates.get('quantity', ingredient.quantity)
        if quantity is None:
            fixes.append(IngredientFix(index, NULL_QUANTITY, 'quantity', None, 0))
            updates['quantity'] = 0
        elif quantity != 0:
            rounded = round_quantity(quantity)
            if rounded != quantity:
                fixes.append(IngredientFix(index, LONG_DECIMAL, 'quantity', quantity, rounded))
                updates['quantity'] = rounded

        name = updates.get('name', ingredient.name)
        if is_malformed_name(name):
            fixed_name = repair_ingredient_name(name)
            if fixed_name != name:
                fixes.append(IngredientFix(index, MALFORMED_NAME, 'name', name, fixed_name))
                updates['name'] = fixed_name

        preparation = updates.get('preparation', ingredient.preparation)
        if preparation:
            cleaned = cleanup_preparation(preparation)
            if cleaned and cleaned != preparation:
                fixes.append(IngredientFix(index, PREPARATION, 'preparation', preparation, cleaned))
                updates['preparation'] = cleaned

        if not updates:
            return ingredient, fixes
        return ingredient.model_copy(update=updates), fixes

    def analyze(self, recipe: Recipe) -> RecipeRepair:
        """Возвращает исправленную копию рецепта и список исправлений (исходный рецепт не меняется)"""
        fixes: list[IngredientFix] = []
        ingredients = []
        for index, ingredient in enumerate(recipe.ingredients):
            repaired, ingredient_fixes = self.repair_ingredient(index, ingredient)
            ingredients.append(repaired)
            fixes.extend(ingredient_fixes)

        if not fixes:
            return RecipeRepair(recipe=recipe)
        return RecipeRepair(recipe=recipe.model_copy(update={'ingredients': ingredients}), fixes=fixes)

    def repair(self, recipe: Recipe) -> Recipe:
        return self.analyze(recipe).recipe


def repair_recipe(recipe: Recipe) -> Recipe:
    return IngredientRepairer().repair(recipe)

"""
Классификация рецептов и ингредиентов по фиксированной таксономии.

Все правила заданы упорядоченными списками: правила проверяются сверху вниз,
порядок является частью поведения (например, "chicken broth" попадает в
protein/meat, потому что мясо проверяется раньше pantry).
"""

import re
from dataclasses import dataclass, field
from typing import Iterable, Optional

INGREDIENT_CATEGORIES = (
    'protein/meat', 'protein/seafood', 'dairy', 'produce', 'pantry',
    'spices', 'condiments', 'bakery', 'canned goods', 'other',
)
DEFAULT_CATEGORY = 'other'

MEAL_TYPES = ('breakfast', 'lunch', 'dinner', 'dessert', 'snack')


@dataclass(frozen=True)
class CategoryRule:
    """Категория ингредиента и паттерн, по которому она определяется"""
    category: str
    pattern: re.Pattern

    def matches(self, name: str) -> bool:
        return self.pattern.search(name) is not None


@dataclass(frozen=True)
class MealTypeRule:
    """Тип приема пищи и набор паттернов, любой из которых дает совпадение"""
    meal_type: str
    patterns: tuple[re.Pattern, ...]

    def matches(self, text: str) -> bool:
        return any(pattern.search(text) for pattern in self.patterns)


@dataclass(frozen=True)
class TagRule:
    """
    Правило для тега.

    check_ingredients - дополнительно проверять каждое название ингредиента
    name_only - тег определяется только по названию и тегам рецепта
    """
    tag: str
    patterns: tuple[re.Pattern, ...] = field(default_factory=tuple)
    check_ingredients: bool = False
    name_only: bool = False

    def matches(self, text: str) -> bool:
        return any(pattern.search(text) for pattern in self.patterns)


def _compile(*patterns: str, flags: int = re.IGNORECASE) -> tuple[re.Pattern, ...]:
    return tuple(re.compile(p, flags) for p in patterns)


# ---------------------------------------------------------------------------
# Категории ингредиентов (первое совпадение побеждает)
# ---------------------------------------------------------------------------

CATEGORY_RULES: tuple[CategoryRule, ...] = (
    CategoryRule('protein/meat', re.compile(
        r'chicken|beef|pork|lamb|turkey|duck|bacon|sausage|ham|steak|ground meat', re.I)),
    CategoryRule('protein/seafood', re.compile(
        r'shrimp|salmon|tuna|fish|cod|tilapia|crab|lobster|scallop|mussels|clam', re.I)),
    CategoryRule('dairy', re.compile(
        r'milk|cream|cheese|butter|yogurt|sour cream|parmesan|mozzarella|cheddar', re.I)),
    CategoryRule('produce', re.compile(
        r'onion|garlic|tomato|pepper|carrot|celery|lettuce|spinach|kale|broccoli|potato|mushroom|'
        r'zucchini|cucumber|avocado|lemon|lime|orange|apple|berry|banana|cilantro|parsley|basil|'
        r'cabbage|corn', re.I)),
    CategoryRule('pantry', re.compile(
        r'oil|vinegar|sauce|broth|stock|honey|sugar|flour|rice|pasta|bean|lentil|chickpea|coconut milk', re.I)),
    CategoryRule('spices', re.compile(
        r'salt|pepper|cumin|paprika|oregano|thyme|rosemary|cinnamon|nutmeg|cayenne|chili powder|'
        r'garlic powder|onion powder', re.I)),
    CategoryRule('condiments', re.compile(
        r'ketchup|mustard|mayo|mayonnaise|soy sauce|hot sauce|sriracha|salsa|relish', re.I)),
    CategoryRule('bakery', re.compile(r'bread|tortilla|bun|roll|pita|naan|croissant', re.I)),
    CategoryRule('canned goods', re.compile(r'canned|can of', re.I)),
)


def guess_category(name: Optional[str], rules: Iterable[CategoryRule] = CATEGORY_RULES) -> str:
    """Определяет категорию ингредиента по названию, по умолчанию 'other'"""
    lowered = (name or '').lower()
    for rule in rules:
        if rule.matches(lowered):
            return rule.category
    return DEFAULT_CATEGORY


# ---------------------------------------------------------------------------
# Типы приема пищи (multi-label)
# ---------------------------------------------------------------------------

MEAL_TYPE_RULES: tuple[MealTypeRule, ...] = (
    MealTypeRule('breakfast', _compile(
        r'\bbreakfast\b', r'\bbrunch\b', r'\bpancake', r'\bwaffle', r'\bomelette', r'\bomelet',
        r'\bscramble', r'\bfrench\s+toast', r'\beggs?\s+benedict', r'\bhash\s*brown', r'\bgranola\b',
        flags=0)),
    MealTypeRule('lunch', _compile(
        r'\blunch\b', r'\bsandwich', r'\bwrap\b', r'\bpanini', r'\bhoagie', r'\btacos?\b',
        r'\bburrito', r'\bquesadilla',
        flags=0)),
    MealTypeRule('dinner', _compile(
        r'\bdinner\b', r'\bsupper\b', r'\bmain\s+dish', r'\bmain\s+course', r'\bentree', r'\bentrée',
        r'\btacos?\b', r'\bburrito', r'\benchilada', r'\bfajita',
        flags=0)),
    # "pie" без уточнения не считается десертом: pot pie, shepherd's pie
    MealTypeRule('dessert', _compile(
        r'\bdessert', r'\bcake\b', r'\bcookies?\b', r'\bbrownie', r'\bsweet\s+treat', r'\bice\s+cream',
        r'\bpudding\b', r'\bcheesecake', r'\bcupcake', r'\btart\b', r'\bcobbler', r'\bmousse\b',
        r'\btiramisu', r'\bfudge\b', r'\bcandy', r'\btruffle', r'\bapple\s+pie', r'\bpumpkin\s+pie',
        r'\bpecan\s+pie', r'\bcherry\s+pie', r'\bchocolate\s+pie', r'\bcream\s+pie', r'\bkey\s+lime\s+pie',
        flags=0)),
    # salsa не входит: слишком часто встречается в основных блюдах
    MealTypeRule('snack', _compile(
        r'\bsnack', r'\bappetizer', r'\bfinger\s+food', r'\bdip\b', r'\bnachos', r'\bpopcorn',
        r'\btrail\s+mix', r'\benergy\s+bites', r'\bhummus', r'\bguacamole', r'\bbruschetta', r'\bcrostini',
        flags=0)),
)

SNACK_INDICATORS = _compile(
    r'\bguacamole', r'\bhummus', r'\bdip\b', r'\bappetizer', r'\bnachos',
    r'\bbruschetta', r'\bcrostini', r'\bsnack',
    flags=0,
)

MAIN_DISH_INDICATORS = _compile(
    r'chicken', r'beef', r'pork', r'lamb', r'turkey', r'duck',
    r'fish', r'salmon', r'tuna', r'shrimp', r'lobster', r'crab',
    r'pasta', r'lasagna', r'spaghetti', r'fettuccine', r'penne',
    r'steak', r'roast', r'casserole', r'stew', r'chili',
    r'curry', r'stir[\s-]?fry', r'stir[\s-]?fried',
    r'tacos?', r'burrito', r'enchilada', r'fajita',
    r'pizza', r'calzone',
    r'meatloaf', r'meatball', r'burger',
    r'ribs', r'brisket', r'pulled\s+pork',
    flags=0,
)


def _any_match(patterns: Iterable[re.Pattern], texts: Iterable[str]) -> bool:
    patterns = tuple(patterns)
    return any(pattern.search(text) for text in texts for pattern in patterns)


def infer_meal_types(name: Optional[str], tags: Optional[Iterable[str]] = None,
                     ingredient_names: Optional[Iterable[str]] = None,
                     rules: Iterable[MealTypeRule] = MEAL_TYPE_RULES) -> list[str]:
    """
    Определяет типы приема пищи по названию и тегам рецепта.

    Описание не используется, чтобы случайные упоминания в тексте не давали
    ложных совпадений. Если ни одно правило не сработало: сначала проверяются
    признаки закуски (snack), затем признаки основного блюда в названии/тегах
    и в ингредиентах (dinner).

    Returns:
        Список типов в порядке правил, без повторов
    """
    texts = [text.lower() for text in [name or '', *(tags or [])] if isinstance(text, str)]

    meal_types = [rule.meal_type for rule in rules if any(rule.matches(text) for text in texts)]
    if meal_types:
        return meal_types

    if _any_match(SNACK_INDICATORS, texts):
        return ['snack']

    if _any_match(MAIN_DISH_INDICATORS, texts):
        return ['dinner']

    ingredient_text = ' '.join(n or '' for n in (ingredient_names or [])).lower()
    if ingredient_text and _any_match(MAIN_DISH_INDICATORS, [ingredient_text]):
        return ['dinner']

    return []


# ---------------------------------------------------------------------------
# Теги
# ---------------------------------------------------------------------------

VEGETARIAN_TAG = 'vegetarian'

TAG_RULES: tuple[TagRule, ...] = (
    # белковые теги проверяют и ингредиенты; бульон/сток не делают блюдо куриным
    TagRule('chicken-dish', _compile(r'\bchicken\b(?!\s*(stock|broth|bouillon|base|concentrate))'),
            check_ingredients=True),
    TagRule('beef-dish', _compile(r'\bbeef\b', r'\bsteak\b', r'\bmeatloaf\b', r'\bmeatball'),
            check_ingredients=True),
    TagRule('pork-dish', _compile(r'\bpork\b', r'\bbacon\b', r'\bham\b', r'\bsausage\b'),
            check_ingredients=True),
    TagRule('seafood', _compile(r'\bshrimp\b', r'\bfish\b', r'\bsalmon\b', r'\btuna\b', r'\bcrab\b',
                                r'\blobster\b', r'\bscallop', r'\bseafood\b'),
            check_ingredients=True),
    TagRule(VEGETARIAN_TAG),
    # способ приготовления
    TagRule('slow-cooker', _compile(r'slow[\s-]*cook', r'crock[\s-]*pot'), name_only=True),
    TagRule('instant-pot', _compile(r'instant[\s-]*pot', r'pressure[\s-]*cook'), name_only=True),
    TagRule('grilled', _compile(r'\bgrill', r'\bbbq\b', r'\bbarbecue'), name_only=True),
    TagRule('one-pot', _compile(r'one[\s-]pot', r'one[\s-]pan', r'sheet[\s-]pan'), name_only=True),
    # диеты
    TagRule('gluten-free', _compile(r'gluten[\s-]*free'), name_only=True),
    TagRule('dairy-free', _compile(r'dairy[\s-]*free'), name_only=True),
    TagRule('low-carb', _compile(r'low[\s-]*carb', r'\bketo\b'), name_only=True),
    TagRule('vegan', _compile(r'\bvegan\b'), name_only=True),
    # характеристики блюда
    TagRule('quick-easy', _compile(r'\bquick\b', r'\beasy\b', r'\bsimple\b', r'\d+[\s-]minute'), name_only=True),
    TagRule('comfort-food', _compile(r'\bcomfort\b', r'\bhearty\b'), name_only=True),
    TagRule('healthy', _compile(r'\bhealthy\b', r'\bnutritious\b'), name_only=True),
    TagRule('kid-friendly', _compile(r'\bkid', r'\bchild', r'\bfamily\b'), name_only=True),
    TagRule('meal-prep', _compile(r'meal[\s-]*prep', r'make[\s-]*ahead', r'\bfreezer\b'), name_only=True),
)

MEAT_INGREDIENT_PATTERNS = _compile(
    r'chicken', r'beef', r'pork', r'lamb', r'turkey', r'duck',
    r'bacon', r'sausage', r'ham', r'prosciutto', r'pepperoni', r'salami',
    r'fish', r'salmon', r'tuna', r'shrimp', r'lobster', r'crab', r'scallop', r'clam', r'mussel', r'anchov',
    r'tilapia', r'cod\b', r'halibut', r'trout', r'bass\b', r'catfish', r'mahi', r'snapper',
    r'ground\s+meat', r'ground\s+chuck', r'ground\s+sirloin', r'ground\s+round', r'mince', r'steak',
    r'ribs', r'brisket', r'meatloaf', r'meatball',
)


def has_meat(text: str) -> bool:
    return any(pattern.search(text) for pattern in MEAT_INGREDIENT_PATTERNS)


def infer_tags(name: Optional[str], tags: Optional[Iterable[str]] = None,
               ingredient_names: Optional[Iterable[str]] = None,
               rules: Iterable[TagRule] = TAG_RULES) -> list[str]:
    """
    Определяет новые теги рецепта (уже существующие теги не возвращаются)

    Args:
        name: название рецепта
        tags: текущие теги рецепта
        ingredient_names: названия ингредиентов

    Returns:
        Список новых тегов в порядке правил
    """
    tags = [t for t in (tags or []) if isinstance(t, str)]
    existing = {t.lower() for t in tags}
    ingredient_names = [(n or '').lower() for n in (ingredient_names or [])]

    name_and_tags = ' '.join([name or '', *tags]).lower()
    all_text = f"{name_and_tags} {' '.join(ingredient_names)}"

    new_tags = []
    for rule in rules:
        if rule.tag in existing:
            continue

        if rule.tag == VEGETARIAN_TAG:
            # рецепт без ингредиентов никогда не считается вегетарианским
            if ingredient_names and not has_meat(all_text):
                new_tags.append(rule.tag)
            continue

        matched = rule.matches(name_and_tags)
        if not matched and rule.check_ingredients:
            matched = any(rule.matches(ingredient) for ingredient in ingredient_names)
        if matched:
            new_tags.append(rule.tag)

    return new_tags

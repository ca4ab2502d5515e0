"""
Экстрактор рецепта из разметки schema.org Recipe (JSON-LD)
"""

import logging
import random
import re
import string
from datetime import date
from typing import Any, Optional

from config.config import PipelineSettings
from extractor.base import BaseRecipeExtractor
from src.common.errors import ExtractionError
from src.models.recipe import DEFAULT_SERVINGS, Ingredient, InstructionSection, Nutrition, Recipe, Servings
from utils.classification import infer_meal_types
from utils.html import clean_text
from utils.instructions import parse_instructions
from utils.normalization import parse_float, parse_ingredients_list

logger = logging.getLogger(__name__)

DEFAULT_DIFFICULTY = 'medium'
ID_SLUG_LENGTH = 40
ID_SUFFIX_ALPHABET = string.ascii_lowercase + string.digits


def generate_recipe_id(name: str) -> str:
    """slug(name)[:40] + '-' + 4 случайных символа"""
    slug = re.sub(r'[^a-z0-9]+', '-', (name or 'recipe').lower()).strip('-')[:ID_SLUG_LENGTH]
    suffix = ''.join(random.choices(ID_SUFFIX_ALPHABET, k=4))
    return f"{slug}-{suffix}"


def unique_tags(tags: list[str], limit: Optional[int] = None) -> list[str]:
    """Удаление повторов без учета регистра, порядок сохраняется"""
    seen = set()
    result = []
    for tag in tags:
        if not isinstance(tag, str) or not tag.strip():
            continue
        key = tag.strip().lower()
        if key in seen:
            continue
        seen.add(key)
        result.append(tag.strip())
    return result[:limit] if limit is not None else result


class SchemaRecipeAssembler:
    """Собирает Recipe из найденного объекта schema.org Recipe"""

    def __init__(self, schema: dict, source_url: str, settings: Optional[PipelineSettings] = None):
        self.schema = schema or {}
        self.source_url = source_url
        self.settings = settings or PipelineSettings()

    def extract_dish_name(self) -> str:
        name = self.schema.get('name')
        return clean_text(name) if isinstance(name, str) else ''

    def extract_description(self) -> Optional[str]:
        description = self.schema.get('description')
        if isinstance(description, str):
            return clean_text(description) or None
        return None

    def extract_author(self) -> Optional[str]:
        """author: строка, объект {name} или список таких значений"""
        author = self.schema.get('author')
        if isinstance(author, list):
            author = author[0] if author else None
        if isinstance(author, dict):
            author = author.get('name')
        if isinstance(author, str):
            return clean_text(author) or None
        return None

    def extract_image_url(self) -> Optional[str]:
        """image: строка, список (первый элемент, строка или {url}) или объект {url}"""
        image = self.schema.get('image')
        if isinstance(image, list):
            image = image[0] if image else None
        if isinstance(image, dict):
            image = image.get('url')
        if isinstance(image, str) and image.strip():
            return image.strip()
        return None

    def extract_times(self) -> dict[str, Optional[str]]:
        """ISO 8601 длительности передаются без изменений"""
        times = {}
        for key, field_name in (('prepTime', 'prep_time'), ('cookTime', 'cook_time'), ('totalTime', 'total_time')):
            value = self.schema.get(key)
            times[field_name] = value if isinstance(value, str) and value else None
        return times

    def extract_servings(self) -> Servings:
        recipe_yield = self.schema.get('recipeYield')
        if isinstance(recipe_yield, list):
            recipe_yield = recipe_yield[0] if recipe_yield else None

        servings = None
        try:
            if isinstance(recipe_yield, (int, float)) and not isinstance(recipe_yield, bool):
                servings = int(recipe_yield)
            elif isinstance(recipe_yield, str):
                match = re.search(r'(\d+)', recipe_yield)
                if match:
                    servings = int(match.group(1))
        except (OverflowError, ValueError):
            servings = None
        if servings is not None:
            return Servings(default=servings, unit='servings')
        return Servings(default=DEFAULT_SERVINGS, unit='servings')

    @staticmethod
    def _as_list(value: Any) -> list[str]:
        if isinstance(value, str):
            return [value]
        if isinstance(value, list):
            return [item for item in value if isinstance(item, str)]
        return []

    def extract_tags(self) -> list[str]:
        """recipeCategory + keywords + пользовательские теги из настроек"""
        tags = []
        for category in self._as_list(self.schema.get('recipeCategory')):
            tags.append(clean_text(category).lower())

        keywords = self.schema.get('keywords')
        if isinstance(keywords, str):
            keywords = keywords.split(',')
        for keyword in self._as_list(keywords):
            tags.append(clean_text(keyword).lower())

        tags.extend(self.settings.custom_tags)
        return unique_tags(tags, limit=self.settings.max_tags)

    def extract_cuisine(self) -> Optional[str]:
        cuisine = self._as_list(self.schema.get('recipeCuisine'))
        if cuisine:
            return clean_text(cuisine[0]) or None
        return None

    def extract_ingredients(self) -> list[Ingredient]:
        parsed = parse_ingredients_list(self.schema.get('recipeIngredient'), self.settings.unit_pattern)
        # пустая подготовка в JSON не пишется
        return [Ingredient(**{key: value for key, value in ingredient.items() if key != 'preparation' or value})
                for ingredient in parsed]

    def extract_instructions(self) -> list[InstructionSection]:
        return [InstructionSection(**section) for section in parse_instructions(self.schema.get('recipeInstructions'))]

    @staticmethod
    def _nutrition_value(value: Any) -> float:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return float(value)
        if isinstance(value, str):
            number = parse_float(re.sub(r'[^\d.]', '', value))
            return number if number is not None else 0
        return 0

    def extract_nutrition(self) -> Optional[Nutrition]:
        nutrition = self.schema.get('nutrition')
        if not isinstance(nutrition, dict):
            return None
        return Nutrition(
            calories=self._nutrition_value(nutrition.get('calories')),
            protein_g=self._nutrition_value(nutrition.get('proteinContent')),
            carbs_g=self._nutrition_value(nutrition.get('carbohydrateContent')),
            fat_g=self._nutrition_value(nutrition.get('fatContent')),
            fiber_g=self._nutrition_value(nutrition.get('fiberContent')),
            source='imported',
        )

    def assemble(self) -> Recipe:
        """
        Сборка рецепта. Проверка названия и ингредиентов выполняется
        вызывающей стороной (см. utils.validation.validate_recipe)
        """
        name = self.extract_dish_name()
        tags = self.extract_tags()
        ingredients = self.extract_ingredients()
        today = date.today().isoformat()

        fields = dict(
            id=generate_recipe_id(name),
            name=name,
            description=self.extract_description(),
            author=self.extract_author(),
            image_url=self.extract_image_url(),
            **self.extract_times(),
            difficulty=DEFAULT_DIFFICULTY,
            servings=self.extract_servings(),
            tags=tags,
            meal_types=infer_meal_types(name, tags, [ingredient.name for ingredient in ingredients]),
            cuisine=self.extract_cuisine(),
            ingredients=ingredients,
            instructions=self.extract_instructions(),
            nutrition=self.extract_nutrition(),
            source_url=self.source_url,
            is_custom=False,
            created_at=today,
            updated_at=today,
        )
        # незаполненные необязательные поля в JSON не пишутся
        return Recipe(**{key: value for key, value in fields.items() if value is not None})


class SchemaOrgRecipeExtractor(BaseRecipeExtractor):
    """Экстрактор для страниц с разметкой schema.org Recipe в JSON-LD"""

    def __init__(self, html: str, url: str, settings: Optional[PipelineSettings] = None):
        super().__init__(html, url)
        self.settings = settings or PipelineSettings()

    def extract_all(self) -> Recipe:
        """
        Raises:
            ExtractionError: на странице нет JSON-LD или объекта Recipe
        """
        if not self.get_json_ld_candidates():
            raise ExtractionError('No JSON-LD data found', self.url)

        schema = self.get_recipe_schema()
        if schema is None:
            raise ExtractionError('No recipe schema found', self.url)

        return SchemaRecipeAssembler(schema, self.url, self.settings).assemble()

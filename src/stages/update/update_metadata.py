"""
Обновление типов приема пищи и тегов рецептов в существующей библиотеке.

Классификатор запускается заново, но результат добавляется к текущим данным:
существующие типы и теги никогда не удаляются.
"""

import logging
import re
from dataclasses import dataclass, field

from src.models.recipe import Recipe
from utils.classification import infer_meal_types, infer_tags

logger = logging.getLogger(__name__)

SNACK_NAME_PATTERN = re.compile(r'\bsnack\b', re.IGNORECASE)


@dataclass
class MetadataUpdate:
    """Предлагаемые изменения для одного рецепта"""
    current_meal_types: list[str] = field(default_factory=list)
    suggested_meal_types: list[str] = field(default_factory=list)
    current_tags: list[str] = field(default_factory=list)
    suggested_tags: list[str] = field(default_factory=list)

    @property
    def has_changes(self) -> bool:
        return bool(self.suggested_meal_types or self.suggested_tags)


class MetadataUpdater:
    """Вычисляет и применяет разницу между текущими и выведенными метаданными"""

    def __init__(self, max_tags: int = 15):
        """
        Args:
            max_tags: предел числа тегов рецепта, новые теги сверх него не добавляются
        """
        self.max_tags = max_tags

    def analyze(self, recipe: Recipe) -> MetadataUpdate:
        ingredient_names = [ingredient.name for ingredient in recipe.ingredients]
        update = MetadataUpdate(current_meal_types=list(recipe.meal_types), current_tags=list(recipe.tags))

        current_meal_types = set(recipe.meal_types)
        for meal_type in infer_meal_types(recipe.name, recipe.tags, ingredient_names):
            if meal_type in current_meal_types:
                continue
            # к ужину snack добавляется только если в названии явно есть "snack"
            if meal_type == 'snack' and 'dinner' in current_meal_types and not SNACK_NAME_PATTERN.search(recipe.name or ''):
                continue
            update.suggested_meal_types.append(meal_type)

        existing_tags = {tag.lower() for tag in recipe.tags}
        capacity = max(self.max_tags - len(recipe.tags), 0)
        for tag in infer_tags(recipe.name, recipe.tags, ingredient_names):
            if len(update.suggested_tags) >= capacity:
                break
            if tag.lower() not in existing_tags:
                update.suggested_tags.append(tag)
                existing_tags.add(tag.lower())

        return update

    @staticmethod
    def apply(recipe: Recipe, update: MetadataUpdate) -> Recipe:
        """Новый рецепт с добавленными типами и тегами (исходный не меняется)"""
        if not update.has_changes:
            return recipe
        return recipe.model_copy(update={
            'meal_types': [*recipe.meal_types, *update.suggested_meal_types],
            'tags': [*recipe.tags, *update.suggested_tags],
        })

    def update(self, recipe: Recipe) -> Recipe:
        return self.apply(recipe, self.analyze(recipe))

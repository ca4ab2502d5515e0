from dataclasses import dataclass, field

from src.models.recipe import Recipe


@dataclass
class RecipeValidationResult:
    """
    errors - рецепт нельзя сохранять (нет названия или ингредиентов)
    warnings - рецепт сохраняется, но данные стоит проверить
    """
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors


def validate_recipe(recipe: Recipe) -> RecipeValidationResult:
    """Проверка собранного рецепта перед сохранением в библиотеку"""
    result = RecipeValidationResult()

    if not recipe.name or not recipe.name.strip():
        result.errors.append('Recipe has no name')

    if not recipe.ingredients:
        result.errors.append('Recipe has no ingredients')

    for index, ingredient in enumerate(recipe.ingredients, 1):
        if not ingredient.name or not ingredient.name.strip():
            result.warnings.append(f'Ingredient {index}: name is required')

    for index, section in enumerate(recipe.instructions, 1):
        if not section.section or not section.section.strip():
            result.warnings.append(f'Instruction section {index}: section name is required')
        if not section.steps:
            result.warnings.append(f'Instruction section "{section.section or index}": at least one step is required')

    return result

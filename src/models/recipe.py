from __future__ import annotations

from typing import Any, Optional, Union
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from utils.normalization import parse_quantity

DEFAULT_SERVINGS = 4


class Ingredient(BaseModel):
    """Ингредиент рецепта. quantity=None означает, что количество не указано"""
    model_config = ConfigDict(extra='allow')

    name: Optional[str] = ''
    quantity: Optional[Union[int, float]] = None
    unit: Optional[str] = ''
    preparation: Optional[str] = None
    category: Optional[str] = 'other'
    optional: Optional[bool] = False

    @field_validator('quantity', mode='before')
    @classmethod
    def _lenient_quantity(cls, value: Any) -> Any:
        """Строки вида "1/2" разбираются, нечисловые значения считаются неуказанным количеством"""
        if isinstance(value, bool):
            return None
        if isinstance(value, str):
            return parse_quantity(value)
        if isinstance(value, (int, float)):
            return value
        return None


class InstructionSection(BaseModel):
    section: Optional[str] = ''
    steps: list[str] = Field(default_factory=list)


class Servings(BaseModel):
    model_config = ConfigDict(extra='allow')

    default: int = DEFAULT_SERVINGS
    unit: str = 'servings'


class Nutrition(BaseModel):
    """Пищевая ценность из schema.org NutritionInformation"""
    model_config = ConfigDict(extra='allow')

    calories: Union[int, float] = 0
    protein_g: Union[int, float] = 0
    carbs_g: Union[int, float] = 0
    fat_g: Union[int, float] = 0
    fiber_g: Union[int, float] = 0
    source: str = 'imported'


class Recipe(BaseModel):
    """
    Нормализованный рецепт из библиотеки.

    В JSON поля хранятся в camelCase (imageUrl, mealTypes, sourceUrl ...).
    Неизвестные поля, добавленные приложением, сохраняются как есть.
    """
    model_config = ConfigDict(extra='allow', populate_by_name=True, alias_generator=to_camel)

    id: str
    name: Optional[str] = ''
    description: Optional[str] = None
    author: Optional[str] = None
    image_url: Optional[str] = None

    prep_time: Optional[str] = None
    cook_time: Optional[str] = None
    total_time: Optional[str] = None
    difficulty: Optional[str] = 'medium'
    servings: Optional[Servings] = Field(default_factory=Servings)

    tags: list[str] = Field(default_factory=list)
    meal_types: list[str] = Field(default_factory=list)
    cuisine: Optional[str] = None

    ingredients: list[Ingredient] = Field(default_factory=list)
    instructions: list[InstructionSection] = Field(default_factory=list)
    nutrition: Optional[Nutrition] = None

    source_url: Optional[str] = None
    is_custom: Optional[bool] = False
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @field_validator('tags', 'meal_types', mode='before')
    @classmethod
    def _string_list(cls, value: Any) -> Any:
        if value is None:
            return []
        if isinstance(value, list):
            return [item for item in value if isinstance(item, str)]
        return value

    @field_validator('ingredients', 'instructions', mode='before')
    @classmethod
    def _model_list(cls, value: Any) -> Any:
        if value is None:
            return []
        if isinstance(value, list):
            return [item for item in value if item is not None]
        return value

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Recipe:
        return cls.model_validate(data)

    def to_dict(self) -> dict:
        """
        Преобразование Recipe в словарь JSON (camelCase).

        Пишутся только заданные поля: рецепт, прочитанный из файла и не измененный,
        сохраняется в том же виде, без добавленных значений по умолчанию
        """
        return self.model_dump(by_alias=True, exclude_unset=True)

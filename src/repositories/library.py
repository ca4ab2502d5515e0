"""
Репозиторий библиотеки рецептов: JSON массив рецептов в одном файле
"""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from src.common.errors import LibraryError
from src.models.recipe import Recipe

logger = logging.getLogger(__name__)


class RecipeLibraryRepository:
    """Чтение и атомарная запись библиотеки рецептов"""

    def __init__(self, path: Path | str):
        """
        Args:
            path: путь к JSON файлу библиотеки
        """
        self.path = Path(path)
        self._recipes: Optional[list[Recipe]] = None

    def exists(self) -> bool:
        return self.path.is_file()

    def load(self) -> list[Recipe]:
        """
        Загрузка всех рецептов из файла

        Raises:
            LibraryError: файла нет, JSON не читается или запись не является рецептом
        """
        if not self.exists():
            raise LibraryError(f"Файл рецептов не найден: {self.path}")

        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise LibraryError(f"Не удалось прочитать файл рецептов {self.path}: {e}") from e

        if not isinstance(data, list):
            raise LibraryError(f"Файл рецептов {self.path} должен содержать JSON массив")

        recipes = []
        for index, item in enumerate(data):
            try:
                recipes.append(Recipe.from_dict(item))
            except ValidationError as e:
                raise LibraryError(f"Некорректный рецепт #{index} в {self.path}: {e}") from e

        self._recipes = recipes
        return recipes

    def load_or_empty(self) -> list[Recipe]:
        """
        Загрузка для импорта: отсутствующий файл - пустая библиотека.
        Нечитаемый файл переносится в <name>.bak, импорт начинается с пустой библиотеки
        """
        if not self.exists():
            self._recipes = []
            return self._recipes
        try:
            return self.load()
        except LibraryError as e:
            backup = self.path.with_name(self.path.name + '.bak')
            logger.warning(f"{e}. Файл сохранен как {backup}, начинаем с пустой библиотеки")
            os.replace(self.path, backup)
            self._recipes = []
            return self._recipes

    @property
    def recipes(self) -> list[Recipe]:
        if self._recipes is None:
            self.load()
        return self._recipes

    def source_urls(self) -> set[str]:
        return {recipe.source_url for recipe in self.recipes if recipe.source_url}

    def save(self, recipes: list[Recipe]) -> None:
        """Атомарная замена всего файла (запись во временный файл + os.replace)"""
        payload = [recipe.to_dict() for recipe in recipes]
        directory = self.path.parent
        directory.mkdir(parents=True, exist_ok=True)

        fd, tmp_path = tempfile.mkstemp(prefix=f".{self.path.name}.", suffix='.tmp', dir=directory)
        try:
            with os.fdopen(fd, 'w', encoding='utf-8') as f:
                json.dump(payload, f, ensure_ascii=False, indent=2)
                f.write('\n')
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_path, self.path)
        except BaseException:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise

        self._recipes = list(recipes)

    def append(self, recipe: Recipe) -> None:
        """Добавление одного рецепта с немедленной записью на диск"""
        self.save([*self.recipes, recipe])

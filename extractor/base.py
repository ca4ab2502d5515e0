"""
базовый класс экстрактора данных рецептов

Экстракторы работают с HTML, уже полученным через сервис загрузки страниц:
находят блоки <script type="application/ld+json">, разбирают их и ищут в них
объект schema.org Recipe. Наследники реализуют метод extract_all.
"""

import json
import logging
import re
from abc import ABC, abstractmethod
from typing import Any, Optional

from bs4 import BeautifulSoup

from utils.html import clean_text

logger = logging.getLogger(__name__)

JSON_LD_TYPE = re.compile(r'^\s*application/ld\+json\s*$', re.IGNORECASE)
RECIPE_TYPE = 'Recipe'


def extract_json_ld(html: str) -> list[Any]:
    """
    Извлечение всех JSON-LD объектов из HTML

    Блоки с некорректным JSON пропускаются. Массивы разворачиваются в общий
    список кандидатов, порядок сохраняется.

    Args:
        html: HTML страницы

    Returns:
        Список кандидатов (может быть пустым)
    """
    if not html:
        return []

    soup = BeautifulSoup(html, 'lxml')
    candidates: list[Any] = []

    for script in soup.find_all('script', attrs={'type': JSON_LD_TYPE}):
        body = script.string if script.string is not None else script.get_text()
        if not body or not body.strip():
            continue
        try:
            data = json.loads(body.strip())
        except json.JSONDecodeError as e:
            logger.debug(f"Пропущен некорректный JSON-LD блок: {e}")
            continue

        if isinstance(data, list):
            candidates.extend(data)
        else:
            candidates.append(data)

    return candidates


def is_recipe_type(item: Any) -> bool:
    """@type может быть строкой или списком строк"""
    if not isinstance(item, dict):
        return False
    item_type = item.get('@type')
    if isinstance(item_type, str):
        return item_type == RECIPE_TYPE
    if isinstance(item_type, list):
        return RECIPE_TYPE in item_type
    return False


def find_recipe_schema(candidates: list[Any]) -> Optional[dict]:
    """
    Поиск первого объекта Recipe среди кандидатов, включая вложенные @graph

    Returns:
        Объект рецепта или None, если рецепта нет (это не ошибка)
    """
    for candidate in candidates or []:
        if not isinstance(candidate, dict):
            continue
        if is_recipe_type(candidate):
            return candidate

        graph = candidate.get('@graph')
        if isinstance(graph, list):
            for item in graph:
                if is_recipe_type(item):
                    return item

    return None


class BaseRecipeExtractor(ABC):
    """базовый экстрактор данных рецептов"""

    def __init__(self, html: str, url: str):
        """
        Args:
            html: HTML страницы
            url: адрес страницы (сохраняется как sourceUrl)
        """
        self.html = html or ''
        self.url = url
        self._json_ld: Optional[list[Any]] = None

    @staticmethod
    def clean_text(text: Optional[str]) -> str:
        """Декодирование HTML entities и обрезка пробелов"""
        return clean_text(text)

    def get_json_ld_candidates(self) -> list[Any]:
        """JSON-LD кандидаты страницы (разбираются один раз)"""
        if self._json_ld is None:
            self._json_ld = extract_json_ld(self.html)
        return self._json_ld

    def get_recipe_schema(self) -> Optional[dict]:
        return find_recipe_schema(self.get_json_ld_candidates())

    @abstractmethod
    def extract_all(self):
        """Извлечение всех данных рецепта из HTML"""
        raise NotImplementedError("Метод extract_all должен быть реализован в подклассе")

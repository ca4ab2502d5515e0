"""
Конфигурация пайплайна импорта и скриптов обслуживания библиотеки рецептов
"""
import os
import re
from dataclasses import dataclass, field
from typing import Optional
from dotenv import load_dotenv

from utils.normalization import DEFAULT_UNIT_PATTERN, KNOWN_UNITS, build_unit_pattern

# Загружаем переменные из .env файла
load_dotenv()


def _split_list(value: Optional[str]) -> list[str]:
    if not value:
        return []
    return [item.strip() for item in value.split(',') if item.strip()]


class Config:
    """Централизованная конфигурация приложения из переменных окружения"""

    # Сервис получения HTML страниц (PROXY_URL - имя из старых скриптов импорта)
    FETCH_ENDPOINT: str = os.getenv('FETCH_ENDPOINT', os.getenv('PROXY_URL', 'http://localhost:3001'))
    FETCH_TIMEOUT: int = int(os.getenv('FETCH_TIMEOUT', '30'))

    # Настройки импорта
    IMPORT_URLS_FILE: str = os.getenv('IMPORT_URLS_FILE', os.getenv('URLS_FILE', 'recipe-urls.txt'))
    IMPORT_REQUEST_DELAY: float = float(os.getenv('IMPORT_REQUEST_DELAY', '3'))
    CUSTOM_TAGS: list[str] = _split_list(os.getenv('CUSTOM_TAGS'))
    MAX_TAGS: int = int(os.getenv('MAX_TAGS', '15'))

    # Библиотека рецептов (JSON массив)
    RECIPES_LIBRARY_FILE: str = os.getenv('RECIPES_LIBRARY_FILE', 'recipes.json')


# единый экземпляр конфигурации
config = Config()


@dataclass(frozen=True)
class PipelineSettings:
    """
    Явные настройки, которые передаются в точки входа пайплайна.
    Парсеры не читают окружение, все берется отсюда.
    """
    custom_tags: tuple[str, ...] = ()
    max_tags: int = 15
    unit_pattern: re.Pattern = field(default=DEFAULT_UNIT_PATTERN, compare=False)
    request_delay: float = 3.0
    fetch_endpoint: str = 'http://localhost:3001'
    fetch_timeout: int = 30

    @classmethod
    def from_config(cls, cfg: Config = config, known_units: tuple[str, ...] = KNOWN_UNITS) -> 'PipelineSettings':
        return cls(
            custom_tags=tuple(cfg.CUSTOM_TAGS),
            max_tags=cfg.MAX_TAGS,
            unit_pattern=build_unit_pattern(known_units),
            request_delay=cfg.IMPORT_REQUEST_DELAY,
            fetch_endpoint=cfg.FETCH_ENDPOINT,
            fetch_timeout=cfg.FETCH_TIMEOUT,
        )

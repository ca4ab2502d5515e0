"""
Пакетный импорт рецептов по списку URL.

Страницы загружаются по одной через сервис получения HTML, каждый успешно
собранный рецепт сразу дописывается в библиотеку. Ошибки отдельных URL
записываются и не останавливают импорт.
"""

import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Optional

from config.config import PipelineSettings
from extractor.schema_org import SchemaOrgRecipeExtractor
from src.common.errors import FetchBoundaryUnavailable, ImportFailure, RecipeValidationError
from src.common.fetch.client import FetchClient
from src.models.recipe import Recipe
from src.repositories.library import RecipeLibraryRepository
from utils.validation import validate_recipe

logger = logging.getLogger(__name__)

URLS_FILE_TEMPLATE = """# Add recipe URLs here, one per line
# Lines starting with # are ignored
# Example:
# https://www.allrecipes.com/recipe/123/example-recipe/
"""


def read_urls(path: Path | str) -> list[str]:
    """URL по одному в строке, пустые строки и строки с # пропускаются"""
    with open(path, 'r', encoding='utf-8') as f:
        lines = [line.strip() for line in f]
    return [line for line in lines if line and not line.startswith('#')]


def create_urls_template(path: Path | str) -> None:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(URLS_FILE_TEMPLATE, encoding='utf-8')


@dataclass
class ImportReport:
    imported: list[Recipe] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    failed: list[tuple[str, str]] = field(default_factory=list)
    total_in_library: int = 0


class BatchImporter:
    """Импорт рецептов из списка URL в библиотеку"""

    def __init__(self, library: RecipeLibraryRepository, fetch_client: Optional[FetchClient] = None,
                 settings: Optional[PipelineSettings] = None, sleep: Callable[[float], None] = time.sleep):
        """
        Args:
            library: репозиторий библиотеки рецептов
            fetch_client: клиент сервиса получения HTML
            settings: настройки пайплайна (теги, единицы, задержка)
            sleep: функция ожидания между запросами
        """
        self.settings = settings or PipelineSettings()
        self.library = library
        self.fetch_client = fetch_client or FetchClient(self.settings.fetch_endpoint, self.settings.fetch_timeout)
        self.sleep = sleep

    def import_url(self, url: str) -> Recipe:
        """
        Загрузка, извлечение и проверка одного рецепта

        Raises:
            ImportFailure: FetchError, ExtractionError или RecipeValidationError
        """
        page = self.fetch_client.fetch(url)
        recipe = SchemaOrgRecipeExtractor(page.html, url, self.settings).extract_all()

        validation = validate_recipe(recipe)
        if not validation.is_valid:
            raise RecipeValidationError('; '.join(validation.errors), url)
        for warning in validation.warnings:
            logger.warning(f"  {recipe.name}: {warning}")

        return recipe

    def run(self, urls: list[str]) -> ImportReport:
        """
        Импорт списка URL по порядку

        Raises:
            FetchBoundaryUnavailable: сервис получения страниц не отвечает
        """
        if not self.fetch_client.health_check():
            raise FetchBoundaryUnavailable(self.fetch_client.endpoint)
        logger.info("✓ Сервис получения страниц доступен")

        existing = self.library.load_or_empty()
        known_urls = {recipe.source_url for recipe in existing if recipe.source_url}
        logger.info(f"Загружено {len(existing)} рецептов из библиотеки")

        report = ImportReport()
        total = len(urls)

        for i, url in enumerate(urls, 1):
            logger.info(f"[{i}/{total}] {url}")

            if url in known_urls:
                logger.info("  → Пропущен (уже импортирован)")
                report.skipped.append(url)
                continue

            try:
                recipe = self.import_url(url)
                self.library.append(recipe)
                known_urls.add(url)
                report.imported.append(recipe)
                logger.info(f"  ✓ Импортирован: {recipe.name}")
            except ImportFailure as e:
                report.failed.append((url, e.reason))
                logger.warning(f"  ✗ Ошибка: {e.reason}")
            except Exception as e:
                # одна страница не должна останавливать весь импорт
                reason = f"Unexpected error: {e}"
                report.failed.append((url, reason))
                logger.error(f"  ✗ {reason}", exc_info=True)

            if i < total:
                self.sleep(self.settings.request_delay)

        report.total_in_library = len(self.library.recipes)
        return report

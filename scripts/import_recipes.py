"""
скрипт пакетного импорта рецептов по списку URL
"""

import logging
import sys
from pathlib import Path

# Добавление корневой директории в PYTHONPATH
sys.path.insert(0, str(Path(__file__).parent.parent))

from config.config import PipelineSettings
from src.common.errors import FetchBoundaryUnavailable
from src.common.fetch.client import FetchClient
from src.repositories.library import RecipeLibraryRepository
from src.stages.importer.batch_importer import BatchImporter, ImportReport, create_urls_template, read_urls

logger = logging.getLogger(__name__)


def print_import_summary(report: ImportReport) -> None:
    print('\n' + '=' * 50)
    print('Import Complete!\n')
    print(f"  Imported: {len(report.imported)} recipes")
    print(f"  Skipped (already imported): {len(report.skipped)} recipes")
    print(f"  Failed: {len(report.failed)} recipes")
    print(f"  Total in library: {report.total_in_library} recipes\n")

    if report.failed:
        print('Failed URLs:')
        for url, reason in report.failed:
            print(f"  - {url}")
            print(f"    {reason}")


def run_import(urls_file: str, library_file: str, settings: PipelineSettings,
               fetch_client: FetchClient = None) -> int:
    """
    Импорт рецептов из файла со списком URL

    Args:
        urls_file: файл с URL (по одному в строке, # - комментарий)
        library_file: JSON файл библиотеки рецептов
        settings: настройки пайплайна

    Returns:
        Код завершения процесса
    """
    urls_path = Path(urls_file)
    if not urls_path.exists():
        create_urls_template(urls_path)
        print(f"Создан {urls_path} - добавьте URL рецептов (по одному в строке) и запустите снова.")
        return 0

    urls = read_urls(urls_path)
    if not urls:
        print(f"В {urls_path} нет URL для импорта")
        return 0

    logger.info(f"Найдено {len(urls)} URL для импорта")

    importer = BatchImporter(
        library=RecipeLibraryRepository(library_file),
        fetch_client=fetch_client,
        settings=settings,
    )
    try:
        report = importer.run(urls)
    except FetchBoundaryUnavailable as e:
        logger.error(f"✗ {e.message}")
        return 1

    print_import_summary(report)
    return 0

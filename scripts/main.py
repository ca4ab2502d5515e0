"""
основной скрипт запуска
"""
import sys
import logging
from pathlib import Path
import argparse
from dataclasses import replace
# Добавление корневой директории в PYTHONPATH
sys.path.insert(0, str(Path(__file__).parent.parent))

from config.config import config, PipelineSettings

# Базовая настройка только для консоли
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - [%(threadName)s] - %(levelname)s - %(message)s',
    handlers=[
        logging.StreamHandler(),
    ]
)

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Recipe Normalizer: импорт рецептов и обслуживание библиотеки")
    subparsers = parser.add_subparsers(dest='command', help='Доступные команды')

    # 1. Импорт рецептов по списку URL
    import_parser = subparsers.add_parser('import', help='Импорт рецептов со страниц по списку URL')
    import_parser.add_argument('--urls-file', type=str, default=config.IMPORT_URLS_FILE, help=f'Файл со списком URL (по умолчанию: {config.IMPORT_URLS_FILE})')
    import_parser.add_argument('--library', type=str, default=config.RECIPES_LIBRARY_FILE, help=f'JSON файл библиотеки рецептов (по умолчанию: {config.RECIPES_LIBRARY_FILE})')
    import_parser.add_argument('--delay', type=float, default=config.IMPORT_REQUEST_DELAY, help=f'Пауза между запросами в секундах (по умолчанию: {config.IMPORT_REQUEST_DELAY})')
    import_parser.add_argument('--verbose', action='store_true', default=False, help='Подробный вывод (уровень DEBUG)')

    # 2. Исправление ингредиентов и 3. обновление метаданных
    for name, help_text in (('repair', 'Исправление данных ингредиентов в библиотеке'),
                            ('update', 'Обновление типов приема пищи и тегов в библиотеке')):
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument('--library', type=str, default=config.RECIPES_LIBRARY_FILE, help=f'JSON файл библиотеки рецептов (по умолчанию: {config.RECIPES_LIBRARY_FILE})')
        mode = sub.add_mutually_exclusive_group()
        mode.add_argument('--dry-run', dest='apply', action='store_false', help='Только показать изменения (по умолчанию)')
        mode.add_argument('--apply', dest='apply', action='store_true', help='Сохранить изменения в библиотеку')
        sub.add_argument('--verbose', action='store_true', default=False, help='Показать изменения по каждому рецепту')
        sub.set_defaults(apply=False)

    return parser


def main(argv: list[str] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    match args.command:
        case 'import':
            from scripts.import_recipes import run_import

            settings = replace(PipelineSettings.from_config(config), request_delay=args.delay)
            return run_import(urls_file=args.urls_file, library_file=args.library, settings=settings)
        case 'repair':
            from scripts.repair_ingredients import run_repair
            return run_repair(library_file=args.library, apply=args.apply, verbose=args.verbose)
        case 'update':
            from scripts.update_metadata import run_update
            return run_update(library_file=args.library, apply=args.apply, verbose=args.verbose, max_tags=config.MAX_TAGS)
    return 1


if __name__ == "__main__":
    sys.exit(main())

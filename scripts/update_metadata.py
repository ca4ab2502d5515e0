"""
скрипт обновления типов приема пищи и тегов в библиотеке рецептов
"""

import logging
import sys
from pathlib import Path

# Добавление корневой директории в PYTHONPATH
sys.path.insert(0, str(Path(__file__).parent.parent))

from src.common.errors import LibraryError
from src.repositories.library import RecipeLibraryRepository
from src.stages.update.update_metadata import MetadataUpdate, MetadataUpdater

logger = logging.getLogger(__name__)


def _describe(update: MetadataUpdate) -> str:
    changes = []
    if update.suggested_meal_types:
        changes.append(f"+mealTypes: {', '.join(update.suggested_meal_types)}")
    if update.suggested_tags:
        changes.append(f"+tags: {', '.join(update.suggested_tags)}")
    return ' | '.join(changes)


def run_update(library_file: str, apply: bool = False, verbose: bool = False, max_tags: int = 15) -> int:
    """
    Повторная классификация рецептов библиотеки, добавляются только новые типы и теги

    Returns:
        Код завершения процесса (1 - файл библиотеки не найден или не читается)
    """
    print('🏷️  Recipe Metadata Updater\n')
    print(f"Mode: {'APPLY CHANGES' if apply else 'DRY RUN (preview only)'}")
    print(f"Verbose: {'Yes' if verbose else 'No'}\n")

    library = RecipeLibraryRepository(library_file)
    try:
        recipes = library.load()
    except LibraryError as e:
        logger.error(f"❌ {e}")
        return 1
    print(f"📚 Loaded {len(recipes)} recipes\n")

    updater = MetadataUpdater(max_tags=max_tags)
    updated = []
    changed: list[tuple[str, MetadataUpdate]] = []

    for recipe in recipes:
        update = updater.analyze(recipe)
        updated.append(updater.apply(recipe, update))
        if not update.has_changes:
            continue
        changed.append((recipe.name, update))
        if verbose:
            print(f"📝 {recipe.name}")
            if update.suggested_meal_types:
                current = ', '.join(update.current_meal_types) or 'none'
                print(f"   Meal types: [{current}] + [{', '.join(update.suggested_meal_types)}]")
            if update.suggested_tags:
                print(f"   Tags: +[{', '.join(update.suggested_tags)}]")
            print('')

    print('=' * 50)
    print('Summary\n')
    print(f"  Recipes analyzed: {len(recipes)}")
    print(f"  Recipes with changes: {len(changed)}")
    print(f"  Meal types to add: {sum(len(u.suggested_meal_types) for _, u in changed)}")
    print(f"  Tags to add: {sum(len(u.suggested_tags) for _, u in changed)}")
    print('')

    if not verbose and changed:
        print('Changes to apply:\n')
        for name, update in changed:
            print(f"  • {name}")
            print(f"    {_describe(update)}")
        print('')

    if apply and changed:
        try:
            library.save(updated)
        except OSError as e:
            logger.error(f"❌ Failed to save changes: {e}")
            return 1
        print(f"✅ Changes saved to {library.path}")
    elif changed:
        print('ℹ️  Run with --apply to save changes')
    else:
        print('✅ No changes needed')
    return 0

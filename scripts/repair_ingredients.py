"""
скрипт исправления данных ингредиентов в библиотеке рецептов
"""

import logging
import sys
from collections import Counter
from pathlib import Path

# Добавление корневой директории в PYTHONPATH
sys.path.insert(0, str(Path(__file__).parent.parent))

from src.common.errors import LibraryError
from src.repositories.library import RecipeLibraryRepository
from src.stages.repair.repair_ingredients import (
    EMBEDDED_QUANTITY, LONG_DECIMAL, MALFORMED_NAME, NULL_QUANTITY, PREPARATION, IngredientRepairer, RecipeRepair)

logger = logging.getLogger(__name__)

MAX_LISTED_RECIPES = 30


def _print_fixes(name: str, repair: RecipeRepair) -> None:
    print(f"📝 {name}")
    for fix in repair.fixes:
        if fix.field == 'quantity':
            print(f"   [{fix.index}] quantity: {fix.before} → {fix.after} ({fix.kind})")
        else:
            print(f"   [{fix.index}] {fix.field}: \"{fix.before}\" → \"{fix.after}\" ({fix.kind})")
    print('')


def run_repair(library_file: str, apply: bool = False, verbose: bool = False) -> int:
    """
    Анализ и (при apply) исправление ингредиентов всей библиотеки

    Returns:
        Код завершения процесса (1 - файл библиотеки не найден или не читается)
    """
    print('🔧 Ingredient Data Fixer\n')
    print(f"Mode: {'APPLY CHANGES' if apply else 'DRY RUN (preview only)'}")
    print(f"Verbose: {'Yes' if verbose else 'No'}\n")

    library = RecipeLibraryRepository(library_file)
    try:
        recipes = library.load()
    except LibraryError as e:
        logger.error(f"❌ {e}")
        return 1
    print(f"📚 Loaded {len(recipes)} recipes\n")

    repairer = IngredientRepairer()
    counts = Counter()
    affected: list[tuple[str, RecipeRepair]] = []
    updated = []

    for recipe in recipes:
        repair = repairer.analyze(recipe)
        updated.append(repair.recipe)
        if not repair.has_changes:
            continue
        affected.append((recipe.name, repair))
        # перенос количества из названия считается один раз на ингредиент
        counts.update(fix.kind for fix in repair.fixes if fix.kind != EMBEDDED_QUANTITY or fix.field == 'name')
        if verbose:
            _print_fixes(recipe.name, repair)

    print('=' * 50)
    print('Summary\n')
    print(f"  Recipes analyzed: {len(recipes)}")
    print(f"  Recipes with issues: {len(affected)}")
    print(f"  Null quantities to fix: {counts[NULL_QUANTITY]}")
    print(f"  Long decimals to round: {counts[LONG_DECIMAL]}")
    print(f"  Malformed names to fix: {counts[MALFORMED_NAME]}")
    print(f"  Quantities moved out of names: {counts[EMBEDDED_QUANTITY]}")
    print(f"  Preparation fixes: {counts[PREPARATION]}")
    print('')

    if not verbose and 0 < len(affected) <= MAX_LISTED_RECIPES:
        print('Affected recipes:\n')
        for name, repair in affected:
            fields = sorted({fix.field for fix in repair.fixes})
            print(f"  • {name}")
            print(f"    Fixes: {len(repair.fixes)} ({', '.join(fields)})")
        print('')
    elif not verbose and len(affected) > MAX_LISTED_RECIPES:
        print(f"Too many recipes to list ({len(affected)}). Use --verbose to see all.\n")

    if apply and affected:
        try:
            library.save(updated)
        except OSError as e:
            logger.error(f"❌ Failed to save changes: {e}")
            return 1
        print(f"✅ Changes saved to {library.path}")
    elif affected:
        print('ℹ️  Run with --apply to save changes')
    else:
        print('✅ No changes needed')
    return 0

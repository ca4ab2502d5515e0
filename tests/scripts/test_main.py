import io
import json
import tempfile
import unittest
import sys
from contextlib import redirect_stdout
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from scripts.main import main


LIBRARY = [
    {
        "id": "tacos-abcd",
        "name": "Chicken Tacos",
        "mealTypes": ["dinner"],
        "tags": [],
        "ingredients": [
            {"name": "to 12  crispy taco shells", "quantity": None, "unit": "", "category": "other", "optional": False},
            {"name": "chicken", "quantity": 1.33333, "unit": "lb", "category": "protein/meat", "optional": False},
        ],
        "updatedAt": "2024-01-01",
    },
]


class TestMainCommands(unittest.TestCase):
    """Тесты для команд import / repair / update"""

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.library_path = Path(self.tmp.name) / "recipes.json"
        self.library_path.write_text(json.dumps(LIBRARY), encoding="utf-8")

    def tearDown(self):
        self.tmp.cleanup()

    def run_main(self, *argv) -> tuple[int, str]:
        out = io.StringIO()
        with redirect_stdout(out):
            code = main(list(argv))
        return code, out.getvalue()

    def read_library(self) -> list:
        return json.loads(self.library_path.read_text(encoding="utf-8"))

    def test_repair_dry_run_does_not_write(self):
        """Тест: по умолчанию изменения только показываются"""
        code, output = self.run_main("repair", "--library", str(self.library_path))

        self.assertEqual(code, 0)
        self.assertIn("Null quantities to fix: 1", output)
        self.assertIn("Long decimals to round: 1", output)
        self.assertIn("Malformed names to fix: 1", output)
        self.assertEqual(self.read_library(), LIBRARY)

    def test_repair_apply(self):
        code, _ = self.run_main("repair", "--apply", "--library", str(self.library_path))

        self.assertEqual(code, 0)
        ingredients = self.read_library()[0]["ingredients"]
        self.assertEqual(ingredients[0]["name"], "crispy taco shells")
        self.assertEqual(ingredients[0]["quantity"], 0)
        self.assertEqual(ingredients[1]["quantity"], 1.33)
        self.assertEqual(self.read_library()[0]["updatedAt"], "2024-01-01")

        # повторный запуск ничего не находит
        code, output = self.run_main("repair", "--apply", "--library", str(self.library_path))
        self.assertEqual(code, 0)
        self.assertIn("No changes needed", output)

    def test_repair_null_ingredient_name(self):
        """Тест: ингредиент с name null исправляется, а не блокирует команду"""
        library = [*LIBRARY, {"id": "x", "name": "Broken", "ingredients": [{"name": None, "quantity": None}]}]
        self.library_path.write_text(json.dumps(library), encoding="utf-8")

        code, _ = self.run_main("repair", "--apply", "--library", str(self.library_path))

        self.assertEqual(code, 0)
        ingredient = self.read_library()[1]["ingredients"][0]
        self.assertEqual(ingredient, {"name": "Unknown ingredient", "quantity": 0})

    def test_repair_keeps_untouched_records(self):
        """Тест: записи без исправлений сохраняются без изменений"""
        custom = {
            "id": "c",
            "name": "Mine",
            "isCustom": True,
            "ingredients": [{"name": "egg", "quantity": 2, "unit": "", "category": "dairy", "optional": False}],
        }
        self.library_path.write_text(json.dumps([*LIBRARY, custom]), encoding="utf-8")

        code, _ = self.run_main("repair", "--apply", "--library", str(self.library_path))

        self.assertEqual(code, 0)
        saved = self.read_library()
        self.assertEqual(saved[1], custom)
        self.assertEqual(set(saved[0]), set(LIBRARY[0]))

    def test_update_apply(self):
        code, output = self.run_main("update", "--apply", "--verbose", "--library", str(self.library_path))

        self.assertEqual(code, 0)
        self.assertIn("Chicken Tacos", output)
        recipe = self.read_library()[0]
        self.assertEqual(recipe["mealTypes"], ["dinner", "lunch"])
        self.assertIn("chicken-dish", recipe["tags"])

    def test_missing_library_is_fatal(self):
        code, _ = self.run_main("update", "--library", str(Path(self.tmp.name) / "missing.json"))

        self.assertEqual(code, 1)

    def test_import_creates_urls_template(self):
        """Тест: без файла URL создается шаблон, импорт не запускается"""
        urls_path = Path(self.tmp.name) / "recipe-urls.txt"

        code, _ = self.run_main("import", "--urls-file", str(urls_path), "--library", str(self.library_path))

        self.assertEqual(code, 0)
        self.assertTrue(urls_path.exists())
        self.assertEqual(self.read_library(), LIBRARY)

    def test_no_command(self):
        code, _ = self.run_main()

        self.assertEqual(code, 1)


if __name__ == '__main__':
    unittest.main()

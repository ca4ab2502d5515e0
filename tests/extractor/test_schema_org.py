"""
Тесты для экстрактора schema.org Recipe
"""

import unittest
import sys
import json
from pathlib import Path

# Добавляем корневую директорию в PYTHONPATH
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from config.config import PipelineSettings
from extractor.schema_org import SchemaOrgRecipeExtractor, SchemaRecipeAssembler, generate_recipe_id, unique_tags
from src.common.errors import ExtractionError
from utils.validation import validate_recipe

SOURCE_URL = "https://example.com/simple-soup"


def make_page(schema) -> str:
    return f'<html><head><script type="application/ld+json">{json.dumps(schema)}</script></head><body></body></html>'


class TestSchemaOrgRecipeExtractor(unittest.TestCase):
    """Тесты для SchemaOrgRecipeExtractor"""

    def test_simple_soup(self):
        """Тест: полный проход от HTML до рецепта"""
        html = make_page({
            "@type": "Recipe",
            "name": "Simple Soup",
            "recipeIngredient": ["4 cups vegetable broth", "1 onion, diced"],
            "recipeInstructions": "Simmer broth.\nAdd onion.",
            "recipeYield": "4 servings",
        })

        recipe = SchemaOrgRecipeExtractor(html, SOURCE_URL).extract_all()

        self.assertEqual(recipe.name, "Simple Soup")
        self.assertEqual(recipe.servings.default, 4)
        self.assertEqual(recipe.servings.unit, "servings")

        broth, onion = recipe.ingredients
        self.assertEqual(broth.name, "vegetable broth")
        self.assertEqual(broth.category, "pantry")
        self.assertEqual(broth.quantity, 4)
        self.assertEqual(broth.unit, "cups")
        self.assertEqual(onion.name, "onion")
        self.assertEqual(onion.category, "produce")
        self.assertEqual(onion.quantity, 1)
        self.assertEqual(onion.unit, "")
        self.assertEqual(onion.preparation, "diced")

        self.assertEqual(len(recipe.instructions), 1)
        self.assertEqual(recipe.instructions[0].section, "Instructions")
        self.assertEqual(recipe.instructions[0].steps, ["Simmer broth.", "Add onion."])

        self.assertEqual(recipe.source_url, SOURCE_URL)
        self.assertFalse(recipe.is_custom)
        self.assertEqual(recipe.difficulty, "medium")
        self.assertTrue(recipe.id.startswith("simple-soup-"))
        self.assertTrue(validate_recipe(recipe).is_valid)

    def test_no_json_ld(self):
        """Тест: страница без ld+json не превращается в рецепт"""
        extractor = SchemaOrgRecipeExtractor("<html><body>No data</body></html>", SOURCE_URL)

        with self.assertRaises(ExtractionError) as ctx:
            extractor.extract_all()
        self.assertEqual(ctx.exception.reason, "No JSON-LD data found")
        self.assertEqual(ctx.exception.url, SOURCE_URL)

    def test_no_recipe_schema(self):
        extractor = SchemaOrgRecipeExtractor(make_page({"@type": "WebPage"}), SOURCE_URL)

        with self.assertRaises(ExtractionError) as ctx:
            extractor.extract_all()
        self.assertEqual(ctx.exception.reason, "No recipe schema found")

    def test_missing_ingredients_rejected_by_validation(self):
        """Тест: рецепт без recipeIngredient не проходит проверку"""
        html = make_page({"@type": "Recipe", "name": "Air"})

        recipe = SchemaOrgRecipeExtractor(html, SOURCE_URL).extract_all()

        self.assertEqual(recipe.ingredients, [])
        result = validate_recipe(recipe)
        self.assertFalse(result.is_valid)
        self.assertIn("Recipe has no ingredients", result.errors)


class TestSchemaRecipeAssembler(unittest.TestCase):
    """Тесты для отдельных полей SchemaRecipeAssembler"""

    def assemble(self, settings=None, **schema):
        return SchemaRecipeAssembler({"@type": "Recipe", "name": "Test", **schema}, SOURCE_URL, settings)

    def test_author_forms(self):
        self.assertEqual(self.assemble(author="Jane").extract_author(), "Jane")
        self.assertEqual(self.assemble(author={"@type": "Person", "name": "Jane"}).extract_author(), "Jane")
        self.assertEqual(self.assemble(author=[{"name": "Jane"}, {"name": "Bob"}]).extract_author(), "Jane")
        self.assertIsNone(self.assemble().extract_author())

    def test_image_forms(self):
        self.assertEqual(self.assemble(image="https://img/a.jpg").extract_image_url(), "https://img/a.jpg")
        self.assertEqual(self.assemble(image=["https://img/b.jpg", "https://img/c.jpg"]).extract_image_url(),
                         "https://img/b.jpg")
        self.assertEqual(self.assemble(image=[{"url": "https://img/d.jpg"}]).extract_image_url(), "https://img/d.jpg")
        self.assertEqual(self.assemble(image={"@type": "ImageObject", "url": "https://img/e.jpg"}).extract_image_url(),
                         "https://img/e.jpg")

    def test_servings_forms(self):
        self.assertEqual(self.assemble(recipeYield=6).extract_servings().default, 6)
        self.assertEqual(self.assemble(recipeYield="Makes 12 cookies").extract_servings().default, 12)
        self.assertEqual(self.assemble(recipeYield=["8", "8 servings"]).extract_servings().default, 8)
        self.assertEqual(self.assemble(recipeYield="a few").extract_servings().default, 4)
        self.assertEqual(self.assemble().extract_servings().default, 4)

    def test_oversized_servings(self):
        """Тест: слишком большое число порций заменяется значением по умолчанию"""
        self.assertEqual(self.assemble(recipeYield="9" * 5000).extract_servings().default, 4)
        self.assertEqual(self.assemble(recipeYield=float("inf")).extract_servings().default, 4)

    def test_times_passed_through(self):
        times = self.assemble(prepTime="PT10M", cookTime="PT1H").extract_times()

        self.assertEqual(times, {"prep_time": "PT10M", "cook_time": "PT1H", "total_time": None})

    def test_tags_keywords_and_custom(self):
        """Тест: keywords строкой, категории и пользовательские теги без повторов"""
        settings = PipelineSettings(custom_tags=("imported", "Soup"))
        assembler = self.assemble(settings, recipeCategory="Soup", keywords="Easy, soup,  weeknight ")

        self.assertEqual(assembler.extract_tags(), ["soup", "easy", "weeknight", "imported"])

    def test_tags_limit(self):
        settings = PipelineSettings(max_tags=2)
        assembler = self.assemble(settings, keywords=["a", "b", "c"])

        self.assertEqual(assembler.extract_tags(), ["a", "b"])

    def test_nutrition(self):
        assembler = self.assemble(nutrition={
            "@type": "NutritionInformation",
            "calories": "250 kcal",
            "proteinContent": "12 g",
            "fatContent": 8,
        })

        nutrition = assembler.extract_nutrition()
        self.assertEqual(nutrition.calories, 250)
        self.assertEqual(nutrition.protein_g, 12)
        self.assertEqual(nutrition.fat_g, 8)
        self.assertEqual(nutrition.carbs_g, 0)
        self.assertEqual(nutrition.source, "imported")
        self.assertIsNone(self.assemble().extract_nutrition())

    def test_meal_types_from_name(self):
        recipe = self.assemble(name="Chicken Tacos", recipeIngredient=["1 lb chicken"]).assemble()

        self.assertEqual(recipe.meal_types, ["lunch", "dinner"])

    def test_entities_decoded(self):
        recipe = self.assemble(name="Mac &amp; Cheese", description=" Creamy &amp; rich ").assemble()

        self.assertEqual(recipe.name, "Mac & Cheese")
        self.assertEqual(recipe.description, "Creamy & rich")


class TestHelpers(unittest.TestCase):

    def test_generate_recipe_id(self):
        recipe_id = generate_recipe_id("Grandma's Best Chocolate Chip Cookies With Extra Long Name Here")
        slug, suffix = recipe_id.rsplit("-", 1)

        self.assertLessEqual(len(slug), 40)
        self.assertTrue(slug.startswith("grandma-s-best"))
        self.assertEqual(len(suffix), 4)

    def test_unique_tags(self):
        self.assertEqual(unique_tags(["Soup", "soup", " SOUP ", "", "stew"]), ["Soup", "stew"])
        self.assertEqual(unique_tags(["a", "b", "c"], limit=2), ["a", "b"])


if __name__ == '__main__':
    unittest.main()

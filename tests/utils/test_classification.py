import unittest
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from utils.classification import guess_category, infer_meal_types, infer_tags


class TestGuessCategory(unittest.TestCase):
    """Тесты для категорий ингредиентов"""

    def test_meat_checked_before_pantry(self):
        """Тест: "chicken broth" попадает в мясо, а не в pantry"""
        self.assertEqual(guess_category("chicken broth"), "protein/meat")

    def test_families(self):
        self.assertEqual(guess_category("salmon fillet"), "protein/seafood")
        self.assertEqual(guess_category("cheddar"), "dairy")
        self.assertEqual(guess_category("onion"), "produce")
        self.assertEqual(guess_category("vegetable broth"), "pantry")
        self.assertEqual(guess_category("cumin"), "spices")
        self.assertEqual(guess_category("ketchup"), "condiments")
        self.assertEqual(guess_category("naan"), "bakery")

    def test_case_insensitive(self):
        self.assertEqual(guess_category("Ground BEEF"), "protein/meat")

    def test_default_other(self):
        self.assertEqual(guess_category("water"), "other")
        self.assertEqual(guess_category(""), "other")
        self.assertEqual(guess_category(None), "other")


class TestInferMealTypes(unittest.TestCase):
    """Тесты для определения типов приема пищи"""

    def test_multi_label(self):
        """Тест: тако - и обед, и ужин"""
        meal_types = infer_meal_types("Chicken Tacos")

        self.assertIn("lunch", meal_types)
        self.assertIn("dinner", meal_types)

    def test_breakfast(self):
        self.assertEqual(infer_meal_types("Fluffy Pancakes"), ["breakfast"])

    def test_pot_pie_is_not_dessert(self):
        """Тест: pie без уточнения не считается десертом"""
        meal_types = infer_meal_types("Chicken Pot Pie")

        self.assertNotIn("dessert", meal_types)
        self.assertEqual(meal_types, ["dinner"])

    def test_apple_pie_is_dessert(self):
        self.assertEqual(infer_meal_types("Grandma's Apple Pie"), ["dessert"])

    def test_tags_are_checked(self):
        self.assertEqual(infer_meal_types("Mystery Bowl", ["Dessert"]), ["dessert"])

    def test_snack_fallback(self):
        self.assertEqual(infer_meal_types("Classic Guacamole"), ["snack"])

    def test_dinner_from_ingredients(self):
        """Тест: основное блюдо определяется по ингредиентам"""
        meal_types = infer_meal_types("Weeknight Bowl", [], ["white rice", "salmon fillet"])

        self.assertEqual(meal_types, ["dinner"])

    def test_nothing_matches(self):
        self.assertEqual(infer_meal_types("Lemonade", [], ["lemon", "sugar", "water"]), [])


class TestInferTags(unittest.TestCase):
    """Тесты для определения тегов"""

    def test_protein_tag_from_ingredients(self):
        tags = infer_tags("Weeknight Bowl", [], ["boneless chicken thighs", "rice"])

        self.assertIn("chicken-dish", tags)
        self.assertNotIn("vegetarian", tags)

    def test_chicken_broth_is_not_chicken_dish(self):
        """Тест: бульон не делает блюдо куриным, но и вегетарианским оно не становится"""
        tags = infer_tags("Lentil Soup", [], ["chicken broth", "lentils"])

        self.assertNotIn("chicken-dish", tags)
        self.assertNotIn("vegetarian", tags)

    def test_vegetarian(self):
        tags = infer_tags("Simple Soup", [], ["vegetable broth", "onion"])

        self.assertIn("vegetarian", tags)
        self.assertIn("quick-easy", tags)

    def test_no_ingredients_never_vegetarian(self):
        self.assertNotIn("vegetarian", infer_tags("Simple Soup", [], []))

    def test_existing_tags_not_returned(self):
        """Тест: уже существующий тег не возвращается повторно"""
        tags = infer_tags("Slow Cooker Chili", ["slow-cooker"], ["beans"])

        self.assertNotIn("slow-cooker", tags)

    def test_name_only_rule_ignores_ingredients(self):
        tags = infer_tags("Bean Salad", [], ["easy beans"])

        self.assertNotIn("quick-easy", tags)


if __name__ == '__main__':
    unittest.main()

import unittest
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from utils.html import clean_text, decode_html_entities


class TestDecodeHtmlEntities(unittest.TestCase):

    def test_named_entities(self):
        self.assertEqual(decode_html_entities("Mac &amp; Cheese"), "Mac & Cheese")
        self.assertEqual(decode_html_entities("Mom&rsquo;s Pie"), "Mom’s Pie")

    def test_numeric_entities(self):
        self.assertEqual(decode_html_entities("Mom&#39;s"), "Mom's")
        self.assertEqual(decode_html_entities("Mom&#x27;s"), "Mom's")

    def test_non_breaking_space(self):
        """Тест: неразрывный пробел становится обычным"""
        self.assertEqual(decode_html_entities("1&nbsp;cup"), "1 cup")
        self.assertEqual(decode_html_entities("1\u00a0cup"), "1 cup")

    def test_empty(self):
        self.assertEqual(decode_html_entities(""), "")
        self.assertIsNone(decode_html_entities(None))


class TestCleanText(unittest.TestCase):

    def test_strip_and_decode(self):
        self.assertEqual(clean_text("  Fish &amp; Chips \n"), "Fish & Chips")

    def test_empty(self):
        self.assertEqual(clean_text(None), "")
        self.assertEqual(clean_text(""), "")


if __name__ == '__main__':
    unittest.main()

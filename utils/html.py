import html
import re
from typing import Optional

# Неразрывные и "узкие" пробелы, которые встречаются в JSON-LD
_NBSP_PATTERN = re.compile(r'[\u00a0\u2009\u202f]')


def decode_html_entities(text: Optional[str]) -> Optional[str]:
    """
    Декодирование HTML entities в тексте, извлеченном из разметки

    Поддерживаются именованные (&amp;, &rsquo;, &frac12;) и числовые
    (&#39;, &#x27;) сущности. Неразрывный пробел превращается в обычный.

    Args:
        text: исходный текст

    Returns:
        Декодированный текст (пустое значение возвращается как есть)
    """
    if not text:
        return text

    decoded = html.unescape(text)
    return _NBSP_PATTERN.sub(' ', decoded)


def clean_text(text: Optional[str]) -> str:
    """Декодирование entities и обрезка пробелов по краям"""
    if not text:
        return ''
    return decode_html_entities(str(text)).strip()

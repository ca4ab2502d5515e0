import re
from typing import Any, Optional

from utils.html import decode_html_entities

DEFAULT_SECTION = 'Instructions'
HOW_TO_SECTION = 'HowToSection'


def _step_text(value: Any) -> Optional[str]:
    """Текст шага из строки или объекта HowToStep (text, затем name)"""
    if isinstance(value, str):
        text = value
    elif isinstance(value, dict):
        text = value.get('text') or value.get('name')
        if not isinstance(text, str):
            return None
    else:
        return None
    text = decode_html_entities(text.strip()).strip()
    return text or None


def _section_name(item: dict) -> str:
    name = item.get('name')
    if not isinstance(name, str) or not name.strip():
        return DEFAULT_SECTION
    return decode_html_entities(re.sub(r':$', '', name.strip())).strip() or DEFAULT_SECTION


def parse_instructions(instructions: Any) -> list[dict]:
    """
    Приводит recipeInstructions к списку секций вида {"section": ..., "steps": [...]}

    Поддерживаемые формы:
        - строка (шаги разделены переводами строк)
        - список строк
        - список объектов HowToStep / HowToSection

    Шаги вне именованных секций собираются в секцию "Instructions". Секции без
    шагов отбрасываются.
    """
    if not instructions:
        return []

    sections: list[dict] = []

    if isinstance(instructions, str):
        steps = [step for line in re.split(r'\n+', instructions) if (step := _step_text(line))]
        sections.append({'section': DEFAULT_SECTION, 'steps': steps})

    elif isinstance(instructions, list):
        loose_steps: list[str] = []

        for item in instructions:
            if isinstance(item, str):
                if step := _step_text(item):
                    loose_steps.append(step)
                continue

            if not isinstance(item, dict):
                continue

            item_type = item.get('@type')
            if item_type == HOW_TO_SECTION and isinstance(item.get('itemListElement'), list):
                # накопленные шаги идут отдельной секцией перед именованной
                if loose_steps:
                    sections.append({'section': DEFAULT_SECTION, 'steps': loose_steps})
                    loose_steps = []

                section_steps = [step for element in item['itemListElement'] if (step := _step_text(element))]
                if section_steps:
                    sections.append({'section': _section_name(item), 'steps': section_steps})

            elif isinstance(item.get('text'), str):
                if step := _step_text(item['text']):
                    loose_steps.append(step)

            elif isinstance(item.get('name'), str) and item_type != HOW_TO_SECTION:
                if step := _step_text(item['name']):
                    loose_steps.append(step)

        if loose_steps:
            sections.append({'section': DEFAULT_SECTION, 'steps': loose_steps})

    return [section for section in sections if section['steps']]

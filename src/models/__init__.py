"""
Data models
"""

from .recipe import Recipe, Ingredient, InstructionSection, Servings, Nutrition

__all__ = ['Recipe', 'Ingredient', 'InstructionSection', 'Servings', 'Nutrition']

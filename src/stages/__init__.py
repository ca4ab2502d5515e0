"""
Recipe library pipeline stages
"""

from .importer.batch_importer import BatchImporter
from .repair.repair_ingredients import IngredientRepairer
from .update.update_metadata import MetadataUpdater

__all__ = ['BatchImporter', 'IngredientRepairer', 'MetadataUpdater']

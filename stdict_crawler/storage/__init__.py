"""
Storage layer for the word crawler.
"""

from .result_collection import ResultCollection
from .writer import ResultWriter

__all__ = ['ResultCollection', 'ResultWriter']

"""
Word crawler core components.
"""

from .parser import WordParser, strip_markers
from .fetcher import WordFetcher, WordResult, DEFAULT_BASE_URL
from .partitioner import Shard, partition

__all__ = [
    'WordParser', 'strip_markers',
    'WordFetcher', 'WordResult', 'DEFAULT_BASE_URL',
    'Shard', 'partition'
]

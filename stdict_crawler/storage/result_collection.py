"""
Shared, deduplicated collection of fetched words.
"""

import asyncio
import logging
from typing import Dict, List, Set


class ResultCollection:
    """
    Ordered, append-only collection deduplicated by value.

    The containment check and the append happen under one lock, so two
    workers can never both decide the same word is new. The empty string is
    an ordinary value: the first failed lookup is kept and every later one
    collapses into it.
    """

    def __init__(self):
        self.logger = logging.getLogger(__name__)
        self._lock = asyncio.Lock()

        # Insertion order plus a set index for fast lookups
        self._words: List[str] = []
        self._index: Set[str] = set()

        # Statistics
        self.stats = {
            'total_checks': 0,
            'appended': 0,
            'duplicates_skipped': 0
        }

    async def add(self, word: str) -> bool:
        """
        Append word unless it is already present.

        Returns:
            True if the word was appended, False if it was a duplicate
        """
        async with self._lock:
            self.stats['total_checks'] += 1

            if word in self._index:
                self.stats['duplicates_skipped'] += 1
                self.logger.debug(f"Skipping duplicate word: {word!r}")
                return False

            self._index.add(word)
            self._words.append(word)
            self.stats['appended'] += 1
            return True

    def snapshot(self) -> List[str]:
        """Copy of the words in insertion order."""
        return list(self._words)

    def __len__(self) -> int:
        return len(self._words)

    def get_stats(self) -> Dict[str, int]:
        """Get collection statistics."""
        return {**self.stats, 'total_words': len(self._words)}

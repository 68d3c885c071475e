"""
Plain text output for collected words.
"""

import logging
from pathlib import Path
from typing import Iterable, Union

from ..exceptions import StorageError


class ResultWriter:
    """Appends words to a newline-delimited text file."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        self.logger = logging.getLogger(__name__)

    def append(self, words: Iterable[str]) -> int:
        """
        Append each word on its own line, keeping existing file content.

        Args:
            words: Words in the order they should be written

        Returns:
            Number of lines written
        """
        count = 0
        try:
            with open(self.path, 'a', encoding='utf-8', newline='\n') as f:
                for word in words:
                    f.write(word + '\n')
                    count += 1
        except OSError as e:
            raise StorageError(f"Failed to write results to {self.path}: {e}") from e

        self.logger.info(f"Appended {count} words to {self.path}")
        return count

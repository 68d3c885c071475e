"""
Splits the identifier space into contiguous shards, one per worker.
"""

from dataclasses import dataclass
from typing import Iterator, List

from ..exceptions import ConfigurationError


@dataclass(frozen=True)
class Shard:
    """Inclusive identifier range [start, end] handled by one worker."""
    index: int
    start: int
    end: int

    def ids(self) -> Iterator[int]:
        """Identifiers in ascending order."""
        return iter(range(self.start, self.end + 1))

    def __len__(self) -> int:
        return self.end - self.start + 1

    def __str__(self) -> str:
        return f"shard-{self.index} [{self.start}, {self.end}]"


def partition(max_id: int, thread_count: int) -> List[Shard]:
    """
    Divide [1, max_id] into thread_count contiguous shards.

    Each shard holds max_id // thread_count identifiers; the last shard
    also takes the remainder of the division.

    Raises:
        ConfigurationError: if thread_count or max_id is not positive, or if
            there are more workers than identifiers
    """
    if thread_count <= 0:
        raise ConfigurationError(f"thread count must be at least 1, got {thread_count}")

    if max_id <= 0:
        raise ConfigurationError(f"max id must be at least 1, got {max_id}")

    if thread_count > max_id:
        raise ConfigurationError(
            f"thread count ({thread_count}) cannot exceed max id ({max_id})"
        )

    step = max_id // thread_count
    shards = []

    for i in range(1, thread_count + 1):
        start = step * (i - 1) + 1
        end = max_id if i == thread_count else step * i
        shards.append(Shard(index=i, start=start, end=end))

    return shards

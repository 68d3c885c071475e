"""
Crawler scheduler that partitions the identifier range, runs one worker per
shard and writes the collected words once every worker has finished.
"""

import asyncio
import logging
import time
from typing import Dict, List, Optional
from dataclasses import dataclass

from .fetcher import WordFetcher
from .partitioner import Shard, partition
from ..storage.result_collection import ResultCollection
from ..storage.writer import ResultWriter
from ..utils.config import Config, validate_config
from ..utils.logger import get_crawler_logger


@dataclass
class CrawlStats:
    """Statistics for a crawl run."""
    start_time: float
    ids_processed: int = 0
    words_found: int = 0
    failures: int = 0
    duplicates_skipped: int = 0
    words_appended: int = 0

    @property
    def elapsed_time(self) -> float:
        return time.time() - self.start_time

    @property
    def ids_per_minute(self) -> float:
        elapsed_minutes = self.elapsed_time / 60
        return self.ids_processed / elapsed_minutes if elapsed_minutes > 0 else 0


class CrawlerScheduler:
    """
    Coordinates the batch crawl.

    The identifier range [1, max_id] is split into one shard per worker.
    Each worker walks its shard in ascending order, one lookup at a time,
    and adds every result to the shared ResultCollection. After all workers
    complete, the collection is appended to the output file.
    """

    def __init__(self, config: Config, fetcher: Optional[WordFetcher] = None):
        self.config = config
        self.logger = logging.getLogger(__name__)

        # Components
        self.fetcher: Optional[WordFetcher] = fetcher
        self._owns_fetcher = fetcher is None
        self.results = ResultCollection()
        self.writer = ResultWriter(config.crawler.output_file)

        # Crawl state
        self.stats = CrawlStats(start_time=time.time())
        self.shards: List[Shard] = []
        self.workers: List[asyncio.Task] = []
        self.is_running = False
        self._initialized = False

    async def initialize(self):
        """Validate configuration and start the fetcher."""
        validate_config(self.config)

        if self.fetcher is None:
            self.fetcher = WordFetcher(
                api_key=self.config.crawler.api_key,
                base_url=self.config.crawler.base_url
            )
            self._owns_fetcher = True
            await self.fetcher.start()

        self._initialized = True
        self.logger.info("Crawler scheduler initialized successfully")

    async def crawl_range(self, shard: Shard):
        """
        Fetch every identifier in the shard sequentially.

        Args:
            shard: Identifier range assigned to this worker
        """
        log = get_crawler_logger(__name__, worker=f"worker-{shard.index}", shard=str(shard))
        log.info(f"Started {shard} ({len(shard)} ids)")

        for word_id in shard.ids():
            result = await self.fetcher.fetch_word(word_id)
            self.stats.ids_processed += 1

            if result.found:
                self.stats.words_found += 1
            else:
                self.stats.failures += 1
                log.log_word_event(logging.DEBUG, word_id, f"No word for #{word_id}: {result.error}")

            if await self.results.add(result.text):
                log.log_word_event(logging.DEBUG, word_id, f"Done #{word_id}: {result.text!r}")
            else:
                self.stats.duplicates_skipped += 1

        log.info(f"Finished {shard}")

    async def run(self) -> CrawlStats:
        """
        Run the whole batch.

        Returns:
            Final crawl statistics
        """
        if self.is_running:
            raise RuntimeError("Crawler is already running")

        if not self._initialized:
            await self.initialize()

        crawler_config = self.config.crawler
        self.shards = partition(crawler_config.max_id, crawler_config.threads)

        self.is_running = True
        self.stats = CrawlStats(start_time=time.time())

        self.logger.info(
            f"Starting crawl of ids 1..{crawler_config.max_id} "
            f"with {len(self.shards)} workers"
        )

        stats_task = asyncio.create_task(self._stats_reporter())
        try:
            self.workers = [
                asyncio.create_task(self.crawl_range(shard), name=f"worker-{shard.index}")
                for shard in self.shards
            ]
            await asyncio.gather(*self.workers)

        finally:
            self.is_running = False
            stats_task.cancel()
            await asyncio.gather(stats_task, return_exceptions=True)
            await self._cleanup_workers()

        self.stats.words_appended = self.writer.append(self.results.snapshot())
        self._log_final_stats()

        return self.stats

    async def _stats_reporter(self):
        """Periodically log crawl progress."""
        while self.is_running:
            await asyncio.sleep(self.config.crawler.progress_interval)
            self._log_current_stats()

    def _log_current_stats(self):
        """Log current crawl statistics."""
        self.logger.info(
            f"Crawl Progress: "
            f"Processed={self.stats.ids_processed}/{self.config.crawler.max_id}, "
            f"Found={self.stats.words_found}, "
            f"Failures={self.stats.failures}, "
            f"Duplicates={self.stats.duplicates_skipped}, "
            f"Rate={self.stats.ids_per_minute:.1f} ids/min"
        )

    def _log_final_stats(self):
        """Log final crawl statistics."""
        self.logger.info("=== CRAWL COMPLETED ===")
        self.logger.info(f"Total ids processed: {self.stats.ids_processed}")
        self.logger.info(f"Words found: {self.stats.words_found}")
        self.logger.info(f"Failed lookups: {self.stats.failures}")
        self.logger.info(f"Duplicates skipped: {self.stats.duplicates_skipped}")
        self.logger.info(f"Lines written: {self.stats.words_appended}")
        self.logger.info(f"Total time: {self.stats.elapsed_time:.2f} seconds")
        self.logger.info(f"Average rate: {self.stats.ids_per_minute:.1f} ids/min")
        self.logger.info(f"Fetcher stats: {self.fetcher.get_stats()}")
        self.logger.info(f"Collection stats: {self.results.get_stats()}")

    async def _cleanup_workers(self):
        """Cancel and cleanup worker tasks."""
        if self.workers:
            for worker in self.workers:
                if not worker.done():
                    worker.cancel()

            await asyncio.gather(*self.workers, return_exceptions=True)
            self.workers.clear()

    async def close(self):
        """Close the fetcher if the scheduler created it."""
        if self.fetcher and self._owns_fetcher:
            await self.fetcher.close()
            self.fetcher = None
            self._initialized = False

        self.logger.info("Crawler scheduler closed")

    def get_stats(self) -> Dict:
        """Get current crawl statistics."""
        return {
            'ids_processed': self.stats.ids_processed,
            'words_found': self.stats.words_found,
            'failures': self.stats.failures,
            'duplicates_skipped': self.stats.duplicates_skipped,
            'words_appended': self.stats.words_appended,
            'elapsed_time': self.stats.elapsed_time,
            'ids_per_minute': self.stats.ids_per_minute,
            'shards': len(self.shards),
            'is_running': self.is_running
        }

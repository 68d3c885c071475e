"""Tests for the crawl scheduler."""

import pytest

from conftest import FakeFetcher

from stdict_crawler.crawler.scheduler import CrawlerScheduler
from stdict_crawler.crawler.partitioner import Shard
from stdict_crawler.exceptions import ConfigurationError


def read_lines(path):
    return path.read_text(encoding="utf-8").splitlines()


class TestCrawlRange:
    """Tests for a single range worker."""

    @pytest.mark.asyncio
    async def test_ascending_and_deduplicated(self, make_config):
        """Test a worker visits ids in order and drops duplicates."""
        fetcher = FakeFetcher({2: "나무", 3: "나무", 4: "바다"})
        scheduler = CrawlerScheduler(make_config(), fetcher=fetcher)

        await scheduler.crawl_range(Shard(index=1, start=1, end=5))

        assert fetcher.calls == [1, 2, 3, 4, 5]
        assert scheduler.results.snapshot() == ["", "나무", "바다"]
        assert scheduler.stats.ids_processed == 5
        assert scheduler.stats.words_found == 3
        assert scheduler.stats.failures == 2
        assert scheduler.stats.duplicates_skipped == 2


class TestRun:
    """Tests for the full batch."""

    @pytest.mark.asyncio
    async def test_two_shards_with_cross_shard_duplicate(self, make_config, output_file):
        """Test ten ids over two workers with one word found twice."""
        fetcher = FakeFetcher({3: "word3", 7: "word3"})
        scheduler = CrawlerScheduler(make_config(max_id=10, threads=2), fetcher=fetcher)

        stats = await scheduler.run()

        assert [(s.start, s.end) for s in scheduler.shards] == [(1, 5), (6, 10)]
        assert sorted(fetcher.calls) == list(range(1, 11))
        assert sorted(read_lines(output_file)) == ["", "word3"]
        assert stats.words_appended == 2
        assert stats.ids_processed == 10

    @pytest.mark.asyncio
    async def test_order_within_each_shard(self, make_config):
        """Test each worker processes its own ids in ascending order."""
        fetcher = FakeFetcher()
        scheduler = CrawlerScheduler(make_config(max_id=12, threads=3), fetcher=fetcher)

        await scheduler.run()

        for shard in scheduler.shards:
            visited = [i for i in fetcher.calls if shard.start <= i <= shard.end]
            assert visited == list(shard.ids())

    @pytest.mark.asyncio
    async def test_output_preserves_collection_order(self, make_config, output_file):
        """Test the file mirrors the collection's insertion order."""
        fetcher = FakeFetcher({i: f"w{i}" for i in range(1, 9)})
        scheduler = CrawlerScheduler(make_config(max_id=8, threads=1), fetcher=fetcher)

        await scheduler.run()

        assert read_lines(output_file) == [f"w{i}" for i in range(1, 9)]
        assert read_lines(output_file) == scheduler.results.snapshot()

    @pytest.mark.asyncio
    async def test_repeated_runs_append(self, make_config, output_file):
        """Test a second run appends instead of overwriting."""
        words = {1: "나무", 2: "바다", 3: "하늘", 4: "나무"}

        first = CrawlerScheduler(make_config(max_id=4, threads=2), fetcher=FakeFetcher(words))
        await first.run()
        first_lines = read_lines(output_file)

        second = CrawlerScheduler(make_config(max_id=4, threads=2), fetcher=FakeFetcher(words))
        await second.run()
        all_lines = read_lines(output_file)

        assert sorted(first_lines) == ["나무", "바다", "하늘"]
        assert len(all_lines) == 2 * len(first_lines)
        assert set(all_lines[len(first_lines):]) == set(first_lines)

    @pytest.mark.asyncio
    async def test_invalid_config_fails_before_work(self, make_config, output_file):
        """Test configuration errors stop the run before any fetch."""
        fetcher = FakeFetcher()
        scheduler = CrawlerScheduler(make_config(max_id=3, threads=5), fetcher=fetcher)

        with pytest.raises(ConfigurationError):
            await scheduler.run()

        assert fetcher.calls == []
        assert not output_file.exists()

    @pytest.mark.asyncio
    async def test_missing_api_key_rejected(self, make_config):
        """Test an empty API key is rejected."""
        config = make_config()
        config.crawler.api_key = ""
        scheduler = CrawlerScheduler(config, fetcher=FakeFetcher())

        with pytest.raises(ConfigurationError):
            await scheduler.initialize()

    @pytest.mark.asyncio
    async def test_worker_crash_propagates_and_skips_write(self, make_config, output_file):
        """Test an unexpected worker error surfaces and nothing is written."""
        fetcher = FakeFetcher({1: "나무"}, fail_on=7)
        scheduler = CrawlerScheduler(make_config(max_id=10, threads=2), fetcher=fetcher)

        with pytest.raises(RuntimeError, match="boom"):
            await scheduler.run()

        assert not output_file.exists()
        assert scheduler.is_running is False
        assert scheduler.workers == []

    @pytest.mark.asyncio
    async def test_get_stats(self, make_config):
        """Test the statistics view after a run."""
        scheduler = CrawlerScheduler(make_config(max_id=6, threads=3), fetcher=FakeFetcher({1: "a"}))

        await scheduler.run()
        stats = scheduler.get_stats()

        assert stats['ids_processed'] == 6
        assert stats['words_found'] == 1
        assert stats['failures'] == 5
        assert stats['shards'] == 3
        assert stats['is_running'] is False


class TestLifecycle:
    """Tests for scheduler setup and teardown."""

    @pytest.mark.asyncio
    async def test_injected_fetcher_kept_on_close(self, make_config):
        """Test close() leaves an injected fetcher alone."""
        fetcher = FakeFetcher()
        scheduler = CrawlerScheduler(make_config(), fetcher=fetcher)

        await scheduler.initialize()
        await scheduler.close()

        assert scheduler.fetcher is fetcher

    @pytest.mark.asyncio
    async def test_owned_fetcher_created_and_closed(self, make_config):
        """Test the scheduler builds and closes its own fetcher."""
        config = make_config()
        scheduler = CrawlerScheduler(config)

        await scheduler.initialize()
        assert scheduler.fetcher is not None
        assert scheduler.fetcher.api_key == config.crawler.api_key

        await scheduler.close()
        assert scheduler.fetcher is None

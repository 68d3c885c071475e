"""Pytest configuration and fixtures."""

import asyncio
import logging
from typing import Callable, Dict, List, Optional
from urllib.parse import parse_qs, urlparse

import pytest

from stdict_crawler.crawler.fetcher import WordResult
from stdict_crawler.utils.config import Config, CrawlerConfig, LoggingConfig


def word_payload(word: str) -> str:
    """Build a dictionary view payload holding one headword."""
    return (
        '<?xml version="1.0" encoding="UTF-8"?>'
        '<channel><total>1</total>'
        f'<item><target_code>1</target_code><word_info><word>{word}</word>'
        '<pos>명사</pos></word_info></item></channel>'
    )


class FakeResponse:
    """Minimal stand-in for an aiohttp response context manager."""

    def __init__(self, status: int = 200, body: str = "", exc: Optional[BaseException] = None):
        self.status = status
        self.body = body
        self.exc = exc

    async def text(self) -> str:
        if self.exc is not None:
            raise self.exc
        return self.body

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        return False


class FakeSession:
    """Records requested URLs and answers them through a responder callable."""

    def __init__(self, responder: Callable[[int], object]):
        self.responder = responder
        self.requested: List[str] = []
        self.closed = False

    def get(self, url: str):
        self.requested.append(url)
        word_id = int(parse_qs(urlparse(url).query)['q'][0])
        outcome = self.responder(word_id)
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome

    async def close(self):
        self.closed = True


class FakeFetcher:
    """Fetcher double that serves words from a dict; other ids are misses."""

    def __init__(self, words: Optional[Dict[int, str]] = None, fail_on: Optional[int] = None):
        self.words = words or {}
        self.fail_on = fail_on
        self.calls: List[int] = []

    async def fetch_word(self, word_id: int) -> WordResult:
        self.calls.append(word_id)
        # Yield so workers interleave like real network calls
        await asyncio.sleep(0)

        if word_id == self.fail_on:
            raise RuntimeError(f"boom at {word_id}")

        word = self.words.get(word_id)
        if word is None:
            return WordResult(word_id=word_id, status_code=200, error="Missing word field")
        return WordResult(word_id=word_id, word=word, status_code=200)

    def get_stats(self) -> Dict[str, int]:
        return {'total_requests': len(self.calls)}

    async def close(self):
        pass


@pytest.fixture
def make_config(tmp_path):
    """Factory for configs writing into the test's temp directory."""
    def _make(max_id: int = 10, threads: int = 2, **crawler_overrides) -> Config:
        crawler = CrawlerConfig(
            api_key="test-key",
            output_file=str(tmp_path / "result.txt"),
            threads=threads,
            max_id=max_id,
            **crawler_overrides
        )
        return Config(
            crawler=crawler,
            logging=LoggingConfig(file=str(tmp_path / "logs" / "crawler.log"))
        )
    return _make


@pytest.fixture
def output_file(tmp_path):
    """Path of the result file used by make_config."""
    return tmp_path / "result.txt"


@pytest.fixture
def restore_root_logger():
    """Undo handler changes made by setup_logging."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield root
    for handler in list(root.handlers):
        if handler not in handlers:
            root.removeHandler(handler)
            handler.close()
    for handler in handlers:
        if handler not in root.handlers:
            root.addHandler(handler)
    root.setLevel(level)

"""
Dictionary entry fetcher with a best-effort, never-raising contract.
"""

import asyncio
import aiohttp
import logging
import time
from typing import Optional, Dict
from urllib.parse import urlencode
from dataclasses import dataclass
from aiohttp import ClientSession, ClientError

from .parser import WordParser


DEFAULT_BASE_URL = "https://stdict.korean.go.kr/api/view.do"


@dataclass
class WordResult:
    """Result of a single identifier lookup."""
    word_id: int
    word: Optional[str] = None
    status_code: int = 0
    error: Optional[str] = None
    fetch_time: float = 0.0

    @property
    def found(self) -> bool:
        return self.word is not None

    @property
    def text(self) -> str:
        """The extracted word, or an empty string when nothing was found."""
        return self.word if self.word is not None else ""


class WordFetcher:
    """
    Looks up dictionary entries by numeric identifier.

    Every failure (network error, bad status, malformed payload or a missing
    word field) is absorbed into a WordResult without a word; callers never
    see an exception from fetch_word().
    """

    def __init__(self, api_key: str, base_url: str = DEFAULT_BASE_URL,
                 session: Optional[ClientSession] = None):
        self.api_key = api_key
        self.base_url = base_url

        self.logger = logging.getLogger(__name__)
        self.parser = WordParser()

        # Session management; an injected session belongs to the caller
        self.session: Optional[ClientSession] = session
        self._owns_session = session is None

        # Statistics
        self.stats = {
            'total_requests': 0,
            'successful_requests': 0,
            'failed_requests': 0,
            'words_found': 0,
            'words_missing': 0
        }

    async def __aenter__(self):
        """Async context manager entry."""
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()

    async def start(self):
        """Initialize the fetcher session."""
        if self.session is None:
            self.session = aiohttp.ClientSession()
            self._owns_session = True
            self.logger.info("WordFetcher session started")

    async def close(self):
        """Close the fetcher session."""
        if self.session and self._owns_session:
            await self.session.close()
            self.session = None
            self.logger.info("WordFetcher session closed")

    def build_url(self, word_id: int) -> str:
        """Build the lookup URL for one identifier."""
        query = urlencode({
            'key': self.api_key,
            'method': 'target_code',
            'q': word_id
        })
        return f"{self.base_url}?{query}"

    async def fetch_word(self, word_id: int) -> WordResult:
        """
        Fetch a single dictionary entry.

        Args:
            word_id: Identifier of the entry to look up

        Returns:
            WordResult holding the extracted word or the failure reason
        """
        start_time = time.time()
        self.stats['total_requests'] += 1
        self.logger.debug(f"Fetching word #{word_id}")

        try:
            async with self.session.get(self.build_url(word_id)) as response:
                if not 200 <= response.status < 300:
                    self.stats['failed_requests'] += 1
                    self.logger.warning(f"Bad status fetching word #{word_id}: {response.status}")
                    return WordResult(
                        word_id=word_id,
                        status_code=response.status,
                        error=f"HTTP {response.status}",
                        fetch_time=time.time() - start_time
                    )

                payload = await response.text()
                status_code = response.status

        except asyncio.TimeoutError:
            self.stats['failed_requests'] += 1
            error_msg = "Request timeout"
            self.logger.warning(f"Timeout fetching word #{word_id}")

        except ClientError as e:
            self.stats['failed_requests'] += 1
            error_msg = f"Client error: {str(e)}"
            self.logger.warning(f"Client error fetching word #{word_id}: {e}")

        except Exception as e:
            self.stats['failed_requests'] += 1
            error_msg = f"Unexpected error: {str(e)}"
            self.logger.error(f"Unexpected error fetching word #{word_id}: {e}")

        else:
            self.stats['successful_requests'] += 1
            word = self.parser.extract_word(payload)

            if word is None:
                self.stats['words_missing'] += 1
                self.logger.debug(f"No word in response for #{word_id}")
                return WordResult(
                    word_id=word_id,
                    status_code=status_code,
                    error="Missing word field",
                    fetch_time=time.time() - start_time
                )

            self.stats['words_found'] += 1
            self.logger.debug(f"Fetched word #{word_id}: {word}")
            return WordResult(
                word_id=word_id,
                word=word,
                status_code=status_code,
                fetch_time=time.time() - start_time
            )

        return WordResult(
            word_id=word_id,
            error=error_msg,
            fetch_time=time.time() - start_time
        )

    async def fetch(self, word_id: int) -> str:
        """Fetch a word, collapsing any failure to an empty string."""
        result = await self.fetch_word(word_id)
        return result.text

    def get_stats(self) -> Dict[str, int]:
        """Get fetcher statistics."""
        return self.stats.copy()

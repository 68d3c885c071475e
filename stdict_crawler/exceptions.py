"""
Exception types raised by the crawler.

Fetch failures are deliberately absent: a failed lookup is reported as an
empty WordResult, never as an exception.
"""


class CrawlerError(Exception):
    """Base exception for crawler errors."""
    pass


class ConfigurationError(CrawlerError, ValueError):
    """Invalid configuration detected before any work starts."""
    pass


class StorageError(CrawlerError):
    """Custom exception for output file operations."""
    pass

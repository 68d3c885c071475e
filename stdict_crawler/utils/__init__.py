"""
Utility modules for the word crawler.
"""

from .config import Config, ConfigManager, CrawlerConfig, LoggingConfig, load_config, validate_config
from .logger import setup_logging, get_crawler_logger

__all__ = [
    'Config', 'ConfigManager', 'CrawlerConfig', 'LoggingConfig',
    'load_config', 'validate_config',
    'setup_logging', 'get_crawler_logger'
]

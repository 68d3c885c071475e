"""
Configuration management for the word crawler.
"""

import os
import yaml
import logging
from pathlib import Path
from typing import Any, Dict, Optional
from dataclasses import dataclass, field, fields, replace

from ..crawler.fetcher import DEFAULT_BASE_URL
from ..exceptions import ConfigurationError


DEFAULT_LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
LOG_LEVELS = ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL')


@dataclass
class CrawlerConfig:
    """Configuration for crawler behavior."""
    api_key: str = ""
    output_file: str = "./result.txt"
    threads: int = 16
    max_id: int = 70000
    base_url: str = DEFAULT_BASE_URL
    progress_interval: float = 30.0


@dataclass
class LoggingConfig:
    """Configuration for logging."""
    level: str = "INFO"
    file: str = "logs/crawler.log"
    format: str = DEFAULT_LOG_FORMAT


@dataclass
class Config:
    """Main configuration class."""
    crawler: CrawlerConfig = field(default_factory=CrawlerConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def _build_section(section_cls, name: str, data: Optional[Dict[str, Any]]):
    """Create a config section, rejecting keys the section doesn't know."""
    data = data or {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"Section '{name}' must be a mapping")

    known = {f.name for f in fields(section_cls)}
    unknown = set(data) - known
    if unknown:
        raise ConfigurationError(
            f"Unknown keys in section '{name}': {', '.join(sorted(unknown))}"
        )

    for f in fields(section_cls):
        if f.name not in data:
            continue
        value = data[f.name]
        # Integers are acceptable wherever a float is expected
        expected = (int, float) if f.type is float else f.type
        if isinstance(value, bool) or not isinstance(value, expected):
            raise ConfigurationError(
                f"'{name}.{f.name}' must be of type {f.type.__name__}, "
                f"got {type(value).__name__}"
            )
    return section_cls(**data)


class ConfigManager:
    """Manages configuration loading and validation."""

    def __init__(self, config_path: Optional[str] = None):
        self.config_path = Path(config_path) if config_path else None

    def load_config(self, log_level: Optional[str] = None, **overrides) -> Config:
        """
        Load configuration from the YAML file, if any, then apply overrides.

        Args:
            log_level: Logging level override
            **overrides: CrawlerConfig fields set from the command line;
                None values are ignored

        Returns:
            The validated configuration
        """
        config_data: Dict[str, Any] = {}

        if self.config_path is not None:
            if not self.config_path.exists():
                raise ConfigurationError(f"Configuration file not found: {self.config_path}")

            with open(self.config_path, 'r', encoding='utf-8') as file:
                try:
                    config_data = yaml.safe_load(file) or {}
                except yaml.YAMLError as e:
                    raise ConfigurationError(f"Invalid YAML in {self.config_path}: {e}") from e

            if not isinstance(config_data, dict):
                raise ConfigurationError(f"Configuration root must be a mapping: {self.config_path}")

        unknown = set(config_data) - {'crawler', 'logging'}
        if unknown:
            raise ConfigurationError(f"Unknown configuration sections: {', '.join(sorted(unknown))}")

        crawler_config = _build_section(CrawlerConfig, 'crawler', config_data.get('crawler'))
        logging_config = _build_section(LoggingConfig, 'logging', config_data.get('logging'))

        applied = {k: v for k, v in overrides.items() if v is not None}
        if applied:
            crawler_config = replace(crawler_config, **applied)

        if log_level is not None:
            logging_config = replace(logging_config, level=log_level)

        config = Config(crawler=crawler_config, logging=logging_config)

        validate_config(config)
        return config


def validate_config(config: Config):
    """Validate configuration values before any work starts."""
    crawler = config.crawler

    if not crawler.api_key or not crawler.api_key.strip():
        raise ConfigurationError("An API key must be provided")

    if crawler.max_id < 1:
        raise ConfigurationError("max_id must be at least 1")

    if crawler.threads < 1:
        raise ConfigurationError("threads must be at least 1")

    if crawler.threads > crawler.max_id:
        raise ConfigurationError("threads cannot exceed max_id")

    if crawler.progress_interval <= 0:
        raise ConfigurationError("progress_interval must be positive")

    if not crawler.base_url:
        raise ConfigurationError("base_url must not be empty")

    output_file = Path(crawler.output_file)
    output_dir = output_file.parent
    if output_file.is_dir():
        raise ConfigurationError(f"Output path is a directory: {output_file}")

    if not output_dir.is_dir():
        raise ConfigurationError(f"Output directory does not exist: {output_dir}")

    if output_file.exists():
        if not os.access(output_file, os.W_OK):
            raise ConfigurationError(f"Output file is not writable: {output_file}")
    elif not os.access(output_dir, os.W_OK):
        raise ConfigurationError(f"Output directory is not writable: {output_dir}")

    if config.logging.level.upper() not in LOG_LEVELS:
        raise ConfigurationError(f"Unknown log level: {config.logging.level}")

    logging.debug("Configuration validation passed")


def load_config(config_path: Optional[str] = None, log_level: Optional[str] = None,
                **overrides) -> Config:
    """Load configuration from file and command line overrides."""
    return ConfigManager(config_path).load_config(log_level=log_level, **overrides)

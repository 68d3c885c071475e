#!/usr/bin/env python3
"""
Main entry point for the Korean word database crawler.
"""

import asyncio
import argparse
import logging
import sys
from typing import Optional, Sequence

from stdict_crawler import __version__
from stdict_crawler.crawler.scheduler import CrawlerScheduler
from stdict_crawler.exceptions import ConfigurationError
from stdict_crawler.utils.config import Config, LOG_LEVELS, load_config
from stdict_crawler.utils.logger import setup_logging


class CrawlerApp:
    """Main application class for the word crawler."""

    def __init__(self):
        self.scheduler: Optional[CrawlerScheduler] = None
        self.logger = logging.getLogger(__name__)

    async def run(self, config: Config) -> int:
        """Run the batch crawl."""
        try:
            self.logger.info("=== WORD CRAWLER STARTING ===")
            self.logger.info(f"Max id: {config.crawler.max_id}")
            self.logger.info(f"Workers: {config.crawler.threads}")
            self.logger.info(f"Output file: {config.crawler.output_file}")

            self.scheduler = CrawlerScheduler(config)
            await self.scheduler.initialize()
            await self.scheduler.run()

        except ConfigurationError as e:
            self.logger.error(f"Configuration error: {e}")
            return 1

        except Exception as e:
            self.logger.error(f"Fatal error: {e}", exc_info=True)
            return 1

        finally:
            if self.scheduler:
                await self.scheduler.close()
            self.logger.info("=== WORD CRAWLER FINISHED ===")

        return 0


def build_parser() -> argparse.ArgumentParser:
    """Build the command line parser."""
    parser = argparse.ArgumentParser(
        description="Gets the words from the National Institute of Korean Language API.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py MY_API_KEY                         # Crawl ids 1..70000 with 16 workers
  python main.py MY_API_KEY --file words.txt        # Append results to words.txt
  python main.py MY_API_KEY --threads 4 --maxid 100 # Small test run
  python main.py MY_API_KEY --config config.yaml    # Read defaults from YAML
        """
    )

    parser.add_argument(
        'api_key',
        help='Personal API key'
    )

    parser.add_argument(
        '--file',
        default=None,
        help='File path where the results will be stored (default: ./result.txt)'
    )

    parser.add_argument(
        '--threads',
        type=int,
        default=None,
        help='Number of workers (default: 16)'
    )

    parser.add_argument(
        '--maxid',
        type=int,
        default=None,
        help='Max id (default: 70000)'
    )

    parser.add_argument(
        '--config',
        default=None,
        help='Optional YAML configuration file'
    )

    parser.add_argument(
        '--base-url',
        default=None,
        help='Dictionary API endpoint'
    )

    parser.add_argument(
        '--log-level',
        type=str.upper,
        choices=LOG_LEVELS,
        default=None,
        help='Logging level (default: INFO)'
    )

    parser.add_argument(
        '--json-logs',
        action='store_true',
        help='Emit logs as JSON lines'
    )

    parser.add_argument(
        '--version',
        action='version',
        version=f'Korean Word Database Crawler {__version__}'
    )

    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    try:
        config = load_config(
            args.config,
            log_level=args.log_level,
            api_key=args.api_key,
            output_file=args.file,
            threads=args.threads,
            max_id=args.maxid,
            base_url=args.base_url
        )
    except ConfigurationError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    setup_logging(config.logging, enable_json=args.json_logs)

    app = CrawlerApp()
    try:
        return asyncio.run(app.run(config))
    except KeyboardInterrupt:
        print("\nInterrupted by user")
        return 1


if __name__ == '__main__':
    sys.exit(main())

"""
Main entry point for the AutoSoundHQ site build
Fetches articles and products from Notion and writes the static site
"""
import argparse
import logging
import sys
from dataclasses import replace
from typing import List, Optional

from config import LOG_FORMAT, LOG_LEVEL, LOG_LEVELS, ConfigError, SiteConfig, load_config
from content_source import ContentSourceError, NotionContentSource
from website_generator import BuildResult, WebsiteGenerator

logger = logging.getLogger(__name__)


def run_build(config: SiteConfig, source: Optional[NotionContentSource] = None) -> BuildResult:
    """Validate settings, then run one full build"""
    config.require("notion_token", "db_articles")
    source = source or NotionContentSource(config.notion_token, timeout=config.request_timeout)
    return WebsiteGenerator(config, source).generate()


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point"""
    parser = argparse.ArgumentParser(description="Build the static site from Notion")
    parser.add_argument(
        "--output",
        type=str,
        help="Output directory (default: OUTPUT_DIR or ./public)"
    )
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=LOG_LEVELS,
        default=LOG_LEVEL,
        help="Logging level (default: LOG_LEVEL or INFO)"
    )
    args = parser.parse_args(argv)

    logging.basicConfig(level=args.log_level, format=LOG_FORMAT)

    config = load_config()
    if args.output:
        config = replace(config, output_dir=args.output)

    try:
        result = run_build(config)
    except ConfigError as e:
        logger.error(str(e))
        return 1
    except ContentSourceError as e:
        logger.error(f"Build failed: {e}")
        return 1

    logger.info(f"Build complete. {len(result.articles)} articles written to {config.output_dir}")
    return 0


if __name__ == "__main__":
    sys.exit(main())

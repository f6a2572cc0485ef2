"""Logging configuration for the feed resolver"""

import logging
from typing import Optional

from ..config import DEBUG_RSS_MATCHING


def setup_logging(log_file: Optional[str] = None, debug: bool = DEBUG_RSS_MATCHING) -> logging.Logger:
    """Set up logging configuration

    With ``debug`` enabled (``DEBUG_RSS_MATCHING=true``) every scoring and
    probe decision is logged, which makes matching easy to audit from the
    deployment logs.
    """
    handlers = [logging.StreamHandler()]
    if log_file:
        handlers.append(logging.FileHandler(log_file, encoding='utf-8'))

    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=handlers
    )

    # Suppress verbose HTTP client logging
    logging.getLogger("aiohttp").setLevel(logging.WARNING)
    logging.getLogger("urllib3").setLevel(logging.WARNING)

    logger = logging.getLogger("feed_resolver")
    logger.setLevel(logging.DEBUG if debug else logging.INFO)
    return logger


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance"""
    return logging.getLogger(name)

"""Logging setup and helpers"""

import logging
import logging.config
import os
from pathlib import Path
from typing import Optional

import yaml

PACKAGE_LOGGER = "content_valuator"
LOG_LEVEL_ENV = "CONTENT_VALUATOR_LOG_LEVEL"


def setup_logging(config_path: Optional[str] = None, level: Optional[str] = None) -> None:
    """
    Configure logging from logging_config.yaml (dictConfig).

    The package logger level can be forced with `level` or the
    CONTENT_VALUATOR_LOG_LEVEL environment variable, e.g. DEBUG to see
    every valuation breakdown.

    Args:
        config_path: Path to a logging YAML file. Bundled file when None.
        level: Level name for the "content_valuator" logger.
    """
    if config_path is None:
        config_path = str(
            Path(__file__).parent.parent / "config" / "logging_config.yaml"
        )

    log_config = None
    if os.path.exists(config_path):
        with open(config_path, "r", encoding="utf-8") as f:
            log_config = yaml.safe_load(f)

    if log_config:
        for handler in log_config.get("handlers", {}).values():
            if "filename" in handler:
                log_dir = os.path.dirname(handler["filename"])
                if log_dir:
                    os.makedirs(log_dir, exist_ok=True)
        logging.config.dictConfig(log_config)
    else:
        logging.basicConfig(
            level=logging.INFO,
            format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        )

    level = level or os.environ.get(LOG_LEVEL_ENV)
    if level:
        logging.getLogger(PACKAGE_LOGGER).setLevel(level.upper())


def get_logger(name: str) -> logging.Logger:
    """Module logger, e.g. get_logger(__name__) -> "content_valuator.pricing.pricing_engine"."""
    return logging.getLogger(name)
